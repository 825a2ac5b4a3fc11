"""
Core functionality for the datoria launcher.

This package contains the foundational modules that the launcher
components depend on.
"""

from .context import (
    LaunchContext,
    PRODUCT_NAME,
    BINARY_NAME,
    MANIFEST_FILENAME,
    DEBUG_ENV_VAR,
)

from .retry import RetryPolicy

from .platform import (
    PlatformInfo,
    resolve_platform,
)

from .cache import CacheStore

from .interfaces import (
    ProcessReplacer,
    ExecProcessReplacer,
)

from .exceptions import (
    LauncherError,
    ConfigError,
    PlatformError,
    UnsupportedPlatformError,
    VersionResolutionError,
    FetchError,
    DownloadError,
    ArchiveExtractionError,
    UnsupportedArchiveFormat,
    InsecureArchiveError,
    MissingExecutableError,
    LaunchError,
    TransientError,
    RetryExhaustedError,
)

__all__ = [
    "LaunchContext",
    "PRODUCT_NAME",
    "BINARY_NAME",
    "MANIFEST_FILENAME",
    "DEBUG_ENV_VAR",
    "RetryPolicy",
    "PlatformInfo",
    "resolve_platform",
    "CacheStore",
    "ProcessReplacer",
    "ExecProcessReplacer",
    "LauncherError",
    "ConfigError",
    "PlatformError",
    "UnsupportedPlatformError",
    "VersionResolutionError",
    "FetchError",
    "DownloadError",
    "ArchiveExtractionError",
    "UnsupportedArchiveFormat",
    "InsecureArchiveError",
    "MissingExecutableError",
    "LaunchError",
    "TransientError",
    "RetryExhaustedError",
]
