"""
Platform detection for the datoria launcher.

Maps the host operating system and CPU to the artifact identifier used in
release archive names, and to the platform's conventional cache directory.

Mapping:
    Darwin + arm64/aarch64  -> arm64-apple-darwin,  ~/Library/Caches/datoria
    Darwin + anything else  -> x86_64-apple-darwin, ~/Library/Caches/datoria
    Linux  + any CPU        -> x86_64-pc-linux,     $XDG_CACHE_HOME/datoria
                                                    or ~/.cache/datoria

Linux deliberately ships a single x86_64 artifact regardless of CPU.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, TYPE_CHECKING

from datoria_launcher.core.context import BINARY_NAME, PRODUCT_NAME, LaunchContext
from datoria_launcher.core.exceptions import UnsupportedPlatformError

if TYPE_CHECKING:
    from datoria_launcher.config.settings import LauncherSettings

logger = logging.getLogger(__name__)

ARCHIVE_EXTENSION = ".tar.gz"


@dataclass(frozen=True)
class PlatformInfo:
    """
    Resolved host platform.

    Attributes:
        os: Normalized operating system ('macos', 'linux')
        arch: Normalized CPU architecture ('arm64', 'x64')
        artifact_suffix: Target triple used in archive names
        cache_root: Root directory of the launcher cache
    """

    os: str
    arch: str
    artifact_suffix: str
    cache_root: Path

    def archive_name(self) -> str:
        """
        Get the release archive file name for this platform.

        Example:
            >>> info = PlatformInfo('linux', 'x64', 'x86_64-pc-linux', Path('/c'))
            >>> info.archive_name()
            'datoria-x86_64-pc-linux.tar.gz'
        """
        return f"{BINARY_NAME}-{self.artifact_suffix}{ARCHIVE_EXTENSION}"

    def platform_string(self) -> str:
        """Canonical 'os-arch' string, used in log messages."""
        return f"{self.os}-{self.arch}"


def _normalize_architecture(machine: str) -> str:
    machine = machine.lower()

    if machine in ("x86_64", "amd64", "x64"):
        return "x64"
    elif machine in ("aarch64", "arm64"):
        return "arm64"
    elif machine in ("i386", "i686", "x86"):
        return "x86"
    elif machine.startswith("arm"):
        return "arm"
    return machine


def _macos_cache_root(context: LaunchContext) -> Path:
    return context.home / "Library" / "Caches" / PRODUCT_NAME


def _linux_cache_root(context: LaunchContext) -> Path:
    xdg_cache = context.getenv("XDG_CACHE_HOME")
    if xdg_cache:
        return Path(xdg_cache) / PRODUCT_NAME
    return context.home / ".cache" / PRODUCT_NAME


def resolve_platform(
    context: LaunchContext, settings: Optional["LauncherSettings"] = None
) -> PlatformInfo:
    """
    Resolve artifact naming and cache location for the host.

    Args:
        context: Launch context providing system, machine and environment
        settings: Optional launcher settings; a configured cache_dir
            replaces the platform's default cache root

    Returns:
        PlatformInfo for the host

    Raises:
        UnsupportedPlatformError: If the host OS has no datoria build
    """
    system = context.system.lower()
    arch = _normalize_architecture(context.machine)

    if system == "darwin":
        os_name = "macos"
        suffix = "arm64-apple-darwin" if arch == "arm64" else "x86_64-apple-darwin"
        cache_root = _macos_cache_root(context)
    elif system == "linux":
        os_name = "linux"
        suffix = "x86_64-pc-linux"
        cache_root = _linux_cache_root(context)
    else:
        raise UnsupportedPlatformError(context.system, context.machine)

    if settings is not None and settings.cache_dir is not None:
        cache_root = settings.cache_dir

    info = PlatformInfo(
        os=os_name, arch=arch, artifact_suffix=suffix, cache_root=cache_root
    )
    logger.debug(
        f"Resolved platform {info.platform_string()}: "
        f"artifact={info.archive_name()}, cache={info.cache_root}"
    )
    return info


__all__ = ["PlatformInfo", "resolve_platform", "ARCHIVE_EXTENSION"]
