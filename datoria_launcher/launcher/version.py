"""
Version resolution.

A version pinned in the project manifest always wins and needs no network.
Without a usable pin the latest release is looked up on the release server.
"""

import logging
from pathlib import Path
from typing import Optional

from datoria_launcher.config.parser import parse_project_config
from datoria_launcher.config.settings import LauncherSettings
from datoria_launcher.core.context import LaunchContext
from datoria_launcher.core.download import Timeouts, fetch_text
from datoria_launcher.core.exceptions import RetryExhaustedError, VersionResolutionError
from datoria_launcher.core.retry import RetryPolicy

logger = logging.getLogger(__name__)

LATEST_RELEASE_PATH = "latest-release"

LATEST_RELEASE_TIMEOUTS = Timeouts(connect=5.0, total=10.0)
LATEST_RELEASE_RETRY = RetryPolicy(max_attempts=3, delay=1.0)

# Versions become a cache directory name and a URL path segment
_FORBIDDEN_VERSION_CHARS = ("/", "\\")


def validate_version(version: str, source: str) -> str:
    """
    Reject versions that cannot name a single cache directory.

    Raises:
        VersionResolutionError: If version contains a path separator or is
            "." or ".."
    """
    if version in (".", "..") or any(c in version for c in _FORBIDDEN_VERSION_CHARS):
        raise VersionResolutionError(
            f"Invalid datoria version {version!r} from {source}"
        )
    return version


def pinned_version(config_path: Optional[Path]) -> Optional[str]:
    """Version pinned by the manifest at config_path, or None."""
    if config_path is None:
        return None
    return parse_project_config(config_path).version


def fetch_latest_version(
    context: LaunchContext,
    settings: LauncherSettings,
    policy: RetryPolicy = LATEST_RELEASE_RETRY,
    timeouts: Timeouts = LATEST_RELEASE_TIMEOUTS,
) -> str:
    """
    Ask the release server for the latest datoria version.

    Args:
        context: Launch context providing the HTTP session and sleep
        settings: Launcher settings providing the download base URL
        policy: Retry policy for the lookup
        timeouts: Connect and total time limits per attempt

    Returns:
        Latest version string (never empty)

    Raises:
        VersionResolutionError: If every attempt failed
    """
    url = settings.product_url(LATEST_RELEASE_PATH)

    try:
        version = policy.run(
            lambda: fetch_text(context, url, timeouts),
            sleep=context.sleep,
            description="Latest version lookup",
        )
    except RetryExhaustedError as e:
        raise VersionResolutionError(
            f"Failed to determine the latest datoria version from {url} "
            f"after {e.attempts} attempts ({e.last_error}). "
            "Please check your internet connection."
        ) from e

    logger.debug(f"Latest datoria version: {version}")
    return version


def resolve_version(
    context: LaunchContext,
    settings: LauncherSettings,
    config_path: Optional[Path] = None,
) -> str:
    """
    Resolve the datoria version to launch.

    Args:
        context: Launch context
        settings: Launcher settings
        config_path: Manifest found by find_config(), if any

    Returns:
        Non-empty version string

    Raises:
        VersionResolutionError: If a remote lookup was needed and failed,
            or the version cannot be used as a cache directory name
    """
    version = pinned_version(config_path)
    if version:
        logger.debug(f"Using version {version} pinned in {config_path}")
        return validate_version(version, str(config_path))

    if config_path is not None:
        logger.debug(f"{config_path} does not pin a version")

    version = fetch_latest_version(context, settings)
    if not version:
        raise VersionResolutionError("Resolved datoria version is empty")
    return validate_version(version, settings.product_url(LATEST_RELEASE_PATH))


__all__ = [
    "resolve_version",
    "fetch_latest_version",
    "pinned_version",
    "validate_version",
]
