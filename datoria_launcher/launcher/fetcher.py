"""
Datoria download and install.

Installs one version of the datoria executable into the cache:
1. Check the archive format
2. Create the versioned cache directory
3. Download the release archive (with retries)
4. Extract into a private staging directory
5. Verify and mark the executable
6. Rename it into its final cache path
7. Remove the archive and the staging directory
"""

import logging
from pathlib import Path

from datoria_launcher.config.settings import LauncherSettings
from datoria_launcher.core.cache import CacheStore
from datoria_launcher.core.context import BINARY_NAME, LaunchContext
from datoria_launcher.core.download import Timeouts, download_file
from datoria_launcher.core.exceptions import (
    DownloadError,
    FetchError,
    MissingExecutableError,
    RetryExhaustedError,
)
from datoria_launcher.core.filesystem import (
    atomic_replace,
    check_archive_format,
    extract_tar_gz,
    make_executable,
    remove_file,
    staging_directory,
)
from datoria_launcher.core.platform import PlatformInfo
from datoria_launcher.core.retry import RetryPolicy

logger = logging.getLogger(__name__)

DOWNLOAD_TIMEOUTS = Timeouts(connect=60.0, total=120.0)
DOWNLOAD_RETRY = RetryPolicy(max_attempts=3, delay=2.0)

# Location of the executable inside the release archive
ARCHIVE_BINARY_PATH = BINARY_NAME


class Fetcher:
    """
    Downloads and installs datoria releases into the cache.

    Example:
        >>> fetcher = Fetcher(context, settings)
        >>> path = fetcher.install("1.2.3", platform_info)
        >>> print(f"Installed at: {path}")
    """

    def __init__(
        self,
        context: LaunchContext,
        settings: LauncherSettings,
        policy: RetryPolicy = DOWNLOAD_RETRY,
        timeouts: Timeouts = DOWNLOAD_TIMEOUTS,
    ):
        self.context = context
        self.settings = settings
        self.policy = policy
        self.timeouts = timeouts

    def archive_url(self, version: str, platform: PlatformInfo) -> str:
        """Release archive URL for a version and platform."""
        return self.settings.product_url(f"v{version}", platform.archive_name())

    def install(self, version: str, platform: PlatformInfo) -> Path:
        """
        Download and install a datoria version.

        Args:
            version: Resolved version string
            platform: Resolved host platform

        Returns:
            Path to the installed, executable binary

        Raises:
            UnsupportedArchiveFormat: If the archive is not a .tar.gz
            DownloadError: If the download failed after all retries
            ArchiveExtractionError: If the archive could not be extracted
            MissingExecutableError: If the archive lacks the executable
            FetchError: If the cache directory cannot be written
        """
        archive_name = platform.archive_name()
        check_archive_format(archive_name)

        store = CacheStore(platform.cache_root)
        version_dir = store.version_dir(version)
        try:
            version_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise FetchError(f"Cannot create cache directory {version_dir}: {e}") from e

        target = store.locate(version)
        archive_path = version_dir / f".{archive_name}.part"
        url = self.archive_url(version, platform)

        logger.info(f"Installing datoria {version} ({platform.artifact_suffix})")

        try:
            start = self.context.clock()
            self._download(url, archive_path)
            logger.debug(
                f"Downloaded {archive_name} in {self.context.clock() - start:.1f}s"
            )

            with staging_directory(version_dir) as staging:
                extract_tar_gz(archive_path, staging, archive_name)

                extracted = staging / ARCHIVE_BINARY_PATH
                if extracted.is_symlink() or not extracted.is_file():
                    raise MissingExecutableError(
                        f"Archive {archive_name} for datoria {version} does not "
                        f"contain '{ARCHIVE_BINARY_PATH}' as a regular file"
                    )

                make_executable(extracted)
                atomic_replace(extracted, target)
        except OSError as e:
            raise FetchError(
                f"Failed to install datoria {version} at {target}: {e}"
            ) from e
        finally:
            remove_file(archive_path)

        logger.debug(f"Installed datoria {version} at {target}")
        return target

    def _download(self, url: str, archive_path: Path) -> None:
        try:
            self.policy.run(
                lambda: download_file(self.context, url, archive_path, self.timeouts),
                sleep=self.context.sleep,
                description="Download",
            )
        except RetryExhaustedError as e:
            status = e.status_code
            status_text = f"HTTP status {status}" if status is not None else "no HTTP response"
            raise DownloadError(
                f"Failed to download {url} after {e.attempts} attempts "
                f"({status_text}). Please check your internet connection.",
                status_code=status,
            ) from e


__all__ = ["Fetcher", "ARCHIVE_BINARY_PATH"]
