"""
Centralized exception hierarchy for the datoria launcher.

Every fatal condition raised by the launcher derives from LauncherError.
The CLI entry point is the only place these are caught and turned into a
diagnostic plus a non-zero exit code.
"""

from typing import List, Optional


# ============================================================================
# Base Exceptions
# ============================================================================


class LauncherError(Exception):
    """Base exception for all launcher errors."""

    pass


class ConfigError(LauncherError):
    """Launcher settings file is invalid."""

    pass


# ============================================================================
# Platform Exceptions
# ============================================================================


class PlatformError(LauncherError):
    """Base exception for platform resolution errors."""

    pass


class UnsupportedPlatformError(PlatformError):
    """Raised when no datoria build exists for the host operating system."""

    def __init__(self, system: str, machine: str = ""):
        self.system = system
        self.machine = machine
        msg = f"Unsupported platform: {system}"
        if machine:
            msg += f" ({machine})"
        super().__init__(msg)


# ============================================================================
# Version Resolution Exceptions
# ============================================================================


class VersionResolutionError(LauncherError):
    """Raised when no datoria version could be determined."""

    pass


# ============================================================================
# Fetch Exceptions
# ============================================================================


class FetchError(LauncherError):
    """Base exception for download and install errors."""

    pass


class DownloadError(FetchError):
    """Raised when an archive download fails after all retries."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.status_code = status_code
        super().__init__(message)


class ArchiveExtractionError(FetchError):
    """Failed to extract an archive."""

    pass


class UnsupportedArchiveFormat(ArchiveExtractionError):
    """Archive format is not supported."""

    pass


class InsecureArchiveError(ArchiveExtractionError):
    """Archive contains insecure paths (directory traversal attempt)."""

    pass


class MissingExecutableError(FetchError):
    """Raised when an extracted archive does not contain the executable."""

    pass


# ============================================================================
# Launch Exceptions
# ============================================================================


class LaunchError(LauncherError):
    """Raised when control cannot be handed to the resolved executable."""

    pass


# ============================================================================
# Retry Exceptions
# ============================================================================


class TransientError(LauncherError):
    """A single attempt failed in a way that is worth retrying."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.status_code = status_code
        super().__init__(message)


class RetryExhaustedError(LauncherError):
    """Raised when a retry policy runs out of attempts."""

    def __init__(self, errors: List[TransientError]):
        self.errors = list(errors)
        self.attempts = len(self.errors)
        self.last_error = self.errors[-1]
        super().__init__(f"Giving up after {self.attempts} attempts: {self.last_error}")

    @property
    def status_code(self) -> Optional[int]:
        """Most recent HTTP status observed across all attempts, if any."""
        for error in reversed(self.errors):
            if error.status_code is not None:
                return error.status_code
        return None
