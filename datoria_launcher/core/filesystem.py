"""
File system utilities for installing datoria executables.

Provides:
- Safe tar.gz extraction (directory traversal is rejected)
- Executable bit handling
- Atomic replacement of a file into its final location
- Staging directories and best-effort cleanup of transient files
"""

import logging
import os
import shutil
import stat
import tarfile
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Union

from datoria_launcher.core.exceptions import (
    ArchiveExtractionError,
    InsecureArchiveError,
    UnsupportedArchiveFormat,
)

logger = logging.getLogger(__name__)

SUPPORTED_ARCHIVE_SUFFIXES = (".tar.gz",)


# ============================================================================
# Path Utilities
# ============================================================================


def is_relative_to(path: Path, parent: Path) -> bool:
    """
    Check if path is relative to parent.

    Example:
        >>> is_relative_to(Path('/a/b/c'), Path('/a'))
        True
        >>> is_relative_to(Path('/a/b'), Path('/c'))
        False
    """
    try:
        path.relative_to(parent)
        return True
    except ValueError:
        return False


# ============================================================================
# Archive Extraction
# ============================================================================


def check_archive_format(archive_name: str) -> None:
    """
    Ensure an archive name uses a supported format.

    Raises:
        UnsupportedArchiveFormat: If the name is not a .tar.gz archive
    """
    if not archive_name.lower().endswith(SUPPORTED_ARCHIVE_SUFFIXES):
        raise UnsupportedArchiveFormat(
            f"Unsupported archive format: {archive_name}. "
            f"Supported: {', '.join(SUPPORTED_ARCHIVE_SUFFIXES)}"
        )


def _validate_archive_path(path: str, destination: Path) -> None:
    member_path = (destination / path).resolve()

    if not is_relative_to(member_path, destination.resolve()):
        raise InsecureArchiveError(
            f"Archive member '{path}' attempts directory traversal. "
            "Extraction has been blocked."
        )


def _validate_archive_link(member: tarfile.TarInfo, destination: Path) -> None:
    if not (member.issym() or member.islnk()):
        return

    # Symlink targets are relative to the member's directory, hard links to the root
    if member.issym():
        target = (destination / member.name).parent / member.linkname
    else:
        target = destination / member.linkname

    if os.path.isabs(member.linkname) or not is_relative_to(
        target.resolve(), destination.resolve()
    ):
        raise InsecureArchiveError(
            f"Archive member '{member.name}' links outside the extraction "
            f"directory ('{member.linkname}'). Extraction has been blocked."
        )


def extract_tar_gz(archive_path: Path, destination: Path, archive_name: str) -> None:
    """
    Extract a .tar.gz archive into destination.

    Args:
        archive_path: Archive on disk (its own name may be a temp name)
        destination: Directory to extract into (created if missing)
        archive_name: Published archive name, used for format detection

    Raises:
        UnsupportedArchiveFormat: If archive_name is not a .tar.gz name
        InsecureArchiveError: If a member or link target would land
            outside destination
        ArchiveExtractionError: If the archive is missing or corrupt
    """
    check_archive_format(archive_name)

    if not archive_path.exists():
        raise ArchiveExtractionError(f"Archive not found: {archive_path}")

    destination.mkdir(parents=True, exist_ok=True)

    try:
        with tarfile.open(archive_path, "r:gz") as tar:
            members = tar.getmembers()

            for member in members:
                _validate_archive_path(member.name, destination)
                _validate_archive_link(member, destination)

            # The data filter (3.12+, backported to 3.9.17) is a second check
            if hasattr(tarfile, "data_filter"):
                tar.extractall(destination, filter="data")
            else:
                tar.extractall(destination)
    except InsecureArchiveError:
        raise
    except (tarfile.TarError, OSError, EOFError) as e:
        raise ArchiveExtractionError(f"Failed to extract {archive_name}: {e}") from e

    logger.debug(f"Extracted {len(members)} entries from {archive_name}")


# ============================================================================
# Safe File Operations
# ============================================================================


def make_executable(path: Path) -> None:
    """Add execute permission wherever read permission is granted."""
    mode = path.stat().st_mode
    path.chmod(mode | stat.S_IXUSR | ((mode & 0o044) >> 2))


def atomic_replace(source: Path, destination: Path) -> None:
    """
    Move source onto destination in one rename.

    Both paths must be on the same filesystem; readers see either the old
    destination or the complete new file, never a partial one.
    """
    os.replace(source, destination)


def remove_file(path: Union[str, Path]) -> None:
    """Delete a file if it exists, logging instead of failing on errors."""
    path = Path(path)
    try:
        path.unlink(missing_ok=True)
    except OSError as e:
        logger.warning(f"Failed to remove {path}: {e}")


@contextmanager
def staging_directory(parent: Path, prefix: str = ".staging-") -> Iterator[Path]:
    """
    Private temporary directory inside parent, removed on exit.

    Staging next to the final location keeps the later rename on one
    filesystem.

    Example:
        >>> with staging_directory(version_dir) as staging:
        ...     extract_tar_gz(archive, staging, name)
    """
    staging = Path(tempfile.mkdtemp(prefix=prefix, dir=parent))
    try:
        yield staging
    finally:
        shutil.rmtree(staging, ignore_errors=True)


__all__ = [
    "SUPPORTED_ARCHIVE_SUFFIXES",
    "check_archive_format",
    "extract_tar_gz",
    "make_executable",
    "atomic_replace",
    "remove_file",
    "staging_directory",
    "is_relative_to",
]
