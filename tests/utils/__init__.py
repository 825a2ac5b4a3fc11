"""
Test utilities for datoria launcher testing.
"""

from .helpers import (
    DOWNLOAD_BASE,
    LATEST_URL,
    LINUX_ARCHIVE,
    archive_url,
    make_tar_gz,
    make_link_tar_gz,
    RecordingReplacer,
)

__all__ = [
    "DOWNLOAD_BASE",
    "LATEST_URL",
    "LINUX_ARCHIVE",
    "archive_url",
    "make_tar_gz",
    "make_link_tar_gz",
    "RecordingReplacer",
]
