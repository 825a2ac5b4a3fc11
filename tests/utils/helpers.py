"""
Test helper utilities for datoria launcher testing.

Builders for release archives, URLs the launcher requests, and a process
replacer that records instead of exec-ing.
"""

import io
import tarfile
from pathlib import Path
from typing import Dict, List, Optional, Sequence

from datoria_launcher.core.interfaces import ProcessReplacer

DOWNLOAD_BASE = "https://download.example.test"
LATEST_URL = f"{DOWNLOAD_BASE}/datoria/latest-release"
LINUX_ARCHIVE = "datoria-x86_64-pc-linux.tar.gz"


def archive_url(version: str, archive_name: str = LINUX_ARCHIVE) -> str:
    """
    Archive URL the launcher requests for a version.

    Example:
        >>> archive_url("1.2.3")
        'https://download.example.test/datoria/v1.2.3/datoria-x86_64-pc-linux.tar.gz'
    """
    return f"{DOWNLOAD_BASE}/datoria/v{version}/{archive_name}"


def make_tar_gz(members: Dict[str, bytes], mode: int = 0o644) -> bytes:
    """
    Build an in-memory .tar.gz archive.

    Args:
        members: Mapping of member name to file content
        mode: Permission bits for every member

    Returns:
        Archive bytes
    """
    buffer = io.BytesIO()
    with tarfile.open(fileobj=buffer, mode="w:gz") as tar:
        for name, content in members.items():
            info = tarfile.TarInfo(name)
            info.size = len(content)
            info.mode = mode
            tar.addfile(info, io.BytesIO(content))
    return buffer.getvalue()


def make_link_tar_gz(
    links: Dict[str, str],
    files: Optional[Dict[str, bytes]] = None,
    link_type: bytes = tarfile.SYMTYPE,
) -> bytes:
    """
    Build an in-memory .tar.gz archive containing link members.

    Args:
        links: Mapping of member name to link target
        files: Regular file members added before the links
        link_type: tarfile.SYMTYPE or tarfile.LNKTYPE

    Returns:
        Archive bytes
    """
    buffer = io.BytesIO()
    with tarfile.open(fileobj=buffer, mode="w:gz") as tar:
        for name, content in (files or {}).items():
            info = tarfile.TarInfo(name)
            info.size = len(content)
            info.mode = 0o755
            tar.addfile(info, io.BytesIO(content))
        for name, target in links.items():
            info = tarfile.TarInfo(name)
            info.type = link_type
            info.linkname = target
            tar.addfile(info)
    return buffer.getvalue()


class RecordingReplacer(ProcessReplacer):
    """Process replacer that records the call instead of exec-ing."""

    def __init__(self):
        self.calls: List[tuple] = []

    def replace(self, executable: Path, args: Sequence[str]) -> None:
        self.calls.append((executable, list(args)))
