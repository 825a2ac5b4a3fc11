"""
On-disk cache of datoria executables.

Cache Structure:
    <cache_root>/
        bins/
            v<version>/
                datoria     : Extracted executable for that version

Every resolved version is kept side by side; there is no eviction. An entry
is valid when the executable is a regular file with the owner execute bit
set. Installs only ever rename a fully extracted, already executable file
into place, so a valid-looking entry is never a partial one.
"""

import logging
import stat
from pathlib import Path
from typing import List

from datoria_launcher.core.context import BINARY_NAME

logger = logging.getLogger(__name__)

BINS_DIRNAME = "bins"


class CacheStore:
    """
    Maps resolved versions to executable paths under a cache root.

    Example:
        >>> store = CacheStore(Path("/home/user/.cache/datoria"))
        >>> store.locate("1.2.3")
        PosixPath('/home/user/.cache/datoria/bins/v1.2.3/datoria')
    """

    def __init__(self, cache_root: Path):
        self.cache_root = Path(cache_root)
        self.bins_dir = self.cache_root / BINS_DIRNAME

    def version_dir(self, version: str) -> Path:
        """Directory holding the entry for a version. No I/O."""
        return self.bins_dir / f"v{version}"

    def locate(self, version: str) -> Path:
        """Expected executable path for a version. No I/O."""
        return self.version_dir(version) / BINARY_NAME

    def exists(self, path: Path) -> bool:
        """
        Check whether a cache entry is usable.

        Args:
            path: Executable path returned by locate()

        Returns:
            True if path is a regular file with the owner execute bit set
        """
        try:
            mode = path.stat().st_mode
        except OSError:
            return False
        return stat.S_ISREG(mode) and bool(mode & stat.S_IXUSR)

    def cached_versions(self) -> List[str]:
        """
        List versions that currently have a valid entry.

        Returns:
            Sorted list of version strings (without the 'v' prefix)
        """
        if not self.bins_dir.is_dir():
            return []

        versions = []
        for entry in self.bins_dir.iterdir():
            if not entry.is_dir() or not entry.name.startswith("v"):
                continue
            if self.exists(entry / BINARY_NAME):
                versions.append(entry.name[1:])
        return sorted(versions)


__all__ = ["CacheStore", "BINS_DIRNAME"]
