"""Project manifest discovery."""

import logging
from pathlib import Path
from typing import Optional

from datoria_launcher.core.context import MANIFEST_FILENAME

logger = logging.getLogger(__name__)


def find_config(start_dir: Path, filename: str = MANIFEST_FILENAME) -> Optional[Path]:
    """
    Find the nearest project manifest at or above start_dir.

    Checks start_dir itself, then each parent up to the filesystem root.
    The first match wins, so a project's own manifest takes precedence over
    one in an enclosing workspace.

    Args:
        start_dir: Directory to start searching from
        filename: Manifest file name

    Returns:
        Path to the manifest, or None if no ancestor has one

    Example:
        >>> find_config(Path("/work/repo/src"))
        PosixPath('/work/repo/datoria.json')
    """
    start_dir = Path(start_dir).absolute()

    for directory in (start_dir, *start_dir.parents):
        candidate = directory / filename
        if candidate.is_file():
            logger.debug(f"Found project manifest: {candidate}")
            return candidate

    logger.debug(f"No {filename} found at or above {start_dir}")
    return None


__all__ = ["find_config"]
