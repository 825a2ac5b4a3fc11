"""Project manifest parser.

The manifest (datoria.json) is a JSON object whose optional ``version`` key
pins the datoria version for the project. A missing, empty or unreadable
pin is never an error: the launcher falls back to the latest release.
"""

import json
import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)

# First quoted value after a quoted "version" key, whitespace-insensitive
_VERSION_PATTERN = re.compile(r'"version"\s*:\s*"([^"]*)"')


@dataclass(frozen=True)
class ProjectConfig:
    """Parsed project manifest."""

    path: Path
    version: Optional[str] = None  # None means "no pin"


def _normalize_version(value) -> Optional[str]:
    if not isinstance(value, str):
        return None
    value = value.strip()
    return value or None


def _extract_version_from_text(text: str) -> Optional[str]:
    match = _VERSION_PATTERN.search(text)
    if not match:
        return None
    return _normalize_version(match.group(1))


def parse_project_config(config_path: Path) -> ProjectConfig:
    """
    Parse a project manifest.

    Valid JSON is read with the json module. Text that is not valid JSON
    (comments, trailing commas) still yields the first quoted ``version``
    value it contains.

    Args:
        config_path: Path to datoria.json

    Returns:
        ProjectConfig, with version None when there is no usable pin
    """
    try:
        text = config_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        logger.debug(f"Cannot read {config_path}: {e}")
        return ProjectConfig(path=config_path)

    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        logger.debug(f"{config_path} is not valid JSON ({e}), scanning text")
        return ProjectConfig(path=config_path, version=_extract_version_from_text(text))

    if not isinstance(data, dict):
        logger.debug(f"{config_path} does not contain a JSON object")
        return ProjectConfig(path=config_path)

    return ProjectConfig(path=config_path, version=_normalize_version(data.get("version")))


__all__ = ["ProjectConfig", "parse_project_config"]
