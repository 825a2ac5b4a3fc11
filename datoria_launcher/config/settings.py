"""
Launcher settings.

Settings come from an optional YAML file and are overridden by environment
variables:

    download_base   DATORIA_DOWNLOAD_BASE   Release server base URL
    cache_dir       DATORIA_CACHE_DIR       Replaces the platform cache root

The file is looked up at $DATORIA_LAUNCHER_CONFIG, else
$XDG_CONFIG_HOME/datoria/launcher.yaml, else ~/.config/datoria/launcher.yaml.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from datoria_launcher.core.context import PRODUCT_NAME, LaunchContext
from datoria_launcher.core.exceptions import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_DOWNLOAD_BASE = "https://download.datoria.no"

SETTINGS_ENV_VAR = "DATORIA_LAUNCHER_CONFIG"
DOWNLOAD_BASE_ENV_VAR = "DATORIA_DOWNLOAD_BASE"
CACHE_DIR_ENV_VAR = "DATORIA_CACHE_DIR"

SETTINGS_FILENAME = "launcher.yaml"

_KNOWN_KEYS = {"download_base", "cache_dir"}


@dataclass(frozen=True)
class LauncherSettings:
    """Resolved launcher settings."""

    download_base: str = DEFAULT_DOWNLOAD_BASE
    cache_dir: Optional[Path] = None

    def product_url(self, *parts: str) -> str:
        """
        Build a URL under the product's release path.

        Example:
            >>> LauncherSettings().product_url("latest-release")
            'https://download.datoria.no/datoria/latest-release'
        """
        return "/".join([self.download_base.rstrip("/"), PRODUCT_NAME, *parts])


def get_settings_path(context: LaunchContext) -> Path:
    """Location of the settings file for this context (may not exist)."""
    explicit = context.getenv(SETTINGS_ENV_VAR)
    if explicit:
        return Path(explicit).expanduser()

    config_home = context.getenv("XDG_CONFIG_HOME")
    base = Path(config_home) if config_home else context.home / ".config"
    return base / PRODUCT_NAME / SETTINGS_FILENAME


def _read_settings_file(settings_path: Path, required: bool) -> Dict[str, Any]:
    if not settings_path.is_file():
        if required:
            raise ConfigError(f"Launcher settings file not found: {settings_path}")
        logger.debug(f"Settings file not found (optional): {settings_path}")
        return {}

    logger.debug(f"Loading settings from {settings_path}")

    try:
        with open(settings_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {settings_path}: {e}")
    except OSError as e:
        raise ConfigError(f"Cannot read {settings_path}: {e}")

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"{settings_path} must contain a mapping")

    unknown = set(data) - _KNOWN_KEYS
    if unknown:
        logger.debug(f"Ignoring unknown settings: {', '.join(sorted(map(str, unknown)))}")

    return data


def _as_string(data: Dict[str, Any], key: str, settings_path: Path) -> Optional[str]:
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, str) or not value.strip():
        raise ConfigError(f"'{key}' in {settings_path} must be a non-empty string")
    return value.strip()


def load_settings(context: LaunchContext) -> LauncherSettings:
    """
    Load launcher settings for a context.

    Args:
        context: Launch context providing environment and home directory

    Returns:
        LauncherSettings with file values and environment overrides applied

    Raises:
        ConfigError: If the settings file is malformed, or was named
            explicitly through DATORIA_LAUNCHER_CONFIG and does not exist
    """
    settings_path = get_settings_path(context)
    data = _read_settings_file(
        settings_path, required=context.getenv(SETTINGS_ENV_VAR) is not None
    )

    download_base = _as_string(data, "download_base", settings_path)
    cache_dir = _as_string(data, "cache_dir", settings_path)

    download_base = context.getenv(DOWNLOAD_BASE_ENV_VAR) or download_base
    cache_dir = context.getenv(CACHE_DIR_ENV_VAR) or cache_dir

    settings = LauncherSettings(
        download_base=download_base or DEFAULT_DOWNLOAD_BASE,
        cache_dir=Path(cache_dir).expanduser() if cache_dir else None,
    )
    logger.debug(f"Settings: {settings}")
    return settings


__all__ = [
    "LauncherSettings",
    "load_settings",
    "get_settings_path",
    "DEFAULT_DOWNLOAD_BASE",
]
