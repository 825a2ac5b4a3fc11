"""
Configuration for the datoria launcher.

This package locates and parses the per-project manifest and loads the
launcher's own settings.
"""

from .locator import find_config
from .parser import ProjectConfig, parse_project_config
from .settings import LauncherSettings, load_settings, get_settings_path

__all__ = [
    "find_config",
    "ProjectConfig",
    "parse_project_config",
    "LauncherSettings",
    "load_settings",
    "get_settings_path",
]
