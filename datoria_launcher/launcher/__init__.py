"""
Version resolution, installation and launch of datoria.
"""

from .version import resolve_version, fetch_latest_version
from .fetcher import Fetcher
from .launcher import Launcher, LaunchPlan, LaunchState

__all__ = [
    "resolve_version",
    "fetch_latest_version",
    "Fetcher",
    "Launcher",
    "LaunchPlan",
    "LaunchState",
]
