"""
Launcher orchestration.

Runs the launch state machine:

    RESOLVING_VERSION -> RESOLVING_PLATFORM -> CHECKING_CACHE
        -> CACHE_HIT | INSTALLING -> EXECUTING

Every state before EXECUTING either advances or raises a LauncherError;
EXECUTING hands control to the resolved executable and does not return
when the real process replacer is used.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional, Sequence

from datoria_launcher.config.locator import find_config
from datoria_launcher.config.settings import LauncherSettings
from datoria_launcher.core.cache import CacheStore
from datoria_launcher.core.context import LaunchContext
from datoria_launcher.core.exceptions import MissingExecutableError
from datoria_launcher.core.interfaces import ExecProcessReplacer, ProcessReplacer
from datoria_launcher.core.platform import PlatformInfo, resolve_platform
from datoria_launcher.launcher.fetcher import Fetcher
from datoria_launcher.launcher.version import resolve_version

logger = logging.getLogger(__name__)


class LaunchState(Enum):
    """States of a single launch."""

    RESOLVING_VERSION = "resolving-version"
    RESOLVING_PLATFORM = "resolving-platform"
    CHECKING_CACHE = "checking-cache"
    CACHE_HIT = "cache-hit"
    INSTALLING = "installing"
    EXECUTING = "executing"


@dataclass(frozen=True)
class LaunchPlan:
    """Everything decided before control is handed over."""

    version: str
    platform: PlatformInfo
    executable: Path
    was_cached: bool


class Launcher:
    """
    Resolves, installs and executes datoria.

    Example:
        >>> context = LaunchContext.from_environment()
        >>> launcher = Launcher(context, load_settings(context))
        >>> launcher.run(sys.argv[1:])  # does not return
    """

    def __init__(
        self,
        context: LaunchContext,
        settings: LauncherSettings,
        replacer: Optional[ProcessReplacer] = None,
        fetcher: Optional[Fetcher] = None,
    ):
        self.context = context
        self.settings = settings
        self.replacer = replacer or ExecProcessReplacer()
        self.fetcher = fetcher or Fetcher(context, settings)
        self.state: Optional[LaunchState] = None

    def _enter(self, state: LaunchState) -> None:
        logger.debug(f"Launcher state: {state.value}")
        self.state = state

    def prepare(self) -> LaunchPlan:
        """
        Resolve the version and make sure it is installed.

        Returns:
            LaunchPlan with a verified executable path

        Raises:
            LauncherError: On any fatal condition
        """
        self._enter(LaunchState.RESOLVING_VERSION)
        config_path = find_config(self.context.cwd)
        version = resolve_version(self.context, self.settings, config_path)

        self._enter(LaunchState.RESOLVING_PLATFORM)
        platform = resolve_platform(self.context, self.settings)

        self._enter(LaunchState.CHECKING_CACHE)
        store = CacheStore(platform.cache_root)
        executable = store.locate(version)

        if store.exists(executable):
            self._enter(LaunchState.CACHE_HIT)
            logger.debug(f"Cache hit: {executable}")
            return LaunchPlan(version, platform, executable, was_cached=True)

        self._enter(LaunchState.INSTALLING)
        logger.debug(
            f"Cache miss for {version}; cached versions: "
            f"{', '.join(store.cached_versions()) or 'none'}"
        )
        installed = self.fetcher.install(version, platform)

        if not store.exists(installed):
            raise MissingExecutableError(
                f"datoria {version} is not executable after install: {installed}"
            )

        return LaunchPlan(version, platform, installed, was_cached=False)

    def run(self, args: Sequence[str]) -> None:
        """
        Prepare, then replace this process with datoria.

        Args:
            args: Positional arguments forwarded unchanged

        Raises:
            LauncherError: On any fatal condition before or during exec
        """
        plan = self.prepare()

        self._enter(LaunchState.EXECUTING)
        self.replacer.replace(plan.executable, list(args))


__all__ = ["Launcher", "LaunchPlan", "LaunchState"]
