"""
Core interfaces for the datoria launcher.

Handing control to the resolved executable is the only step that leaves
this process, so it sits behind an interface: the launcher logic can be
exercised end to end with a replacer that merely records the call.
"""

import logging
import os
import sys
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Sequence

from datoria_launcher.core.exceptions import LaunchError

logger = logging.getLogger(__name__)


class ProcessReplacer(ABC):
    """Abstract interface for transferring control to an executable."""

    @abstractmethod
    def replace(self, executable: Path, args: Sequence[str]) -> None:
        """
        Run executable with args in place of the current process.

        Args:
            executable: Verified executable path
            args: Positional arguments, forwarded unchanged

        Raises:
            LaunchError: If control could not be transferred
        """
        pass


class ExecProcessReplacer(ProcessReplacer):
    """Replaces the current process image with os.execv; never returns."""

    def replace(self, executable: Path, args: Sequence[str]) -> None:
        argv = [str(executable), *args]
        logger.debug(f"exec {argv}")

        # execv discards buffered output of this process
        for stream in (sys.stdout, sys.stderr):
            try:
                stream.flush()
            except (AttributeError, ValueError):
                pass

        try:
            os.execv(argv[0], argv)
        except OSError as e:
            raise LaunchError(f"Failed to execute {executable}: {e}") from e


__all__ = ["ProcessReplacer", "ExecProcessReplacer"]
