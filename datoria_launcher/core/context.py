"""
Launch context: the ambient state a single launcher invocation depends on.

Working directory, environment, host identification, HTTP session and
clock are captured once and passed explicitly to every component, so tests
can substitute any of them.
"""

import os
import platform
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Mapping, Optional

import requests

PRODUCT_NAME = "datoria"
BINARY_NAME = "datoria"
MANIFEST_FILENAME = "datoria.json"

DEBUG_ENV_VAR = "DATORIA_DEBUG"


@dataclass(frozen=True)
class LaunchContext:
    """
    Snapshot of the process environment for one invocation.

    Attributes:
        cwd: Directory the launcher was started from
        environ: Environment variables (copied, never mutated)
        system: Host OS name as reported by platform.system()
        machine: Host CPU name as reported by platform.machine()
        session: HTTP session used for every request
        sleep: Function used to wait between retries
        clock: Monotonic clock used for total-time deadlines
    """

    cwd: Path
    environ: Mapping[str, str]
    system: str
    machine: str
    session: requests.Session = field(default_factory=requests.Session)
    sleep: Callable[[float], None] = time.sleep
    clock: Callable[[], float] = time.monotonic

    @classmethod
    def from_environment(cls) -> "LaunchContext":
        """Capture the real process environment."""
        return cls(
            cwd=Path.cwd(),
            environ=dict(os.environ),
            system=platform.system(),
            machine=platform.machine(),
        )

    @property
    def home(self) -> Path:
        """Home directory from HOME, falling back to the password database."""
        home = self.environ.get("HOME")
        if home:
            return Path(home)
        return Path.home()

    @property
    def debug(self) -> bool:
        """True when the debug variable is present, whatever its value."""
        return DEBUG_ENV_VAR in self.environ

    def getenv(self, name: str) -> Optional[str]:
        """Return a non-empty environment value, or None."""
        value = self.environ.get(name)
        return value if value else None


__all__ = [
    "LaunchContext",
    "PRODUCT_NAME",
    "BINARY_NAME",
    "MANIFEST_FILENAME",
    "DEBUG_ENV_VAR",
]
