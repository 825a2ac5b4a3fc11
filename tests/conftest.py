"""
Pytest configuration and shared fixtures for datoria launcher tests.
"""

from pathlib import Path
from typing import Dict, List, Optional

import pytest
import requests

from datoria_launcher.config.settings import LauncherSettings
from datoria_launcher.core.context import LaunchContext
from tests.utils.helpers import DOWNLOAD_BASE, RecordingReplacer, make_tar_gz


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "unit: fast isolated tests")
    config.addinivalue_line(
        "markers", "integration: tests that exercise several components together"
    )


# ============================================================================
# Shared Test Fixtures
# ============================================================================


@pytest.fixture
def fake_home(tmp_path) -> Path:
    """Isolated home directory."""
    home = tmp_path / "home"
    home.mkdir()
    return home


@pytest.fixture
def workdir(tmp_path) -> Path:
    """Working directory the launcher is started from."""
    path = tmp_path / "workspace" / "project"
    path.mkdir(parents=True)
    return path


@pytest.fixture
def sleeps() -> List[float]:
    """Delays requested by retry policies."""
    return []


@pytest.fixture
def make_context(fake_home, workdir, sleeps):
    """
    Factory for LaunchContext objects isolated from the real environment.

    Example:
        def test_macos(make_context):
            context = make_context(system="Darwin", machine="arm64")
    """

    def _make(
        system: str = "Linux",
        machine: str = "x86_64",
        env: Optional[Dict[str, str]] = None,
        cwd: Optional[Path] = None,
    ) -> LaunchContext:
        environ = {"HOME": str(fake_home)}
        environ.update(env or {})
        return LaunchContext(
            cwd=cwd or workdir,
            environ=environ,
            system=system,
            machine=machine,
            session=requests.Session(),
            sleep=sleeps.append,
        )

    return _make


@pytest.fixture
def context(make_context) -> LaunchContext:
    """Default Linux x86_64 context."""
    return make_context()


@pytest.fixture
def cache_root(tmp_path) -> Path:
    """Cache root used by the default settings."""
    return tmp_path / "cache"


@pytest.fixture
def settings(cache_root) -> LauncherSettings:
    """Settings pointing at the test release server and cache root."""
    return LauncherSettings(download_base=DOWNLOAD_BASE, cache_dir=cache_root)


@pytest.fixture
def replacer() -> RecordingReplacer:
    """Process replacer that records instead of exec-ing."""
    return RecordingReplacer()


@pytest.fixture
def datoria_archive() -> bytes:
    """Valid release archive containing the datoria executable."""
    return make_tar_gz({"datoria": b"#!/bin/sh\necho datoria\n"})
