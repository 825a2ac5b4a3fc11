"""
Tests for launcher orchestration.

Tests cover:
- Cache hits skip the fetcher
- Cache misses install, then hand over exactly the given arguments
- State transitions
- Fatal errors never reach the process replacer
"""

from unittest.mock import Mock

import pytest
import requests
import responses

from datoria_launcher.core.cache import CacheStore
from datoria_launcher.core.exceptions import (
    DownloadError,
    MissingExecutableError,
    UnsupportedPlatformError,
    VersionResolutionError,
)
from datoria_launcher.launcher.fetcher import Fetcher
from datoria_launcher.launcher.launcher import Launcher, LaunchState
from tests.utils.helpers import LATEST_URL, archive_url


def _install_fake(cache_root, version):
    """Place an executable datoria into the cache."""
    path = CacheStore(cache_root).locate(version)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("#!/bin/sh\n")
    path.chmod(0o755)
    return path


def _pin(directory, version):
    (directory / "datoria.json").write_text(f'{{"version": "{version}"}}')


class TestCacheHit:
    """Tests for already-installed versions."""

    @responses.activate
    def test_pinned_cache_hit_makes_no_requests(
        self, context, settings, replacer, cache_root, workdir
    ):
        """Test a pinned, cached version runs without network access."""
        _pin(workdir, "1.2.3")
        executable = _install_fake(cache_root, "1.2.3")
        fetcher = Mock(spec=Fetcher)

        launcher = Launcher(context, settings, replacer=replacer, fetcher=fetcher)
        launcher.run(["build", "--verbose"])

        fetcher.install.assert_not_called()
        assert len(responses.calls) == 0
        assert replacer.calls == [(executable, ["build", "--verbose"])]
        assert launcher.state == LaunchState.EXECUTING

    def test_prepare_reports_cache_hit(self, context, settings, cache_root, workdir):
        """Test the plan records that the cache was used."""
        _pin(workdir, "1.2.3")
        executable = _install_fake(cache_root, "1.2.3")

        launcher = Launcher(context, settings, fetcher=Mock(spec=Fetcher))
        plan = launcher.prepare()

        assert plan.was_cached is True
        assert plan.executable == executable
        assert plan.version == "1.2.3"
        assert plan.platform.artifact_suffix == "x86_64-pc-linux"
        assert launcher.state == LaunchState.CACHE_HIT

    def test_nearest_manifest_wins(self, make_context, settings, replacer, cache_root, workdir):
        """Test the closest manifest pin is used."""
        _pin(workdir.parent, "1.0.0")
        _pin(workdir, "2.0.0")
        nested = workdir / "src" / "deep"
        nested.mkdir(parents=True)
        executable = _install_fake(cache_root, "2.0.0")

        launcher = Launcher(make_context(cwd=nested), settings, replacer=replacer)
        launcher.run([])

        assert replacer.calls == [(executable, [])]

    def test_non_executable_cache_entry_is_reinstalled(
        self, context, settings, replacer, cache_root, workdir
    ):
        """Test a cached file without the exec bit counts as a miss."""
        _pin(workdir, "1.2.3")
        path = _install_fake(cache_root, "1.2.3")
        path.chmod(0o644)

        def install(version, platform):
            path.chmod(0o755)
            return path

        fetcher = Mock(spec=Fetcher)
        fetcher.install.side_effect = install

        Launcher(context, settings, replacer=replacer, fetcher=fetcher).run([])

        fetcher.install.assert_called_once()
        assert replacer.calls == [(path, [])]


class TestCacheMiss:
    """Tests for versions that must be installed first."""

    def test_miss_installs_then_executes(
        self, context, settings, replacer, cache_root, workdir
    ):
        """Test install is called once and its result is executed."""
        _pin(workdir, "1.2.3")
        fetcher = Mock(spec=Fetcher)
        fetcher.install.side_effect = lambda version, platform: _install_fake(
            cache_root, version
        )

        launcher = Launcher(context, settings, replacer=replacer, fetcher=fetcher)
        launcher.run(["--flag", "value with spaces", ""])

        fetcher.install.assert_called_once()
        version, platform = fetcher.install.call_args.args
        assert version == "1.2.3"
        assert platform.cache_root == cache_root
        assert replacer.calls == [
            (CacheStore(cache_root).locate("1.2.3"), ["--flag", "value with spaces", ""])
        ]

    def test_install_without_executable_result(
        self, context, settings, replacer, cache_root, workdir
    ):
        """Test a path that is still not executable after install is fatal."""
        _pin(workdir, "1.2.3")
        fetcher = Mock(spec=Fetcher)
        fetcher.install.return_value = CacheStore(cache_root).locate("1.2.3")

        launcher = Launcher(context, settings, replacer=replacer, fetcher=fetcher)

        with pytest.raises(MissingExecutableError):
            launcher.run([])

        assert replacer.calls == []

    def test_state_sequence(self, context, settings, replacer, cache_root, workdir):
        """Test states are entered in order on a cache miss."""
        _pin(workdir, "1.2.3")
        seen = []

        fetcher = Mock(spec=Fetcher)

        def install(version, platform):
            seen.append(launcher.state)
            return _install_fake(cache_root, version)

        fetcher.install.side_effect = install
        launcher = Launcher(context, settings, replacer=replacer, fetcher=fetcher)

        original_enter = launcher._enter

        def record(state):
            original_enter(state)
            seen.append(state)

        launcher._enter = record
        launcher.run([])

        assert seen == [
            LaunchState.RESOLVING_VERSION,
            LaunchState.RESOLVING_PLATFORM,
            LaunchState.CHECKING_CACHE,
            LaunchState.INSTALLING,
            LaunchState.INSTALLING,
            LaunchState.EXECUTING,
        ]


class TestFatalErrors:
    """Tests that fatal conditions stop before exec."""

    @responses.activate
    def test_unreachable_release_server(self, context, settings, replacer):
        """Test version resolution failure stops the launch."""
        responses.add(
            responses.GET, LATEST_URL, body=requests.exceptions.ConnectionError("down")
        )
        fetcher = Mock(spec=Fetcher)

        launcher = Launcher(context, settings, replacer=replacer, fetcher=fetcher)

        with pytest.raises(VersionResolutionError):
            launcher.run([])

        assert len(responses.calls) == 3
        fetcher.install.assert_not_called()
        assert replacer.calls == []
        assert launcher.state == LaunchState.RESOLVING_VERSION

    def test_unsupported_platform(self, make_context, settings, replacer, workdir):
        """Test an unsupported OS stops the launch."""
        _pin(workdir, "1.2.3")
        context = make_context(system="Windows", machine="AMD64")

        launcher = Launcher(context, settings, replacer=replacer)

        with pytest.raises(UnsupportedPlatformError):
            launcher.run([])

        assert replacer.calls == []

    def test_install_failure(self, context, settings, replacer, workdir):
        """Test fetcher errors propagate and nothing is executed."""
        _pin(workdir, "1.2.3")
        fetcher = Mock(spec=Fetcher)
        fetcher.install.side_effect = DownloadError("boom", status_code=500)

        launcher = Launcher(context, settings, replacer=replacer, fetcher=fetcher)

        with pytest.raises(DownloadError):
            launcher.run([])

        assert replacer.calls == []


@pytest.mark.integration
class TestEndToEnd:
    """Full launches against a mocked release server."""

    @responses.activate
    def test_latest_release_download_and_exec(
        self, context, settings, replacer, cache_root, datoria_archive
    ):
        """Test no manifest: latest lookup, download, install, exec."""
        responses.add(responses.GET, LATEST_URL, body="4.5.6\n", status=200)
        responses.add(
            responses.GET, archive_url("4.5.6"), body=datoria_archive, status=200
        )

        Launcher(context, settings, replacer=replacer).run(["--version"])

        executable = CacheStore(cache_root).locate("4.5.6")
        assert replacer.calls == [(executable, ["--version"])]
        assert CacheStore(cache_root).exists(executable)

    @responses.activate
    def test_second_launch_uses_cache(
        self, make_context, settings, replacer, cache_root, workdir, datoria_archive
    ):
        """Test a pinned version is downloaded only once."""
        _pin(workdir, "1.2.3")
        responses.add(
            responses.GET, archive_url("1.2.3"), body=datoria_archive, status=200
        )

        Launcher(make_context(), settings, replacer=replacer).run(["a"])
        Launcher(make_context(), settings, replacer=replacer).run(["b"])

        assert len(responses.calls) == 1
        executable = CacheStore(cache_root).locate("1.2.3")
        assert replacer.calls == [(executable, ["a"]), (executable, ["b"])]
