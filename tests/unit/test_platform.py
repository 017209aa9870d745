"""
Unit tests for OS family detection and package manager resolution.
"""

from unittest.mock import patch

import pytest

from readiness.detect.platform import (
    MANAGERS,
    ManagerKind,
    PackageManagerResolver,
    detect_os_family,
)
from readiness.errors import ProbeTimeout, UnsupportedPlatform
from readiness.process import CommandResult

from tests.helpers import FakeRunner, which_from


def _resolver(runner, *present):
    return PackageManagerResolver(runner=runner, which=which_from(*present))


class TestDetectOSFamily:
    """Tests for detect_os_family()."""

    @patch("readiness.detect.platform.sys.platform", "linux")
    @patch("readiness.detect.platform.platform.system", return_value="Linux")
    def test_linux(self, mock_system):
        assert detect_os_family() == "linux"

    @patch("readiness.detect.platform.sys.platform", "darwin")
    @patch("readiness.detect.platform.platform.system", return_value="Darwin")
    def test_macos(self, mock_system):
        assert detect_os_family() == "macos"

    @patch("readiness.detect.platform.sys.platform", "win32")
    def test_windows(self):
        assert detect_os_family() == "windows"

    @patch("readiness.detect.platform.sys.platform", "msys")
    def test_msys_is_windows(self):
        assert detect_os_family() == "windows"


class TestPackageManagerResolver:
    """Tests for PackageManagerResolver."""

    def test_first_candidate_wins(self):
        runner = FakeRunner({
            ("apt-get", "--version"): "apt 2.7.14 (amd64)",
            ("dnf", "--version"): "4.18.0",
        })
        resolver = _resolver(runner, "apt-get", "dnf")

        assert resolver.resolve("linux").kind == ManagerKind.APT

    def test_priority_order_is_fixed(self):
        """Later candidates are used only when earlier ones are unavailable."""
        runner = FakeRunner({
            ("pacman", "--version"): "Pacman v6.1.0",
            ("dnf", "--version"): "4.18.0",
        })
        resolver = _resolver(runner, "pacman", "dnf")

        assert resolver.resolve("linux").kind == ManagerKind.PACMAN
        assert ["dnf", "--version"] not in runner.calls

    def test_failing_detection_command_is_skipped(self):
        runner = FakeRunner({
            ("apt-get", "--version"): 127,
            ("dnf", "--version"): "4.18.0",
        })
        resolver = _resolver(runner, "apt-get", "dnf")

        assert resolver.resolve("linux").kind == ManagerKind.DNF

    def test_timed_out_detection_is_skipped(self):
        runner = FakeRunner({
            ("apt-get", "--version"): ProbeTimeout(["apt-get", "--version"], 10),
            ("pacman", "--version"): "Pacman v6.1.0",
        })
        resolver = _resolver(runner, "apt-get", "pacman")

        assert resolver.resolve("linux").kind == ManagerKind.PACMAN

    def test_custom_candidate_list(self):
        runner = FakeRunner({
            ("apt-get", "--version"): "apt",
            ("pacman", "--version"): "pacman",
        })
        resolver = PackageManagerResolver(
            candidates={"linux": [ManagerKind.PACMAN, ManagerKind.APT]},
            runner=runner,
            which=which_from("apt-get", "pacman"),
        )

        assert resolver.resolve("linux").kind == ManagerKind.PACMAN

    def test_no_manager_is_unsupported(self):
        resolver = _resolver(FakeRunner())

        with pytest.raises(UnsupportedPlatform) as exc:
            resolver.resolve("linux")
        assert exc.value.os_family == "linux"

    def test_unknown_os_family_is_unsupported(self):
        runner = FakeRunner({("apt-get", "--version"): "apt"})
        resolver = _resolver(runner, "apt-get")

        with pytest.raises(UnsupportedPlatform):
            resolver.resolve("macos")
        assert runner.calls == []

    def test_distro_description_in_error(self):
        runner = FakeRunner({("lsb_release", "-s", "-d"): '"Gentoo Linux"'})
        resolver = _resolver(runner, "lsb_release")

        with pytest.raises(UnsupportedPlatform) as exc:
            resolver.resolve("linux")
        assert "Gentoo Linux" in str(exc.value)

    def test_find_returns_none(self):
        assert _resolver(FakeRunner()).find("linux") is None


class TestPackageManager:
    """Tests for the manager dispatch table."""

    def test_apt_installed_marker(self):
        apt = MANAGERS[ManagerKind.APT]
        argv = apt.query_argv("curl")

        assert apt.is_installed(CommandResult(argv, 0, stdout="install ok installed"))
        assert not apt.is_installed(CommandResult(argv, 0, stdout="deinstall ok config-files"))
        assert not apt.is_installed(CommandResult(argv, 1))

    def test_install_commands_never_reinstall(self):
        for manager in MANAGERS.values():
            argv = manager.install_argv(["curl"])
            assert "--reinstall" not in argv
            assert "reinstall" not in argv
        assert "--needed" in MANAGERS[ManagerKind.PACMAN].install_argv(["curl"])

    def test_groups_only_on_dnf(self):
        assert MANAGERS[ManagerKind.DNF].group_argv("Development Tools")[-1] == "Development Tools"
        with pytest.raises(ValueError):
            MANAGERS[ManagerKind.APT].group_argv("Development Tools")
