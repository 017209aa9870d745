"""
Unit tests for the command-line interface.
"""

import logging
import sys
from unittest.mock import patch

import pytest
import yaml
from click.testing import CliRunner

from readiness import __version__
from readiness.cli import EXIT_UNSUPPORTED, cli
from readiness.errors import UnsupportedPlatform
from readiness.logger import set_level

# No CI and no stray config file from the caller's environment
ENV = {"CI": "", "READINESS_CONFIG": ""}


@pytest.fixture
def runner():
    return CliRunner()


def _config(tmp_path, **overrides):
    data = {
        "project_name": "Demo",
        "tools": [{
            "executable": sys.executable,
            "label": "Python interpreter",
            "min_version": "3.0",
        }],
        "system_tools": [],
        "paths": [{"path": "Cargo.toml", "label": "Root Cargo.toml"}],
        "libraries": [],
        "probes": [],
        "verification_probe": None,
    }
    data.update(overrides)
    path = tmp_path / "readiness.yaml"
    path.write_text(yaml.safe_dump(data))
    return path


class TestCLIBasics:
    """Tests for the command group."""

    def test_help(self, runner):
        result = runner.invoke(cli, ["--help"])

        assert result.exit_code == 0
        for command in ("validate", "setup", "profiles", "detect-manager"):
            assert command in result.output

    def test_version(self, runner):
        result = runner.invoke(cli, ["--version"])

        assert result.exit_code == 0
        assert __version__ in result.output


class TestValidateCommand:
    """Tests for the validate command."""

    def test_passing_environment(self, runner, project_root):
        config = _config(project_root)

        result = runner.invoke(cli, ["validate", "--root", str(project_root), "--config", str(config)], env=ENV)

        assert result.exit_code == 0, result.output
        assert "Demo Development Environment Validation" in result.output
        assert "Python interpreter version" in result.output
        assert "Environment validation passed!" in result.output

    def test_failing_environment(self, runner, tmp_path):
        config = _config(tmp_path, tools=[{"executable": "readiness-no-such-tool", "label": "Imaginary tool"}])

        result = runner.invoke(cli, ["validate", "--root", str(tmp_path), "--config", str(config)], env=ENV)

        assert result.exit_code == 1
        assert "Imaginary tool not found" in result.output
        assert "Root Cargo.toml not found" in result.output

    def test_strict_fails_on_warnings(self, runner, project_root):
        config = _config(project_root, tools=[
            {"executable": "readiness-no-such-tool", "label": "Optional tool", "required": False},
        ])
        args = ["validate", "--root", str(project_root), "--config", str(config)]

        assert runner.invoke(cli, args, env=ENV).exit_code == 0
        assert runner.invoke(cli, [*args, "--strict"], env=ENV).exit_code == 1

    def test_invalid_config(self, runner, tmp_path):
        config = tmp_path / "readiness.yaml"
        config.write_text("tools: [unclosed\n")

        result = runner.invoke(cli, ["validate", "--root", str(tmp_path), "--config", str(config)], env=ENV)

        assert result.exit_code == 1
        assert "Error loading configuration" in result.output

    def test_config_error_text_kept(self, runner, tmp_path):
        config = _config(tmp_path, probe_timeout="abc")

        result = runner.invoke(cli, ["validate", "--root", str(tmp_path), "--config", str(config)], env=ENV)

        assert result.exit_code == 1
        assert "input_value='abc'" in result.output

    def test_ci_shows_skipped_checks(self, runner, tmp_path):
        config = _config(tmp_path, paths=[
            {"path": "node_modules", "kind": "directory", "required": False},
            {"path": "node_modules/@tauri-apps", "kind": "directory", "required": False,
             "depends_on": "node_modules"},
        ])

        try:
            result = runner.invoke(
                cli, ["validate", "--root", str(tmp_path), "--config", str(config)], env={**ENV, "CI": "true"}
            )
        finally:
            set_level(logging.WARNING)

        assert result.exit_code == 0
        assert "requires 'path.node_modules'" in result.output


class TestDesktopValidation:
    """Tests for validate --desktop."""

    def _desktop_config(self, tmp_path, exit_code=0):
        command = [sys.executable, "-c", f"import sys; sys.exit({exit_code})"]
        return _config(
            tmp_path,
            desktop_probes=[
                {"id": "install", "command": command, "label": "pnpm install",
                 "section": "Workspace Validation", "timeout": 60},
                {"id": "prep", "command": [sys.executable, "-c", "pass"], "label": "Codegen",
                 "section": "Workspace Validation", "timeout": 60},
            ],
            desktop_paths=[
                {"path": "Cargo.toml", "section": "Essential Files Check",
                 "found_message": "FOUND: Cargo.toml", "missing_message": "MISSING: Cargo.toml"},
            ],
        )

    def test_passing_desktop_battery(self, runner, project_root):
        config = self._desktop_config(project_root)

        result = runner.invoke(
            cli, ["validate", "--desktop", "--root", str(project_root), "--config", str(config)], env=ENV
        )

        assert result.exit_code == 0, result.output
        assert "Demo Desktop App Validation" in result.output
        assert "=== Workspace Validation ===" in result.output
        assert "FOUND: Cargo.toml" in result.output
        assert "Desktop app validation passed!" in result.output
        # The environment battery does not run
        assert "Basic Dependencies" not in result.output

    def test_failing_install_skips_codegen(self, runner, tmp_path):
        config = self._desktop_config(tmp_path, exit_code=3)

        result = runner.invoke(
            cli, ["validate", "--desktop", "--root", str(tmp_path), "--config", str(config)], env=ENV
        )

        assert result.exit_code == 1
        assert "pnpm install failed (exit 3)" in result.output
        assert "Codegen succeeded" not in result.output
        assert "MISSING: Cargo.toml" in result.output
        assert "Desktop app validation failed!" in result.output


class TestSetupCommand:
    """Tests for the setup command."""

    @patch("readiness.cli.SetupSession.resolve")
    def test_unsupported_platform(self, mock_resolve, runner, project_root):
        mock_resolve.side_effect = UnsupportedPlatform("linux", detail="Gentoo Linux")
        config = _config(project_root)

        result = runner.invoke(cli, ["setup", "--root", str(project_root), "--config", str(config)], env=ENV)

        assert result.exit_code == EXIT_UNSUPPORTED
        assert "Your system (linux, 'Gentoo Linux') is not supported" in result.output
        assert "manually install" in result.output
        assert "=== Prerequisites ===" not in result.output

    def test_unknown_profile(self, runner, project_root):
        config = _config(project_root)

        result = runner.invoke(
            cli, ["setup", "ios", "--root", str(project_root), "--config", str(config)], env=ENV
        )

        assert result.exit_code == 1
        assert "Unknown profile 'ios'" in result.output


class TestInfoCommands:
    """Tests for profiles and detect-manager."""

    def test_profiles(self, runner, tmp_path):
        result = runner.invoke(cli, ["profiles", "--root", str(tmp_path)], env=ENV)

        assert result.exit_code == 0
        assert "android" in result.output
        assert "workspace" in result.output

    @patch("readiness.cli.PackageManagerResolver.find", return_value=None)
    @patch("readiness.cli.detect_os_family", return_value="linux")
    def test_detect_manager_none(self, mock_os, mock_find, runner):
        result = runner.invoke(cli, ["detect-manager"], env=ENV)

        assert result.exit_code == 0
        assert "unsupported" in result.output
        assert "setup is unavailable" in result.output
