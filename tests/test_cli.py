"""
Tests for CLI commands — global options, container, hostsync, installers, config.
"""

import os
import shutil
import textwrap
from pathlib import Path
from unittest.mock import patch

import pytest
from click.testing import CliRunner

from conftest import commit_file, git, set_not_created
from devbench.adapters.mock import MockRunner
from devbench.main import cli


def write_config(tmp_path: Path) -> Path:
    config = tmp_path / "devbench.yml"
    config.write_text(textwrap.dedent("""\
        container:
          name: libsemigroups-x86-dev
          compose_command: docker compose
        packages:
          core: [automake]
          doc: [doxygen, graphviz]
    """))
    return config


class TestCLIGlobal:
    """Tests for global CLI behavior."""

    def test_help(self):
        result = CliRunner().invoke(cli, ["--help"])
        assert result.exit_code == 0
        assert "container" in result.output
        assert "hostsync" in result.output

    def test_version(self):
        result = CliRunner().invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert "0.1.0" in result.output

    def test_missing_explicit_config(self, tmp_path: Path):
        result = CliRunner().invoke(
            cli, ["--config", str(tmp_path / "nope.yml"), "container", "status"]
        )
        assert result.exit_code == 1
        assert "Config file not found" in result.output


# ── container ────────────────────────────────────────────────────────


class TestContainerCommand:
    def test_unknown_verb(self, tmp_path: Path):
        config = write_config(tmp_path)
        mock = MockRunner()
        with patch("devbench.ui.cli.container.ProcessRunner", return_value=mock):
            result = CliRunner().invoke(cli, ["--config", str(config), "container", "frobnicate"])
        assert result.exit_code == 1
        assert "Unknown command: frobnicate" in result.output
        assert mock.commands == []

    @pytest.mark.parametrize("verb", ["help", "--help"])
    def test_help(self, tmp_path: Path, verb):
        config = write_config(tmp_path)
        with patch("devbench.ui.cli.container.ProcessRunner", return_value=MockRunner()):
            result = CliRunner().invoke(cli, ["--config", str(config), "container", verb])
        assert result.exit_code == 0
        assert "Commands:" in result.output
        assert "sanitizer" in result.output

    def test_docker_missing(self, tmp_path: Path):
        config = write_config(tmp_path)
        mock = MockRunner(available=())
        with patch("devbench.ui.cli.container.ProcessRunner", return_value=mock):
            result = CliRunner().invoke(cli, ["--config", str(config), "container", "start"])
        assert result.exit_code == 1
        assert "docker CLI not found" in result.output
        assert mock.commands == []

    def test_status(self, tmp_path: Path):
        config = write_config(tmp_path)
        mock = MockRunner()
        set_not_created(mock)
        with patch("devbench.ui.cli.container.ProcessRunner", return_value=mock):
            result = CliRunner().invoke(cli, ["--config", str(config), "container", "status"])
        assert result.exit_code == 0
        assert "Status: Not created" in result.output

    def test_clean_with_yes(self, tmp_path: Path):
        config = write_config(tmp_path)
        mock = MockRunner()
        with patch("devbench.ui.cli.container.ProcessRunner", return_value=mock):
            result = CliRunner().invoke(
                cli, ["--config", str(config), "container", "--yes", "clean"]
            )
        assert result.exit_code == 0
        assert mock.commands == [["docker", "compose", "down", "-v"]]

    def test_clean_declined_on_prompt(self, tmp_path: Path):
        config = write_config(tmp_path)
        mock = MockRunner()
        with patch("devbench.ui.cli.container.ProcessRunner", return_value=mock):
            result = CliRunner().invoke(
                cli, ["--config", str(config), "container", "clean"], input="n\n"
            )
        assert result.exit_code == 0
        assert "Cancelled" in result.output
        assert mock.commands == []

    def test_sanitizer_invalid(self, tmp_path: Path):
        config = write_config(tmp_path)
        mock = MockRunner()
        with patch("devbench.ui.cli.container.ProcessRunner", return_value=mock):
            result = CliRunner().invoke(
                cli, ["--config", str(config), "container", "sanitizer", "foo"]
            )
        assert result.exit_code == 1
        assert "Invalid sanitizer" in result.output
        assert mock.commands == []


# ── hostsync ─────────────────────────────────────────────────────────


class TestHostsyncCommand:
    def test_source_not_mounted(self, tmp_path: Path):
        result = CliRunner().invoke(
            cli, ["hostsync", "--repo", str(tmp_path), "--source", str(tmp_path / "missing")]
        )
        assert result.exit_code == 1
        assert "Host repository not mounted" in result.output

    @pytest.mark.skipif(shutil.which("git") is None, reason="git not available")
    def test_sync(self, host_and_clone):
        host, work = host_and_clone
        head = commit_file(host, "notes.txt", "new\n", "host change")

        result = CliRunner().invoke(
            cli, ["hostsync", "--repo", str(work), "--source", str(host)]
        )

        assert result.exit_code == 0, result.output
        assert "Sync completed successfully!" in result.output
        assert git(work, "rev-parse", "HEAD") == head

    @pytest.mark.skipif(shutil.which("git") is None, reason="git not available")
    def test_not_cloned(self, host_and_clone, tmp_path: Path):
        host, _ = host_and_clone
        result = CliRunner().invoke(
            cli, ["hostsync", "--repo", str(tmp_path / "empty"), "--source", str(host)]
        )
        assert result.exit_code == 1
        assert "Dev repository not found" in result.output


# ── brew / bin ───────────────────────────────────────────────────────


class TestBrewCommand:
    def test_brew_missing(self, tmp_path: Path):
        config = write_config(tmp_path)
        with patch("devbench.ui.cli.packages.ProcessRunner", return_value=MockRunner(available=())):
            result = CliRunner().invoke(cli, ["--config", str(config), "brew", "--choice", "1"])
        assert result.exit_code == 1
        assert "Homebrew is not installed" in result.output

    def test_install_group(self, tmp_path: Path):
        config = write_config(tmp_path)
        mock = MockRunner()
        with patch("devbench.ui.cli.packages.ProcessRunner", return_value=mock):
            result = CliRunner().invoke(cli, ["--config", str(config), "brew", "--choice", "2"])
        assert result.exit_code == 0
        assert "✓ Successfully installed automake" in result.output
        assert mock.commands == [["brew", "install", "automake"]]

    def test_invalid_choice(self, tmp_path: Path):
        config = write_config(tmp_path)
        with patch("devbench.ui.cli.packages.ProcessRunner", return_value=MockRunner()):
            result = CliRunner().invoke(cli, ["--config", str(config), "brew"], input="9\n")
        assert result.exit_code == 1
        assert "No valid choices provided." in result.output


class TestBinCommand:
    def test_install(self, tmp_path: Path):
        source = tmp_path / "binaries"
        source.mkdir()
        tool = source / "semigroups-tool"
        tool.write_text("#!/bin/sh\n")
        tool.chmod(0o755)
        target = tmp_path / "bin"
        env = {"SHELL": "/bin/bash", "PATH": f"{target}{os.pathsep}{os.environ.get('PATH', '')}"}

        result = CliRunner().invoke(
            cli,
            ["--config", str(write_config(tmp_path)), "bin",
             "--source", str(source), "--target", str(target), "--choice", "1"],
            env=env,
        )

        assert result.exit_code == 0, result.output
        assert (target / "semigroups-tool").exists()
        assert "Installation completed successfully!" in result.output

    def test_no_binaries(self, tmp_path: Path):
        source = tmp_path / "binaries"
        source.mkdir()
        result = CliRunner().invoke(
            cli,
            ["--config", str(write_config(tmp_path)), "bin",
             "--source", str(source), "--target", str(tmp_path / "bin"), "--choice", "1"],
        )
        assert result.exit_code == 1
        assert "No executable binaries" in result.output


# ── config ───────────────────────────────────────────────────────────


class TestConfigCommands:
    def test_check_valid(self, tmp_path: Path):
        config = write_config(tmp_path)
        result = CliRunner().invoke(cli, ["--config", str(config), "config", "check"])
        assert result.exit_code == 0
        assert "Configuration is valid" in result.output
        assert "Package groups: 2" in result.output

    def test_check_invalid(self, tmp_path: Path):
        config = tmp_path / "devbench.yml"
        config.write_text("build:\n  jobs: -1\n")
        result = CliRunner().invoke(cli, ["--config", str(config), "config", "check"])
        assert result.exit_code == 1
        assert "Configuration errors" in result.output

    def test_show(self, tmp_path: Path):
        config = write_config(tmp_path)
        result = CliRunner().invoke(cli, ["--config", str(config), "config", "show"])
        assert result.exit_code == 0
        assert "libsemigroups-x86-dev" in result.output
        assert "doxygen" in result.output
