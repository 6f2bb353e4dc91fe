"""Tests for the root groovyrules CLI."""

import pytest
from click.testing import CliRunner

from groovyrules import __version__
from groovyrules.cli import cli


def test_cli_help(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, ["--help"])
    assert result.exit_code == 0
    assert "groovyrules" in result.output


def test_cli_version(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output


def test_cli_no_args(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, [])
    assert result.exit_code == 0
    assert "Usage" in result.output


# --- Global flags ---


@pytest.mark.parametrize("flag", ["--json", "-q", "-v", "--log-json"])
def test_global_flag_accepted(cli_runner: CliRunner, flag: str) -> None:
    result = cli_runner.invoke(cli, [flag, "--version"])
    assert result.exit_code == 0


def test_config_option_accepted(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, ["-c", "/tmp/groovyrules.toml", "--version"])
    assert result.exit_code == 0


EXPECTED_COMMANDS = ["targets", "closure", "plan", "build", "test", "classname"]


@pytest.mark.parametrize("name", EXPECTED_COMMANDS)
def test_command_registered(name: str) -> None:
    assert name in cli.commands
