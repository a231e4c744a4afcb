"""Tests for the command line interface."""

import logging

import pytest
import yaml
from click.testing import CliRunner

from mcp_server_github_accounts import main


@pytest.fixture(autouse=True)
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def config_file(tmp_path, token_dir, fake_gh):
    path = tmp_path / "accounts.yml"
    path.write_text(
        yaml.safe_dump(
            {
                "default_account": "work",
                "accounts": {
                    "home": str(token_dir / "home"),
                    "work": str(token_dir / "work"),
                    "ghost": str(token_dir / "ghost"),
                },
                "gh_path": str(fake_gh.path),
                "logging": {"structured": False, "level": "WARNING"},
            }
        )
    )
    return path


def test_accounts_lists_status(config_file):
    result = CliRunner().invoke(main, ["-c", str(config_file), "accounts"])

    assert result.exit_code == 0, result.output
    lines = result.output.splitlines()
    assert lines[0] == "Configured accounts:"
    assert lines[1].startswith("  ❌ ghost:")
    assert lines[2].startswith("  ✅ home:")
    assert lines[3].startswith("  ✅ work (default):")


def test_config_from_environment(config_file, monkeypatch):
    monkeypatch.setenv("MCP_GITHUB_ACCOUNTS_CONFIG", str(config_file))

    result = CliRunner().invoke(main, ["accounts"])

    assert result.exit_code == 0, result.output
    assert "work (default)" in result.output


def test_bad_config_is_reported(tmp_path):
    path = tmp_path / "broken.yml"
    path.write_text("- nope\n")

    result = CliRunner().invoke(main, ["-c", str(path), "accounts"])

    assert result.exit_code == 1
    assert "Configuration error" in result.output


def test_test_command_authenticates(config_file, fake_gh):
    fake_gh.respond("--version", stdout="gh version 2.40.0\n")
    fake_gh.respond("api", "user", stdout="octocat\n")

    result = CliRunner().invoke(main, ["-c", str(config_file), "test", "home"])

    assert result.exit_code == 0, result.output
    assert "gh version: gh version 2.40.0" in result.output
    assert "✅ Account 'home' authenticated as octocat" in result.output
    assert fake_gh.calls()[-1]["args"] == ["api", "user", "--jq", ".login"]
    assert fake_gh.calls()[-1]["token"] == "ghp_home123"


def test_test_command_reports_gh_failure(config_file, fake_gh):
    fake_gh.respond("api", stderr="HTTP 401: Bad credentials\n", returncode=1)

    result = CliRunner().invoke(main, ["-c", str(config_file), "test"])

    assert result.exit_code == 0, result.output
    assert "❌ Account 'work' failed to authenticate: HTTP 401: Bad credentials" in result.output


def test_test_command_missing_token(config_file):
    result = CliRunner().invoke(main, ["-c", str(config_file), "test", "ghost"])

    assert result.exit_code == 1
    assert "Token file not found" in result.output
