"""Tests for configuration loading and the config-file search order."""

import logging

import pytest
from pydantic import ValidationError

from mcp_server_github_accounts.configuration import (
    CONFIG_FILENAME,
    PROJECT_NAME,
    ApplicationConfig,
    default_config_paths,
    load_config,
    load_config_file,
)
from mcp_server_github_accounts.error_handling import AccountNotFound, ConfigError


@pytest.fixture
def isolated(tmp_path, monkeypatch):
    """Point XDG and the working directory at empty temp dirs"""
    xdg = tmp_path / "xdg"
    cwd = tmp_path / "cwd"
    xdg.mkdir()
    cwd.mkdir()
    monkeypatch.setenv("XDG_CONFIG_HOME", str(xdg))
    monkeypatch.chdir(cwd)
    return xdg, cwd


class TestApplicationConfig:
    def test_defaults(self):
        config = ApplicationConfig()

        assert config.default_account == "home"
        assert config.account_names() == ["home"]
        assert config.get_account().token_path == "~/.config/github/tokens/home"
        assert config.gh_path == "gh"
        assert config.command_timeout is None
        assert config.logging.level == "INFO"

    def test_bare_string_account_shorthand(self):
        config = ApplicationConfig(accounts={"work": "~/tokens/work"}, default_account="work")

        assert config.get_account("work").token_path == "~/tokens/work"

    def test_unknown_account(self):
        with pytest.raises(AccountNotFound):
            ApplicationConfig().get_account("nope")

    def test_config_is_frozen(self):
        config = ApplicationConfig()

        with pytest.raises(ValidationError):
            config.default_account = "work"
        with pytest.raises(ValidationError):
            config.accounts = {}

    def test_model_copy_leaves_original_accounts(self):
        config = ApplicationConfig()

        derived = config.model_copy(
            update={"accounts": {**config.accounts, "work": {"token_path": "/w"}}}
        )

        assert "work" in derived.accounts
        assert config.account_names() == ["home"]

    def test_timeout_must_be_positive(self):
        with pytest.raises(ValidationError):
            ApplicationConfig(command_timeout=0)

    def test_log_level_normalized(self):
        config = ApplicationConfig.model_validate({"logging": {"level": "debug"}})

        assert config.logging.level == "DEBUG"


class TestLoadConfig:
    def test_explicit_file(self, tmp_path):
        path = tmp_path / "accounts.yml"
        path.write_text(
            "default_account: work\n"
            "accounts:\n"
            "  home:\n"
            "    token_path: ~/.config/github/tokens/home\n"
            "  work: ~/.config/github/tokens/work\n"
            "command_timeout: 30\n"
        )

        config = load_config(path)

        assert config.default_account == "work"
        assert config.account_names() == ["home", "work"]
        assert config.command_timeout == 30

    def test_explicit_missing_file_is_fatal(self, tmp_path):
        with pytest.raises(ConfigError):
            load_config(tmp_path / "nope.yml")

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "bad.yml"
        path.write_text("accounts: [unclosed\n")

        with pytest.raises(ConfigError) as exc_info:
            load_config_file(path)

        assert "Invalid YAML" in str(exc_info.value)

    def test_non_mapping_document(self, tmp_path):
        path = tmp_path / "list.yml"
        path.write_text("- home\n- work\n")

        with pytest.raises(ConfigError):
            load_config_file(path)

    def test_schema_violation(self, tmp_path):
        path = tmp_path / "schema.yml"
        path.write_text("accounts:\n  home:\n    token_path: ''\n")

        with pytest.raises(ConfigError):
            load_config_file(path)

    def test_empty_file_gives_defaults(self, tmp_path):
        path = tmp_path / "empty.yml"
        path.write_text("")

        assert load_config_file(path) == ApplicationConfig()

    def test_missing_default_account_only_warns(self, tmp_path, caplog):
        path = tmp_path / "nodefault.yml"
        path.write_text("default_account: ghost\naccounts:\n  home: /tmp/x\n")

        with caplog.at_level(logging.WARNING):
            config = load_config_file(path)

        assert config.default_account == "ghost"
        assert "ghost" in caplog.text

    def test_xdg_location_wins_over_cwd(self, isolated):
        xdg, cwd = isolated
        (xdg / PROJECT_NAME).mkdir()
        (xdg / PROJECT_NAME / CONFIG_FILENAME).write_text("default_account: xdg\n")
        (cwd / CONFIG_FILENAME).write_text("default_account: cwd\n")

        assert load_config().default_account == "xdg"

    def test_cwd_fallback(self, isolated):
        _, cwd = isolated
        (cwd / CONFIG_FILENAME).write_text("default_account: cwd\n")

        assert load_config().default_account == "cwd"

    def test_broken_fallback_is_skipped(self, isolated, caplog):
        xdg, cwd = isolated
        (xdg / PROJECT_NAME).mkdir()
        (xdg / PROJECT_NAME / CONFIG_FILENAME).write_text("- not a mapping\n")
        (cwd / CONFIG_FILENAME).write_text("default_account: cwd\n")

        with caplog.at_level(logging.WARNING):
            config = load_config()

        assert config.default_account == "cwd"
        assert "Failed to load config" in caplog.text

    def test_no_file_gives_defaults(self, isolated):
        assert load_config() == ApplicationConfig()

    def test_default_paths_follow_xdg(self, isolated):
        xdg, cwd = isolated

        paths = default_config_paths()

        assert paths[0] == xdg / PROJECT_NAME / CONFIG_FILENAME
        assert paths[1].name == CONFIG_FILENAME
