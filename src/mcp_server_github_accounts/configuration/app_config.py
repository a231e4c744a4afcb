"""Application configuration models and the config-file search order."""

import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from ..error_handling import AccountNotFound, ConfigError

logger = logging.getLogger(__name__)

PROJECT_NAME = "mcp-server-github-accounts"
CONFIG_FILENAME = f"{PROJECT_NAME}.yml"


class AccountConfig(BaseModel):
    """A named GitHub account and where its token lives."""

    model_config = ConfigDict(frozen=True)

    token_path: str = Field(
        ..., min_length=1, description="Path to the token file (supports ~ expansion)"
    )


class LoggingConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    level: str = "INFO"
    file: Optional[str] = None
    structured: bool = True

    @field_validator("level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        level = value.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"unknown log level '{value}'")
        return level


def _default_accounts() -> Dict[str, AccountConfig]:
    return {"home": AccountConfig(token_path="~/.config/github/tokens/home")}


class ApplicationConfig(BaseModel):
    """Top-level configuration, loaded once and never mutated afterwards.

    ``frozen`` rejects field reassignment only. ``accounts`` is still a plain
    dict shared by every component and must be treated as read-only; derive
    a new config with ``model_copy(update=...)`` instead.
    """

    model_config = ConfigDict(frozen=True)

    default_account: str = "home"
    accounts: Dict[str, AccountConfig] = Field(default_factory=_default_accounts)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    gh_path: str = "gh"
    command_timeout: Optional[float] = Field(None, gt=0)

    @field_validator("accounts", mode="before")
    @classmethod
    def _accept_bare_paths(cls, value: Any) -> Any:
        # `work: ~/tokens/work` is shorthand for `work: {token_path: ...}`
        if isinstance(value, dict):
            return {
                name: {"token_path": entry} if isinstance(entry, str) else entry
                for name, entry in value.items()
            }
        return value

    def get_account(self, name: Optional[str] = None) -> AccountConfig:
        account_name = self.default_account if name is None else name
        try:
            return self.accounts[account_name]
        except KeyError:
            raise AccountNotFound(account_name) from None

    def account_names(self) -> List[str]:
        return sorted(self.accounts)


def default_config_paths() -> List[Path]:
    """Fallback search order used when no explicit path is given."""
    config_home = os.environ.get("XDG_CONFIG_HOME") or str(Path.home() / ".config")
    return [
        Path(config_home) / PROJECT_NAME / CONFIG_FILENAME,
        Path.cwd() / CONFIG_FILENAME,
    ]


def load_config_file(path: Union[str, Path]) -> ApplicationConfig:
    """Parse and validate a single YAML config file."""
    path = Path(path).expanduser()
    try:
        content = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Failed to read config file {path}: {e}") from e

    try:
        data = yaml.safe_load(content) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a mapping")

    try:
        config = ApplicationConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid config file {path}: {e}") from e

    if config.default_account not in config.accounts:
        logger.warning(
            f"Default account '{config.default_account}' is not configured in {path}"
        )

    logger.info(f"Loaded config from: {path}")
    return config


def load_config(config_path: Optional[Union[str, Path]] = None) -> ApplicationConfig:
    """Load configuration with fallback chain:

    1. Explicit path (any failure is fatal)
    2. ``$XDG_CONFIG_HOME/<project>/<project>.yml``
    3. ``./<project>.yml``
    4. Built-in defaults
    """
    if config_path is not None:
        return load_config_file(config_path)

    for candidate in default_config_paths():
        if not candidate.exists():
            continue
        try:
            return load_config_file(candidate)
        except ConfigError as e:
            logger.warning(f"Failed to load config from {candidate}: {e}")

    logger.info("No config file found, using defaults")
    return ApplicationConfig()
