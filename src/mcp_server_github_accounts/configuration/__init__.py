"""Configuration module for the GitHub multi-account MCP server.

Configuration is a YAML document validated with Pydantic models. It is
loaded once at startup and passed explicitly (never as a global) to the
credential store, the gh gateway and the tool handler.

Configuration hierarchy:
    ```python
    class ApplicationConfig(BaseModel):
        default_account: str
        accounts: Dict[str, AccountConfig]
        logging: LoggingConfig
        gh_path: str
        command_timeout: Optional[float]
    ```

Example document:
    ```yaml
    default_account: work
    accounts:
      home:
        token_path: ~/.config/github/tokens/home
      work: ~/.config/github/tokens/work
    logging:
      level: DEBUG
    ```

Usage examples:
    >>> from mcp_server_github_accounts.configuration import load_config
    >>>
    >>> config = load_config("~/my-accounts.yml")
    >>> config.get_account("work").token_path
    '~/.config/github/tokens/work'

Search order when no explicit path is given:
    1. ``$XDG_CONFIG_HOME/mcp-server-github-accounts/mcp-server-github-accounts.yml``
    2. ``./mcp-server-github-accounts.yml``
    3. Built-in defaults (a single ``home`` account)
"""

from .app_config import (
    CONFIG_FILENAME,
    PROJECT_NAME,
    AccountConfig,
    ApplicationConfig,
    LoggingConfig,
    default_config_paths,
    load_config,
    load_config_file,
)

__all__ = [
    "CONFIG_FILENAME",
    "PROJECT_NAME",
    "AccountConfig",
    "ApplicationConfig",
    "LoggingConfig",
    "default_config_paths",
    "load_config",
    "load_config_file",
]
