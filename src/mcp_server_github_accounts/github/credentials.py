"""Account token resolution"""

import logging
import os
from pathlib import Path
from typing import List, NamedTuple, Optional

from ..configuration import ApplicationConfig
from ..error_handling import TokenNotFound, TokenReadError

logger = logging.getLogger(__name__)


class AccountStatus(NamedTuple):
    name: str
    token_path: str
    token_exists: bool
    is_default: bool


class CredentialStore:
    """Resolves an account name to its token, re-reading the file every time.

    Nothing is cached, so a token file rotated on disk is picked up by the
    very next call.
    """

    def __init__(self, config: ApplicationConfig):
        self.config = config

    def token_path(self, account: Optional[str] = None) -> Path:
        account_config = self.config.get_account(account)
        return Path(os.path.expanduser(account_config.token_path))

    def resolve(self, account: Optional[str] = None) -> str:
        """Return the trimmed token for ``account`` (default account if None)"""
        path = self.token_path(account)

        if not path.exists():
            raise TokenNotFound(str(path))

        try:
            token = path.read_text(encoding="utf-8").strip()
        except (OSError, UnicodeDecodeError) as e:
            raise TokenReadError(str(path), e) from e

        if not token:
            raise TokenReadError(str(path), "token file is empty")

        logger.debug(
            f"Resolved token for account {account or self.config.default_account}"
        )
        return token

    def account_names(self) -> List[str]:
        return self.config.account_names()

    def describe(self) -> List[AccountStatus]:
        statuses = []
        for name in self.account_names():
            raw_path = self.config.accounts[name].token_path
            statuses.append(
                AccountStatus(
                    name=name,
                    token_path=raw_path,
                    token_exists=Path(os.path.expanduser(raw_path)).exists(),
                    is_default=name == self.config.default_account,
                )
            )
        return statuses
