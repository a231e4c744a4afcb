"""
Global pytest configuration and fixtures.

This file provides:
1. Token files for a ``home`` and a ``work`` account
2. A fake gh executable that records calls and replays scripted output
3. A recording stub gateway for dispatch tests
"""

from pathlib import Path

import pytest

from fixtures.gh_doubles import FakeGh, StubGateway, write_token
from fixtures.github_responses import GitHubResponseFactory
from mcp_server_github_accounts.configuration import ApplicationConfig
from mcp_server_github_accounts.github import CredentialStore, GhGateway


@pytest.fixture
def token_dir(tmp_path: Path) -> Path:
    """Token files: home is clean, work has a trailing newline"""
    directory = tmp_path / "tokens"
    directory.mkdir()
    write_token(directory, "home", "ghp_home123")
    write_token(directory, "work", "ghp_abcdef\n")
    return directory


@pytest.fixture
def fake_gh(tmp_path: Path) -> FakeGh:
    return FakeGh(tmp_path / "bin")


@pytest.fixture
def config(token_dir: Path, fake_gh: FakeGh) -> ApplicationConfig:
    return ApplicationConfig(
        default_account="home",
        accounts={
            "home": str(token_dir / "home"),
            "work": {"token_path": str(token_dir / "work")},
        },
        gh_path=str(fake_gh.path),
    )


@pytest.fixture
def credentials(config: ApplicationConfig) -> CredentialStore:
    return CredentialStore(config)


@pytest.fixture
def gateway(config: ApplicationConfig) -> GhGateway:
    return GhGateway(config)


@pytest.fixture
def stub_gateway() -> StubGateway:
    return StubGateway()


@pytest.fixture
def github_response_factory():
    """Provide GitHub response factory."""
    return GitHubResponseFactory
