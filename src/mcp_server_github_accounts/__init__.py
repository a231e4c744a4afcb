import asyncio
import logging
from pathlib import Path
from typing import Optional

import click
from dotenv import load_dotenv

from .configuration import ApplicationConfig, load_config
from .error_handling import ExternalToolError, GitHubMCPError
from .logging_config import configure_logging

logger = logging.getLogger(__name__)


def _log_level(config: ApplicationConfig, verbose: int) -> str:
    if verbose == 1:
        return "INFO"
    if verbose >= 2:
        return "DEBUG"
    return config.logging.level


@click.group(invoke_without_command=True)
@click.option(
    "-c",
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    envvar="MCP_GITHUB_ACCOUNTS_CONFIG",
    help="Path to the accounts configuration file",
)
@click.option("-v", "--verbose", count=True)
@click.option(
    "--enable-file-logging",
    "log_file",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Also write DEBUG logs to this file",
)
@click.pass_context
def main(
    ctx: click.Context, config_path: Optional[Path], verbose: int, log_file: Optional[Path]
) -> None:
    """MCP GitHub Server - multi-account GitHub tools backed by the gh CLI"""
    try:
        config = load_config(config_path)
    except GitHubMCPError as e:
        raise click.ClickException(str(e)) from e

    configure_logging(
        _log_level(config, verbose),
        log_file=log_file or config.logging.file,
        structured=config.logging.structured,
    )
    if log_file:
        logger.info(f"📝 File logging enabled: {log_file}")

    ctx.obj = config
    if ctx.invoked_subcommand is None:
        ctx.invoke(serve_command)


@main.command("serve")
@click.pass_obj
def serve_command(config: ApplicationConfig) -> None:
    """Run the MCP server over stdio (the default)"""
    from .core.handlers import CallToolHandler
    from .server import serve

    try:
        handler = CallToolHandler(config)
    except GitHubMCPError as e:
        raise click.ClickException(str(e)) from e

    asyncio.run(serve(config, handler))


@main.command("accounts")
@click.pass_obj
def accounts_command(config: ApplicationConfig) -> None:
    """List configured accounts and whether their token files exist"""
    from .github import CredentialStore

    click.echo("Configured accounts:")
    for status in CredentialStore(config).describe():
        marker = "✅" if status.token_exists else "❌"
        default = " (default)" if status.is_default else ""
        click.echo(f"  {marker} {status.name}{default}: {status.token_path}")


@main.command("test")
@click.argument("account", required=False)
@click.pass_obj
def test_command(config: ApplicationConfig, account: Optional[str]) -> None:
    """Check gh is installed and that ACCOUNT can authenticate"""
    from .github import GhGateway

    async def check() -> None:
        gateway = GhGateway(config)
        click.echo(f"gh version: {await gateway.version()}")

        name = account or config.default_account
        try:
            login = await gateway.run_raw(account, ["api", "user", "--jq", ".login"])
        except ExternalToolError as e:
            click.echo(f"❌ Account '{name}' failed to authenticate: {e}")
            return
        click.echo(f"✅ Account '{name}' authenticated as {login.strip()}")

    try:
        asyncio.run(check())
    except GitHubMCPError as e:
        raise click.ClickException(str(e)) from e


def cli() -> None:
    """Console script entry point; loads ``.env`` before options are read"""
    load_dotenv()
    main()


if __name__ == "__main__":
    cli()
