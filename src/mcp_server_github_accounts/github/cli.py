"""GitHub CLI gateway: runs gh with a per-call account token"""

import asyncio
import json
import logging
import os
import shutil
from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable, Mapping, Optional, Sequence, Tuple, Union

from ..configuration import ApplicationConfig
from ..error_handling import ExternalToolError, MalformedOutput, ToolNotInstalled
from .credentials import CredentialStore

logger = logging.getLogger(__name__)

Fields = Union[Mapping[str, Any], Iterable[Tuple[str, Any]]]

# Marker for an explicitly empty JSON array in typed fields
EMPTY_ARRAY = object()


class OutputMode(str, Enum):
    """How gh's stdout is interpreted on success"""

    STRUCTURED = "structured"
    RAW = "raw"


@dataclass(frozen=True)
class GhCommand:
    """One gh invocation: arguments, the account whose token to inject, output mode."""

    args: Tuple[str, ...]
    account: Optional[str] = None
    output: OutputMode = OutputMode.STRUCTURED

    def __post_init__(self):
        object.__setattr__(self, "args", tuple(self.args))


@dataclass(frozen=True)
class CommandOutcome:
    returncode: int
    stdout: str
    stderr: str

    @property
    def succeeded(self) -> bool:
        return self.returncode == 0

    @property
    def diagnostic(self) -> str:
        """stderr if it has anything to say, otherwise stdout"""
        message = self.stderr if self.stderr.strip() else self.stdout
        return message.strip()

    def check(self) -> "CommandOutcome":
        if not self.succeeded:
            raise ExternalToolError(self.diagnostic, returncode=self.returncode)
        return self


def _render(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return "null"
    return str(value)


def _pairs(fields: Optional[Fields]) -> list:
    if not fields:
        return []
    if isinstance(fields, Mapping):
        return list(fields.items())
    return list(fields)


def build_api_args(
    endpoint: str,
    method: Optional[str] = None,
    fields: Optional[Fields] = None,
    typed_fields: Optional[Fields] = None,
    headers: Sequence[str] = (),
) -> list:
    """Assemble ``gh api`` arguments.

    Order is fixed: ``api``, ``-X METHOD``, endpoint, ``-H`` headers, raw
    ``-f`` fields, then typed ``-F`` fields. Fields are ordered pairs so
    repeated keys survive. A typed field whose value is ``EMPTY_ARRAY`` is
    passed as a bare ``key[]``, which gh sends as ``[]``.
    """
    args = ["api"]
    if method:
        args.extend(["-X", method.upper()])
    args.append(endpoint)
    for header in headers:
        args.extend(["-H", header])
    for key, value in _pairs(fields):
        args.extend(["-f", f"{key}={_render(value)}"])
    for key, value in _pairs(typed_fields):
        if value is EMPTY_ARRAY:
            args.extend(["-F", f"{key}[]"])
        else:
            args.extend(["-F", f"{key}={_render(value)}"])
    return args


def parse_output(stdout: str, mode: OutputMode) -> Any:
    """Interpret successful gh output according to ``mode``"""
    if mode == OutputMode.RAW:
        return stdout

    if not stdout.strip():
        # Deletions and other side-effect-only calls print nothing
        return None

    try:
        return json.loads(stdout)
    except json.JSONDecodeError as e:
        raise MalformedOutput(e, stdout) from e


class GhGateway:
    """Executes gh commands with account-specific tokens.

    The token is passed to the child through ``GH_TOKEN`` in an environment
    built for that one process; ``os.environ`` is never touched.
    """

    def __init__(
        self,
        config: ApplicationConfig,
        credentials: Optional[CredentialStore] = None,
    ):
        executable = shutil.which(config.gh_path)
        if executable is None:
            raise ToolNotInstalled(config.gh_path)

        self.config = config
        self.credentials = credentials or CredentialStore(config)
        self.executable = executable
        self.timeout = config.command_timeout
        logger.debug(f"Using gh executable at {executable}")

    def _child_env(self, token: Optional[str]) -> dict:
        env = dict(os.environ)
        env["NO_COLOR"] = "1"
        env["GH_PROMPT_DISABLED"] = "1"
        if token is not None:
            env["GH_TOKEN"] = token
        return env

    async def _spawn(self, args: Sequence[str], token: Optional[str]) -> CommandOutcome:
        process = await asyncio.create_subprocess_exec(
            self.executable,
            *args,
            stdin=asyncio.subprocess.DEVNULL,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            env=self._child_env(token),
        )

        try:
            stdout, stderr = await asyncio.wait_for(
                process.communicate(), timeout=self.timeout
            )
        except asyncio.TimeoutError:
            await _terminate(process)
            raise ExternalToolError(
                f"gh command timed out after {self.timeout:g}s"
            ) from None
        except asyncio.CancelledError:
            await _terminate(process)
            raise

        return CommandOutcome(
            returncode=process.returncode,
            stdout=stdout.decode("utf-8", errors="replace"),
            stderr=stderr.decode("utf-8", errors="replace"),
        )

    async def execute(self, command: GhCommand) -> Any:
        """Run ``command`` and return parsed JSON, ``None``, or raw text.

        Credential errors are raised before any process is started.
        """
        token = self.credentials.resolve(command.account)

        logger.debug(
            f"Running gh command with account {command.account or 'default'}"
            f" ({command.output.value}): gh {' '.join(command.args)}",
            extra={"account": command.account or self.config.default_account},
        )

        outcome = await self._spawn(command.args, token)
        outcome.check()
        return parse_output(outcome.stdout, command.output)

    async def run(self, account: Optional[str], args: Sequence[str]) -> Any:
        """Run a gh command and parse its JSON output"""
        return await self.execute(GhCommand(tuple(args), account, OutputMode.STRUCTURED))

    async def run_raw(self, account: Optional[str], args: Sequence[str]) -> str:
        """Run a gh command and return stdout untouched (diffs, URLs)"""
        return await self.execute(GhCommand(tuple(args), account, OutputMode.RAW))

    async def api(
        self,
        account: Optional[str],
        endpoint: str,
        method: Optional[str] = None,
        fields: Optional[Fields] = None,
        typed_fields: Optional[Fields] = None,
        headers: Sequence[str] = (),
    ) -> Any:
        """Run ``gh api`` against ``endpoint`` with optional method and fields"""
        args = build_api_args(endpoint, method, fields, typed_fields, headers)
        return await self.run(account, args)

    async def version(self) -> str:
        """First line of ``gh --version``; needs no credential"""
        outcome = await self._spawn(["--version"], None)
        if not outcome.succeeded:
            raise ExternalToolError("Failed to get gh version", outcome.returncode)
        lines = outcome.stdout.splitlines()
        return lines[0] if lines else "unknown"


async def _terminate(process: asyncio.subprocess.Process) -> None:
    if process.returncode is None:
        try:
            process.kill()
        except ProcessLookupError:
            pass
    await process.wait()
