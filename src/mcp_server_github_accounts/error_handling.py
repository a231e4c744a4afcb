"""Error taxonomy and classification for the GitHub multi-account MCP server."""

import logging
import time
from enum import Enum
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)


class ErrorSeverity(Enum):
    """Classification of error severity levels."""

    CRITICAL = "critical"  # Unexpected failure inside the server
    HIGH = "high"  # Credential, configuration or tool-presence problem
    MEDIUM = "medium"  # gh ran but failed, or its output was unusable
    LOW = "low"  # Caller sent bad parameters


class GitHubMCPError(Exception):
    """Base class for every error surfaced to the MCP client.

    Only ``message`` ever leaves the process; it must never contain a token.
    """

    severity = ErrorSeverity.HIGH

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


class ConfigError(GitHubMCPError):
    """Configuration file could not be read or validated."""

    def __init__(self, detail: str):
        super().__init__(f"Configuration error: {detail}")
        self.detail = detail


class AccountNotFound(GitHubMCPError):
    def __init__(self, name: str):
        super().__init__(f"Account not found: {name}")
        self.name = name


class TokenNotFound(GitHubMCPError):
    def __init__(self, path: str):
        super().__init__(f"Token file not found: {path}")
        self.path = path


class TokenReadError(GitHubMCPError):
    """Token file exists but is unreadable or empty after trimming."""

    def __init__(self, path: str, cause: Any):
        super().__init__(f"Token file read error: {path}: {cause}")
        self.path = path
        self.cause = cause


class ToolNotInstalled(GitHubMCPError):
    def __init__(self, executable: str = "gh"):
        super().__init__(
            f"{executable} CLI not found. Install from https://cli.github.com"
        )
        self.executable = executable


class ExternalToolError(GitHubMCPError):
    """gh exited non-zero. The message is the trimmed diagnostic text as-is."""

    severity = ErrorSeverity.MEDIUM

    def __init__(self, message: str, returncode: Optional[int] = None):
        super().__init__(message)
        self.returncode = returncode


class MalformedOutput(GitHubMCPError):
    """gh succeeded but its stdout was not valid JSON."""

    severity = ErrorSeverity.MEDIUM
    PREVIEW_CHARS = 200

    def __init__(self, cause: Any, output: str):
        preview = output[: self.PREVIEW_CHARS]
        super().__init__(
            f"Failed to parse gh output as JSON: {cause}\nOutput: {preview}"
        )
        self.cause = cause
        self.output_preview = preview


class ParameterValidationError(GitHubMCPError):
    """Tool arguments did not match the tool's parameter schema."""

    severity = ErrorSeverity.LOW

    def __init__(self, tool: str, detail: str):
        super().__init__(f"Invalid arguments for {tool}: {detail}")
        self.tool = tool
        self.detail = detail


class ProtocolError(GitHubMCPError):
    """Transport-level wrapper carrying only a message back to the client."""

    severity = ErrorSeverity.LOW


class ErrorContext:
    """Context information about a failed tool call, used for logging."""

    def __init__(
        self,
        error: Exception,
        severity: ErrorSeverity = ErrorSeverity.MEDIUM,
        operation: str = "",
        request_id: Optional[str] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ):
        self.error = error
        self.severity = severity
        self.operation = operation
        self.request_id = request_id
        self.metadata = metadata or {}
        self.error_time = time.time()

    @property
    def message(self) -> str:
        return str(self.error)


def classify_error(
    error: Exception, operation: str = "", request_id: Optional[str] = None
) -> ErrorContext:
    """
    Classify an error and create an appropriate ErrorContext.

    Args:
        error: The exception that occurred
        operation: The tool during which the error occurred
        request_id: Per-call identifier used in log lines

    Returns:
        ErrorContext with the severity of the error's class, or CRITICAL for
        anything outside the GitHubMCPError hierarchy
    """
    if isinstance(error, GitHubMCPError):
        severity = error.severity
    else:
        severity = ErrorSeverity.CRITICAL

    return ErrorContext(
        error=error,
        severity=severity,
        operation=operation,
        request_id=request_id,
        metadata={"error_type": type(error).__name__},
    )


def log_error(context: ErrorContext) -> None:
    """Log a classified error at a level matching its severity."""
    extra = {"request_id": context.request_id, "tool": context.operation}
    text = f"{context.severity.value.upper()} error in {context.operation}: {context.message}"

    if context.severity == ErrorSeverity.CRITICAL:
        logger.error(text, exc_info=context.error, extra=extra)
    elif context.severity == ErrorSeverity.HIGH:
        logger.error(text, extra=extra)
    else:
        logger.warning(text, extra=extra)
