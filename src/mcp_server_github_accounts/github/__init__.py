"""gh-backed GitHub access: credentials, the process gateway and tool operations"""

from .cli import CommandOutcome, GhCommand, GhGateway, OutputMode, build_api_args
from .credentials import AccountStatus, CredentialStore

__all__ = [
    "AccountStatus",
    "CommandOutcome",
    "CredentialStore",
    "GhCommand",
    "GhGateway",
    "OutputMode",
    "build_api_args",
]
