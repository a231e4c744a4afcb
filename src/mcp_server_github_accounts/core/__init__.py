from .handlers import CallToolHandler
from .tools import GitHubToolRouter, GitHubTools, ToolCategory, ToolDefinition, ToolRegistry

__all__ = [
    "CallToolHandler",
    "GitHubToolRouter",
    "GitHubTools",
    "ToolCategory",
    "ToolDefinition",
    "ToolRegistry",
]
