"""Tool registry and routing system for the GitHub multi-account MCP server"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, List, Optional, Type

from mcp.types import TextContent, Tool
from pydantic import BaseModel, ValidationError

from ..error_handling import ParameterValidationError, ProtocolError
from ..github import api, commands, models
from ..github.cli import GhCommand, GhGateway

logger = logging.getLogger(__name__)

Encoder = Callable[[BaseModel, Any], List[TextContent]]
CompositeHandler = Callable[[GhGateway, Any], Awaitable[List[TextContent]]]


class GitHubTools(str, Enum):
    """Enumeration of all available GitHub tools"""
    # Account
    GET_ME = "get_me"

    # Repositories
    CREATE_REPO = "create_repo"
    LIST_REPOS = "list_repos"
    GET_REPO = "get_repo"
    ARCHIVE_REPO = "archive_repo"

    # Branches and protection
    LIST_BRANCHES = "list_branches"
    CREATE_BRANCH = "create_branch"
    DELETE_BRANCH = "delete_branch"
    GET_BRANCH_PROTECTION = "get_branch_protection"
    SET_BRANCH_PROTECTION = "set_branch_protection"
    DELETE_BRANCH_PROTECTION = "delete_branch_protection"

    # Pull requests
    GET_PR = "get_pr"
    GET_PR_DIFF = "get_pr_diff"
    GET_PR_FILES = "get_pr_files"
    LIST_PRS = "list_prs"
    SEARCH_PRS = "search_prs"
    CREATE_PR = "create_pr"
    EDIT_PR = "edit_pr"
    MERGE_PR = "merge_pr"
    CLOSE_PR = "close_pr"
    COMMENT_PR = "comment_pr"

    # Code
    GET_FILE = "get_file"
    SEARCH_CODE = "search_code"
    LIST_COMMITS = "list_commits"

    # Releases and tags
    LIST_RELEASES = "list_releases"
    GET_RELEASE = "get_release"
    CREATE_RELEASE = "create_release"
    DELETE_RELEASE = "delete_release"
    LIST_RELEASE_ASSETS = "list_release_assets"
    DOWNLOAD_RELEASE_ASSET = "download_release_asset"
    LIST_TAGS = "list_tags"
    CREATE_TAG = "create_tag"
    DELETE_TAG = "delete_tag"

    # Actions
    LIST_WORKFLOW_RUNS = "list_workflow_runs"
    LIST_RUN_ARTIFACTS = "list_run_artifacts"
    DOWNLOAD_RUN_ARTIFACT = "download_run_artifact"

    # Collaborators and teams
    LIST_COLLABORATORS = "list_collaborators"
    ADD_COLLABORATOR = "add_collaborator"
    REMOVE_COLLABORATOR = "remove_collaborator"
    LIST_TEAMS = "list_teams"
    GET_TEAM_MEMBERS = "get_team_members"


class ToolCategory(str, Enum):
    """Tool categories for organization and routing"""
    ACCOUNT = "account"
    REPOSITORY = "repository"
    BRANCH = "branch"
    PULL_REQUEST = "pull_request"
    CODE = "code"
    RELEASE = "release"
    ACTIONS = "actions"
    COLLABORATION = "collaboration"


@dataclass
class ToolDefinition:
    """Complete tool definition with metadata.

    A simple tool sets ``command`` (params -> one gh invocation) and
    ``encode`` (params, gh result -> content). A composite tool sets
    ``handler`` instead and drives the gateway itself.
    """
    name: str
    category: ToolCategory
    description: str
    schema: Type[BaseModel]
    command: Optional[Callable[[Any], GhCommand]] = None
    encode: Encoder = api.encode_json
    handler: Optional[CompositeHandler] = None

    def __post_init__(self):
        if isinstance(self.name, Enum):
            self.name = self.name.value
        if (self.command is None) == (self.handler is None):
            raise ValueError(f"Tool {self.name} needs exactly one of command or handler")

    @property
    def is_composite(self) -> bool:
        return self.handler is not None


class ToolRegistry:
    """Central registry for all GitHub tools"""

    def __init__(self):
        self.tools: Dict[str, ToolDefinition] = {}
        self._initialized = False

    def register(self, tool_def: ToolDefinition):
        """Register a tool in the registry"""
        if tool_def.name in self.tools:
            raise ValueError(f"Tool already registered: {tool_def.name}")
        self.tools[tool_def.name] = tool_def
        logger.debug(f"Registered tool: {tool_def.name} ({tool_def.category.value})")

    def get_tool(self, name: str) -> Optional[ToolDefinition]:
        """Get tool definition by name"""
        return self.tools.get(name)

    def list_tools(self) -> List[Tool]:
        """Get all tools as MCP Tool objects"""
        return [
            Tool(
                name=tool_def.name,
                description=tool_def.description,
                inputSchema=tool_def.schema.model_json_schema(),
            )
            for tool_def in self.tools.values()
        ]

    def get_tools_by_category(self, category: ToolCategory) -> List[ToolDefinition]:
        """Get all tools in a specific category"""
        return [
            tool_def for tool_def in self.tools.values()
            if tool_def.category == category
        ]

    def initialize_default_tools(self):
        """Initialize registry with every GitHub tool"""
        if self._initialized:
            return

        for tool in _default_tools():
            self.register(tool)

        self._initialized = True
        logger.info(f"Initialized tool registry with {len(self.tools)} tools")


def _default_tools() -> List[ToolDefinition]:
    return [
        # Account
        ToolDefinition(
            name=GitHubTools.GET_ME,
            category=ToolCategory.ACCOUNT,
            description=(
                "Get the authenticated GitHub user's information. Use the 'account' "
                "parameter to specify which account to use (e.g., 'home', 'work'). "
                "If not specified, the default account will be used."
            ),
            schema=models.GetMe,
            command=commands.get_me,
        ),

        # Repositories
        ToolDefinition(
            name=GitHubTools.CREATE_REPO,
            category=ToolCategory.REPOSITORY,
            description="Create a new GitHub repository. Can create personal or organization repos.",
            schema=models.CreateRepo,
            command=commands.create_repo,
            encode=api.porcelain("Repository '{name}' created"),
        ),
        ToolDefinition(
            name=GitHubTools.LIST_REPOS,
            category=ToolCategory.REPOSITORY,
            description="List repositories for a user or organization. Defaults to authenticated user's repos.",
            schema=models.ListRepos,
            command=commands.list_repos,
        ),
        ToolDefinition(
            name=GitHubTools.GET_REPO,
            category=ToolCategory.REPOSITORY,
            description="Get detailed information about a specific repository.",
            schema=models.GetRepo,
            command=commands.get_repo,
        ),
        ToolDefinition(
            name=GitHubTools.ARCHIVE_REPO,
            category=ToolCategory.REPOSITORY,
            description=(
                "Archive a repository. This is a safer alternative to deletion: "
                "the repo becomes read-only but can be unarchived."
            ),
            schema=models.ArchiveRepo,
            command=commands.archive_repo,
        ),

        # Branches and protection
        ToolDefinition(
            name=GitHubTools.LIST_BRANCHES,
            category=ToolCategory.BRANCH,
            description="List all branches in a repository.",
            schema=models.ListBranches,
            command=commands.list_branches,
        ),
        ToolDefinition(
            name=GitHubTools.CREATE_BRANCH,
            category=ToolCategory.BRANCH,
            description=(
                "Create a new branch in a repository. Optionally specify a source "
                "branch/commit to branch from."
            ),
            schema=models.CreateBranch,
            handler=api.create_branch,
        ),
        ToolDefinition(
            name=GitHubTools.DELETE_BRANCH,
            category=ToolCategory.BRANCH,
            description="Delete a branch from a repository. Cannot delete the default branch.",
            schema=models.DeleteBranch,
            command=commands.delete_branch,
            encode=api.confirm("Branch '{branch}' deleted successfully"),
        ),
        ToolDefinition(
            name=GitHubTools.GET_BRANCH_PROTECTION,
            category=ToolCategory.BRANCH,
            description="Get the branch protection rules for a specific branch.",
            schema=models.GetBranchProtection,
            command=commands.get_branch_protection,
        ),
        ToolDefinition(
            name=GitHubTools.SET_BRANCH_PROTECTION,
            category=ToolCategory.BRANCH,
            description=(
                "Set branch protection rules for a branch. Includes options for "
                "required reviews, status checks, admin enforcement, etc."
            ),
            schema=models.SetBranchProtection,
            handler=api.set_branch_protection,
        ),
        ToolDefinition(
            name=GitHubTools.DELETE_BRANCH_PROTECTION,
            category=ToolCategory.BRANCH,
            description="Remove all branch protection rules from a branch.",
            schema=models.DeleteBranchProtection,
            command=commands.delete_branch_protection,
            encode=api.confirm("Branch protection removed from '{branch}'"),
        ),

        # Pull requests
        ToolDefinition(
            name=GitHubTools.GET_PR,
            category=ToolCategory.PULL_REQUEST,
            description="Get detailed information about a specific pull request.",
            schema=models.GetPr,
            command=commands.get_pr,
        ),
        ToolDefinition(
            name=GitHubTools.GET_PR_DIFF,
            category=ToolCategory.PULL_REQUEST,
            description="Get the diff/patch of a pull request.",
            schema=models.GetPrDiff,
            command=commands.get_pr_diff,
            encode=api.encode_text,
        ),
        ToolDefinition(
            name=GitHubTools.GET_PR_FILES,
            category=ToolCategory.PULL_REQUEST,
            description="Get the list of files changed in a pull request.",
            schema=models.GetPrFiles,
            command=commands.get_pr_files,
        ),
        ToolDefinition(
            name=GitHubTools.LIST_PRS,
            category=ToolCategory.PULL_REQUEST,
            description="List pull requests in a repository with optional filters.",
            schema=models.ListPrs,
            command=commands.list_prs,
        ),
        ToolDefinition(
            name=GitHubTools.SEARCH_PRS,
            category=ToolCategory.PULL_REQUEST,
            description="Search pull requests using GitHub search syntax.",
            schema=models.SearchPrs,
            command=commands.search_prs,
        ),
        ToolDefinition(
            name=GitHubTools.CREATE_PR,
            category=ToolCategory.PULL_REQUEST,
            description="Create a new pull request.",
            schema=models.CreatePr,
            command=commands.create_pr,
            encode=api.porcelain("Pull request '{title}' created"),
        ),
        ToolDefinition(
            name=GitHubTools.EDIT_PR,
            category=ToolCategory.PULL_REQUEST,
            description="Edit an existing pull request's title, body, or base branch.",
            schema=models.EditPr,
            command=commands.edit_pr,
            encode=api.porcelain("Pull request #{number} updated"),
        ),
        ToolDefinition(
            name=GitHubTools.MERGE_PR,
            category=ToolCategory.PULL_REQUEST,
            description="Merge a pull request. Supports merge, squash, and rebase methods.",
            schema=models.MergePr,
            command=commands.merge_pr,
            encode=api.porcelain("Pull request #{number} merged"),
        ),
        ToolDefinition(
            name=GitHubTools.CLOSE_PR,
            category=ToolCategory.PULL_REQUEST,
            description="Close a pull request without merging.",
            schema=models.ClosePr,
            command=commands.close_pr,
            encode=api.porcelain("Pull request #{number} closed"),
        ),
        ToolDefinition(
            name=GitHubTools.COMMENT_PR,
            category=ToolCategory.PULL_REQUEST,
            description="Add a comment to a pull request.",
            schema=models.CommentPr,
            command=commands.comment_pr,
            encode=api.porcelain("Comment added to pull request #{number}"),
        ),

        # Code
        ToolDefinition(
            name=GitHubTools.GET_FILE,
            category=ToolCategory.CODE,
            description="Get the contents of a file from a repository.",
            schema=models.GetFile,
            command=commands.get_file,
            encode=api.encode_file,
        ),
        ToolDefinition(
            name=GitHubTools.SEARCH_CODE,
            category=ToolCategory.CODE,
            description="Search code using GitHub code search syntax.",
            schema=models.SearchCode,
            command=commands.search_code,
        ),
        ToolDefinition(
            name=GitHubTools.LIST_COMMITS,
            category=ToolCategory.CODE,
            description="List commits in a repository with optional filters.",
            schema=models.ListCommits,
            command=commands.list_commits,
        ),

        # Releases and tags
        ToolDefinition(
            name=GitHubTools.LIST_RELEASES,
            category=ToolCategory.RELEASE,
            description="List releases in a repository.",
            schema=models.ListReleases,
            command=commands.list_releases,
        ),
        ToolDefinition(
            name=GitHubTools.GET_RELEASE,
            category=ToolCategory.RELEASE,
            description="Get detailed information about a specific release by tag.",
            schema=models.GetRelease,
            command=commands.get_release,
        ),
        ToolDefinition(
            name=GitHubTools.CREATE_RELEASE,
            category=ToolCategory.RELEASE,
            description="Create a new release with optional release notes.",
            schema=models.CreateRelease,
            command=commands.create_release,
            encode=api.porcelain("Release '{tag}' created"),
        ),
        ToolDefinition(
            name=GitHubTools.DELETE_RELEASE,
            category=ToolCategory.RELEASE,
            description="Delete a release by tag. Optionally delete the associated git tag.",
            schema=models.DeleteRelease,
            command=commands.delete_release,
            encode=api.confirm("Release '{tag}' deleted successfully"),
        ),
        ToolDefinition(
            name=GitHubTools.LIST_RELEASE_ASSETS,
            category=ToolCategory.RELEASE,
            description="List assets (files) attached to a release.",
            schema=models.ListReleaseAssets,
            command=commands.list_release_assets,
        ),
        ToolDefinition(
            name=GitHubTools.DOWNLOAD_RELEASE_ASSET,
            category=ToolCategory.RELEASE,
            description="Download assets from a release.",
            schema=models.DownloadReleaseAsset,
            command=commands.download_release_asset,
            encode=api.confirm("Assets from release '{tag}' downloaded successfully"),
        ),
        ToolDefinition(
            name=GitHubTools.LIST_TAGS,
            category=ToolCategory.RELEASE,
            description="List git tags in a repository.",
            schema=models.ListTags,
            command=commands.list_tags,
        ),
        ToolDefinition(
            name=GitHubTools.CREATE_TAG,
            category=ToolCategory.RELEASE,
            description="Create a new git tag pointing to a specific commit.",
            schema=models.CreateTag,
            handler=api.create_tag,
        ),
        ToolDefinition(
            name=GitHubTools.DELETE_TAG,
            category=ToolCategory.RELEASE,
            description="Delete a git tag from a repository.",
            schema=models.DeleteTag,
            command=commands.delete_tag,
            encode=api.confirm("Tag '{tag}' deleted successfully"),
        ),

        # Actions
        ToolDefinition(
            name=GitHubTools.LIST_WORKFLOW_RUNS,
            category=ToolCategory.ACTIONS,
            description="List GitHub Actions workflow runs in a repository.",
            schema=models.ListWorkflowRuns,
            command=commands.list_workflow_runs,
        ),
        ToolDefinition(
            name=GitHubTools.LIST_RUN_ARTIFACTS,
            category=ToolCategory.ACTIONS,
            description="List artifacts from a specific workflow run.",
            schema=models.ListRunArtifacts,
            command=commands.list_run_artifacts,
        ),
        ToolDefinition(
            name=GitHubTools.DOWNLOAD_RUN_ARTIFACT,
            category=ToolCategory.ACTIONS,
            description="Download artifacts from a workflow run.",
            schema=models.DownloadRunArtifact,
            command=commands.download_run_artifact,
            encode=api.confirm("Artifacts from run {run_id} downloaded successfully"),
        ),

        # Collaborators and teams
        ToolDefinition(
            name=GitHubTools.LIST_COLLABORATORS,
            category=ToolCategory.COLLABORATION,
            description="List collaborators on a repository.",
            schema=models.ListCollaborators,
            command=commands.list_collaborators,
        ),
        ToolDefinition(
            name=GitHubTools.ADD_COLLABORATOR,
            category=ToolCategory.COLLABORATION,
            description="Add a collaborator to a repository or update their permission.",
            schema=models.AddCollaborator,
            command=commands.add_collaborator,
            encode=api.encode_json_or_confirm(
                "Collaborator '{username}' added to {owner}/{repo}"
            ),
        ),
        ToolDefinition(
            name=GitHubTools.REMOVE_COLLABORATOR,
            category=ToolCategory.COLLABORATION,
            description="Remove a collaborator from a repository.",
            schema=models.RemoveCollaborator,
            command=commands.remove_collaborator,
            encode=api.confirm("Collaborator '{username}' removed from {owner}/{repo}"),
        ),
        ToolDefinition(
            name=GitHubTools.LIST_TEAMS,
            category=ToolCategory.COLLABORATION,
            description="List teams in an organization.",
            schema=models.ListTeams,
            command=commands.list_teams,
        ),
        ToolDefinition(
            name=GitHubTools.GET_TEAM_MEMBERS,
            category=ToolCategory.COLLABORATION,
            description="List members of an organization team.",
            schema=models.GetTeamMembers,
            command=commands.get_team_members,
        ),
    ]


class GitHubToolRouter:
    """Router for dispatching tool calls to their gh invocations"""

    def __init__(self, registry: ToolRegistry, gateway: GhGateway):
        self.registry = registry
        self.gateway = gateway

    def decode(self, tool_def: ToolDefinition, arguments: Optional[Dict[str, Any]]) -> BaseModel:
        """Validate raw arguments against the tool's parameter model"""
        try:
            return tool_def.schema.model_validate(arguments or {})
        except ValidationError as e:
            details = "; ".join(
                f"{'.'.join(str(part) for part in error['loc']) or 'arguments'}: {error['msg']}"
                for error in e.errors()
            )
            raise ParameterValidationError(tool_def.name, details) from e

    async def route_tool_call(
        self, name: str, arguments: Optional[Dict[str, Any]]
    ) -> List[TextContent]:
        """Route a tool call to the appropriate handler"""
        tool_def = self.registry.get_tool(name)
        if not tool_def:
            raise ProtocolError(f"Unknown tool: {name}")

        params = self.decode(tool_def, arguments)

        if tool_def.is_composite:
            return await tool_def.handler(self.gateway, params)

        command = tool_def.command(params)
        value = await self.gateway.execute(command)
        return tool_def.encode(params, value)
