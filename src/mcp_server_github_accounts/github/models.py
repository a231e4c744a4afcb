"""Pydantic parameter models for the GitHub tools"""

from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

ACCOUNT_DESCRIPTION = (
    "The account to use (e.g., 'home', 'work'). Uses default if not specified."
)


class AccountScoped(BaseModel):
    account: Optional[str] = Field(None, description=ACCOUNT_DESCRIPTION)


class RepoScoped(AccountScoped):
    owner: str = Field(..., description="Repository owner (user or organization)")
    repo: str = Field(..., description="Repository name")

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.repo}"


# Account


class GetMe(AccountScoped):
    pass


# Repositories


class CreateRepo(AccountScoped):
    name: str = Field(..., description="Name of the repository to create")
    description: Optional[str] = Field(None, description="Description of the repository")
    private: bool = Field(
        False, description="Whether the repository should be private (default: false)"
    )
    org: Optional[str] = Field(
        None, description="Organization to create the repo in (omit for personal repo)"
    )


class ListRepos(AccountScoped):
    owner: Optional[str] = Field(
        None,
        description="Owner (user or org) to list repos for. Defaults to authenticated user.",
    )
    limit: Optional[int] = Field(
        None, ge=1, description="Maximum number of repos to return (default: 30)"
    )


class GetRepo(RepoScoped):
    pass


class ArchiveRepo(RepoScoped):
    pass


# Branches


class ListBranches(RepoScoped):
    pass


class CreateBranch(RepoScoped):
    model_config = ConfigDict(populate_by_name=True)

    branch: str = Field(..., description="Name of the new branch to create")
    from_: Optional[str] = Field(
        None,
        alias="from",
        description="Source branch or commit SHA to branch from (default: HEAD)",
    )


class DeleteBranch(RepoScoped):
    branch: str = Field(..., description="Name of the branch to delete")


# Branch protection


class GetBranchProtection(RepoScoped):
    branch: str = Field(..., description="Branch name to get protection rules for")


class RequiredStatusChecks(BaseModel):
    strict: Optional[bool] = Field(
        None, description="Require branches to be up to date before merging"
    )
    contexts: Optional[List[str]] = Field(
        None, description="List of status check contexts that must pass"
    )


class RequiredPullRequestReviews(BaseModel):
    required_approving_review_count: Optional[int] = Field(
        None, ge=0, le=6, description="Number of required approving reviews"
    )
    dismiss_stale_reviews: Optional[bool] = Field(
        None, description="Dismiss stale reviews when new commits are pushed"
    )
    require_code_owner_reviews: Optional[bool] = Field(
        None, description="Require review from code owners"
    )


class SetBranchProtection(RepoScoped):
    branch: str = Field(..., description="Branch name to set protection rules for")
    required_status_checks: Optional[RequiredStatusChecks] = Field(
        None, description="Require status checks to pass before merging"
    )
    enforce_admins: Optional[bool] = Field(
        None, description="Enforce all configured restrictions for administrators"
    )
    required_pull_request_reviews: Optional[RequiredPullRequestReviews] = Field(
        None, description="Require pull request reviews before merging"
    )
    restrictions: Optional[bool] = Field(
        None,
        description="Restrict who can push to the protected branch (push restrictions are always cleared)",
    )
    required_signatures: Optional[bool] = Field(None, description="Require signed commits")
    required_linear_history: Optional[bool] = Field(
        None, description="Require linear history (no merge commits)"
    )
    allow_force_pushes: Optional[bool] = Field(None, description="Allow force pushes")
    allow_deletions: Optional[bool] = Field(None, description="Allow branch deletions")


class DeleteBranchProtection(RepoScoped):
    branch: str = Field(..., description="Branch name to remove protection from")


# Pull requests


class PullRequestRef(RepoScoped):
    number: int = Field(..., ge=1, description="Pull request number")


class GetPr(PullRequestRef):
    pass


class GetPrDiff(PullRequestRef):
    pass


class GetPrFiles(PullRequestRef):
    pass


class ListPrs(RepoScoped):
    state: Optional[Literal["open", "closed", "merged", "all"]] = Field(
        None, description="Filter by state: open, closed, merged, all (default: open)"
    )
    limit: Optional[int] = Field(
        None, ge=1, description="Maximum number of PRs to return (default: 30)"
    )
    base: Optional[str] = Field(None, description="Filter by base branch")
    head: Optional[str] = Field(None, description="Filter by head branch")


class SearchPrs(AccountScoped):
    query: str = Field(..., description="Search query using GitHub search syntax")
    limit: Optional[int] = Field(
        None, ge=1, description="Maximum number of results (default: 30)"
    )


class CreatePr(RepoScoped):
    title: str = Field(..., description="Pull request title")
    head: str = Field(..., description="Head branch containing the changes")
    body: Optional[str] = Field(None, description="Pull request body/description")
    base: Optional[str] = Field(
        None, description="Base branch to merge into (default: default branch)"
    )
    draft: bool = Field(False, description="Create as draft PR")


class EditPr(PullRequestRef):
    title: Optional[str] = Field(None, description="New title for the PR")
    body: Optional[str] = Field(None, description="New body/description for the PR")
    base: Optional[str] = Field(None, description="New base branch")


class MergePr(PullRequestRef):
    method: Optional[Literal["merge", "squash", "rebase"]] = Field(
        None, description="Merge method: merge, squash, rebase (default: merge)"
    )
    delete_branch: bool = Field(False, description="Delete the head branch after merging")
    commit_message: Optional[str] = Field(None, description="Custom commit message")


class ClosePr(PullRequestRef):
    pass


class CommentPr(PullRequestRef):
    body: str = Field(..., description="Comment body (Markdown supported)")


# Code and content


class GetFile(RepoScoped):
    path: str = Field(..., description="File path within the repository")
    ref: Optional[str] = Field(
        None,
        description="Git ref (branch, tag, or commit SHA). Defaults to default branch.",
    )


class SearchCode(AccountScoped):
    query: str = Field(..., description="Search query using GitHub code search syntax")
    limit: Optional[int] = Field(
        None, ge=1, description="Maximum number of results (default: 30)"
    )


class ListCommits(RepoScoped):
    sha: Optional[str] = Field(None, description="Branch or commit SHA to list commits from")
    path: Optional[str] = Field(None, description="File path to filter commits by")
    author: Optional[str] = Field(
        None, description="Author username or email to filter commits by"
    )
    limit: Optional[int] = Field(
        None, ge=1, description="Maximum number of commits to return (default: 30)"
    )


# Releases


class ReleaseRef(RepoScoped):
    tag: str = Field(..., description="Release tag (e.g., 'v1.0.0')")


class ListReleases(RepoScoped):
    limit: Optional[int] = Field(
        None, ge=1, description="Maximum number of releases to return (default: 30)"
    )


class GetRelease(ReleaseRef):
    pass


class CreateRelease(ReleaseRef):
    title: Optional[str] = Field(None, description="Release title")
    notes: Optional[str] = Field(None, description="Release notes/body (Markdown supported)")
    target: Optional[str] = Field(
        None, description="Target commit SHA or branch (default: default branch)"
    )
    draft: bool = Field(False, description="Create as draft release")
    prerelease: bool = Field(False, description="Mark as prerelease")
    generate_notes: bool = Field(False, description="Auto-generate release notes from commits")


class DeleteRelease(ReleaseRef):
    delete_tag: bool = Field(False, description="Also delete the associated git tag")


class ListReleaseAssets(ReleaseRef):
    pass


class DownloadReleaseAsset(ReleaseRef):
    pattern: Optional[str] = Field(
        None, description="Asset pattern to download (glob pattern, e.g., '*.tar.gz')"
    )
    dir: Optional[str] = Field(
        None, description="Directory to download assets to (default: current directory)"
    )


# Tags


class ListTags(RepoScoped):
    limit: Optional[int] = Field(
        None, ge=1, description="Maximum number of tags to return (default: 30)"
    )


class CreateTag(RepoScoped):
    tag: str = Field(..., description="Tag name (e.g., 'v1.0.0')")
    sha: Optional[str] = Field(
        None,
        description="Commit SHA or branch to tag (default: HEAD of default branch)",
    )
    message: Optional[str] = Field(
        None, description="Tag message (creates annotated tag if provided)"
    )


class DeleteTag(RepoScoped):
    tag: str = Field(..., description="Tag name to delete")


# Workflows and artifacts


class ListWorkflowRuns(RepoScoped):
    workflow: Optional[str] = Field(
        None, description="Filter by workflow name or file (e.g., 'ci.yml')"
    )
    branch: Optional[str] = Field(None, description="Filter by branch name")
    status: Optional[str] = Field(
        None, description="Filter by status: queued, in_progress, completed"
    )
    limit: Optional[int] = Field(
        None, ge=1, description="Maximum number of runs to return (default: 20)"
    )


class ListRunArtifacts(RepoScoped):
    run_id: int = Field(..., ge=1, description="Workflow run ID")


class DownloadRunArtifact(RepoScoped):
    run_id: int = Field(..., ge=1, description="Workflow run ID")
    name: Optional[str] = Field(
        None, description="Artifact name pattern to download (e.g., 'build-*')"
    )
    dir: Optional[str] = Field(
        None, description="Directory to download artifacts to (default: current directory)"
    )


# Collaborators and teams


class ListCollaborators(RepoScoped):
    affiliation: Optional[Literal["outside", "direct", "all"]] = Field(
        None, description="Filter by affiliation: outside, direct, all (default: all)"
    )


class AddCollaborator(RepoScoped):
    username: str = Field(..., description="GitHub username to add as collaborator")
    permission: Optional[Literal["pull", "push", "admin", "maintain", "triage"]] = Field(
        None,
        description="Permission level: pull, push, admin, maintain, triage (default: push)",
    )


class RemoveCollaborator(RepoScoped):
    username: str = Field(..., description="GitHub username to remove from collaborators")


class ListTeams(AccountScoped):
    org: str = Field(..., description="Organization name")
    limit: Optional[int] = Field(
        None, ge=1, description="Maximum number of teams to return (default: 30)"
    )


class GetTeamMembers(AccountScoped):
    org: str = Field(..., description="Organization name")
    team: str = Field(..., description="Team slug (the URL-friendly name of the team)")
    role: Optional[Literal["member", "maintainer", "all"]] = Field(
        None, description="Filter by role: member, maintainer, all (default: all)"
    )
