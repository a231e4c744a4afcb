"""Builders that turn validated tool parameters into gh invocations.

Every builder is pure: it maps one parameter model to one ``GhCommand`` and
never touches the process or the credential store. Optional parameters add
exactly one argument each, in a fixed order per tool, and boolean switches
only add their flag when true.
"""

from typing import List, Optional
from urllib.parse import quote, urlencode

from .cli import GhCommand, OutputMode, build_api_args
from .models import (
    AddCollaborator,
    ArchiveRepo,
    ClosePr,
    CommentPr,
    CreatePr,
    CreateRelease,
    CreateRepo,
    DeleteBranch,
    DeleteBranchProtection,
    DeleteRelease,
    DeleteTag,
    DownloadReleaseAsset,
    DownloadRunArtifact,
    EditPr,
    GetBranchProtection,
    GetFile,
    GetMe,
    GetPr,
    GetPrDiff,
    GetPrFiles,
    GetRelease,
    GetRepo,
    GetTeamMembers,
    ListBranches,
    ListCollaborators,
    ListCommits,
    ListPrs,
    ListReleaseAssets,
    ListReleases,
    ListRepos,
    ListRunArtifacts,
    ListTags,
    ListTeams,
    ListWorkflowRuns,
    MergePr,
    RemoveCollaborator,
    SearchCode,
    SearchPrs,
)

REPO_LIST_FIELDS = "name,description,visibility,updatedAt,url"
REPO_VIEW_FIELDS = (
    "name,description,visibility,defaultBranchRef,url,createdAt,updatedAt,"
    "owner,stargazerCount,forkCount,issues,pullRequests"
)
PR_VIEW_FIELDS = (
    "number,title,state,body,author,createdAt,updatedAt,url,headRefName,"
    "baseRefName,mergeable,additions,deletions,changedFiles"
)
PR_LIST_FIELDS = (
    "number,title,state,author,createdAt,updatedAt,url,headRefName,baseRefName"
)
PR_SEARCH_FIELDS = "number,title,state,author,repository,createdAt,updatedAt,url"
CODE_SEARCH_FIELDS = "path,repository,textMatches"
RELEASE_LIST_FIELDS = (
    "createdAt,isDraft,isLatest,isPrerelease,name,publishedAt,tagName"
)
RELEASE_VIEW_FIELDS = (
    "tagName,name,body,author,createdAt,publishedAt,isDraft,isPrerelease,assets,url"
)
RUN_LIST_FIELDS = (
    "databaseId,workflowName,status,conclusion,headBranch,event,createdAt,url"
)


def _option(args: List[str], flag: str, value: Optional[object]) -> None:
    if value is not None:
        args.append(f"{flag}={value}")


def _switch(args: List[str], flag: str, enabled: bool) -> None:
    if enabled:
        args.append(flag)


def _limit(args: List[str], limit: Optional[int]) -> None:
    if limit is not None:
        args.extend(["--limit", str(limit)])


def _with_query(endpoint: str, **params) -> str:
    query = urlencode({k: v for k, v in params.items() if v is not None})
    return f"{endpoint}?{query}" if query else endpoint


def _api(
    account: Optional[str],
    endpoint: str,
    method: Optional[str] = None,
    fields=None,
    typed_fields=None,
) -> GhCommand:
    return GhCommand(build_api_args(endpoint, method, fields, typed_fields), account)


def _structured(account: Optional[str], args: List[str]) -> GhCommand:
    return GhCommand(args, account, OutputMode.STRUCTURED)


def _raw(account: Optional[str], args: List[str]) -> GhCommand:
    return GhCommand(args, account, OutputMode.RAW)


# Account


def get_me(params: GetMe) -> GhCommand:
    return _api(params.account, "user")


# Repositories


def create_repo(params: CreateRepo) -> GhCommand:
    full_name = f"{params.org}/{params.name}" if params.org else params.name
    args = ["repo", "create", full_name]
    _option(args, "--description", params.description)
    args.append("--private" if params.private else "--public")
    return _raw(params.account, args)


def list_repos(params: ListRepos) -> GhCommand:
    args = ["repo", "list"]
    if params.owner:
        args.append(params.owner)
    _limit(args, params.limit)
    args.extend(["--json", REPO_LIST_FIELDS])
    return _structured(params.account, args)


def get_repo(params: GetRepo) -> GhCommand:
    args = ["repo", "view", params.full_name, "--json", REPO_VIEW_FIELDS]
    return _structured(params.account, args)


def archive_repo(params: ArchiveRepo) -> GhCommand:
    return _api(
        params.account,
        f"repos/{params.full_name}",
        method="PATCH",
        typed_fields=[("archived", True)],
    )


# Branches


def list_branches(params: ListBranches) -> GhCommand:
    return _api(params.account, f"repos/{params.full_name}/branches")


def delete_branch(params: DeleteBranch) -> GhCommand:
    return _api(
        params.account,
        f"repos/{params.full_name}/git/refs/heads/{params.branch}",
        method="DELETE",
    )


def get_branch_protection(params: GetBranchProtection) -> GhCommand:
    return _api(
        params.account,
        f"repos/{params.full_name}/branches/{params.branch}/protection",
    )


def delete_branch_protection(params: DeleteBranchProtection) -> GhCommand:
    return _api(
        params.account,
        f"repos/{params.full_name}/branches/{params.branch}/protection",
        method="DELETE",
    )


# Pull requests


def get_pr(params: GetPr) -> GhCommand:
    args = [
        "pr", "view", str(params.number),
        "--repo", params.full_name,
        "--json", PR_VIEW_FIELDS,
    ]
    return _structured(params.account, args)


def get_pr_diff(params: GetPrDiff) -> GhCommand:
    args = ["pr", "diff", str(params.number), "--repo", params.full_name]
    return _raw(params.account, args)


def get_pr_files(params: GetPrFiles) -> GhCommand:
    args = [
        "pr", "view", str(params.number),
        "--repo", params.full_name,
        "--json", "files",
    ]
    return _structured(params.account, args)


def list_prs(params: ListPrs) -> GhCommand:
    args = ["pr", "list", "--repo", params.full_name]
    _option(args, "--state", params.state)
    _limit(args, params.limit)
    _option(args, "--base", params.base)
    _option(args, "--head", params.head)
    args.extend(["--json", PR_LIST_FIELDS])
    return _structured(params.account, args)


def search_prs(params: SearchPrs) -> GhCommand:
    args = ["search", "prs", params.query]
    _limit(args, params.limit)
    args.extend(["--json", PR_SEARCH_FIELDS])
    return _structured(params.account, args)


def create_pr(params: CreatePr) -> GhCommand:
    args = [
        "pr", "create",
        "--repo", params.full_name,
        "--title", params.title,
        "--head", params.head,
    ]
    _option(args, "--body", params.body)
    _option(args, "--base", params.base)
    _switch(args, "--draft", params.draft)
    return _raw(params.account, args)


def edit_pr(params: EditPr) -> GhCommand:
    args = ["pr", "edit", str(params.number), "--repo", params.full_name]
    _option(args, "--title", params.title)
    _option(args, "--body", params.body)
    _option(args, "--base", params.base)
    return _raw(params.account, args)


def merge_pr(params: MergePr) -> GhCommand:
    args = ["pr", "merge", str(params.number), "--repo", params.full_name]
    args.append(f"--{params.method or 'merge'}")
    _switch(args, "--delete-branch", params.delete_branch)
    _option(args, "--body", params.commit_message)
    return _raw(params.account, args)


def close_pr(params: ClosePr) -> GhCommand:
    args = ["pr", "close", str(params.number), "--repo", params.full_name]
    return _raw(params.account, args)


def comment_pr(params: CommentPr) -> GhCommand:
    args = [
        "pr", "comment", str(params.number),
        "--repo", params.full_name,
        "--body", params.body,
    ]
    return _raw(params.account, args)


# Code and content


def get_file(params: GetFile) -> GhCommand:
    endpoint = _with_query(
        f"repos/{params.full_name}/contents/{quote(params.path)}", ref=params.ref
    )
    return _api(params.account, endpoint)


def search_code(params: SearchCode) -> GhCommand:
    args = ["search", "code", params.query]
    _limit(args, params.limit)
    args.extend(["--json", CODE_SEARCH_FIELDS])
    return _structured(params.account, args)


def list_commits(params: ListCommits) -> GhCommand:
    endpoint = _with_query(
        f"repos/{params.full_name}/commits",
        sha=params.sha,
        path=params.path,
        author=params.author,
        per_page=params.limit,
    )
    return _api(params.account, endpoint)


# Releases


def list_releases(params: ListReleases) -> GhCommand:
    args = ["release", "list", "--repo", params.full_name]
    _limit(args, params.limit)
    args.extend(["--json", RELEASE_LIST_FIELDS])
    return _structured(params.account, args)


def get_release(params: GetRelease) -> GhCommand:
    args = [
        "release", "view", params.tag,
        "--repo", params.full_name,
        "--json", RELEASE_VIEW_FIELDS,
    ]
    return _structured(params.account, args)


def create_release(params: CreateRelease) -> GhCommand:
    args = ["release", "create", params.tag, "--repo", params.full_name]
    _option(args, "--title", params.title)
    _option(args, "--notes", params.notes)
    _option(args, "--target", params.target)
    _switch(args, "--draft", params.draft)
    _switch(args, "--prerelease", params.prerelease)
    _switch(args, "--generate-notes", params.generate_notes)
    return _raw(params.account, args)


def delete_release(params: DeleteRelease) -> GhCommand:
    args = ["release", "delete", params.tag, "--repo", params.full_name, "--yes"]
    _switch(args, "--cleanup-tag", params.delete_tag)
    return _raw(params.account, args)


def list_release_assets(params: ListReleaseAssets) -> GhCommand:
    args = [
        "release", "view", params.tag,
        "--repo", params.full_name,
        "--json", "assets",
    ]
    return _structured(params.account, args)


def download_release_asset(params: DownloadReleaseAsset) -> GhCommand:
    args = ["release", "download", params.tag, "--repo", params.full_name]
    _option(args, "--pattern", params.pattern)
    _option(args, "--dir", params.dir)
    return _raw(params.account, args)


# Tags


def list_tags(params: ListTags) -> GhCommand:
    endpoint = _with_query(f"repos/{params.full_name}/tags", per_page=params.limit)
    return _api(params.account, endpoint)


def delete_tag(params: DeleteTag) -> GhCommand:
    return _api(
        params.account,
        f"repos/{params.full_name}/git/refs/tags/{params.tag}",
        method="DELETE",
    )


# Workflows and artifacts


def list_workflow_runs(params: ListWorkflowRuns) -> GhCommand:
    args = ["run", "list", "--repo", params.full_name]
    _option(args, "--workflow", params.workflow)
    _option(args, "--branch", params.branch)
    _option(args, "--status", params.status)
    _limit(args, params.limit)
    args.extend(["--json", RUN_LIST_FIELDS])
    return _structured(params.account, args)


def list_run_artifacts(params: ListRunArtifacts) -> GhCommand:
    return _api(
        params.account,
        f"repos/{params.full_name}/actions/runs/{params.run_id}/artifacts",
    )


def download_run_artifact(params: DownloadRunArtifact) -> GhCommand:
    args = ["run", "download", str(params.run_id), "--repo", params.full_name]
    _option(args, "--name", params.name)
    _option(args, "--dir", params.dir)
    return _raw(params.account, args)


# Collaborators and teams


def list_collaborators(params: ListCollaborators) -> GhCommand:
    endpoint = _with_query(
        f"repos/{params.full_name}/collaborators", affiliation=params.affiliation
    )
    return _api(params.account, endpoint)


def add_collaborator(params: AddCollaborator) -> GhCommand:
    fields = [("permission", params.permission)] if params.permission else None
    return _api(
        params.account,
        f"repos/{params.full_name}/collaborators/{params.username}",
        method="PUT",
        fields=fields,
    )


def remove_collaborator(params: RemoveCollaborator) -> GhCommand:
    return _api(
        params.account,
        f"repos/{params.full_name}/collaborators/{params.username}",
        method="DELETE",
    )


def list_teams(params: ListTeams) -> GhCommand:
    endpoint = _with_query(f"orgs/{params.org}/teams", per_page=params.limit)
    return _api(params.account, endpoint)


def get_team_members(params: GetTeamMembers) -> GhCommand:
    endpoint = _with_query(
        f"orgs/{params.org}/teams/{params.team}/members", role=params.role
    )
    return _api(params.account, endpoint)
