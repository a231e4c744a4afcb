"""Tests for the gh argument builders."""

import pytest

from mcp_server_github_accounts.github import OutputMode
from mcp_server_github_accounts.github import commands, models

REPO = {"owner": "octo", "repo": "hello"}


def build(builder, model, **arguments):
    return builder(model.model_validate(arguments))


class TestRepositories:
    def test_create_repo_minimal(self):
        command = build(commands.create_repo, models.CreateRepo, name="proj")

        assert command.args == ("repo", "create", "proj", "--public")
        assert command.output == OutputMode.RAW

    def test_create_repo_in_org(self):
        command = build(
            commands.create_repo,
            models.CreateRepo,
            name="proj",
            org="acme",
            description="A project",
            private=True,
            account="work",
        )

        assert command.args == (
            "repo", "create", "acme/proj", "--description=A project", "--private",
        )
        assert command.account == "work"

    def test_list_repos(self):
        command = build(commands.list_repos, models.ListRepos, owner="acme", limit=5)

        assert command.args == (
            "repo", "list", "acme", "--limit", "5",
            "--json", "name,description,visibility,updatedAt,url",
        )

    def test_archive_repo_sends_typed_boolean(self):
        command = build(commands.archive_repo, models.ArchiveRepo, **REPO)

        assert command.args == (
            "api", "-X", "PATCH", "repos/octo/hello", "-F", "archived=true",
        )


class TestPullRequests:
    def test_list_prs_without_optionals(self):
        command = build(commands.list_prs, models.ListPrs, **REPO)

        assert command.args[:4] == ("pr", "list", "--repo", "octo/hello")
        assert command.args[4] == "--json"

    def test_list_prs_flag_order_is_fixed(self):
        command = build(
            commands.list_prs,
            models.ListPrs,
            head="feature",
            base="main",
            limit=10,
            state="closed",
            **REPO,
        )

        assert command.args[:10] == (
            "pr", "list", "--repo", "octo/hello",
            "--state=closed", "--limit", "10", "--base=main", "--head=feature",
            "--json",
        )

    def test_builders_are_deterministic(self):
        arguments = dict(title="T", head="h", body="B", base="main", draft=True, **REPO)

        first = build(commands.create_pr, models.CreatePr, **arguments)
        second = build(commands.create_pr, models.CreatePr, **arguments)

        assert first == second
        assert first.args == (
            "pr", "create", "--repo", "octo/hello", "--title", "T", "--head", "h",
            "--body=B", "--base=main", "--draft",
        )

    def test_draft_false_adds_nothing(self):
        command = build(commands.create_pr, models.CreatePr, title="T", head="h", **REPO)

        assert "--draft" not in command.args

    @pytest.mark.parametrize(
        "method,flag", [(None, "--merge"), ("squash", "--squash"), ("rebase", "--rebase")]
    )
    def test_merge_method(self, method, flag):
        command = build(commands.merge_pr, models.MergePr, number=3, method=method, **REPO)

        assert command.args == ("pr", "merge", "3", "--repo", "octo/hello", flag)

    def test_merge_with_branch_delete_and_message(self):
        command = build(
            commands.merge_pr,
            models.MergePr,
            number=3,
            delete_branch=True,
            commit_message="Ship it",
            **REPO,
        )

        assert command.args[-2:] == ("--delete-branch", "--body=Ship it")

    def test_pr_diff_is_raw(self):
        command = build(commands.get_pr_diff, models.GetPrDiff, number=9, **REPO)

        assert command.args == ("pr", "diff", "9", "--repo", "octo/hello")
        assert command.output == OutputMode.RAW

    def test_comment_body_is_a_separate_argument(self):
        command = build(
            commands.comment_pr, models.CommentPr, number=2, body="--not-a-flag", **REPO
        )

        assert command.args[-2:] == ("--body", "--not-a-flag")


class TestContent:
    def test_get_file_with_ref_is_url_encoded(self):
        command = build(
            commands.get_file, models.GetFile, path="src/app.py", ref="feature/x y", **REPO
        )

        assert command.args == ("api", "repos/octo/hello/contents/src/app.py?ref=feature%2Fx+y")

    def test_get_file_path_is_quoted(self):
        command = build(commands.get_file, models.GetFile, path="docs/what?#100%.md", **REPO)

        assert command.args == ("api", "repos/octo/hello/contents/docs/what%3F%23100%25.md")

    def test_list_commits_query_order(self):
        command = build(
            commands.list_commits,
            models.ListCommits,
            limit=5,
            author="me",
            sha="main",
            **REPO,
        )

        assert command.args == ("api", "repos/octo/hello/commits?sha=main&author=me&per_page=5")

    def test_list_commits_without_filters(self):
        command = build(commands.list_commits, models.ListCommits, **REPO)

        assert command.args == ("api", "repos/octo/hello/commits")


class TestReleasesAndTags:
    def test_create_release_flags(self):
        command = build(
            commands.create_release,
            models.CreateRelease,
            tag="v1.0.0",
            title="One",
            notes="Notes",
            target="main",
            draft=True,
            prerelease=True,
            generate_notes=True,
            **REPO,
        )

        assert command.args == (
            "release", "create", "v1.0.0", "--repo", "octo/hello",
            "--title=One", "--notes=Notes", "--target=main",
            "--draft", "--prerelease", "--generate-notes",
        )

    def test_delete_release_cleanup_tag(self):
        command = build(
            commands.delete_release, models.DeleteRelease, tag="v1", delete_tag=True, **REPO
        )

        assert command.args == (
            "release", "delete", "v1", "--repo", "octo/hello", "--yes", "--cleanup-tag",
        )

    def test_list_tags_limit(self):
        command = build(commands.list_tags, models.ListTags, limit=3, **REPO)

        assert command.args == ("api", "repos/octo/hello/tags?per_page=3")

    def test_delete_tag(self):
        command = build(commands.delete_tag, models.DeleteTag, tag="v1", **REPO)

        assert command.args == ("api", "-X", "DELETE", "repos/octo/hello/git/refs/tags/v1")


class TestActionsAndTeams:
    def test_list_workflow_runs_flag_order(self):
        command = build(
            commands.list_workflow_runs,
            models.ListWorkflowRuns,
            limit=2,
            status="completed",
            branch="main",
            workflow="ci.yml",
            **REPO,
        )

        assert command.args[4:10] == (
            "--workflow=ci.yml", "--branch=main", "--status=completed", "--limit", "2", "--json",
        )

    def test_download_run_artifact(self):
        command = build(
            commands.download_run_artifact,
            models.DownloadRunArtifact,
            run_id=42,
            name="build-*",
            dir="/tmp/out",
            **REPO,
        )

        assert command.args == (
            "run", "download", "42", "--repo", "octo/hello", "--name=build-*", "--dir=/tmp/out",
        )

    def test_add_collaborator_permission(self):
        command = build(
            commands.add_collaborator,
            models.AddCollaborator,
            username="alice",
            permission="maintain",
            **REPO,
        )

        assert command.args == (
            "api", "-X", "PUT", "repos/octo/hello/collaborators/alice", "-f", "permission=maintain",
        )

    def test_team_members_role(self):
        command = build(
            commands.get_team_members, models.GetTeamMembers, org="acme", team="core", role="maintainer"
        )

        assert command.args == ("api", "orgs/acme/teams/core/members?role=maintainer")
