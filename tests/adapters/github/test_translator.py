from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING

from repotimeline.adapters.github import (
    translate_commit,
    translate_issue,
    translate_pull_request,
    translate_release,
)
from repotimeline.adapters.github.schema import (
    GitHubCommit,
    GitHubIssue,
    GitHubPullRequest,
    GitHubRelease,
)
from repotimeline.domain.model import EventType, ImpactMetrics
from tests.helpers.events import FIXED_NOW

if TYPE_CHECKING:
    from tests.conftest import GitHubPayload

MERGE_SHA = "a1b2c3d4e5f60718293a4b5c6d7e8f9012345678"


def test_merged_pull_request(github_pulls_payload: GitHubPayload) -> None:
    pull = GitHubPullRequest.model_validate(github_pulls_payload[0])

    event = translate_pull_request(pull, ingested_at=FIXED_NOW)

    assert event.id == "pr-12"
    assert event.canonical_id == "github:pr-12"
    assert event.provider_id == "github"
    assert event.type is EventType.PR_MERGED
    assert event.state == "merged"
    assert event.timestamp == datetime(2024, 3, 1, 12, 0, tzinfo=UTC)
    assert event.ingested_at == FIXED_NOW
    assert event.pull_request_number == 12
    assert event.branches == ("feature/export",)
    assert event.labels == ("feature",)
    assert event.author.id == "octocat"
    assert event.author.avatar_url == "https://avatars.example/octocat.png"
    assert event.refs.sha == MERGE_SHA
    assert event.refs.base_sha == "0011223344556677889900aabbccddeeff001122"
    assert event.metadata["headRef"] == "feature/export"
    assert event.metadata["baseRef"] == "main"
    assert event.metadata["draft"] is False


def test_open_pull_request_without_user(github_pulls_payload: GitHubPayload) -> None:
    pull = GitHubPullRequest.model_validate(github_pulls_payload[1])

    event = translate_pull_request(pull)

    assert event.type is EventType.PR_OPENED
    assert event.state == "open"
    assert event.timestamp == datetime(2024, 3, 5, 8, 30, tzinfo=UTC)
    assert event.author.id == "ghost"
    assert event.description is None
    assert event.refs.sha is None
    assert event.impact is None


def test_release_on_branch_has_no_commit(github_releases_payload: GitHubPayload) -> None:
    release = GitHubRelease.model_validate(github_releases_payload[0])

    event = translate_release(release)

    assert event.id == "release-901"
    assert event.type is EventType.RELEASE
    assert event.title == "Widgets 1.2.0"
    assert event.tags == ("v1.2.0",)
    assert event.timestamp == datetime(2024, 3, 2, 10, 15, tzinfo=UTC)
    assert event.hash is None
    assert event.refs.tag_name == "v1.2.0"
    assert event.refs.target_commit is None
    assert event.metadata["target_commitish"] == "main"
    assert event.state == "published"


def test_unpublished_release_on_commit(github_releases_payload: GitHubPayload) -> None:
    release = GitHubRelease.model_validate(github_releases_payload[1])

    event = translate_release(release)

    assert event.title == "v1.1.0"
    assert event.timestamp == datetime(2024, 2, 1, 10, 0, tzinfo=UTC)
    assert event.hash == "0f1e2d3c4b5a69788796a5b4c3d2e1f001234567"
    assert event.refs.target_commit == event.hash
    assert event.metadata["prerelease"] is True
    assert event.author.id == "ghost"


def test_issues(github_issues_payload: GitHubPayload) -> None:
    opened = translate_issue(GitHubIssue.model_validate(github_issues_payload[0]))
    closed = translate_issue(GitHubIssue.model_validate(github_issues_payload[2]))

    assert opened.id == "issue-20"
    assert opened.type is EventType.ISSUE_OPENED
    assert opened.labels == ("bug",)
    assert opened.issue_number == 20
    assert opened.metadata["comments"] == 3
    assert closed.type is EventType.ISSUE_CLOSED
    assert closed.timestamp == datetime(2024, 2, 28, 16, 45, tzinfo=UTC)
    assert closed.description is None


def test_merge_commit(github_commits_payload: GitHubPayload) -> None:
    commit = GitHubCommit.model_validate(github_commits_payload[0])

    event = translate_commit(commit)

    assert event.id == MERGE_SHA
    assert event.canonical_id == f"github:{MERGE_SHA}"
    assert event.type is EventType.MERGE
    assert event.title == "Merge pull request #12 from octo/feature/export"
    assert event.description == "Add widget export"
    assert event.hash == event.full_hash == MERGE_SHA
    assert len(event.parent_ids) == 2
    assert event.author.id == "octocat"
    assert event.author.name == "Octo Cat"
    assert event.metadata["isMerge"] is True
    assert event.metadata["committer"] == {
        "name": "GitHub",
        "email": "noreply@github.com",
        "date": "2024-03-01T12:00:00+00:00",
    }


def test_commit_without_linked_account(github_commits_payload: GitHubPayload) -> None:
    commit = GitHubCommit.model_validate(github_commits_payload[1])

    event = translate_commit(commit)

    assert event.type is EventType.COMMIT
    assert event.author.id == "hubot@example.com"
    assert event.author.username is None
    assert event.timestamp == datetime(2024, 2, 29, 17, 20, tzinfo=UTC)
    assert event.impact == ImpactMetrics(lines_added=4, lines_removed=1)
    assert event.description is None
