"""GitHub event provider."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from logging import getLogger
from typing import TYPE_CHECKING, Protocol

from repotimeline.config.github import get_github_config
from repotimeline.domain.model import Provider
from repotimeline.domain.ports import ProviderError

from .client import GitHubClient
from .translator import (
    translate_commit,
    translate_issue,
    translate_pull_request,
    translate_release,
)

if TYPE_CHECKING:
    from collections.abc import Callable

    from repotimeline.config.github import GitHubConfig
    from repotimeline.domain.model import CanonicalEvent
    from repotimeline.domain.ports import ProviderContext, RepositoryRef

    from .schema import GitHubCommit, GitHubIssue, GitHubPullRequest, GitHubRelease

log = getLogger(__name__)


class RepositoryListingClient(Protocol):
    def list_pull_requests(self, repo: RepositoryRef) -> list[GitHubPullRequest]: ...

    def list_releases(self, repo: RepositoryRef) -> list[GitHubRelease]: ...

    def list_issues(self, repo: RepositoryRef) -> list[GitHubIssue]: ...

    def list_commits(self, repo: RepositoryRef) -> list[GitHubCommit]: ...


def _utcnow() -> datetime:
    return datetime.now(UTC)


@dataclass(slots=True)
class GitHubEventFetcher:
    config: GitHubConfig | None = None
    client: RepositoryListingClient | None = None
    clock: Callable[[], datetime] = _utcnow
    provider_id: str = field(default=Provider.GITHUB.value, init=False)

    def __call__(self, context: ProviderContext) -> list[CanonicalEvent]:
        repo = context.remote
        if repo is None:
            raise ProviderError(f"No GitHub repository known for {context.repo_path}")

        client = self._resolve_client()
        ingested_at = self.clock()

        events: list[CanonicalEvent] = [
            translate_pull_request(pull, ingested_at=ingested_at)
            for pull in client.list_pull_requests(repo)
        ]
        events.extend(
            translate_release(release, ingested_at=ingested_at)
            for release in client.list_releases(repo)
        )
        issues = client.list_issues(repo)
        events.extend(
            translate_issue(issue, ingested_at=ingested_at)
            for issue in issues
            if not issue.is_pull_request
        )
        events.extend(
            translate_commit(commit, ingested_at=ingested_at)
            for commit in client.list_commits(repo)
        )

        log.info("Fetched %d GitHub events for %s", len(events), repo.full_name)
        return events

    def _resolve_client(self) -> RepositoryListingClient:
        if self.client is not None:
            return self.client
        if self.config is None:
            self.config = get_github_config()
        self.client = GitHubClient(config=self.config)
        return self.client
