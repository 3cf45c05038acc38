"""GitHub REST API client."""

from __future__ import annotations

import asyncio
from logging import getLogger
from typing import TYPE_CHECKING

from pydantic import BaseModel, ValidationError

from repotimeline.adapters.http_resilience import ResilientClient
from repotimeline.domain.ports import ProviderError

from .schema import (
    GitHubCommit,
    GitHubIssue,
    GitHubPullRequest,
    GitHubRateLimit,
    GitHubRelease,
)

if TYPE_CHECKING:
    from collections.abc import Callable

    import httpx

    from repotimeline.config.github import GitHubConfig
    from repotimeline.config.http_resilience import ResilienceConfig
    from repotimeline.domain.ports import RepositoryRef

log = getLogger(__name__)


class GitHubAPIError(ProviderError):
    """Raised when the GitHub API returns an unexpected response."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class GitHubRateLimitError(GitHubAPIError):
    """Raised when the API quota for the token is exhausted."""

    def __init__(self, message: str, *, reset_at: int | None = None) -> None:
        super().__init__(message, status_code=403)
        self.reset_at = reset_at


class GitHubClient:
    """Low-level paging client for the repository list endpoints."""

    def __init__(
        self,
        *,
        config: GitHubConfig,
        client_factory: Callable[[ResilienceConfig], ResilientClient] | None = None,
    ) -> None:
        self._config = config
        self._resilience = config.resilience
        self._client_factory = client_factory or ResilientClient

    def list_pull_requests(
        self, repo: RepositoryRef, *, max_items: int | None = None
    ) -> list[GitHubPullRequest]:
        return asyncio.run(
            self._list_async(
                f"/repos/{repo.full_name}/pulls",
                GitHubPullRequest,
                params={"state": "all", "sort": "created", "direction": "desc"},
                max_items=max_items,
            )
        )

    def list_releases(
        self, repo: RepositoryRef, *, max_items: int | None = None
    ) -> list[GitHubRelease]:
        return asyncio.run(
            self._list_async(f"/repos/{repo.full_name}/releases", GitHubRelease, max_items=max_items)
        )

    def list_issues(
        self, repo: RepositoryRef, *, max_items: int | None = None
    ) -> list[GitHubIssue]:
        return asyncio.run(
            self._list_async(
                f"/repos/{repo.full_name}/issues",
                GitHubIssue,
                params={"state": "all"},
                max_items=max_items,
            )
        )

    def list_commits(
        self, repo: RepositoryRef, *, max_items: int | None = None
    ) -> list[GitHubCommit]:
        return asyncio.run(
            self._list_async(f"/repos/{repo.full_name}/commits", GitHubCommit, max_items=max_items)
        )

    def fetch_rate_limit(self) -> GitHubRateLimit:
        return asyncio.run(self._fetch_rate_limit_async())

    async def _fetch_rate_limit_async(self) -> GitHubRateLimit:
        async with self._client_factory(self._resilience) as client:
            response = await client.get("/rate_limit")
            payload = self._checked_payload(response)
        try:
            return GitHubRateLimit.model_validate(payload)
        except ValidationError as exc:
            raise GitHubAPIError(f"Unexpected rate limit payload: {exc}") from exc

    async def _list_async[M: BaseModel](
        self,
        path: str,
        model: type[M],
        *,
        params: dict[str, str] | None = None,
        max_items: int | None = None,
    ) -> list[M]:
        limit = max_items if max_items is not None else self._config.max_items
        per_page = min(self._config.per_page, limit)
        items: list[M] = []
        page = 1

        async with self._client_factory(self._resilience) as client:
            while len(items) < limit:
                query = {**(params or {}), "per_page": str(per_page), "page": str(page)}
                response = await client.get(path, params=query)
                payload = self._checked_payload(response)
                if not isinstance(payload, list):
                    raise GitHubAPIError(f"Expected a list from {path}")
                try:
                    items.extend(model.model_validate(entry) for entry in payload)
                except ValidationError as exc:
                    raise GitHubAPIError(f"Unexpected payload from {path}: {exc}") from exc
                if len(payload) < per_page:
                    break
                page += 1

        log.debug("Fetched %d items from %s", min(len(items), limit), path)
        return items[:limit]

    def _checked_payload(self, response: httpx.Response) -> object:
        if response.headers.get("X-RateLimit-Remaining") == "0" and response.status_code in {
            403,
            429,
        }:
            reset = response.headers.get("X-RateLimit-Reset")
            raise GitHubRateLimitError(
                "GitHub API rate limit exhausted",
                reset_at=int(reset) if reset and reset.isdigit() else None,
            )
        if response.status_code >= 400:
            raise GitHubAPIError(
                f"GitHub API error {response.status_code} for {response.request.url}",
                status_code=response.status_code,
            )
        try:
            return response.json()
        except ValueError as exc:
            raise GitHubAPIError("GitHub API returned invalid JSON") from exc
