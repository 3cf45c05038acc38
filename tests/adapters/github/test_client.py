from __future__ import annotations

import copy
from typing import TYPE_CHECKING

import httpx
import pytest

from repotimeline.adapters.github import GitHubAPIError, GitHubClient, GitHubRateLimitError
from repotimeline.adapters.http_resilience import ResilientClient
from repotimeline.config import GitHubConfig, ResilienceConfig
from repotimeline.domain.ports import RepositoryRef

if TYPE_CHECKING:
    from collections.abc import Callable

    from tests.conftest import GitHubPayload

REPO = RepositoryRef(owner="octo", name="widgets")


def _make_client(
    handler: Callable[[httpx.Request], httpx.Response],
    *,
    per_page: int = 2,
    max_items: int = 10,
) -> GitHubClient:
    resilience = ResilienceConfig(
        name="github",
        base_url="https://api.github.com",
        cache=None,
        default_headers={"Authorization": "Bearer test-token"},
    )
    config = GitHubConfig(
        token="test-token",  # noqa: S106
        resilience=resilience,
        per_page=per_page,
        max_items=max_items,
    )

    def factory(settings: ResilienceConfig) -> ResilientClient:
        return ResilientClient(settings, transport=httpx.MockTransport(handler))

    return GitHubClient(config=config, client_factory=factory)


def _numbered_pulls(template: dict[str, object], count: int) -> list[dict[str, object]]:
    pulls: list[dict[str, object]] = []
    for number in range(1, count + 1):
        pull = copy.deepcopy(template)
        pull["number"] = number
        pulls.append(pull)
    return pulls


def _paged_handler(
    items: list[dict[str, object]], requests: list[httpx.Request]
) -> Callable[[httpx.Request], httpx.Response]:
    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        page = int(request.url.params["page"])
        per_page = int(request.url.params["per_page"])
        start = (page - 1) * per_page
        return httpx.Response(200, json=items[start : start + per_page])

    return handler


def test_list_pull_requests_follows_pages(github_pulls_payload: GitHubPayload) -> None:
    requests: list[httpx.Request] = []
    items = _numbered_pulls(github_pulls_payload[0], 5)
    client = _make_client(_paged_handler(items, requests))

    pulls = client.list_pull_requests(REPO)

    assert [pull.number for pull in pulls] == [1, 2, 3, 4, 5]
    assert [request.url.params["page"] for request in requests] == ["1", "2", "3"]
    first = requests[0]
    assert first.url.path == "/repos/octo/widgets/pulls"
    assert first.url.params["state"] == "all"
    assert first.url.params["per_page"] == "2"
    assert first.headers["Authorization"] == "Bearer test-token"


def test_listing_stops_at_max_items(github_pulls_payload: GitHubPayload) -> None:
    requests: list[httpx.Request] = []
    items = _numbered_pulls(github_pulls_payload[0], 9)
    client = _make_client(_paged_handler(items, requests), max_items=10)

    pulls = client.list_pull_requests(REPO, max_items=3)

    assert [pull.number for pull in pulls] == [1, 2, 3]
    assert len(requests) == 2


def test_short_first_page_is_the_last(github_releases_payload: GitHubPayload) -> None:
    requests: list[httpx.Request] = []
    client = _make_client(_paged_handler(github_releases_payload[:1], requests))

    releases = client.list_releases(REPO)

    assert [release.id for release in releases] == [901]
    assert len(requests) == 1


def test_rate_limit_exhaustion_raises() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            403,
            headers={"X-RateLimit-Remaining": "0", "X-RateLimit-Reset": "1700000000"},
            json={"message": "API rate limit exceeded"},
        )

    client = _make_client(handler)

    with pytest.raises(GitHubRateLimitError) as excinfo:
        client.list_commits(REPO)

    assert excinfo.value.reset_at == 1_700_000_000


def test_http_error_raises_with_status() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(404, json={"message": "Not Found"})

    client = _make_client(handler)

    with pytest.raises(GitHubAPIError) as excinfo:
        client.list_issues(REPO)

    assert excinfo.value.status_code == 404


def test_unexpected_payload_shape_raises() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"message": "not a list"})

    client = _make_client(handler)

    with pytest.raises(GitHubAPIError, match="Expected a list"):
        client.list_releases(REPO)


def test_invalid_item_raises() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=[{"number": "not-a-pr"}])

    client = _make_client(handler)

    with pytest.raises(GitHubAPIError, match="Unexpected payload"):
        client.list_pull_requests(REPO)


def test_fetch_rate_limit() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/rate_limit"
        return httpx.Response(
            200,
            json={"resources": {}, "rate": {"limit": 5000, "remaining": 42, "reset": 1}},
        )

    client = _make_client(handler)

    assert client.fetch_rate_limit().core.remaining == 42
