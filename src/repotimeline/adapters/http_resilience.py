"""Rate-limited, retrying, optionally caching async HTTP client.

A request passes, outermost first, through the ``aiolimiter`` call budget,
the hishel response cache (when configured) and the ``httpx_retries``
transport wrapped around the network transport.
"""

from __future__ import annotations

import json
from logging import getLogger
from typing import TYPE_CHECKING, TypedDict, Unpack

import httpx
from aiolimiter import AsyncLimiter
from hishel import AsyncSqliteStorage, FilterPolicy
from hishel import Response as HishelCacheResponse
from hishel._policies import BaseFilter
from hishel.httpx import AsyncCacheClient
from httpx_retries import Retry, RetryTransport

from repotimeline.config.storage import get_storage_config

if TYPE_CHECKING:
    from types import TracebackType

    from httpx._client import UseClientDefault
    from httpx._types import HeaderTypes, QueryParamTypes, TimeoutTypes, URLTypes

    from repotimeline.config.http_resilience import (
        CacheConfig,
        RateLimit,
        ResilienceConfig,
        RetryPolicy,
        ShouldCacheHook,
    )

log = getLogger(__name__)


class GetOptions(TypedDict, total=False):
    params: QueryParamTypes | None
    headers: HeaderTypes | None
    follow_redirects: bool | UseClientDefault
    timeout: TimeoutTypes | UseClientDefault


def build_retry(policy: RetryPolicy) -> Retry:
    return Retry(
        total=policy.total,
        backoff_factor=policy.backoff_factor,
        backoff_jitter=policy.backoff_jitter,
        max_backoff_wait=policy.max_backoff_wait,
        respect_retry_after_header=policy.respect_retry_after_header,
        allowed_methods=sorted(policy.allowed_methods),
        status_forcelist=sorted(policy.status_forcelist),
        retry_on_exceptions=policy.retry_on_exceptions,
    )


class ResilientClient:
    """Read-only client for one upstream API described by a ``ResilienceConfig``."""

    def __init__(
        self,
        config: ResilienceConfig,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.config = config
        self._limiter = _build_limiter(config.ratelimit)
        self._client = _build_http_client(config, transport)

    async def __aenter__(self) -> ResilientClient:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def get(self, url: URLTypes, **kwargs: Unpack[GetOptions]) -> httpx.Response:
        if self._limiter is None:
            response = await self._client.get(url, **kwargs)
        else:
            async with self._limiter:
                response = await self._client.get(url, **kwargs)
        log.debug(
            "%s: GET %s -> %d", self.config.name, response.request.url, response.status_code
        )
        return response


def _build_limiter(ratelimit: RateLimit | None) -> AsyncLimiter | None:
    if ratelimit is None:
        return None
    return AsyncLimiter(ratelimit.max_calls, ratelimit.per_seconds)


def _build_http_client(
    config: ResilienceConfig, transport: httpx.AsyncBaseTransport | None
) -> httpx.AsyncClient:
    retrying = RetryTransport(transport=transport, retry=build_retry(config.retry))
    client_kwargs: dict[str, object] = {
        "timeout": config.timeout_seconds,
        "transport": retrying,
        "headers": dict(config.default_headers or {}),
        "event_hooks": {"response": list(config.response_hooks)},
    }
    if config.base_url is not None:
        client_kwargs["base_url"] = config.base_url

    storage, policy = _build_cache_components(config.cache)
    if storage is None:
        return httpx.AsyncClient(**client_kwargs)  # type: ignore[arg-type]
    log.debug("HTTP client %s: caching enabled", config.name)
    return AsyncCacheClient(**client_kwargs, storage=storage, policy=policy)  # type: ignore[arg-type]


class _ShouldCacheResponseFilter(BaseFilter[HishelCacheResponse]):
    """Hishel response filter that asks a predicate about the decoded JSON body."""

    def __init__(self, predicate: ShouldCacheHook) -> None:
        self._predicate = predicate

    def needs_body(self) -> bool:
        return True

    def apply(self, item: HishelCacheResponse, body: bytes | None) -> bool:  # noqa: ARG002
        if body is None:
            return True
        try:
            payload = json.loads(body)
        except (UnicodeDecodeError, json.JSONDecodeError):
            return True
        return bool(self._predicate(payload))


def _build_cache_components(
    config: CacheConfig | None,
) -> tuple[AsyncSqliteStorage | None, FilterPolicy | None]:
    if config is None or not config.enabled:
        return None, None

    match config.backend:
        case "sqlite":
            database_path = config.sqlite_path or str(get_storage_config().http_cache_path())
        case "memory":
            database_path = ":memory:"
        case _:
            raise ValueError(f"Unsupported cache backend: {config.backend}")

    storage = AsyncSqliteStorage(
        database_path=database_path,
        default_ttl=config.default_ttl_seconds,
        refresh_ttl_on_access=config.refresh_ttl_on_access,
    )
    if config.should_cache is None:
        return storage, None
    return storage, FilterPolicy(response_filters=[_ShouldCacheResponseFilter(config.should_cache)])
