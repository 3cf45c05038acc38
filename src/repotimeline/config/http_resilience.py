"""Settings for the resilient HTTP client used by hosted providers."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Final, Literal

import httpx

from .errors import ConfigurationError

if TYPE_CHECKING:
    from collections.abc import Mapping

ResponseHook = Callable[[httpx.Response], Awaitable[None]]
ShouldCacheHook = Callable[[object], bool]

READ_ONLY_METHODS: Final = frozenset({"GET", "HEAD", "OPTIONS"})
TRANSIENT_STATUS_CODES: Final = frozenset({429, 500, 502, 503, 504})
TRANSIENT_ERRORS: Final[tuple[type[httpx.HTTPError], ...]] = (
    httpx.TimeoutException,
    httpx.NetworkError,
    httpx.RemoteProtocolError,
)


@dataclass(slots=True, frozen=True)
class RetryPolicy:
    """Retry budget for idempotent requests; writes are never replayed."""

    total: int = 3
    backoff_factor: float = 0.5
    backoff_jitter: float = 1.0
    max_backoff_wait: float = 60.0
    respect_retry_after_header: bool = True
    allowed_methods: frozenset[str] = READ_ONLY_METHODS
    status_forcelist: frozenset[int] = TRANSIENT_STATUS_CODES
    retry_on_exceptions: tuple[type[httpx.HTTPError], ...] = TRANSIENT_ERRORS

    def __post_init__(self) -> None:
        if self.total < 0:
            raise ConfigurationError(f"Retry total must not be negative, got {self.total}")


@dataclass(slots=True, frozen=True)
class RateLimit:
    """At most ``max_calls`` requests in any ``per_seconds`` window."""

    max_calls: int
    per_seconds: float

    @classmethod
    def hourly(cls, quota: int, *, burst: int = 10) -> RateLimit:
        """Spread an hourly request quota over windows of ``burst`` calls."""

        if quota < 1 or burst < 1:
            raise ConfigurationError(f"Invalid hourly quota {quota} with burst {burst}")
        return cls(max_calls=burst, per_seconds=burst * 3600.0 / quota)


@dataclass(slots=True, frozen=True)
class CacheConfig:
    enabled: bool = True
    backend: Literal["sqlite", "memory"] = "memory"
    sqlite_path: str | None = None
    default_ttl_seconds: float | None = None
    refresh_ttl_on_access: bool = True
    # Decoded JSON body in, "store it?" out.
    should_cache: ShouldCacheHook | None = None


@dataclass(slots=True, frozen=True)
class ResilienceConfig:
    name: str
    base_url: str | None = None
    timeout_seconds: float = 30.0
    retry: RetryPolicy = field(default_factory=RetryPolicy)
    ratelimit: RateLimit | None = None
    cache: CacheConfig | None = field(default_factory=CacheConfig)
    response_hooks: tuple[ResponseHook, ...] = ()
    default_headers: Mapping[str, str] | None = None
