"""GitHub REST API configuration values."""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from .env import env_int, env_str, require_env_vars
from .http_resilience import CacheConfig, RateLimit, ResilienceConfig, RetryPolicy
from .storage import StorageConfig, get_storage_config

if TYPE_CHECKING:
    import httpx

log = getLogger(__name__)

GITHUB_API_BASE_URL = "https://api.github.com"
GITHUB_API_VERSION = "2022-11-28"
GITHUB_TIMEOUT_SECONDS = 15.0
GITHUB_HOURLY_QUOTA = 5000
GITHUB_LOW_QUOTA_WARNING = 100
DEFAULT_GITHUB_MAX_ITEMS = 300


@dataclass(frozen=True, slots=True)
class GitHubConfig:
    """Holds GitHub API configuration values."""

    token: str
    resilience: ResilienceConfig
    per_page: int = 100
    max_items: int = DEFAULT_GITHUB_MAX_ITEMS


def should_cache_github_payload(payload: object) -> bool:
    """Listing endpoints answer with arrays; error bodies are objects with a message."""

    return not (isinstance(payload, dict) and "message" in payload)


async def log_github_quota(response: httpx.Response) -> None:
    remaining = response.headers.get("X-RateLimit-Remaining")
    if remaining is None or not remaining.isdigit():
        return
    if int(remaining) < GITHUB_LOW_QUOTA_WARNING:
        log.warning(
            "GitHub quota low: %s requests left until %s",
            remaining,
            response.headers.get("X-RateLimit-Reset", "unknown"),
        )


def get_github_config(
    *,
    resilience: ResilienceConfig | None = None,
    storage: StorageConfig | None = None,
) -> GitHubConfig:
    token = require_env_vars(("GITHUB_TOKEN",))["GITHUB_TOKEN"]
    base_url = env_str("REPOTIMELINE_GITHUB_API_URL", GITHUB_API_BASE_URL) or GITHUB_API_BASE_URL

    if resilience is None:
        storage_config = storage or get_storage_config()
        resilience = ResilienceConfig(
            name="github",
            base_url=base_url,
            timeout_seconds=GITHUB_TIMEOUT_SECONDS,
            retry=RetryPolicy(total=3),
            ratelimit=RateLimit.hourly(GITHUB_HOURLY_QUOTA),
            cache=CacheConfig(
                backend="sqlite",
                sqlite_path=str(storage_config.http_cache_path()),
                default_ttl_seconds=300.0,
                should_cache=should_cache_github_payload,
            ),
            response_hooks=(log_github_quota,),
            default_headers={
                "Accept": "application/vnd.github+json",
                "Authorization": f"Bearer {token}",
                "User-Agent": "repotimeline",
                "X-GitHub-Api-Version": GITHUB_API_VERSION,
            },
        )

    return GitHubConfig(
        token=token,
        resilience=resilience,
        max_items=env_int("REPOTIMELINE_GITHUB_MAX_ITEMS", DEFAULT_GITHUB_MAX_ITEMS, minimum=1),
    )
