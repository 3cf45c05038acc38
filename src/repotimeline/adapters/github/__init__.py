"""GitHub REST API event provider."""

from __future__ import annotations

from .client import GitHubAPIError, GitHubClient, GitHubRateLimitError
from .fetcher import GitHubEventFetcher
from .translator import (
    translate_commit,
    translate_issue,
    translate_pull_request,
    translate_release,
)

__all__ = [
    "GitHubAPIError",
    "GitHubClient",
    "GitHubEventFetcher",
    "GitHubRateLimitError",
    "translate_commit",
    "translate_issue",
    "translate_pull_request",
    "translate_release",
]
