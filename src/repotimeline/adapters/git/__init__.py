"""Local git clone event provider."""

from __future__ import annotations

from .client import GitCommandError, GitCommandRunner
from .fetcher import GitEventFetcher
from .remote import parse_github_remote, resolve_github_remote

__all__ = [
    "GitCommandError",
    "GitCommandRunner",
    "GitEventFetcher",
    "parse_github_remote",
    "resolve_github_remote",
]
