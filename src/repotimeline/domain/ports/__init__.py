"""Domain port definitions for adapters."""

from __future__ import annotations

from .fetching import EventFetcher, ProviderContext, ProviderError, RepositoryRef

__all__ = [
    "EventFetcher",
    "ProviderContext",
    "ProviderError",
    "RepositoryRef",
]
