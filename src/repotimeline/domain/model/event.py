"""Canonical timeline event and its value objects.

Every provider emits ``CanonicalEvent`` instances and the reconciliation
engine returns them; there is no other event representation between the
provider boundary and the presentation layer.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import TYPE_CHECKING

from repotimeline.domain.model.enums import EventType

if TYPE_CHECKING:
    from collections.abc import Mapping


class MalformedEventError(ValueError):
    """Raised when an event does not satisfy the canonical event shape."""


@dataclass(frozen=True, slots=True, kw_only=True)
class Author:
    id: str
    name: str
    email: str | None = None
    username: str | None = None
    avatar_url: str | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class ImpactMetrics:
    files_changed: int | None = None
    lines_added: int | None = None
    lines_removed: int | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class EventRefs:
    """Typed identity hints filled in by providers.

    These used to travel as loose ``metadata`` keys (``sha``, ``headSha``,
    ``tagName``...). Matchers read them from here first.
    """

    sha: str | None = None
    head_sha: str | None = None
    base_sha: str | None = None
    tag_name: str | None = None
    target_commit: str | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class EventSource:
    """Provenance of one raw event that contributed to a canonical event."""

    provider_id: str
    source_id: str
    timestamp: datetime | None = None
    metadata: Mapping[str, object] = field(default_factory=dict["str", "object"])


@dataclass(frozen=True, slots=True, kw_only=True)
class CanonicalEvent:
    """One observed (raw) or reconciled (merged) repository action."""

    id: str
    canonical_id: str
    provider_id: str
    type: EventType
    timestamp: datetime
    title: str
    author: Author

    branches: tuple[str, ...] = ()
    description: str | None = None
    ingested_at: datetime | None = None
    primary_branch: str | None = None

    hash: str | None = None
    full_hash: str | None = None
    tags: tuple[str, ...] = ()
    labels: tuple[str, ...] = ()

    pull_request_number: int | None = None
    issue_number: int | None = None
    url: str | None = None
    state: str | None = None

    parent_ids: tuple[str, ...] = ()
    impact: ImpactMetrics | None = None

    refs: EventRefs = field(default_factory=EventRefs)
    metadata: Mapping[str, object] = field(default_factory=dict["str", "object"])

    # Populated only by reconciliation.
    sources: tuple[EventSource, ...] | None = None

    def __post_init__(self) -> None:
        for name in ("id", "canonical_id", "provider_id"):
            value = getattr(self, name)
            if not isinstance(value, str) or not value:
                raise MalformedEventError(f"CanonicalEvent.{name} must be a non-empty string")
        if not isinstance(self.type, EventType):
            try:
                object.__setattr__(self, "type", EventType(self.type))
            except ValueError:
                raise MalformedEventError(f"Unknown event type: {self.type!r}") from None
        if not isinstance(self.timestamp, datetime):
            raise MalformedEventError(f"Event {self.canonical_id} has no timestamp")
        if self.timestamp.tzinfo is None:
            raise MalformedEventError(
                f"Event {self.canonical_id} has a naive timestamp; timezone is required"
            )

    @property
    def branch_name(self) -> str | None:
        """Primary branch, else the first branch the event is visible on."""
        if self.primary_branch:
            return self.primary_branch
        return self.branches[0] if self.branches else None

    @property
    def is_merged(self) -> bool:
        return self.sources is not None and len(self.sources) > 1

    def as_source(self) -> EventSource:
        return EventSource(
            provider_id=self.provider_id,
            source_id=self.id,
            timestamp=self.ingested_at or self.timestamp,
            metadata=self.metadata,
        )
