"""Public domain model surface."""

from __future__ import annotations

from repotimeline.domain.model.enums import (
    BRANCH_LIFECYCLE_EVENT_TYPES,
    PULL_REQUEST_EVENT_TYPES,
    EventType,
    Provider,
)
from repotimeline.domain.model.event import (
    Author,
    CanonicalEvent,
    EventRefs,
    EventSource,
    ImpactMetrics,
    MalformedEventError,
)
from repotimeline.domain.model.records import (
    EventRecord,
    event_from_record,
    event_to_record,
    source_from_record,
    source_to_record,
)

__all__ = [  # noqa: RUF022
    # enums
    "BRANCH_LIFECYCLE_EVENT_TYPES",
    "PULL_REQUEST_EVENT_TYPES",
    "EventType",
    "Provider",
    # event
    "Author",
    "CanonicalEvent",
    "EventRefs",
    "EventSource",
    "ImpactMetrics",
    "MalformedEventError",
    # records
    "EventRecord",
    "event_from_record",
    "event_to_record",
    "source_from_record",
    "source_to_record",
]
