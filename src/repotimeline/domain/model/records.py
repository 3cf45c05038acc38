"""Plain-record (JSON-native) shape of canonical events.

Canonical events cross a process boundary on their way to presentation
layers, so they serialize to dicts holding only strings, numbers, booleans,
``None``, lists and dicts. Timestamps travel as ISO-8601 strings. The open
``metadata`` map is passed through untouched.
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, cast

from repotimeline.domain.model.enums import EventType
from repotimeline.domain.model.event import (
    Author,
    CanonicalEvent,
    EventRefs,
    EventSource,
    ImpactMetrics,
    MalformedEventError,
)

if TYPE_CHECKING:
    from collections.abc import Mapping

type EventRecord = dict[str, object]

_REQUIRED_EVENT_KEYS = ("id", "canonicalId", "providerId", "type", "timestamp", "title", "author")


def event_to_record(event: CanonicalEvent) -> EventRecord:
    record: EventRecord = {
        "id": event.id,
        "canonicalId": event.canonical_id,
        "providerId": event.provider_id,
        "type": event.type.value,
        "timestamp": event.timestamp.isoformat(),
        "title": event.title,
        "author": _author_to_record(event.author),
        "branches": list(event.branches),
        "description": event.description,
        "ingestedAt": _format_datetime(event.ingested_at),
        "primaryBranch": event.primary_branch,
        "hash": event.hash,
        "fullHash": event.full_hash,
        "tags": list(event.tags),
        "labels": list(event.labels),
        "pullRequestNumber": event.pull_request_number,
        "issueNumber": event.issue_number,
        "url": event.url,
        "state": event.state,
        "parentIds": list(event.parent_ids),
        "impact": _impact_to_record(event.impact),
        "refs": _refs_to_record(event.refs),
        "metadata": dict(event.metadata),
    }
    if event.sources is not None:
        record["sources"] = [source_to_record(source) for source in event.sources]
    return record


def event_from_record(record: Mapping[str, object]) -> CanonicalEvent:
    missing = [key for key in _REQUIRED_EVENT_KEYS if record.get(key) is None]
    if missing:
        raise MalformedEventError(f"Event record is missing: {', '.join(missing)}")

    raw_sources = record.get("sources")
    sources = (
        tuple(source_from_record(item) for item in _as_list(raw_sources))
        if raw_sources is not None
        else None
    )
    timestamp = _parse_datetime(record["timestamp"])
    if timestamp is None:  # pragma: no cover - guarded by the required-key check
        raise MalformedEventError("Event record has no timestamp")

    return CanonicalEvent(
        id=str(record["id"]),
        canonical_id=str(record["canonicalId"]),
        provider_id=str(record["providerId"]),
        type=_parse_event_type(record["type"]),
        timestamp=timestamp,
        title=str(record["title"]),
        author=_author_from_record(_as_mapping(record["author"])),
        branches=_as_str_tuple(record.get("branches")),
        description=_optional_str(record.get("description")),
        ingested_at=_parse_datetime(record.get("ingestedAt")),
        primary_branch=_optional_str(record.get("primaryBranch")),
        hash=_optional_str(record.get("hash")),
        full_hash=_optional_str(record.get("fullHash")),
        tags=_as_str_tuple(record.get("tags")),
        labels=_as_str_tuple(record.get("labels")),
        pull_request_number=_optional_int(record.get("pullRequestNumber")),
        issue_number=_optional_int(record.get("issueNumber")),
        url=_optional_str(record.get("url")),
        state=_optional_str(record.get("state")),
        parent_ids=_as_str_tuple(record.get("parentIds")),
        impact=_impact_from_record(record.get("impact")),
        refs=_refs_from_record(record.get("refs")),
        metadata=dict(_as_mapping(record.get("metadata") or {})),
        sources=sources,
    )


def source_to_record(source: EventSource) -> EventRecord:
    return {
        "providerId": source.provider_id,
        "sourceId": source.source_id,
        "timestamp": _format_datetime(source.timestamp),
        "metadata": dict(source.metadata),
    }


def source_from_record(record: object) -> EventSource:
    mapping = _as_mapping(record)
    provider_id = mapping.get("providerId")
    source_id = mapping.get("sourceId")
    if not provider_id or not source_id:
        raise MalformedEventError("Source record requires providerId and sourceId")
    return EventSource(
        provider_id=str(provider_id),
        source_id=str(source_id),
        timestamp=_parse_datetime(mapping.get("timestamp")),
        metadata=dict(_as_mapping(mapping.get("metadata") or {})),
    )


def _author_to_record(author: Author) -> EventRecord:
    return {
        "id": author.id,
        "name": author.name,
        "email": author.email,
        "username": author.username,
        "avatarUrl": author.avatar_url,
    }


def _author_from_record(record: Mapping[str, object]) -> Author:
    author_id = _optional_str(record.get("id"))
    name = _optional_str(record.get("name"))
    if author_id is None or name is None:
        raise MalformedEventError("Author record requires id and name")
    return Author(
        id=author_id,
        name=name,
        email=_optional_str(record.get("email")),
        username=_optional_str(record.get("username")),
        avatar_url=_optional_str(record.get("avatarUrl")),
    )


def _impact_to_record(impact: ImpactMetrics | None) -> EventRecord | None:
    if impact is None:
        return None
    return {
        "filesChanged": impact.files_changed,
        "linesAdded": impact.lines_added,
        "linesRemoved": impact.lines_removed,
    }


def _impact_from_record(value: object) -> ImpactMetrics | None:
    if value is None:
        return None
    record = _as_mapping(value)
    return ImpactMetrics(
        files_changed=_optional_int(record.get("filesChanged")),
        lines_added=_optional_int(record.get("linesAdded")),
        lines_removed=_optional_int(record.get("linesRemoved")),
    )


def _refs_to_record(refs: EventRefs) -> EventRecord:
    return {
        "sha": refs.sha,
        "headSha": refs.head_sha,
        "baseSha": refs.base_sha,
        "tagName": refs.tag_name,
        "targetCommit": refs.target_commit,
    }


def _refs_from_record(value: object) -> EventRefs:
    if value is None:
        return EventRefs()
    record = _as_mapping(value)
    return EventRefs(
        sha=_optional_str(record.get("sha")),
        head_sha=_optional_str(record.get("headSha")),
        base_sha=_optional_str(record.get("baseSha")),
        tag_name=_optional_str(record.get("tagName")),
        target_commit=_optional_str(record.get("targetCommit")),
    )


def _parse_event_type(value: object) -> EventType:
    try:
        return EventType(str(value))
    except ValueError:
        raise MalformedEventError(f"Unknown event type: {value!r}") from None


def _format_datetime(value: datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


def _parse_datetime(value: object) -> datetime | None:
    if value is None:
        return None
    if isinstance(value, datetime):
        return value
    if not isinstance(value, str):
        raise MalformedEventError(f"Expected an ISO-8601 timestamp, got {value!r}")
    normalized = value.strip()
    if normalized.endswith("Z"):
        normalized = normalized[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(normalized)
    except ValueError as exc:
        raise MalformedEventError(f"Invalid ISO timestamp: {value}") from exc


def _as_mapping(value: object) -> Mapping[str, object]:
    if not isinstance(value, dict):
        raise MalformedEventError(f"Expected an object, got {type(value).__name__}")
    return cast("Mapping[str, object]", value)


def _as_list(value: object) -> list[object]:
    if not isinstance(value, list):
        raise MalformedEventError(f"Expected a list, got {type(value).__name__}")
    return cast("list[object]", value)


def _as_str_tuple(value: object) -> tuple[str, ...]:
    if value is None:
        return ()
    return tuple(str(item) for item in _as_list(value))


def _optional_str(value: object) -> str | None:
    return None if value is None else str(value)


def _optional_int(value: object) -> int | None:
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int | str):
        raise MalformedEventError(f"Expected an integer, got {value!r}")
    return int(value)
