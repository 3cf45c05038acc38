from __future__ import annotations

import json
from datetime import UTC, datetime

import pytest

from repotimeline.domain.model import (
    EventRefs,
    EventType,
    ImpactMetrics,
    MalformedEventError,
    event_from_record,
    event_to_record,
)
from repotimeline.domain.reconciliation import merge_group
from tests.helpers.events import FIXED_NOW, GIT, GITHUB, make_event


def test_record_uses_plain_json_values() -> None:
    event = make_event(
        "abc1234",
        hash="abc1234",
        tags=("v1.0.0",),
        impact=ImpactMetrics(files_changed=2, lines_added=10, lines_removed=1),
        refs=EventRefs(sha="abc1234"),
        metadata={"parentCount": 1, "nested": {"labels": ["a", "b"]}},
    )

    record = event_to_record(event)

    assert record["canonicalId"] == "git-local:abc1234"
    assert record["type"] == "commit"
    assert record["timestamp"] == "2024-03-01T12:00:00+00:00"
    assert record["tags"] == ["v1.0.0"]
    assert record["impact"] == {"filesChanged": 2, "linesAdded": 10, "linesRemoved": 1}
    assert "sources" not in record
    json.dumps(record)


def test_merged_event_survives_a_json_boundary() -> None:
    local = make_event(
        "local", provider=GIT, full_hash="abc123def456", metadata={"visibleIn": ["main"]}
    )
    remote = make_event(
        "remote",
        provider=GITHUB,
        hash="abc123d",
        labels=("bug",),
        metadata={"committer": {"name": "GitHub", "date": "2024-03-01T12:00:00+00:00"}},
    )
    merged = merge_group([local, remote], merged_at=FIXED_NOW)

    restored = event_from_record(json.loads(json.dumps(event_to_record(merged))))

    assert restored == merged
    assert restored.sources is not None
    assert [source.source_id for source in restored.sources] == ["local", "remote"]


def test_zulu_timestamps_are_accepted() -> None:
    record = event_to_record(make_event("a"))
    record["timestamp"] = "2024-03-01T12:00:00Z"

    event = event_from_record(record)

    assert event.timestamp == datetime(2024, 3, 1, 12, 0, tzinfo=UTC)


def test_missing_required_keys_are_reported() -> None:
    record = event_to_record(make_event("a", type=EventType.RELEASE))
    del record["canonicalId"]
    del record["author"]

    with pytest.raises(MalformedEventError, match="canonicalId, author"):
        event_from_record(record)


def test_invalid_timestamp_is_rejected() -> None:
    record = event_to_record(make_event("a"))
    record["timestamp"] = "yesterday"

    with pytest.raises(MalformedEventError, match="Invalid ISO timestamp"):
        event_from_record(record)
