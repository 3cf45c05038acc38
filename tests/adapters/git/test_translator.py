from __future__ import annotations

from datetime import UTC, datetime

from repotimeline.adapters.git.parsing import (
    parse_log_output,
    parse_reflog_output,
    parse_tag_output,
)
from repotimeline.adapters.git.translator import (
    translate_branch_created,
    translate_commit,
    translate_tag,
)
from repotimeline.domain.model import EventType, ImpactMetrics
from tests.helpers.events import FIXED_NOW
from tests.helpers.git_output import (
    BASE_SHA,
    FEATURE_REFLOG_OUTPUT,
    FEATURE_SHA,
    LOG_OUTPUT,
    MERGE_SHA,
    TAG_OBJECT_SHA,
    TAG_OUTPUT,
)


def test_merge_commit_event() -> None:
    merge = parse_log_output(LOG_OUTPUT)[0]

    event = translate_commit(merge, branches=("main",), ingested_at=FIXED_NOW)

    assert event.id == MERGE_SHA
    assert event.canonical_id == f"git-local:{MERGE_SHA}"
    assert event.provider_id == "git-local"
    assert event.type is EventType.MERGE
    assert event.hash == "a1b2c3d"
    assert event.full_hash == MERGE_SHA
    assert event.refs.sha == MERGE_SHA
    assert event.pull_request_number == 12
    assert event.primary_branch == "main"
    assert event.parent_ids == (BASE_SHA, FEATURE_SHA)
    assert event.author.id == "octo@example.com"
    assert event.ingested_at == FIXED_NOW
    assert event.metadata == {"parentCount": 2, "visibleIn": ["main"]}


def test_commit_event_carries_numstat_impact() -> None:
    feature = parse_log_output(LOG_OUTPUT)[1]

    event = translate_commit(feature)

    assert event.type is EventType.COMMIT
    assert event.title == "Add CSV export (#12)"
    assert event.pull_request_number == 12
    assert event.impact == ImpactMetrics(files_changed=2, lines_added=3, lines_removed=1)
    assert event.branches == ()
    assert event.primary_branch is None
    assert event.metadata == {"parentCount": 1}


def test_tag_becomes_release_on_target_commit() -> None:
    annotated = parse_tag_output(TAG_OUTPUT)[0]

    event = translate_tag(annotated, branches={MERGE_SHA: ["main"]})

    assert event.id == f"{MERGE_SHA}-release-v1.2.0"
    assert event.canonical_id == f"git-local:{MERGE_SHA}-release-v1.2.0"
    assert event.type is EventType.RELEASE
    assert event.title == "Release: v1.2.0"
    assert event.tags == ("v1.2.0",)
    assert event.hash == MERGE_SHA
    assert event.branches == ("main",)
    assert event.refs.tag_name == "v1.2.0"
    assert event.refs.target_commit == MERGE_SHA
    assert event.metadata["tagHash"] == TAG_OBJECT_SHA
    assert event.timestamp == datetime(2024, 3, 2, 10, 0, tzinfo=UTC)


def test_two_tags_on_one_commit_keep_distinct_canonical_ids() -> None:
    annotated = parse_tag_output(TAG_OUTPUT)[0]
    other = parse_tag_output(TAG_OUTPUT.replace("v1.2.0", "stable"))[0]

    first = translate_tag(annotated)
    second = translate_tag(other)

    assert first.id == second.id
    assert first.canonical_id != second.canonical_id


def test_branch_created_event() -> None:
    oldest = parse_reflog_output(FEATURE_REFLOG_OUTPUT)[-1]

    event = translate_branch_created("feature/export", oldest)

    assert event.id == f"{BASE_SHA}-branch-feature/export"
    assert event.type is EventType.BRANCH_CREATED
    assert event.title == "Branch 'feature/export' created"
    assert event.branch_name == "feature/export"
    assert event.timestamp == datetime.fromtimestamp(1709110800, tz=UTC)
    assert event.metadata["reflogSubject"] == "branch: Created from main"
