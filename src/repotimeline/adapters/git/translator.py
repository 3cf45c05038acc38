"""Translate parsed git records into canonical events."""

from __future__ import annotations

from typing import TYPE_CHECKING

from repotimeline.domain.model import (
    Author,
    CanonicalEvent,
    EventRefs,
    EventType,
    ImpactMetrics,
    Provider,
)

from .parsing import extract_pull_request_number

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence
    from datetime import datetime

    from .parsing import GitCommitRecord, GitReflogEntry, GitTagRecord

PROVIDER_ID = Provider.GIT_LOCAL.value
UNKNOWN_AUTHOR = "Unknown"


def _canonical_id(local_id: str) -> str:
    return f"{PROVIDER_ID}:{local_id}"


def _author(name: str | None, email: str | None) -> Author:
    display = name or UNKNOWN_AUTHOR
    return Author(id=email or display, name=display, email=email)


def translate_commit(
    record: GitCommitRecord,
    *,
    branches: Sequence[str] = (),
    ingested_at: datetime | None = None,
) -> CanonicalEvent:
    metadata: dict[str, object] = {"parentCount": len(record.parents)}
    if branches:
        metadata["visibleIn"] = list(branches)
    return CanonicalEvent(
        id=record.sha,
        canonical_id=_canonical_id(record.sha),
        provider_id=PROVIDER_ID,
        type=EventType.MERGE if record.is_merge else EventType.COMMIT,
        timestamp=record.authored_at,
        ingested_at=ingested_at,
        title=record.subject or "No commit message",
        description=record.body or None,
        author=_author(record.author_name, record.author_email),
        branches=tuple(branches),
        primary_branch=branches[0] if branches else None,
        hash=record.sha[:7],
        full_hash=record.sha,
        pull_request_number=extract_pull_request_number(record.subject),
        parent_ids=record.parents,
        impact=ImpactMetrics(
            files_changed=record.files_changed,
            lines_added=record.lines_added,
            lines_removed=record.lines_removed,
        ),
        refs=EventRefs(sha=record.sha),
        metadata=metadata,
    )


def translate_tag(
    tag: GitTagRecord,
    *,
    branches: Mapping[str, Sequence[str]] | None = None,
    ingested_at: datetime | None = None,
) -> CanonicalEvent:
    """A tag becomes a release event pointing at its target commit."""

    local_id = f"{tag.target_sha}-release-{tag.name}"
    containing = tuple((branches or {}).get(tag.target_sha, ()))
    return CanonicalEvent(
        id=local_id,
        canonical_id=_canonical_id(local_id),
        provider_id=PROVIDER_ID,
        type=EventType.RELEASE,
        timestamp=tag.created_at,
        ingested_at=ingested_at,
        title=f"Release: {tag.name}",
        author=_author(tag.creator_name, tag.creator_email),
        branches=containing,
        primary_branch=containing[0] if containing else None,
        hash=tag.target_sha,
        tags=(tag.name,),
        refs=EventRefs(tag_name=tag.name, target_commit=tag.target_sha),
        metadata={
            "tagName": tag.name,
            "tagHash": tag.object_sha,
            "targetCommit": tag.target_sha,
        },
    )


def translate_branch_created(
    branch: str,
    entry: GitReflogEntry,
    *,
    ingested_at: datetime | None = None,
) -> CanonicalEvent:
    local_id = f"{entry.sha}-branch-{branch}"
    return CanonicalEvent(
        id=local_id,
        canonical_id=_canonical_id(local_id),
        provider_id=PROVIDER_ID,
        type=EventType.BRANCH_CREATED,
        timestamp=entry.recorded_at,
        ingested_at=ingested_at,
        title=f"Branch '{branch}' created",
        author=_author(entry.name, entry.email),
        branches=(branch,),
        primary_branch=branch,
        hash=entry.sha[:7],
        full_hash=entry.sha,
        metadata={"reflogSubject": entry.subject},
    )
