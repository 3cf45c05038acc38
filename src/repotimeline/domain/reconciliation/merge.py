"""Merge resolver: fold one equivalence group into a single canonical event."""

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Protocol

from .contracts import EmptyGroupError
from .policy import MetadataRule, SourcePolicy

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from repotimeline.domain.model import CanonicalEvent, ImpactMetrics

log = logging.getLogger(__name__)

SOURCE_PROVIDERS_KEY = "sourceProviders"
MERGED_AT_KEY = "mergedAt"


class MergeGroup(Protocol):
    """Collapse a group of equivalent events into one canonical event."""

    def __call__(
        self,
        group: Sequence[CanonicalEvent],
        *,
        policy: SourcePolicy,
        merged_at: datetime,
    ) -> CanonicalEvent: ...


def merged_canonical_id(group: Sequence[CanonicalEvent]) -> str:
    """``merged:<sorted unique providers>:<first contributor id>``."""

    providers = "+".join(sorted({event.provider_id for event in group}))
    return f"merged:{providers}:{group[0].id}"


def merge_group(
    group: Sequence[CanonicalEvent],
    *,
    policy: SourcePolicy | None = None,
    merged_at: datetime | None = None,
) -> CanonicalEvent:
    if not group:
        raise EmptyGroupError

    if len(group) == 1:
        event = group[0]
        return replace(event, sources=(event.as_source(),))

    policy = policy or SourcePolicy()
    merged_at = merged_at or datetime.now(UTC)
    by_authority = sorted(group, key=lambda event: policy.rank(event.provider_id))
    base = by_authority[0]
    metrics = _metrics_member(group, policy)

    merged = replace(
        base,
        canonical_id=merged_canonical_id(group),
        branches=_ordered_union(event.branches for event in group),
        tags=_ordered_union(event.tags for event in group),
        labels=_ordered_union(event.labels for event in group),
        hash=base.hash or _first_present(event.hash for event in group),
        full_hash=base.full_hash or _first_present(event.full_hash for event in group),
        impact=_merged_impact(group, metrics),
        url=(metrics.url if metrics is not None and metrics.url else None) or base.url,
        metadata=_merged_metadata(group, by_authority, metrics, policy, merged_at),
        sources=tuple(event.as_source() for event in group),
    )
    log.debug(
        "Merged %d events into %s (authority %s)",
        len(group),
        merged.canonical_id,
        base.provider_id,
    )
    return merged


def _metrics_member(
    group: Sequence[CanonicalEvent], policy: SourcePolicy
) -> CanonicalEvent | None:
    if policy.metrics_provider is None:
        return None
    return next((e for e in group if e.provider_id == policy.metrics_provider), None)


def _ordered_union(collections: Iterable[tuple[str, ...]]) -> tuple[str, ...]:
    seen: dict[str, None] = {}
    for values in collections:
        for value in values:
            seen.setdefault(value, None)
    return tuple(seen)


def _first_present(values: Iterable[str | None]) -> str | None:
    return next((value for value in values if value), None)


def _merged_impact(
    group: Sequence[CanonicalEvent], metrics: CanonicalEvent | None
) -> ImpactMetrics | None:
    if metrics is not None and metrics.impact is not None:
        return metrics.impact
    return next((event.impact for event in group if event.impact is not None), None)


def _merged_metadata(
    group: Sequence[CanonicalEvent],
    by_authority: Sequence[CanonicalEvent],
    metrics: CanonicalEvent | None,
    policy: SourcePolicy,
    merged_at: datetime,
) -> dict[str, object]:
    keys: dict[str, None] = {}
    for event in group:
        for key in event.metadata:
            keys.setdefault(key, None)

    metadata: dict[str, object] = {}
    for key in keys:
        metadata[key] = _resolve_metadata_value(
            key, policy.rule_for(key), group, by_authority, metrics
        )

    metadata[SOURCE_PROVIDERS_KEY] = [event.provider_id for event in group]
    metadata[MERGED_AT_KEY] = merged_at.isoformat()
    return metadata


def _resolve_metadata_value(
    key: str,
    rule: MetadataRule,
    group: Sequence[CanonicalEvent],
    by_authority: Sequence[CanonicalEvent],
    metrics: CanonicalEvent | None,
) -> object:
    holders = [event for event in group if key in event.metadata]
    match rule:
        case MetadataRule.FIRST_WINS:
            return holders[0].metadata[key]
        case MetadataRule.PREFER_METRICS_PROVIDER if metrics is not None and key in metrics.metadata:
            return metrics.metadata[key]
        case MetadataRule.PREFER_AUTHORITY:
            authority = next(event for event in by_authority if key in event.metadata)
            return authority.metadata[key]
        case _:
            return holders[-1].metadata[key]
