"""Reconciliation facade.

The engine composes the grouping and merge stages. It keeps no state
between calls: every call recomputes equivalence from the complete batch.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Protocol

from .contracts import ReconciliationResult, ReconciliationStats
from .grouping import GroupingStrategy, group_events
from .merge import merge_group
from .policy import SourcePolicy

if TYPE_CHECKING:
    from collections.abc import Sequence

    from repotimeline.domain.model import CanonicalEvent

    from .grouping import GroupEvents
    from .merge import MergeGroup

log = logging.getLogger(__name__)


class Clock(Protocol):
    def __call__(self) -> datetime: ...


def _utcnow() -> datetime:
    return datetime.now(UTC)


@dataclass(slots=True)
class ReconciliationEngine:
    """Run grouping and merging over one raw event batch."""

    group: GroupEvents = group_events
    merge: MergeGroup = merge_group
    policy: SourcePolicy = field(default_factory=SourcePolicy)
    strategy: GroupingStrategy = GroupingStrategy.ANCHOR
    clock: Clock = _utcnow

    def reconcile(self, events: Sequence[CanonicalEvent]) -> ReconciliationResult:
        """Deduplicate ``events`` across providers."""

        merged_at = self.clock()
        groups = self.group(events, strategy=self.strategy)
        reconciled = tuple(
            self.merge(group, policy=self.policy, merged_at=merged_at) for group in groups
        )
        stats = ReconciliationStats.from_events(total_input=len(events), events=reconciled)
        log.info(
            "Reconciled %d events into %d (%d merged, %d duplicates removed)",
            stats.total_input,
            stats.total_output,
            stats.merged_count,
            stats.duplicates_removed,
        )
        return ReconciliationResult(events=reconciled, stats=stats)


def reconcile(
    events: Sequence[CanonicalEvent],
    *,
    policy: SourcePolicy | None = None,
    strategy: GroupingStrategy = GroupingStrategy.ANCHOR,
    now: Clock | None = None,
) -> ReconciliationResult:
    engine = ReconciliationEngine(
        policy=policy or SourcePolicy(),
        strategy=strategy,
        clock=now or _utcnow,
    )
    return engine.reconcile(events)
