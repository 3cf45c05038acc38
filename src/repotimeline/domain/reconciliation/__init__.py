"""Cross-provider event reconciliation.

Layered flow:
1) match raw events pairwise per event type (``matchers``)
2) partition the batch into equivalence groups (``grouping``)
3) fold each group into one canonical event under a source policy (``merge``)
4) report the deduplicated batch with statistics (``engine``)
"""

from __future__ import annotations

from .contracts import (
    EmptyGroupError,
    MatchDecision,
    MatchKind,
    ReconciliationError,
    ReconciliationResult,
    ReconciliationStats,
)
from .engine import Clock, ReconciliationEngine, reconcile
from .grouping import EventGroup, GroupingStrategy, group_events
from .matchers import MATCHERS, events_match, match_events
from .merge import merge_group, merged_canonical_id
from .policy import MetadataRule, SourcePolicy

__all__ = [
    "MATCHERS",
    "Clock",
    "EmptyGroupError",
    "EventGroup",
    "GroupingStrategy",
    "MatchDecision",
    "MatchKind",
    "MetadataRule",
    "ReconciliationEngine",
    "ReconciliationError",
    "ReconciliationResult",
    "ReconciliationStats",
    "SourcePolicy",
    "events_match",
    "group_events",
    "match_events",
    "merge_group",
    "merged_canonical_id",
    "reconcile",
]
