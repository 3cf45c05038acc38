"""Shared reconciliation contract components.

This module holds only:
- match decisions produced by the type matchers
- the result and statistics returned by the facade
- the error hierarchy for programmer-contract violations
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from repotimeline.domain.model import CanonicalEvent


class ReconciliationError(RuntimeError):
    """Base class for reconciliation contract violations."""


class EmptyGroupError(ReconciliationError):
    """Raised when the merge resolver is handed a group with no events."""

    def __init__(self) -> None:
        super().__init__("Cannot merge an empty event group")


class MatchKind(StrEnum):
    """How a matcher decided that two events describe the same action."""

    EXACT = "exact"
    PREFIX = "prefix"
    NORMALIZED = "normalized"
    TARGET_COMMIT = "target_commit"
    FUZZY = "fuzzy"


@dataclass(slots=True, frozen=True, kw_only=True)
class MatchDecision:
    kind: MatchKind
    confidence: float
    reason: str

    def __post_init__(self) -> None:
        if not 0.0 <= self.confidence <= 1.0:
            raise ValueError(f"Match confidence must be within [0, 1], got {self.confidence}")


@dataclass(slots=True, frozen=True, kw_only=True)
class ReconciliationStats:
    total_input: int
    total_output: int
    merged_count: int
    duplicates_removed: int

    @classmethod
    def from_events(
        cls, *, total_input: int, events: tuple[CanonicalEvent, ...]
    ) -> ReconciliationStats:
        total_output = len(events)
        return cls(
            total_input=total_input,
            total_output=total_output,
            merged_count=sum(1 for event in events if event.is_merged),
            duplicates_removed=total_input - total_output,
        )

    def as_dict(self) -> dict[str, int]:
        return {
            "totalInput": self.total_input,
            "totalOutput": self.total_output,
            "mergedCount": self.merged_count,
            "duplicatesRemoved": self.duplicates_removed,
        }


@dataclass(slots=True, frozen=True, kw_only=True)
class ReconciliationResult:
    """Deduplicated events in group order, with batch statistics."""

    events: tuple[CanonicalEvent, ...]
    stats: ReconciliationStats
