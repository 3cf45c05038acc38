"""Partition a raw event batch into equivalence groups.

Two strategies are available:

``ANCHOR``
    The first unassigned event anchors a group and collects every later
    unassigned event that matches it. Only the anchor is compared, so the
    relation is not closed transitively (A~B and B~C with A!~C puts C in a
    later group).

``TRANSITIVE``
    Union-find over every matching pair, giving the transitive closure
    independently of input order.

Both strategies track assignment by input position and never place two
events of the same provider in one group.
"""

from __future__ import annotations

import logging
from enum import StrEnum
from typing import TYPE_CHECKING, Protocol

from .matchers import events_match

if TYPE_CHECKING:
    from collections.abc import Sequence

    from repotimeline.domain.model import CanonicalEvent

    from .matchers import EventMatcher

log = logging.getLogger(__name__)

type EventGroup = list[CanonicalEvent]


class GroupingStrategy(StrEnum):
    ANCHOR = "anchor"
    TRANSITIVE = "transitive"


class GroupEvents(Protocol):
    """Partition events into groups of equivalent events."""

    def __call__(
        self,
        events: Sequence[CanonicalEvent],
        *,
        matcher: EventMatcher = ...,
        strategy: GroupingStrategy = ...,
    ) -> list[EventGroup]: ...


def group_events(
    events: Sequence[CanonicalEvent],
    *,
    matcher: EventMatcher = events_match,
    strategy: GroupingStrategy = GroupingStrategy.ANCHOR,
) -> list[EventGroup]:
    if strategy is GroupingStrategy.TRANSITIVE:
        groups = _group_transitive(events, matcher)
    else:
        groups = _group_by_anchor(events, matcher)
    log.debug(
        "Grouped %d events into %d groups (%s)", len(events), len(groups), strategy.value
    )
    return groups


def _group_by_anchor(
    events: Sequence[CanonicalEvent], matcher: EventMatcher
) -> list[EventGroup]:
    assigned = [False] * len(events)
    groups: list[EventGroup] = []

    for anchor_index, anchor in enumerate(events):
        if assigned[anchor_index]:
            continue
        assigned[anchor_index] = True
        group = [anchor]
        providers = {anchor.provider_id}

        for candidate_index in range(anchor_index + 1, len(events)):
            if assigned[candidate_index]:
                continue
            candidate = events[candidate_index]
            if candidate.provider_id in providers:
                continue
            if matcher(anchor, candidate):
                assigned[candidate_index] = True
                group.append(candidate)
                providers.add(candidate.provider_id)

        groups.append(group)
    return groups


class _DisjointSet:
    """Union-find keyed by input position, tracking providers per component."""

    def __init__(self, events: Sequence[CanonicalEvent]) -> None:
        self._parent = list(range(len(events)))
        self._providers = [{event.provider_id} for event in events]

    def find(self, index: int) -> int:
        root = index
        while self._parent[root] != root:
            root = self._parent[root]
        while self._parent[index] != root:
            self._parent[index], index = root, self._parent[index]
        return root

    def union(self, left: int, right: int) -> bool:
        left_root = self.find(left)
        right_root = self.find(right)
        if left_root == right_root:
            return True
        if self._providers[left_root] & self._providers[right_root]:
            return False
        # Keep the smaller input position as root so groups order by first member.
        root, child = sorted((left_root, right_root))
        self._parent[child] = root
        self._providers[root] |= self._providers[child]
        return True


def _group_transitive(
    events: Sequence[CanonicalEvent], matcher: EventMatcher
) -> list[EventGroup]:
    components = _DisjointSet(events)
    for left in range(len(events)):
        for right in range(left + 1, len(events)):
            if components.find(left) == components.find(right):
                continue
            if matcher(events[left], events[right]) and not components.union(left, right):
                log.debug(
                    "Not merging %s with %s: provider already present in group",
                    events[left].id,
                    events[right].id,
                )

    members: dict[int, EventGroup] = {}
    for index, event in enumerate(events):
        members.setdefault(components.find(index), []).append(event)
    return list(members.values())
