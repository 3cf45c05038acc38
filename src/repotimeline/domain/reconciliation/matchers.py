"""Pairwise type matchers.

``match_events`` decides whether two raw events describe the same
repository action and explains how it got there. Matchers are pure; an
uncertain pair is simply not matched.
"""

from __future__ import annotations

import logging
from datetime import timedelta
from typing import TYPE_CHECKING, Final, Protocol

from repotimeline.domain.model import (
    BRANCH_LIFECYCLE_EVENT_TYPES,
    PULL_REQUEST_EVENT_TYPES,
    EventType,
)

from .contracts import MatchDecision, MatchKind
from .normalize import (
    commit_identifier,
    is_prefix_match,
    lowered_set,
    normalize_title,
    normalize_version,
    release_tag,
    release_target_commit,
    title_version,
)

if TYPE_CHECKING:
    from collections.abc import Mapping

    from repotimeline.domain.model import CanonicalEvent

log = logging.getLogger(__name__)

RELEASE_FUZZY_WINDOW: Final = timedelta(days=7)
BRANCH_EVENT_WINDOW: Final = timedelta(minutes=5)

_CROSS_TYPE_PAIRS: Final = frozenset({frozenset({EventType.MERGE, EventType.PR_MERGED})})


class TypeMatcher(Protocol):
    def __call__(self, left: CanonicalEvent, right: CanonicalEvent) -> MatchDecision | None: ...


class EventMatcher(Protocol):
    """Boolean equivalence predicate used by grouping."""

    def __call__(self, left: CanonicalEvent, right: CanonicalEvent) -> bool: ...


def match_commits(left: CanonicalEvent, right: CanonicalEvent) -> MatchDecision | None:
    left_id = commit_identifier(left)
    right_id = commit_identifier(right)
    if left_id is None or right_id is None or not is_prefix_match(left_id, right_id):
        return None
    if left_id.lower() == right_id.lower():
        return MatchDecision(kind=MatchKind.EXACT, confidence=1.0, reason=f"same commit {left_id}")
    return MatchDecision(
        kind=MatchKind.PREFIX,
        confidence=1.0,
        reason=f"commit ids share a prefix: {left_id} ~ {right_id}",
    )


def match_pull_requests(left: CanonicalEvent, right: CanonicalEvent) -> MatchDecision | None:
    if left.pull_request_number is None or right.pull_request_number is None:
        return None
    if left.pull_request_number != right.pull_request_number:
        return None
    return MatchDecision(
        kind=MatchKind.EXACT,
        confidence=1.0,
        reason=f"same pull request #{left.pull_request_number}",
    )


def match_releases(left: CanonicalEvent, right: CanonicalEvent) -> MatchDecision | None:
    """Tag name, then target commit, then a time-boxed title comparison."""

    return (
        _match_release_tags(left, right)
        or _match_release_targets(left, right)
        or _match_release_titles(left, right)
    )


def _match_release_tags(left: CanonicalEvent, right: CanonicalEvent) -> MatchDecision | None:
    left_tag = release_tag(left)
    right_tag = release_tag(right)
    if not left_tag or not right_tag:
        return None
    if left_tag == right_tag:
        return MatchDecision(kind=MatchKind.EXACT, confidence=1.0, reason=f"same tag {left_tag}")
    normalized = normalize_version(left_tag)
    if normalized and normalized == normalize_version(right_tag):
        return MatchDecision(
            kind=MatchKind.NORMALIZED,
            confidence=0.95,
            reason=f"tags normalize to {normalized}: {left_tag} ~ {right_tag}",
        )
    return None


def _match_release_targets(left: CanonicalEvent, right: CanonicalEvent) -> MatchDecision | None:
    left_target = release_target_commit(left)
    right_target = release_target_commit(right)
    if left_target is None or right_target is None:
        return None
    if not is_prefix_match(left_target, right_target):
        return None
    return MatchDecision(
        kind=MatchKind.TARGET_COMMIT,
        confidence=1.0,
        reason=f"releases target the same commit {left_target}",
    )


def _match_release_titles(left: CanonicalEvent, right: CanonicalEvent) -> MatchDecision | None:
    if abs(left.timestamp - right.timestamp) > RELEASE_FUZZY_WINDOW:
        return None

    left_version = title_version(left.title)
    right_version = title_version(right.title)
    if left_version and right_version:
        normalized = normalize_version(left_version)
        if normalized != normalize_version(right_version):
            return None
        return MatchDecision(
            kind=MatchKind.FUZZY,
            confidence=0.8,
            reason=f"titles name the same version {normalized}",
        )

    left_title = normalize_title(left.title)
    right_title = normalize_title(right.title)
    if not left_title or not right_title:
        return None
    if left_title == right_title:
        return MatchDecision(kind=MatchKind.FUZZY, confidence=0.8, reason="equal release titles")
    if left_title in right_title or right_title in left_title:
        return MatchDecision(
            kind=MatchKind.FUZZY,
            confidence=0.6,
            reason="one release title contains the other",
        )
    return None


def match_tags(left: CanonicalEvent, right: CanonicalEvent) -> MatchDecision | None:
    shared = lowered_set(left.tags) & lowered_set(right.tags)
    if shared:
        return MatchDecision(
            kind=MatchKind.EXACT,
            confidence=1.0,
            reason=f"shared tag {min(shared)}",
        )
    left_title = normalize_title(left.title)
    if left_title and left_title == normalize_title(right.title):
        return MatchDecision(kind=MatchKind.NORMALIZED, confidence=0.9, reason="equal tag titles")
    return None


def match_branch_events(left: CanonicalEvent, right: CanonicalEvent) -> MatchDecision | None:
    if left.type != right.type:
        return None
    branch = left.branch_name
    if not branch or branch != right.branch_name:
        return None
    if abs(left.timestamp - right.timestamp) > BRANCH_EVENT_WINDOW:
        return None
    return MatchDecision(
        kind=MatchKind.FUZZY,
        confidence=0.9,
        reason=f"branch {branch} {left.type.value} within {BRANCH_EVENT_WINDOW}",
    )


def _build_registry() -> dict[EventType, TypeMatcher]:
    registry: dict[EventType, TypeMatcher] = {
        EventType.COMMIT: match_commits,
        EventType.MERGE: match_commits,
        EventType.RELEASE: match_releases,
        EventType.TAG_CREATED: match_tags,
    }
    registry.update(dict.fromkeys(PULL_REQUEST_EVENT_TYPES, match_pull_requests))
    registry.update(dict.fromkeys(BRANCH_LIFECYCLE_EVENT_TYPES, match_branch_events))
    return registry


MATCHERS: Final[Mapping[EventType, TypeMatcher]] = _build_registry()


def match_events(left: CanonicalEvent, right: CanonicalEvent) -> MatchDecision | None:
    """Decide whether two raw events describe the same action."""

    if left.canonical_id == right.canonical_id:
        return MatchDecision(
            kind=MatchKind.EXACT,
            confidence=1.0,
            reason=f"same canonical id {left.canonical_id}",
        )
    if left.provider_id == right.provider_id:
        return None
    if left.type != right.type and frozenset({left.type, right.type}) not in _CROSS_TYPE_PAIRS:
        return None

    matcher = MATCHERS.get(left.type)
    if matcher is None:
        return None
    decision = matcher(left, right)
    if decision is not None:
        log.debug(
            "Matched %s (%s) with %s (%s): %s",
            left.id,
            left.provider_id,
            right.id,
            right.provider_id,
            decision.reason,
        )
    return decision


def events_match(left: CanonicalEvent, right: CanonicalEvent) -> bool:
    return match_events(left, right) is not None
