"""Identity extraction and normalization helpers used by the type matchers.

Every helper reads the typed ``EventRefs`` first and falls back to the
legacy metadata keys, so events built by hosts that only fill ``metadata``
keep matching.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable

    from repotimeline.domain.model import CanonicalEvent

_HEX_ID_RE = re.compile(r"^[0-9a-f]{7,64}$", re.IGNORECASE)
_TITLE_TAG_RE = re.compile(r"(?:release:?\s*)?v?\d+\.\d+\.\d+", re.IGNORECASE)
_RELEASE_PREFIX_RE = re.compile(r"^release:?\s*", re.IGNORECASE)
_SEMVER_RE = re.compile(r"v?\d+\.\d+\.\d+", re.IGNORECASE)
_LEADING_RELEASE_RE = re.compile(r"^release-?")
_NON_VERSION_CHARS_RE = re.compile(r"[^0-9.]")


def metadata_str(event: CanonicalEvent, *keys: str) -> str | None:
    """Return the first non-empty string value stored under ``keys``."""

    for key in keys:
        value = event.metadata.get(key)
        if isinstance(value, str) and value:
            return value
    return None


def commit_identifier(event: CanonicalEvent) -> str | None:
    """The single commit id an event is matched by.

    Sources are tried in order and the first present one wins, so a merged
    pull request is identified by its merge commit and never by the head or
    base commits it merely references.
    """

    refs = event.refs
    candidates = (
        event.full_hash,
        event.hash,
        refs.sha or metadata_str(event, "sha"),
        refs.head_sha or metadata_str(event, "headSha"),
        refs.base_sha or metadata_str(event, "baseSha"),
    )
    return next((candidate for candidate in candidates if candidate), None)


def is_prefix_match(left: str, right: str) -> bool:
    """Case-insensitive abbreviated-id comparison."""

    if not left or not right:
        return False
    left_lower = left.lower()
    right_lower = right.lower()
    return left_lower.startswith(right_lower) or right_lower.startswith(left_lower)


def looks_like_commit_id(value: str) -> bool:
    return bool(_HEX_ID_RE.match(value))


def release_tag(event: CanonicalEvent) -> str | None:
    """Tag name of a release: explicit tag, typed ref, metadata, then title."""

    if event.tags:
        return event.tags[0]
    tag_name = event.refs.tag_name or metadata_str(event, "tagName")
    if tag_name:
        return tag_name
    found = _TITLE_TAG_RE.search(event.title)
    if found is None:
        return None
    return _RELEASE_PREFIX_RE.sub("", found.group(0))


def release_target_commit(event: CanonicalEvent) -> str | None:
    """Commit a release points at, ignoring branch names."""

    candidates = (
        event.hash,
        event.refs.target_commit,
        metadata_str(event, "target_commitish", "targetCommit"),
    )
    for candidate in candidates:
        if candidate and looks_like_commit_id(candidate):
            return candidate
    return None


def normalize_version(version: str) -> str:
    """``v1.0.0``, ``release-1.0.0`` and ``V1.0.0`` all become ``1.0.0``."""

    lowered = version.lower()
    lowered = lowered.removeprefix("v")
    lowered = _LEADING_RELEASE_RE.sub("", lowered)
    return _NON_VERSION_CHARS_RE.sub("", lowered)


def title_version(title: str) -> str | None:
    found = _SEMVER_RE.search(title)
    return found.group(0) if found else None


def normalize_title(title: str) -> str:
    return title.strip().lower()


def lowered_set(values: Iterable[str]) -> frozenset[str]:
    return frozenset(value.lower() for value in values if value)
