"""Parse machine-readable git output into raw records.

Record and field separators are ASCII control characters (``\\x1e`` and
``\\x1f``) so commit subjects and bodies can contain anything else.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import UTC, datetime
from logging import getLogger

log = getLogger(__name__)

RECORD_SEP = "\x1e"
FIELD_SEP = "\x1f"

LOG_FORMAT = "%x1e%H%x1f%P%x1f%an%x1f%ae%x1f%aI%x1f%s%x1f%b%x1f"
TAG_FORMAT = (
    "%(refname:short)%1f%(objectname)%1f%(*objectname)%1f%(creatordate:iso-strict)"
    "%1f%(taggername)%1f%(taggeremail)%1f%(authorname)%1f%(authoremail)"
)
REFLOG_FORMAT = "%H%x1f%gd%x1f%gs%x1f%gn%x1f%ge"

_MERGE_PR_RE = re.compile(r"^Merge pull request #(\d+) from ", re.IGNORECASE)
_SQUASH_PR_RE = re.compile(r"\(#(\d+)\)\s*$")
_REFLOG_UNIX_RE = re.compile(r"@\{(\d+)\}$")


@dataclass(slots=True, frozen=True, kw_only=True)
class GitCommitRecord:
    sha: str
    parents: tuple[str, ...]
    author_name: str
    author_email: str
    authored_at: datetime
    subject: str
    body: str
    files_changed: int = 0
    lines_added: int = 0
    lines_removed: int = 0

    @property
    def is_merge(self) -> bool:
        return len(self.parents) >= 2


@dataclass(slots=True, frozen=True, kw_only=True)
class GitTagRecord:
    name: str
    object_sha: str
    target_sha: str
    created_at: datetime
    creator_name: str | None
    creator_email: str | None


@dataclass(slots=True, frozen=True, kw_only=True)
class GitReflogEntry:
    sha: str
    recorded_at: datetime
    subject: str
    name: str | None
    email: str | None


def parse_iso_datetime(value: str) -> datetime:
    parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


def extract_pull_request_number(subject: str) -> int | None:
    """``Merge pull request #12 from ...`` or a squash-merge ``title (#12)``."""

    found = _MERGE_PR_RE.match(subject) or _SQUASH_PR_RE.search(subject)
    return int(found.group(1)) if found else None


def parse_log_output(output: str) -> list[GitCommitRecord]:
    """Parse ``git log --numstat`` output produced with ``LOG_FORMAT``."""

    records: list[GitCommitRecord] = []
    for chunk in output.split(RECORD_SEP):
        if not chunk.strip():
            continue
        fields = chunk.split(FIELD_SEP, 7)
        if len(fields) < 8:
            log.debug("Skipping malformed git log record: %r", chunk[:80])
            continue
        sha, parents, name, email, authored, subject, body, numstat = fields
        files, added, removed = _sum_numstat(numstat)
        records.append(
            GitCommitRecord(
                sha=sha.strip(),
                parents=tuple(parents.split()),
                author_name=name,
                author_email=email,
                authored_at=parse_iso_datetime(authored),
                subject=subject,
                body=body.strip(),
                files_changed=files,
                lines_added=added,
                lines_removed=removed,
            )
        )
    return records


def _sum_numstat(block: str) -> tuple[int, int, int]:
    files = added = removed = 0
    for line in block.splitlines():
        parts = line.split("\t", 2)
        if len(parts) != 3:
            continue
        files += 1
        # Binary files report "-" for both counts.
        if parts[0].isdigit():
            added += int(parts[0])
        if parts[1].isdigit():
            removed += int(parts[1])
    return files, added, removed


def parse_tag_output(output: str) -> list[GitTagRecord]:
    """Parse ``git for-each-ref refs/tags`` output produced with ``TAG_FORMAT``."""

    tags: list[GitTagRecord] = []
    for line in output.splitlines():
        if not line.strip():
            continue
        fields = line.split(FIELD_SEP)
        if len(fields) != 8:
            log.debug("Skipping malformed tag line: %r", line)
            continue
        name, object_sha, peeled_sha, created, tagger, tagger_email, author, author_email = fields
        if not created.strip():
            continue
        tags.append(
            GitTagRecord(
                name=name,
                object_sha=object_sha,
                # Annotated tags peel to the commit; lightweight tags already are one.
                target_sha=peeled_sha or object_sha,
                created_at=parse_iso_datetime(created),
                creator_name=tagger or author or None,
                creator_email=_strip_angle_brackets(tagger_email or author_email),
            )
        )
    return tags


def parse_reflog_output(output: str) -> list[GitReflogEntry]:
    """Parse ``git reflog show --date=unix`` output produced with ``REFLOG_FORMAT``."""

    entries: list[GitReflogEntry] = []
    for line in output.splitlines():
        fields = line.split(FIELD_SEP)
        if len(fields) != 5:
            continue
        sha, selector, subject, name, email = fields
        found = _REFLOG_UNIX_RE.search(selector)
        if found is None:
            continue
        entries.append(
            GitReflogEntry(
                sha=sha,
                recorded_at=datetime.fromtimestamp(int(found.group(1)), tz=UTC),
                subject=subject,
                name=name or None,
                email=email or None,
            )
        )
    return entries


def _strip_angle_brackets(value: str) -> str | None:
    stripped = value.strip().removeprefix("<").removesuffix(">")
    return stripped or None
