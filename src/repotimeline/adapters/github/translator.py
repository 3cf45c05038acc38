"""Translate GitHub payloads into canonical events."""

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
from repotimeline.domain.reconciliation.normalize import looks_like_commit_id

if TYPE_CHECKING:
    from datetime import datetime

    from .schema import (
        GitHubCommit,
        GitHubCommitActor,
        GitHubIssue,
        GitHubPullRequest,
        GitHubRelease,
        GitHubUser,
    )

PROVIDER_ID = Provider.GITHUB.value
GHOST_USER = "ghost"


def _canonical_id(local_id: str) -> str:
    return f"{PROVIDER_ID}:{local_id}"


def _split_message(message: str) -> tuple[str, str | None]:
    title, _, rest = message.partition("\n")
    return title.strip(), rest.strip() or None


def _build_author(user: GitHubUser | None) -> Author:
    if user is None:
        return Author(id=GHOST_USER, name=GHOST_USER, username=GHOST_USER)
    return Author(
        id=user.login,
        name=user.login,
        username=user.login,
        avatar_url=user.avatar_url,
    )


def _build_commit_author(actor: GitHubCommitActor, user: GitHubUser | None) -> Author:
    return Author(
        id=user.login if user is not None else actor.email,
        name=actor.name,
        email=actor.email,
        username=user.login if user is not None else None,
        avatar_url=user.avatar_url if user is not None else None,
    )


def translate_pull_request(
    pull: GitHubPullRequest, *, ingested_at: datetime | None = None
) -> CanonicalEvent:
    if pull.merged_at is not None:
        event_type, timestamp, state = EventType.PR_MERGED, pull.merged_at, "merged"
    elif pull.closed_at is not None:
        event_type, timestamp, state = EventType.PR_CLOSED, pull.closed_at, "closed"
    else:
        event_type, timestamp, state = EventType.PR_OPENED, pull.created_at, pull.state

    impact = None
    if any(v is not None for v in (pull.additions, pull.deletions, pull.changed_files)):
        impact = ImpactMetrics(
            files_changed=pull.changed_files,
            lines_added=pull.additions,
            lines_removed=pull.deletions,
        )

    local_id = f"pr-{pull.number}"
    return CanonicalEvent(
        id=local_id,
        canonical_id=_canonical_id(local_id),
        provider_id=PROVIDER_ID,
        type=event_type,
        timestamp=timestamp,
        ingested_at=ingested_at,
        title=pull.title,
        description=pull.body or None,
        author=_build_author(pull.user),
        branches=(pull.head.ref,),
        primary_branch=pull.head.ref,
        labels=tuple(label.name for label in pull.labels),
        pull_request_number=pull.number,
        url=pull.html_url,
        state=state,
        impact=impact,
        refs=EventRefs(
            sha=pull.merge_commit_sha if pull.merged_at is not None else None,
            head_sha=pull.head.sha,
            base_sha=pull.base.sha,
        ),
        metadata={
            "headRef": pull.head.ref,
            "baseRef": pull.base.ref,
            "headSha": pull.head.sha,
            "baseSha": pull.base.sha,
            "draft": pull.draft,
            "createdAt": pull.created_at.isoformat(),
        },
    )


def translate_release(
    release: GitHubRelease, *, ingested_at: datetime | None = None
) -> CanonicalEvent:
    target = release.target_commitish
    commit = target if looks_like_commit_id(target) else None
    local_id = f"release-{release.id}"
    return CanonicalEvent(
        id=local_id,
        canonical_id=_canonical_id(local_id),
        provider_id=PROVIDER_ID,
        type=EventType.RELEASE,
        timestamp=release.published_at or release.created_at,
        ingested_at=ingested_at,
        title=release.name or release.tag_name,
        description=release.body or None,
        author=_build_author(release.author),
        hash=commit,
        tags=(release.tag_name,),
        url=release.html_url,
        state="draft" if release.draft else "published",
        refs=EventRefs(tag_name=release.tag_name, target_commit=commit),
        metadata={
            "tagName": release.tag_name,
            "target_commitish": target,
            "prerelease": release.prerelease,
            "draft": release.draft,
        },
    )


def translate_issue(issue: GitHubIssue, *, ingested_at: datetime | None = None) -> CanonicalEvent:
    if issue.closed_at is not None:
        event_type, timestamp = EventType.ISSUE_CLOSED, issue.closed_at
    else:
        event_type, timestamp = EventType.ISSUE_OPENED, issue.created_at

    local_id = f"issue-{issue.number}"
    return CanonicalEvent(
        id=local_id,
        canonical_id=_canonical_id(local_id),
        provider_id=PROVIDER_ID,
        type=event_type,
        timestamp=timestamp,
        ingested_at=ingested_at,
        title=issue.title,
        description=issue.body or None,
        author=_build_author(issue.user),
        labels=tuple(label.name for label in issue.labels),
        issue_number=issue.number,
        url=issue.html_url,
        state=issue.state,
        metadata={"comments": issue.comments, "createdAt": issue.created_at.isoformat()},
    )


def translate_commit(commit: GitHubCommit, *, ingested_at: datetime | None = None) -> CanonicalEvent:
    title, description = _split_message(commit.commit.message)
    is_merge = len(commit.parents) >= 2
    impact = (
        ImpactMetrics(lines_added=commit.stats.additions, lines_removed=commit.stats.deletions)
        if commit.stats is not None
        else None
    )
    committer = commit.commit.committer
    return CanonicalEvent(
        id=commit.sha,
        canonical_id=_canonical_id(commit.sha),
        provider_id=PROVIDER_ID,
        type=EventType.MERGE if is_merge else EventType.COMMIT,
        timestamp=commit.commit.author.date,
        ingested_at=ingested_at,
        title=title,
        description=description,
        author=_build_commit_author(commit.commit.author, commit.author),
        hash=commit.sha,
        full_hash=commit.sha,
        url=commit.html_url,
        parent_ids=tuple(parent.sha for parent in commit.parents),
        impact=impact,
        refs=EventRefs(sha=commit.sha),
        metadata={
            "committer": {
                "name": committer.name,
                "email": committer.email,
                "date": committer.date.isoformat(),
            },
            "parentCount": len(commit.parents),
            "isMerge": is_merge,
        },
    )
