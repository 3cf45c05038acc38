"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import StrEnum


class Provider(StrEnum):
    """Well-known provider ids.

    ``CanonicalEvent.provider_id`` is a plain string, so hosts may register
    providers beyond these two.
    """

    GIT_LOCAL = "git-local"
    GITHUB = "github"


class EventType(StrEnum):
    # git
    COMMIT = "commit"
    MERGE = "merge"
    BRANCH_CREATED = "branch-created"
    BRANCH_DELETED = "branch-deleted"
    BRANCH_CHECKOUT = "branch-checkout"
    TAG_CREATED = "tag-created"

    # releases
    RELEASE = "release"
    DEPLOYMENT = "deployment"

    # pull requests
    PR_OPENED = "pr-opened"
    PR_MERGED = "pr-merged"
    PR_CLOSED = "pr-closed"
    PR_REVIEWED = "pr-reviewed"

    # issues
    ISSUE_OPENED = "issue-opened"
    ISSUE_CLOSED = "issue-closed"
    ISSUE_COMMENTED = "issue-commented"

    # ci
    BUILD_SUCCESS = "build-success"
    BUILD_FAILED = "build-failed"
    TEST_RUN = "test-run"

    CUSTOM = "custom"


PULL_REQUEST_EVENT_TYPES = frozenset(
    {EventType.PR_OPENED, EventType.PR_MERGED, EventType.PR_CLOSED}
)
BRANCH_LIFECYCLE_EVENT_TYPES = frozenset({EventType.BRANCH_CREATED, EventType.BRANCH_DELETED})
