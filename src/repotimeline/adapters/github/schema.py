"""Pydantic models describing the GitHub REST API payloads we consume."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class GitHubBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class GitHubUser(GitHubBaseModel):
    login: str
    id: int
    avatar_url: str | None = None
    html_url: str | None = None


class GitHubLabel(GitHubBaseModel):
    name: str
    color: str | None = None


class GitHubBranchRef(GitHubBaseModel):
    ref: str
    sha: str
    label: str | None = None


class GitHubPullRequest(GitHubBaseModel):
    number: int
    title: str
    body: str | None = None
    state: str
    html_url: str
    user: GitHubUser | None = None
    labels: list[GitHubLabel] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime | None = None
    closed_at: datetime | None = None
    merged_at: datetime | None = None
    merge_commit_sha: str | None = None
    head: GitHubBranchRef
    base: GitHubBranchRef
    draft: bool = False
    # Only present on the single-PR endpoint, absent from list responses.
    additions: int | None = None
    deletions: int | None = None
    changed_files: int | None = None
    commits: int | None = None


class GitHubRelease(GitHubBaseModel):
    id: int
    tag_name: str
    target_commitish: str
    name: str | None = None
    body: str | None = None
    draft: bool = False
    prerelease: bool = False
    created_at: datetime
    published_at: datetime | None = None
    html_url: str
    author: GitHubUser | None = None


class GitHubIssuePullRequestLink(GitHubBaseModel):
    url: str | None = None


class GitHubIssue(GitHubBaseModel):
    number: int
    title: str
    body: str | None = None
    state: str
    html_url: str
    user: GitHubUser | None = None
    labels: list[GitHubLabel] = Field(default_factory=list)
    created_at: datetime
    closed_at: datetime | None = None
    comments: int = 0
    pull_request: GitHubIssuePullRequestLink | None = None

    @property
    def is_pull_request(self) -> bool:
        return self.pull_request is not None


class GitHubCommitActor(GitHubBaseModel):
    name: str
    email: str
    date: datetime


class GitHubCommitDetail(GitHubBaseModel):
    author: GitHubCommitActor
    committer: GitHubCommitActor
    message: str


class GitHubParent(GitHubBaseModel):
    sha: str


class GitHubCommitStats(GitHubBaseModel):
    additions: int = 0
    deletions: int = 0
    total: int = 0


class GitHubCommit(GitHubBaseModel):
    sha: str
    html_url: str
    commit: GitHubCommitDetail
    author: GitHubUser | None = None
    parents: list[GitHubParent] = Field(default_factory=list)
    stats: GitHubCommitStats | None = None


class GitHubRateLimitResource(GitHubBaseModel):
    limit: int
    remaining: int
    reset: int


class GitHubRateLimit(GitHubBaseModel):
    core: GitHubRateLimitResource = Field(alias="rate")
