"""Local git clone event provider."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from logging import getLogger
from typing import TYPE_CHECKING

from repotimeline.config.git import GitConfig
from repotimeline.domain.model import Provider

from .client import GitCommandError, GitCommandRunner
from .parsing import (
    LOG_FORMAT,
    REFLOG_FORMAT,
    TAG_FORMAT,
    parse_log_output,
    parse_reflog_output,
    parse_tag_output,
)
from .translator import translate_branch_created, translate_commit, translate_tag

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path

    from repotimeline.domain.model import CanonicalEvent
    from repotimeline.domain.ports import ProviderContext

    from .client import GitRunner

log = getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(UTC)


@dataclass(slots=True)
class GitEventFetcher:
    config: GitConfig = field(default_factory=GitConfig)
    runner: GitRunner | None = None
    clock: Callable[[], datetime] = _utcnow
    provider_id: str = field(default=Provider.GIT_LOCAL.value, init=False)

    def __call__(self, context: ProviderContext) -> list[CanonicalEvent]:
        repo = context.repo_path
        ingested_at = self.clock()
        branches = self._local_branches(repo)
        containment = self._branch_containment(repo, branches)

        events = self._commit_events(repo, containment, ingested_at)
        events.extend(self._release_events(repo, containment, ingested_at))
        events.extend(self._branch_events(repo, branches, ingested_at))

        log.info("Extracted %d git events from %s", len(events), repo)
        return events

    def _git(self, repo: Path, *args: str) -> str:
        if self.runner is None:
            self.runner = GitCommandRunner(
                timeout_seconds=self.config.timeout_seconds,
                git_binary=self.config.git_binary,
            )
        return self.runner(repo, *args)

    def _local_branches(self, repo: Path) -> list[str]:
        output = self._git(repo, "for-each-ref", "--format=%(refname:short)", "refs/heads")
        return [line.strip() for line in output.splitlines() if line.strip()]

    def _branch_containment(self, repo: Path, branches: list[str]) -> dict[str, list[str]]:
        """Map commit sha to the local branches it is reachable from."""

        containment: dict[str, list[str]] = {}
        for branch in branches:
            output = self._git(
                repo, "rev-list", f"--max-count={self.config.max_commits}", branch, "--"
            )
            for sha in output.split():
                containment.setdefault(sha, []).append(branch)
        return containment

    def _commit_events(
        self, repo: Path, containment: dict[str, list[str]], ingested_at: datetime
    ) -> list[CanonicalEvent]:
        args = ["log", f"--max-count={self.config.max_commits}", "--numstat"]
        if self.config.all_branches:
            args.append("--all")
        args.append(f"--pretty=format:{LOG_FORMAT}")
        records = parse_log_output(self._git(repo, *args))
        return [
            translate_commit(
                record, branches=containment.get(record.sha, ()), ingested_at=ingested_at
            )
            for record in records
        ]

    def _release_events(
        self, repo: Path, containment: dict[str, list[str]], ingested_at: datetime
    ) -> list[CanonicalEvent]:
        output = self._git(repo, "for-each-ref", f"--format={TAG_FORMAT}", "refs/tags")
        return [
            translate_tag(tag, branches=containment, ingested_at=ingested_at)
            for tag in parse_tag_output(output)
        ]

    def _branch_events(
        self, repo: Path, branches: list[str], ingested_at: datetime
    ) -> list[CanonicalEvent]:
        events: list[CanonicalEvent] = []
        for branch in branches:
            try:
                output = self._git(
                    repo,
                    "reflog",
                    "show",
                    "--date=unix",
                    f"--format={REFLOG_FORMAT}",
                    f"refs/heads/{branch}",
                    "--",
                )
            except GitCommandError as exc:
                log.debug("No reflog for branch %s: %s", branch, exc)
                continue
            entries = parse_reflog_output(output)
            if not entries:
                continue
            # Reflog lists newest first; the oldest entry is the creation.
            events.append(translate_branch_created(branch, entries[-1], ingested_at=ingested_at))
        return events
