from __future__ import annotations

from collections import Counter
from pathlib import Path

import pytest

from repotimeline.adapters.git import GitCommandError, GitEventFetcher
from repotimeline.adapters.git.parsing import LOG_FORMAT, REFLOG_FORMAT, TAG_FORMAT
from repotimeline.config import GitConfig
from repotimeline.domain.model import EventType
from repotimeline.domain.ports import ProviderContext
from tests.helpers.events import FIXED_NOW, fixed_clock
from tests.helpers.git_output import (
    BASE_SHA,
    FEATURE_REFLOG_OUTPUT,
    FEATURE_SHA,
    LOG_OUTPUT,
    MERGE_SHA,
    TAG_OUTPUT,
)

REPO = Path("/work/widgets")
CONTEXT = ProviderContext(repo_path=REPO)


class FakeGitRunner:
    """Answers git invocations from a table keyed by the argument tuple."""

    def __init__(self, responses: dict[tuple[str, ...], str | Exception]) -> None:
        self._responses = responses
        self.calls: list[tuple[str, ...]] = []

    def __call__(self, repo_path: Path, *args: str) -> str:
        assert repo_path == REPO
        self.calls.append(args)
        response = self._responses[args]
        if isinstance(response, Exception):
            raise response
        return response


def _reflog_args(branch: str) -> tuple[str, ...]:
    return (
        "reflog",
        "show",
        "--date=unix",
        f"--format={REFLOG_FORMAT}",
        f"refs/heads/{branch}",
        "--",
    )


def _responses(*, max_commits: int = 1000, all_branches: bool = True) -> dict:
    log_args = ["log", f"--max-count={max_commits}", "--numstat"]
    if all_branches:
        log_args.append("--all")
    log_args.append(f"--pretty=format:{LOG_FORMAT}")
    reflog_error = GitCommandError(_reflog_args("main"), "no reflog", returncode=128)
    return {
        ("for-each-ref", "--format=%(refname:short)", "refs/heads"): "main\nfeature/export\n",
        ("rev-list", f"--max-count={max_commits}", "main", "--"): f"{MERGE_SHA}\n{BASE_SHA}\n",
        (
            "rev-list",
            f"--max-count={max_commits}",
            "feature/export",
            "--",
        ): f"{FEATURE_SHA}\n{BASE_SHA}\n",
        tuple(log_args): LOG_OUTPUT,
        ("for-each-ref", f"--format={TAG_FORMAT}", "refs/tags"): TAG_OUTPUT,
        _reflog_args("main"): reflog_error,
        _reflog_args("feature/export"): FEATURE_REFLOG_OUTPUT,
    }


def test_fetcher_emits_commits_releases_and_branches() -> None:
    runner = FakeGitRunner(_responses())
    fetcher = GitEventFetcher(runner=runner, clock=fixed_clock)

    events = fetcher(CONTEXT)

    assert fetcher.provider_id == "git-local"
    assert Counter(event.type for event in events) == {
        EventType.MERGE: 1,
        EventType.COMMIT: 2,
        EventType.RELEASE: 2,
        EventType.BRANCH_CREATED: 1,
    }
    assert all(event.ingested_at == FIXED_NOW for event in events)


def test_commits_know_the_branches_containing_them() -> None:
    events = GitEventFetcher(runner=FakeGitRunner(_responses()), clock=fixed_clock)(CONTEXT)
    by_id = {event.id: event for event in events}

    assert by_id[BASE_SHA].branches == ("main", "feature/export")
    assert by_id[BASE_SHA].primary_branch == "main"
    assert by_id[FEATURE_SHA].branches == ("feature/export",)
    assert by_id[f"{MERGE_SHA}-release-v1.2.0"].branches == ("main",)


def test_branch_creation_uses_oldest_reflog_entry() -> None:
    events = GitEventFetcher(runner=FakeGitRunner(_responses()), clock=fixed_clock)(CONTEXT)

    (created,) = [event for event in events if event.type is EventType.BRANCH_CREATED]

    assert created.id == f"{BASE_SHA}-branch-feature/export"
    assert created.metadata["reflogSubject"] == "branch: Created from main"


def test_config_limits_log_scope() -> None:
    runner = FakeGitRunner(_responses(max_commits=50, all_branches=False))
    fetcher = GitEventFetcher(
        config=GitConfig(max_commits=50, all_branches=False),
        runner=runner,
        clock=fixed_clock,
    )

    fetcher(CONTEXT)

    log_calls = [call for call in runner.calls if call[0] == "log"]
    assert log_calls == [("log", "--max-count=50", "--numstat", f"--pretty=format:{LOG_FORMAT}")]


def test_failing_git_command_propagates() -> None:
    responses = _responses()
    responses[("for-each-ref", "--format=%(refname:short)", "refs/heads")] = GitCommandError(
        ("for-each-ref",), "not a git repository", returncode=128
    )
    fetcher = GitEventFetcher(runner=FakeGitRunner(responses))

    with pytest.raises(GitCommandError, match="not a git repository"):
        fetcher(CONTEXT)


def test_tags_sharing_a_commit_stay_distinct() -> None:
    responses = _responses()
    alias = "\x1f".join(
        [
            "v1.2",
            "8888888888888888888888888888888888888888",
            MERGE_SHA,
            "2024-03-02T10:05:00+00:00",
            "Octo Cat",
            "<octo@example.com>",
            "",
            "",
        ]
    )
    responses[("for-each-ref", f"--format={TAG_FORMAT}", "refs/tags")] = f"{TAG_OUTPUT}{alias}\n"

    events = GitEventFetcher(runner=FakeGitRunner(responses), clock=fixed_clock)(CONTEXT)

    releases = [event for event in events if event.hash == MERGE_SHA]
    assert sorted(event.id for event in releases) == [
        f"{MERGE_SHA}-release-v1.2",
        f"{MERGE_SHA}-release-v1.2.0",
    ]
    assert len({event.canonical_id for event in releases}) == 2
    assert len({event.id for event in events}) == len(events)
