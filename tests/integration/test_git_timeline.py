"""End-to-end timeline over a real throwaway git repository."""

from __future__ import annotations

import shutil
import subprocess
from typing import TYPE_CHECKING

import pytest

from repotimeline.adapters.git import GitEventFetcher
from repotimeline.app import build_timeline
from repotimeline.config import GitConfig, ReconciliationConfig
from repotimeline.domain.model import EventType
from repotimeline.domain.ports import ProviderContext
from repotimeline.domain.reconciliation import SourcePolicy
from tests.helpers.events import fixed_clock

if TYPE_CHECKING:
    from pathlib import Path

pytestmark = pytest.mark.skipif(shutil.which("git") is None, reason="git is not installed")

_IDENTITY = ("-c", "user.name=Octo Cat", "-c", "user.email=octo@example.com")


def _git(repo: Path, *args: str) -> None:
    subprocess.run(  # noqa: S603
        ["git", "-C", str(repo), *_IDENTITY, *args],  # noqa: S607
        check=True,
        capture_output=True,
    )


@pytest.fixture
def repository(tmp_path: Path) -> Path:
    repo = tmp_path / "widgets"
    repo.mkdir()
    _git(repo, "init", "--initial-branch=main")
    (repo / "README.md").write_text("widgets\n", encoding="utf-8")
    _git(repo, "add", "README.md")
    _git(repo, "commit", "-m", "Initial commit")
    _git(repo, "switch", "-c", "feature/export")
    (repo / "export.py").write_text("print('export')\n", encoding="utf-8")
    _git(repo, "add", "export.py")
    _git(repo, "commit", "-m", "Add CSV export (#12)")
    _git(repo, "switch", "main")
    _git(
        repo,
        "merge",
        "--no-ff",
        "-m",
        "Merge pull request #12 from octo/feature/export",
        "feature/export",
    )
    _git(repo, "tag", "-a", "v1.0.0", "-m", "First release")
    return repo


@pytest.mark.integration
def test_local_repository_timeline(repository: Path) -> None:
    context = ProviderContext(repo_path=repository)
    fetcher = GitEventFetcher(config=GitConfig(max_commits=100), clock=fixed_clock)

    result = build_timeline(
        context,
        fetchers=[fetcher],
        reconciliation=ReconciliationConfig(policy=SourcePolicy()),
        now=fixed_clock,
    )

    by_type: dict[EventType, list[str]] = {}
    for event in result.events:
        by_type.setdefault(event.type, []).append(event.title)

    assert sorted(by_type[EventType.COMMIT]) == ["Add CSV export (#12)", "Initial commit"]
    assert by_type[EventType.MERGE] == ["Merge pull request #12 from octo/feature/export"]
    assert by_type[EventType.RELEASE] == ["Release: v1.0.0"]
    assert result.stats.merged_count == 0
    assert result.stats.total_output == result.stats.total_input

    (merge,) = [event for event in result.events if event.type is EventType.MERGE]
    assert merge.pull_request_number == 12
    assert merge.primary_branch == "main"
    (release,) = [event for event in result.events if event.type is EventType.RELEASE]
    assert release.hash == merge.full_hash
