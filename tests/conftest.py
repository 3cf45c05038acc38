from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest

DATA_DIR = Path(__file__).resolve().parent / "data"


@pytest.fixture(autouse=True)
def _isolated_environment(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Keep developer ``.env`` values and cache directories out of tests."""

    for name in (
        "GITHUB_TOKEN",
        "REPOTIMELINE_GIT_MAX_COMMITS",
        "REPOTIMELINE_GIT_TIMEOUT",
        "REPOTIMELINE_GIT_ALL_BRANCHES",
        "REPOTIMELINE_GITHUB_API_URL",
        "REPOTIMELINE_GITHUB_MAX_ITEMS",
        "REPOTIMELINE_PROVIDER_PRIORITY",
        "REPOTIMELINE_METRICS_PROVIDER",
        "REPOTIMELINE_GROUPING",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("REPOTIMELINE_DATA_DIR", str(tmp_path / "data"))


GitHubPayload = list[dict[str, Any]]


def _load_fixture(name: str) -> GitHubPayload:
    return json.loads((DATA_DIR / "github" / name).read_text())


@pytest.fixture(scope="session")
def github_pulls_payload() -> GitHubPayload:
    return _load_fixture("pulls.json")


@pytest.fixture(scope="session")
def github_releases_payload() -> GitHubPayload:
    return _load_fixture("releases.json")


@pytest.fixture(scope="session")
def github_issues_payload() -> GitHubPayload:
    return _load_fixture("issues.json")


@pytest.fixture(scope="session")
def github_commits_payload() -> GitHubPayload:
    return _load_fixture("commits.json")
