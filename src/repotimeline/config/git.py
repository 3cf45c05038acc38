"""Local git provider configuration values."""

from __future__ import annotations

from dataclasses import dataclass

from .env import env_bool, env_float, env_int

DEFAULT_GIT_MAX_COMMITS = 1000
DEFAULT_GIT_TIMEOUT_SECONDS = 30.0


@dataclass(frozen=True, slots=True)
class GitConfig:
    max_commits: int = DEFAULT_GIT_MAX_COMMITS
    timeout_seconds: float = DEFAULT_GIT_TIMEOUT_SECONDS
    all_branches: bool = True
    git_binary: str = "git"


def get_git_config(*, max_commits: int | None = None) -> GitConfig:
    return GitConfig(
        max_commits=max_commits
        or env_int("REPOTIMELINE_GIT_MAX_COMMITS", DEFAULT_GIT_MAX_COMMITS, minimum=1),
        timeout_seconds=env_float("REPOTIMELINE_GIT_TIMEOUT", DEFAULT_GIT_TIMEOUT_SECONDS),
        all_branches=env_bool("REPOTIMELINE_GIT_ALL_BRANCHES", True),
    )
