"""Resolve the hosted repository behind a local clone."""

from __future__ import annotations

import re
from logging import getLogger
from typing import TYPE_CHECKING

from repotimeline.domain.ports import RepositoryRef

from .client import GitCommandError, GitCommandRunner

if TYPE_CHECKING:
    from pathlib import Path

    from .client import GitRunner

log = getLogger(__name__)

_GITHUB_REMOTE_RE = re.compile(r"github\.com[:/]([^/]+)/(.+?)(?:\.git)?/?$")


def parse_github_remote(url: str) -> RepositoryRef | None:
    """``owner/name`` from an HTTPS or SSH GitHub remote URL."""

    found = _GITHUB_REMOTE_RE.search(url.strip())
    if found is None:
        return None
    return RepositoryRef(owner=found.group(1), name=found.group(2))


def resolve_github_remote(
    repo_path: Path,
    *,
    remote: str = "origin",
    runner: GitRunner | None = None,
) -> RepositoryRef | None:
    active_runner = runner or GitCommandRunner()
    try:
        url = active_runner(repo_path, "remote", "get-url", remote)
    except GitCommandError as exc:
        log.info("No %s remote for %s: %s", remote, repo_path, exc)
        return None
    ref = parse_github_remote(url)
    if ref is None:
        log.info("Remote %s of %s is not hosted on GitHub", remote, repo_path)
    return ref
