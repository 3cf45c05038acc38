"""Thin subprocess wrapper around the ``git`` binary."""

from __future__ import annotations

import subprocess
from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING, Protocol

from repotimeline.domain.ports import ProviderError

if TYPE_CHECKING:
    from pathlib import Path

log = getLogger(__name__)


class GitCommandError(ProviderError):
    """Raised when a git invocation fails, times out or git is unavailable."""

    def __init__(self, args: tuple[str, ...], message: str, *, returncode: int | None = None):
        super().__init__(f"git {' '.join(args)}: {message}")
        self.command_args = args
        self.returncode = returncode


class GitRunner(Protocol):
    def __call__(self, repo_path: Path, *args: str) -> str: ...


@dataclass(slots=True, frozen=True)
class GitCommandRunner:
    """Run ``git -C <repo> <args>`` and return stdout."""

    timeout_seconds: float = 30.0
    git_binary: str = "git"

    def __call__(self, repo_path: Path, *args: str) -> str:
        command = [self.git_binary, "-C", str(repo_path), *args]
        log.debug("Running %s", " ".join(command))
        try:
            completed = subprocess.run(  # noqa: S603
                command,
                capture_output=True,
                text=True,
                encoding="utf-8",
                errors="replace",
                timeout=self.timeout_seconds,
                check=False,
            )
        except FileNotFoundError as exc:
            raise GitCommandError(args, f"{self.git_binary} executable not found") from exc
        except subprocess.TimeoutExpired as exc:
            raise GitCommandError(args, f"timed out after {self.timeout_seconds}s") from exc

        if completed.returncode != 0:
            raise GitCommandError(
                args,
                completed.stderr.strip() or "failed",
                returncode=completed.returncode,
            )
        return completed.stdout
