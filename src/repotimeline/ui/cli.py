from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from signal import SIGINT, signal
from typing import TYPE_CHECKING, TextIO

from dotenv import load_dotenv

from repotimeline.adapters.git import resolve_github_remote
from repotimeline.app import build_timeline, default_fetchers
from repotimeline.config import (
    ConfigurationError,
    configure_logging,
    get_git_config,
    get_reconciliation_config,
)
from repotimeline.domain.model import event_to_record
from repotimeline.domain.ports import ProviderContext, RepositoryRef
from repotimeline.domain.reconciliation import GroupingStrategy

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

    from repotimeline.domain.reconciliation import ReconciliationResult

log = logging.getLogger(__name__)


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Reconcile git and GitHub events into one repository timeline"
    )
    parser.add_argument(
        "--repo",
        type=Path,
        default=Path(),
        help="Path to the local git clone (default: current directory)",
    )
    parser.add_argument(
        "--github",
        type=str,
        metavar="OWNER/NAME",
        help="GitHub repository to query (defaults to the origin remote)",
    )
    parser.add_argument(
        "--no-github",
        action="store_true",
        help="Only read the local git clone",
    )
    parser.add_argument(
        "--max-commits",
        type=int,
        help="Maximum number of commits to read from git (defaults to config)",
    )
    parser.add_argument(
        "--grouping",
        choices=[strategy.value for strategy in GroupingStrategy],
        help="Equivalence grouping strategy (defaults to config, then 'anchor')",
    )
    parser.add_argument(
        "--output",
        type=Path,
        help="Write JSON lines to this file instead of stdout",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log matching and merging decisions",
    )
    return parser.parse_args(list(argv))


def _build_context(args: argparse.Namespace) -> ProviderContext:
    repo_path = args.repo.expanduser().resolve()
    if not repo_path.is_dir():
        raise ValueError(f"Repository path does not exist: {repo_path}")
    if args.max_commits is not None and args.max_commits < 1:
        raise ValueError("--max-commits must be positive")

    remote: RepositoryRef | None = None
    if args.github and not args.no_github:
        remote = RepositoryRef.parse(args.github)
    elif not args.no_github:
        remote = resolve_github_remote(repo_path)
    return ProviderContext(repo_path=repo_path, remote=remote)


def write_json_lines(result: ReconciliationResult, stream: TextIO) -> None:
    for event in result.events:
        stream.write(json.dumps(event_to_record(event), ensure_ascii=False))
        stream.write("\n")


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    parsed_args = _parse_args(args_list)
    configure_logging(level=logging.DEBUG if parsed_args.verbose else logging.INFO)

    try:
        context = _build_context(parsed_args)
        reconciliation = get_reconciliation_config(strategy=parsed_args.grouping)
        git = get_git_config(max_commits=parsed_args.max_commits)
    except (ValueError, ConfigurationError):
        log.exception("CLI validation error")
        sys.exit(2)

    try:
        fetchers = default_fetchers(context, git=git, include_github=not parsed_args.no_github)
        result = build_timeline(context, fetchers=fetchers, reconciliation=reconciliation)
        if parsed_args.output is not None:
            with parsed_args.output.open("w", encoding="utf-8") as stream:
                write_json_lines(result, stream)
        else:
            write_json_lines(result, sys.stdout)
        log.info("Timeline stats: %s", json.dumps(result.stats.as_dict()))
    except Exception:
        log.exception("Fatal error while building the timeline")
        sys.exit(1)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
