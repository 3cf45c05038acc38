"""Application orchestration entry points."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from repotimeline.adapters.git import GitEventFetcher
from repotimeline.adapters.github import GitHubEventFetcher
from repotimeline.config import (
    MissingConfigurationError,
    get_git_config,
    get_github_config,
    get_reconciliation_config,
)
from repotimeline.domain.ports import ProviderError
from repotimeline.domain.reconciliation import reconcile

if TYPE_CHECKING:
    from collections.abc import Sequence

    from repotimeline.config import GitConfig, ReconciliationConfig
    from repotimeline.domain.model import CanonicalEvent
    from repotimeline.domain.ports import EventFetcher, ProviderContext
    from repotimeline.domain.reconciliation import Clock, ReconciliationResult


log = getLogger(__name__)


def default_fetchers(
    context: ProviderContext,
    *,
    git: GitConfig | None = None,
    include_github: bool = True,
) -> list[EventFetcher]:
    """Local git always; GitHub when a remote is known and a token is configured."""

    fetchers: list[EventFetcher] = [GitEventFetcher(config=git or get_git_config())]
    if not include_github or context.remote is None:
        return fetchers
    try:
        github = get_github_config()
    except MissingConfigurationError as exc:
        log.warning("Skipping GitHub provider for %s: %s", context.remote.full_name, exc)
        return fetchers
    fetchers.append(GitHubEventFetcher(config=github))
    return fetchers


def collect_events(
    fetchers: Sequence[EventFetcher], context: ProviderContext
) -> list[CanonicalEvent]:
    """Concatenate raw events from every provider; a failing provider is skipped."""

    events: list[CanonicalEvent] = []
    for fetcher in fetchers:
        try:
            fetched = fetcher(context)
        except ProviderError as exc:
            log.warning("Provider %s failed, continuing without it: %s", fetcher.provider_id, exc)
            continue
        log.info("Provider %s returned %d events", fetcher.provider_id, len(fetched))
        events.extend(fetched)
    return events


def build_timeline(
    context: ProviderContext,
    *,
    fetchers: Sequence[EventFetcher] | None = None,
    reconciliation: ReconciliationConfig | None = None,
    now: Clock | None = None,
) -> ReconciliationResult:
    """Collect raw events from all providers and reconcile them."""

    active_fetchers = fetchers if fetchers is not None else default_fetchers(context)
    settings = reconciliation or get_reconciliation_config()
    log.info(
        "Building timeline for %s with providers=%s, grouping=%s",
        context.repo_path,
        [fetcher.provider_id for fetcher in active_fetchers],
        settings.strategy.value,
    )

    raw_events = collect_events(active_fetchers, context)
    return reconcile(raw_events, policy=settings.policy, strategy=settings.strategy, now=now)
