"""Reconciliation policy configuration values."""

from __future__ import annotations

from dataclasses import dataclass

from repotimeline.domain.reconciliation import GroupingStrategy, SourcePolicy
from repotimeline.domain.reconciliation.policy import DEFAULT_METRICS_PROVIDER, DEFAULT_PRIORITY

from .env import env_list, env_str
from .errors import ConfigurationError


@dataclass(frozen=True, slots=True)
class ReconciliationConfig:
    policy: SourcePolicy
    strategy: GroupingStrategy = GroupingStrategy.ANCHOR


def get_reconciliation_config(*, strategy: str | None = None) -> ReconciliationConfig:
    priority = env_list("REPOTIMELINE_PROVIDER_PRIORITY", DEFAULT_PRIORITY)
    metrics_provider = env_str("REPOTIMELINE_METRICS_PROVIDER", DEFAULT_METRICS_PROVIDER)
    raw_strategy = strategy or env_str("REPOTIMELINE_GROUPING", GroupingStrategy.ANCHOR.value)
    try:
        grouping = GroupingStrategy(str(raw_strategy).lower())
    except ValueError as exc:
        choices = ", ".join(member.value for member in GroupingStrategy)
        raise ConfigurationError(
            f"REPOTIMELINE_GROUPING must be one of {choices}, got {raw_strategy!r}"
        ) from exc

    return ReconciliationConfig(
        policy=SourcePolicy(priority=priority, metrics_provider=metrics_provider),
        strategy=grouping,
    )
