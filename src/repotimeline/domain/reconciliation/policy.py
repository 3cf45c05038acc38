"""Source authority and field conflict policy for merging.

The policy answers two questions for the merge resolver:
- which provider is the authority for scalar fields (``priority``)
- which provider's numbers win for impact and links (``metrics_provider``)

Metadata keys that collide across providers are resolved per key through
``metadata_rules``; unlisted keys fall back to ``default_metadata_rule``.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import StrEnum
from types import MappingProxyType
from typing import Final

from repotimeline.domain.model import Provider

DEFAULT_PRIORITY: Final[tuple[str, ...]] = (Provider.GIT_LOCAL.value,)
DEFAULT_METRICS_PROVIDER: Final[str] = Provider.GITHUB.value


class MetadataRule(StrEnum):
    """Conflict rule for a metadata key present on several group members."""

    LAST_WINS = "last_wins"
    FIRST_WINS = "first_wins"
    PREFER_METRICS_PROVIDER = "prefer_metrics_provider"
    PREFER_AUTHORITY = "prefer_authority"


@dataclass(slots=True, frozen=True, kw_only=True)
class SourcePolicy:
    priority: tuple[str, ...] = DEFAULT_PRIORITY
    metrics_provider: str | None = DEFAULT_METRICS_PROVIDER
    metadata_rules: Mapping[str, MetadataRule] = field(
        default_factory=lambda: MappingProxyType({})
    )
    default_metadata_rule: MetadataRule = MetadataRule.LAST_WINS

    def rank(self, provider_id: str) -> int:
        """Authority rank; unlisted providers rank after every listed one."""

        try:
            return self.priority.index(provider_id)
        except ValueError:
            return len(self.priority)

    def rule_for(self, key: str) -> MetadataRule:
        return self.metadata_rules.get(key, self.default_metadata_rule)
