"""Ports for fetching raw timeline events from providers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from pathlib import Path

    from repotimeline.domain.model import CanonicalEvent


class ProviderError(RuntimeError):
    """Raised by a provider that cannot deliver its events."""


@dataclass(slots=True, frozen=True)
class RepositoryRef:
    """Hosted repository coordinates (``owner/name``)."""

    owner: str
    name: str

    @classmethod
    def parse(cls, value: str) -> RepositoryRef:
        owner, sep, name = value.strip().partition("/")
        if not sep or not owner or not name or "/" in name:
            raise ValueError(f"Expected OWNER/NAME, got {value!r}")
        return cls(owner=owner, name=name)

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.name}"


@dataclass(slots=True, frozen=True)
class ProviderContext:
    """What every provider is told about the repository being observed."""

    repo_path: Path
    remote: RepositoryRef | None = None


@runtime_checkable
class EventFetcher(Protocol):
    """Callable port for retrieving raw events from one provider."""

    provider_id: str

    def __call__(self, context: ProviderContext) -> list[CanonicalEvent]:
        ...


__all__ = ["EventFetcher", "ProviderContext", "ProviderError", "RepositoryRef"]
