"""Where repotimeline keeps its HTTP response cache."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Final

from .env import env_str

HTTP_CACHE_FILENAME: Final[str] = "http_cache.db"


@dataclass(frozen=True, slots=True)
class StorageConfig:
    cache_dir: Path

    def http_cache_path(self) -> Path:
        """SQLite file backing the hishel cache; the directory is created on demand."""

        cache_dir = self.cache_dir.expanduser().resolve()
        cache_dir.mkdir(parents=True, exist_ok=True)
        return cache_dir / HTTP_CACHE_FILENAME


def get_storage_config() -> StorageConfig:
    """``REPOTIMELINE_DATA_DIR`` wins; otherwise ``$XDG_CACHE_HOME/repotimeline``."""

    override = env_str("REPOTIMELINE_DATA_DIR", None)
    if override is not None:
        return StorageConfig(cache_dir=Path(override))
    cache_home = env_str("XDG_CACHE_HOME", None)
    base = Path(cache_home) if cache_home else Path.home() / ".cache"
    return StorageConfig(cache_dir=base / "repotimeline")
