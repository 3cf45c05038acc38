"""Application configuration helpers."""

from __future__ import annotations

from .env import require_env_vars
from .errors import ConfigurationError, MissingConfigurationError
from .git import GitConfig, get_git_config
from .github import GitHubConfig, get_github_config
from .http_resilience import CacheConfig, RateLimit, ResilienceConfig, RetryPolicy
from .logging import configure_logging
from .reconciliation import ReconciliationConfig, get_reconciliation_config
from .storage import StorageConfig, get_storage_config

__all__ = [
    "CacheConfig",
    "ConfigurationError",
    "GitConfig",
    "GitHubConfig",
    "MissingConfigurationError",
    "RateLimit",
    "ReconciliationConfig",
    "ResilienceConfig",
    "RetryPolicy",
    "StorageConfig",
    "configure_logging",
    "get_git_config",
    "get_github_config",
    "get_reconciliation_config",
    "get_storage_config",
    "require_env_vars",
]
