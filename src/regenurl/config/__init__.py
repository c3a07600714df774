"""Application configuration helpers."""

from __future__ import annotations

from .cache import CacheInvalidationConfig, get_cache_invalidation_config
from .errors import ConfigurationError
from .http_resilience import RateLimit, ResilienceConfig, RetryPolicy
from .logging import configure_logging
from .regeneration import RegenerationConfig, get_regeneration_config
from .storage import DatabaseConfig, StorageConfig, get_database_config, get_storage_config

__all__ = [
    "CacheInvalidationConfig",
    "ConfigurationError",
    "DatabaseConfig",
    "RateLimit",
    "RegenerationConfig",
    "ResilienceConfig",
    "RetryPolicy",
    "StorageConfig",
    "configure_logging",
    "get_cache_invalidation_config",
    "get_database_config",
    "get_regeneration_config",
    "get_storage_config",
]
