"""Cache invalidation (HTTP purge) configuration values."""

from __future__ import annotations

from dataclasses import dataclass, field

from .env import optional_env_var, positive_float_env_var, positive_int_env_var
from .http_resilience import RateLimit, ResilienceConfig

PURGE_TIMEOUT_SECONDS = 10.0
DEFAULT_MAX_HEADER_LENGTH = 8000
TAGS_PATTERN_HEADER = "X-Magento-Tags-Pattern"


@dataclass(frozen=True, slots=True)
class CacheInvalidationConfig:
    """Purge endpoints and limits for tag-based cache invalidation."""

    servers: tuple[str, ...] = ()
    max_header_length: int = DEFAULT_MAX_HEADER_LENGTH
    header_name: str = TAGS_PATTERN_HEADER
    resilience: ResilienceConfig = field(
        default_factory=lambda: ResilienceConfig(
            name="cache-purge", timeout_seconds=PURGE_TIMEOUT_SECONDS
        )
    )

    @property
    def enabled(self) -> bool:
        return bool(self.servers)


def _parse_servers(raw: str | None) -> tuple[str, ...]:
    if raw is None:
        return ()
    return tuple(server.strip().rstrip("/") for server in raw.split(",") if server.strip())


def get_cache_invalidation_config(
    *,
    resilience: ResilienceConfig | None = None,
) -> CacheInvalidationConfig:
    timeout = positive_float_env_var("REGENURL_PURGE_TIMEOUT", PURGE_TIMEOUT_SECONDS)
    return CacheInvalidationConfig(
        servers=_parse_servers(optional_env_var("REGENURL_PURGE_SERVERS")),
        max_header_length=positive_int_env_var(
            "REGENURL_PURGE_MAX_HEADER_LENGTH", DEFAULT_MAX_HEADER_LENGTH
        ),
        resilience=resilience
        or ResilienceConfig(
            name="cache-purge",
            timeout_seconds=timeout,
            ratelimit=RateLimit(max_calls=10, per_seconds=1.0),
        ),
    )
