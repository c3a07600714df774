"""URL regeneration defaults."""

from __future__ import annotations

from dataclasses import dataclass

from regenurl.domain.invalidation import DEFAULT_INVALIDATION_BATCH_LIMIT

from .env import optional_env_var, positive_int_env_var

DEFAULT_URL_SUFFIX = ".html"


@dataclass(frozen=True, slots=True)
class RegenerationConfig:
    invalidation_batch_limit: int = DEFAULT_INVALIDATION_BATCH_LIMIT
    url_suffix: str = DEFAULT_URL_SUFFIX


def get_regeneration_config() -> RegenerationConfig:
    suffix = optional_env_var("REGENURL_URL_SUFFIX")
    return RegenerationConfig(
        invalidation_batch_limit=positive_int_env_var(
            "REGENURL_INVALIDATION_BATCH_LIMIT", DEFAULT_INVALIDATION_BATCH_LIMIT
        ),
        url_suffix=DEFAULT_URL_SUFFIX if suffix is None else suffix,
    )
