"""Tag-based cache invalidation through HTTP ``PURGE`` requests."""

from __future__ import annotations

import asyncio
import re
from logging import getLogger
from typing import TYPE_CHECKING

from regenurl.adapters.http_resilience import ResilientClient
from regenurl.domain.invalidation import cache_tags

if TYPE_CHECKING:
    from collections.abc import Callable, Collection, Iterable, Iterator

    from regenurl.config.cache import CacheInvalidationConfig
    from regenurl.config.http_resilience import ResilienceConfig

log = getLogger(__name__)

_PATTERN_SEPARATOR = "|"


class CacheInvalidationError(RuntimeError):
    """Raised when a cache server rejects a purge request."""


def tag_pattern(tag: str) -> str:
    """Return the header regex matching ``tag`` inside a comma separated tag list."""

    return f"((^|,){re.escape(tag)}(,|$))"


def chunk_tag_patterns(tags: Iterable[str], max_length: int) -> Iterator[str]:
    """Join tag patterns into header values no longer than ``max_length``.

    A single pattern longer than ``max_length`` is emitted on its own.
    """

    chunk: list[str] = []
    size = 0
    for tag in tags:
        pattern = tag_pattern(tag)
        extra = len(pattern) + (len(_PATTERN_SEPARATOR) if chunk else 0)
        if chunk and size + extra > max_length:
            yield _PATTERN_SEPARATOR.join(chunk)
            chunk = []
            size = 0
            extra = len(pattern)
        chunk.append(pattern)
        size += extra
    if chunk:
        yield _PATTERN_SEPARATOR.join(chunk)


class VarnishCacheInvalidator:
    """Purge cached pages tagged with the given entities on every configured server."""

    def __init__(
        self,
        config: CacheInvalidationConfig,
        *,
        client_factory: Callable[[ResilienceConfig], ResilientClient] | None = None,
    ) -> None:
        if not config.servers:
            raise ValueError("At least one purge server is required")
        self._config = config
        self._client_factory = client_factory or ResilientClient

    def publish(self, tag: str, entity_ids: Collection[int]) -> None:
        if not entity_ids:
            return
        headers = list(
            chunk_tag_patterns(cache_tags(tag, entity_ids), self._config.max_header_length)
        )
        asyncio.run(self._purge_all(headers))
        log.debug(
            "Purged %s %s entities in %s request(s) per server",
            len(entity_ids),
            tag,
            len(headers),
        )

    async def _purge_all(self, header_values: list[str]) -> None:
        client = self._client_factory(self._config.resilience)
        try:
            for server in self._config.servers:
                for value in header_values:
                    response = await client.purge(
                        server + "/",
                        headers={self._config.header_name: value},
                    )
                    if response.is_error:
                        raise CacheInvalidationError(
                            f"Purge request to {server} failed with status "
                            f"{response.status_code}"
                        )
        finally:
            await client.aclose()


class NullCacheInvalidator:
    """Invalidator used when no cache server is configured."""

    def publish(self, tag: str, entity_ids: Collection[int]) -> None:
        log.debug("No cache servers configured; skipping %s %s invalidations", len(entity_ids), tag)


if TYPE_CHECKING:
    from regenurl.domain.ports import CacheInvalidator

    _null_check: CacheInvalidator = NullCacheInvalidator()
