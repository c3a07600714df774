"""Bounded batching of cache invalidation requests."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable

DEFAULT_INVALIDATION_BATCH_LIMIT = 10_000


class InvalidationBatch:
    """Insertion-ordered set of entity ids awaiting invalidation.

    ``add`` reports when the batch has grown past ``limit``; the caller is expected
    to ``drain`` it at that point.
    """

    def __init__(self, limit: int = DEFAULT_INVALIDATION_BATCH_LIMIT) -> None:
        if limit < 1:
            raise ValueError(f"Invalidation batch limit must be positive, got {limit}")
        self.limit = limit
        self._ids: dict[int, None] = {}

    def add(self, entity_id: int) -> bool:
        self._ids[entity_id] = None
        return len(self._ids) > self.limit

    def drain(self) -> list[int]:
        ids = list(self._ids)
        self._ids.clear()
        return ids

    def __len__(self) -> int:
        return len(self._ids)

    def __bool__(self) -> bool:
        return bool(self._ids)

    def __contains__(self, entity_id: object) -> bool:
        return entity_id in self._ids


def cache_tags(tag: str, entity_ids: Iterable[int]) -> tuple[str, ...]:
    """Return per-entity cache identities such as ``cat_p_42``."""

    return tuple(f"{tag}_{entity_id}" for entity_id in entity_ids)
