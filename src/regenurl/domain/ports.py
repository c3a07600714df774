"""Ports the regeneration service depends on.

Adapters for a concrete platform implement these; tests substitute in-memory fakes.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Collection, Iterable, Mapping
    from types import TracebackType

    from regenurl.domain.model import CatalogProduct, PersistOutcome, Store, UrlRewrite


@runtime_checkable
class StoreRegistry(Protocol):
    """Lists the configured storefronts."""

    def list_stores(self, *, include_default: bool = False) -> list[Store]: ...


@runtime_checkable
class ProductSource(Protocol):
    """Yields enabled, visible products of one store.

    An empty ``product_ids`` collection means every eligible product.
    """

    def query(
        self,
        *,
        store_id: int,
        product_ids: Collection[int] = (),
    ) -> Iterable[CatalogProduct]: ...


@runtime_checkable
class UrlRewriteGenerator(Protocol):
    """Produces the URL rewrites of a product, keyed by request path."""

    def generate(self, product: CatalogProduct) -> Mapping[str, UrlRewrite]: ...


@runtime_checkable
class UrlRewriteStore(Protocol):
    """Persistence contract for URL rewrites."""

    def delete_by_criteria(
        self,
        *,
        entity_id: int,
        entity_type: str,
        redirect_type: int,
        store_id: int,
    ) -> None: ...

    def replace(self, rewrites: Mapping[str, UrlRewrite]) -> PersistOutcome: ...


@runtime_checkable
class CacheInvalidator(Protocol):
    """Publishes cache invalidation for entities grouped under a cache tag."""

    def publish(self, tag: str, entity_ids: Collection[int]) -> None: ...


@runtime_checkable
class CatalogRepositories(Protocol):
    """Adapters sharing one unit of work."""

    @property
    def stores(self) -> StoreRegistry: ...

    @property
    def products(self) -> ProductSource: ...

    @property
    def rewrites(self) -> UrlRewriteStore: ...


@runtime_checkable
class CatalogUnitOfWork(Protocol):
    """Unit-of-work boundary around the catalog adapters."""

    @property
    def repositories(self) -> CatalogRepositories: ...

    def __enter__(self) -> CatalogUnitOfWork: ...

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> bool: ...

    def commit(self) -> None: ...

    def rollback(self) -> None: ...


__all__ = [
    "CacheInvalidator",
    "CatalogRepositories",
    "CatalogUnitOfWork",
    "ProductSource",
    "StoreRegistry",
    "UrlRewriteGenerator",
    "UrlRewriteStore",
]
