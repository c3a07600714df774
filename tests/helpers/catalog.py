"""Reusable fakes and helpers for URL regeneration tests."""

from __future__ import annotations

from typing import TYPE_CHECKING

from regenurl.domain.model import (
    CatalogProduct,
    PersistOutcome,
    ProductStatus,
    Store,
    UrlRewrite,
    Visibility,
)

if TYPE_CHECKING:
    from collections.abc import Collection, Iterable, Iterator, Mapping


def make_product(
    product_id: int,
    *,
    sku: str | None = None,
    status: ProductStatus = ProductStatus.ENABLED,
    visibility: Visibility = Visibility.BOTH,
    url_key: str | None = None,
) -> CatalogProduct:
    """Create a product with predictable defaults derived from its id."""

    return CatalogProduct(
        id=product_id,
        sku=sku or f"SKU-{product_id}",
        name=f"Product {product_id}",
        status=status,
        visibility=visibility,
        url_key=url_key or f"product-{product_id}",
    )


class FakeStoreRegistry:
    def __init__(self, stores: Iterable[Store]) -> None:
        self.stores = list(stores)

    def list_stores(self, *, include_default: bool = False) -> list[Store]:
        if include_default:
            return list(self.stores)
        return [store for store in self.stores if store.id != 0]


class FakeProductSource:
    """In-memory catalog applying the status, visibility and id filters."""

    def __init__(self, catalog: Mapping[int, Iterable[CatalogProduct]]) -> None:
        self.catalog = {store_id: list(products) for store_id, products in catalog.items()}
        self.calls: list[tuple[int, frozenset[int]]] = []

    def query(
        self,
        *,
        store_id: int,
        product_ids: Collection[int] = (),
    ) -> Iterator[CatalogProduct]:
        self.calls.append((store_id, frozenset(product_ids)))
        for product in self.catalog.get(store_id, []):
            if not (product.is_enabled and product.is_visible):
                continue
            if product_ids and product.id not in product_ids:
                continue
            yield product


class FakeUrlRewriteGenerator:
    """Generate ``rewrites_per_product`` deterministic rewrites for every product."""

    def __init__(self, rewrites_per_product: Mapping[int, int] | None = None) -> None:
        self.rewrites_per_product = dict(rewrites_per_product or {})
        self.seen: list[tuple[int, int]] = []

    def generate(self, product: CatalogProduct) -> dict[str, UrlRewrite]:
        self.seen.append((product.id, product.store_id))
        count = self.rewrites_per_product.get(product.id, 1)
        rewrites: dict[str, UrlRewrite] = {}
        for index in range(count):
            suffix = "" if index == 0 else f"-{index}"
            path = f"{product.url_key}{suffix}.html"
            rewrites[path] = UrlRewrite(
                entity_id=product.id,
                request_path=path,
                target_path=f"catalog/product/view/id/{product.id}",
                store_id=product.store_id,
            )
        return rewrites


class FakeUrlRewriteStore:
    """Rewrite store enforcing the unique ``(request_path, store_id)`` key.

    ``taken`` holds keys owned by other entities that always conflict.
    """

    def __init__(self, *, taken: Iterable[tuple[str, int]] = ()) -> None:
        self.rows: dict[tuple[str, int], UrlRewrite] = {}
        self.taken = set(taken)
        self.deletes: list[tuple[int, str, int, int]] = []
        self.fail_deletes = False
        self.failing_store: int | None = None
        self.replace_error: Exception | None = None

    def delete_by_criteria(
        self,
        *,
        entity_id: int,
        entity_type: str,
        redirect_type: int,
        store_id: int,
    ) -> None:
        if self.fail_deletes or store_id == self.failing_store:
            raise RuntimeError("delete failed")
        self.deletes.append((entity_id, entity_type, redirect_type, store_id))
        self.rows = {
            key: row
            for key, row in self.rows.items()
            if not (
                row.entity_id == entity_id
                and row.entity_type == entity_type
                and row.redirect_type == redirect_type
                and row.store_id == store_id
            )
        }

    def replace(self, rewrites: Mapping[str, UrlRewrite]) -> PersistOutcome:
        if self.replace_error is not None:
            raise self.replace_error
        values = list(rewrites.values())
        clashes = tuple(
            sorted(
                rewrite.request_path
                for rewrite in values
                if rewrite.unique_key in self.taken
                or (
                    rewrite.unique_key in self.rows
                    and self.rows[rewrite.unique_key].entity_id != rewrite.entity_id
                )
            )
        )
        if clashes:
            return PersistOutcome.conflict(
                "URL key for specified store already exists", paths=clashes
            )
        for rewrite in values:
            self.rows[rewrite.unique_key] = rewrite
        return PersistOutcome.stored_count(len(values))

    def paths_for(self, store_id: int) -> set[str]:
        return {path for path, row_store in self.rows if row_store == store_id}


class FakeCacheInvalidator:
    def __init__(self, *, error: Exception | None = None) -> None:
        self.calls: list[tuple[str, tuple[int, ...]]] = []
        self.error = error

    def publish(self, tag: str, entity_ids: Collection[int]) -> None:
        self.calls.append((tag, tuple(entity_ids)))
        if self.error is not None:
            raise self.error


if TYPE_CHECKING:
    from regenurl.domain.ports import (
        CacheInvalidator,
        ProductSource,
        StoreRegistry,
        UrlRewriteGenerator,
        UrlRewriteStore,
    )

    _registry_check: StoreRegistry = FakeStoreRegistry([])
    _source_check: ProductSource = FakeProductSource({})
    _generator_check: UrlRewriteGenerator = FakeUrlRewriteGenerator()
    _store_check: UrlRewriteStore = FakeUrlRewriteStore()
    _invalidator_check: CacheInvalidator = FakeCacheInvalidator()
