"""Regenerate product URL rewrites across storefronts.

For each selected store the service walks the eligible products, replaces their
canonical URL rewrites and invalidates the product cache in bounded batches. A
conflicting product is logged and skipped; the run carries on with the next one.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from regenurl.domain.invalidation import DEFAULT_INVALIDATION_BATCH_LIMIT, InvalidationBatch
from regenurl.domain.model import (
    ALL_STORES,
    CANONICAL_REDIRECT_TYPE,
    PRODUCT_CACHE_TAG,
    PRODUCT_ENTITY_TYPE,
    UrlConflict,
    describe_selector,
)

if TYPE_CHECKING:
    from collections.abc import Collection, Iterable, Mapping

    from regenurl.domain.model import CatalogProduct, Store, StoreSelector, UrlRewrite
    from regenurl.domain.ports import (
        CacheInvalidator,
        ProductSource,
        StoreRegistry,
        UrlRewriteGenerator,
        UrlRewriteStore,
    )

log = getLogger(__name__)


class RegenerationError(RuntimeError):
    """Raised when a regeneration run cannot continue."""


class StoreNotFoundError(RegenerationError):
    """Raised when the store selector names a store that does not exist."""

    def __init__(self, store_id: int) -> None:
        super().__init__(f"Store with ID {store_id} does not exist")
        self.store_id = store_id


@dataclass(frozen=True, slots=True)
class RegenerationResult:
    """Outcome of one ``ProductUrlRegenerator.execute`` call."""

    regenerated: int = 0
    processed: int = 0
    regenerated_by_store: Mapping[int, int] = field(default_factory=dict)
    conflicts: tuple[UrlConflict, ...] = ()
    failed_invalidations: int = 0


@dataclass(slots=True)
class RegenerationRun:
    """Mutable state owned by a single ``execute`` call."""

    batch: InvalidationBatch
    regenerated: int = 0
    processed: int = 0
    regenerated_by_store: dict[int, int] = field(default_factory=dict)
    conflicts: list[UrlConflict] = field(default_factory=list)
    failed_invalidations: int = 0

    def finish(self) -> RegenerationResult:
        return RegenerationResult(
            regenerated=self.regenerated,
            processed=self.processed,
            regenerated_by_store=dict(self.regenerated_by_store),
            conflicts=tuple(self.conflicts),
            failed_invalidations=self.failed_invalidations,
        )


@dataclass(slots=True)
class ProductUrlRegenerator:
    """Delete, regenerate and persist product URL rewrites store by store."""

    stores: StoreRegistry
    products: ProductSource
    generator: UrlRewriteGenerator
    rewrites: UrlRewriteStore
    invalidator: CacheInvalidator
    invalidation_batch_limit: int = DEFAULT_INVALIDATION_BATCH_LIMIT
    _latest: RegenerationResult | None = field(default=None, init=False, repr=False)

    @property
    def latest_result(self) -> RegenerationResult | None:
        return self._latest

    @property
    def regenerated_count(self) -> int:
        """Rewrites regenerated by the most recent ``execute`` call (0 before any)."""

        return self._latest.regenerated if self._latest is not None else 0

    def get_regenerated_count(self) -> int:
        return self.regenerated_count

    def execute(
        self,
        product_ids: Iterable[int] = (),
        store_id: StoreSelector = ALL_STORES,
    ) -> RegenerationResult:
        """Regenerate URL rewrites for ``product_ids`` (all when empty) in the selected stores."""

        allowlist = frozenset(product_ids)
        run = RegenerationRun(batch=InvalidationBatch(self.invalidation_batch_limit))
        self._latest = None

        log.debug(
            "Starting URL regeneration: store=%s, products=%s",
            describe_selector(store_id),
            sorted(allowlist) if allowlist else "all",
        )
        try:
            for store in self._select_stores(store_id):
                self._regenerate_store(store, allowlist, run)
        finally:
            # Rewrites persisted before an abort stay counted.
            result = run.finish()
            self._latest = result
        return result

    def invalidate_cache(self, product_ids: Collection[int]) -> bool:
        """Publish a cache invalidation for ``product_ids``; return whether it succeeded."""

        if not product_ids:
            return True
        try:
            self.invalidator.publish(PRODUCT_CACHE_TAG, tuple(product_ids))
        except Exception as exc:  # noqa: BLE001
            log.error("Invalidate cache error : %s", exc)  # noqa: TRY400
            return False
        return True

    def _select_stores(self, selector: StoreSelector) -> list[Store]:
        stores = self.stores.list_stores(include_default=False)
        if selector is ALL_STORES:
            return stores
        selected = [store for store in stores if store.id == selector]
        if not selected:
            raise StoreNotFoundError(selector)
        return selected

    def _regenerate_store(
        self,
        store: Store,
        product_ids: frozenset[int],
        run: RegenerationRun,
    ) -> None:
        regenerated_for_store = 0
        for product in self.products.query(store_id=store.id, product_ids=product_ids):
            log.info(
                "Regenerating urls for %s (%s) in store %s", product.sku, product.id, store.name
            )
            regenerated_for_store += self._regenerate_product(product.for_store(store.id), run)
            run.processed += 1

            if run.batch.add(product.id):
                self._flush(run)

        log.info(
            "Done regenerating. Regenerated %s urls for store %s",
            regenerated_for_store,
            store.name,
        )
        run.regenerated_by_store[store.id] = regenerated_for_store
        run.regenerated += regenerated_for_store
        if run.batch:
            self._flush(run)

    def _regenerate_product(self, product: CatalogProduct, run: RegenerationRun) -> int:
        self.rewrites.delete_by_criteria(
            entity_id=product.id,
            entity_type=PRODUCT_ENTITY_TYPE,
            redirect_type=CANONICAL_REDIRECT_TYPE,
            store_id=product.store_id,
        )

        new_rewrites: Mapping[str, UrlRewrite] = self.generator.generate(product)
        outcome = self.rewrites.replace(new_rewrites)
        if not outcome.is_conflict:
            return len(new_rewrites)

        attempted = tuple(new_rewrites)
        message = outcome.message or "URL key for specified store already exists"
        log.error(
            "Duplicated url for store ID %s, product %s (%s) - %s Generated URLs:\n%s\n",
            product.store_id,
            product.id,
            product.sku,
            message,
            "\n".join(attempted),
        )
        run.conflicts.append(
            UrlConflict(
                store_id=product.store_id,
                product_id=product.id,
                sku=product.sku,
                message=message,
                attempted_paths=attempted,
            )
        )
        return 0

    def _flush(self, run: RegenerationRun) -> None:
        if not self.invalidate_cache(run.batch.drain()):
            run.failed_invalidations += 1
