"""Application orchestration entry points."""

from __future__ import annotations

from collections.abc import Callable
from logging import getLogger
from typing import TYPE_CHECKING

from regenurl.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyUnitOfWork,
    is_started,
    shutdown,
    startup,
)
from regenurl.adapters.url_generator import CanonicalUrlRewriteGenerator
from regenurl.adapters.varnish import NullCacheInvalidator, VarnishCacheInvalidator
from regenurl.config import get_cache_invalidation_config, get_regeneration_config
from regenurl.domain.model import ALL_STORES, describe_selector
from regenurl.domain.ports import CatalogUnitOfWork
from regenurl.domain.regeneration import ProductUrlRegenerator

if TYPE_CHECKING:
    from collections.abc import Iterable

    from regenurl.config import CacheInvalidationConfig, RegenerationConfig
    from regenurl.domain.model import StoreSelector
    from regenurl.domain.ports import CacheInvalidator, UrlRewriteGenerator
    from regenurl.domain.regeneration import RegenerationResult

UnitOfWorkFactory = Callable[[], CatalogUnitOfWork]


log = getLogger(__name__)


def build_cache_invalidator(config: CacheInvalidationConfig | None = None) -> CacheInvalidator:
    """Return a purge-based invalidator, or a no-op one when no server is configured."""

    effective = config or get_cache_invalidation_config()
    if not effective.enabled:
        return NullCacheInvalidator()
    return VarnishCacheInvalidator(effective)


def regenerate_product_urls(
    product_ids: Iterable[int] = (),
    store_id: StoreSelector = ALL_STORES,
    *,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
    generator: UrlRewriteGenerator | None = None,
    invalidator: CacheInvalidator | None = None,
    config: RegenerationConfig | None = None,
) -> RegenerationResult:
    """Regenerate product URL rewrites using the configured adapters."""

    effective_config = config or get_regeneration_config()
    owns_database = unit_of_work_factory is None and not is_started()
    if owns_database:
        startup()
    if unit_of_work_factory is None:
        unit_of_work_factory = SqlAlchemyUnitOfWork
    effective_generator = generator or CanonicalUrlRewriteGenerator(
        suffix=effective_config.url_suffix
    )
    effective_invalidator = invalidator or build_cache_invalidator()

    ids = tuple(product_ids)
    log.info(
        "Starting URL regeneration: store=%s, products=%s, invalidation_batch_limit=%s",
        describe_selector(store_id),
        len(ids) or "all",
        effective_config.invalidation_batch_limit,
    )

    try:
        with unit_of_work_factory() as uow:
            regenerator = ProductUrlRegenerator(
                stores=uow.repositories.stores,
                products=uow.repositories.products,
                generator=effective_generator,
                rewrites=uow.repositories.rewrites,
                invalidator=effective_invalidator,
                invalidation_batch_limit=effective_config.invalidation_batch_limit,
            )
            result = regenerator.execute(ids, store_id)
            uow.commit()
    finally:
        if owns_database:
            shutdown()

    log.info(
        "Finished regenerating. Regenerated %s urls (products=%s, conflicts=%s, "
        "failed_invalidations=%s)",
        result.regenerated,
        result.processed,
        len(result.conflicts),
        result.failed_invalidations,
    )
    return result
