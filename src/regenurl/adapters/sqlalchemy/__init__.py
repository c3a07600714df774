"""SQLAlchemy adapter package for regenurl."""

from __future__ import annotations

from .repositories import (
    SqlAlchemyProductSource,
    SqlAlchemyStoreRegistry,
    SqlAlchemyUrlRewriteStore,
)
from .tables import (
    create_all_tables,
    metadata,
    product_attribute_table,
    product_store_table,
    product_table,
    store_table,
    url_rewrite_table,
)
from .unit_of_work import (
    CatalogRepositories,
    SqlAlchemyUnitOfWork,
    StartupError,
    shutdown,
    startup,
)

__all__ = [
    "CatalogRepositories",
    "SqlAlchemyProductSource",
    "SqlAlchemyStoreRegistry",
    "SqlAlchemyUnitOfWork",
    "SqlAlchemyUrlRewriteStore",
    "StartupError",
    "create_all_tables",
    "metadata",
    "product_attribute_table",
    "product_store_table",
    "product_table",
    "shutdown",
    "startup",
    "store_table",
    "url_rewrite_table",
]
