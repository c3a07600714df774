"""SQLAlchemy table metadata for stores, catalog products and URL rewrites."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from sqlalchemy import (
    Column,
    ForeignKey,
    Index,
    Integer,
    MetaData,
    SmallInteger,
    String,
    Table,
    UniqueConstraint,
)

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

log = logging.getLogger(__name__)

metadata = MetaData(
    naming_convention={
        "ix": "ix_%(column_0_label)s",
        "uq": "uq_%(table_name)s_%(column_0_label)s",
        "ck": "ck_%(table_name)s_%(constraint_name)s",
        "fk": "fk_%(table_name)s_%(column_0_label)s_%(referred_table_name)s",
        "pk": "pk_%(table_name)s",
    }
)

store_table = Table(
    "store",
    metadata,
    Column("store_id", Integer, primary_key=True, autoincrement=False),
    Column("code", String(32), nullable=False, unique=True),
    Column("name", String(255), nullable=False),
)

product_table = Table(
    "catalog_product",
    metadata,
    Column("entity_id", Integer, primary_key=True),
    Column("sku", String(64), nullable=False, unique=True),
)

# Store assignment: a product is only part of the stores listed here.
product_store_table = Table(
    "catalog_product_store",
    metadata,
    Column(
        "product_id",
        Integer,
        ForeignKey("catalog_product.entity_id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column(
        "store_id",
        Integer,
        ForeignKey("store.store_id", ondelete="CASCADE"),
        primary_key=True,
    ),
)

# Store 0 rows hold default values; other rows override them per store.
product_attribute_table = Table(
    "catalog_product_attribute",
    metadata,
    Column(
        "product_id",
        Integer,
        ForeignKey("catalog_product.entity_id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column(
        "store_id",
        Integer,
        ForeignKey("store.store_id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column("name", String(255), nullable=True),
    Column("status", SmallInteger, nullable=True),
    Column("visibility", SmallInteger, nullable=True),
    Column("url_key", String(255), nullable=True),
    Column("url_path", String(255), nullable=True),
)

url_rewrite_table = Table(
    "url_rewrite",
    metadata,
    Column("url_rewrite_id", Integer, primary_key=True, autoincrement=True),
    Column("entity_type", String(32), nullable=False),
    Column("entity_id", Integer, nullable=False),
    Column("request_path", String(255), nullable=False),
    Column("target_path", String(255), nullable=False),
    Column("redirect_type", SmallInteger, nullable=False, default=0),
    Column(
        "store_id",
        Integer,
        ForeignKey("store.store_id", ondelete="CASCADE"),
        nullable=False,
    ),
    UniqueConstraint("request_path", "store_id"),
    Index("ix_url_rewrite_entity", "entity_id", "entity_type", "store_id"),
)


def create_all_tables(engine: Engine) -> None:
    """Create database tables for the catalog metadata."""

    log.info("Creating all tables")
    metadata.create_all(engine)
