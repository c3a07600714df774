"""Store, product and URL rewrite adapters backed by SQLAlchemy sessions."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from sqlalchemy import and_, delete, func, insert, or_, select
from sqlalchemy.exc import IntegrityError

from regenurl.adapters.sqlalchemy.tables import (
    product_attribute_table,
    product_store_table,
    product_table,
    store_table,
    url_rewrite_table,
)
from regenurl.domain.model import (
    DEFAULT_STORE_ID,
    CatalogProduct,
    PersistOutcome,
    ProductStatus,
    Store,
    UrlRewrite,
    Visibility,
)

if TYPE_CHECKING:
    from collections.abc import Collection, Iterator, Mapping

    from sqlalchemy import Select
    from sqlalchemy.orm import Session

log = getLogger(__name__)

DEFAULT_PAGE_SIZE = 500


class SqlAlchemyStoreRegistry:
    def __init__(self, session: Session) -> None:
        self.session = session

    def list_stores(self, *, include_default: bool = False) -> list[Store]:
        stmt = select(store_table.c.store_id, store_table.c.code, store_table.c.name).order_by(
            store_table.c.store_id
        )
        if not include_default:
            stmt = stmt.where(store_table.c.store_id != DEFAULT_STORE_ID)
        return [
            Store(id=row.store_id, code=row.code, name=row.name)
            for row in self.session.execute(stmt)
        ]


class SqlAlchemyProductSource:
    """Page through the enabled, visible products assigned to a store.

    Store level attribute values fall back to the default (store 0) values.
    """

    def __init__(self, session: Session, *, page_size: int = DEFAULT_PAGE_SIZE) -> None:
        if page_size < 1:
            raise ValueError("page_size must be positive")
        self.session = session
        self.page_size = page_size

    def query(
        self,
        *,
        store_id: int,
        product_ids: Collection[int] = (),
    ) -> Iterator[CatalogProduct]:
        last_id: int | None = None
        while True:
            stmt = self._build_statement(store_id, product_ids)
            if last_id is not None:
                stmt = stmt.where(product_table.c.entity_id > last_id)
            rows = self.session.execute(stmt.limit(self.page_size)).all()
            for row in rows:
                yield CatalogProduct(
                    id=row.entity_id,
                    sku=row.sku,
                    name=row.name,
                    status=ProductStatus(row.status),
                    visibility=Visibility(row.visibility),
                    url_key=row.url_key,
                    url_path=row.url_path,
                    store_id=store_id,
                )
            if len(rows) < self.page_size:
                return
            last_id = rows[-1].entity_id

    def _build_statement(self, store_id: int, product_ids: Collection[int]) -> Select[tuple]:
        defaults = product_attribute_table.alias("default_values")
        scoped = product_attribute_table.alias("store_values")

        status = func.coalesce(scoped.c.status, defaults.c.status)
        visibility = func.coalesce(scoped.c.visibility, defaults.c.visibility)
        stmt = (
            select(
                product_table.c.entity_id,
                product_table.c.sku,
                func.coalesce(scoped.c.name, defaults.c.name, product_table.c.sku).label("name"),
                status.label("status"),
                visibility.label("visibility"),
                func.coalesce(scoped.c.url_key, defaults.c.url_key).label("url_key"),
                func.coalesce(scoped.c.url_path, defaults.c.url_path).label("url_path"),
            )
            .select_from(product_table)
            .join(
                product_store_table,
                and_(
                    product_store_table.c.product_id == product_table.c.entity_id,
                    product_store_table.c.store_id == store_id,
                ),
            )
            .outerjoin(
                defaults,
                and_(
                    defaults.c.product_id == product_table.c.entity_id,
                    defaults.c.store_id == DEFAULT_STORE_ID,
                ),
            )
            .outerjoin(
                scoped,
                and_(
                    scoped.c.product_id == product_table.c.entity_id,
                    scoped.c.store_id == store_id,
                ),
            )
            .where(status == int(ProductStatus.ENABLED))
            .where(visibility > int(Visibility.NOT_VISIBLE))
            .order_by(product_table.c.entity_id)
        )
        if product_ids:
            stmt = stmt.where(product_table.c.entity_id.in_(sorted(product_ids)))
        return stmt


class SqlAlchemyUrlRewriteStore:
    """URL rewrite persistence; every call runs in its own transaction."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def delete_by_criteria(
        self,
        *,
        entity_id: int,
        entity_type: str,
        redirect_type: int,
        store_id: int,
    ) -> None:
        stmt = (
            delete(url_rewrite_table)
            .where(url_rewrite_table.c.entity_id == entity_id)
            .where(url_rewrite_table.c.entity_type == entity_type)
            .where(url_rewrite_table.c.redirect_type == redirect_type)
            .where(url_rewrite_table.c.store_id == store_id)
        )
        self.session.execute(stmt)
        self.session.commit()

    def replace(self, rewrites: Mapping[str, UrlRewrite]) -> PersistOutcome:
        """Replace the rewrites of the affected entities with ``rewrites``.

        A unique ``(request_path, store_id)`` violation rolls the whole call back and
        is reported as a conflict; other database errors propagate.
        """

        values = list(rewrites.values())
        if not values:
            return PersistOutcome.stored_count(0)

        try:
            self._delete_previous(values)
            self.session.execute(
                insert(url_rewrite_table),
                [
                    {
                        "entity_type": rewrite.entity_type,
                        "entity_id": rewrite.entity_id,
                        "request_path": rewrite.request_path,
                        "target_path": rewrite.target_path,
                        "redirect_type": rewrite.redirect_type,
                        "store_id": rewrite.store_id,
                    }
                    for rewrite in values
                ],
            )
            self.session.commit()
        except IntegrityError as exc:
            self.session.rollback()
            paths = self._taken_paths(values)
            if not paths:
                raise
            log.debug("URL rewrite conflict on %s", paths)
            return PersistOutcome.conflict(str(exc.orig), paths=paths)

        return PersistOutcome.stored_count(len(values))

    def find(
        self,
        *,
        entity_id: int | None = None,
        store_id: int | None = None,
    ) -> list[UrlRewrite]:
        stmt = select(url_rewrite_table).order_by(
            url_rewrite_table.c.store_id, url_rewrite_table.c.request_path
        )
        if entity_id is not None:
            stmt = stmt.where(url_rewrite_table.c.entity_id == entity_id)
        if store_id is not None:
            stmt = stmt.where(url_rewrite_table.c.store_id == store_id)
        return [
            UrlRewrite(
                entity_id=row.entity_id,
                entity_type=row.entity_type,
                request_path=row.request_path,
                target_path=row.target_path,
                redirect_type=row.redirect_type,
                store_id=row.store_id,
            )
            for row in self.session.execute(stmt)
        ]

    def _delete_previous(self, rewrites: list[UrlRewrite]) -> None:
        owners = {(r.entity_id, r.entity_type, r.store_id) for r in rewrites}
        for entity_id, entity_type, store_id in sorted(owners):
            self.session.execute(
                delete(url_rewrite_table)
                .where(url_rewrite_table.c.entity_id == entity_id)
                .where(url_rewrite_table.c.entity_type == entity_type)
                .where(url_rewrite_table.c.store_id == store_id)
            )

    def _taken_paths(self, rewrites: list[UrlRewrite]) -> tuple[str, ...]:
        conditions = [
            and_(
                url_rewrite_table.c.request_path == rewrite.request_path,
                url_rewrite_table.c.store_id == rewrite.store_id,
            )
            for rewrite in rewrites
        ]
        stmt = (
            select(url_rewrite_table.c.request_path)
            .where(or_(*conditions))
            .order_by(url_rewrite_table.c.request_path)
        )
        return tuple(self.session.execute(stmt).scalars())

