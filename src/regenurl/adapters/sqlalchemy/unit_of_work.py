"""SQLAlchemy engine lifecycle and the catalog unit of work."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Literal

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from regenurl.adapters.sqlalchemy.repositories import (
    SqlAlchemyProductSource,
    SqlAlchemyStoreRegistry,
    SqlAlchemyUrlRewriteStore,
)
from regenurl.adapters.sqlalchemy.tables import create_all_tables
from regenurl.config.storage import DatabaseConfig, get_database_config

if TYPE_CHECKING:
    from types import TracebackType

    from sqlalchemy.engine import Engine


class StartupError(RuntimeError):
    """Raised when a SQLAlchemy unit of work is used before initialisation."""


@dataclass(slots=True)
class _CatalogDatabase:
    engine: Engine | None = None
    sessions: sessionmaker[Session] | None = None


_DATABASE = _CatalogDatabase()


def startup(
    *,
    engine: Engine | None = None,
    database_uri: str | None = None,
    force: bool = False,
) -> None:
    """Bind the catalog database, creating missing tables.

    ``engine`` wins over ``database_uri``; without either the URI comes from
    ``get_database_config()``.
    """

    if is_started() and not force:
        raise StartupError("Catalog database already started. Pass force=True to rebind.")

    if engine is None:
        database = DatabaseConfig(uri=database_uri) if database_uri else get_database_config()
        engine = create_engine(database.uri, echo=database.echo, future=True)
    create_all_tables(engine)
    _DATABASE.engine = engine
    _DATABASE.sessions = sessionmaker(bind=engine, expire_on_commit=False)


def is_started() -> bool:
    return _DATABASE.sessions is not None


def shutdown() -> None:
    """Dispose the bound engine; a no-op when nothing is bound."""

    engine = _DATABASE.engine
    _DATABASE.engine = None
    _DATABASE.sessions = None
    if engine is not None:
        engine.dispose()


def _open_session() -> Session:
    if _DATABASE.sessions is None:
        raise StartupError("Catalog database not started. Call startup() first.")
    return _DATABASE.sessions()


@dataclass(slots=True)
class CatalogRepositories:
    """Adapters the URL regeneration service needs, sharing one session."""

    stores: SqlAlchemyStoreRegistry
    products: SqlAlchemyProductSource
    rewrites: SqlAlchemyUrlRewriteStore


class SqlAlchemyUnitOfWork:
    """Session scope for one regeneration run."""

    def __init__(self) -> None:
        if not is_started():
            raise StartupError("Catalog database not started. Call startup() first.")
        self._session: Session | None = None
        self._repositories: CatalogRepositories | None = None

    def __enter__(self) -> SqlAlchemyUnitOfWork:
        self.session = _open_session()
        self._repositories = CatalogRepositories(
            stores=SqlAlchemyStoreRegistry(self.session),
            products=SqlAlchemyProductSource(self.session),
            rewrites=SqlAlchemyUrlRewriteStore(self.session),
        )
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> Literal[False]:
        if exc_type is not None:
            self.rollback()
        self.session.close()
        self.session = None
        self._repositories = None
        return False

    def commit(self) -> None:
        self.session.commit()

    def rollback(self) -> None:
        self.session.rollback()

    @property
    def repositories(self) -> CatalogRepositories:
        if self._repositories is None:
            raise StartupError("Unit of work session not initialised")
        return self._repositories

    @property
    def session(self) -> Session:
        if self._session is None:
            raise StartupError("Unit of work session not initialised")
        return self._session

    @session.setter
    def session(self, session: Session | None) -> None:
        if self._session is not None and session is not None:
            raise StartupError("Unit of work session already initialised")
        self._session = session
