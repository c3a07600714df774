"""Catalog domain model (pure, dependency-light)."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum, IntEnum, StrEnum
from typing import Final, Literal

DEFAULT_STORE_ID: Final[int] = 0
PRODUCT_ENTITY_TYPE: Final[str] = "product"
PRODUCT_CACHE_TAG: Final[str] = "cat_p"
CANONICAL_REDIRECT_TYPE: Final[int] = 0


class AllStores(Enum):
    """Selector matching every storefront.

    Kept apart from ``DEFAULT_STORE_ID`` so the admin scope can never be mistaken
    for "process everything".
    """

    ALL = "all"

    def __repr__(self) -> str:
        return "ALL_STORES"


ALL_STORES: Final = AllStores.ALL

type StoreSelector = int | Literal[AllStores.ALL]


class ProductStatus(IntEnum):
    ENABLED = 1
    DISABLED = 2


class Visibility(IntEnum):
    NOT_VISIBLE = 1
    IN_CATALOG = 2
    IN_SEARCH = 3
    BOTH = 4


class PersistStatus(StrEnum):
    """Outcome of persisting a set of URL rewrites."""

    STORED = "stored"
    CONFLICT = "conflict"


@dataclass(frozen=True, slots=True)
class Store:
    """A storefront with its own catalog visibility and URL namespace."""

    id: int
    code: str
    name: str


@dataclass(frozen=True, slots=True)
class CatalogProduct:
    """Read-only, store-scoped view of a catalog product."""

    id: int
    sku: str
    name: str
    status: ProductStatus = ProductStatus.ENABLED
    visibility: Visibility = Visibility.BOTH
    url_key: str | None = None
    url_path: str | None = None
    store_id: int = DEFAULT_STORE_ID

    @property
    def is_enabled(self) -> bool:
        return self.status is ProductStatus.ENABLED

    @property
    def is_visible(self) -> bool:
        return self.visibility > Visibility.NOT_VISIBLE

    def for_store(self, store_id: int) -> CatalogProduct:
        """Return the same product scoped to ``store_id``."""

        if store_id == self.store_id:
            return self
        return replace(self, store_id=store_id)


@dataclass(frozen=True, slots=True, kw_only=True)
class UrlRewrite:
    """Mapping from a human-readable request path to an internal route."""

    entity_id: int
    entity_type: str = PRODUCT_ENTITY_TYPE
    request_path: str
    target_path: str
    redirect_type: int = CANONICAL_REDIRECT_TYPE
    store_id: int

    @property
    def unique_key(self) -> tuple[str, int]:
        return (self.request_path, self.store_id)


@dataclass(frozen=True, slots=True)
class PersistOutcome:
    """Typed result of ``UrlRewriteStore.replace``."""

    status: PersistStatus
    stored: int = 0
    message: str | None = None
    conflicting_paths: tuple[str, ...] = field(default_factory=tuple)

    @classmethod
    def stored_count(cls, count: int) -> PersistOutcome:
        return cls(status=PersistStatus.STORED, stored=count)

    @classmethod
    def conflict(cls, message: str, *, paths: tuple[str, ...] = ()) -> PersistOutcome:
        return cls(status=PersistStatus.CONFLICT, message=message, conflicting_paths=paths)

    @property
    def is_conflict(self) -> bool:
        return self.status is PersistStatus.CONFLICT


@dataclass(frozen=True, slots=True)
class UrlConflict:
    """A product skipped because its generated paths collided with existing ones."""

    store_id: int
    product_id: int
    sku: str
    message: str
    attempted_paths: tuple[str, ...]


def describe_selector(selector: StoreSelector) -> str:
    return "all" if selector is ALL_STORES else str(selector)
