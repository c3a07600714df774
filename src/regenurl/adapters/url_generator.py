"""Canonical product URL generation."""

from __future__ import annotations

import re
import unicodedata
from typing import TYPE_CHECKING

from regenurl.domain.model import CANONICAL_REDIRECT_TYPE, PRODUCT_ENTITY_TYPE, UrlRewrite

if TYPE_CHECKING:
    from regenurl.domain.model import CatalogProduct

PRODUCT_TARGET_PATH = "catalog/product/view/id/{product_id}"

_NON_ALNUM = re.compile(r"[^a-z0-9]+")


def format_url_key(value: str) -> str:
    """Fold ``value`` into a lowercase, dash separated URL key."""

    text = unicodedata.normalize("NFKD", value)
    text = "".join(ch for ch in text if not unicodedata.combining(ch))
    text = text.casefold()
    return _NON_ALNUM.sub("-", text).strip("-")


class CanonicalUrlRewriteGenerator:
    """Generate the single canonical rewrite ``<url_key><suffix>`` of a product."""

    def __init__(self, *, suffix: str = ".html") -> None:
        self.suffix = suffix

    def generate(self, product: CatalogProduct) -> dict[str, UrlRewrite]:
        url_key = format_url_key(product.url_key or product.name)
        if not url_key:
            return {}
        request_path = f"{url_key}{self.suffix}"
        rewrite = UrlRewrite(
            entity_id=product.id,
            entity_type=PRODUCT_ENTITY_TYPE,
            request_path=request_path,
            target_path=PRODUCT_TARGET_PATH.format(product_id=product.id),
            redirect_type=CANONICAL_REDIRECT_TYPE,
            store_id=product.store_id,
        )
        return {request_path: rewrite}


if TYPE_CHECKING:
    from regenurl.domain.ports import UrlRewriteGenerator

    _generator_check: UrlRewriteGenerator = CanonicalUrlRewriteGenerator()
