from __future__ import annotations

import pytest

from regenurl.adapters.url_generator import CanonicalUrlRewriteGenerator, format_url_key
from regenurl.domain.model import CatalogProduct, UrlRewrite
from tests.helpers.catalog import make_product


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("Basic Tee", "basic-tee"),
        ("Crème Brûlée Set", "creme-brulee-set"),
        ("  --Mug / 350ml--  ", "mug-350ml"),
        ("!!!", ""),
    ],
)
def test_format_url_key(value: str, expected: str) -> None:
    assert format_url_key(value) == expected


def test_generates_one_canonical_rewrite_for_the_product_store() -> None:
    generator = CanonicalUrlRewriteGenerator()
    product = make_product(12, url_key="basic-tee").for_store(3)

    rewrites = generator.generate(product)

    assert rewrites == {
        "basic-tee.html": UrlRewrite(
            entity_id=12,
            request_path="basic-tee.html",
            target_path="catalog/product/view/id/12",
            store_id=3,
        )
    }


def test_falls_back_to_product_name_and_custom_suffix() -> None:
    generator = CanonicalUrlRewriteGenerator(suffix="")
    product = CatalogProduct(id=5, sku="X", name="Café Table")

    assert list(generator.generate(product)) == ["cafe-table"]


def test_products_without_usable_key_generate_nothing() -> None:
    generator = CanonicalUrlRewriteGenerator()
    product = CatalogProduct(id=1, sku="?", name="???")

    assert generator.generate(product) == {}
