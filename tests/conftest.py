import os
from pathlib import Path

import pytest

from shared.backend.records import Brand, Category, Product


def pytest_addoption(parser):
    parser.addoption(
        "--env",
        action="store",
        default="test",
        help="Config environment to run tests on",
    )


def pytest_sessionstart(session):
    """Select the Protean config overlay before any domain is initialized."""
    os.environ["PROTEAN_ENV"] = session.config.option.env


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their directory location."""
    for item in items:
        test_path = Path(item.fspath)

        if "/domain/" in str(test_path):
            item.add_marker(pytest.mark.domain)
        elif "/application/" in str(test_path):
            item.add_marker(pytest.mark.application)
        elif "/integration/" in str(test_path):
            item.add_marker(pytest.mark.integration)
            if not any(m.name == "fast" for m in item.iter_markers()):
                item.add_marker(pytest.mark.slow)


# ---------------------------------------------------------------------------
# Catalogue data
# ---------------------------------------------------------------------------
NIKE = Brand(id="brand-nike", name="Nike", logo_url="https://cdn.example/nike.png")
ADIDAS = Brand(id="brand-adidas", name="adidas", logo_url="https://cdn.example/adidas.png")
PUMA = Brand(id="brand-puma", name="Puma", logo_url="https://cdn.example/puma.png")

SNEAKERS = Category(id="cat-sneakers", name="Sneakers", slug="sneakers")
APPAREL = Category(id="cat-apparel", name="Apparel", slug="apparel")


@pytest.fixture()
def make_product():
    """Factory for product snapshots with sensible defaults."""

    def _make(id="p-001", name="Air Max 90", price=1200.0, brand=NIKE, **overrides):
        fields = {
            "description": "Classic running silhouette",
            "images": ("https://cdn.example/a.jpg", "https://cdn.example/b.jpg"),
            "sizes": ("41", "42", "43"),
            "colors": ("Black", "White"),
            "category_id": SNEAKERS.id,
            "brand_id": brand.id,
            "stock": 10,
        }
        fields.update(overrides)
        return Product(id=id, name=name, price=price, brand=brand, **fields)

    return _make


@pytest.fixture()
def products(make_product):
    return [
        make_product(id="p-003", name="Air Max 90", price=1200.0, brand=NIKE, is_featured=True),
        make_product(
            id="p-001",
            name="Ultraboost Light",
            price=1500.0,
            brand=ADIDAS,
            discount_price=1100.0,
            is_promotion=True,
            sizes=("40", "41"),
            colors=("Grey",),
        ),
        make_product(
            id="p-002",
            name="Essentials Hoodie",
            price=450.0,
            brand=PUMA,
            description="Fleece hoodie for everyday wear",
            category_id=APPAREL.id,
            sizes=("M", "L"),
            colors=("Black",),
            is_new_arrival=True,
        ),
        make_product(id="p-004", name="Dunk Low", price=950.0, brand=NIKE, sizes=("42",), colors=("Green", "White")),
    ]


@pytest.fixture()
def categories():
    return [SNEAKERS, APPAREL]
