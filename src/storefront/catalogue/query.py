"""Shop catalogue query engine: filter, then sort, then paginate.

Everything here is a pure function over product snapshots. The input list is
never reordered in place.
"""

import math
from dataclasses import dataclass, field, replace
from enum import Enum

from shared.backend.records import Product
from shared.config import DEFAULT_PAGE_SIZE

PRICE_FLOOR = 0.0
PRICE_CEILING = 10000.0


class SortMode(Enum):
    DEFAULT = "default"
    PRICE_ASC = "price-asc"
    PRICE_DESC = "price-desc"
    BRAND = "brand"
    NEWEST = "newest"
    OLDEST = "oldest"


class ProductType(Enum):
    FEATURED = "featured"
    NEW_ARRIVAL = "new"
    PROMOTION = "promotion"

    @classmethod
    def parse(cls, value: str | None) -> "ProductType | None":
        if not value:
            return None
        value = value.strip().lower()
        if value in ("new-arrival", "new_arrival"):
            return cls.NEW_ARRIVAL
        try:
            return cls(value)
        except ValueError:
            return None

    def flag(self, product: Product) -> bool:
        if self is ProductType.FEATURED:
            return product.is_featured
        if self is ProductType.NEW_ARRIVAL:
            return product.is_new_arrival
        return product.is_promotion


@dataclass(frozen=True)
class PriceRange:
    minimum: float = PRICE_FLOOR
    maximum: float = PRICE_CEILING

    def __contains__(self, price: float) -> bool:
        return self.minimum <= price <= self.maximum

    @property
    def is_full(self) -> bool:
        return self.minimum <= PRICE_FLOOR and self.maximum >= PRICE_CEILING


@dataclass(frozen=True)
class ShopFilters:
    price_range: PriceRange = field(default_factory=PriceRange)
    categories: frozenset = frozenset()
    brands: frozenset = frozenset()
    sizes: frozenset = frozenset()
    colors: frozenset = frozenset()
    search: str = ""
    product_type: ProductType | None = None

    def matches(self, product: Product) -> bool:
        # AND across facets, OR within one; an empty facet admits everything.
        if product.price not in self.price_range:
            return False
        if self.categories and product.category_id not in self.categories:
            return False
        if self.brands and (product.brand.name if product.brand else None) not in self.brands:
            return False
        if self.sizes and not self.sizes.intersection(product.sizes):
            return False
        if self.colors and not self.colors.intersection(product.colors):
            return False
        if self.search:
            needle = self.search.lower()
            if needle not in (product.name or "").lower() and needle not in (product.description or "").lower():
                return False
        if self.product_type and not self.product_type.flag(product):
            return False
        return True

    @property
    def is_active(self) -> bool:
        return bool(
            not self.price_range.is_full
            or self.categories
            or self.brands
            or self.sizes
            or self.colors
            or self.search
            or self.product_type
        )

    def toggled(self, facet: str, value) -> "ShopFilters":
        """Copy with ``value`` added to or removed from a set facet."""
        current = getattr(self, facet)
        updated = current - {value} if value in current else current | {value}
        return replace(self, **{facet: frozenset(updated)})

    def cleared(self) -> "ShopFilters":
        return ShopFilters()


@dataclass(frozen=True)
class CatalogPage:
    items: list[Product]
    total: int
    page: int
    page_size: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.page_size) if self.page_size else 0

    @property
    def start_index(self) -> int:
        """1-based index of the first shown product, 0 for an empty page."""
        if not self.items:
            return 0
        return (self.page - 1) * self.page_size + 1

    @property
    def end_index(self) -> int:
        if not self.items:
            return 0
        return self.start_index + len(self.items) - 1


def filter_products(products: list[Product], filters: ShopFilters) -> list[Product]:
    return [p for p in products if filters.matches(p)]


def _brand_sort_key(product: Product) -> str:
    return (product.brand.name if product.brand else "").casefold()


def sort_products(products: list[Product], mode: SortMode = SortMode.DEFAULT) -> list[Product]:
    """Return a sorted copy. ``sorted`` is stable, so ties keep their input order."""
    if mode is SortMode.PRICE_ASC:
        return sorted(products, key=lambda p: p.price)
    if mode is SortMode.PRICE_DESC:
        return sorted(products, key=lambda p: p.price, reverse=True)
    if mode is SortMode.BRAND:
        return sorted(products, key=_brand_sort_key)
    # Ids double as a recency proxy.
    if mode is SortMode.NEWEST:
        return sorted(products, key=lambda p: str(p.id), reverse=True)
    if mode is SortMode.OLDEST:
        return sorted(products, key=lambda p: str(p.id))
    return list(products)


def paginate(products: list[Product], page: int = 1, page_size: int = DEFAULT_PAGE_SIZE) -> CatalogPage:
    page = max(1, int(page))
    start = (page - 1) * page_size
    return CatalogPage(
        items=products[start : start + page_size],
        total=len(products),
        page=page,
        page_size=page_size,
    )


def query_catalogue(
    products: list[Product],
    filters: ShopFilters,
    sort: SortMode = SortMode.DEFAULT,
    page: int = 1,
    page_size: int = DEFAULT_PAGE_SIZE,
) -> CatalogPage:
    return paginate(sort_products(filter_products(products, filters), sort), page, page_size)


def _distinct(values) -> list:
    seen = {}
    for value in values:
        if value and value not in seen:
            seen[value] = None
    return list(seen)


def facet_options(products: list[Product]) -> dict[str, list[str]]:
    """Distinct brand names, sizes and colors in first-seen order."""
    return {
        "brands": _distinct(p.brand.name for p in products if p.brand),
        "sizes": _distinct(size for p in products for size in p.sizes),
        "colors": _distinct(color for p in products for color in p.colors),
    }
