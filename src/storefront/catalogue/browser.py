"""Stateful shop page: loaded catalogue, filter state, sort mode and page."""

import threading
from dataclasses import replace

import structlog

from shared.backend.port import BackendError, StoreBackend
from shared.backend.records import Category, Product
from shared.config import DEFAULT_PAGE_SIZE
from shared.observable import Observable
from shared.status import StatusChannel, StatusKind
from storefront.catalogue.query import (
    CatalogPage,
    PriceRange,
    ProductType,
    ShopFilters,
    SortMode,
    facet_options,
    query_catalogue,
)

logger = structlog.get_logger(__name__)

SET_FACETS = ("categories", "brands", "sizes", "colors")


class ShopBrowser(Observable):
    def __init__(
        self,
        backend: StoreBackend,
        status: StatusChannel,
        page_size: int = DEFAULT_PAGE_SIZE,
    ) -> None:
        super().__init__()
        self._backend = backend
        self._status = status
        self.page_size = page_size
        self.products: list[Product] = []
        self.categories: list[Category] = []
        self.filters = ShopFilters()
        self.sort = SortMode.DEFAULT
        self.page = 1
        self.is_loading = False
        self.load_error: str | None = None
        self._generation = 0
        self._generation_lock = threading.Lock()
        self._pending_query: dict | None = None

    # -------------------------------------------------------------------
    # Loading
    # -------------------------------------------------------------------
    def load(self) -> bool:
        """Fetch products and categories. A response overtaken by a newer load is dropped."""
        with self._generation_lock:
            self._generation += 1
            generation = self._generation
        self.is_loading = True

        try:
            products = self._backend.fetch_products()
            categories = self._backend.fetch_categories()
        except BackendError as exc:
            logger.error("Catalogue load failed", error=str(exc))
            if generation == self._generation:
                self.is_loading = False
                self.load_error = str(exc)
                self._status.show(StatusKind.ERROR, "Shop Unavailable", "Could not load products. Please try again.")
                self._notify(self)
            return False

        if generation != self._generation:
            logger.debug("Discarding stale catalogue response", generation=generation, latest=self._generation)
            return False

        with self._lock:
            self.products = products
            self.categories = categories
            self.page = 1
            self.is_loading = False
            self.load_error = None
            if self._pending_query is not None:
                self._apply_query(self._pending_query)
                self._pending_query = None

        logger.info("Catalogue loaded", products=len(products), categories=len(categories))
        self._notify(self)
        return True

    # -------------------------------------------------------------------
    # URL seeding
    # -------------------------------------------------------------------
    def seed_from_query(self, params: dict[str, str]) -> None:
        """Merge ``category``/``search``/``type`` query parameters into the filters once.

        The category slug is resolved against the loaded categories, so seeding
        before the first load defers until the load completes.
        """
        params = {k: v for k, v in params.items() if v}
        if not params:
            return
        with self._lock:
            if self.categories or not params.get("category"):
                self._apply_query(params)
            else:
                self._pending_query = params
        self._notify(self)

    def _apply_query(self, params: dict[str, str]) -> None:
        filters = self.filters
        slug = params.get("category")
        if slug:
            category = next((c for c in self.categories if c.slug == slug), None)
            if category is not None:
                filters = replace(filters, categories=frozenset({category.id}))
        if params.get("search"):
            filters = replace(filters, search=params["search"])
        product_type = ProductType.parse(params.get("type"))
        if product_type is not None:
            filters = replace(filters, product_type=product_type)
        self.filters = filters
        self.page = 1

    # -------------------------------------------------------------------
    # Filter state
    # -------------------------------------------------------------------
    def _set_filters(self, filters: ShopFilters) -> None:
        with self._lock:
            self.filters = filters
            self.page = 1
        self._notify(self)

    def toggle(self, facet: str, value: str) -> None:
        if facet not in SET_FACETS:
            raise ValueError(f"Unknown facet '{facet}'")
        self._set_filters(self.filters.toggled(facet, value))

    def set_price_range(self, minimum: float, maximum: float) -> None:
        if minimum > maximum:
            minimum, maximum = maximum, minimum
        self._set_filters(replace(self.filters, price_range=PriceRange(minimum, maximum)))

    def set_search(self, text: str) -> None:
        self._set_filters(replace(self.filters, search=text or ""))

    def set_product_type(self, product_type: ProductType | str | None) -> None:
        if isinstance(product_type, str):
            product_type = ProductType.parse(product_type)
        self._set_filters(replace(self.filters, product_type=product_type))

    def set_sort(self, mode: SortMode | str) -> None:
        with self._lock:
            self.sort = SortMode(mode)
            self.page = 1
        self._notify(self)

    def set_page(self, page: int) -> None:
        with self._lock:
            self.page = max(1, int(page))
        self._notify(self)

    def clear_filters(self) -> None:
        self._set_filters(self.filters.cleared())

    # -------------------------------------------------------------------
    # Views
    # -------------------------------------------------------------------
    def current_page(self) -> CatalogPage:
        with self._lock:
            return query_catalogue(self.products, self.filters, self.sort, self.page, self.page_size)

    def options(self) -> dict[str, list[str]]:
        return facet_options(self.products)
