"""Tests for the shop catalogue query engine: filtering, sorting and pagination."""

from dataclasses import replace

import pytest

from storefront.catalogue.query import (
    PriceRange,
    ProductType,
    ShopFilters,
    SortMode,
    facet_options,
    filter_products,
    paginate,
    query_catalogue,
    sort_products,
)


def _ids(products):
    return [p.id for p in products]


class TestFiltering:
    def test_no_filters_admit_everything(self, products):
        assert _ids(filter_products(products, ShopFilters())) == ["p-003", "p-001", "p-002", "p-004"]

    def test_price_range_is_inclusive(self, products):
        filters = ShopFilters(price_range=PriceRange(450.0, 1200.0))
        assert _ids(filter_products(products, filters)) == ["p-003", "p-002", "p-004"]

    def test_price_filter_uses_regular_price(self, products):
        # p-001 is 1500 with a 1100 promotion price
        filters = ShopFilters(price_range=PriceRange(1000.0, 1200.0))
        assert "p-001" not in _ids(filter_products(products, filters))

    def test_category_filter(self, products):
        filters = ShopFilters(categories=frozenset({"cat-apparel"}))
        assert _ids(filter_products(products, filters)) == ["p-002"]

    def test_brand_filter_is_or_within_facet(self, products):
        filters = ShopFilters(brands=frozenset({"Puma", "adidas"}))
        assert _ids(filter_products(products, filters)) == ["p-001", "p-002"]

    def test_size_filter_matches_any_product_size(self, products):
        filters = ShopFilters(sizes=frozenset({"40", "M"}))
        assert _ids(filter_products(products, filters)) == ["p-001", "p-002"]

    def test_color_filter(self, products):
        filters = ShopFilters(colors=frozenset({"Green"}))
        assert _ids(filter_products(products, filters)) == ["p-004"]

    def test_facets_combine_with_and(self, products):
        filters = ShopFilters(brands=frozenset({"Nike"}), colors=frozenset({"Black"}))
        assert _ids(filter_products(products, filters)) == ["p-003"]

    def test_search_matches_name_case_insensitively(self, products):
        assert _ids(filter_products(products, ShopFilters(search="DUNK"))) == ["p-004"]

    def test_search_matches_description(self, products):
        assert _ids(filter_products(products, ShopFilters(search="fleece"))) == ["p-002"]

    @pytest.mark.parametrize(
        "product_type,expected",
        [
            (ProductType.FEATURED, ["p-003"]),
            (ProductType.NEW_ARRIVAL, ["p-002"]),
            (ProductType.PROMOTION, ["p-001"]),
        ],
    )
    def test_type_facet(self, products, product_type, expected):
        assert _ids(filter_products(products, ShopFilters(product_type=product_type))) == expected

    def test_no_match_gives_empty_list(self, products):
        assert filter_products(products, ShopFilters(search="sandals")) == []


class TestProductTypeParsing:
    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("featured", ProductType.FEATURED),
            ("new", ProductType.NEW_ARRIVAL),
            ("new-arrival", ProductType.NEW_ARRIVAL),
            ("Promotion", ProductType.PROMOTION),
            ("bogus", None),
            ("", None),
            (None, None),
        ],
    )
    def test_parse(self, raw, expected):
        assert ProductType.parse(raw) is expected


class TestSorting:
    def test_default_keeps_input_order(self, products):
        assert _ids(sort_products(products)) == _ids(products)

    def test_sort_returns_copy_and_leaves_input_alone(self, products):
        before = _ids(products)
        result = sort_products(products, SortMode.PRICE_ASC)
        assert result is not products
        assert _ids(products) == before

    def test_price_ascending(self, products):
        assert _ids(sort_products(products, SortMode.PRICE_ASC)) == ["p-002", "p-004", "p-003", "p-001"]

    def test_price_descending_is_reverse_of_ascending(self, products):
        ascending = _ids(sort_products(products, SortMode.PRICE_ASC))
        assert _ids(sort_products(products, SortMode.PRICE_DESC)) == list(reversed(ascending))

    def test_brand_sort_ignores_case(self, products):
        names = [p.brand.name for p in sort_products(products, SortMode.BRAND)]
        assert names == ["adidas", "Nike", "Nike", "Puma"]

    def test_brand_sort_is_stable(self, products):
        nikes = [p.id for p in sort_products(products, SortMode.BRAND) if p.brand.name == "Nike"]
        assert nikes == ["p-003", "p-004"]

    def test_equal_prices_keep_relative_order(self, make_product):
        tied = [make_product(id=f"p-{i}", price=500.0) for i in (5, 2, 9)]
        assert _ids(sort_products(tied, SortMode.PRICE_ASC)) == ["p-5", "p-2", "p-9"]
        assert _ids(sort_products(tied, SortMode.PRICE_DESC)) == ["p-5", "p-2", "p-9"]

    def test_newest_is_id_descending(self, products):
        assert _ids(sort_products(products, SortMode.NEWEST)) == ["p-004", "p-003", "p-002", "p-001"]

    def test_oldest_is_id_ascending(self, products):
        assert _ids(sort_products(products, SortMode.OLDEST)) == ["p-001", "p-002", "p-003", "p-004"]


class TestPagination:
    @pytest.fixture()
    def seventeen(self, make_product):
        return [make_product(id=f"p-{i:03d}") for i in range(17)]

    def test_first_page_is_full(self, seventeen):
        page = paginate(seventeen, page=1, page_size=16)
        assert len(page.items) == 16
        assert page.total == 17
        assert page.total_pages == 2

    def test_second_page_has_remainder(self, seventeen):
        page = paginate(seventeen, page=2, page_size=16)
        assert _ids(page.items) == ["p-016"]
        assert (page.start_index, page.end_index) == (17, 17)

    def test_page_past_the_end_is_empty(self, seventeen):
        page = paginate(seventeen, page=3, page_size=16)
        assert page.items == []
        assert page.total == 17

    @pytest.mark.parametrize("requested", [0, -4])
    def test_page_below_one_clamps(self, seventeen, requested):
        page = paginate(seventeen, page=requested, page_size=16)
        assert page.page == 1
        assert len(page.items) == 16

    def test_empty_catalogue(self):
        page = paginate([], page=1, page_size=16)
        assert page.items == []
        assert page.total_pages == 0
        assert (page.start_index, page.end_index) == (0, 0)

    def test_showing_indices(self, seventeen):
        page = paginate(seventeen, page=1, page_size=16)
        assert (page.start_index, page.end_index) == (1, 16)


class TestQueryCatalogue:
    def test_filter_then_sort_then_paginate(self, products):
        filters = ShopFilters(brands=frozenset({"Nike", "Puma"}))
        page = query_catalogue(products, filters, SortMode.PRICE_DESC, page=1, page_size=2)
        assert _ids(page.items) == ["p-003", "p-004"]
        assert page.total == 3
        assert page.total_pages == 2


class TestFilterState:
    def test_default_filters_are_inactive(self):
        assert ShopFilters().is_active is False

    def test_narrowed_price_is_active(self):
        assert ShopFilters(price_range=PriceRange(0.0, 500.0)).is_active is True

    def test_toggle_adds_then_removes(self):
        filters = ShopFilters().toggled("brands", "Nike")
        assert filters.brands == {"Nike"}
        assert filters.toggled("brands", "Nike").brands == frozenset()

    def test_cleared_resets_everything(self):
        filters = replace(
            ShopFilters(),
            price_range=PriceRange(100.0, 200.0),
            sizes=frozenset({"42"}),
            search="air",
            product_type=ProductType.FEATURED,
        )
        cleared = filters.cleared()
        assert cleared == ShopFilters()
        assert cleared.price_range == PriceRange(0.0, 10000.0)


class TestFacetOptions:
    def test_distinct_values_in_first_seen_order(self, products):
        options = facet_options(products)
        assert options["brands"] == ["Nike", "adidas", "Puma"]
        assert options["sizes"] == ["41", "42", "43", "40", "M", "L"]
        assert options["colors"] == ["Black", "White", "Grey", "Green"]
