"""Tests for the product modal selection state and its hand-off to the cart."""

import pytest

from storefront.selection.modal import ProductModal


@pytest.fixture()
def modal(cart_store):
    return ProductModal(cart_store)


@pytest.fixture()
def ultraboost(products):
    return next(p for p in products if p.id == "p-001")


class TestOpen:
    def test_open_resets_selection(self, modal, ultraboost):
        modal.open(ultraboost)
        modal.select_size("41")
        modal.increment()
        modal.close()

        modal.open(ultraboost)
        assert modal.is_open is True
        assert modal.image_index == 0
        assert modal.size == "40"
        assert modal.color == "Grey"
        assert modal.quantity == 1

    def test_product_without_variants(self, modal, make_product):
        modal.open(make_product(sizes=(), colors=()))
        assert modal.size is None
        assert modal.color is None

    def test_close_keeps_product(self, modal, ultraboost):
        modal.open(ultraboost)
        modal.close()
        assert modal.is_open is False
        assert modal.product is ultraboost


class TestSelection:
    def test_select_image(self, modal, ultraboost):
        modal.open(ultraboost)
        modal.select_image(1)
        assert modal.current_image == ultraboost.images[1]

    def test_select_image_out_of_range(self, modal, ultraboost):
        modal.open(ultraboost)
        with pytest.raises(IndexError):
            modal.select_image(5)

    def test_unavailable_size_rejected(self, modal, ultraboost):
        modal.open(ultraboost)
        with pytest.raises(ValueError):
            modal.select_size("46")

    def test_quantity_floors_at_one(self, modal, ultraboost):
        modal.open(ultraboost)
        modal.decrement()
        modal.decrement()
        assert modal.quantity == 1
        modal.increment()
        modal.increment()
        assert modal.quantity == 3

    def test_selection_requires_open_product(self, modal):
        with pytest.raises(LookupError):
            modal.select_size("42")


class TestAddToCart:
    def test_adds_with_promotion_price_and_first_image(self, modal, ultraboost, cart_store):
        modal.open(ultraboost)
        modal.select_image(1)
        modal.select_size("41")
        modal.increment()

        modal.add_to_cart()

        assert cart_store.items() == [
            {
                "id": "p-001",
                "name": "Ultraboost Light",
                "price": 1100.0,
                "image": ultraboost.images[0],
                "quantity": 2,
                "size": "41",
                "color": "Grey",
            }
        ]
        assert modal.is_open is False

    def test_regular_price_without_promotion(self, modal, products, cart_store):
        modal.open(next(p for p in products if p.id == "p-003"))
        modal.add_to_cart()
        assert cart_store.items()[0]["price"] == 1200.0

    def test_repeat_adds_merge(self, modal, ultraboost, cart_store):
        modal.open(ultraboost)
        modal.add_to_cart()
        modal.open(ultraboost)
        modal.add_to_cart()
        assert len(cart_store.items()) == 1
        assert cart_store.total_items() == 2
