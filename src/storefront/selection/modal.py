"""Product detail modal: the inspected product and the in-progress selection."""

import structlog

from shared.backend.records import Product
from shared.observable import Observable
from storefront.cart.store import CartStore

logger = structlog.get_logger(__name__)


class ProductModal(Observable):
    def __init__(self, cart_store: CartStore) -> None:
        super().__init__()
        self._cart = cart_store
        self.product: Product | None = None
        self.is_open = False
        self.image_index = 0
        self.size: str | None = None
        self.color: str | None = None
        self.quantity = 1

    def open(self, product: Product) -> None:
        with self._lock:
            self.product = product
            self.is_open = True
            self.image_index = 0
            self.size = product.sizes[0] if product.sizes else None
            self.color = product.colors[0] if product.colors else None
            self.quantity = 1
        self._notify(self)

    def close(self) -> None:
        with self._lock:
            self.is_open = False
        self._notify(self)

    def _require_product(self) -> Product:
        if self.product is None:
            raise LookupError("No product is open")
        return self.product

    # -------------------------------------------------------------------
    # Selection
    # -------------------------------------------------------------------
    def select_image(self, index: int) -> None:
        product = self._require_product()
        if not 0 <= index < len(product.images):
            raise IndexError(f"Image {index} out of range")
        self.image_index = index
        self._notify(self)

    def select_size(self, size: str) -> None:
        product = self._require_product()
        if size not in product.sizes:
            raise ValueError(f"Size '{size}' is not available")
        self.size = size
        self._notify(self)

    def select_color(self, color: str) -> None:
        product = self._require_product()
        if color not in product.colors:
            raise ValueError(f"Color '{color}' is not available")
        self.color = color
        self._notify(self)

    def increment(self) -> None:
        self.quantity += 1
        self._notify(self)

    def decrement(self) -> None:
        self.quantity = max(1, self.quantity - 1)
        self._notify(self)

    @property
    def effective_price(self) -> float:
        return self._require_product().effective_price

    @property
    def current_image(self) -> str:
        product = self._require_product()
        return product.images[self.image_index] if product.images else ""

    def add_to_cart(self) -> dict:
        """Add the current selection at the effective price, then close."""
        product = self._require_product()
        line = self._cart.add_item(
            product_id=product.id,
            name=product.name,
            price=product.effective_price,
            quantity=self.quantity,
            image=product.primary_image,
            size=self.size,
            color=self.color,
        )
        logger.info("Added to cart from product modal", product_id=product.id, quantity=self.quantity)
        self.close()
        return line
