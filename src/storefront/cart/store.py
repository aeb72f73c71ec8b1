"""The shared cart store.

One instance per process holds the Cart aggregate, persists it after every
mutation and tells subscribers which domain events the mutation produced.
Storage failures never escape a mutation: they are logged and kept on
``last_save_error``.
"""

import structlog
from protean.exceptions import ValidationError

from shared.observable import Observable
from storefront.cart.cart import Cart
from storefront.cart.storage import CartStorage, CartStorageError

logger = structlog.get_logger(__name__)


class CartStore(Observable):
    def __init__(self, storage: CartStorage) -> None:
        super().__init__()
        self._storage = storage
        self._cart = Cart.create()
        self.last_save_error: Exception | None = None
        self._restore()

    def _restore(self) -> None:
        try:
            lines = self._storage.load()
            if lines:
                self._cart.restore(lines)
        except (CartStorageError, ValidationError, KeyError, TypeError, ValueError) as exc:
            logger.warning("Stored cart could not be restored, starting empty", error=str(exc))
            self._cart = Cart.create()
        self._cart._events.clear()

    def _commit(self) -> list:
        try:
            self._storage.save(self._cart.snapshot())
            self.last_save_error = None
        except CartStorageError as exc:
            logger.warning("Cart could not be persisted", error=str(exc))
            self.last_save_error = exc

        events = list(self._cart._events)
        self._cart._events.clear()
        if events:
            self._notify(events)
        return events

    # -------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------
    @property
    def cart(self) -> Cart:
        return self._cart

    def items(self) -> list[dict]:
        with self._lock:
            return self._cart.snapshot()

    def find(self, product_id, size=None, color=None) -> dict | None:
        with self._lock:
            item = self._cart.find_item(product_id, size, color)
            return item.to_dict() if item else None

    def total_items(self) -> int:
        with self._lock:
            return self._cart.total_items()

    def total_price(self) -> float:
        with self._lock:
            return self._cart.total_price()

    def is_empty(self) -> bool:
        return self.total_items() == 0

    # -------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------
    def add_item(self, product_id, name, price, quantity=1, image=None, size=None, color=None) -> dict:
        with self._lock:
            item = self._cart.add_item(
                product_id=product_id,
                name=name,
                price=price,
                quantity=quantity,
                image=image,
                size=size,
                color=color,
            )
            line = item.to_dict()
            self._commit()

        logger.debug("Cart line added", product_id=str(product_id), size=size, color=color, quantity=line["quantity"])
        return line

    def remove_item(self, product_id, size=None, color=None) -> bool:
        with self._lock:
            removed = self._cart.remove_item(product_id, size, color)
            if removed:
                self._commit()
        return removed

    def update_quantity(self, product_id, quantity, size=None, color=None) -> bool:
        with self._lock:
            updated = self._cart.update_quantity(product_id, quantity, size, color)
            if updated:
                self._commit()
        return updated

    def increment(self, product_id, size=None, color=None) -> bool:
        with self._lock:
            item = self._cart.find_item(product_id, size, color)
            if item is None:
                return False
            return self.update_quantity(product_id, item.quantity + 1, size, color)

    def decrement(self, product_id, size=None, color=None) -> bool:
        """Step a line down by one; a line already at 1 is removed."""
        with self._lock:
            item = self._cart.find_item(product_id, size, color)
            if item is None:
                return False
            if item.quantity <= 1:
                return self.remove_item(product_id, size, color)
            return self.update_quantity(product_id, item.quantity - 1, size, color)

    def clear(self) -> None:
        with self._lock:
            self._cart.empty()
            self._commit()
        logger.info("Cart cleared")
