"""Cart aggregate: the customer's line items with snapshot prices.

A line is identified by (product, size, color). Adding a selection that
matches an existing line increases its quantity; the unit price recorded on
the first add is kept, so later catalogue price changes never reach the cart.
Totals are derived from the lines on every call.
"""

from datetime import UTC, datetime

from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, HasMany, Identifier, Integer, String

from storefront.cart.events import (
    CartCleared,
    CartItemAdded,
    CartItemRemoved,
    CartQuantityUpdated,
    CartRestored,
)
from storefront.domain import storefront


def line_key(product_id, size=None, color=None) -> tuple[str, str | None, str | None]:
    """Merge key of a cart line. Blank size/color count as absent."""
    return str(product_id), size or None, color or None


@storefront.entity(part_of="Cart")
class CartItem:
    product_id = Identifier(required=True)
    name = String(max_length=255)
    price = Float(required=True, min_value=0.0)
    image = String(max_length=1000)
    quantity = Integer(required=True, min_value=1)
    size = String(max_length=50)
    color = String(max_length=50)

    @property
    def key(self):
        return line_key(self.product_id, self.size, self.color)

    @property
    def line_total(self) -> float:
        return self.price * self.quantity

    def to_dict(self) -> dict:
        return {
            "id": str(self.product_id),
            "name": self.name or "",
            "price": self.price,
            "image": self.image or "",
            "quantity": self.quantity,
            "size": self.size,
            "color": self.color,
        }


@storefront.aggregate
class Cart:
    items = HasMany(CartItem)
    created_at = DateTime()
    updated_at = DateTime()

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def create(cls):
        now = datetime.now(UTC)
        return cls(created_at=now, updated_at=now)

    # -------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------
    def find_item(self, product_id, size=None, color=None):
        key = line_key(product_id, size, color)
        return next((i for i in self.items if i.key == key), None)

    def total_items(self) -> int:
        return sum(item.quantity for item in self.items)

    def total_price(self) -> float:
        return sum(item.price * item.quantity for item in self.items)

    def snapshot(self) -> list[dict]:
        """Lines in insertion order, in the storage/wire shape."""
        return [item.to_dict() for item in self.items]

    # -------------------------------------------------------------------
    # Line management
    # -------------------------------------------------------------------
    def add_item(self, product_id, name, price, quantity=1, image=None, size=None, color=None):
        """Add a selection, merging into the line with the same (product, size, color)."""
        if quantity is None or int(quantity) < 1:
            raise ValidationError({"quantity": ["Quantity must be at least 1"]})
        quantity = int(quantity)

        existing = self.find_item(product_id, size, color)
        if existing:
            existing.quantity += quantity
            item = existing
        else:
            _, size, color = line_key(product_id, size, color)
            item = CartItem(
                product_id=str(product_id),
                name=name,
                price=price,
                image=image,
                quantity=quantity,
                size=size,
                color=color,
            )
            self.add_items(item)

        self.updated_at = datetime.now(UTC)

        self.raise_(
            CartItemAdded(
                cart_id=str(self.id),
                item_id=str(item.id),
                product_id=str(product_id),
                size=item.size,
                color=item.color,
                quantity=quantity,
                new_quantity=item.quantity,
                unit_price=item.price,
                merged=existing is not None,
            )
        )
        return item

    def update_quantity(self, product_id, quantity, size=None, color=None) -> bool:
        """Set a line's quantity, never below 1. Returns False when no line matches."""
        item = self.find_item(product_id, size, color)
        if item is None:
            return False

        previous_quantity = item.quantity
        item.quantity = max(1, int(quantity))
        self.updated_at = datetime.now(UTC)

        self.raise_(
            CartQuantityUpdated(
                cart_id=str(self.id),
                item_id=str(item.id),
                previous_quantity=previous_quantity,
                new_quantity=item.quantity,
            )
        )
        return True

    def remove_item(self, product_id, size=None, color=None) -> bool:
        """Remove the exact (product, size, color) line. Returns False when none matches."""
        item = self.find_item(product_id, size, color)
        if item is None:
            return False

        self.remove_items(item)
        self.updated_at = datetime.now(UTC)

        self.raise_(
            CartItemRemoved(
                cart_id=str(self.id),
                item_id=str(item.id),
                product_id=str(item.product_id),
                size=item.size,
                color=item.color,
            )
        )
        return True

    def empty(self) -> None:
        lines = list(self.items)
        for item in lines:
            self.remove_items(item)
        self.updated_at = datetime.now(UTC)

        self.raise_(CartCleared(cart_id=str(self.id), lines_removed=len(lines)))

    def restore(self, lines: list[dict]) -> None:
        """Rebuild lines from stored snapshots, re-applying the merge rule."""
        for line in lines:
            _, size, color = line_key(line["id"], line.get("size"), line.get("color"))
            existing = self.find_item(line["id"], size, color)
            if existing:
                existing.quantity += max(1, int(line.get("quantity") or 1))
                continue
            self.add_items(
                CartItem(
                    product_id=str(line["id"]),
                    name=line.get("name"),
                    price=float(line.get("price") or 0),
                    image=line.get("image"),
                    quantity=max(1, int(line.get("quantity") or 1)),
                    size=size,
                    color=color,
                )
            )

        self.raise_(CartRestored(cart_id=str(self.id), lines_restored=len(self.items)))
