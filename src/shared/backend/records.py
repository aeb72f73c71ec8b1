"""Records exchanged with the store backend.

The backend speaks camelCase JSON rows; ``from_record`` translates a row into
an immutable snapshot so nothing downstream depends on the wire shape.
"""

from dataclasses import dataclass, field
from typing import Any


def _str_tuple(values) -> tuple[str, ...]:
    return tuple(str(v) for v in (values or []))


def _optional_float(value) -> float | None:
    if value is None or value == "":
        return None
    return float(value)


@dataclass(frozen=True)
class Brand:
    id: str
    name: str
    logo_url: str = ""
    default_image: str | None = None
    promo_percentage: float | None = None
    description: str | None = None

    @classmethod
    def from_record(cls, record: dict[str, Any]) -> "Brand":
        return cls(
            id=str(record.get("id", "")),
            name=record.get("name") or "",
            logo_url=record.get("logoUrl") or record.get("logo_url") or "",
            default_image=record.get("defaultImage") or record.get("default_image"),
            promo_percentage=_optional_float(record.get("promoPercentage", record.get("promo_percentage"))),
            description=record.get("description"),
        )


@dataclass(frozen=True)
class Category:
    id: str
    name: str
    slug: str

    @classmethod
    def from_record(cls, record: dict[str, Any]) -> "Category":
        return cls(
            id=str(record.get("id", "")),
            name=record.get("name") or "",
            slug=record.get("slug") or "",
        )


@dataclass(frozen=True)
class Product:
    """Read-only product snapshot as fetched from the backend."""

    id: str
    name: str
    price: float
    brand: Brand
    description: str = ""
    discount_price: float | None = None
    stock: int = 0
    images: tuple[str, ...] = ()
    colors: tuple[str, ...] = ()
    sizes: tuple[str, ...] = ()
    category_id: str | None = None
    brand_id: str | None = None
    is_featured: bool = False
    is_new_arrival: bool = False
    is_promotion: bool = False

    @property
    def has_valid_discount(self) -> bool:
        return bool(self.is_promotion and self.discount_price and self.discount_price < self.price)

    @property
    def effective_price(self) -> float:
        """Discount price while a valid promotion runs, otherwise the regular price."""
        return self.discount_price if self.has_valid_discount else self.price

    @property
    def primary_image(self) -> str:
        return self.images[0] if self.images else ""

    @classmethod
    def from_record(cls, record: dict[str, Any]) -> "Product":
        brand_record = record.get("brand") or {}
        brand_id = record.get("brandId") or record.get("brand_id") or brand_record.get("id")
        category_id = record.get("categoryId") or record.get("category_id")
        return cls(
            id=str(record["id"]),
            name=record.get("name") or "",
            description=record.get("description") or "",
            price=float(record.get("price") or 0),
            discount_price=_optional_float(record.get("discountPrice", record.get("discount_price"))),
            stock=int(record.get("stock") or 0),
            images=_str_tuple(record.get("images")),
            colors=_str_tuple(record.get("colors")),
            sizes=_str_tuple(record.get("sizes")),
            category_id=str(category_id) if category_id is not None else None,
            brand_id=str(brand_id) if brand_id is not None else None,
            brand=Brand.from_record(brand_record),
            is_featured=bool(record.get("isFeatured", record.get("is_featured", False))),
            is_new_arrival=bool(record.get("isNewArrival", record.get("is_new_arrival", False))),
            is_promotion=bool(record.get("isPromotion", record.get("is_promotion", False))),
        )


@dataclass(frozen=True)
class OrderHeader:
    customer_name: str
    customer_email: str
    customer_phone: str
    shipping_address: str
    total: float
    shipping_fee: float
    status: str = "PENDING"


@dataclass(frozen=True)
class OrderLine:
    """One submitted line: product, quantity and the cart's snapshot unit price."""

    product_id: str
    quantity: int
    price: float

    def to_payload(self) -> dict[str, Any]:
        return {"id": self.product_id, "quantity": self.quantity, "price": self.price}


@dataclass(frozen=True)
class PlacedOrder:
    id: str
    readable_id: str | None = None
    raw: dict[str, Any] = field(default_factory=dict, compare=False)

    @property
    def display_id(self) -> str:
        """Customer-facing reference; falls back to the tail of the internal key."""
        if self.readable_id:
            return self.readable_id
        return self.id[-8:].upper()

    @classmethod
    def from_record(cls, record: dict[str, Any]) -> "PlacedOrder":
        return cls(
            id=str(record.get("id", "")),
            readable_id=record.get("readableId") or record.get("readable_id"),
            raw=dict(record),
        )


@dataclass(frozen=True)
class AdminNotification:
    id: str
    type: str
    message: str
    is_read: bool = False
    reference_id: str | None = None
    created_at: str | None = None

    @classmethod
    def from_record(cls, record: dict[str, Any]) -> "AdminNotification":
        return cls(
            id=str(record.get("id", "")),
            type=record.get("type") or "ORDER",
            message=record.get("message") or "",
            is_read=bool(record.get("isRead", record.get("is_read", False))),
            reference_id=record.get("referenceId") or record.get("reference_id"),
            created_at=record.get("created_at") or record.get("createdAt"),
        )
