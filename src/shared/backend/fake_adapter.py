"""Configurable in-memory store backend for development and testing.

Holds products, categories, brands, settings and admin notifications in
memory. It can be configured at runtime to fail, which makes the checkout
and catalogue error paths easy to exercise.
"""

from collections.abc import Callable
from dataclasses import replace
from datetime import UTC, datetime
from uuid import uuid4

from shared.backend.port import BackendError, StoreBackend, Subscription
from shared.backend.records import (
    AdminNotification,
    Brand,
    Category,
    OrderHeader,
    OrderLine,
    PlacedOrder,
    Product,
)


class FakeSubscription(Subscription):
    def __init__(self, backend: "FakeBackend", callback: Callable[[AdminNotification], None]) -> None:
        self._backend = backend
        self.callback = callback
        self._active = True

    @property
    def active(self) -> bool:
        return self._active

    def close(self) -> None:
        if self._active:
            self._active = False
            self._backend.subscriptions.remove(self)


class FakeBackend(StoreBackend):
    """In-memory backend that records every call."""

    def __init__(
        self,
        products: list[Product] | None = None,
        categories: list[Category] | None = None,
        brands: list[Brand] | None = None,
    ) -> None:
        self.products: list[Product] = list(products or [])
        self.categories: list[Category] = list(categories or [])
        self.brands: list[Brand] = list(brands or [])
        self.notifications: list[AdminNotification] = []
        self.orders: list[dict] = []
        self.images: dict[str, bytes] = {}
        self.shipping_fee: float | None = None
        self.subscriptions: list[FakeSubscription] = []
        self.should_succeed: bool = True
        self.failure_reason: str = "Backend unavailable"
        self.readable_ids: bool = True
        self.calls: list[dict] = []

    def configure(
        self,
        should_succeed: bool,
        failure_reason: str = "Backend unavailable",
        readable_ids: bool = True,
    ) -> None:
        """Configure backend behaviour at runtime."""
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason
        self.readable_ids = readable_ids

    def _record(self, method: str, **fields) -> None:
        self.calls.append({"method": method, **fields})
        if not self.should_succeed:
            raise BackendError(self.failure_reason)

    def calls_to(self, method: str) -> list[dict]:
        return [c for c in self.calls if c["method"] == method]

    # Catalogue reads
    def fetch_products(self) -> list[Product]:
        self._record("fetch_products")
        return list(self.products)

    def fetch_categories(self) -> list[Category]:
        self._record("fetch_categories")
        return list(self.categories)

    def fetch_brands(self) -> list[Brand]:
        self._record("fetch_brands")
        return list(self.brands)

    # Ordering
    def place_order(self, header: OrderHeader, lines: list[OrderLine]) -> PlacedOrder:
        self._record("place_order", header=header, lines=list(lines))
        order_id = str(uuid4())
        readable_id = f"ORD-{len(self.orders) + 1:04d}" if self.readable_ids else None
        self.orders.append({"id": order_id, "readable_id": readable_id, "header": header, "lines": list(lines)})
        return PlacedOrder(id=order_id, readable_id=readable_id)

    def fetch_shipping_fee(self) -> float | None:
        self._record("fetch_shipping_fee")
        return self.shipping_fee

    # Back-office
    def save_shipping_fee(self, fee: float) -> None:
        self._record("save_shipping_fee", fee=fee)
        self.shipping_fee = fee

    def save_brand(self, payload: dict, brand_id: str | None = None) -> Brand:
        self._record("save_brand", payload=dict(payload), brand_id=brand_id)
        brand = Brand.from_record({**payload, "id": brand_id or str(uuid4())})
        self.brands = [b for b in self.brands if b.id != brand.id] + [brand]
        return brand

    def upload_image(self, filename: str, content: bytes, bucket: str) -> str:
        self._record("upload_image", filename=filename, bucket=bucket)
        ext = filename.rsplit(".", 1)[-1] if "." in filename else "bin"
        path = f"{uuid4().hex[:12]}.{ext}"
        self.images[f"{bucket}/{path}"] = content
        return f"memory://{bucket}/{path}"

    def fetch_notifications(self) -> list[AdminNotification]:
        self._record("fetch_notifications")
        return sorted(self.notifications, key=lambda n: n.created_at or "", reverse=True)

    def mark_notification_read(self, notification_id: str) -> None:
        self._record("mark_notification_read", notification_id=notification_id)
        self.notifications = [
            _with_read(n) if n.id == notification_id else n for n in self.notifications
        ]

    def mark_all_notifications_read(self) -> None:
        self._record("mark_all_notifications_read")
        self.notifications = [_with_read(n) for n in self.notifications]

    def delete_notification(self, notification_id: str) -> None:
        self._record("delete_notification", notification_id=notification_id)
        self.notifications = [n for n in self.notifications if n.id != notification_id]

    def subscribe_notifications(self, callback: Callable[[AdminNotification], None]) -> Subscription:
        self._record("subscribe_notifications")
        subscription = FakeSubscription(self, callback)
        self.subscriptions.append(subscription)
        return subscription

    def publish_notification(self, message: str, type: str = "ORDER", reference_id: str | None = None) -> AdminNotification:
        """Insert a notification and push it to every open subscription."""
        notification = AdminNotification(
            id=str(uuid4()),
            type=type,
            message=message,
            reference_id=reference_id,
            created_at=datetime.now(UTC).isoformat(),
        )
        self.notifications.append(notification)
        for subscription in list(self.subscriptions):
            subscription.callback(notification)
        return notification


def _with_read(notification: AdminNotification) -> AdminNotification:
    return replace(notification, is_read=True)
