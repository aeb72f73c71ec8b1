"""Store backend port (abstract interface).

Defines the contract every backend adapter must implement. The storefront
and back-office only ever talk to this interface, so the in-memory
FakeBackend (dev/test) and the RestBackend (hosted database) are
interchangeable.
"""

from abc import ABC, abstractmethod
from collections.abc import Callable

from shared.backend.records import (
    AdminNotification,
    Brand,
    Category,
    OrderHeader,
    OrderLine,
    PlacedOrder,
    Product,
)


class BackendError(Exception):
    """A backend call failed (network, timeout, or server rejection)."""


class BackendTimeout(BackendError):
    """A backend call did not answer within the configured timeout."""


class Subscription(ABC):
    """Handle on a push feed. Closing it releases the underlying channel."""

    @property
    @abstractmethod
    def active(self) -> bool: ...

    @abstractmethod
    def close(self) -> None:
        """Stop delivering events. Safe to call more than once."""
        ...

    def __enter__(self) -> "Subscription":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


class StoreBackend(ABC):
    """Abstract store backend interface."""

    # Catalogue reads
    @abstractmethod
    def fetch_products(self) -> list[Product]: ...

    @abstractmethod
    def fetch_categories(self) -> list[Category]: ...

    @abstractmethod
    def fetch_brands(self) -> list[Brand]: ...

    # Ordering
    @abstractmethod
    def place_order(self, header: OrderHeader, lines: list[OrderLine]) -> PlacedOrder:
        """Create the order and its lines atomically via the server procedure."""
        ...

    @abstractmethod
    def fetch_shipping_fee(self) -> float | None:
        """Return the configured flat shipping fee, or None when unset."""
        ...

    # Back-office
    @abstractmethod
    def save_shipping_fee(self, fee: float) -> None: ...

    @abstractmethod
    def save_brand(self, payload: dict, brand_id: str | None = None) -> Brand: ...

    @abstractmethod
    def upload_image(self, filename: str, content: bytes, bucket: str) -> str:
        """Store a file and return its durable public URL."""
        ...

    @abstractmethod
    def fetch_notifications(self) -> list[AdminNotification]: ...

    @abstractmethod
    def mark_notification_read(self, notification_id: str) -> None: ...

    @abstractmethod
    def mark_all_notifications_read(self) -> None: ...

    @abstractmethod
    def delete_notification(self, notification_id: str) -> None: ...

    @abstractmethod
    def subscribe_notifications(self, callback: Callable[[AdminNotification], None]) -> Subscription:
        """Deliver newly inserted admin notifications to ``callback`` until closed."""
        ...
