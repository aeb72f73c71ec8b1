"""Composition root for the admin back-office."""

from dataclasses import dataclass

from backoffice.brands import BrandEditor
from backoffice.notifications.inbox import NotificationInbox
from backoffice.settings import ShippingFeeSettings
from shared.backend.port import StoreBackend
from shared.status import StatusChannel


@dataclass
class Backoffice:
    backend: StoreBackend
    status: StatusChannel
    inbox: NotificationInbox
    shipping: ShippingFeeSettings
    brands: BrandEditor


def build_backoffice(backend: StoreBackend, status: StatusChannel | None = None) -> Backoffice:
    status = status or StatusChannel()
    return Backoffice(
        backend=backend,
        status=status,
        inbox=NotificationInbox(backend),
        shipping=ShippingFeeSettings(backend, status),
        brands=BrandEditor(backend, status),
    )
