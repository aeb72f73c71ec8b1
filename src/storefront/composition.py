"""Composition root for the storefront.

Builds the shared stores once and wires them together. Must be called inside
the storefront domain context: the Cart and CheckoutSession aggregates are
created here.
"""

from dataclasses import dataclass

import structlog

from shared.backend import get_backend
from shared.backend.port import StoreBackend
from shared.config import StoreSettings
from shared.scheduler import Scheduler, ThreadingScheduler
from shared.status import StatusChannel
from storefront.cart.storage import CartStorage, JsonFileCartStorage
from storefront.cart.store import CartStore
from storefront.catalogue.browser import ShopBrowser
from storefront.checkout.flow import CheckoutFlow
from storefront.checkout.payment import PaymentPanel
from storefront.domain import storefront
from storefront.selection.modal import ProductModal

logger = structlog.get_logger(__name__)


@dataclass
class Storefront:
    settings: StoreSettings
    backend: StoreBackend
    status: StatusChannel
    cart: CartStore
    browser: ShopBrowser
    modal: ProductModal
    payment: PaymentPanel
    checkout: CheckoutFlow


def build_storefront(
    settings: StoreSettings | None = None,
    backend: StoreBackend | None = None,
    storage: CartStorage | None = None,
    scheduler: Scheduler | None = None,
    status: StatusChannel | None = None,
) -> Storefront:
    settings = settings or StoreSettings.from_env()
    backend = backend or get_backend()
    storage = storage or JsonFileCartStorage(settings.cart_file, settings.cart_storage_key)
    scheduler = scheduler or ThreadingScheduler(storefront)
    status = status or StatusChannel()

    cart = CartStore(storage)
    payment = PaymentPanel()
    checkout = CheckoutFlow(
        cart_store=cart,
        backend=backend,
        status=status,
        payment_surface=payment,
        scheduler=scheduler,
        payment_instructions=settings.payment,
        handoff_delay=settings.handoff_delay,
        shipping_fee_fallback=settings.shipping_fee_fallback,
    )

    logger.info("Storefront assembled", backend=type(backend).__name__, cart_lines=len(cart.items()))
    return Storefront(
        settings=settings,
        backend=backend,
        status=status,
        cart=cart,
        browser=ShopBrowser(backend, status, page_size=settings.page_size),
        modal=ProductModal(cart),
        payment=payment,
        checkout=checkout,
    )
