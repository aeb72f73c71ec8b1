"""Checkout flow: coordinates cart, backend, status channel and payment surface.

Flow:
    1. submit() validates the payer form and the cart (cart → processing)
    2a. place_order succeeds → cart cleared, order id captured (→ success);
        after the handoff delay the payment surface opens and the session
        resets to cart in the background
    2b. place_order fails → error status, cart kept; after the same delay
        the session returns to cart
    3. confirm_payment() → payment surface hidden, success shown again
    4. close() → cart and payer form cleared (→ cart)

Every failure is caught here and surfaced through the status channel. There
is no automatic retry.
"""

import structlog
from protean.exceptions import ValidationError

from shared.backend.port import StoreBackend
from shared.backend.records import OrderHeader, OrderLine
from shared.config import DEFAULT_SHIPPING_FEE, PaymentInstructions
from shared.observable import Observable
from shared.scheduler import Scheduler
from shared.status import StatusChannel, StatusKind
from storefront.cart.store import CartStore
from storefront.checkout.payment import PaymentPresenter
from storefront.checkout.session import CheckoutSession, CheckoutStage

logger = structlog.get_logger(__name__)

ORDER_FAILED_TITLE = "Order Failed"
ORDER_FAILED_MESSAGE = "Could not process your order. Please try again."


class CheckoutFlow(Observable):
    def __init__(
        self,
        cart_store: CartStore,
        backend: StoreBackend,
        status: StatusChannel,
        payment_surface: PaymentPresenter,
        scheduler: Scheduler,
        payment_instructions: PaymentInstructions | None = None,
        handoff_delay: float = 1.0,
        shipping_fee_fallback: float = DEFAULT_SHIPPING_FEE,
    ) -> None:
        super().__init__()
        self._cart = cart_store
        self._backend = backend
        self._status = status
        self._payment = payment_surface
        self._scheduler = scheduler
        self.payment_instructions = payment_instructions or PaymentInstructions()
        self.handoff_delay = handoff_delay
        self.shipping_fee_fallback = shipping_fee_fallback
        self.shipping_fee = shipping_fee_fallback
        self.session = CheckoutSession.start(shipping_fee=shipping_fee_fallback)

    def _publish(self) -> list:
        events = list(self.session._events)
        self.session._events.clear()
        if events:
            self._notify(events)
        return events

    @property
    def stage(self) -> CheckoutStage:
        return self.session.current_stage

    @property
    def order_total(self) -> float:
        """Cart total plus shipping, as it would be submitted right now."""
        return self._cart.total_price() + self.shipping_fee

    # -------------------------------------------------------------------
    # Setup
    # -------------------------------------------------------------------
    def load_shipping_fee(self) -> float:
        """Read the configured fee once per checkout mount, falling back on failure or absence."""
        try:
            fee = self._backend.fetch_shipping_fee()
        except Exception as exc:
            logger.warning("Shipping fee unavailable, using fallback", error=str(exc), fallback=self.shipping_fee_fallback)
            fee = None

        self.shipping_fee = float(fee) if fee else self.shipping_fee_fallback
        self.session.shipping_fee = self.shipping_fee
        return self.shipping_fee

    def update_details(self, **details) -> None:
        with self._lock:
            self.session.update_details(**details)

    # -------------------------------------------------------------------
    # Submission
    # -------------------------------------------------------------------
    def submit(self) -> bool:
        """Place the order for the current cart. Returns True when the backend accepted it."""
        with self._lock:
            if self.stage is CheckoutStage.PROCESSING:
                logger.info("Checkout already in progress, ignoring submit")
                return False

            try:
                self.session.begin_processing(
                    item_count=self._cart.total_items(),
                    cart_total=self._cart.total_price(),
                    shipping_fee=self.shipping_fee,
                )
            except ValidationError as exc:
                title = "Cart Empty" if "cart" in exc.messages else "Details Missing"
                message = next(iter(exc.messages.values()))[0]
                self._status.show(StatusKind.ERROR, title, message)
                logger.info("Checkout rejected", fields=sorted(exc.messages))
                return False

            header = OrderHeader(
                customer_name=self.session.customer_name,
                customer_email=self.session.customer_email,
                customer_phone=self.session.customer_phone,
                shipping_address=self.session.shipping_address,
                total=self.session.order_total,
                shipping_fee=self.session.shipping_fee,
            )
            lines = [
                OrderLine(product_id=line["id"], quantity=line["quantity"], price=line["price"])
                for line in self._cart.items()
            ]
        self._publish()

        try:
            placed = self._backend.place_order(header, lines)
        except Exception as exc:
            logger.exception("Order creation failed", total=header.total, lines=len(lines))
            with self._lock:
                self.session.record_failure(str(exc))
            self._status.show(StatusKind.ERROR, ORDER_FAILED_TITLE, ORDER_FAILED_MESSAGE)
            self._publish()
            self._scheduler.call_later(self.handoff_delay, self._recover)
            return False

        with self._lock:
            self._cart.clear()
            self.session.record_order_placed(placed.display_id)
        logger.info("Order placed", order_id=placed.id, display_id=placed.display_id, total=header.total)
        self._publish()
        self._scheduler.call_later(self.handoff_delay, self._hand_off)
        return True

    def _hand_off(self) -> None:
        with self._lock:
            order_id = self.session.order_id
            self.session.return_to_cart()
        self._payment.show(order_id, self.payment_instructions)
        self._publish()

    def _recover(self) -> None:
        with self._lock:
            self.session.return_to_cart()
        self._publish()

    # -------------------------------------------------------------------
    # Payment and close
    # -------------------------------------------------------------------
    def confirm_payment(self) -> None:
        """The customer reports the manual payment as made."""
        with self._lock:
            self.session.confirm_payment()
        self._payment.hide()
        logger.info("Payment reported by customer", order_id=self.session.order_id)
        self._publish()

    def close(self) -> None:
        with self._lock:
            # Raises while an order is being placed; the cart must survive that.
            self.session.close()
            self._cart.clear()
        self._publish()
