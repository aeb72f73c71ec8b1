"""CheckoutSession aggregate: the checkout stage machine and payer details.

Stages: cart → processing → success, with processing → cart on a failed
order and success → cart when the customer closes the success screen or the
payment surface takes over. The session lives in memory only.
"""

from enum import Enum

from protean.exceptions import ValidationError
from protean.fields import Boolean, Float, String

from storefront.checkout.events import (
    CheckoutClosed,
    CheckoutFailed,
    CheckoutOrderPlaced,
    CheckoutStageChanged,
    CheckoutSubmitted,
    PaymentConfirmed,
)
from storefront.domain import storefront

DETAILS_MISSING_MESSAGE = "Please fill in all details (including email) before proceeding."
EMPTY_CART_MESSAGE = "Your cart is empty. Add a product before checking out."


class CheckoutStage(Enum):
    CART = "cart"
    PROCESSING = "processing"
    SUCCESS = "success"


_VALID_TRANSITIONS = {
    CheckoutStage.CART: {CheckoutStage.PROCESSING, CheckoutStage.SUCCESS},  # success via payment confirmation
    CheckoutStage.PROCESSING: {CheckoutStage.SUCCESS, CheckoutStage.CART},
    CheckoutStage.SUCCESS: {CheckoutStage.CART},
}

PAYER_FIELDS = ("customer_name", "customer_email", "customer_phone", "shipping_address")


@storefront.aggregate
class CheckoutSession:
    stage = String(choices=CheckoutStage, default=CheckoutStage.CART.value)
    customer_name = String(max_length=255)
    customer_email = String(max_length=255)
    customer_phone = String(max_length=50)
    shipping_address = String(max_length=1000)
    shipping_fee = Float(default=0.0)
    order_total = Float(default=0.0)
    order_id = String(max_length=100)
    awaiting_payment = Boolean(default=False)

    @classmethod
    def start(cls, shipping_fee: float = 0.0):
        return cls(stage=CheckoutStage.CART.value, shipping_fee=shipping_fee)

    # -------------------------------------------------------------------
    # State machine
    # -------------------------------------------------------------------
    @property
    def current_stage(self) -> CheckoutStage:
        return CheckoutStage(self.stage)

    def _assert_can_transition(self, target_stage):
        current = CheckoutStage(self.stage)
        if target_stage not in _VALID_TRANSITIONS.get(current, set()):
            raise ValidationError({"stage": [f"Cannot transition from {current.value} to {target_stage.value}"]})

    def _move_to(self, target_stage):
        self._assert_can_transition(target_stage)
        previous = self.stage
        self.stage = target_stage.value
        self.raise_(
            CheckoutStageChanged(
                session_id=str(self.id),
                previous_stage=previous,
                new_stage=target_stage.value,
            )
        )

    # -------------------------------------------------------------------
    # Payer details
    # -------------------------------------------------------------------
    def update_details(self, **details):
        unknown = set(details) - set(PAYER_FIELDS)
        if unknown:
            raise ValidationError({name: ["Unknown checkout field"] for name in sorted(unknown)})
        for name, value in details.items():
            setattr(self, name, value.strip() if isinstance(value, str) else value)

    def missing_fields(self) -> list[str]:
        return [name for name in PAYER_FIELDS if not getattr(self, name)]

    def details(self) -> dict:
        return {name: getattr(self, name) or "" for name in PAYER_FIELDS}

    # -------------------------------------------------------------------
    # Submission
    # -------------------------------------------------------------------
    def begin_processing(self, item_count: int, cart_total: float, shipping_fee: float):
        """Validate the form and the cart, then enter ``processing``."""
        missing = self.missing_fields()
        if missing:
            raise ValidationError({name: [DETAILS_MISSING_MESSAGE] for name in missing})
        if item_count < 1:
            raise ValidationError({"cart": [EMPTY_CART_MESSAGE]})

        self._move_to(CheckoutStage.PROCESSING)
        self.shipping_fee = shipping_fee
        self.order_total = cart_total + shipping_fee

        self.raise_(
            CheckoutSubmitted(
                session_id=str(self.id),
                item_count=item_count,
                order_total=self.order_total,
                shipping_fee=shipping_fee,
            )
        )

    def record_order_placed(self, order_id: str):
        self._move_to(CheckoutStage.SUCCESS)
        self.order_id = order_id
        self.raise_(
            CheckoutOrderPlaced(
                session_id=str(self.id),
                order_id=order_id,
                order_total=self.order_total,
            )
        )

    def record_failure(self, reason: str | None = None):
        """Note a failed placement. The session stays in ``processing`` until ``return_to_cart``."""
        self.raise_(CheckoutFailed(session_id=str(self.id), reason=(reason or "")[:500] or None))

    def return_to_cart(self):
        """Reset to ``cart`` in the background. The order id is kept for the payment surface."""
        if self.current_stage is CheckoutStage.CART:
            return
        if self.current_stage is CheckoutStage.SUCCESS and self.order_id:
            self.awaiting_payment = True
        self._move_to(CheckoutStage.CART)

    # -------------------------------------------------------------------
    # Payment and close
    # -------------------------------------------------------------------
    def confirm_payment(self):
        if not self.order_id:
            raise ValidationError({"order_id": ["No order is awaiting payment"]})
        self._move_to(CheckoutStage.SUCCESS)
        self.awaiting_payment = False
        self.raise_(PaymentConfirmed(session_id=str(self.id), order_id=self.order_id))

    def close(self):
        """Clear the form and order reference and return to ``cart``. Safe to repeat."""
        if self.current_stage is CheckoutStage.PROCESSING:
            raise ValidationError({"stage": ["Cannot close checkout while an order is being placed"]})
        if self.current_stage is CheckoutStage.SUCCESS:
            self._move_to(CheckoutStage.CART)

        for name in PAYER_FIELDS:
            setattr(self, name, None)
        self.order_id = None
        self.order_total = 0.0
        self.awaiting_payment = False

        self.raise_(CheckoutClosed(session_id=str(self.id)))
