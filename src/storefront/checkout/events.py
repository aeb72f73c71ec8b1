"""Domain events for the CheckoutSession aggregate."""

from protean.fields import Float, Identifier, Integer, String

from storefront.domain import storefront


@storefront.event(part_of="CheckoutSession")
class CheckoutStageChanged:
    __version__ = 1

    session_id = Identifier(required=True)
    previous_stage = String(required=True)
    new_stage = String(required=True)


@storefront.event(part_of="CheckoutSession")
class CheckoutSubmitted:
    """Payer details passed validation and the order is being placed."""

    __version__ = 1

    session_id = Identifier(required=True)
    item_count = Integer(required=True)
    order_total = Float(required=True)
    shipping_fee = Float(required=True)


@storefront.event(part_of="CheckoutSession")
class CheckoutOrderPlaced:
    __version__ = 1

    session_id = Identifier(required=True)
    order_id = String(required=True)
    order_total = Float(required=True)


@storefront.event(part_of="CheckoutSession")
class CheckoutFailed:
    __version__ = 1

    session_id = Identifier(required=True)
    reason = String(max_length=500)


@storefront.event(part_of="CheckoutSession")
class PaymentConfirmed:
    """The customer reported that the manual payment was made."""

    __version__ = 1

    session_id = Identifier(required=True)
    order_id = String(required=True)


@storefront.event(part_of="CheckoutSession")
class CheckoutClosed:
    __version__ = 1

    session_id = Identifier(required=True)
