"""Tests for the checkout flow against the fake backend and a manual scheduler."""

import pytest
from protean.exceptions import ValidationError

from shared.scheduler import ImmediateScheduler
from shared.status import StatusKind
from storefront.checkout.events import CheckoutStageChanged
from storefront.checkout.flow import ORDER_FAILED_MESSAGE, ORDER_FAILED_TITLE, CheckoutFlow
from storefront.checkout.payment import PaymentPanel
from storefront.checkout.session import DETAILS_MISSING_MESSAGE, CheckoutStage

DETAILS = {
    "customer_name": "Ama Mensah",
    "customer_email": "ama@example.com",
    "customer_phone": "0244000000",
    "shipping_address": "12 Ring Road, Accra",
}


@pytest.fixture()
def panel():
    return PaymentPanel()


@pytest.fixture()
def flow(cart_store, backend, status, panel, scheduler):
    return CheckoutFlow(
        cart_store=cart_store,
        backend=backend,
        status=status,
        payment_surface=panel,
        scheduler=scheduler,
        handoff_delay=1.0,
    )


@pytest.fixture()
def stages(flow):
    """Record every stage the flow passes through."""
    seen = [flow.stage.value]

    def _record(events):
        seen.extend(e.new_stage for e in events if isinstance(e, CheckoutStageChanged))

    flow.subscribe(_record)
    return seen


def _fill_cart(cart_store):
    cart_store.add_item(product_id="p-001", name="Ultraboost Light", price=1100.0, quantity=2, size="41", color="Grey")
    cart_store.add_item(product_id="p-002", name="Essentials Hoodie", price=450.0, quantity=1, size="M", color="Black")


class TestShippingFee:
    def test_configured_fee_used(self, flow, backend):
        backend.shipping_fee = 80.0
        assert flow.load_shipping_fee() == 80.0

    def test_missing_fee_falls_back(self, flow, backend):
        backend.shipping_fee = None
        assert flow.load_shipping_fee() == 150.0

    def test_failed_read_falls_back(self, flow, backend):
        backend.shipping_fee = 80.0
        backend.configure(should_succeed=False)
        assert flow.load_shipping_fee() == 150.0


class TestHappyPath:
    def test_stage_sequence_and_cart_cleared(self, flow, cart_store, backend, scheduler, stages):
        _fill_cart(cart_store)
        flow.update_details(**DETAILS)

        assert flow.submit() is True

        assert stages == ["cart", "processing", "success"]
        assert cart_store.is_empty()
        assert flow.session.order_id == "ORD-0001"
        assert len(backend.calls_to("place_order")) == 1

    def test_order_payload_uses_snapshot_prices(self, flow, cart_store, backend):
        _fill_cart(cart_store)
        flow.update_details(**DETAILS)
        flow.submit()

        order = backend.orders[0]
        header = order["header"]
        assert header.total == 2650.0 + 150.0
        assert header.shipping_fee == 150.0
        assert header.status == "PENDING"
        assert header.customer_email == "ama@example.com"
        assert [line.to_payload() for line in order["lines"]] == [
            {"id": "p-001", "quantity": 2, "price": 1100.0},
            {"id": "p-002", "quantity": 1, "price": 450.0},
        ]

    def test_handoff_opens_payment_surface_after_delay(self, flow, cart_store, panel, scheduler, stages):
        _fill_cart(cart_store)
        flow.update_details(**DETAILS)
        flow.submit()

        assert panel.is_open is False
        assert scheduler.pending[0][0] == 1.0

        scheduler.run_pending()

        assert panel.is_open is True
        assert panel.order_id == "ORD-0001"
        assert panel.instructions.momo_number == "0555554474"
        assert flow.stage is CheckoutStage.CART
        assert flow.session.order_id == "ORD-0001"

    def test_readable_id_fallback(self, flow, cart_store, backend):
        backend.configure(should_succeed=True, readable_ids=False)
        _fill_cart(cart_store)
        flow.update_details(**DETAILS)
        flow.submit()
        order_id = backend.orders[0]["id"]
        assert flow.session.order_id == order_id[-8:].upper()

    def test_confirm_payment_then_close(self, flow, cart_store, panel, scheduler, stages):
        _fill_cart(cart_store)
        flow.update_details(**DETAILS)
        flow.submit()
        scheduler.run_pending()

        flow.confirm_payment()
        assert panel.is_open is False
        assert flow.stage is CheckoutStage.SUCCESS
        assert flow.session.order_id == "ORD-0001"

        flow.close()
        assert flow.stage is CheckoutStage.CART
        assert flow.session.missing_fields() == list(DETAILS)
        assert flow.session.order_id is None
        assert stages == ["cart", "processing", "success", "cart", "success", "cart"]

    def test_close_is_idempotent_and_clears_cart(self, flow, cart_store):
        _fill_cart(cart_store)
        flow.update_details(**DETAILS)
        flow.close()
        flow.close()
        assert cart_store.is_empty()
        assert flow.stage is CheckoutStage.CART

    def test_immediate_scheduler_completes_handoff(self, cart_store, backend, status, panel):
        flow = CheckoutFlow(cart_store, backend, status, panel, ImmediateScheduler())
        _fill_cart(cart_store)
        flow.update_details(**DETAILS)
        flow.submit()
        assert panel.is_open is True
        assert flow.stage is CheckoutStage.CART


class TestValidation:
    @pytest.mark.parametrize("field", list(DETAILS))
    def test_missing_detail_short_circuits(self, flow, cart_store, backend, status, field):
        _fill_cart(cart_store)
        flow.update_details(**{**DETAILS, field: ""})

        assert flow.submit() is False

        assert flow.stage is CheckoutStage.CART
        assert backend.calls_to("place_order") == []
        assert status.kind is StatusKind.ERROR
        assert status.title == "Details Missing"
        assert status.message == DETAILS_MISSING_MESSAGE
        assert cart_store.total_items() == 3

    def test_empty_cart_short_circuits(self, flow, backend, status):
        flow.update_details(**DETAILS)
        assert flow.submit() is False
        assert backend.calls_to("place_order") == []
        assert status.title == "Cart Empty"

    def test_confirm_without_order_rejected(self, flow):
        with pytest.raises(ValidationError):
            flow.confirm_payment()


class TestFailureRecovery:
    def test_backend_rejection_keeps_cart(self, flow, cart_store, backend, status, scheduler, stages):
        backend.configure(should_succeed=False, failure_reason="connection reset")
        _fill_cart(cart_store)
        before = cart_store.items()
        flow.update_details(**DETAILS)

        assert flow.submit() is False

        assert cart_store.items() == before
        assert status.is_open and status.kind is StatusKind.ERROR
        assert status.title == ORDER_FAILED_TITLE
        assert status.message == ORDER_FAILED_MESSAGE
        assert "connection reset" not in status.message
        assert flow.stage is CheckoutStage.PROCESSING

        scheduler.run_pending()

        assert flow.stage is CheckoutStage.CART
        assert stages == ["cart", "processing", "cart"]

    def test_resubmission_after_failure(self, flow, cart_store, backend, scheduler):
        backend.configure(should_succeed=False)
        _fill_cart(cart_store)
        flow.update_details(**DETAILS)
        flow.submit()
        scheduler.run_pending()

        backend.configure(should_succeed=True)
        assert flow.submit() is True
        assert len(backend.orders) == 1
        assert len(backend.calls_to("place_order")) == 2

    def test_submit_ignored_while_processing(self, flow, cart_store, backend):
        backend.configure(should_succeed=False)
        _fill_cart(cart_store)
        flow.update_details(**DETAILS)
        flow.submit()
        assert flow.submit() is False
        assert len(backend.calls_to("place_order")) == 1

    def test_close_rejected_while_processing_keeps_cart(self, flow, cart_store, backend, scheduler):
        backend.configure(should_succeed=False)
        _fill_cart(cart_store)
        before = cart_store.items()
        flow.update_details(**DETAILS)
        flow.submit()

        with pytest.raises(ValidationError):
            flow.close()

        assert cart_store.items() == before
        assert cart_store.total_items() == 3
        scheduler.run_pending()
        assert flow.stage is CheckoutStage.CART
        assert cart_store.items() == before

    def test_unexpected_error_is_contained(self, flow, cart_store, backend, status, scheduler):
        def explode(header, lines):
            raise RuntimeError("serializer bug")

        backend.place_order = explode
        _fill_cart(cart_store)
        flow.update_details(**DETAILS)

        assert flow.submit() is False
        scheduler.run_pending()
        assert flow.stage is CheckoutStage.CART
        assert status.title == ORDER_FAILED_TITLE
