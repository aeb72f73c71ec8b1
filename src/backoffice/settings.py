"""Store settings editor for the admin console (currently the shipping fee)."""

import structlog
from protean.exceptions import ValidationError

from shared.backend.port import BackendError, StoreBackend
from shared.status import StatusChannel, StatusKind

logger = structlog.get_logger(__name__)


class ShippingFeeSettings:
    def __init__(self, backend: StoreBackend, status: StatusChannel) -> None:
        self._backend = backend
        self._status = status
        self.fee: float | None = None

    def load(self) -> float | None:
        try:
            self.fee = self._backend.fetch_shipping_fee()
        except BackendError as exc:
            logger.error("Failed to fetch shipping fee", error=str(exc))
            self._status.show(StatusKind.ERROR, "Error", "Failed to fetch shipping fee")
        return self.fee

    def save(self, fee: float) -> bool:
        if fee is None or fee < 0:
            self._status.show(StatusKind.ERROR, "Error", "Shipping fee cannot be negative")
            raise ValidationError({"shipping_fee": ["Shipping fee cannot be negative"]})

        try:
            self._backend.save_shipping_fee(float(fee))
        except BackendError as exc:
            logger.error("Failed to save shipping fee", fee=fee, error=str(exc))
            self._status.show(StatusKind.ERROR, "Error", "Failed to save shipping fee")
            return False

        self.fee = float(fee)
        logger.info("Shipping fee updated", fee=self.fee)
        self._status.show(StatusKind.SUCCESS, "Saved", "Shipping fee updated")
        return True
