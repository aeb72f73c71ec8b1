"""Payment-details surface shown once an order exists.

Payment is manual: the customer copies the mobile-money or bank details,
pays outside the store and then reports completion.
"""

from abc import ABC, abstractmethod

from shared.config import PaymentInstructions
from shared.observable import Observable


class PaymentPresenter(ABC):
    @abstractmethod
    def show(self, order_id: str, instructions: PaymentInstructions) -> None: ...

    @abstractmethod
    def hide(self) -> None: ...


class PaymentPanel(PaymentPresenter, Observable):
    """In-process payment surface whose state the HTTP layer exposes."""

    def __init__(self) -> None:
        Observable.__init__(self)
        self.is_open = False
        self.order_id: str | None = None
        self.instructions: PaymentInstructions | None = None

    def show(self, order_id: str, instructions: PaymentInstructions) -> None:
        with self._lock:
            self.is_open = True
            self.order_id = order_id
            self.instructions = instructions
        self._notify(self)

    def hide(self) -> None:
        with self._lock:
            self.is_open = False
        self._notify(self)
