"""Store settings, read from the environment.

Every value has a development default so the storefront runs against the
in-memory fake backend without any configuration.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path

DEFAULT_SHIPPING_FEE = 150.0
DEFAULT_PAGE_SIZE = 16
CART_STORAGE_KEY = "cart-storage"


@dataclass(frozen=True)
class PaymentInstructions:
    """Manual payment details shown to the customer after an order is placed."""

    momo_number: str = "0555554474"
    momo_name: str = "Felix Adotul"
    bank_account: str = "0555554474"
    bank_account_name: str = "Felix Adotul"


@dataclass(frozen=True)
class StoreSettings:
    backend_url: str | None = None
    backend_key: str | None = None
    request_timeout: float = 10.0
    cart_file: Path = Path("data") / "cart.json"
    cart_storage_key: str = CART_STORAGE_KEY
    shipping_fee_fallback: float = DEFAULT_SHIPPING_FEE
    handoff_delay: float = 1.0
    page_size: int = DEFAULT_PAGE_SIZE
    notification_poll_interval: float = 5.0
    payment: PaymentInstructions = field(default_factory=PaymentInstructions)

    @classmethod
    def from_env(cls) -> "StoreSettings":
        defaults = PaymentInstructions()
        return cls(
            backend_url=os.getenv("STORE_BACKEND_URL") or None,
            backend_key=os.getenv("STORE_BACKEND_KEY") or None,
            request_timeout=float(os.getenv("STORE_REQUEST_TIMEOUT", "10")),
            cart_file=Path(os.getenv("STORE_CART_FILE", str(Path("data") / "cart.json"))),
            cart_storage_key=os.getenv("STORE_CART_KEY", CART_STORAGE_KEY),
            shipping_fee_fallback=float(os.getenv("STORE_SHIPPING_FEE_FALLBACK", str(DEFAULT_SHIPPING_FEE))),
            handoff_delay=float(os.getenv("STORE_HANDOFF_DELAY", "1.0")),
            page_size=int(os.getenv("STORE_PAGE_SIZE", str(DEFAULT_PAGE_SIZE))),
            notification_poll_interval=float(os.getenv("STORE_NOTIFICATION_POLL_INTERVAL", "5")),
            payment=PaymentInstructions(
                momo_number=os.getenv("STORE_MOMO_NUMBER", defaults.momo_number),
                momo_name=os.getenv("STORE_MOMO_NAME", defaults.momo_name),
                bank_account=os.getenv("STORE_BANK_ACCOUNT", defaults.bank_account),
                bank_account_name=os.getenv("STORE_BANK_ACCOUNT_NAME", defaults.bank_account_name),
            ),
        )
