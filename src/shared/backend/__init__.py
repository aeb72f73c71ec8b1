"""Store backend factory.

Provides get_backend() / set_backend() to swap implementations:
- FakeBackend for development and testing
- RestBackend when STORE_BACKEND_URL is configured
"""

from shared.backend.fake_adapter import FakeBackend
from shared.backend.port import StoreBackend
from shared.config import StoreSettings

_current_backend: StoreBackend | None = None


def build_backend(settings: StoreSettings) -> StoreBackend:
    """Return the REST adapter when a backend URL is configured, else the fake."""
    if settings.backend_url:
        from shared.backend.rest_adapter import RestBackend

        return RestBackend(
            base_url=settings.backend_url,
            api_key=settings.backend_key or "",
            timeout=settings.request_timeout,
            poll_interval=settings.notification_poll_interval,
        )
    return FakeBackend()


def get_backend() -> StoreBackend:
    """Return the current backend, building it from the environment on first use."""
    global _current_backend
    if _current_backend is None:
        _current_backend = build_backend(StoreSettings.from_env())
    return _current_backend


def set_backend(backend: StoreBackend) -> None:
    """Override the active backend (useful for tests)."""
    global _current_backend
    _current_backend = backend


def reset_backend() -> None:
    """Reset to the environment-derived backend."""
    global _current_backend
    _current_backend = None
