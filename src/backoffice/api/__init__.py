"""Back-office API package."""

from backoffice.api.routes import brands_router, notifications_router, settings_router

__all__ = ["notifications_router", "settings_router", "brands_router"]
