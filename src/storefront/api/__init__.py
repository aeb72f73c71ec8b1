"""Storefront API package."""

from storefront.api.routes import cart_router, checkout_router, modal_router, shop_router, status_router

__all__ = ["shop_router", "cart_router", "checkout_router", "status_router", "modal_router"]
