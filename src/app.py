"""Outlet Storefront FastAPI application.

Single-process web server exposing the storefront (shop, cart, checkout,
status, product modal) and the admin back-office. Every request runs inside
the storefront domain context.

Usage:
    uvicorn app:app --app-dir src --host 0.0.0.0 --port 8000 --reload
"""

from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from protean.exceptions import ValidationError

from backoffice.api import brands_router, notifications_router, settings_router
from backoffice.composition import Backoffice, build_backoffice
from storefront.api import cart_router, checkout_router, modal_router, shop_router, status_router
from storefront.api.errors import validation_error_handler
from storefront.composition import Storefront, build_storefront
from storefront.domain import storefront
from storefront.utils.logging import bind_request_context, clear_request_context, configure_logging

logger = structlog.get_logger(__name__)


def create_app(
    store: Storefront | None = None,
    office: Backoffice | None = None,
    configure: bool = True,
) -> FastAPI:
    """Build the application. Pass prebuilt containers to run against fakes."""
    if configure:
        configure_logging()

    # PROTEAN_ENV selects the config overlay applied here.
    storefront.init()
    if store is None:
        with storefront.domain_context():
            store = build_storefront()
    if office is None:
        office = build_backoffice(store.backend, store.status)

    @asynccontextmanager
    async def lifespan(_app: FastAPI):
        yield
        office.inbox.close()

    app = FastAPI(
        lifespan=lifespan,
        title="Outlet Storefront API",
        description="Storefront cart, checkout and catalogue, plus the admin back-office",
    )
    app.state.storefront = store
    app.state.backoffice = office

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def domain_context_middleware(request: Request, call_next):
        """Push the storefront domain context for each request."""
        bind_request_context(request.method, request.url.path)
        try:
            with storefront.domain_context():
                response = await call_next(request)
        finally:
            clear_request_context()
        return response

    app.add_exception_handler(ValidationError, validation_error_handler)

    for router in (shop_router, cart_router, checkout_router, status_router, modal_router):
        app.include_router(router)
    for router in (notifications_router, settings_router, brands_router):
        app.include_router(router)

    @app.get("/health")
    async def health():
        return JSONResponse(
            content={
                "status": "ok",
                "domain": storefront.name,
                "backend": type(store.backend).__name__,
                "cart_items": store.cart.total_items(),
            }
        )

    logger.info("Application created", backend=type(store.backend).__name__)
    return app


app = create_app()
