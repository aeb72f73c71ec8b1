"""FastAPI routes for the admin back-office: notifications, store settings and brands."""

import base64
import binascii
from dataclasses import asdict

from fastapi import APIRouter, Depends, HTTPException, Request

from backoffice.api.schemas import (
    BrandResponse,
    ImageUploadSchema,
    InboxActionResponse,
    InboxResponse,
    NotificationSchema,
    SaveBrandRequest,
    SaveBrandResponse,
    SaveShippingFeeRequest,
    SaveShippingFeeResponse,
    ShippingFeeResponse,
)
from backoffice.brands import BrandForm, ImageUpload
from backoffice.composition import Backoffice


def get_backoffice(request: Request) -> Backoffice:
    return request.app.state.backoffice


def _inbox(office: Backoffice) -> InboxResponse:
    inbox = office.inbox
    return InboxResponse(
        notifications=[NotificationSchema(**asdict(n)) for n in inbox.notifications],
        unread_count=inbox.unread_count,
        listening=inbox.is_listening,
    )


def _decode_upload(upload: ImageUploadSchema | None) -> ImageUpload | None:
    if upload is None:
        return None
    try:
        content = base64.b64decode(upload.content_base64, validate=True)
    except binascii.Error as exc:
        raise HTTPException(status_code=400, detail=f"Invalid image content for {upload.filename}") from exc
    return ImageUpload(filename=upload.filename, content=content)


# ---------------------------------------------------------------------------
# Notifications Router
# ---------------------------------------------------------------------------
notifications_router = APIRouter(prefix="/admin/notifications", tags=["admin"])


@notifications_router.get("", response_model=InboxResponse)
def list_notifications(office: Backoffice = Depends(get_backoffice)) -> InboxResponse:
    return _inbox(office)


@notifications_router.post("/open", response_model=InboxResponse)
def open_inbox(office: Backoffice = Depends(get_backoffice)) -> InboxResponse:
    office.inbox.open()
    return _inbox(office)


@notifications_router.post("/close", response_model=InboxResponse)
def close_inbox(office: Backoffice = Depends(get_backoffice)) -> InboxResponse:
    office.inbox.close()
    return _inbox(office)


@notifications_router.post("/refresh", response_model=InboxResponse)
def refresh_inbox(office: Backoffice = Depends(get_backoffice)) -> InboxResponse:
    office.inbox.refresh()
    return _inbox(office)


@notifications_router.post("/read-all", response_model=InboxActionResponse)
def mark_all_read(office: Backoffice = Depends(get_backoffice)) -> InboxActionResponse:
    ok = office.inbox.mark_all_read()
    return InboxActionResponse(ok=ok, inbox=_inbox(office))


@notifications_router.post("/{notification_id}/read", response_model=InboxActionResponse)
def mark_read(notification_id: str, office: Backoffice = Depends(get_backoffice)) -> InboxActionResponse:
    ok = office.inbox.mark_read(notification_id)
    return InboxActionResponse(ok=ok, inbox=_inbox(office))


@notifications_router.delete("/{notification_id}", response_model=InboxActionResponse)
def delete_notification(notification_id: str, office: Backoffice = Depends(get_backoffice)) -> InboxActionResponse:
    ok = office.inbox.delete(notification_id)
    return InboxActionResponse(ok=ok, inbox=_inbox(office))


# ---------------------------------------------------------------------------
# Settings Router
# ---------------------------------------------------------------------------
settings_router = APIRouter(prefix="/admin/settings", tags=["admin"])


@settings_router.get("/shipping-fee", response_model=ShippingFeeResponse)
def get_shipping_fee(office: Backoffice = Depends(get_backoffice)) -> ShippingFeeResponse:
    return ShippingFeeResponse(shipping_fee=office.shipping.load())


@settings_router.put("/shipping-fee", response_model=SaveShippingFeeResponse)
def save_shipping_fee(
    body: SaveShippingFeeRequest, office: Backoffice = Depends(get_backoffice)
) -> SaveShippingFeeResponse:
    saved = office.shipping.save(body.shipping_fee)
    return SaveShippingFeeResponse(saved=saved, shipping_fee=office.shipping.fee)


# ---------------------------------------------------------------------------
# Brands Router
# ---------------------------------------------------------------------------
brands_router = APIRouter(prefix="/admin/brands", tags=["admin"])


def _save_brand(office: Backoffice, body: SaveBrandRequest, brand_id: str | None) -> SaveBrandResponse:
    form = BrandForm(
        name=body.name,
        logo_url=body.logo_url,
        default_image=body.default_image,
        promo_percentage=body.promo_percentage,
        description=body.description,
        logo_file=_decode_upload(body.logo_file),
        default_image_file=_decode_upload(body.default_image_file),
    )
    brand = office.brands.save(form, brand_id=brand_id)
    if brand is None:
        return SaveBrandResponse(saved=False)
    return SaveBrandResponse(saved=True, brand=BrandResponse(**asdict(brand)))


@brands_router.post("", status_code=201, response_model=SaveBrandResponse)
def create_brand(body: SaveBrandRequest, office: Backoffice = Depends(get_backoffice)) -> SaveBrandResponse:
    return _save_brand(office, body, brand_id=None)


@brands_router.put("/{brand_id}", response_model=SaveBrandResponse)
def update_brand(
    brand_id: str, body: SaveBrandRequest, office: Backoffice = Depends(get_backoffice)
) -> SaveBrandResponse:
    return _save_brand(office, body, brand_id=brand_id)
