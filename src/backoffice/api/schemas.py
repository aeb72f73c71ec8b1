"""Pydantic request/response schemas for the back-office API."""

from pydantic import BaseModel, Field


class NotificationSchema(BaseModel):
    id: str
    type: str
    message: str
    is_read: bool
    reference_id: str | None = None
    created_at: str | None = None


class InboxResponse(BaseModel):
    notifications: list[NotificationSchema]
    unread_count: int
    listening: bool


class InboxActionResponse(BaseModel):
    ok: bool
    inbox: InboxResponse


class ShippingFeeResponse(BaseModel):
    shipping_fee: float | None = None


class SaveShippingFeeRequest(BaseModel):
    shipping_fee: float


class SaveShippingFeeResponse(BaseModel):
    saved: bool
    shipping_fee: float | None = None


class ImageUploadSchema(BaseModel):
    filename: str
    content_base64: str


class SaveBrandRequest(BaseModel):
    name: str = ""
    logo_url: str = ""
    default_image: str | None = None
    promo_percentage: int | None = Field(default=None, ge=0, le=100)
    description: str | None = None
    logo_file: ImageUploadSchema | None = None
    default_image_file: ImageUploadSchema | None = None

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "name": "Nike",
                    "promo_percentage": 20,
                    "logo_file": {"filename": "nike.png", "content_base64": "iVBORw0KGgo="},
                }
            ]
        }
    }


class BrandResponse(BaseModel):
    id: str
    name: str
    logo_url: str
    default_image: str | None = None
    promo_percentage: float | None = None
    description: str | None = None


class SaveBrandResponse(BaseModel):
    saved: bool
    brand: BrandResponse | None = None
