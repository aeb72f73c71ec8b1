"""Brand editor for the admin console: create or update a brand, uploading images first."""

from dataclasses import dataclass

import structlog
from protean.exceptions import ValidationError

from shared.backend.port import BackendError, StoreBackend
from shared.backend.records import Brand
from shared.status import StatusChannel, StatusKind

logger = structlog.get_logger(__name__)

BRAND_LOGO_BUCKET = "brands"
PRODUCT_IMAGE_BUCKET = "products"
PLACEHOLDER_LOGO_URL = "https://images.unsplash.com/photo-1542291026-7eec264c27ff"


@dataclass(frozen=True)
class ImageUpload:
    filename: str
    content: bytes


@dataclass
class BrandForm:
    name: str = ""
    logo_url: str = ""
    default_image: str | None = None
    promo_percentage: int | None = None
    description: str | None = None
    logo_file: ImageUpload | None = None
    default_image_file: ImageUpload | None = None


class BrandEditor:
    def __init__(self, backend: StoreBackend, status: StatusChannel) -> None:
        self._backend = backend
        self._status = status

    def save(self, form: BrandForm, brand_id: str | None = None) -> Brand | None:
        """Upload any new images, then create or update the brand.

        A missing name is reported through the status channel and raised as a
        ValidationError without touching the backend.
        """
        if not (form.name or "").strip():
            self._status.show(StatusKind.ERROR, "Error", "Brand name is required.")
            raise ValidationError({"name": ["Brand name is required."]})

        try:
            logo_url = form.logo_url
            if form.logo_file is not None:
                self._status.show(StatusKind.LOADING, "Uploading...", "Uploading logo...")
                logo_url = self._backend.upload_image(form.logo_file.filename, form.logo_file.content, BRAND_LOGO_BUCKET)

            default_image = form.default_image
            if form.default_image_file is not None:
                self._status.show(StatusKind.LOADING, "Uploading...", "Uploading default product image...")
                default_image = self._backend.upload_image(
                    form.default_image_file.filename, form.default_image_file.content, PRODUCT_IMAGE_BUCKET
                )

            payload = {
                "name": form.name.strip(),
                "logoUrl": logo_url or PLACEHOLDER_LOGO_URL,
                "defaultImage": default_image,
                "promoPercentage": form.promo_percentage,
            }
            if form.description is not None:
                payload["description"] = form.description

            brand = self._backend.save_brand(payload, brand_id=brand_id)
        except BackendError as exc:
            logger.error("Failed to save brand", brand_id=brand_id, error=str(exc))
            self._status.show(StatusKind.ERROR, "Error", str(exc) or "Failed to save brand")
            return None

        if brand_id:
            self._status.show(StatusKind.SUCCESS, "Updated", "Brand updated successfully")
        else:
            self._status.show(StatusKind.SUCCESS, "Added", "Brand added successfully")
        logger.info("Brand saved", brand_id=brand.id, name=brand.name, created=brand_id is None)
        return brand
