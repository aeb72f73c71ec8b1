"""Pydantic request/response schemas for the Storefront API.

These are external contracts (anti-corruption layer), separate from the
Protean aggregates and the backend records.
"""

from pydantic import BaseModel, Field

from shared.backend.records import Product
from storefront.catalogue.query import CatalogPage, ShopFilters


# ---------------------------------------------------------------------------
# Catalogue
# ---------------------------------------------------------------------------
class BrandSchema(BaseModel):
    id: str
    name: str
    logo_url: str = ""
    promo_percentage: float | None = None


class ProductSchema(BaseModel):
    id: str
    name: str
    description: str = ""
    price: float
    discount_price: float | None = None
    effective_price: float
    stock: int = 0
    images: list[str] = []
    colors: list[str] = []
    sizes: list[str] = []
    category_id: str | None = None
    brand: BrandSchema
    is_featured: bool = False
    is_new_arrival: bool = False
    is_promotion: bool = False

    @classmethod
    def from_product(cls, product: Product) -> "ProductSchema":
        return cls(
            id=product.id,
            name=product.name,
            description=product.description,
            price=product.price,
            discount_price=product.discount_price,
            effective_price=product.effective_price,
            stock=product.stock,
            images=list(product.images),
            colors=list(product.colors),
            sizes=list(product.sizes),
            category_id=product.category_id,
            brand=BrandSchema(
                id=product.brand.id,
                name=product.brand.name,
                logo_url=product.brand.logo_url,
                promo_percentage=product.brand.promo_percentage,
            ),
            is_featured=product.is_featured,
            is_new_arrival=product.is_new_arrival,
            is_promotion=product.is_promotion,
        )


class FiltersSchema(BaseModel):
    min_price: float
    max_price: float
    categories: list[str]
    brands: list[str]
    sizes: list[str]
    colors: list[str]
    search: str
    type: str | None = None
    is_active: bool

    @classmethod
    def from_filters(cls, filters: ShopFilters) -> "FiltersSchema":
        return cls(
            min_price=filters.price_range.minimum,
            max_price=filters.price_range.maximum,
            categories=sorted(filters.categories),
            brands=sorted(filters.brands),
            sizes=sorted(filters.sizes),
            colors=sorted(filters.colors),
            search=filters.search,
            type=filters.product_type.value if filters.product_type else None,
            is_active=filters.is_active,
        )


class ShopPageResponse(BaseModel):
    items: list[ProductSchema]
    total: int
    page: int
    page_size: int
    total_pages: int
    start_index: int
    end_index: int
    sort: str
    filters: FiltersSchema

    @classmethod
    def build(cls, page: CatalogPage, sort: str, filters: ShopFilters) -> "ShopPageResponse":
        return cls(
            items=[ProductSchema.from_product(p) for p in page.items],
            total=page.total,
            page=page.page,
            page_size=page.page_size,
            total_pages=page.total_pages,
            start_index=page.start_index,
            end_index=page.end_index,
            sort=sort,
            filters=FiltersSchema.from_filters(filters),
        )


class FacetOptionsResponse(BaseModel):
    brands: list[str]
    sizes: list[str]
    colors: list[str]


class ShopLoadResponse(BaseModel):
    loaded: bool
    products: int
    categories: int


class SeedShopRequest(BaseModel):
    category: str | None = None
    search: str | None = None
    type: str | None = None


class ToggleFacetRequest(BaseModel):
    facet: str = Field(pattern="^(categories|brands|sizes|colors)$")
    value: str


class PriceRangeRequest(BaseModel):
    min_price: float = Field(ge=0)
    max_price: float = Field(ge=0)


class SearchRequest(BaseModel):
    text: str = ""


class ProductTypeRequest(BaseModel):
    type: str | None = None


class SortRequest(BaseModel):
    mode: str = Field(pattern="^(default|price-asc|price-desc|brand|newest|oldest)$")


class PageRequest(BaseModel):
    page: int


# ---------------------------------------------------------------------------
# Cart
# ---------------------------------------------------------------------------
class CartLineSchema(BaseModel):
    id: str
    name: str
    price: float
    image: str = ""
    quantity: int
    size: str | None = None
    color: str | None = None


class CartResponse(BaseModel):
    items: list[CartLineSchema]
    total_items: int
    total_price: float
    formatted_total: str


class AddCartItemRequest(BaseModel):
    id: str
    name: str
    price: float = Field(ge=0)
    image: str | None = None
    quantity: int = Field(ge=1, default=1)
    size: str | None = None
    color: str | None = None


class CartLineRef(BaseModel):
    product_id: str
    size: str | None = None
    color: str | None = None


class UpdateCartQuantityRequest(CartLineRef):
    quantity: int


class CartMutationResponse(BaseModel):
    changed: bool
    cart: CartResponse


# ---------------------------------------------------------------------------
# Checkout
# ---------------------------------------------------------------------------
class CheckoutDetailsRequest(BaseModel):
    customer_name: str | None = None
    customer_email: str | None = None
    customer_phone: str | None = None
    shipping_address: str | None = None


class PaymentInstructionsSchema(BaseModel):
    momo_number: str
    momo_name: str
    bank_account: str
    bank_account_name: str


class PaymentSurfaceResponse(BaseModel):
    is_open: bool
    order_id: str | None = None
    instructions: PaymentInstructionsSchema | None = None


class CheckoutResponse(BaseModel):
    stage: str
    customer_name: str
    customer_email: str
    customer_phone: str
    shipping_address: str
    shipping_fee: float
    cart_total: float
    order_total: float
    order_id: str | None = None
    awaiting_payment: bool = False


class SubmitCheckoutResponse(BaseModel):
    accepted: bool
    checkout: CheckoutResponse


# ---------------------------------------------------------------------------
# Status channel
# ---------------------------------------------------------------------------
class StatusResponse(BaseModel):
    is_open: bool
    kind: str
    title: str
    message: str
    dismissible: bool


class DismissResponse(BaseModel):
    dismissed: bool
    status: StatusResponse


# ---------------------------------------------------------------------------
# Product modal
# ---------------------------------------------------------------------------
class OpenModalRequest(BaseModel):
    product_id: str


class SelectOptionRequest(BaseModel):
    value: str


class SelectImageRequest(BaseModel):
    index: int = Field(ge=0)


class ModalResponse(BaseModel):
    is_open: bool
    product: ProductSchema | None = None
    image_index: int = 0
    size: str | None = None
    color: str | None = None
    quantity: int = 1
    effective_price: float | None = None
