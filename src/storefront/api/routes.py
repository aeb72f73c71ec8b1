"""FastAPI routes for the Storefront: shop, cart, checkout, status and product modal."""

from dataclasses import asdict

from fastapi import APIRouter, Depends, HTTPException, Request

from storefront.api.schemas import (
    AddCartItemRequest,
    CartLineRef,
    CartLineSchema,
    CartMutationResponse,
    CartResponse,
    CheckoutDetailsRequest,
    CheckoutResponse,
    DismissResponse,
    FacetOptionsResponse,
    ModalResponse,
    OpenModalRequest,
    PageRequest,
    PaymentInstructionsSchema,
    PaymentSurfaceResponse,
    PriceRangeRequest,
    ProductSchema,
    ProductTypeRequest,
    SearchRequest,
    SeedShopRequest,
    SelectImageRequest,
    SelectOptionRequest,
    ShopLoadResponse,
    ShopPageResponse,
    SortRequest,
    StatusResponse,
    SubmitCheckoutResponse,
    ToggleFacetRequest,
    UpdateCartQuantityRequest,
)
from storefront.composition import Storefront
from storefront.utils.pricing import format_price


def get_storefront(request: Request) -> Storefront:
    return request.app.state.storefront


# ---------------------------------------------------------------------------
# Response builders
# ---------------------------------------------------------------------------
def _shop_page(store: Storefront) -> ShopPageResponse:
    browser = store.browser
    return ShopPageResponse.build(browser.current_page(), browser.sort.value, browser.filters)


def _cart(store: Storefront) -> CartResponse:
    total = store.cart.total_price()
    return CartResponse(
        items=[CartLineSchema(**line) for line in store.cart.items()],
        total_items=store.cart.total_items(),
        total_price=total,
        formatted_total=format_price(total),
    )


def _checkout(store: Storefront) -> CheckoutResponse:
    session = store.checkout.session
    return CheckoutResponse(
        stage=session.stage,
        **session.details(),
        shipping_fee=store.checkout.shipping_fee,
        cart_total=store.cart.total_price(),
        order_total=store.checkout.order_total,
        order_id=session.order_id,
        awaiting_payment=bool(session.awaiting_payment),
    )


def _status(store: Storefront) -> StatusResponse:
    snapshot = store.status.snapshot()
    return StatusResponse(
        is_open=snapshot.is_open,
        kind=snapshot.kind.value,
        title=snapshot.title,
        message=snapshot.message,
        dismissible=snapshot.dismissible,
    )


def _modal(store: Storefront) -> ModalResponse:
    modal = store.modal
    if modal.product is None:
        return ModalResponse(is_open=False)
    return ModalResponse(
        is_open=modal.is_open,
        product=ProductSchema.from_product(modal.product),
        image_index=modal.image_index,
        size=modal.size,
        color=modal.color,
        quantity=modal.quantity,
        effective_price=modal.effective_price,
    )


# ---------------------------------------------------------------------------
# Shop Router
# ---------------------------------------------------------------------------
shop_router = APIRouter(prefix="/shop", tags=["shop"])


@shop_router.post("/load", response_model=ShopLoadResponse)
def load_catalogue(store: Storefront = Depends(get_storefront)) -> ShopLoadResponse:
    loaded = store.browser.load()
    return ShopLoadResponse(
        loaded=loaded,
        products=len(store.browser.products),
        categories=len(store.browser.categories),
    )


@shop_router.get("", response_model=ShopPageResponse)
def get_shop_page(store: Storefront = Depends(get_storefront)) -> ShopPageResponse:
    return _shop_page(store)


@shop_router.get("/options", response_model=FacetOptionsResponse)
def get_facet_options(store: Storefront = Depends(get_storefront)) -> FacetOptionsResponse:
    return FacetOptionsResponse(**store.browser.options())


@shop_router.post("/seed", response_model=ShopPageResponse)
def seed_shop(body: SeedShopRequest, store: Storefront = Depends(get_storefront)) -> ShopPageResponse:
    store.browser.seed_from_query(body.model_dump(exclude_none=True))
    return _shop_page(store)


@shop_router.post("/filters/toggle", response_model=ShopPageResponse)
def toggle_facet(body: ToggleFacetRequest, store: Storefront = Depends(get_storefront)) -> ShopPageResponse:
    store.browser.toggle(body.facet, body.value)
    return _shop_page(store)


@shop_router.put("/filters/price", response_model=ShopPageResponse)
def set_price_range(body: PriceRangeRequest, store: Storefront = Depends(get_storefront)) -> ShopPageResponse:
    store.browser.set_price_range(body.min_price, body.max_price)
    return _shop_page(store)


@shop_router.put("/filters/search", response_model=ShopPageResponse)
def set_search(body: SearchRequest, store: Storefront = Depends(get_storefront)) -> ShopPageResponse:
    store.browser.set_search(body.text)
    return _shop_page(store)


@shop_router.put("/filters/type", response_model=ShopPageResponse)
def set_product_type(body: ProductTypeRequest, store: Storefront = Depends(get_storefront)) -> ShopPageResponse:
    store.browser.set_product_type(body.type)
    return _shop_page(store)


@shop_router.delete("/filters", response_model=ShopPageResponse)
def clear_filters(store: Storefront = Depends(get_storefront)) -> ShopPageResponse:
    store.browser.clear_filters()
    return _shop_page(store)


@shop_router.put("/sort", response_model=ShopPageResponse)
def set_sort(body: SortRequest, store: Storefront = Depends(get_storefront)) -> ShopPageResponse:
    store.browser.set_sort(body.mode)
    return _shop_page(store)


@shop_router.put("/page", response_model=ShopPageResponse)
def set_page(body: PageRequest, store: Storefront = Depends(get_storefront)) -> ShopPageResponse:
    store.browser.set_page(body.page)
    return _shop_page(store)


# ---------------------------------------------------------------------------
# Cart Router
# ---------------------------------------------------------------------------
cart_router = APIRouter(prefix="/cart", tags=["cart"])


@cart_router.get("", response_model=CartResponse)
def get_cart(store: Storefront = Depends(get_storefront)) -> CartResponse:
    return _cart(store)


@cart_router.post("/items", status_code=201, response_model=CartResponse)
def add_cart_item(body: AddCartItemRequest, store: Storefront = Depends(get_storefront)) -> CartResponse:
    store.cart.add_item(
        product_id=body.id,
        name=body.name,
        price=body.price,
        quantity=body.quantity,
        image=body.image,
        size=body.size,
        color=body.color,
    )
    return _cart(store)


@cart_router.put("/items/quantity", response_model=CartMutationResponse)
def update_cart_quantity(
    body: UpdateCartQuantityRequest, store: Storefront = Depends(get_storefront)
) -> CartMutationResponse:
    changed = store.cart.update_quantity(body.product_id, body.quantity, body.size, body.color)
    return CartMutationResponse(changed=changed, cart=_cart(store))


@cart_router.post("/items/increment", response_model=CartMutationResponse)
def increment_cart_line(body: CartLineRef, store: Storefront = Depends(get_storefront)) -> CartMutationResponse:
    changed = store.cart.increment(body.product_id, body.size, body.color)
    return CartMutationResponse(changed=changed, cart=_cart(store))


@cart_router.post("/items/decrement", response_model=CartMutationResponse)
def decrement_cart_line(body: CartLineRef, store: Storefront = Depends(get_storefront)) -> CartMutationResponse:
    changed = store.cart.decrement(body.product_id, body.size, body.color)
    return CartMutationResponse(changed=changed, cart=_cart(store))


@cart_router.post("/items/remove", response_model=CartMutationResponse)
def remove_cart_line(body: CartLineRef, store: Storefront = Depends(get_storefront)) -> CartMutationResponse:
    changed = store.cart.remove_item(body.product_id, body.size, body.color)
    return CartMutationResponse(changed=changed, cart=_cart(store))


@cart_router.delete("", response_model=CartResponse)
def clear_cart(store: Storefront = Depends(get_storefront)) -> CartResponse:
    store.cart.clear()
    return _cart(store)


# ---------------------------------------------------------------------------
# Checkout Router
# ---------------------------------------------------------------------------
checkout_router = APIRouter(prefix="/checkout", tags=["checkout"])


@checkout_router.get("", response_model=CheckoutResponse)
def get_checkout(store: Storefront = Depends(get_storefront)) -> CheckoutResponse:
    return _checkout(store)


@checkout_router.post("/shipping-fee", response_model=CheckoutResponse)
def load_shipping_fee(store: Storefront = Depends(get_storefront)) -> CheckoutResponse:
    store.checkout.load_shipping_fee()
    return _checkout(store)


@checkout_router.put("/details", response_model=CheckoutResponse)
def update_checkout_details(
    body: CheckoutDetailsRequest, store: Storefront = Depends(get_storefront)
) -> CheckoutResponse:
    store.checkout.update_details(**body.model_dump(exclude_unset=True))
    return _checkout(store)


@checkout_router.post("/submit", response_model=SubmitCheckoutResponse)
def submit_checkout(store: Storefront = Depends(get_storefront)) -> SubmitCheckoutResponse:
    accepted = store.checkout.submit()
    return SubmitCheckoutResponse(accepted=accepted, checkout=_checkout(store))


@checkout_router.get("/payment", response_model=PaymentSurfaceResponse)
def get_payment_surface(store: Storefront = Depends(get_storefront)) -> PaymentSurfaceResponse:
    panel = store.payment
    instructions = None
    if panel.is_open and panel.instructions is not None:
        instructions = PaymentInstructionsSchema(**asdict(panel.instructions))
    return PaymentSurfaceResponse(is_open=panel.is_open, order_id=panel.order_id, instructions=instructions)


@checkout_router.post("/payment/confirm", response_model=CheckoutResponse)
def confirm_payment(store: Storefront = Depends(get_storefront)) -> CheckoutResponse:
    store.checkout.confirm_payment()
    return _checkout(store)


@checkout_router.post("/close", response_model=CheckoutResponse)
def close_checkout(store: Storefront = Depends(get_storefront)) -> CheckoutResponse:
    store.checkout.close()
    return _checkout(store)


# ---------------------------------------------------------------------------
# Status Router
# ---------------------------------------------------------------------------
status_router = APIRouter(prefix="/status", tags=["status"])


@status_router.get("", response_model=StatusResponse)
def get_status(store: Storefront = Depends(get_storefront)) -> StatusResponse:
    return _status(store)


@status_router.post("/dismiss", response_model=DismissResponse)
def dismiss_status(store: Storefront = Depends(get_storefront)) -> DismissResponse:
    dismissed = store.status.dismiss()
    return DismissResponse(dismissed=dismissed, status=_status(store))


# ---------------------------------------------------------------------------
# Product Modal Router
# ---------------------------------------------------------------------------
modal_router = APIRouter(prefix="/modal", tags=["modal"])


def _require_open(store: Storefront) -> None:
    if store.modal.product is None:
        raise HTTPException(status_code=409, detail="No product is open")


@modal_router.get("", response_model=ModalResponse)
def get_modal(store: Storefront = Depends(get_storefront)) -> ModalResponse:
    return _modal(store)


@modal_router.post("/open", response_model=ModalResponse)
def open_modal(body: OpenModalRequest, store: Storefront = Depends(get_storefront)) -> ModalResponse:
    product = next((p for p in store.browser.products if p.id == body.product_id), None)
    if product is None:
        raise HTTPException(status_code=404, detail=f"Product {body.product_id} not found")
    store.modal.open(product)
    return _modal(store)


@modal_router.post("/close", response_model=ModalResponse)
def close_modal(store: Storefront = Depends(get_storefront)) -> ModalResponse:
    store.modal.close()
    return _modal(store)


@modal_router.put("/size", response_model=ModalResponse)
def select_size(body: SelectOptionRequest, store: Storefront = Depends(get_storefront)) -> ModalResponse:
    _require_open(store)
    try:
        store.modal.select_size(body.value)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return _modal(store)


@modal_router.put("/color", response_model=ModalResponse)
def select_color(body: SelectOptionRequest, store: Storefront = Depends(get_storefront)) -> ModalResponse:
    _require_open(store)
    try:
        store.modal.select_color(body.value)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return _modal(store)


@modal_router.put("/image", response_model=ModalResponse)
def select_image(body: SelectImageRequest, store: Storefront = Depends(get_storefront)) -> ModalResponse:
    _require_open(store)
    try:
        store.modal.select_image(body.index)
    except IndexError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return _modal(store)


@modal_router.post("/increment", response_model=ModalResponse)
def increment_quantity(store: Storefront = Depends(get_storefront)) -> ModalResponse:
    store.modal.increment()
    return _modal(store)


@modal_router.post("/decrement", response_model=ModalResponse)
def decrement_quantity(store: Storefront = Depends(get_storefront)) -> ModalResponse:
    store.modal.decrement()
    return _modal(store)


@modal_router.post("/add-to-cart", response_model=CartResponse)
def add_selection_to_cart(store: Storefront = Depends(get_storefront)) -> CartResponse:
    _require_open(store)
    store.modal.add_to_cart()
    return _cart(store)
