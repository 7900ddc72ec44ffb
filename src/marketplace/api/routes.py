"""FastAPI routes for the marketplace: cart, wishlist, coupons and orders."""

from fastapi import APIRouter, Depends, Query
from protean.utils.globals import current_domain

from marketplace.access import Actor, Capabilities
from marketplace.api.dependencies import current_actor
from marketplace.api.schemas import (
    AddToCartRequest,
    AddToWishlistRequest,
    CartResponse,
    ConfirmDeliveryRequest,
    ConfirmDeliveryResponse,
    CouponIdResponse,
    CouponPreviewSchema,
    CouponResponse,
    CreateCouponRequest,
    OrderListResponse,
    OrderResponse,
    PlaceOrderRequest,
    StatusResponse,
    UpdateCartQuantityRequest,
    UpdateCouponRequest,
    UpdateOrderStatusRequest,
    ValidateCouponRequest,
    ValidateCouponResponse,
    WishlistResponse,
)
from marketplace.cart.items import AddToCart, ClearCart, RemoveFromCart, UpdateCartQuantity, find_cart
from marketplace.checkout.placement import place_order
from marketplace.coupon.management import CreateCoupon, DeleteCoupon, UpdateCoupon, fetch_coupon, list_coupons
from marketplace.coupon.validation import preview_discount
from marketplace.order.delivery import confirm_delivery
from marketplace.order.queries import fetch_order, orders_for_customer, orders_for_store
from marketplace.order.status import change_order_status
from marketplace.wishlist.items import AddToWishlist, RemoveFromWishlist, find_wishlist


def _order_response(order, capabilities: Capabilities) -> OrderResponse:
    return OrderResponse.from_order(order, show_delivery_code=capabilities.can_see_delivery_code(order))


def _customer_only(actor: Actor) -> None:
    Capabilities(actor).require(actor.is_customer, "Only customers have a cart or wishlist")


# ---------------------------------------------------------------------------
# Cart Router
# ---------------------------------------------------------------------------
cart_router = APIRouter(prefix="/cart", tags=["cart"])


@cart_router.get("", response_model=CartResponse)
async def get_cart(actor: Actor = Depends(current_actor)) -> CartResponse:
    _customer_only(actor)
    return CartResponse.from_cart(find_cart(actor.id))


@cart_router.post("", response_model=CartResponse)
async def add_to_cart(body: AddToCartRequest, actor: Actor = Depends(current_actor)) -> CartResponse:
    _customer_only(actor)
    command = AddToCart(
        customer_id=actor.id,
        product_id=body.product_id,
        quantity=body.quantity,
        unit=body.unit,
    )
    current_domain.process(command, asynchronous=False)
    return CartResponse.from_cart(find_cart(actor.id))


@cart_router.put("/{product_id}", response_model=CartResponse)
async def update_cart_quantity(
    product_id: str, body: UpdateCartQuantityRequest, actor: Actor = Depends(current_actor)
) -> CartResponse:
    _customer_only(actor)
    command = UpdateCartQuantity(customer_id=actor.id, product_id=product_id, quantity=body.quantity)
    current_domain.process(command, asynchronous=False)
    return CartResponse.from_cart(find_cart(actor.id))


@cart_router.delete("/{product_id}", response_model=CartResponse)
async def remove_from_cart(product_id: str, actor: Actor = Depends(current_actor)) -> CartResponse:
    _customer_only(actor)
    current_domain.process(RemoveFromCart(customer_id=actor.id, product_id=product_id), asynchronous=False)
    return CartResponse.from_cart(find_cart(actor.id))


@cart_router.delete("", response_model=StatusResponse)
async def clear_cart(actor: Actor = Depends(current_actor)) -> StatusResponse:
    _customer_only(actor)
    current_domain.process(ClearCart(customer_id=actor.id), asynchronous=False)
    return StatusResponse(status="cleared")


# ---------------------------------------------------------------------------
# Wishlist Router
# ---------------------------------------------------------------------------
wishlist_router = APIRouter(prefix="/wishlist", tags=["wishlist"])


@wishlist_router.get("", response_model=WishlistResponse)
async def get_wishlist(actor: Actor = Depends(current_actor)) -> WishlistResponse:
    _customer_only(actor)
    return WishlistResponse.from_wishlist(find_wishlist(actor.id))


@wishlist_router.post("", status_code=201, response_model=WishlistResponse)
async def add_to_wishlist(body: AddToWishlistRequest, actor: Actor = Depends(current_actor)) -> WishlistResponse:
    _customer_only(actor)
    current_domain.process(AddToWishlist(customer_id=actor.id, product_id=body.product_id), asynchronous=False)
    return WishlistResponse.from_wishlist(find_wishlist(actor.id))


@wishlist_router.delete("/{product_id}", response_model=WishlistResponse)
async def remove_from_wishlist(product_id: str, actor: Actor = Depends(current_actor)) -> WishlistResponse:
    _customer_only(actor)
    current_domain.process(RemoveFromWishlist(customer_id=actor.id, product_id=product_id), asynchronous=False)
    return WishlistResponse.from_wishlist(find_wishlist(actor.id))


# ---------------------------------------------------------------------------
# Coupon Router
# ---------------------------------------------------------------------------
coupon_router = APIRouter(prefix="/coupons", tags=["coupons"])


def _require_admin(actor: Actor) -> None:
    capabilities = Capabilities(actor)
    capabilities.require(capabilities.can_manage_coupons, "Only admins can manage coupons")


@coupon_router.post("/validate", response_model=ValidateCouponResponse)
async def validate_coupon(body: ValidateCouponRequest, actor: Actor = Depends(current_actor)) -> ValidateCouponResponse:
    preview = preview_discount(body.code, actor.id, body.total_price)
    return ValidateCouponResponse(
        coupon=CouponPreviewSchema(
            code=preview.code,
            discount_type=preview.discount_type,
            discount_value=preview.discount_value,
            discount_amount=preview.discount_amount,
            is_new_user_only=preview.is_new_user_only,
        )
    )


@coupon_router.get("", response_model=list[CouponResponse])
async def get_coupons(
    is_active: bool | None = Query(default=None, alias="isActive"),
    is_new_user_only: bool | None = Query(default=None, alias="isNewUserOnly"),
    search: str | None = Query(default=None),
    actor: Actor = Depends(current_actor),
) -> list[CouponResponse]:
    if Capabilities(actor).can_manage_coupons:
        coupons = list_coupons(is_active=is_active, is_new_user_only=is_new_user_only, search=search)
    else:
        coupons = list_coupons(active_only=True, search=search)
    return [CouponResponse.from_coupon(coupon) for coupon in coupons]


@coupon_router.get("/{coupon_id}", response_model=CouponResponse)
async def get_coupon(coupon_id: str, actor: Actor = Depends(current_actor)) -> CouponResponse:
    _require_admin(actor)
    return CouponResponse.from_coupon(fetch_coupon(coupon_id))


@coupon_router.post("", status_code=201, response_model=CouponIdResponse)
async def create_coupon(body: CreateCouponRequest, actor: Actor = Depends(current_actor)) -> CouponIdResponse:
    _require_admin(actor)
    command = CreateCoupon(**body.model_dump())
    result = current_domain.process(command, asynchronous=False)
    return CouponIdResponse(coupon_id=result)


@coupon_router.put("/{coupon_id}", response_model=CouponResponse)
async def update_coupon(
    coupon_id: str, body: UpdateCouponRequest, actor: Actor = Depends(current_actor)
) -> CouponResponse:
    _require_admin(actor)
    command = UpdateCoupon(coupon_id=coupon_id, **body.model_dump(exclude_none=True))
    current_domain.process(command, asynchronous=False)
    return CouponResponse.from_coupon(fetch_coupon(coupon_id))


@coupon_router.delete("/{coupon_id}", response_model=StatusResponse)
async def delete_coupon(coupon_id: str, actor: Actor = Depends(current_actor)) -> StatusResponse:
    _require_admin(actor)
    current_domain.process(DeleteCoupon(coupon_id=coupon_id), asynchronous=False)
    return StatusResponse(status="deleted")


# ---------------------------------------------------------------------------
# Order Router
# ---------------------------------------------------------------------------
order_router = APIRouter(prefix="/orders", tags=["orders"])


@order_router.post("", status_code=201, response_model=OrderResponse)
async def create_order(body: PlaceOrderRequest, actor: Actor = Depends(current_actor)) -> OrderResponse:
    order = place_order(
        actor,
        items=[{"product_id": line.product, "quantity": line.quantity, "unit": line.unit} for line in body.items],
        shipping_address=body.shipping_address.model_dump(),
        payment_method=body.payment_method,
        coupon_code=body.coupon_code,
    )
    return _order_response(order, Capabilities(actor))


@order_router.get("/mine", response_model=OrderListResponse)
async def get_my_orders(
    page: int = Query(default=1, ge=1),
    limit: int | None = Query(default=None, ge=1),
    status: str | None = Query(default=None),
    search: str | None = Query(default=None),
    actor: Actor = Depends(current_actor),
) -> OrderListResponse:
    capabilities = Capabilities(actor)
    result = orders_for_customer(actor.id, page=page, limit=limit, status=status, search=search)
    return OrderListResponse(
        orders=[_order_response(order, capabilities) for order in result.orders],
        page=result.page,
        pages=result.pages,
    )


@order_router.get("/store/{store_id}", response_model=OrderListResponse)
async def get_store_orders(
    store_id: str,
    page: int = Query(default=1, ge=1),
    limit: int | None = Query(default=None, ge=1),
    status: str | None = Query(default=None),
    search: str | None = Query(default=None),
    actor: Actor = Depends(current_actor),
) -> OrderListResponse:
    capabilities = Capabilities(actor)
    capabilities.require(capabilities.can_view_store_orders(store_id), "Not authorized to view this store's orders")
    result = orders_for_store(store_id, page=page, limit=limit, status=status, search=search)
    return OrderListResponse(
        orders=[_order_response(order, capabilities) for order in result.orders],
        page=result.page,
        pages=result.pages,
    )


@order_router.get("/{order_id}", response_model=OrderResponse)
async def get_order(order_id: str, actor: Actor = Depends(current_actor)) -> OrderResponse:
    capabilities = Capabilities(actor)
    order = fetch_order(order_id)
    capabilities.require(capabilities.can_view(order), "Not authorized to view this order")
    return _order_response(order, capabilities)


@order_router.put("/{order_id}/status", response_model=OrderResponse)
async def update_order_status(
    order_id: str, body: UpdateOrderStatusRequest, actor: Actor = Depends(current_actor)
) -> OrderResponse:
    order = change_order_status(actor, order_id, body.status)
    return _order_response(order, Capabilities(actor))


@order_router.post("/{order_id}/confirm-delivery", response_model=ConfirmDeliveryResponse)
async def confirm_order_delivery(
    order_id: str, body: ConfirmDeliveryRequest, actor: Actor = Depends(current_actor)
) -> ConfirmDeliveryResponse:
    order = confirm_delivery(actor, order_id, body.otp)
    return ConfirmDeliveryResponse(
        message="Order delivered successfully",
        order=_order_response(order, Capabilities(actor)),
    )
