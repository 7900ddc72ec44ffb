"""Pydantic request/response schemas for the marketplace API.

These are external contracts (anti-corruption layer), separate from
internal Protean commands. Payloads are camelCase on the wire; snake_case
field names are accepted on input as well.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class StatusResponse(CamelModel):
    status: str = "ok"


# ---------------------------------------------------------------------------
# Shared sub-models
# ---------------------------------------------------------------------------
class AddressSchema(CamelModel):
    house_no: str
    landmark: str | None = None
    city: str
    state: str
    pin_code: str = Field(pattern=r"^\d{6}$")


class OrderLineSchema(CamelModel):
    """A cart line as the storefront submits it at checkout.

    Only ``product``, ``quantity`` and ``unit`` are used; name, image and
    price are re-read from the catalogue.
    """

    product: str
    name: str | None = None
    image: str | None = None
    price: float | None = None
    quantity: int = Field(ge=1)
    unit: str | None = None


# ---------------------------------------------------------------------------
# Order Schemas
# ---------------------------------------------------------------------------
class PlaceOrderRequest(CamelModel):
    items: list[OrderLineSchema]
    shipping_address: AddressSchema
    payment_method: str
    total_price: float | None = None  # recomputed server side
    coupon_code: str | None = None

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        json_schema_extra={
            "examples": [
                {
                    "items": [{"product": "prod-001", "quantity": 2, "unit": "kg"}],
                    "shippingAddress": {
                        "houseNo": "12B",
                        "city": "Pune",
                        "state": "MH",
                        "pinCode": "411001",
                    },
                    "paymentMethod": "UPI",
                    "totalPrice": 200.0,
                    "couponCode": "NEWUSER10",
                }
            ]
        },
    )


class UpdateOrderStatusRequest(CamelModel):
    status: str


class ConfirmDeliveryRequest(CamelModel):
    otp: str = Field(pattern=r"^\d{6}$")


class OrderItemResponse(CamelModel):
    product: str
    name: str
    image: str | None = None
    price: float
    unit: str | None = None
    quantity: int


class AppliedCouponResponse(CamelModel):
    code: str
    discount_type: str
    discount_value: float
    discount_amount: float


class OrderResponse(CamelModel):
    id: str
    customer_id: str
    customer_name: str | None = None
    store_id: str
    store_name: str | None = None
    items: list[OrderItemResponse]
    shipping_address: AddressSchema
    payment_method: str
    transaction_id: str | None = None
    coupon: AppliedCouponResponse | None = None
    subtotal: float
    total_price: float
    order_status: str
    delivery_code: str | None = None
    delivered_at: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_order(cls, order, show_delivery_code: bool = False) -> "OrderResponse":
        address = order.shipping_address
        coupon = order.coupon
        return cls(
            id=str(order.id),
            customer_id=str(order.customer_id),
            customer_name=order.customer_name,
            store_id=str(order.store_id),
            store_name=order.store_name,
            items=[
                OrderItemResponse(
                    product=str(item.product_id),
                    name=item.name,
                    image=item.image,
                    price=item.price,
                    unit=item.unit,
                    quantity=item.quantity,
                )
                for item in order.items
            ],
            shipping_address=AddressSchema(
                house_no=address.house_no,
                landmark=address.landmark,
                city=address.city,
                state=address.state,
                pin_code=address.pin_code,
            ),
            payment_method=order.payment_method,
            transaction_id=order.transaction_id,
            coupon=AppliedCouponResponse(
                code=coupon.code,
                discount_type=coupon.discount_type,
                discount_value=coupon.discount_value,
                discount_amount=coupon.discount_amount,
            )
            if coupon
            else None,
            subtotal=order.subtotal,
            total_price=order.total_price,
            order_status=order.status,
            delivery_code=order.delivery_code if show_delivery_code else None,
            delivered_at=order.delivered_at,
            created_at=order.created_at,
            updated_at=order.updated_at,
        )


class OrderListResponse(CamelModel):
    orders: list[OrderResponse]
    page: int
    pages: int


class ConfirmDeliveryResponse(CamelModel):
    message: str
    order: OrderResponse


# ---------------------------------------------------------------------------
# Coupon Schemas
# ---------------------------------------------------------------------------
class ValidateCouponRequest(CamelModel):
    code: str
    total_price: float = Field(ge=0)


class CouponPreviewSchema(CamelModel):
    code: str
    discount_type: str
    discount_value: float
    discount_amount: float
    is_new_user_only: bool


class ValidateCouponResponse(CamelModel):
    message: str = "Coupon applied successfully"
    coupon: CouponPreviewSchema


class CreateCouponRequest(CamelModel):
    code: str = Field(min_length=1, max_length=50)
    discount_type: str
    discount_value: float = Field(ge=0)
    min_order_amount: float = Field(ge=0, default=0.0)
    max_discount_amount: float | None = Field(ge=0, default=None)
    expiry_date: datetime
    usage_limit: int | None = Field(ge=1, default=None)
    is_active: bool = True
    is_new_user_only: bool = False


class UpdateCouponRequest(CamelModel):
    code: str | None = Field(min_length=1, max_length=50, default=None)
    discount_type: str | None = None
    discount_value: float | None = Field(ge=0, default=None)
    min_order_amount: float | None = Field(ge=0, default=None)
    max_discount_amount: float | None = Field(ge=0, default=None)
    expiry_date: datetime | None = None
    usage_limit: int | None = Field(ge=1, default=None)
    is_active: bool | None = None
    is_new_user_only: bool | None = None


class CouponIdResponse(CamelModel):
    coupon_id: str


class CouponResponse(CamelModel):
    id: str
    code: str
    discount_type: str
    discount_value: float
    min_order_amount: float
    max_discount_amount: float | None = None
    expiry_date: datetime
    usage_limit: int | None = None
    used_count: int
    is_active: bool
    is_new_user_only: bool

    @classmethod
    def from_coupon(cls, coupon) -> "CouponResponse":
        return cls(
            id=str(coupon.id),
            code=coupon.code,
            discount_type=coupon.discount_type,
            discount_value=coupon.discount_value,
            min_order_amount=coupon.min_order_amount or 0.0,
            max_discount_amount=coupon.max_discount_amount,
            expiry_date=coupon.expiry_date,
            usage_limit=coupon.usage_limit,
            used_count=coupon.used_count or 0,
            is_active=bool(coupon.is_active),
            is_new_user_only=bool(coupon.is_new_user_only),
        )


# ---------------------------------------------------------------------------
# Cart / Wishlist Schemas
# ---------------------------------------------------------------------------
class AddToCartRequest(CamelModel):
    product_id: str
    quantity: int = Field(ge=1, default=1)
    unit: str | None = None


class UpdateCartQuantityRequest(CamelModel):
    quantity: int


class CartItemResponse(CamelModel):
    product: str
    name: str
    image: str | None = None
    price: float
    unit: str | None = None
    quantity: int


class CartResponse(CamelModel):
    items: list[CartItemResponse] = []
    total: float = 0.0

    @classmethod
    def from_cart(cls, cart) -> "CartResponse":
        if cart is None:
            return cls()
        return cls(
            items=[
                CartItemResponse(
                    product=str(item.product_id),
                    name=item.name,
                    image=item.image,
                    price=item.price,
                    unit=item.unit,
                    quantity=item.quantity,
                )
                for item in cart.items
            ],
            total=cart.total,
        )


class AddToWishlistRequest(CamelModel):
    product_id: str


class WishlistItemResponse(CamelModel):
    product: str
    name: str
    image: str | None = None
    price: float | None = None
    added_at: datetime | None = None


class WishlistResponse(CamelModel):
    items: list[WishlistItemResponse] = []

    @classmethod
    def from_wishlist(cls, wishlist) -> "WishlistResponse":
        if wishlist is None:
            return cls()
        return cls(
            items=[
                WishlistItemResponse(
                    product=str(item.product_id),
                    name=item.name,
                    image=item.image,
                    price=item.price,
                    added_at=item.added_at,
                )
                for item in wishlist.items
            ]
        )
