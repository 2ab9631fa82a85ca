"""Pydantic request/response schemas for the Ordering API.

These are external contracts (anti-corruption layer), separate from the
internal Protean commands. Fields whose violations must surface as business
errors (quantity, address, coupon code) are left unconstrained here and
validated by the domain.
"""

from datetime import datetime

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Shared sub-models
# ---------------------------------------------------------------------------
class AddressSchema(BaseModel):
    recipient_name: str | None = None
    phone: str | None = None
    street: str | None = None
    city: str | None = None
    province: str | None = None
    postal_code: str | None = None


class PaginationSchema(BaseModel):
    page: int
    limit: int
    total: int
    total_pages: int


class StatusResponse(BaseModel):
    status: str = "ok"


# ---------------------------------------------------------------------------
# Cart
# ---------------------------------------------------------------------------
class AddToCartRequest(BaseModel):
    product_id: str
    variant_id: str | None = None
    quantity: int = 1


class UpdateCartItemRequest(BaseModel):
    quantity: int


class CartItemIdResponse(BaseModel):
    item_id: str


class CartLineSchema(BaseModel):
    id: str
    product_id: str
    product_name: str
    product_slug: str
    product_image: str | None = None
    is_active: bool
    variant_id: str | None = None
    variant_name: str | None = None
    unit_price: float
    stock: int
    quantity: int
    line_total: float
    added_at: datetime | None = None

    @classmethod
    def from_line(cls, line) -> "CartLineSchema":
        product, variant = line.product, line.variant
        return cls(
            id=line.item_id,
            product_id=str(product.id),
            product_name=product.name,
            product_slug=product.slug,
            product_image=product.primary_image_url,
            is_active=bool(product.is_active),
            variant_id=line.variant_id,
            variant_name=variant.name if variant is not None else None,
            unit_price=line.unit_price,
            stock=line.available_stock,
            quantity=line.quantity,
            line_total=line.line_total,
            added_at=line.added_at,
        )


class CartSummarySchema(BaseModel):
    subtotal: float
    shipping: float
    total: float
    item_count: int


class CartResponse(BaseModel):
    items: list[CartLineSchema]
    summary: CartSummarySchema


# ---------------------------------------------------------------------------
# Coupons
# ---------------------------------------------------------------------------
class ValidateCouponRequest(BaseModel):
    code: str | None = None
    subtotal: float = 0

    model_config = {"json_schema_extra": {"examples": [{"code": "HEMAT10", "subtotal": 120000}]}}


class CouponSummarySchema(BaseModel):
    id: str
    code: str
    description: str | None = None
    discount_type: str
    discount_value: float
    max_discount: float | None = None
    min_purchase: float | None = None


class ValidateCouponResponse(BaseModel):
    valid: bool
    discount: float
    coupon: CouponSummarySchema


class CreateCouponRequest(BaseModel):
    code: str
    description: str | None = None
    discount_type: str
    discount_value: float = Field(ge=0)
    max_discount: float | None = Field(default=None, ge=0)
    min_purchase: float | None = Field(default=None, ge=0)
    usage_limit: int | None = Field(default=None, ge=0)
    expires_at: datetime | None = None


class CouponIdResponse(BaseModel):
    coupon_id: str


class CouponSchema(CouponSummarySchema):
    usage_limit: int | None = None
    used_count: int
    expires_at: datetime | None = None
    is_active: bool


class CouponListResponse(BaseModel):
    coupons: list[CouponSchema]


# ---------------------------------------------------------------------------
# Orders
# ---------------------------------------------------------------------------
class PlaceOrderRequest(BaseModel):
    shipping_address: AddressSchema | None = None
    payment_method: str | None = None
    notes: str | None = None
    coupon_code: str | None = None

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "shipping_address": {
                        "recipient_name": "Budi Santoso",
                        "phone": "081234567890",
                        "street": "Jl. Merdeka No. 10",
                        "city": "Bandung",
                        "province": "Jawa Barat",
                        "postal_code": "40111",
                    },
                    "payment_method": "transfer",
                    "coupon_code": "HEMAT10",
                }
            ]
        }
    }


class UpdateOrderStatusRequest(BaseModel):
    status: str | None = None
    payment_status: str | None = None
    tracking_number: str | None = None


class OrderItemSchema(BaseModel):
    id: str
    product_id: str
    variant_id: str | None = None
    product_name: str
    product_image: str | None = None
    variant_name: str | None = None
    price: float
    quantity: int
    subtotal: float


class OrderSchema(BaseModel):
    id: str
    order_number: str
    user_id: str
    status: str
    payment_status: str
    payment_method: str | None = None
    subtotal: float
    discount: float
    shipping_cost: float
    tax: float
    total: float
    coupon_code: str | None = None
    shipping_address: AddressSchema | None = None
    notes: str | None = None
    tracking_number: str | None = None
    items: list[OrderItemSchema]
    created_at: datetime | None = None
    shipped_at: datetime | None = None
    delivered_at: datetime | None = None
    cancelled_at: datetime | None = None

    @classmethod
    def from_order(cls, order) -> "OrderSchema":
        return cls(
            id=str(order.id),
            order_number=order.order_number,
            user_id=str(order.user_id),
            status=order.status,
            payment_status=order.payment_status,
            payment_method=order.payment_method,
            subtotal=order.subtotal,
            discount=order.discount or 0,
            shipping_cost=order.shipping_cost or 0,
            tax=order.tax or 0,
            total=order.total,
            coupon_code=order.coupon_code,
            shipping_address=order.shipping_address.to_dict() if order.shipping_address else None,
            notes=order.notes,
            tracking_number=order.tracking_number,
            items=[
                OrderItemSchema(
                    id=str(i.id),
                    product_id=str(i.product_id),
                    variant_id=str(i.variant_id) if i.variant_id else None,
                    product_name=i.product_name,
                    product_image=i.product_image,
                    variant_name=i.variant_name,
                    price=i.price,
                    quantity=i.quantity,
                    subtotal=i.subtotal,
                )
                for i in order.items
            ],
            created_at=order.created_at,
            shipped_at=order.shipped_at,
            delivered_at=order.delivered_at,
            cancelled_at=order.cancelled_at,
        )


class OrderListResponse(BaseModel):
    orders: list[OrderSchema]
    pagination: PaginationSchema


class OrderStatsResponse(BaseModel):
    total_orders: int
    pending_orders: int
    total_revenue: float
    total_products: int
    total_users: int
