"""FastAPI routes for the Ordering context: cart, coupons and orders."""

import json

from fastapi import APIRouter, Depends
from protean.utils.globals import current_domain

from storefront.identity.api.dependencies import get_current_caller, get_optional_caller, require_admin
from storefront.identity.caller import Caller
from storefront.ordering.api.schemas import (
    AddToCartRequest,
    CartItemIdResponse,
    CartLineSchema,
    CartResponse,
    CouponIdResponse,
    CouponListResponse,
    CouponSchema,
    CreateCouponRequest,
    OrderListResponse,
    OrderSchema,
    OrderStatsResponse,
    PlaceOrderRequest,
    StatusResponse,
    UpdateCartItemRequest,
    UpdateOrderStatusRequest,
    ValidateCouponRequest,
    ValidateCouponResponse,
)
from storefront.ordering.cart.items import AddToCart, ClearCart, RemoveFromCart, UpdateCartItem
from storefront.ordering.cart.summary import build_cart_view
from storefront.ordering.coupon.coupon import Coupon
from storefront.ordering.coupon.management import CreateCoupon, DeactivateCoupon
from storefront.ordering.coupon.validation import validate_coupon
from storefront.ordering.order.administration import UpdateOrderStatus
from storefront.ordering.order.cancellation import CancelOrder, get_order_for_user
from storefront.ordering.order.checkout import PlaceOrder
from storefront.ordering.order.order import Order
from storefront.shared.paging import Page

# ---------------------------------------------------------------------------
# Cart Router
# ---------------------------------------------------------------------------
cart_router = APIRouter(prefix="/cart", tags=["cart"])


def _cart_response(user_id) -> CartResponse:
    view = build_cart_view(user_id)
    return CartResponse(
        items=[CartLineSchema.from_line(line) for line in view.lines],
        summary=view.summary.__dict__,
    )


@cart_router.get("", response_model=CartResponse)
async def get_cart(caller: Caller = Depends(get_current_caller)) -> CartResponse:
    return _cart_response(caller.user_id)


@cart_router.post("", status_code=201, response_model=CartItemIdResponse)
async def add_to_cart(body: AddToCartRequest, caller: Caller = Depends(get_current_caller)) -> CartItemIdResponse:
    command = AddToCart(
        user_id=caller.user_id,
        product_id=body.product_id,
        variant_id=body.variant_id,
        quantity=body.quantity,
    )
    item_id = current_domain.process(command, asynchronous=False)
    return CartItemIdResponse(item_id=item_id)


@cart_router.put("/{item_id}", response_model=StatusResponse)
async def update_cart_item(
    item_id: str, body: UpdateCartItemRequest, caller: Caller = Depends(get_current_caller)
) -> StatusResponse:
    command = UpdateCartItem(user_id=caller.user_id, item_id=item_id, quantity=body.quantity)
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@cart_router.delete("/{item_id}", response_model=StatusResponse)
async def remove_cart_item(item_id: str, caller: Caller = Depends(get_current_caller)) -> StatusResponse:
    current_domain.process(RemoveFromCart(user_id=caller.user_id, item_id=item_id), asynchronous=False)
    return StatusResponse()


@cart_router.delete("", response_model=StatusResponse)
async def clear_cart(caller: Caller = Depends(get_current_caller)) -> StatusResponse:
    current_domain.process(ClearCart(user_id=caller.user_id), asynchronous=False)
    return StatusResponse()


# ---------------------------------------------------------------------------
# Coupon Router
# ---------------------------------------------------------------------------
coupon_router = APIRouter(prefix="/coupons", tags=["coupons"])


def _coupon_schema(coupon) -> CouponSchema:
    return CouponSchema(
        **coupon.summary(),
        usage_limit=coupon.usage_limit,
        used_count=coupon.used_count or 0,
        expires_at=coupon.expires_at,
        is_active=bool(coupon.is_active),
    )


@coupon_router.post("/validate", response_model=ValidateCouponResponse)
async def validate_coupon_code(
    body: ValidateCouponRequest, _caller: Caller | None = Depends(get_optional_caller)
) -> ValidateCouponResponse:
    quote = validate_coupon(body.code, body.subtotal)
    return ValidateCouponResponse(valid=quote.valid, discount=quote.discount, coupon=quote.coupon.summary())


@coupon_router.get("", response_model=CouponListResponse)
async def list_coupons(_admin: Caller = Depends(require_admin)) -> CouponListResponse:
    coupons = current_domain.repository_for(Coupon).listing()
    return CouponListResponse(coupons=[_coupon_schema(c) for c in coupons])


@coupon_router.post("", status_code=201, response_model=CouponIdResponse)
async def create_coupon(body: CreateCouponRequest, _admin: Caller = Depends(require_admin)) -> CouponIdResponse:
    coupon_id = current_domain.process(CreateCoupon(**body.model_dump()), asynchronous=False)
    return CouponIdResponse(coupon_id=coupon_id)


@coupon_router.delete("/{coupon_id}", response_model=StatusResponse)
async def deactivate_coupon(coupon_id: str, _admin: Caller = Depends(require_admin)) -> StatusResponse:
    current_domain.process(DeactivateCoupon(coupon_id=coupon_id), asynchronous=False)
    return StatusResponse()


# ---------------------------------------------------------------------------
# Order Router
# ---------------------------------------------------------------------------
order_router = APIRouter(prefix="/orders", tags=["orders"])


@order_router.get("", response_model=OrderListResponse)
async def list_my_orders(
    page: int = 1,
    limit: int = 10,
    status: str | None = None,
    caller: Caller = Depends(get_current_caller),
) -> OrderListResponse:
    orders, meta = current_domain.repository_for(Order).for_user(
        caller.user_id, Page.of(page, limit, default_limit=10), status=status
    )
    return OrderListResponse(orders=[OrderSchema.from_order(o) for o in orders], pagination=meta)


@order_router.get("/admin/all", response_model=OrderListResponse)
async def list_all_orders(
    page: int = 1,
    limit: int = 20,
    status: str | None = None,
    search: str | None = None,
    _admin: Caller = Depends(require_admin),
) -> OrderListResponse:
    orders, meta = current_domain.repository_for(Order).admin_listing(
        Page.of(page, limit, default_limit=20), status=status, search=search
    )
    return OrderListResponse(orders=[OrderSchema.from_order(o) for o in orders], pagination=meta)


@order_router.get("/admin/stats", response_model=OrderStatsResponse)
async def order_stats(_admin: Caller = Depends(require_admin)) -> OrderStatsResponse:
    return OrderStatsResponse(**current_domain.repository_for(Order).dashboard_stats())


@order_router.put("/admin/{order_id}/status", response_model=OrderSchema)
async def update_order_status(
    order_id: str, body: UpdateOrderStatusRequest, _admin: Caller = Depends(require_admin)
) -> OrderSchema:
    command = UpdateOrderStatus(
        order_id=order_id,
        status=body.status,
        payment_status=body.payment_status,
        tracking_number=body.tracking_number,
    )
    current_domain.process(command, asynchronous=False)
    return OrderSchema.from_order(current_domain.repository_for(Order).get(order_id))


@order_router.get("/{order_id}", response_model=OrderSchema)
async def get_my_order(order_id: str, caller: Caller = Depends(get_current_caller)) -> OrderSchema:
    return OrderSchema.from_order(get_order_for_user(order_id, caller.user_id))


@order_router.post("", status_code=201, response_model=OrderSchema)
async def place_order(body: PlaceOrderRequest, caller: Caller = Depends(get_current_caller)) -> OrderSchema:
    command = PlaceOrder(
        user_id=caller.user_id,
        shipping_address=json.dumps(body.shipping_address.model_dump()) if body.shipping_address else None,
        payment_method=body.payment_method,
        notes=body.notes,
        coupon_code=body.coupon_code,
    )
    order_id = current_domain.process(command, asynchronous=False)
    return OrderSchema.from_order(current_domain.repository_for(Order).get(order_id))


@order_router.put("/{order_id}/cancel", response_model=OrderSchema)
async def cancel_order(order_id: str, caller: Caller = Depends(get_current_caller)) -> OrderSchema:
    current_domain.process(CancelOrder(user_id=caller.user_id, order_id=order_id), asynchronous=False)
    return OrderSchema.from_order(current_domain.repository_for(Order).get(order_id))
