"""FastAPI endpoints for the shopping cart and orders."""

from datetime import datetime

from fastapi import APIRouter, Depends, Request
from protean.utils.globals import current_domain

from solestore.api.auth import authenticated, requires
from solestore.identity.access import Capability, Principal
from solestore.ordering.api.schemas import (
    AddToCartRequest,
    CartResponse,
    ChangeStatusRequest,
    MessageResponse,
    OrderListResponse,
    OrderResponse,
    PlaceOrderRequest,
    UpdateCartLineRequest,
)
from solestore.ordering.cart.cart import Cart
from solestore.ordering.cart.items import (
    AddToCart,
    ClearCart,
    RemoveFromCart,
    SetCartLineQuantity,
    find_cart,
    get_cart,
)
from solestore.ordering.order.order import Order
from solestore.ordering.order.queries import fetch_order, list_orders, order_stats, orders_for_user
from solestore.ordering.order.status import ChangeOrderStatus, DeleteOrder
from solestore.shared.pagination import resolve_page_size

cart_router = APIRouter(prefix="/cart", tags=["cart"])
order_router = APIRouter(prefix="/orders", tags=["orders"])

_shopper = requires(Capability.SHOP)


# --- Cart endpoints ---


@cart_router.get("", response_model=CartResponse)
async def view_cart(principal: Principal = Depends(_shopper)) -> CartResponse:
    return CartResponse.from_cart(get_cart(principal.user_id))


@cart_router.post("/add", status_code=201, response_model=CartResponse)
async def add_to_cart(body: AddToCartRequest, principal: Principal = Depends(_shopper)) -> CartResponse:
    command = AddToCart(
        user_id=principal.user_id,
        product_id=body.product_id,
        size=str(body.size),
        quantity=body.quantity,
    )
    current_domain.process(command, asynchronous=False)
    return CartResponse.from_cart(get_cart(principal.user_id))


@cart_router.delete("/item/{item_id}", response_model=CartResponse)
async def remove_from_cart(item_id: str, principal: Principal = Depends(_shopper)) -> CartResponse:
    current_domain.process(RemoveFromCart(user_id=principal.user_id, line_id=item_id), asynchronous=False)
    return CartResponse.from_cart(get_cart(principal.user_id))


@cart_router.put("/update", response_model=CartResponse)
async def update_cart_line(body: UpdateCartLineRequest, principal: Principal = Depends(_shopper)) -> CartResponse:
    command = SetCartLineQuantity(user_id=principal.user_id, line_id=body.item_id, quantity=body.quantity)
    current_domain.process(command, asynchronous=False)
    return CartResponse.from_cart(get_cart(principal.user_id))


@cart_router.delete("/clear", response_model=CartResponse)
async def clear_cart(principal: Principal = Depends(_shopper)) -> CartResponse:
    current_domain.process(ClearCart(user_id=principal.user_id), asynchronous=False)
    cart = find_cart(principal.user_id) or Cart.create(user_id=principal.user_id)
    return CartResponse.from_cart(cart)


# --- Order endpoints ---


@order_router.post("", status_code=201, response_model=OrderResponse)
async def place_order(
    body: PlaceOrderRequest,
    request: Request,
    principal: Principal = Depends(_shopper),
) -> OrderResponse:
    order = request.app.state.placement.place(
        principal.user_id,
        [item.model_dump() for item in body.items],
    )
    return OrderResponse.from_order(order)


@order_router.get("/my-orders", response_model=list[OrderResponse])
async def my_orders(principal: Principal = Depends(authenticated)) -> list[OrderResponse]:
    return [OrderResponse.from_order(order) for order in orders_for_user(principal.user_id)]


@order_router.get("/admin/all", response_model=OrderListResponse)
async def all_orders(
    request: Request,
    page: int = 1,
    limit: int | None = None,
    status: str | None = None,
    sort_by: str = "created_at",
    sort_order: str = "desc",
    principal: Principal = Depends(requires(Capability.VIEW_ALL_ORDERS)),
) -> OrderListResponse:
    settings = request.app.state.settings
    result = list_orders(
        status=status,
        sort_by=sort_by,
        sort_order=sort_order,
        page=page,
        page_size=resolve_page_size(limit, settings.default_page_size, settings.max_page_size),
    )
    return OrderListResponse(
        orders=[OrderResponse.from_order(order) for order in result.items],
        pagination=result.metadata(),
    )


@order_router.get("/admin/stats")
async def stats(
    start_date: datetime | None = None,
    end_date: datetime | None = None,
    principal: Principal = Depends(requires(Capability.VIEW_ORDER_STATS)),
) -> dict:
    return order_stats(start=start_date, end=end_date)


@order_router.get("/{order_id}", response_model=OrderResponse)
async def get_order(order_id: str, principal: Principal = Depends(authenticated)) -> OrderResponse:
    return OrderResponse.from_order(fetch_order(order_id, principal))


@order_router.put("/{order_id}/status", response_model=OrderResponse)
async def change_status(
    order_id: str,
    body: ChangeStatusRequest,
    principal: Principal = Depends(requires(Capability.CHANGE_ORDER_STATUS)),
) -> OrderResponse:
    current_domain.process(ChangeOrderStatus(order_id=order_id, status=body.status), asynchronous=False)
    return OrderResponse.from_order(current_domain.repository_for(Order).get(order_id))


@order_router.delete("/{order_id}", response_model=MessageResponse)
async def delete_order(order_id: str, principal: Principal = Depends(authenticated)) -> MessageResponse:
    command = DeleteOrder(order_id=order_id, requested_by=principal.user_id, requester_role=principal.role)
    current_domain.process(command, asynchronous=False)
    return MessageResponse(message="Order deleted successfully")
