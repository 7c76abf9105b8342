"""Pydantic request/response schemas for the cart and order APIs."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

# --- Cart Schemas ---


class AddToCartRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [{"product_id": "3f1c2b9e-8f55-4c55-9a7e-2f1f5a0c9d11", "size": "9.5", "quantity": 2}]
        }
    }

    product_id: str
    size: str | int | float
    quantity: int = 1


class UpdateCartLineRequest(BaseModel):
    model_config = {
        "json_schema_extra": {"examples": [{"item_id": "b2a6f0d4-1e0a-4a63-8d0c-5c3c1e2f7a90", "quantity": 3}]}
    }

    item_id: str
    quantity: int


class CartLineResponse(BaseModel):
    id: str
    product_id: str
    size: str
    quantity: int
    unit_price: float
    line_total: float


class CartResponse(BaseModel):
    id: str
    user_id: str
    items: list[CartLineResponse]
    total: float
    updated_at: datetime | None = None

    @classmethod
    def from_cart(cls, cart) -> CartResponse:
        return cls(
            id=str(cart.id),
            user_id=str(cart.user_id),
            items=[
                CartLineResponse(
                    id=str(line.id),
                    product_id=str(line.product_id),
                    size=line.size,
                    quantity=line.quantity,
                    unit_price=line.unit_price,
                    line_total=round(line.line_total, 2),
                )
                for line in cart.lines
            ],
            total=cart.total,
            updated_at=cart.updated_at,
        )


# --- Order Schemas ---


class OrderLineRequest(BaseModel):
    """Fields are checked by the order workflow so malformed lines get its messages."""

    product_id: str | None = None
    size: str | int | float | None = None
    quantity: int | None = None


class PlaceOrderRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "items": [
                        {"product_id": "3f1c2b9e-8f55-4c55-9a7e-2f1f5a0c9d11", "size": "10", "quantity": 1},
                    ]
                }
            ]
        }
    }

    items: list[OrderLineRequest] = Field(default_factory=list)


class ChangeStatusRequest(BaseModel):
    model_config = {"json_schema_extra": {"examples": [{"status": "Processing"}]}}

    status: str = Field(..., max_length=20)


class OrderLineResponse(BaseModel):
    product_id: str
    product_name: str | None = None
    size: str
    quantity: int
    unit_price: float


class OrderResponse(BaseModel):
    id: str
    user_id: str
    items: list[OrderLineResponse]
    subtotal: float
    shipping: float
    total: float
    status: str
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_order(cls, order) -> OrderResponse:
        return cls(
            id=str(order.id),
            user_id=str(order.user_id),
            items=[
                OrderLineResponse(
                    product_id=str(line.product_id),
                    product_name=line.product_name,
                    size=line.size,
                    quantity=line.quantity,
                    unit_price=line.unit_price,
                )
                for line in order.lines
            ],
            subtotal=order.subtotal,
            shipping=order.shipping,
            total=order.total,
            status=order.status,
            created_at=order.created_at,
            updated_at=order.updated_at,
        )


class OrderListResponse(BaseModel):
    orders: list[OrderResponse]
    pagination: dict


class MessageResponse(BaseModel):
    message: str
