"""Order aggregate: an immutable snapshot of what was bought and at what price.

After placement only the status (and timestamps) change. Lines are never
edited, and `total == subtotal + shipping` always holds.

State Machine (5 states):
    PENDING → PROCESSING → SHIPPED → DELIVERED
    CANCELLED (from PENDING or PROCESSING)
"""

import json
from datetime import UTC, datetime
from enum import Enum

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, HasMany, Identifier, Integer, String

from solestore.domain import shop
from solestore.ordering.order.events import OrderCancelled, OrderPlaced, OrderStatusChanged


class OrderStatus(Enum):
    PENDING = "Pending"
    PROCESSING = "Processing"
    SHIPPED = "Shipped"
    DELIVERED = "Delivered"
    CANCELLED = "Cancelled"


_VALID_TRANSITIONS = {
    OrderStatus.PENDING: {OrderStatus.PROCESSING, OrderStatus.CANCELLED},
    OrderStatus.PROCESSING: {OrderStatus.SHIPPED, OrderStatus.CANCELLED},
    OrderStatus.SHIPPED: {OrderStatus.DELIVERED},
    OrderStatus.DELIVERED: set(),  # Terminal
    OrderStatus.CANCELLED: set(),  # Terminal
}

# Units of these orders are still reserved and go back to stock on cancel/delete
_STOCK_HOLDING_STATES = {OrderStatus.PENDING, OrderStatus.PROCESSING}


def parse_status(value):
    try:
        return OrderStatus(value)
    except ValueError:
        valid = ", ".join(s.value for s in OrderStatus)
        raise ValidationError({"status": [f"Invalid status. Valid statuses are: {valid}"]}) from None


@shop.entity(part_of="Order")
class OrderLine:
    """A purchased product, size and quantity at the price paid."""

    product_id = Identifier(required=True)
    product_name = String(max_length=255)
    size = String(required=True, max_length=20)
    quantity = Integer(required=True, min_value=1)
    unit_price = Float(required=True, min_value=0.0)

    @property
    def line_total(self):
        return self.quantity * self.unit_price


@shop.aggregate
class Order:
    user_id = Identifier(required=True)
    lines = HasMany(OrderLine)
    subtotal = Float(required=True, min_value=0.0)
    shipping = Float(default=0.0, min_value=0.0)
    total = Float(required=True, min_value=0.0)
    status = String(choices=OrderStatus, default=OrderStatus.PENDING.value)
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def total_is_subtotal_plus_shipping(self):
        if self.total is None or self.subtotal is None:
            return
        if abs(self.total - (self.subtotal + (self.shipping or 0.0))) > 0.005:
            raise ValidationError({"total": ["Order total must equal subtotal plus shipping"]})

    @classmethod
    def place(cls, user_id, lines, subtotal, shipping):
        """Record a new order.

        Args:
            user_id: The buyer.
            lines: List of dicts with product_id, product_name, size, quantity, unit_price.
            subtotal: Sum of unit_price * quantity, already computed from catalogue prices.
            shipping: Shipping charge for that subtotal.
        """
        now = datetime.now(UTC)
        order = cls(
            user_id=user_id,
            subtotal=subtotal,
            shipping=shipping,
            total=round(subtotal + shipping, 2),
            status=OrderStatus.PENDING.value,
            created_at=now,
            updated_at=now,
        )
        order.add_lines([OrderLine(**line) for line in lines])
        order.raise_(
            OrderPlaced(
                order_id=order.id,
                user_id=user_id,
                lines=json.dumps(
                    [
                        {
                            "product_id": str(line["product_id"]),
                            "size": line["size"],
                            "quantity": line["quantity"],
                            "unit_price": line["unit_price"],
                        }
                        for line in lines
                    ]
                ),
                subtotal=order.subtotal,
                shipping=order.shipping,
                total=order.total,
                placed_at=now,
            )
        )
        return order

    @property
    def holds_stock(self):
        return OrderStatus(self.status) in _STOCK_HOLDING_STATES

    def _assert_can_transition(self, target_status):
        """Validate that the current state allows transition to target."""
        current = OrderStatus(self.status)
        if target_status not in _VALID_TRANSITIONS.get(current, set()):
            raise ValidationError({"status": [f"Cannot transition from {current.value} to {target_status.value}"]})

    def transition_to(self, status):
        """Move to `status` (a value of OrderStatus). Returns the previous status."""
        target = parse_status(status)
        self._assert_can_transition(target)

        previous = self.status
        now = datetime.now(UTC)
        self.status = target.value
        self.updated_at = now

        self.raise_(
            OrderStatusChanged(
                order_id=self.id,
                previous_status=previous,
                new_status=target.value,
                changed_at=now,
            )
        )
        if target == OrderStatus.CANCELLED:
            self.raise_(
                OrderCancelled(
                    order_id=self.id,
                    user_id=self.user_id,
                    previous_status=previous,
                    lines=json.dumps([{"product_id": str(l.product_id), "quantity": l.quantity} for l in self.lines]),
                    cancelled_at=now,
                )
            )
        return previous
