"""Cart aggregate: one per user, holding lines priced at the moment they were added.

The total is never taken from outside. It is recomputed from the lines on
every mutation.
"""

from datetime import UTC, datetime
from enum import Enum

from protean import atomic_change
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import DateTime, Float, HasMany, Identifier, Integer, String

from solestore.domain import shop
from solestore.errors import InsufficientStock
from solestore.ordering.cart.events import (
    CartCleared,
    CartLineAdded,
    CartLineQuantityChanged,
    CartLineRemoved,
)

MAX_LINE_QUANTITY = 10


class ClearReason(Enum):
    REQUESTED = "Requested"
    ORDER_PLACED = "OrderPlaced"


@shop.entity(part_of="Cart")
class CartLine:
    product_id = Identifier(required=True)
    size = String(required=True, max_length=20)
    quantity = Integer(required=True, min_value=1, max_value=MAX_LINE_QUANTITY)
    unit_price = Float(required=True, min_value=0.0)
    added_at = DateTime()

    @property
    def line_total(self):
        return self.quantity * self.unit_price


@shop.aggregate
class Cart:
    user_id = Identifier(required=True, unique=True)
    lines = HasMany(CartLine)
    total = Float(default=0.0)
    created_at = DateTime()
    updated_at = DateTime()

    @classmethod
    def create(cls, user_id):
        now = datetime.now(UTC)
        return cls(user_id=user_id, total=0.0, created_at=now, updated_at=now)

    def _recalculate_total(self):
        self.total = round(sum(line.line_total for line in self.lines), 2)
        self.updated_at = datetime.now(UTC)

    def _line(self, line_id):
        line = next((line for line in self.lines if str(line.id) == str(line_id)), None)
        if line is None:
            raise ObjectNotFoundError({"line_id": ["Item not found in cart"]})
        return line

    def line_for(self, product_id, size):
        return next(
            (line for line in self.lines if str(line.product_id) == str(product_id) and line.size == size),
            None,
        )

    def add_line(self, product_id, size, quantity, unit_price, available_stock):
        """Add `quantity` of a product in `size`, merging with an existing line.

        The merged quantity may not exceed MAX_LINE_QUANTITY or the stock
        available right now. Nothing changes when either check fails.
        """
        if quantity is None or not 1 <= quantity <= MAX_LINE_QUANTITY:
            raise ValidationError({"quantity": [f"Quantity must be between 1 and {MAX_LINE_QUANTITY}"]})

        existing = self.line_for(product_id, size)
        in_cart = existing.quantity if existing else 0
        new_quantity = in_cart + quantity
        if new_quantity > MAX_LINE_QUANTITY:
            raise ValidationError(
                {"quantity": [f"A cart line is limited to {MAX_LINE_QUANTITY} units; {in_cart} already in cart"]}
            )
        if new_quantity > available_stock:
            raise InsufficientStock(
                {"quantity": [f"Cannot add {quantity} more. Only {max(available_stock - in_cart, 0)} more available."]}
            )

        with atomic_change(self):
            if existing:
                existing.quantity = new_quantity
                line = existing
            else:
                line = CartLine(
                    product_id=product_id,
                    size=size,
                    quantity=quantity,
                    unit_price=unit_price,
                    added_at=datetime.now(UTC),
                )
                self.add_lines(line)
            self._recalculate_total()

        self.raise_(
            CartLineAdded(
                cart_id=self.id,
                line_id=line.id,
                product_id=product_id,
                size=size,
                quantity=quantity,
                line_quantity=line.quantity,
                unit_price=line.unit_price,
                cart_total=self.total,
            )
        )
        return line

    def remove_line(self, line_id):
        line = self._line(line_id)
        with atomic_change(self):
            self.remove_lines(line)
            self._recalculate_total()
        self.raise_(CartLineRemoved(cart_id=self.id, line_id=line.id, cart_total=self.total))

    def set_line_quantity(self, line_id, quantity, available_stock=None):
        """Set a line's quantity outright. Zero removes the line."""
        if quantity is None or not 0 <= quantity <= MAX_LINE_QUANTITY:
            raise ValidationError({"quantity": [f"Quantity must be between 0 and {MAX_LINE_QUANTITY}"]})

        line = self._line(line_id)
        if quantity == 0:
            self.remove_line(line_id)
            return
        if available_stock is not None and quantity > available_stock:
            raise InsufficientStock({"quantity": [f"Only {available_stock} items available in stock"]})

        previous = line.quantity
        with atomic_change(self):
            line.quantity = quantity
            self._recalculate_total()
        self.raise_(
            CartLineQuantityChanged(
                cart_id=self.id,
                line_id=line.id,
                previous_quantity=previous,
                new_quantity=quantity,
                cart_total=self.total,
            )
        )

    def clear(self, reason=ClearReason.REQUESTED):
        """Empty the cart. Clearing an empty cart changes nothing."""
        if not self.lines:
            self.total = 0.0
            return
        with atomic_change(self):
            for line in list(self.lines):
                self.remove_lines(line)
            self.total = 0.0
            self.updated_at = datetime.now(UTC)
        self.raise_(CartCleared(cart_id=self.id, user_id=self.user_id, reason=reason.value))
