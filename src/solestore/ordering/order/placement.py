"""Order placement: reserve stock, record the order and empty the cart, atomically.

Every step runs inside one unit of work. Any exception raised before the
commit discards the stock decrements, the order and the cart change together,
so a failed placement leaves no trace. When another request commits a write
to one of the same products first, the aggregate version check at commit
rejects ours and the placement surfaces as a StockReservationConflict.
"""

import uuid
from dataclasses import dataclass

from protean.core.unit_of_work import UnitOfWork
from protean.exceptions import ExpectedVersionError, ObjectNotFoundError, ValidationError
from protean.utils.globals import current_domain

from solestore.catalogue.product.product import Product, normalise_size
from solestore.catalogue.product.stock import decrement_stock
from solestore.errors import InsufficientStock, StockReservationConflict
from solestore.ordering.cart.cart import MAX_LINE_QUANTITY, Cart, ClearReason
from solestore.ordering.cart.items import find_cart
from solestore.ordering.order.order import Order
from solestore.ordering.order.pricing import ShippingPolicy, price_order
from solestore.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class RequestedLine:
    product_id: str
    size: str
    quantity: int


def _is_uuid(value) -> bool:
    try:
        uuid.UUID(str(value))
    except ValueError:
        return False
    return True


def validate_lines(lines) -> list[RequestedLine]:
    """Check the shape of every requested line before anything is touched."""
    if not lines:
        raise ValidationError({"items": ["Order must contain at least one item"]})

    requested = []
    for position, line in enumerate(lines, start=1):
        product_id = line.get("product_id")
        size = line.get("size")
        quantity = line.get("quantity")

        if not product_id or size in (None, "") or quantity is None:
            raise ValidationError({"items": [f"Item {position}: product_id, quantity and size are required"]})
        if not _is_uuid(product_id):
            raise ValidationError({"items": [f"Item {position}: invalid product id {product_id}"]})
        if isinstance(quantity, bool) or not isinstance(quantity, int) or not 1 <= quantity <= MAX_LINE_QUANTITY:
            raise ValidationError({"items": [f"Item {position}: quantity must be between 1 and {MAX_LINE_QUANTITY}"]})

        requested.append(RequestedLine(product_id=str(product_id), size=normalise_size(size), quantity=quantity))
    return requested


class OrderPlacement:
    """Turns a list of requested lines into a placed order.

    Built once at startup with the shipping policy in force, then shared by
    every request.
    """

    def __init__(self, shipping_policy: ShippingPolicy):
        self.shipping_policy = shipping_policy

    @classmethod
    def from_settings(cls, settings) -> "OrderPlacement":
        return cls(ShippingPolicy.from_settings(settings))

    def _reserve(self, line: RequestedLine) -> dict:
        """Check one line against live stock and take its units.

        Returns the line snapshot, priced at the product's current price.
        """
        product = current_domain.repository_for(Product).get(line.product_id)

        if not product.offers_size(line.size):
            raise ObjectNotFoundError({"size": [f"Size {line.size} is not available for product {product.name}"]})

        if not decrement_stock(product.id, line.quantity):
            raise InsufficientStock(
                {
                    "quantity": [
                        f"Insufficient stock for {product.name}. "
                        f"Available: {product.quantity}, Requested: {line.quantity}"
                    ]
                }
            )

        return {
            "product_id": str(product.id),
            "product_name": product.name,
            "size": line.size,
            "quantity": line.quantity,
            "unit_price": product.price,
        }

    def place(self, user_id, lines) -> Order:
        """Place an order for `user_id`.

        Args:
            user_id: The buyer.
            lines: Iterable of mappings with product_id, size and quantity.

        Raises:
            ValidationError: Malformed lines.
            ObjectNotFoundError: Unknown product, or a size it does not offer.
            InsufficientStock: Live stock is below a requested quantity.
            StockReservationConflict: A concurrent order took the units first.
        """
        requested = validate_lines(list(lines or []))

        try:
            with UnitOfWork():
                snapshots = [self._reserve(line) for line in requested]

                subtotal = sum(s["unit_price"] * s["quantity"] for s in snapshots)
                breakdown = price_order(subtotal, self.shipping_policy)

                order = Order.place(
                    user_id=user_id,
                    lines=snapshots,
                    subtotal=breakdown.subtotal,
                    shipping=breakdown.shipping,
                )
                current_domain.repository_for(Order).add(order)

                cart = find_cart(user_id)
                if cart is not None:
                    cart.clear(ClearReason.ORDER_PLACED)
                    current_domain.repository_for(Cart).add(cart)
        except ExpectedVersionError as exc:
            # A product or the cart was written by another request after we read it
            logger.warning(
                "stock_reservation_lost",
                user_id=str(user_id),
                product_ids=[line.product_id for line in requested],
            )
            raise StockReservationConflict(
                {"quantity": ["Stock changed while placing the order. Please try again."]}
            ) from exc

        logger.info(
            "order_placed",
            order_id=str(order.id),
            user_id=str(user_id),
            lines=len(snapshots),
            total=order.total,
        )
        return order
