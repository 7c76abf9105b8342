"""Domain events for the Order aggregate."""

from protean.fields import DateTime, Float, Identifier, String, Text

from solestore.domain import shop


@shop.event(part_of="Order")
class OrderPlaced:
    """Stock was reserved and the order recorded; the buyer's cart was emptied."""

    __version__ = 1

    order_id = Identifier(required=True)
    user_id = Identifier(required=True)
    lines = Text(required=True)  # JSON: [{product_id, size, quantity, unit_price}]
    subtotal = Float(required=True)
    shipping = Float(required=True)
    total = Float(required=True)
    placed_at = DateTime(required=True)


@shop.event(part_of="Order")
class OrderStatusChanged:
    __version__ = 1

    order_id = Identifier(required=True)
    previous_status = String(required=True)
    new_status = String(required=True)
    changed_at = DateTime(required=True)


@shop.event(part_of="Order")
class OrderCancelled:
    """The order was cancelled and its reserved units returned to stock."""

    __version__ = 1

    order_id = Identifier(required=True)
    user_id = Identifier(required=True)
    previous_status = String(required=True)
    lines = Text(required=True)  # JSON: [{product_id, quantity}]
    cancelled_at = DateTime(required=True)
