"""Domain events for the Cart aggregate."""

from protean.fields import Float, Identifier, Integer, String

from solestore.domain import shop


@shop.event(part_of="Cart")
class CartLineAdded:
    """A product was added to a cart, either as a new line or merged into an existing one."""

    __version__ = 1

    cart_id = Identifier(required=True)
    line_id = Identifier(required=True)
    product_id = Identifier(required=True)
    size = String(required=True)
    quantity = Integer(required=True)
    line_quantity = Integer(required=True)
    unit_price = Float(required=True)
    cart_total = Float(required=True)


@shop.event(part_of="Cart")
class CartLineQuantityChanged:
    __version__ = 1

    cart_id = Identifier(required=True)
    line_id = Identifier(required=True)
    previous_quantity = Integer(required=True)
    new_quantity = Integer(required=True)
    cart_total = Float(required=True)


@shop.event(part_of="Cart")
class CartLineRemoved:
    __version__ = 1

    cart_id = Identifier(required=True)
    line_id = Identifier(required=True)
    cart_total = Float(required=True)


@shop.event(part_of="Cart")
class CartCleared:
    """All lines were dropped, explicitly or because the cart became an order."""

    __version__ = 1

    cart_id = Identifier(required=True)
    user_id = Identifier(required=True)
    reason = String(required=True, max_length=20)
