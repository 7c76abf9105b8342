"""Cart mutations: commands and handler.

Every command is scoped to the acting user's own cart; there is no way to
address another user's cart.
"""

from protean import handle
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import Identifier, Integer, String
from protean.utils.globals import current_domain

from solestore.catalogue.product.product import Product, normalise_size
from solestore.domain import shop
from solestore.ordering.cart.cart import Cart


@shop.command(part_of="Cart")
class AddToCart:
    user_id = Identifier(required=True)
    product_id = Identifier(required=True)
    size = String(required=True, max_length=20)
    quantity = Integer(default=1)


@shop.command(part_of="Cart")
class SetCartLineQuantity:
    user_id = Identifier(required=True)
    line_id = Identifier(required=True)
    quantity = Integer(required=True)


@shop.command(part_of="Cart")
class RemoveFromCart:
    user_id = Identifier(required=True)
    line_id = Identifier(required=True)


@shop.command(part_of="Cart")
class ClearCart:
    user_id = Identifier(required=True)


def find_cart(user_id):
    """The user's cart, or None if they never added anything."""
    found = current_domain.repository_for(Cart)._dao.query.filter(user_id=str(user_id)).all()
    return found.items[0] if found.items else None


def get_cart(user_id):
    cart = find_cart(user_id)
    if cart is None:
        raise ObjectNotFoundError({"cart": ["Cart not found"]})
    return cart


@shop.command_handler(part_of=Cart)
class ManageCartHandler:
    @handle(AddToCart)
    def add_to_cart(self, command):
        size = normalise_size(command.size)
        product = current_domain.repository_for(Product).get(command.product_id)
        if not product.offers_size(size):
            raise ValidationError({"size": [f"Size {size} is not available for this product"]})

        cart = find_cart(command.user_id) or Cart.create(user_id=command.user_id)
        cart.add_line(
            product_id=product.id,
            size=size,
            quantity=command.quantity,
            unit_price=product.price,
            available_stock=product.quantity,
        )
        current_domain.repository_for(Cart).add(cart)
        return str(cart.id)

    @handle(SetCartLineQuantity)
    def set_line_quantity(self, command):
        cart = get_cart(command.user_id)
        available = None
        if command.quantity:
            line = next((line for line in cart.lines if str(line.id) == str(command.line_id)), None)
            if line is not None:
                try:
                    available = current_domain.repository_for(Product).get(line.product_id).quantity
                except ObjectNotFoundError:
                    available = None  # product withdrawn; the order workflow will reject it
        cart.set_line_quantity(command.line_id, command.quantity, available_stock=available)
        current_domain.repository_for(Cart).add(cart)

    @handle(RemoveFromCart)
    def remove_from_cart(self, command):
        cart = get_cart(command.user_id)
        cart.remove_line(command.line_id)
        current_domain.repository_for(Cart).add(cart)

    @handle(ClearCart)
    def clear_cart(self, command):
        cart = find_cart(command.user_id)
        if cart is None:
            return None
        cart.clear()
        current_domain.repository_for(Cart).add(cart)
        return str(cart.id)
