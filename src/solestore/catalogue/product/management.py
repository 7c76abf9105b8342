"""Catalogue administration: add, edit, restock and remove products."""

import json

from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Float, Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from solestore.catalogue.product.product import Product, parse_category
from solestore.domain import shop
from solestore.utils.logging import get_logger

logger = get_logger(__name__)


@shop.command(part_of="Product")
class AddProduct:
    name = String(required=True, max_length=255)
    description = Text(required=True)
    price = Float(required=True)
    quantity = Integer(required=True)
    sizes = Text()  # JSON array of size labels
    color = String(max_length=50)
    categories = Text()  # JSON array of category names, any case
    image_url = String(max_length=500)


@shop.command(part_of="Product")
class UpdateProduct:
    """Partial update; fields left as None are not touched."""

    product_id = Identifier(required=True)
    name = String(max_length=255)
    description = Text()
    price = Float()
    quantity = Integer()
    sizes = Text()
    color = String(max_length=50)
    categories = Text()
    image_url = String(max_length=500)


@shop.command(part_of="Product")
class SetStockLevel:
    product_id = Identifier(required=True)
    quantity = Integer(required=True)


@shop.command(part_of="Product")
class RemoveProduct:
    product_id = Identifier(required=True)


def _categories(raw):
    return [parse_category(name, field="categories") for name in json.loads(raw)]


def _sizes(raw):
    sizes = json.loads(raw)
    if not isinstance(sizes, list):
        raise ValidationError({"sizes": ["Sizes must be an array"]})
    return sizes


@shop.command_handler(part_of=Product)
class ManageProductHandler:
    @handle(AddProduct)
    def add_product(self, command):
        product = Product.add(
            name=command.name,
            description=command.description,
            price=command.price,
            quantity=command.quantity,
            sizes=_sizes(command.sizes) if command.sizes else [],
            color=command.color,
            categories=_categories(command.categories) if command.categories else [],
            image_url=command.image_url,
        )
        current_domain.repository_for(Product).add(product)
        logger.info("product_added", product_id=str(product.id), quantity=product.quantity)
        return str(product.id)

    @handle(UpdateProduct)
    def update_product(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)

        changes = {
            field: getattr(command, field)
            for field in ("name", "description", "price", "color", "image_url")
            if getattr(command, field) is not None
        }
        if command.sizes is not None:
            changes["sizes"] = _sizes(command.sizes)
        if command.categories is not None:
            changes["categories"] = _categories(command.categories)

        product.update_details(**changes)
        if command.quantity is not None:
            product.set_stock_level(command.quantity)
        repo.add(product)

    @handle(SetStockLevel)
    def set_stock_level(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        product.set_stock_level(command.quantity)
        repo.add(product)

    @handle(RemoveProduct)
    def remove_product(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        repo._dao.delete(product)
        logger.info("product_removed", product_id=str(product.id))
