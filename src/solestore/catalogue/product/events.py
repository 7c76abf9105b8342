"""Domain events for the Product aggregate."""

from protean.fields import DateTime, Float, Identifier, Integer, String, Text

from solestore.domain import shop


@shop.event(part_of="Product")
class ProductAdded:
    """A product was added to the catalogue."""

    __version__ = 1

    product_id: Identifier(required=True)
    name: String(required=True)
    price: Float(required=True)
    quantity: Integer(required=True)
    sizes: Text()
    categories: Text()
    added_at: DateTime(required=True)


@shop.event(part_of="Product")
class ProductUpdated:
    """Descriptive fields or the price of a product changed."""

    __version__ = 1

    product_id: Identifier(required=True)
    changed_fields: Text(required=True)  # JSON array of field names
    price: Float(required=True)
    updated_at: DateTime(required=True)


@shop.event(part_of="Product")
class StockAdjusted:
    """The stock level moved: an order reserved or released units, or an admin set it."""

    __version__ = 1

    product_id: Identifier(required=True)
    previous_quantity: Integer(required=True)
    new_quantity: Integer(required=True)
    reason: String(required=True, max_length=20)
