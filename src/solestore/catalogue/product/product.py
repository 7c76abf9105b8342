"""Product aggregate: a shoe in the catalogue with its live stock level.

Stock is the one field shared between concurrent requests. It only moves
through `reserve`/`release` (order workflow) and `set_stock_level` (admin),
and can never drop below zero.
"""

import json
from datetime import UTC, datetime
from enum import Enum

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, Integer, String, Text

from solestore.catalogue.product.events import ProductAdded, ProductUpdated, StockAdjusted
from solestore.domain import shop

# Sentinel for distinguishing "not provided" from None in partial updates
_UNSET = object()

_CATEGORY_MESSAGE = 'Invalid category. Must be "Men" or "Women"'


class Category(Enum):
    MEN = "Men"
    WOMEN = "Women"


class StockChange(Enum):
    RESERVED = "Reserved"
    RELEASED = "Released"
    RESTOCKED = "Restocked"


def parse_category(value, field="category"):
    """Canonical category for a case-insensitive name."""
    for category in Category:
        if isinstance(value, str) and value.strip().lower() == category.value.lower():
            return category.value
    raise ValidationError({field: [_CATEGORY_MESSAGE]})


def normalise_size(size):
    """Sizes may arrive as numbers (9, 9.5) or labels ("9", "EU 42")."""
    if isinstance(size, float) and size.is_integer():
        size = int(size)
    return str(size).strip()


@shop.aggregate
class Product:
    name: String(required=True, max_length=255)
    description: Text(required=True)
    price: Float(required=True, min_value=0.0)
    quantity: Integer(required=True, min_value=0)
    sizes: Text()  # JSON array of size labels
    color: String(max_length=50)
    categories: Text()  # JSON array of Category values
    image_url: String(max_length=500)
    created_at: DateTime()
    updated_at: DateTime()

    @invariant.post
    def name_must_not_be_blank(self):
        if self.name is not None and not self.name.strip():
            raise ValidationError({"name": ["Name must be a non-empty string"]})

    @invariant.post
    def description_must_not_be_blank(self):
        if self.description is not None and not self.description.strip():
            raise ValidationError({"description": ["Description must be a non-empty string"]})

    @invariant.post
    def stock_is_never_negative(self):
        if self.quantity is not None and self.quantity < 0:
            raise ValidationError({"quantity": ["Quantity must be a non-negative integer"]})

    @invariant.post
    def categories_are_known(self):
        valid = {c.value for c in Category}
        invalid = [c for c in self.category_list if c not in valid]
        if invalid:
            names = ", ".join(invalid)
            raise ValidationError({"categories": [f'Invalid categories: {names}. Must be "Men" or "Women"']})

    @property
    def size_list(self):
        return json.loads(self.sizes) if self.sizes else []

    @property
    def category_list(self):
        return json.loads(self.categories) if self.categories else []

    def offers_size(self, size):
        return normalise_size(size) in self.size_list

    def has_stock_for(self, amount):
        return self.quantity >= amount

    @classmethod
    def add(cls, name, description, price, quantity, sizes=None, color=None, categories=None, image_url=None):
        now = datetime.now(UTC)
        sizes_json = json.dumps([normalise_size(s) for s in sizes or []])
        categories_json = json.dumps(list(categories or []))
        product = cls(
            name=name.strip() if name else name,
            description=description.strip() if description else description,
            price=price,
            quantity=quantity,
            sizes=sizes_json,
            color=color.strip() if color else None,
            categories=categories_json,
            image_url=image_url,
            created_at=now,
            updated_at=now,
        )
        product.raise_(
            ProductAdded(
                product_id=product.id,
                name=product.name,
                price=product.price,
                quantity=product.quantity,
                sizes=sizes_json,
                categories=categories_json,
                added_at=now,
            )
        )
        return product

    def update_details(
        self,
        name=_UNSET,
        description=_UNSET,
        price=_UNSET,
        sizes=_UNSET,
        color=_UNSET,
        categories=_UNSET,
        image_url=_UNSET,
    ):
        """Partial update of everything except stock."""
        changed = []
        now = datetime.now(UTC)
        with atomic_change(self):
            if name is not _UNSET:
                self.name = name.strip()
                changed.append("name")
            if description is not _UNSET:
                self.description = description.strip()
                changed.append("description")
            if price is not _UNSET:
                self.price = price
                changed.append("price")
            if sizes is not _UNSET:
                self.sizes = json.dumps([normalise_size(s) for s in sizes])
                changed.append("sizes")
            if color is not _UNSET:
                self.color = color.strip() if color else None
                changed.append("color")
            if categories is not _UNSET:
                self.categories = json.dumps(list(categories))
                changed.append("categories")
            if image_url is not _UNSET:
                self.image_url = image_url
                changed.append("image_url")
            self.updated_at = now

        if changed:
            self.raise_(
                ProductUpdated(
                    product_id=self.id,
                    changed_fields=json.dumps(changed),
                    price=self.price,
                    updated_at=now,
                )
            )

    def _move_stock(self, new_quantity, change):
        previous = self.quantity
        self.quantity = new_quantity
        self.updated_at = datetime.now(UTC)
        self.raise_(
            StockAdjusted(
                product_id=self.id,
                previous_quantity=previous,
                new_quantity=new_quantity,
                reason=change.value,
            )
        )

    def reserve(self, amount):
        """Take `amount` units out of stock for an order."""
        if amount < 1:
            raise ValidationError({"quantity": ["Reserved amount must be positive"]})
        if not self.has_stock_for(amount):
            raise ValidationError(
                {"quantity": [f"Insufficient stock for {self.name}. Available: {self.quantity}, Requested: {amount}"]}
            )
        self._move_stock(self.quantity - amount, StockChange.RESERVED)

    def release(self, amount):
        """Return `amount` units to stock, e.g. when an order is cancelled."""
        if amount < 1:
            raise ValidationError({"quantity": ["Released amount must be positive"]})
        self._move_stock(self.quantity + amount, StockChange.RELEASED)

    def set_stock_level(self, quantity):
        if quantity is None or quantity < 0:
            raise ValidationError({"quantity": ["Quantity must be a non-negative integer"]})
        self._move_stock(quantity, StockChange.RESTOCKED)
