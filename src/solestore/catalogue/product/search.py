"""Catalogue browsing: filtered, sorted and paged product listings."""

from dataclasses import dataclass

from protean.exceptions import ValidationError
from protean.utils.globals import current_domain

from solestore.catalogue.product.product import Product, normalise_size, parse_category
from solestore.shared.pagination import Page, fetch_all, paginate, sort_records

SORTABLE_FIELDS = ("name", "price", "created_at", "quantity")


@dataclass
class ProductFilter:
    """Criteria for a product listing. All of them are optional and combine with AND."""

    category: str | None = None
    min_price: float | None = None
    max_price: float | None = None
    color: str | None = None
    size: str | None = None
    search: str | None = None

    def __post_init__(self):
        if self.category:
            self.category = parse_category(self.category)
        if self.min_price is not None and self.min_price < 0:
            raise ValidationError({"min_price": ["Invalid minPrice"]})
        if self.max_price is not None and self.max_price < 0:
            raise ValidationError({"max_price": ["Invalid maxPrice"]})
        if self.size is not None:
            self.size = normalise_size(self.size)

    def matches(self, product: Product) -> bool:
        if self.category and self.category not in product.category_list:
            return False
        if self.min_price is not None and product.price < self.min_price:
            return False
        if self.max_price is not None and product.price > self.max_price:
            return False
        if self.color and self.color.lower() not in (product.color or "").lower():
            return False
        if self.size and self.size not in product.size_list:
            return False
        if self.search:
            needle = self.search.lower()
            if needle not in product.name.lower() and needle not in product.description.lower():
                return False
        return True


def _all_products():
    return fetch_all(current_domain.repository_for(Product)._dao.query)


def get_product(product_id) -> Product:
    return current_domain.repository_for(Product).get(product_id)


def search_products(
    filters: ProductFilter | None = None,
    sort_by: str = "created_at",
    sort_order: str = "desc",
    page: int = 1,
    page_size: int = 20,
) -> Page:
    filters = filters or ProductFilter()
    products = [p for p in _all_products() if filters.matches(p)]
    attribute = sort_by if sort_by in SORTABLE_FIELDS else "created_at"
    products = sort_records(products, attribute, descending=sort_order != "asc")
    return paginate(products, page, page_size)


def products_in_category(category: str, page: int = 1, page_size: int = 20) -> Page:
    return search_products(ProductFilter(category=category), page=page, page_size=page_size)


def available_sizes() -> list[str]:
    sizes = {size for product in _all_products() for size in product.size_list}
    return sorted(sizes, key=_size_sort_key)


def available_colors() -> list[str]:
    return sorted({product.color for product in _all_products() if product.color})


def _size_sort_key(size):
    # Numeric sizes in numeric order, labels after them alphabetically
    try:
        return (0, float(size), size)
    except ValueError:
        return (1, 0.0, size)
