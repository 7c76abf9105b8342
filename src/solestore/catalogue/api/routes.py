"""FastAPI endpoints for the Catalogue."""

import json

from fastapi import APIRouter, Depends, Request
from protean.utils.globals import current_domain

from solestore.api.auth import requires
from solestore.catalogue.api.schemas import (
    AddProductRequest,
    CategoryListingResponse,
    MessageResponse,
    ProductIdResponse,
    ProductListResponse,
    ProductResponse,
    StockLevelRequest,
    UpdateProductRequest,
)
from solestore.catalogue.product.management import AddProduct, RemoveProduct, SetStockLevel, UpdateProduct
from solestore.catalogue.product.search import (
    ProductFilter,
    available_colors,
    available_sizes,
    get_product,
    products_in_category,
    search_products,
)
from solestore.identity.access import Capability, Principal
from solestore.shared.pagination import resolve_page_size

product_router = APIRouter(prefix="/products", tags=["products"])

_admin = requires(Capability.MANAGE_CATALOGUE)


def _json_list(values):
    return json.dumps(values) if values is not None else None


# --- Browsing ---


@product_router.get("", response_model=ProductListResponse)
async def list_products(
    request: Request,
    page: int = 1,
    limit: int | None = None,
    category: str | None = None,
    min_price: float | None = None,
    max_price: float | None = None,
    color: str | None = None,
    size: str | None = None,
    search: str | None = None,
    sort_by: str = "created_at",
    sort_order: str = "desc",
) -> ProductListResponse:
    settings = request.app.state.settings
    filters = ProductFilter(
        category=category,
        min_price=min_price,
        max_price=max_price,
        color=color,
        size=size,
        search=search,
    )
    result = search_products(
        filters,
        sort_by=sort_by,
        sort_order=sort_order,
        page=page,
        page_size=resolve_page_size(limit, settings.default_page_size, settings.max_page_size),
    )
    return ProductListResponse(
        products=[ProductResponse.from_product(p) for p in result.items],
        pagination=result.metadata(),
    )


@product_router.get("/sizes")
async def list_sizes() -> dict:
    return {"available_sizes": available_sizes()}


@product_router.get("/colors")
async def list_colors() -> dict:
    return {"available_colors": available_colors()}


@product_router.get("/category/{category}", response_model=CategoryListingResponse)
async def list_category(request: Request, category: str, page: int = 1) -> CategoryListingResponse:
    result = products_in_category(category, page=page, page_size=request.app.state.settings.max_page_size)
    return CategoryListingResponse(
        category=category,
        count=result.total_items,
        products=[ProductResponse.from_product(p) for p in result.items],
    )


@product_router.get("/{product_id}", response_model=ProductResponse)
async def get_product_details(product_id: str) -> ProductResponse:
    return ProductResponse.from_product(get_product(product_id))


# --- Administration ---


@product_router.post("", status_code=201, response_model=ProductIdResponse)
async def add_product(body: AddProductRequest, principal: Principal = Depends(_admin)) -> ProductIdResponse:
    command = AddProduct(
        name=body.name,
        description=body.description,
        price=body.price,
        quantity=body.quantity,
        sizes=_json_list(body.sizes),
        color=body.color,
        categories=_json_list(body.categories),
        image_url=body.image_url,
    )
    result = current_domain.process(command, asynchronous=False)
    return ProductIdResponse(product_id=result)


@product_router.put("/{product_id}", response_model=ProductResponse)
async def update_product(
    product_id: str,
    body: UpdateProductRequest,
    principal: Principal = Depends(_admin),
) -> ProductResponse:
    command = UpdateProduct(
        product_id=product_id,
        name=body.name,
        description=body.description,
        price=body.price,
        quantity=body.quantity,
        sizes=_json_list(body.sizes),
        color=body.color,
        categories=_json_list(body.categories),
        image_url=body.image_url,
    )
    current_domain.process(command, asynchronous=False)
    return ProductResponse.from_product(get_product(product_id))


@product_router.put("/{product_id}/quantity", response_model=ProductResponse)
async def set_stock_level(
    product_id: str,
    body: StockLevelRequest,
    principal: Principal = Depends(_admin),
) -> ProductResponse:
    current_domain.process(SetStockLevel(product_id=product_id, quantity=body.quantity), asynchronous=False)
    return ProductResponse.from_product(get_product(product_id))


@product_router.delete("/{product_id}", response_model=MessageResponse)
async def remove_product(product_id: str, principal: Principal = Depends(_admin)) -> MessageResponse:
    current_domain.process(RemoveProduct(product_id=product_id), asynchronous=False)
    return MessageResponse(message="Product deleted successfully")
