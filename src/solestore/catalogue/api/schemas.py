"""Pydantic request/response schemas for the Catalogue API."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

# --- Request Schemas ---


class AddProductRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "name": "Trail Runner",
                    "description": "Lightweight trail running shoe with a grippy outsole.",
                    "price": 89.99,
                    "quantity": 25,
                    "sizes": ["8", "9", "9.5", "10"],
                    "color": "Black",
                    "categories": ["Men"],
                    "image_url": "https://cdn.example.com/trail-runner.jpg",
                }
            ]
        }
    }

    name: str = Field(..., max_length=255)
    description: str
    price: float
    quantity: int
    sizes: list[str | int | float] = Field(default_factory=list)
    color: str | None = Field(None, max_length=50)
    categories: list[str] = Field(default_factory=list)
    image_url: str | None = Field(None, max_length=500)


class UpdateProductRequest(BaseModel):
    model_config = {"json_schema_extra": {"examples": [{"price": 79.99, "color": "Charcoal"}]}}

    name: str | None = Field(None, max_length=255)
    description: str | None = None
    price: float | None = None
    quantity: int | None = None
    sizes: list[str | int | float] | None = None
    color: str | None = Field(None, max_length=50)
    categories: list[str] | None = None
    image_url: str | None = Field(None, max_length=500)


class StockLevelRequest(BaseModel):
    model_config = {"json_schema_extra": {"examples": [{"quantity": 40}]}}

    quantity: int


# --- Response Schemas ---


class ProductResponse(BaseModel):
    id: str
    name: str
    description: str
    price: float
    quantity: int
    sizes: list[str]
    color: str | None = None
    categories: list[str]
    image_url: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_product(cls, product) -> ProductResponse:
        return cls(
            id=str(product.id),
            name=product.name,
            description=product.description,
            price=product.price,
            quantity=product.quantity,
            sizes=product.size_list,
            color=product.color,
            categories=product.category_list,
            image_url=product.image_url,
            created_at=product.created_at,
            updated_at=product.updated_at,
        )


class ProductListResponse(BaseModel):
    products: list[ProductResponse]
    pagination: dict


class CategoryListingResponse(BaseModel):
    category: str
    count: int
    products: list[ProductResponse]


class ProductIdResponse(BaseModel):
    product_id: str


class MessageResponse(BaseModel):
    message: str
