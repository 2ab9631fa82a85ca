"""Pydantic request/response schemas for the Catalogue API.

These are external contracts (anti-corruption layer), separate from the
Protean commands they are translated into.
"""

import json
from datetime import datetime

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Shared sub-models
# ---------------------------------------------------------------------------
class ImageSchema(BaseModel):
    url: str
    alt_text: str | None = None


class PaginationSchema(BaseModel):
    page: int
    limit: int
    total: int
    total_pages: int


class StatusResponse(BaseModel):
    status: str = "ok"


# ---------------------------------------------------------------------------
# Product Requests
# ---------------------------------------------------------------------------
class CreateProductRequest(BaseModel):
    name: str
    slug: str | None = None
    description: str | None = None
    short_description: str | None = None
    price: float = Field(ge=0)
    compare_price: float | None = Field(default=None, ge=0)
    cost_price: float | None = Field(default=None, ge=0)
    sku: str | None = None
    stock: int = Field(default=0, ge=0)
    weight: float | None = Field(default=None, ge=0)
    category_id: str | None = None
    brand: str | None = None
    tags: list[str] = Field(default_factory=list)
    is_featured: bool = False
    images: list[ImageSchema] = Field(default_factory=list)

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "name": "Kaos Polos Premium",
                    "price": 85000,
                    "compare_price": 120000,
                    "stock": 40,
                    "brand": "Uhuy Basics",
                    "tags": ["kaos", "cotton"],
                    "images": [{"url": "https://cdn.example.com/kaos.jpg"}],
                }
            ]
        }
    }


class UpdateProductRequest(BaseModel):
    name: str | None = None
    slug: str | None = None
    description: str | None = None
    short_description: str | None = None
    price: float | None = Field(default=None, ge=0)
    compare_price: float | None = Field(default=None, ge=0)
    cost_price: float | None = Field(default=None, ge=0)
    sku: str | None = None
    stock: int | None = Field(default=None, ge=0)
    weight: float | None = Field(default=None, ge=0)
    category_id: str | None = None
    brand: str | None = None
    tags: list[str] | None = None
    is_featured: bool | None = None
    is_active: bool | None = None


class AddVariantRequest(BaseModel):
    name: str
    sku: str | None = None
    price: float | None = Field(default=None, ge=0)
    stock: int = Field(default=0, ge=0)
    attributes: dict | None = None


# ---------------------------------------------------------------------------
# Product Responses
# ---------------------------------------------------------------------------
class ProductIdResponse(BaseModel):
    product_id: str


class VariantIdResponse(BaseModel):
    variant_id: str


class VariantSchema(BaseModel):
    id: str
    name: str
    sku: str | None = None
    price: float | None = None
    stock: int
    attributes: dict | None = None
    is_active: bool


class ProductCard(BaseModel):
    id: str
    name: str
    slug: str
    price: float
    compare_price: float | None = None
    stock: int
    brand: str | None = None
    category_id: str | None = None
    is_featured: bool
    sold_count: int
    rating_avg: float
    rating_count: int
    primary_image: str | None = None

    @classmethod
    def from_product(cls, product) -> "ProductCard":
        return cls(
            id=str(product.id),
            name=product.name,
            slug=product.slug,
            price=product.price,
            compare_price=product.compare_price,
            stock=product.stock or 0,
            brand=product.brand,
            category_id=str(product.category_id) if product.category_id else None,
            is_featured=bool(product.is_featured),
            sold_count=product.sold_count or 0,
            rating_avg=product.rating_avg or 0.0,
            rating_count=product.rating_count or 0,
            primary_image=product.primary_image_url,
        )


class ProductDetail(ProductCard):
    description: str | None = None
    short_description: str | None = None
    sku: str | None = None
    weight: float | None = None
    tags: list[str] = Field(default_factory=list)
    images: list[ImageSchema] = Field(default_factory=list)
    variants: list[VariantSchema] = Field(default_factory=list)
    rating_breakdown: dict[int, int] = Field(default_factory=dict)
    created_at: datetime | None = None

    @classmethod
    def from_product(cls, product) -> "ProductDetail":
        card = ProductCard.from_product(product)
        images = sorted(product.images, key=lambda i: (not i.is_primary, i.sort_order or 0))
        return cls(
            **card.model_dump(),
            description=product.description,
            short_description=product.short_description,
            sku=product.sku,
            weight=product.weight,
            tags=product.tag_list,
            images=[ImageSchema(url=i.url, alt_text=i.alt_text) for i in images],
            variants=[
                VariantSchema(
                    id=str(v.id),
                    name=v.name,
                    sku=v.sku,
                    price=v.price,
                    stock=v.stock or 0,
                    attributes=json.loads(v.attributes) if v.attributes else None,
                    is_active=bool(v.is_active),
                )
                for v in product.variants
                if v.is_active
            ],
            rating_breakdown={int(r): n for r, n in product.distribution.items()},
            created_at=product.created_at,
        )


class ProductListResponse(BaseModel):
    products: list[ProductCard]
    pagination: PaginationSchema


class ProductCollectionResponse(BaseModel):
    products: list[ProductCard]


# ---------------------------------------------------------------------------
# Categories
# ---------------------------------------------------------------------------
class CreateCategoryRequest(BaseModel):
    name: str
    slug: str | None = None
    description: str | None = None
    image_url: str | None = None
    parent_id: str | None = None
    sort_order: int = 0


class UpdateCategoryRequest(BaseModel):
    name: str | None = None
    slug: str | None = None
    description: str | None = None
    image_url: str | None = None
    parent_id: str | None = None
    sort_order: int | None = None


class CategoryIdResponse(BaseModel):
    category_id: str


class CategorySchema(BaseModel):
    id: str
    name: str
    slug: str
    description: str | None = None
    image_url: str | None = None
    parent_id: str | None = None
    sort_order: int

    @classmethod
    def from_category(cls, category) -> "CategorySchema":
        return cls(
            id=str(category.id),
            name=category.name,
            slug=category.slug,
            description=category.description,
            image_url=category.image_url,
            parent_id=str(category.parent_id) if category.parent_id else None,
            sort_order=category.sort_order or 0,
        )


class CategoryListResponse(BaseModel):
    categories: list[CategorySchema]


# ---------------------------------------------------------------------------
# Banners
# ---------------------------------------------------------------------------
class CreateBannerRequest(BaseModel):
    title: str
    subtitle: str | None = None
    image_url: str
    link_url: str | None = None
    sort_order: int = 0


class BannerIdResponse(BaseModel):
    banner_id: str


class BannerSchema(BaseModel):
    id: str
    title: str
    subtitle: str | None = None
    image_url: str
    link_url: str | None = None
    sort_order: int


class BannerListResponse(BaseModel):
    banners: list[BannerSchema]
