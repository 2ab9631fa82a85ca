"""FastAPI endpoints for the catalogue: products, categories and banners."""

import json

from fastapi import APIRouter, Depends
from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain
from pydantic import BaseModel

from storefront.catalogue.api.schemas import (
    AddVariantRequest,
    BannerIdResponse,
    BannerListResponse,
    BannerSchema,
    CategoryIdResponse,
    CategoryListResponse,
    CategorySchema,
    CreateBannerRequest,
    CreateCategoryRequest,
    CreateProductRequest,
    ProductCard,
    ProductCollectionResponse,
    ProductDetail,
    ProductIdResponse,
    ProductListResponse,
    StatusResponse,
    UpdateCategoryRequest,
    UpdateProductRequest,
    VariantIdResponse,
)
from storefront.catalogue.banner.banner import CreateBanner, list_active_banners
from storefront.catalogue.category.management import (
    CreateCategory,
    DeactivateCategory,
    UpdateCategory,
    find_category_by_slug,
    list_active_categories,
)
from storefront.catalogue.product.creation import CreateProduct
from storefront.catalogue.product.management import AddVariant, DeactivateProduct, UpdateProduct
from storefront.catalogue.product.product import Product
from storefront.catalogue.product.repository import ProductSearch
from storefront.identity.api.dependencies import get_optional_caller, require_admin
from storefront.identity.caller import Caller
from storefront.reviews.api.routes import review_schemas
from storefront.reviews.api.schemas import ReviewSchema
from storefront.reviews.review.listing import latest_reviews
from storefront.shared.paging import Page
from storefront.wishlist.toggle import is_wishlisted

product_router = APIRouter(prefix="/products", tags=["products"])
category_router = APIRouter(prefix="/categories", tags=["categories"])
banner_router = APIRouter(prefix="/banners", tags=["banners"])


class ProductPageResponse(BaseModel):
    product: ProductDetail
    reviews: list[ReviewSchema]
    is_wishlisted: bool
    related: list[ProductCard]


# --- Product endpoints ---


@product_router.get("", response_model=ProductListResponse)
async def list_products(
    page: int = 1,
    limit: int = 12,
    category: str | None = None,
    search: str | None = None,
    sort: str = "created_at",
    order: str = "desc",
    min_price: float | None = None,
    max_price: float | None = None,
    brand: str | None = None,
    featured: bool = False,
    tags: str | None = None,
) -> ProductListResponse:
    criteria = ProductSearch(
        category=category,
        search=search,
        min_price=min_price,
        max_price=max_price,
        brand=brand,
        featured=featured,
        tag=tags,
        sort=sort,
        order=order,
    )
    result, meta = current_domain.repository_for(Product).search(criteria, Page.of(page, limit))
    return ProductListResponse(
        products=[ProductCard.from_product(p) for p in result.items],
        pagination=meta,
    )


@product_router.get("/featured", response_model=ProductCollectionResponse)
async def featured_products() -> ProductCollectionResponse:
    products = current_domain.repository_for(Product).featured()
    return ProductCollectionResponse(products=[ProductCard.from_product(p) for p in products])


@product_router.get("/bestsellers", response_model=ProductCollectionResponse)
async def bestseller_products() -> ProductCollectionResponse:
    products = current_domain.repository_for(Product).bestsellers()
    return ProductCollectionResponse(products=[ProductCard.from_product(p) for p in products])


@product_router.get("/{slug}", response_model=ProductPageResponse)
async def product_detail(slug: str, caller: Caller | None = Depends(get_optional_caller)) -> ProductPageResponse:
    repo = current_domain.repository_for(Product)
    product = repo.find_by_slug(slug)
    if product is None:
        raise ObjectNotFoundError(f"Product `{slug}` does not exist")

    return ProductPageResponse(
        product=ProductDetail.from_product(product),
        reviews=review_schemas(latest_reviews(product.id)),
        is_wishlisted=is_wishlisted(caller.user_id, product.id) if caller else False,
        related=[ProductCard.from_product(p) for p in repo.related(product)],
    )


@product_router.post("", status_code=201, response_model=ProductIdResponse)
async def create_product(body: CreateProductRequest, _admin: Caller = Depends(require_admin)) -> ProductIdResponse:
    command = CreateProduct(
        name=body.name,
        slug=body.slug,
        description=body.description,
        short_description=body.short_description,
        price=body.price,
        compare_price=body.compare_price,
        cost_price=body.cost_price,
        sku=body.sku,
        stock=body.stock,
        weight=body.weight,
        category_id=body.category_id,
        brand=body.brand,
        tags=json.dumps(body.tags),
        is_featured=body.is_featured,
        images=json.dumps([i.model_dump() for i in body.images]),
    )
    product_id = current_domain.process(command, asynchronous=False)
    return ProductIdResponse(product_id=product_id)


@product_router.put("/{product_id}", response_model=StatusResponse)
async def update_product(
    product_id: str, body: UpdateProductRequest, _admin: Caller = Depends(require_admin)
) -> StatusResponse:
    changes = body.model_dump(exclude_none=True)
    if "tags" in changes:
        changes["tags"] = json.dumps(changes["tags"])
    current_domain.process(UpdateProduct(product_id=product_id, **changes), asynchronous=False)
    return StatusResponse()


@product_router.post("/{product_id}/variants", status_code=201, response_model=VariantIdResponse)
async def add_variant(
    product_id: str, body: AddVariantRequest, _admin: Caller = Depends(require_admin)
) -> VariantIdResponse:
    command = AddVariant(
        product_id=product_id,
        name=body.name,
        sku=body.sku,
        price=body.price,
        stock=body.stock,
        attributes=json.dumps(body.attributes) if body.attributes else None,
    )
    variant_id = current_domain.process(command, asynchronous=False)
    return VariantIdResponse(variant_id=variant_id)


@product_router.delete("/{product_id}", response_model=StatusResponse)
async def delete_product(product_id: str, _admin: Caller = Depends(require_admin)) -> StatusResponse:
    current_domain.process(DeactivateProduct(product_id=product_id), asynchronous=False)
    return StatusResponse()


# --- Category endpoints ---


@category_router.get("", response_model=CategoryListResponse)
async def list_categories() -> CategoryListResponse:
    return CategoryListResponse(categories=[CategorySchema.from_category(c) for c in list_active_categories()])


@category_router.get("/{slug}", response_model=CategorySchema)
async def category_detail(slug: str) -> CategorySchema:
    return CategorySchema.from_category(find_category_by_slug(slug))


@category_router.post("", status_code=201, response_model=CategoryIdResponse)
async def create_category(body: CreateCategoryRequest, _admin: Caller = Depends(require_admin)) -> CategoryIdResponse:
    category_id = current_domain.process(CreateCategory(**body.model_dump()), asynchronous=False)
    return CategoryIdResponse(category_id=category_id)


@category_router.put("/{category_id}", response_model=StatusResponse)
async def update_category(
    category_id: str, body: UpdateCategoryRequest, _admin: Caller = Depends(require_admin)
) -> StatusResponse:
    command = UpdateCategory(category_id=category_id, **body.model_dump(exclude_none=True))
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@category_router.delete("/{category_id}", response_model=StatusResponse)
async def delete_category(category_id: str, _admin: Caller = Depends(require_admin)) -> StatusResponse:
    current_domain.process(DeactivateCategory(category_id=category_id), asynchronous=False)
    return StatusResponse()


# --- Banner endpoints ---


@banner_router.get("", response_model=BannerListResponse)
async def list_banners() -> BannerListResponse:
    banners = [
        BannerSchema(
            id=str(b.id),
            title=b.title,
            subtitle=b.subtitle,
            image_url=b.image_url,
            link_url=b.link_url,
            sort_order=b.sort_order or 0,
        )
        for b in list_active_banners()
    ]
    return BannerListResponse(banners=banners)


@banner_router.post("", status_code=201, response_model=BannerIdResponse)
async def create_banner(body: CreateBannerRequest, _admin: Caller = Depends(require_admin)) -> BannerIdResponse:
    banner_id = current_domain.process(CreateBanner(**body.model_dump()), asynchronous=False)
    return BannerIdResponse(banner_id=banner_id)
