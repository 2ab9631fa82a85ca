"""Pydantic request/response schemas for the Wishlist API."""

from datetime import datetime

from pydantic import BaseModel

from storefront.catalogue.api.schemas import ProductCard


class ToggleWishlistRequest(BaseModel):
    product_id: str


class ToggleWishlistResponse(BaseModel):
    is_wishlisted: bool


class WishlistEntrySchema(BaseModel):
    id: str
    product: ProductCard
    created_at: datetime | None = None


class WishlistResponse(BaseModel):
    items: list[WishlistEntrySchema]


class StatusResponse(BaseModel):
    status: str = "ok"
