"""FastAPI endpoints for the caller's wishlist."""

from fastapi import APIRouter, Depends
from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from storefront.catalogue.api.schemas import ProductCard
from storefront.catalogue.product.product import Product
from storefront.identity.api.dependencies import get_current_caller
from storefront.identity.caller import Caller
from storefront.wishlist.api.schemas import (
    StatusResponse,
    ToggleWishlistRequest,
    ToggleWishlistResponse,
    WishlistEntrySchema,
    WishlistResponse,
)
from storefront.wishlist.entry import WishlistEntry
from storefront.wishlist.toggle import RemoveWishlistEntry, ToggleWishlist

wishlist_router = APIRouter(prefix="/wishlist", tags=["wishlist"])


@wishlist_router.get("", response_model=WishlistResponse)
async def get_wishlist(caller: Caller = Depends(get_current_caller)) -> WishlistResponse:
    product_repo = current_domain.repository_for(Product)
    items = []
    for entry in current_domain.repository_for(WishlistEntry).for_user(caller.user_id):
        try:
            product = product_repo.get(entry.product_id)
        except ObjectNotFoundError:
            continue
        items.append(
            WishlistEntrySchema(id=str(entry.id), product=ProductCard.from_product(product), created_at=entry.created_at)
        )
    return WishlistResponse(items=items)


@wishlist_router.post("", response_model=ToggleWishlistResponse)
async def toggle_wishlist(
    body: ToggleWishlistRequest, caller: Caller = Depends(get_current_caller)
) -> ToggleWishlistResponse:
    added = current_domain.process(
        ToggleWishlist(user_id=caller.user_id, product_id=body.product_id), asynchronous=False
    )
    return ToggleWishlistResponse(is_wishlisted=added)


@wishlist_router.delete("/{entry_id}", response_model=StatusResponse)
async def remove_wishlist_entry(entry_id: str, caller: Caller = Depends(get_current_caller)) -> StatusResponse:
    current_domain.process(RemoveWishlistEntry(user_id=caller.user_id, entry_id=entry_id), asynchronous=False)
    return StatusResponse()
