"""FastAPI endpoints for product reviews."""

from fastapi import APIRouter, Depends
from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from storefront.identity.api.dependencies import get_current_caller
from storefront.identity.caller import Caller
from storefront.identity.profile import Profile
from storefront.reviews.api.schemas import (
    PostReviewRequest,
    ReviewIdResponse,
    ReviewListResponse,
    ReviewSchema,
    StatusResponse,
)
from storefront.reviews.review.listing import reviews_for_product
from storefront.reviews.review.removal import DeleteReview
from storefront.reviews.review.submission import PostReview
from storefront.shared.paging import Page

review_router = APIRouter(prefix="/reviews", tags=["reviews"])


def author_names(reviews) -> dict[str, str | None]:
    repo = current_domain.repository_for(Profile)
    names = {}
    for user_id in {str(r.user_id) for r in reviews}:
        try:
            names[user_id] = repo.get(user_id).full_name
        except ObjectNotFoundError:
            names[user_id] = None
    return names


def review_schemas(reviews) -> list[ReviewSchema]:
    names = author_names(reviews)
    return [ReviewSchema.from_review(r, author_name=names.get(str(r.user_id))) for r in reviews]


@review_router.get("/{product_id}", response_model=ReviewListResponse)
async def list_reviews(
    product_id: str,
    page: int = 1,
    limit: int = 10,
    sort: str = "created_at",
    order: str = "desc",
) -> ReviewListResponse:
    paging = Page.of(page, limit, default_limit=10)
    reviews, breakdown, meta = reviews_for_product(product_id, paging, sort=sort, order=order)
    return ReviewListResponse(reviews=review_schemas(reviews), rating_breakdown=breakdown, pagination=meta)


@review_router.post("", status_code=201, response_model=ReviewIdResponse)
async def post_review(body: PostReviewRequest, caller: Caller = Depends(get_current_caller)) -> ReviewIdResponse:
    command = PostReview(
        user_id=caller.user_id,
        product_id=body.product_id,
        rating=body.rating,
        order_id=body.order_id,
        title=body.title,
        comment=body.comment,
    )
    review_id = current_domain.process(command, asynchronous=False)
    return ReviewIdResponse(review_id=review_id)


@review_router.delete("/{review_id}", response_model=StatusResponse)
async def delete_review(review_id: str, caller: Caller = Depends(get_current_caller)) -> StatusResponse:
    current_domain.process(DeleteReview(user_id=caller.user_id, review_id=review_id), asynchronous=False)
    return StatusResponse()
