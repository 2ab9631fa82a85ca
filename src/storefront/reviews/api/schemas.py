"""Pydantic request/response schemas for the Reviews API."""

from datetime import datetime

from pydantic import BaseModel


class PostReviewRequest(BaseModel):
    product_id: str
    # Range is checked by the domain so an out-of-range rating is a 400
    rating: int | None = None
    order_id: str | None = None
    title: str | None = None
    comment: str | None = None

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "product_id": "prod-001",
                    "rating": 5,
                    "order_id": "ord-001",
                    "title": "Mantap",
                    "comment": "Bahannya adem dan pas di badan.",
                }
            ]
        }
    }


class ReviewIdResponse(BaseModel):
    review_id: str


class ReviewSchema(BaseModel):
    id: str
    product_id: str
    user_id: str
    author_name: str | None = None
    rating: int
    title: str | None = None
    comment: str | None = None
    is_verified: bool
    created_at: datetime | None = None

    @classmethod
    def from_review(cls, review, author_name=None) -> "ReviewSchema":
        return cls(
            id=str(review.id),
            product_id=str(review.product_id),
            user_id=str(review.user_id),
            author_name=author_name,
            rating=review.rating,
            title=review.title,
            comment=review.comment,
            is_verified=bool(review.is_verified),
            created_at=review.created_at,
        )


class PaginationSchema(BaseModel):
    page: int
    limit: int
    total: int
    total_pages: int


class ReviewListResponse(BaseModel):
    reviews: list[ReviewSchema]
    rating_breakdown: dict[int, int]
    pagination: PaginationSchema


class StatusResponse(BaseModel):
    status: str = "ok"
