"""Tests for the Review aggregate and rating bounds."""

import pytest
from protean.exceptions import ValidationError

from storefront.reviews.review.events import ReviewPosted
from storefront.reviews.review.review import Review, check_rating


class TestRatingBounds:
    @pytest.mark.parametrize("rating", [1, 3, 5])
    def test_in_range(self, rating):
        check_rating(rating)

    @pytest.mark.parametrize("rating", [0, 6, None])
    def test_out_of_range(self, rating):
        with pytest.raises(ValidationError) as exc:
            check_rating(rating)
        assert exc.value.messages == {"rating": ["Rating must be between 1 and 5"]}


class TestPost:
    def test_post(self):
        review = Review.post(user_id="user-001", product_id="prod-001", rating=4, is_verified=False, title="Oke")

        assert review.rating == 4
        assert review.created_at is not None
        event = review._events[-1]
        assert isinstance(event, ReviewPosted)
        assert event.rating == 4

    def test_post_rejects_bad_rating(self):
        with pytest.raises(ValidationError):
            Review.post(user_id="user-001", product_id="prod-001", rating=9, is_verified=False)
