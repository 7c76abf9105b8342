"""Pydantic request/response schemas for the Reviews API."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel


class SubmitReviewRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "rating": 5,
                    "headline": "Great fit, fast delivery",
                    "body": "Ordered two pairs in different sizes and both arrived in two days.",
                }
            ]
        }
    }

    rating: int
    headline: str
    body: str


class EditReviewRequest(BaseModel):
    model_config = {"json_schema_extra": {"examples": [{"rating": 4, "body": "Still great after a month."}]}}

    rating: int | None = None
    headline: str | None = None
    body: str | None = None


class ReviewResponse(BaseModel):
    id: str
    user_id: str
    rating: int
    headline: str
    body: str
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_review(cls, review) -> ReviewResponse:
        return cls(
            id=str(review.id),
            user_id=str(review.user_id),
            rating=review.rating,
            headline=review.headline,
            body=review.body,
            created_at=review.created_at,
            updated_at=review.updated_at,
        )


class ReviewListResponse(BaseModel):
    reviews: list[ReviewResponse]
    pagination: dict
    statistics: dict


class UserReviewsResponse(BaseModel):
    user: dict
    reviews: list[ReviewResponse]


class MessageResponse(BaseModel):
    message: str
