"""FastAPI endpoints for site reviews."""

from fastapi import APIRouter, Depends, Request
from protean.utils.globals import current_domain

from solestore.api.auth import authenticated, requires
from solestore.identity.access import Capability, Principal
from solestore.identity.user.queries import get_user
from solestore.reviews.api.schemas import (
    EditReviewRequest,
    MessageResponse,
    ReviewListResponse,
    ReviewResponse,
    SubmitReviewRequest,
    UserReviewsResponse,
)
from solestore.reviews.review.queries import get_review, list_reviews, review_stats, reviews_by_user
from solestore.reviews.review.submission import EditReview, RemoveReview, SubmitReview
from solestore.shared.pagination import resolve_page_size

review_router = APIRouter(prefix="/reviews", tags=["reviews"])


# --- Public endpoints ---


@review_router.get("", response_model=ReviewListResponse)
async def all_reviews(
    request: Request,
    page: int = 1,
    limit: int | None = None,
    rating: int | None = None,
    sort_by: str = "created_at",
    sort_order: str = "desc",
) -> ReviewListResponse:
    settings = request.app.state.settings
    result, statistics = list_reviews(
        rating=rating,
        sort_by=sort_by,
        sort_order=sort_order,
        page=page,
        page_size=resolve_page_size(limit, settings.review_page_size, settings.max_page_size),
    )
    return ReviewListResponse(
        reviews=[ReviewResponse.from_review(r) for r in result.items],
        pagination=result.metadata(),
        statistics=statistics,
    )


@review_router.get("/stats")
async def stats() -> dict:
    summary = review_stats()
    summary["recent_reviews"] = [ReviewResponse.from_review(r).model_dump() for r in summary["recent_reviews"]]
    return summary


@review_router.get("/{review_id}", response_model=ReviewResponse)
async def get_review_details(review_id: str) -> ReviewResponse:
    return ReviewResponse.from_review(get_review(review_id))


# --- Authenticated endpoints ---


@review_router.post("", status_code=201, response_model=ReviewResponse)
async def submit_review(
    body: SubmitReviewRequest,
    principal: Principal = Depends(requires(Capability.WRITE_REVIEWS)),
) -> ReviewResponse:
    command = SubmitReview(
        user_id=principal.user_id,
        rating=body.rating,
        headline=body.headline,
        body=body.body,
    )
    review_id = current_domain.process(command, asynchronous=False)
    return ReviewResponse.from_review(get_review(review_id))


@review_router.get("/user/{user_id}", response_model=UserReviewsResponse)
async def user_reviews(user_id: str, principal: Principal = Depends(authenticated)) -> UserReviewsResponse:
    user = get_user(user_id)
    return UserReviewsResponse(
        user={"id": str(user.id), "username": user.username, "email": user.email},
        reviews=[ReviewResponse.from_review(r) for r in reviews_by_user(user_id)],
    )


@review_router.put("/{review_id}", response_model=ReviewResponse)
async def edit_review(
    review_id: str,
    body: EditReviewRequest,
    principal: Principal = Depends(authenticated),
) -> ReviewResponse:
    command = EditReview(
        review_id=review_id,
        actor_id=principal.user_id,
        actor_role=principal.role,
        rating=body.rating,
        headline=body.headline,
        body=body.body,
    )
    current_domain.process(command, asynchronous=False)
    return ReviewResponse.from_review(get_review(review_id))


@review_router.delete("/{review_id}", response_model=MessageResponse)
async def remove_review(review_id: str, principal: Principal = Depends(authenticated)) -> MessageResponse:
    command = RemoveReview(review_id=review_id, actor_id=principal.user_id, actor_role=principal.role)
    current_domain.process(command, asynchronous=False)
    return MessageResponse(message="Review deleted successfully")
