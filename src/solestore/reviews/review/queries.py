"""Review listings and aggregate statistics."""

from protean.exceptions import ValidationError
from protean.utils.globals import current_domain

from solestore.reviews.review.review import Review
from solestore.shared.pagination import Page, fetch_all, paginate, sort_records

_SORTABLE_FIELDS = ("rating", "created_at", "updated_at")


def _reviews():
    return current_domain.repository_for(Review)._dao.query


def rating_breakdown(reviews) -> list[dict]:
    counts = {}
    for review in reviews:
        counts[review.rating] = counts.get(review.rating, 0) + 1
    return [{"rating": rating, "count": counts[rating]} for rating in sorted(counts)]


def _average(reviews) -> float:
    if not reviews:
        return 0.0
    return round(sum(r.rating for r in reviews) / len(reviews), 2)


def get_review(review_id) -> Review:
    return current_domain.repository_for(Review).get(review_id)


def reviews_by_user(user_id) -> list[Review]:
    return sort_records(fetch_all(_reviews().filter(user_id=str(user_id))), "created_at")


def list_reviews(rating=None, sort_by="created_at", sort_order="desc", page=1, page_size=10):
    """A page of reviews plus statistics over everything the filter matches.

    Returns:
        (Page, dict) where the dict has average_rating, total_reviews and
        rating_breakdown.
    """
    queryset = _reviews()
    if rating is not None:
        if not 1 <= rating <= 5:
            raise ValidationError({"rating": ["Rating filter must be between 1 and 5"]})
        queryset = queryset.filter(rating=rating)
    reviews = fetch_all(queryset)

    attribute = sort_by if sort_by in _SORTABLE_FIELDS else "created_at"
    page_of_reviews: Page = paginate(
        sort_records(reviews, attribute, descending=sort_order != "asc"),
        page,
        page_size,
    )
    statistics = {
        "average_rating": _average(reviews),
        "total_reviews": len(reviews),
        "rating_breakdown": rating_breakdown(reviews),
    }
    return page_of_reviews, statistics


def review_stats(recent=5) -> dict:
    reviews = fetch_all(_reviews())
    ratings = [r.rating for r in reviews]
    return {
        "overview": {
            "total_reviews": len(reviews),
            "average_rating": _average(reviews),
            "max_rating": max(ratings, default=0),
            "min_rating": min(ratings, default=0),
        },
        "rating_distribution": rating_breakdown(reviews),
        "recent_reviews": sort_records(reviews, "created_at")[:recent],
    }
