"""Reviews API package."""

from solestore.reviews.api.routes import review_router

__all__ = ["review_router"]
