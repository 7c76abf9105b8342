"""Review aggregate: one shopper's verdict on the store as a whole.

Reviews are about the site, not individual products. Each user may hold at
most one review; further feedback goes through editing it.
"""

import json
from datetime import UTC, datetime

from protean import atomic_change
from protean.exceptions import ValidationError
from protean.fields import DateTime, Identifier, Integer, String, Text

from solestore.domain import shop
from solestore.reviews.review.events import ReviewEdited, ReviewSubmitted

# Sentinel for distinguishing "not provided" from None in partial updates
_UNSET = object()

HEADLINE_MAX_LENGTH = 200
BODY_MAX_LENGTH = 2000


def check_rating(rating):
    if isinstance(rating, bool) or not isinstance(rating, int) or not 1 <= rating <= 5:
        raise ValidationError({"rating": ["Rating must be an integer between 1 and 5"]})
    return rating


def clean_text(value, field, label, max_length):
    """Trimmed text, rejected when blank or longer than `max_length`."""
    if not isinstance(value, str) or not value.strip():
        raise ValidationError({field: [f"{label} must be a non-empty string"]})
    value = value.strip()
    if len(value) > max_length:
        raise ValidationError({field: [f"{label} must be {max_length} characters or less"]})
    return value


@shop.aggregate
class Review:
    user_id: Identifier(required=True, unique=True)
    rating: Integer(required=True, min_value=1, max_value=5)
    headline: String(required=True, max_length=HEADLINE_MAX_LENGTH)
    body: Text(required=True)
    created_at: DateTime()
    updated_at: DateTime()

    @classmethod
    def submit(cls, user_id, rating, headline, body):
        now = datetime.now(UTC)
        review = cls(
            user_id=user_id,
            rating=check_rating(rating),
            headline=clean_text(headline, "headline", "Review headline", HEADLINE_MAX_LENGTH),
            body=clean_text(body, "body", "Review text", BODY_MAX_LENGTH),
            created_at=now,
            updated_at=now,
        )
        review.raise_(
            ReviewSubmitted(
                review_id=review.id,
                user_id=user_id,
                rating=review.rating,
                submitted_at=now,
            )
        )
        return review

    def edit(self, rating=_UNSET, headline=_UNSET, body=_UNSET):
        changed = []
        now = datetime.now(UTC)
        with atomic_change(self):
            if rating is not _UNSET:
                self.rating = check_rating(rating)
                changed.append("rating")
            if headline is not _UNSET:
                self.headline = clean_text(headline, "headline", "Review headline", HEADLINE_MAX_LENGTH)
                changed.append("headline")
            if body is not _UNSET:
                self.body = clean_text(body, "body", "Review text", BODY_MAX_LENGTH)
                changed.append("body")
            self.updated_at = now

        if changed:
            self.raise_(
                ReviewEdited(
                    review_id=self.id,
                    changed_fields=json.dumps(changed),
                    rating=self.rating,
                    edited_at=now,
                )
            )
