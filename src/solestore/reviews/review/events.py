"""Domain events for the Review aggregate."""

from protean.fields import DateTime, Identifier, Integer, Text

from solestore.domain import shop


@shop.event(part_of="Review")
class ReviewSubmitted:
    __version__ = 1

    review_id: Identifier(required=True)
    user_id: Identifier(required=True)
    rating: Integer(required=True)
    submitted_at: DateTime(required=True)


@shop.event(part_of="Review")
class ReviewEdited:
    __version__ = 1

    review_id: Identifier(required=True)
    changed_fields: Text(required=True)  # JSON array
    rating: Integer(required=True)
    edited_at: DateTime(required=True)
