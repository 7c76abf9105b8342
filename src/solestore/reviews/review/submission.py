"""Submitting, editing and removing reviews."""

from protean import handle
from protean.fields import Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from solestore.domain import shop
from solestore.errors import DuplicateEntry
from solestore.identity.access import Capability, Principal
from solestore.identity.user.user import User
from solestore.reviews.review.review import Review
from solestore.utils.logging import get_logger

logger = get_logger(__name__)


@shop.command(part_of="Review")
class SubmitReview:
    """The author is always the authenticated caller."""

    user_id = Identifier(required=True)
    rating = Integer(required=True)
    headline = String(required=True, max_length=1000)
    body = Text(required=True)


@shop.command(part_of="Review")
class EditReview:
    review_id = Identifier(required=True)
    actor_id = Identifier(required=True)
    actor_role = String(required=True, max_length=10)
    rating = Integer()
    headline = String(max_length=1000)
    body = Text()


@shop.command(part_of="Review")
class RemoveReview:
    review_id = Identifier(required=True)
    actor_id = Identifier(required=True)
    actor_role = String(required=True, max_length=10)


def _review_by(user_id):
    found = current_domain.repository_for(Review)._dao.query.filter(user_id=str(user_id)).all()
    return found.items[0] if found.items else None


def _editable(command):
    """Load the review and check the actor may change it."""
    review = current_domain.repository_for(Review).get(command.review_id)
    actor = Principal(user_id=str(command.actor_id), role=command.actor_role)
    if not actor.can(Capability.MODERATE_REVIEWS):
        actor.ensure_owner_or_admin(review.user_id, "Access denied - You can only modify your own review")
    return review, actor


@shop.command_handler(part_of=Review)
class ReviewHandler:
    @handle(SubmitReview)
    def submit_review(self, command):
        # Author must exist
        current_domain.repository_for(User).get(command.user_id)
        if _review_by(command.user_id) is not None:
            raise DuplicateEntry({"user_id": ["User has already submitted a review. Use update instead."]})

        review = Review.submit(
            user_id=command.user_id,
            rating=command.rating,
            headline=command.headline,
            body=command.body,
        )
        current_domain.repository_for(Review).add(review)
        return str(review.id)

    @handle(EditReview)
    def edit_review(self, command):
        review, _ = _editable(command)
        changes = {
            field: getattr(command, field)
            for field in ("rating", "headline", "body")
            if getattr(command, field) is not None
        }
        review.edit(**changes)
        current_domain.repository_for(Review).add(review)

    @handle(RemoveReview)
    def remove_review(self, command):
        review, actor = _editable(command)
        current_domain.repository_for(Review)._dao.delete(review)
        logger.info("review_removed", review_id=str(review.id), removed_by=actor.user_id)
