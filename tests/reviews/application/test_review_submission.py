"""Application tests for submitting, editing and removing reviews."""

import pytest
from protean import current_domain
from protean.exceptions import ObjectNotFoundError

from solestore.errors import AccessDenied, DuplicateEntry
from solestore.identity.user.user import Role
from solestore.reviews.review.review import Review
from solestore.reviews.review.submission import EditReview, RemoveReview, SubmitReview


@pytest.fixture()
def author(make_user):
    return make_user()


def _submit(user, rating=4, headline="Quick delivery", body="Shoes arrived two days after ordering."):
    return current_domain.process(
        SubmitReview(user_id=user.id, rating=rating, headline=headline, body=body),
        asynchronous=False,
    )


def _edit(review_id, actor, **changes):
    current_domain.process(
        EditReview(review_id=review_id, actor_id=actor.id, actor_role=actor.role, **changes),
        asynchronous=False,
    )


def _remove(review_id, actor):
    current_domain.process(
        RemoveReview(review_id=review_id, actor_id=actor.id, actor_role=actor.role),
        asynchronous=False,
    )


class TestSubmitReviewCommand:
    def test_submit(self, author):
        review_id = _submit(author)
        review = current_domain.repository_for(Review).get(review_id)
        assert str(review.user_id) == str(author.id)
        assert review.rating == 4

    def test_one_review_per_user(self, author):
        _submit(author)
        with pytest.raises(DuplicateEntry) as exc:
            _submit(author, rating=1)
        assert exc.value.messages == {"user_id": ["User has already submitted a review. Use update instead."]}

    def test_unknown_author(self):
        with pytest.raises(ObjectNotFoundError):
            current_domain.process(
                SubmitReview(
                    user_id="5b0ab7d4-8c43-4c4f-9a39-3f3c3c8b1e11",
                    rating=5,
                    headline="Great",
                    body="Great shop",
                ),
                asynchronous=False,
            )


class TestEditReviewCommand:
    def test_author_edits(self, author):
        review_id = _submit(author)
        _edit(review_id, author, rating=5, headline="Even better")
        review = current_domain.repository_for(Review).get(review_id)
        assert review.rating == 5
        assert review.headline == "Even better"
        assert review.body == "Shoes arrived two days after ordering."

    def test_admin_edits_any_review(self, author, make_user):
        review_id = _submit(author)
        _edit(review_id, make_user(role=Role.ADMIN.value), rating=1)
        assert current_domain.repository_for(Review).get(review_id).rating == 1

    def test_other_user_is_refused(self, author, make_user):
        review_id = _submit(author)
        with pytest.raises(AccessDenied):
            _edit(review_id, make_user(), rating=1)
        assert current_domain.repository_for(Review).get(review_id).rating == 4


class TestRemoveReviewCommand:
    def test_author_removes(self, author):
        review_id = _submit(author)
        _remove(review_id, author)
        with pytest.raises(ObjectNotFoundError):
            current_domain.repository_for(Review).get(review_id)

    def test_user_may_review_again_after_removal(self, author):
        _remove(_submit(author), author)
        assert _submit(author, rating=2)

    def test_other_user_is_refused(self, author, make_user):
        review_id = _submit(author)
        with pytest.raises(AccessDenied):
            _remove(review_id, make_user())

    def test_admin_removes(self, author, make_user):
        review_id = _submit(author)
        _remove(review_id, make_user(role=Role.ADMIN.value))
        with pytest.raises(ObjectNotFoundError):
            current_domain.repository_for(Review).get(review_id)
