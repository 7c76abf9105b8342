"""Application tests for profile updates, password changes and account deletion."""

import pytest
from protean import current_domain
from protean.exceptions import ObjectNotFoundError, ValidationError

from solestore.errors import AccessDenied, AuthenticationFailed, DuplicateEntry
from solestore.identity.credentials import verify_password
from solestore.identity.user.account import ChangePassword, DeleteUser, UpdateUser
from solestore.identity.user.user import Role, User


_ITERATIONS = 1000


def _get(user_id):
    return current_domain.repository_for(User).get(user_id)


class TestUpdateUserCommand:
    def test_owner_updates_profile(self, make_user):
        user = make_user()
        current_domain.process(
            UpdateUser(user_id=user.id, actor_id=user.id, actor_role="user", username="renamed", city="Chicago"),
            asynchronous=False,
        )
        updated = _get(user.id)
        assert updated.username == "renamed"
        assert updated.address.city == "Chicago"
        assert updated.address.street == "12 Market St"

    def test_other_users_profile_is_forbidden(self, make_user):
        owner, stranger = make_user(), make_user()
        with pytest.raises(AccessDenied):
            current_domain.process(
                UpdateUser(user_id=owner.id, actor_id=stranger.id, actor_role="user", username="hijack"),
                asynchronous=False,
            )

    def test_customer_cannot_change_own_role(self, make_user):
        user = make_user()
        with pytest.raises(AccessDenied):
            current_domain.process(
                UpdateUser(user_id=user.id, actor_id=user.id, actor_role="user", role="admin"),
                asynchronous=False,
            )
        assert _get(user.id).role == "user"

    def test_admin_promotes_user(self, make_user):
        admin, user = make_user(role=Role.ADMIN.value), make_user()
        current_domain.process(
            UpdateUser(user_id=user.id, actor_id=admin.id, actor_role="admin", role="admin"),
            asynchronous=False,
        )
        assert _get(user.id).role == "admin"

    def test_taken_email_is_a_conflict(self, make_user):
        first, second = make_user(), make_user()
        with pytest.raises(DuplicateEntry):
            current_domain.process(
                UpdateUser(user_id=second.id, actor_id=second.id, actor_role="user", email=first.email),
                asynchronous=False,
            )


class TestChangePasswordCommand:
    def test_owner_changes_password(self, make_user):
        user = make_user()
        current_domain.process(
            ChangePassword(
                user_id=user.id,
                actor_id=user.id,
                actor_role="user",
                current_password="Sneakers2024",
                new_password="Trainers2025",
                password_hash_iterations=_ITERATIONS,
            ),
            asynchronous=False,
        )
        assert verify_password("Trainers2025", _get(user.id).password_hash)

    def test_wrong_current_password(self, make_user):
        user = make_user()
        with pytest.raises(AuthenticationFailed):
            current_domain.process(
                ChangePassword(
                    user_id=user.id,
                    actor_id=user.id,
                    actor_role="user",
                    current_password="Sneakers2000",
                    new_password="Trainers2025",
                ),
                asynchronous=False,
            )

    def test_missing_current_password(self, make_user):
        user = make_user()
        with pytest.raises(ValidationError):
            current_domain.process(
                ChangePassword(user_id=user.id, actor_id=user.id, actor_role="user", new_password="Trainers2025"),
                asynchronous=False,
            )

    def test_admin_resets_without_current_password(self, make_user):
        admin, user = make_user(role=Role.ADMIN.value), make_user()
        current_domain.process(
            ChangePassword(
                user_id=user.id,
                actor_id=admin.id,
                actor_role="admin",
                new_password="Trainers2025",
                password_hash_iterations=_ITERATIONS,
            ),
            asynchronous=False,
        )
        assert verify_password("Trainers2025", _get(user.id).password_hash)

    def test_weak_new_password(self, make_user):
        user = make_user()
        with pytest.raises(ValidationError) as exc:
            current_domain.process(
                ChangePassword(
                    user_id=user.id,
                    actor_id=user.id,
                    actor_role="user",
                    current_password="Sneakers2024",
                    new_password="weak",
                ),
                asynchronous=False,
            )
        assert "new_password" in exc.value.messages


class TestDeleteUserCommand:
    def test_admin_deletes_user(self, make_user):
        admin, user = make_user(role=Role.ADMIN.value), make_user()
        current_domain.process(DeleteUser(user_id=user.id, actor_id=admin.id, actor_role="admin"), asynchronous=False)
        with pytest.raises(ObjectNotFoundError):
            _get(user.id)

    def test_admin_cannot_delete_self(self, make_user):
        admin = make_user(role=Role.ADMIN.value)
        with pytest.raises(ValidationError):
            current_domain.process(
                DeleteUser(user_id=admin.id, actor_id=admin.id, actor_role="admin"),
                asynchronous=False,
            )

    def test_customer_cannot_delete_accounts(self, make_user):
        user, other = make_user(), make_user()
        with pytest.raises(AccessDenied):
            current_domain.process(DeleteUser(user_id=other.id, actor_id=user.id, actor_role="user"), asynchronous=False)
