"""Domain tests for the User aggregate."""

import pytest
from protean.exceptions import ValidationError

from solestore.identity.user.events import UserProfileUpdated, UserRegistered, UserRoleChanged
from solestore.identity.user.user import Role, User

_ADDRESS = {
    "street": "12 Market St",
    "city": "Springfield",
    "state": "IL",
    "postal_code": "62701",
    "country": "USA",
}


def _user(**overrides):
    values = {
        "username": "jane",
        "email": "Jane@Example.com",
        "password_hash": "pbkdf2_sha256$1000$c2FsdA==$ZGlnZXN0",
        "phone_number": "+1 (555) 010-2030",
        "address": dict(_ADDRESS),
    }
    values.update(overrides)
    return User.register(**values)


class TestRegister:
    def test_email_is_lower_cased(self):
        assert _user().email == "jane@example.com"

    def test_defaults_to_user_role(self):
        user = _user()
        assert user.role == Role.USER.value
        assert not user.is_admin

    def test_raises_user_registered(self):
        user = _user()
        event = next(e for e in user._events if isinstance(e, UserRegistered))
        assert event.email == "jane@example.com"
        assert event.role == "user"

    def test_short_username_is_rejected(self):
        with pytest.raises(ValidationError) as exc:
            _user(username="j")
        assert "username" in exc.value.messages

    def test_malformed_email_is_rejected(self):
        with pytest.raises(ValidationError):
            _user(email="not-an-email")

    def test_short_phone_number_is_rejected(self):
        with pytest.raises(ValidationError):
            _user(phone_number="12345")


class TestUpdateProfile:
    def test_partial_update(self):
        user = _user()
        user.update_profile(username="jane.doe")
        assert user.username == "jane.doe"
        assert user.email == "jane@example.com"

    def test_address_fields_merge(self):
        user = _user()
        user.update_profile(address={"city": "Chicago"})
        assert user.address.city == "Chicago"
        assert user.address.street == "12 Market St"

    def test_raises_profile_updated(self):
        user = _user()
        user.update_profile(phone_number="555-010-9999")
        assert any(isinstance(e, UserProfileUpdated) for e in user._events)


class TestChangeRole:
    def test_promote_to_admin(self):
        user = _user()
        user.change_role("admin")
        assert user.is_admin
        event = next(e for e in user._events if isinstance(e, UserRoleChanged))
        assert event.previous_role == "user"

    def test_unknown_role_is_rejected(self):
        user = _user()
        with pytest.raises(ValidationError):
            user.change_role("superuser")

    def test_same_role_is_a_no_op(self):
        user = _user()
        user.change_role("user")
        assert not any(isinstance(e, UserRoleChanged) for e in user._events)
