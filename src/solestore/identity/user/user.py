"""User aggregate: account, contact details and role."""

import re
from datetime import UTC, datetime
from enum import Enum

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, String, ValueObject

from solestore.domain import shop
from solestore.identity.user.events import (
    PasswordChanged,
    UserProfileUpdated,
    UserRegistered,
    UserRoleChanged,
)

_EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
_PHONE_PATTERN = re.compile(r"^\+?[\d\s\-()]{10,}$")

# Sentinel for distinguishing "not provided" from None in partial updates
_UNSET = object()


class Role(Enum):
    USER = "user"
    ADMIN = "admin"


@shop.value_object(part_of="User")
class Address:
    """Postal address kept on the account."""

    street: String(required=True, max_length=255)
    city: String(required=True, max_length=100)
    state: String(required=True, max_length=100)
    postal_code: String(required=True, max_length=20)
    country: String(required=True, max_length=100)


def normalise_email(email):
    return email.strip().lower() if email else email


@shop.aggregate
class User:
    """A registered shopper or administrator.

    Usernames and emails are unique across accounts; emails are stored
    lower-cased. The password is only ever held as a salted hash.
    """

    username: String(required=True, max_length=50, unique=True)
    email: String(required=True, max_length=254, unique=True)
    password_hash: String(required=True, max_length=255)
    phone_number: String(required=True, max_length=20)
    address: ValueObject(Address)
    role: String(choices=Role, default=Role.USER.value)
    created_at: DateTime()
    updated_at: DateTime()

    @invariant.post
    def username_has_at_least_two_characters(self):
        if self.username is not None and len(self.username.strip()) < 2:
            raise ValidationError({"username": ["Username must be at least 2 characters long"]})

    @invariant.post
    def email_is_well_formed(self):
        if self.email is not None and not _EMAIL_PATTERN.match(self.email):
            raise ValidationError({"email": ["Please provide a valid email address"]})

    @invariant.post
    def phone_number_is_well_formed(self):
        if self.phone_number is not None and not _PHONE_PATTERN.match(self.phone_number):
            raise ValidationError({"phone_number": ["Please provide a valid phone number"]})

    @property
    def is_admin(self):
        return self.role == Role.ADMIN.value

    @classmethod
    def register(cls, username, email, password_hash, phone_number, address, role=Role.USER.value):
        """Create an account. `address` is a dict of Address fields."""
        now = datetime.now(UTC)
        user = cls(
            username=username.strip(),
            email=normalise_email(email),
            password_hash=password_hash,
            phone_number=phone_number.strip(),
            address=Address(**{k: v.strip() for k, v in address.items()}),
            role=role,
            created_at=now,
            updated_at=now,
        )
        user.raise_(
            UserRegistered(
                user_id=user.id,
                username=user.username,
                email=user.email,
                role=user.role,
                registered_at=now,
            )
        )
        return user

    def update_profile(self, username=_UNSET, email=_UNSET, phone_number=_UNSET, address=_UNSET):
        """Apply a partial update. Address fields left blank keep their value."""
        now = datetime.now(UTC)
        with atomic_change(self):
            if username is not _UNSET:
                self.username = username.strip()
            if email is not _UNSET:
                self.email = normalise_email(email)
            if phone_number is not _UNSET:
                self.phone_number = phone_number.strip()
            if address is not _UNSET:
                current = self.address.to_dict() if self.address else {}
                merged = {
                    field: (address.get(field) or "").strip() or current.get(field)
                    for field in ("street", "city", "state", "postal_code", "country")
                }
                self.address = Address(**merged)
            self.updated_at = now

        self.raise_(
            UserProfileUpdated(
                user_id=self.id,
                username=self.username,
                email=self.email,
                phone_number=self.phone_number,
                updated_at=now,
            )
        )

    def change_role(self, role):
        if role not in [r.value for r in Role]:
            raise ValidationError({"role": ['Role must be either "user" or "admin"']})
        if role == self.role:
            return
        previous = self.role
        self.role = role
        self.updated_at = datetime.now(UTC)
        self.raise_(UserRoleChanged(user_id=self.id, previous_role=previous, new_role=role))

    def change_password_hash(self, password_hash):
        now = datetime.now(UTC)
        self.password_hash = password_hash
        self.updated_at = now
        self.raise_(PasswordChanged(user_id=self.id, changed_at=now))
