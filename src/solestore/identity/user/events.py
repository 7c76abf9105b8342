"""Domain events for the User aggregate."""

from protean.fields import DateTime, Identifier, String

from solestore.domain import shop


@shop.event(part_of="User")
class UserRegistered:
    """A new account was created."""

    __version__ = 1

    user_id: Identifier(required=True)
    username: String(required=True)
    email: String(required=True)
    role: String(required=True)
    registered_at: DateTime(required=True)


@shop.event(part_of="User")
class UserProfileUpdated:
    __version__ = 1

    user_id: Identifier(required=True)
    username: String(required=True)
    email: String(required=True)
    phone_number: String()
    updated_at: DateTime(required=True)


@shop.event(part_of="User")
class UserRoleChanged:
    __version__ = 1

    user_id: Identifier(required=True)
    previous_role: String(required=True)
    new_role: String(required=True)


@shop.event(part_of="User")
class PasswordChanged:
    __version__ = 1

    user_id: Identifier(required=True)
    changed_at: DateTime(required=True)
