"""Account maintenance: profile updates, password changes and deletion.

Each command names the acting user and their role so the handler can apply
the owner-or-admin rules itself.
"""

from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Identifier, Integer, String
from protean.utils.globals import current_domain

from solestore.domain import shop
from solestore.errors import AccessDenied, AuthenticationFailed, DuplicateEntry
from solestore.identity.access import Capability, Principal
from solestore.identity.credentials import check_password_policy, hash_password, verify_password
from solestore.identity.user.queries import email_taken, username_taken
from solestore.identity.user.user import User
from solestore.settings import DEFAULT_PASSWORD_HASH_ITERATIONS
from solestore.utils.logging import get_logger

logger = get_logger(__name__)

_ADDRESS_FIELDS = ("street", "city", "state", "postal_code", "country")


@shop.command(part_of="User")
class UpdateUser:
    user_id: Identifier(required=True)
    actor_id: Identifier(required=True)
    actor_role: String(required=True, max_length=10)
    username: String(max_length=50)
    email: String(max_length=254)
    password: String(max_length=128)
    phone_number: String(max_length=20)
    street: String(max_length=255)
    city: String(max_length=100)
    state: String(max_length=100)
    postal_code: String(max_length=20)
    country: String(max_length=100)
    role: String(max_length=10)
    password_hash_iterations: Integer(default=DEFAULT_PASSWORD_HASH_ITERATIONS, min_value=1)


@shop.command(part_of="User")
class ChangePassword:
    user_id: Identifier(required=True)
    actor_id: Identifier(required=True)
    actor_role: String(required=True, max_length=10)
    current_password: String(max_length=128)
    new_password: String(required=True, max_length=128)
    password_hash_iterations: Integer(default=DEFAULT_PASSWORD_HASH_ITERATIONS, min_value=1)


@shop.command(part_of="User")
class DeleteUser:
    user_id: Identifier(required=True)
    actor_id: Identifier(required=True)
    actor_role: String(required=True, max_length=10)


def _actor(command):
    return Principal(user_id=str(command.actor_id), role=command.actor_role)


@shop.command_handler(part_of=User)
class ManageAccountHandler:
    @handle(UpdateUser)
    def update_user(self, command):
        actor = _actor(command)
        actor.ensure_owner_or_admin(command.user_id, "Access denied. You can only update your own profile.")
        if command.role is not None:
            if not actor.can(Capability.MANAGE_USERS):
                raise AccessDenied({"role": ["Only administrators can change user roles"]})

        repo = current_domain.repository_for(User)
        user = repo.get(command.user_id)

        changes = {}
        if command.username is not None:
            if username_taken(command.username, exclude_id=user.id):
                raise DuplicateEntry({"username": ["Username is already taken"]})
            changes["username"] = command.username
        if command.email is not None:
            if email_taken(command.email, exclude_id=user.id):
                raise DuplicateEntry({"email": ["Email is already taken"]})
            changes["email"] = command.email
        if command.phone_number is not None:
            changes["phone_number"] = command.phone_number
        address = {field: getattr(command, field) for field in _ADDRESS_FIELDS if getattr(command, field)}
        if address:
            changes["address"] = address

        if changes:
            user.update_profile(**changes)
        if command.password is not None:
            check_password_policy(command.password)
            user.change_password_hash(hash_password(command.password, command.password_hash_iterations))
        if command.role is not None:
            user.change_role(command.role)

        repo.add(user)
        return str(user.id)

    @handle(ChangePassword)
    def change_password(self, command):
        actor = _actor(command)
        actor.ensure_owner_or_admin(command.user_id, "Access denied. You can only change your own password.")
        check_password_policy(command.new_password, field="new_password")

        repo = current_domain.repository_for(User)
        user = repo.get(command.user_id)

        # Admins resetting someone else's password skip the current-password check
        if actor.owns(user.id):
            if not command.current_password:
                raise ValidationError({"current_password": ["Current password is required"]})
            if not verify_password(command.current_password, user.password_hash):
                raise AuthenticationFailed({"current_password": ["Current password is incorrect"]})

        user.change_password_hash(hash_password(command.new_password, command.password_hash_iterations))
        repo.add(user)

    @handle(DeleteUser)
    def delete_user(self, command):
        actor = _actor(command)
        actor.require(Capability.MANAGE_USERS)
        if actor.owns(command.user_id):
            raise ValidationError({"user_id": ["You cannot delete your own account"]})

        repo = current_domain.repository_for(User)
        user = repo.get(command.user_id)
        repo._dao.delete(user)
        logger.info("user_deleted", user_id=str(user.id), deleted_by=actor.user_id)
