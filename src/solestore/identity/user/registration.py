"""User registration: command and handler."""

from protean import handle
from protean.fields import Integer, String
from protean.utils.globals import current_domain

from solestore.domain import shop
from solestore.errors import DuplicateEntry
from solestore.identity.credentials import check_password_policy, hash_password
from solestore.identity.user.queries import email_taken, username_taken
from solestore.identity.user.user import User
from solestore.settings import DEFAULT_PASSWORD_HASH_ITERATIONS


@shop.command(part_of="User")
class RegisterUser:
    """Open a shopper account. New accounts always carry the `user` role."""

    username: String(required=True, max_length=50)
    email: String(required=True, max_length=254)
    password: String(required=True, max_length=128)
    phone_number: String(required=True, max_length=20)
    street: String(required=True, max_length=255)
    city: String(required=True, max_length=100)
    state: String(required=True, max_length=100)
    postal_code: String(required=True, max_length=20)
    country: String(required=True, max_length=100)
    password_hash_iterations: Integer(default=DEFAULT_PASSWORD_HASH_ITERATIONS, min_value=1)


@shop.command_handler(part_of=User)
class RegisterUserHandler:
    @handle(RegisterUser)
    def register_user(self, command):
        check_password_policy(command.password)

        if email_taken(command.email):
            raise DuplicateEntry({"email": ["User with this email already exists"]})
        if username_taken(command.username):
            raise DuplicateEntry({"username": ["Username is already taken"]})

        user = User.register(
            username=command.username,
            email=command.email,
            password_hash=hash_password(command.password, command.password_hash_iterations),
            phone_number=command.phone_number,
            address={
                "street": command.street,
                "city": command.city,
                "state": command.state,
                "postal_code": command.postal_code,
                "country": command.country,
            },
        )
        current_domain.repository_for(User).add(user)
        return str(user.id)
