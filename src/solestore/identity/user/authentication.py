"""Credential checks for login."""

from solestore.errors import AuthenticationFailed
from solestore.identity.credentials import verify_password
from solestore.identity.user.queries import find_by_email
from solestore.utils.logging import get_logger

logger = get_logger(__name__)

_INVALID_CREDENTIALS = {"error": ["Invalid email or password"]}


def authenticate(email, password):
    """Return the user owning these credentials.

    An unknown email and a wrong password fail with the same message.
    """
    user = find_by_email(email) if email else None
    if user is None or not verify_password(password, user.password_hash):
        logger.info("login_failed", email=email)
        raise AuthenticationFailed(_INVALID_CREDENTIALS)
    return user
