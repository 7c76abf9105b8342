"""Password hashing and password policy.

Hashes are PBKDF2-HMAC-SHA256 encoded as
``pbkdf2_sha256$<iterations>$<salt>$<digest>`` so the iteration count can be
raised without invalidating stored hashes. The iteration count always comes
from the caller, which reads it from the `ShopSettings` it was built with.
"""

import base64
import hashlib
import hmac
import re
import secrets

from protean.exceptions import ValidationError

_ALGORITHM = "pbkdf2_sha256"
_POLICY = re.compile(r"^(?=.*[a-z])(?=.*[A-Z])(?=.*\d)[a-zA-Z\d@$!%*?&]{8,}$")
_POLICY_MESSAGE = (
    "Password must be at least 8 characters long and contain at least "
    "1 uppercase letter, 1 lowercase letter, and 1 number"
)


def check_password_policy(password, field="password"):
    if not password or not _POLICY.match(password):
        raise ValidationError({field: [_POLICY_MESSAGE]})


def _digest(password, salt, iterations):
    return hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt, iterations)


def hash_password(password, iterations):
    """Hash `password` with the work factor the caller's settings carry."""
    salt = secrets.token_bytes(16)
    digest = _digest(password, salt, iterations)
    return "$".join(
        [
            _ALGORITHM,
            str(iterations),
            base64.b64encode(salt).decode("ascii"),
            base64.b64encode(digest).decode("ascii"),
        ]
    )


def verify_password(password, encoded):
    """True if `password` matches the stored hash. Unknown formats never match."""
    try:
        algorithm, iterations, salt, digest = encoded.split("$")
    except (AttributeError, ValueError):
        return False
    if algorithm != _ALGORITHM or not password:
        return False
    candidate = _digest(password, base64.b64decode(salt), int(iterations))
    return hmac.compare_digest(candidate, base64.b64decode(digest))
