"""Signed access tokens (JWT)."""

from datetime import UTC, datetime, timedelta

import jwt

from solestore.errors import AuthenticationFailed
from solestore.utils.logging import get_logger

logger = get_logger(__name__)


class TokenService:
    """Issues and verifies HMAC-signed JWTs carrying the user id and role."""

    def __init__(self, secret: str, algorithm: str = "HS256", ttl: timedelta = timedelta(hours=24)):
        self._secret = secret
        self._algorithm = algorithm
        self.ttl = ttl

    @classmethod
    def from_settings(cls, settings) -> "TokenService":
        return cls(
            secret=settings.jwt_secret,
            algorithm=settings.jwt_algorithm,
            ttl=timedelta(hours=settings.token_ttl_hours),
        )

    def issue(self, user) -> str:
        now = datetime.now(UTC)
        payload = {
            "sub": str(user.id),
            "email": user.email,
            "role": user.role,
            "iat": now,
            "exp": now + self.ttl,
        }
        return jwt.encode(payload, self._secret, algorithm=self._algorithm)

    def decode(self, token: str) -> dict:
        if not token:
            raise AuthenticationFailed({"error": ["Unauthorized - No token provided"]})
        try:
            return jwt.decode(token, self._secret, algorithms=[self._algorithm])
        except jwt.ExpiredSignatureError:
            raise AuthenticationFailed({"error": ["Unauthorized - Token expired"]}) from None
        except jwt.InvalidTokenError as exc:
            logger.info("token_rejected", reason=str(exc))
            raise AuthenticationFailed({"error": ["Unauthorized - Invalid token"]}) from None
