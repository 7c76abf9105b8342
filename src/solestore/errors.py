"""Exceptions that carry an HTTP meaning beyond Protean's own.

Protean's `ValidationError` (400) and `ObjectNotFoundError` (404) cover
malformed input and missing records; these cover the rest of the taxonomy.
"""


class ShopError(Exception):
    """Base class for SoleStore errors. `messages` mirrors ValidationError."""

    def __init__(self, messages):
        if isinstance(messages, str):
            messages = {"error": [messages]}
        self.messages = messages
        super().__init__(messages)


class AuthenticationFailed(ShopError):
    """Missing, invalid or expired credentials (401)."""


class AccessDenied(ShopError):
    """Authenticated, but not allowed to perform the operation (403)."""


class ConflictError(ShopError):
    """The request conflicts with the current state of a resource (409)."""


class DuplicateEntry(ConflictError):
    """A unique field is already taken."""


class InsufficientStock(ConflictError):
    """Live stock does not cover the requested quantity."""


class StockReservationConflict(ConflictError):
    """Another order committed a change to the same stock first."""
