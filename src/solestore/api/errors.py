"""Translate domain exceptions into JSON error responses."""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from protean.exceptions import ExpectedVersionError, ObjectNotFoundError, ValidationError

from solestore.errors import AccessDenied, AuthenticationFailed, ConflictError
from solestore.utils.logging import get_logger

logger = get_logger(__name__)

_STATUS_CODES = {
    ValidationError: 400,
    AuthenticationFailed: 401,
    AccessDenied: 403,
    ObjectNotFoundError: 404,
    ConflictError: 409,
    ExpectedVersionError: 409,
}

# Version errors carry store internals in their message
_FIXED_PAYLOADS = {
    ExpectedVersionError: {"version": ["The record was changed by another request. Please retry."]},
}


def _payload(exc):
    for exc_class, messages in _FIXED_PAYLOADS.items():
        if isinstance(exc, exc_class):
            return {"error": messages}
    return {"error": getattr(exc, "messages", None) or str(exc)}


def _handler_for(status_code):
    async def handle(request: Request, exc: Exception) -> JSONResponse:
        if status_code == 409:
            logger.info("request_conflict", path=request.url.path, error=type(exc).__name__)
        return JSONResponse(status_code=status_code, content=_payload(exc))

    return handle


async def handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("unhandled_error", path=request.url.path, method=request.method)
    return JSONResponse(status_code=500, content={"error": "Internal Server Error"})


def register_error_handlers(app: FastAPI) -> None:
    for exc_class, status_code in _STATUS_CODES.items():
        app.add_exception_handler(exc_class, _handler_for(status_code))
    app.add_exception_handler(Exception, handle_unexpected)
