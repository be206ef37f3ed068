# File: openwaitlist/exceptions.py

"""
Error taxonomy for the OpenWaitlist API.

Service code raises these; the handlers at the bottom turn them into JSON
responses. Anything with a 5xx status is logged server-side and answered
with a generic message so driver or encoding details never reach clients.
"""

import logging
from typing import Any

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)

GENERIC_ERROR_MESSAGE = "Internal server error"


class OpenWaitlistException(Exception):
    """Base exception for errors that map onto an HTTP status."""

    def __init__(
        self,
        message: str,
        code: str = "OPENWAITLIST_ERROR",
        status_code: int = 500,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code

    @property
    def public_message(self) -> str:
        if self.status_code >= 500:
            return GENERIC_ERROR_MESSAGE
        return self.message

    def to_dict(self) -> dict[str, Any]:
        return {"detail": self.public_message, "code": self.code}


class ValidationError(OpenWaitlistException):
    """Malformed or missing input."""

    def __init__(self, message: str):
        super().__init__(message, code="VALIDATION_ERROR", status_code=400)


class UnauthorizedError(OpenWaitlistException):
    """Missing, invalid or unresolvable caller identity."""

    def __init__(self, message: str = "Unauthorized"):
        super().__init__(message, code="UNAUTHORIZED", status_code=401)


class ForbiddenError(OpenWaitlistException):
    """Authenticated, but not the owner of the resource."""

    def __init__(self, message: str = "Forbidden"):
        super().__init__(message, code="FORBIDDEN", status_code=403)


class NotFoundError(OpenWaitlistException):
    def __init__(self, message: str = "Not found"):
        super().__init__(message, code="NOT_FOUND", status_code=404)


class ConflictError(OpenWaitlistException):
    def __init__(self, message: str):
        super().__init__(message, code="CONFLICT", status_code=409)


class InternalError(OpenWaitlistException):
    """Store or encoding failure. The message is for logs only."""

    def __init__(self, message: str):
        super().__init__(message, code="INTERNAL_ERROR", status_code=500)


# =============================================================================
# Persistence errors (never rendered directly)
# =============================================================================

class DatabaseError(Exception):
    """A store operation failed."""


class DatabaseNotConnectedError(DatabaseError):
    def __init__(self):
        super().__init__("database connection is not established")


class DuplicateRecordError(DatabaseError):
    """A unique constraint rejected the write."""


class MigrationError(DatabaseError):
    """A migration script could not be applied."""


# =============================================================================
# Exception handlers
# =============================================================================

async def openwaitlist_exception_handler(
    request: Request,
    exc: OpenWaitlistException,
) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == 401 else None
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict(), headers=headers)


async def validation_exception_handler(
    request: Request,
    exc: RequestValidationError,
) -> JSONResponse:
    """Malformed JSON or wrongly typed fields are plain 400s."""
    errors = [
        {"loc": list(err.get("loc", ())), "msg": err.get("msg", "")}
        for err in exc.errors()
    ]
    return JSONResponse(
        status_code=400,
        content={
            "detail": "Invalid request body",
            "code": "VALIDATION_ERROR",
            "errors": errors,
        },
    )


async def database_exception_handler(request: Request, exc: DatabaseError) -> JSONResponse:
    logger.error(f"{request.method} {request.url.path} database error: {exc}")
    return JSONResponse(
        status_code=500,
        content={"detail": GENERIC_ERROR_MESSAGE, "code": "INTERNAL_ERROR"},
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unexpected error on {request.method} {request.url.path}: {exc}")
    return JSONResponse(
        status_code=500,
        content={"detail": GENERIC_ERROR_MESSAGE, "code": "INTERNAL_ERROR"},
    )
