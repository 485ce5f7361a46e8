"""
Application error hierarchy and FastAPI exception handlers.

AppError is the base for all typed errors. The global exception handler
converts AppError subclasses to consistent JSON responses.

Non-AppError exceptions bubble up as 500s (with Sentry reporting in production).
"""

from __future__ import annotations

from typing import Any, Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse


class AppError(Exception):
    """Base application error. All typed errors inherit from this."""

    status_code: int = 500
    error_code: str = "internal_error"

    def __init__(
        self,
        message: str,
        *,
        field: Optional[str] = None,
        details: Optional[Any] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.field = field
        self.details = details

    def to_dict(self) -> dict:
        payload: dict = {"error": self.message, "code": self.error_code}
        if self.field is not None:
            payload["field"] = self.field
        if self.details is not None:
            payload["details"] = self.details
        return payload


class ValidationError(AppError):
    status_code = 400
    error_code = "validation_error"


class AuthenticationError(AppError):
    status_code = 401
    error_code = "authentication_error"


class NotFoundError(AppError):
    status_code = 404
    error_code = "not_found"


class LinkUnavailableError(NotFoundError):
    """A link that exists but cannot be followed (deactivated or expired).

    ``message`` keeps the specific reason for owner-facing views and logs;
    ``to_dict()`` reports a plain not-found so anonymous callers cannot tell
    a disabled link from a missing one.
    """

    PUBLIC_MESSAGE = "Short URL not found"

    def __init__(self, message: str, *, reason: str, short_code: str) -> None:
        super().__init__(message)
        self.reason = reason
        self.short_code = short_code

    def to_dict(self) -> dict:
        return {"error": self.PUBLIC_MESSAGE, "code": self.error_code}


class ConflictError(AppError):
    status_code = 409
    error_code = "conflict"


class DuplicateCodeError(ConflictError):
    error_code = "duplicate_code"


class CodeSpaceExhaustedError(AppError):
    """Raised when no free short code was found within the retry budget."""

    status_code = 503
    error_code = "code_space_exhausted"


def register_error_handlers(app: FastAPI) -> None:
    """Register global exception handlers on the FastAPI app."""

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(
        request: Request, exc: Exception
    ) -> JSONResponse:
        # Sentry integration: if sentry_sdk is initialized it will auto-capture
        # unhandled exceptions before this handler fires.
        return JSONResponse(
            status_code=500,
            content={"error": "An internal server error occurred.", "code": "internal_error"},
        )
