"""
Error taxonomy and the exception handlers that render it.

Every error leaves the API as ``{"success": false, "message": ...}``;
validation failures additionally carry ``errors: [{field, message}]``.
"""

import logging

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class ValidationFailed(HTTPException):
    def __init__(self, errors: list[dict]):
        super().__init__(
            status_code=422,
            detail="Validation failed",
        )
        self.errors = errors


class Unauthorized(HTTPException):
    def __init__(self, detail: str = "Not authorized"):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            headers={"WWW-Authenticate": "Bearer"},
        )


class InvalidCredentials(Unauthorized):
    def __init__(self):
        super().__init__(detail="Invalid email or password")


class NotFound(HTTPException):
    """Raised for records that do not exist *or* belong to another user."""

    def __init__(self, resource: str = "Resource"):
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND, detail=f"{resource} not found"
        )


class DuplicateEmail(HTTPException):
    def __init__(self):
        super().__init__(
            status_code=status.HTTP_409_CONFLICT,
            detail="User already exists with this email",
        )


class TooManyRequests(HTTPException):
    def __init__(self):
        super().__init__(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail="Too many requests from this IP, please try again later.",
        )


class InternalError(HTTPException):
    def __init__(self, detail: str = "Internal server error"):
        super().__init__(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=detail
        )


def field_errors(exc: RequestValidationError) -> list[dict]:
    """Flatten pydantic errors into ``{field, message}`` pairs."""
    errors = []
    for err in exc.errors():
        loc = [str(part) for part in err["loc"] if part not in ("body", "query", "path")]
        message = err["msg"]
        if message.startswith("Value error, "):
            message = message[len("Value error, ") :]
        errors.append({"field": ".".join(loc) or "body", "message": message})
    return errors


def _error_response(exc: HTTPException) -> JSONResponse:
    content = {"success": False, "message": exc.detail}
    if isinstance(exc, ValidationFailed):
        content["errors"] = exc.errors
    return JSONResponse(
        status_code=exc.status_code, content=content, headers=exc.headers
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code == status.HTTP_404_NOT_FOUND and exc.detail == "Not Found":
        exc = HTTPException(
            status_code=exc.status_code, detail=f"Route not found: {request.url.path}"
        )
    return _error_response(exc)


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = field_errors(exc)
    logger.info(f"Validation failed on {request.method} {request.url.path}: {errors}")
    return _error_response(ValidationFailed(errors))


async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.error(
        f"Unhandled exception on {request.method} {request.url.path}: {exc}",
        exc_info=exc,
    )
    return _error_response(InternalError())


def register_exception_handlers(app: FastAPI):
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
