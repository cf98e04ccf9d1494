"""
Domain error taxonomy and the HTTP boundary that renders it.

Services raise ``AppError`` subclasses; ``register_exception_handlers`` maps
every failure (domain, request validation, routing, unhandled) onto the
``{success: false, message, errorCode}`` envelope.
"""

from __future__ import annotations

from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from uom_service.core.logging import current_request_id, get_logger
from uom_service.core.middleware import REQUEST_ID_HEADER

logger = get_logger(__name__)


class AppError(Exception):
    """Base class for errors that carry an HTTP status and an error code."""

    status_code: int = status.HTTP_400_BAD_REQUEST
    error_code: str = "APP_ERROR"

    def __init__(
        self,
        message: str,
        *,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        if error_code is not None:
            self.error_code = error_code
        self.details = details


class ValidationError(AppError):
    """Malformed input or a violated field constraint."""

    error_code = "VALIDATION_ERROR"


class ConflictError(AppError):
    """Duplicate name, code or pair, or a blocked delete."""

    error_code = "CONFLICT"


class NotFoundError(AppError):
    """Referenced unit or conversion does not exist."""

    status_code = status.HTTP_404_NOT_FOUND
    error_code = "NOT_FOUND"


class AuthTokenError(AppError):
    """Missing, invalid or expired bearer token."""

    status_code = status.HTTP_401_UNAUTHORIZED
    error_code = "INVALID_TOKEN"


_HTTP_ERROR_CODES = {
    status.HTTP_401_UNAUTHORIZED: "INVALID_TOKEN",
    status.HTTP_403_FORBIDDEN: "FORBIDDEN",
    status.HTTP_404_NOT_FOUND: "NOT_FOUND",
    status.HTTP_405_METHOD_NOT_ALLOWED: "METHOD_NOT_ALLOWED",
}


def error_body(message: str, error_code: str, **extra: Any) -> dict[str, Any]:
    """Build the failure envelope shared by every error response."""
    body: dict[str, Any] = {"success": False, "message": message, "errorCode": error_code}
    body.update({key: value for key, value in extra.items() if value is not None})
    return body


def _format_validation_error(error: dict[str, Any]) -> str:
    location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
    message = str(error.get("msg") or "invalid value")
    return f"{location}: {message}" if location else message


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("app_error", path=request.url.path, error_code=exc.error_code)
    else:
        logger.info(
            "request_rejected",
            path=request.url.path,
            method=request.method,
            status_code=exc.status_code,
            error_code=exc.error_code,
        )
    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, AuthTokenError) else None
    return JSONResponse(
        status_code=exc.status_code,
        content=jsonable_encoder(error_body(exc.message, exc.error_code, details=exc.details)),
        headers=headers,
    )


async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    errors = [_format_validation_error(error) for error in exc.errors()]
    logger.info("request_validation_failed", path=request.url.path, errors=errors)
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=error_body("Validation Error", "VALIDATION_ERROR", errors=errors),
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    error_code = _HTTP_ERROR_CODES.get(exc.status_code, "HTTP_ERROR")
    message = exc.detail if isinstance(exc.detail, str) else "Request failed"
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(message, error_code),
        headers=getattr(exc, "headers", None),
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(
        "unhandled_exception",
        path=request.url.path,
        method=request.method,
        error_type=type(exc).__name__,
    )
    request_id = current_request_id()
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_body("Internal Server Error", "INTERNAL_ERROR"),
        headers={REQUEST_ID_HEADER: request_id} if request_id else None,
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Install the envelope handlers on *app*."""
    app.add_exception_handler(AppError, app_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(
        RequestValidationError,
        request_validation_handler,  # type: ignore[arg-type]
    )
    app.add_exception_handler(
        StarletteHTTPException,
        http_exception_handler,  # type: ignore[arg-type]
    )
    app.add_exception_handler(Exception, unhandled_exception_handler)
