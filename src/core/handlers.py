from __future__ import annotations

"""
Global exception handlers for the FastAPI application.

This module contains centralized handlers for custom application exceptions,
translating them into HTTP responses with a stable body shape:
``{"detail": <message>, "code": <machine code>}``. Validation failures add an
``"errors"`` mapping of field name to reason.
"""

from typing import Any, Dict

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette import status
from structlog import get_logger

from src.core.exceptions import (
    AuthenticationError,
    ConflictError,
    InvalidTokenError,
    MarketHubError,
    ServerError,
    UserNotFoundError,
    ValidationError,
)

__all__ = [
    "validation_error_handler",
    "request_validation_error_handler",
    "conflict_error_handler",
    "authentication_error_handler",
    "invalid_token_error_handler",
    "user_not_found_error_handler",
    "server_error_handler",
    "markethub_error_handler",
    "unhandled_exception_handler",
    "register_exception_handlers",
]

logger = get_logger(__name__)

SERVER_ERROR_DETAIL = "Server error"


def _error_body(exc: MarketHubError, **extra: Any) -> Dict[str, Any]:
    return {"detail": exc.message, "code": exc.code, **extra}


def _expose_errors(request: Request) -> bool:
    return bool(getattr(request.app.state, "expose_errors", False))


async def validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
    """Handles `ValidationError`, returning a `400 Bad Request` with per-field reasons."""
    logger.info(
        "Request rejected by validation",
        error=exc.code,
        fields=sorted(exc.errors),
        path=request.url.path,
    )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=_error_body(exc, errors=exc.errors),
    )


async def request_validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Reports request-schema failures in the same shape as `ValidationError`.

    Args:
        request: The incoming `Request` object.
        exc: The `RequestValidationError` raised while parsing the body.

    Returns:
        A `JSONResponse` with a 400 status code.
    """
    errors: Dict[str, str] = {}
    for error in exc.errors():
        location = [str(part) for part in error.get("loc", ()) if part != "body"]
        field = ".".join(location) or "body"
        errors.setdefault(field, error.get("msg", "Invalid value"))
    logger.info("Request body rejected", fields=sorted(errors), path=request.url.path)
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=_error_body(ValidationError(), errors=errors),
    )


async def conflict_error_handler(request: Request, exc: ConflictError) -> JSONResponse:
    """Handles `ConflictError`, returning a `400 Bad Request`."""
    logger.info("Duplicate user rejected", error=exc.code, path=request.url.path)
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=_error_body(exc),
    )


async def authentication_error_handler(request: Request, exc: AuthenticationError) -> JSONResponse:
    """Handles `AuthenticationError`, returning a `400 Bad Request`.

    The message is the fixed one for the error family; the specific reason was
    already logged where the failure was detected.
    """
    logger.warning(
        "Authentication failure",
        error=exc.code,
        client_ip=request.client.host if request.client else None,
        path=request.url.path,
    )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=_error_body(exc),
    )


async def invalid_token_error_handler(request: Request, exc: InvalidTokenError) -> JSONResponse:
    """Handles `InvalidTokenError`, returning a `401 Unauthorized` with a Bearer challenge."""
    logger.warning("Session token rejected", error=exc.code, path=request.url.path)
    return JSONResponse(
        status_code=status.HTTP_401_UNAUTHORIZED,
        content=_error_body(exc),
        headers={"WWW-Authenticate": "Bearer"},
    )


async def user_not_found_error_handler(request: Request, exc: UserNotFoundError) -> JSONResponse:
    """Handles `UserNotFoundError`, returning a `404 Not Found`."""
    logger.info("User not found", error=exc.code, path=request.url.path)
    return JSONResponse(
        status_code=status.HTTP_404_NOT_FOUND,
        content=_error_body(exc),
    )


async def server_error_handler(request: Request, exc: ServerError) -> JSONResponse:
    """Handles `ServerError` and its subclasses, returning a `500 Internal Server Error`.

    The body never carries the collaborator's message unless error exposure is
    switched on for development.
    """
    logger.error(
        "Collaborator failure surfaced to client",
        error_code=exc.code,
        error_message=exc.message,
        cause=repr(exc.__cause__) if exc.__cause__ else None,
        path=request.url.path,
    )
    content: Dict[str, Any] = {"detail": SERVER_ERROR_DETAIL, "code": exc.code}
    if _expose_errors(request):
        content["error"] = str(exc.__cause__ or exc)
    return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=content)


async def markethub_error_handler(request: Request, exc: MarketHubError) -> JSONResponse:
    """Fallback for application errors without a more specific handler."""
    logger.error(
        "An unhandled application error occurred",
        error_code=exc.code,
        error_message=exc.message,
        path=request.url.path,
    )
    content: Dict[str, Any] = {"detail": SERVER_ERROR_DETAIL, "code": "server_error"}
    if _expose_errors(request):
        content["error"] = exc.message
    return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=content)


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Last-resort handler for exceptions that escaped every other handler."""
    logger.exception("Unhandled exception", error_type=type(exc).__name__, path=request.url.path)
    content: Dict[str, Any] = {"detail": SERVER_ERROR_DETAIL, "code": "server_error"}
    if _expose_errors(request):
        content["error"] = str(exc)
    return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=content)


def register_exception_handlers(app: FastAPI, expose_errors: bool = False) -> None:
    """Registers all custom exception handlers with the FastAPI application.

    Starlette resolves handlers along the exception's MRO, so subclasses with
    their own handler (such as `InvalidTokenError`) take precedence over their
    parents.

    Args:
        app: The `FastAPI` application instance.
        expose_errors: Add the underlying error text to 500 responses. Only
            meant for development.
    """
    app.state.expose_errors = expose_errors
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)
    app.add_exception_handler(ValidationError, validation_error_handler)
    app.add_exception_handler(ConflictError, conflict_error_handler)
    app.add_exception_handler(InvalidTokenError, invalid_token_error_handler)
    app.add_exception_handler(AuthenticationError, authentication_error_handler)
    app.add_exception_handler(UserNotFoundError, user_not_found_error_handler)
    app.add_exception_handler(ServerError, server_error_handler)
    app.add_exception_handler(MarketHubError, markethub_error_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
