"""Centralized exception handlers for the FastAPI application.

Errors raised before a handler runs (authentication strategies, session
checks, request parsing) are mapped onto the same JSON envelope the
handlers use:

    {"status": "error", "error": "Human-readable error message"}

Usage:
    from storefront.presentation.api.exception_handlers import (
        setup_exception_handlers,
    )

    app = FastAPI()
    setup_exception_handlers(app)
"""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from storefront.domain.user import UserDomainError
from storefront.presentation.api.responses import (
    send_server_error,
    send_unauthorized,
    send_user_error,
)
from storefront_auth import AuthError, NotAuthenticatedError

logger = logging.getLogger(__name__)


def _validation_message(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = first.get("msg", "Invalid value")
    return f"{location}: {message}" if location else message


def setup_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers on the FastAPI application."""

    @app.exception_handler(UserDomainError)
    async def user_domain_error_handler(
        request: Request,
        exc: UserDomainError,
    ) -> JSONResponse:
        logger.warning(
            "User error on %s %s: %s",
            request.method,
            request.url.path,
            exc.message,
        )
        return send_user_error(exc.message)

    @app.exception_handler(NotAuthenticatedError)
    async def not_authenticated_handler(
        request: Request,
        exc: NotAuthenticatedError,
    ) -> JSONResponse:
        logger.info("Unauthenticated request to %s", request.url.path)
        return send_unauthorized(exc.message)

    @app.exception_handler(AuthError)
    async def auth_error_handler(request: Request, exc: AuthError) -> JSONResponse:
        logger.warning(
            "Auth error on %s %s: %s",
            request.method,
            request.url.path,
            exc.message,
        )
        return send_user_error(exc.message)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request,
        exc: RequestValidationError,
    ) -> JSONResponse:
        message = _validation_message(exc)
        logger.warning(
            "Validation error on %s %s: %s",
            request.method,
            request.url.path,
            message,
        )
        return send_user_error(message)

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(
        request: Request,
        exc: Exception,
    ) -> JSONResponse:
        logger.exception(
            "Unhandled error on %s %s: %s",
            request.method,
            request.url.path,
            exc,
        )
        return send_server_error(str(exc))
