"""
Error handling with sanitized, uniform error bodies.

Every failure leaves the API as
``{"error": {"code", "message", "path", "method"}}``. Typed failures are
mapped by the handlers registered in ``setup_error_handlers``; anything that
escapes them is caught by ``ErrorHandlingMiddleware`` and reported as a 500
without leaking internals.
"""

import logging
import re
import traceback
from typing import Any, Callable, Optional

from fastapi import Request, Response, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from sqlalchemy.exc import IntegrityError, OperationalError, SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from core.exceptions import MarketplaceError

logger = logging.getLogger(__name__)

# Patterns for sensitive data that should never be returned or logged
SENSITIVE_PATTERNS = [
    re.compile(r'password["\s:=]+[^"\s,}]+', re.IGNORECASE),
    re.compile(r'token["\s:=]+[^"\s,}]+', re.IGNORECASE),
    re.compile(r'secret["\s:=]+[^"\s,}]+', re.IGNORECASE),
    re.compile(r'bearer\s+[A-Za-z0-9\-_.=]+', re.IGNORECASE),
    re.compile(r'authorization["\s:]+[^"\s,}]+', re.IGNORECASE),
    re.compile(r'(postgres(?:ql)?(?:\+\w+)?://[^:/\s]+:)[^@\s]+@', re.IGNORECASE),
]


def sanitize_error_message(message: Any) -> str:
    """
    Remove credentials and tokens from an error message.

    Args:
        message: Original error message (non-strings are stringified)

    Returns:
        Sanitized error message
    """
    sanitized = str(message)
    for pattern in SENSITIVE_PATTERNS:
        if pattern.groups:
            sanitized = pattern.sub(r"\1[REDACTED]@", sanitized)
        else:
            sanitized = pattern.sub("[REDACTED]", sanitized)
    return sanitized


def error_body(
    code: str,
    message: str,
    path: str,
    method: str,
    details: Optional[Any] = None,
) -> dict[str, Any]:
    body: dict[str, Any] = {
        "error": {
            "code": code,
            "message": sanitize_error_message(message),
            "path": path,
            "method": method,
        }
    }
    if details is not None:
        body["error"]["details"] = details
    return body


def format_validation_errors(exc: RequestValidationError | ValidationError) -> list[dict[str, Any]]:
    """Flatten pydantic errors into ``{field, message, type}`` entries."""
    errors = []
    for error in exc.errors():
        errors.append(
            {
                "field": ".".join(str(loc) for loc in error["loc"]),
                "message": sanitize_error_message(error["msg"]),
                "type": error["type"],
            }
        )
    return errors


class ErrorHandlingMiddleware:
    """
    Outermost catch-all for exceptions no handler claimed.

    Database outages become 503; everything else is a 500 with the
    traceback kept in the server log only.
    """

    def __init__(self, app: Callable, debug: bool = False):
        self.app = app
        self.debug = debug

    async def __call__(self, scope: dict, receive: Callable, send: Callable) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        try:
            await self.app(scope, receive, send)
        except Exception as exc:
            response = self._handle_exception(exc, scope)
            await response(scope, receive, send)

    def _handle_exception(self, exc: Exception, scope: dict) -> Response:
        request_path = scope.get("path", "unknown")
        request_method = scope.get("method", "unknown")
        details = None

        if isinstance(exc, OperationalError):
            status_code = status.HTTP_503_SERVICE_UNAVAILABLE
            error_code = "DATABASE_ERROR"
            message = "Database service temporarily unavailable"
            logger.error(
                f"Database operational error: {request_method} {request_path}",
                exc_info=exc,
            )
        elif isinstance(exc, SQLAlchemyError):
            status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
            error_code = "DATABASE_ERROR"
            message = "A database error occurred"
            logger.error(f"SQLAlchemy error: {request_method} {request_path}", exc_info=exc)
        else:
            status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
            error_code = "INTERNAL_SERVER_ERROR"
            message = "An unexpected error occurred"
            logger.error(
                f"Unhandled exception: {request_method} {request_path} - "
                f"{type(exc).__name__}: {sanitize_error_message(str(exc))}",
                exc_info=exc,
            )

        if self.debug:
            details = {
                "type": type(exc).__name__,
                "message": sanitize_error_message(str(exc)),
                "traceback": "".join(
                    traceback.format_exception(type(exc), exc, exc.__traceback__)
                ),
            }

        return JSONResponse(
            status_code=status_code,
            content=error_body(error_code, message, request_path, request_method, details),
        )


def setup_error_handlers(app):
    """
    Register handlers for the typed failures a route can raise.

    Args:
        app: FastAPI application instance
    """

    @app.exception_handler(MarketplaceError)
    async def marketplace_error_handler(request: Request, exc: MarketplaceError):
        if exc.status_code >= 500:
            logger.error(f"{exc.code}: {request.method} {request.url.path}", exc_info=exc)
        else:
            logger.info(
                f"{exc.code}: {request.method} {request.url.path} - "
                f"{sanitize_error_message(exc.message)}"
            )
        return JSONResponse(
            status_code=exc.status_code,
            content=error_body(exc.code, exc.message, request.url.path, request.method),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        errors = format_validation_errors(exc)
        logger.info(f"Validation error: {request.method} {request.url.path} - {errors}")
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=error_body(
                "VALIDATION_ERROR",
                "Request validation failed",
                request.url.path,
                request.method,
                errors,
            ),
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content=error_body(
                "HTTP_EXCEPTION", str(exc.detail), request.url.path, request.method
            ),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(IntegrityError)
    async def integrity_error_handler(request: Request, exc: IntegrityError):
        logger.warning(
            f"Integrity error: {request.method} {request.url.path} - "
            f"{sanitize_error_message(exc.orig)}"
        )
        return JSONResponse(
            status_code=status.HTTP_409_CONFLICT,
            content=error_body(
                "CONFLICT",
                "The request conflicts with existing data",
                request.url.path,
                request.method,
            ),
        )

    @app.exception_handler(ValidationError)
    async def model_validation_handler(request: Request, exc: ValidationError):
        # Raised when a handler builds a schema from already-parsed query values
        errors = format_validation_errors(exc)
        logger.info(f"Validation error: {request.method} {request.url.path} - {errors}")
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=error_body(
                "VALIDATION_ERROR",
                "Request validation failed",
                request.url.path,
                request.method,
                errors,
            ),
        )
