"""
Domain exceptions raised by services and dependencies.

Each exception carries the HTTP status and error code the error handlers
render, so services never build responses themselves.
"""

from fastapi import status


class MarketplaceError(Exception):
    """Base class for errors that map onto a client-facing response."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    code: str = "INTERNAL_SERVER_ERROR"
    default_message: str = "An unexpected error occurred"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class AuthenticationRequired(MarketplaceError):
    """No valid session accompanied the request."""

    status_code = status.HTTP_401_UNAUTHORIZED
    code = "UNAUTHENTICATED"
    default_message = "Authentication required"


class PermissionDenied(MarketplaceError):
    """The session's role may not call this endpoint."""

    status_code = status.HTTP_403_FORBIDDEN
    code = "FORBIDDEN"
    default_message = "You don't have permission to perform this action"


class ResourceNotFound(MarketplaceError):
    """Missing resource, or one the caller does not own."""

    status_code = status.HTTP_404_NOT_FOUND
    code = "NOT_FOUND"
    default_message = "Resource not found"


class InvalidInput(MarketplaceError):
    status_code = status.HTTP_400_BAD_REQUEST
    code = "INVALID_INPUT"
    default_message = "Invalid input provided"


class DuplicateAction(MarketplaceError):
    """A uniqueness rule rejected the write."""

    status_code = status.HTTP_409_CONFLICT
    code = "CONFLICT"
    default_message = "This action has already been performed"
