"""
Core middleware package.

- Error handling with sanitized error bodies
- Structured request logging with masking
- Session decoding into the caller identity
"""

from core.middleware.error_handling import (
    ErrorHandlingMiddleware,
    setup_error_handlers,
    sanitize_error_message,
)

from core.middleware.logging import (
    StructuredLoggingMiddleware,
    setup_logging,
    mask_headers,
    mask_sensitive_data,
)

from core.middleware.authentication import (
    IdentityMiddleware,
    get_request_identity,
)

__all__ = [
    # Error handling
    "ErrorHandlingMiddleware",
    "setup_error_handlers",
    "sanitize_error_message",
    # Logging
    "StructuredLoggingMiddleware",
    "setup_logging",
    "mask_headers",
    "mask_sensitive_data",
    # Identity
    "IdentityMiddleware",
    "get_request_identity",
]
