"""
Core middleware package.

- Exception handlers translating domain errors to HTTP responses
- Structured logging with request ids
"""

from core.middleware.error_handling import (
    setup_error_handlers,
    sanitize_error_message,
)

from core.middleware.logging import (
    RequestLoggingMiddleware,
    StructuredFormatter,
    setup_logging,
)

__all__ = [
    # Error handling
    "setup_error_handlers",
    "sanitize_error_message",
    # Logging
    "RequestLoggingMiddleware",
    "StructuredFormatter",
    "setup_logging",
]
