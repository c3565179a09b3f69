"""
Exception handlers that turn domain and infrastructure errors into JSON responses.

``DomainError`` kinds map to status codes through ``HTTP_STATUS_BY_KIND``.
Anything unclassified becomes a 500 with a generic message; the details only
go to the log, sanitized.
"""

import logging
import re
from typing import Any, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from core.errors import DomainError, ErrorKind

logger = logging.getLogger(__name__)

# Patterns for sensitive data that should never be logged or returned
SENSITIVE_PATTERNS = [
    re.compile(r'password["\s:=]+[^"\s,}]+', re.IGNORECASE),
    re.compile(r'token["\s:=]+[^"\s,}]+', re.IGNORECASE),
    re.compile(r'api[_-]?key["\s:=]+[^"\s,}]+', re.IGNORECASE),
    re.compile(r'secret["\s:=]+[^"\s,}]+', re.IGNORECASE),
    re.compile(r'authorization["\s:]+[^"\s,}]+', re.IGNORECASE),
]


def sanitize_error_message(message: str) -> str:
    """
    Remove sensitive information from error messages.

    Args:
        message: Original error message

    Returns:
        Sanitized error message
    """
    sanitized = str(message)
    for pattern in SENSITIVE_PATTERNS:
        sanitized = pattern.sub("[REDACTED]", sanitized)
    return sanitized


def error_body(
    request: Request,
    code: str,
    message: str,
    details: Optional[list[dict[str, Any]]] = None,
) -> dict[str, Any]:
    body: dict[str, Any] = {
        "code": code,
        "message": message,
        "path": str(request.url.path),
        "method": request.method,
    }
    if details:
        body["details"] = details

    request_id = getattr(request.state, "request_id", None)
    if request_id:
        body["request_id"] = request_id

    return {"error": body}


def setup_error_handlers(app: FastAPI) -> None:
    """
    Register exception handlers on a FastAPI application.

    Args:
        app: FastAPI application instance
    """

    @app.exception_handler(DomainError)
    async def domain_error_handler(request: Request, exc: DomainError):
        if exc.kind is ErrorKind.INTERNAL:
            logger.error(
                f"Internal error: {request.method} {request.url.path} - "
                f"{sanitize_error_message(exc.message)}"
            )
        else:
            logger.info(
                f"{exc.kind.value}: {request.method} {request.url.path} - "
                f"{sanitize_error_message(exc.message)}"
            )

        return JSONResponse(
            status_code=exc.status_code,
            content=error_body(
                request,
                exc.kind.value,
                sanitize_error_message(exc.message),
                [e.to_dict() for e in exc.errors],
            ),
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content=error_body(request, "http_error", sanitize_error_message(exc.detail)),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        errors = [
            {
                "field": ".".join(str(loc) for loc in error["loc"]),
                "message": sanitize_error_message(error["msg"]),
                "type": error["type"],
            }
            for error in exc.errors()
        ]
        logger.warning(f"Request validation failed: {request.method} {request.url.path}")

        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content=error_body(request, "request_validation", "Request validation failed", errors),
        )

    @app.exception_handler(IntegrityError)
    async def integrity_error_handler(request: Request, exc: IntegrityError):
        # A unique or check constraint lost a race that the service checks missed
        logger.warning(
            f"Integrity error: {request.method} {request.url.path} - "
            f"{sanitize_error_message(str(exc.orig))}"
        )
        return JSONResponse(
            status_code=status.HTTP_409_CONFLICT,
            content=error_body(
                request, ErrorKind.CONFLICT.value, "The request conflicts with existing data"
            ),
        )

    @app.exception_handler(SQLAlchemyError)
    async def database_error_handler(request: Request, exc: SQLAlchemyError):
        logger.error(
            f"Database error: {request.method} {request.url.path} - {type(exc).__name__}",
            exc_info=exc,
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=error_body(request, ErrorKind.INTERNAL.value, "A database error occurred"),
        )

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception):
        logger.error(
            f"Unhandled exception: {request.method} {request.url.path} - "
            f"{type(exc).__name__}: {sanitize_error_message(str(exc))}",
            exc_info=exc,
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=error_body(
                request, ErrorKind.INTERNAL.value, "An unexpected error occurred"
            ),
        )
