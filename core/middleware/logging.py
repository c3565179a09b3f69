"""
Structured logging setup and request logging middleware.
"""

import json
import logging
import re
import time
import traceback
import uuid
from typing import Any, Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

logger = logging.getLogger(__name__)

SENSITIVE_FIELD_PATTERNS = [
    re.compile(r"password", re.IGNORECASE),
    re.compile(r"token", re.IGNORECASE),
    re.compile(r"api[_-]?key", re.IGNORECASE),
    re.compile(r"secret", re.IGNORECASE),
    re.compile(r"authorization", re.IGNORECASE),
    re.compile(r"cookie", re.IGNORECASE),
]

# Never logged, even when request bodies are enabled
CV_FIELDS = {"cv_text", "cv_file"}

SKIP_PATHS = ("/health", "/ready")


def is_sensitive_field(field_name: str) -> bool:
    return any(pattern.search(field_name) for pattern in SENSITIVE_FIELD_PATTERNS)


def mask_sensitive_data(data: Any) -> Any:
    """
    Mask sensitive keys in dictionaries and lists.

    CV contents are replaced by their length so request logs never carry
    applicant documents.
    """
    if isinstance(data, dict):
        masked = {}
        for key, value in data.items():
            if key in CV_FIELDS:
                masked[key] = f"[{len(value) if isinstance(value, str) else 'file'}]"
            elif is_sensitive_field(str(key)):
                masked[key] = "[REDACTED]"
            else:
                masked[key] = mask_sensitive_data(value)
        return masked

    if isinstance(data, list):
        return [mask_sensitive_data(item) for item in data]

    return data


def should_log_request(path: str) -> bool:
    return not any(path.startswith(skip) for skip in SKIP_PATHS)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Logs one line when a request starts and one when it completes.

    Assigns ``x-request-id`` (or keeps the caller's) and echoes it on the
    response. Completed requests log at ERROR for 5xx, WARNING for 4xx and
    INFO otherwise.
    """

    def __init__(
        self,
        app: ASGIApp,
        log_request_body: bool = False,
        max_body_size: int = 1024,
    ):
        super().__init__(app)
        self.log_request_body = log_request_body
        self.max_body_size = max_body_size

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get("x-request-id") or str(uuid.uuid4())
        request.state.request_id = request_id

        if not should_log_request(request.url.path):
            response = await call_next(request)
            response.headers["x-request-id"] = request_id
            return response

        start_time = time.perf_counter()

        request_log = {
            "event": "request_started",
            "request_id": request_id,
            "method": request.method,
            "path": request.url.path,
            "query_params": mask_sensitive_data(dict(request.query_params)),
        }

        if self.log_request_body and request.method in ("POST", "PUT", "PATCH"):
            body = await self._get_request_body(request)
            if body is not None:
                request_log["body"] = mask_sensitive_data(body)

        logger.info(json.dumps(request_log))

        response = None
        try:
            response = await call_next(request)
        finally:
            duration = time.perf_counter() - start_time
            status_code = response.status_code if response is not None else 500

            response_log = {
                "event": "request_completed",
                "request_id": request_id,
                "method": request.method,
                "path": request.url.path,
                "duration_ms": round(duration * 1000, 2),
                "status_code": status_code,
            }

            if status_code >= 500:
                logger.error(json.dumps(response_log))
            elif status_code >= 400:
                logger.warning(json.dumps(response_log))
            else:
                logger.info(json.dumps(response_log))

            if response is not None:
                response.headers["x-request-id"] = request_id

        return response

    async def _get_request_body(self, request: Request) -> Any:
        content_type = request.headers.get("content-type", "")

        # Multipart bodies are CV uploads; only JSON is worth logging
        if "application/json" not in content_type:
            return {"_content_type": content_type}

        body_bytes = await request.body()
        if len(body_bytes) > self.max_body_size:
            return {"_truncated": True, "_size": len(body_bytes)}

        try:
            return json.loads(body_bytes.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            logger.debug(f"Could not parse request body: {e}")
            return None


class StructuredFormatter(logging.Formatter):
    """Formats log records as single-line JSON."""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if hasattr(record, "request_id"):
            log_data["request_id"] = record.request_id

        if record.exc_info:
            log_data["exception"] = {
                "type": record.exc_info[0].__name__,
                "message": str(record.exc_info[1]),
                "traceback": traceback.format_exception(*record.exc_info),
            }

        return json.dumps(log_data)


def setup_logging(log_level: str = "INFO", json_logs: bool = True) -> None:
    """
    Configure application-wide logging.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
        json_logs: Whether to format logs as JSON
    """
    level = getattr(logging, log_level.upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)

    if json_logs:
        formatter = StructuredFormatter()
    else:
        formatter = logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")

    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    # Reduce noise from third-party libraries
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
