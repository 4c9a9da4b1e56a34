"""
Request logging for the ShelfLink API.

Every request gets an id (taken from X-Request-ID or generated) that is
echoed on the response and attached to log lines. Headers that identify
the user are redacted before they are logged.
"""

import json
import logging
import time
import uuid
from contextvars import ContextVar
from dataclasses import dataclass, field
from typing import Callable, Optional

from fastapi import FastAPI, Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

request_id_var: ContextVar[str] = ContextVar("request_id", default="")

logger = logging.getLogger("shelflink.api")

REDACTED = "[REDACTED]"


def get_request_id() -> str:
    """Id of the request being handled, or "" outside a request."""
    return request_id_var.get()


@dataclass
class LoggingConfig:
    """Request logging options."""

    enabled: bool = True
    request_id_header: str = "X-Request-ID"
    skip_paths: set[str] = field(default_factory=lambda: {"/health"})
    redacted_headers: set[str] = field(default_factory=lambda: {"authorization", "cookie"})

    @classmethod
    def for_settings(cls, settings) -> "LoggingConfig":
        """Config that also redacts the header carrying the user id."""
        config = cls()
        config.redacted_headers.add(settings.user_id_header.lower())
        return config


class StructuredLogFormatter(logging.Formatter):
    """One JSON object per log line, tagged with the current request id."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        request_id = get_request_id()
        if request_id:
            entry["request_id"] = request_id
        for key in ("request_data", "status_code", "duration_ms"):
            if hasattr(record, key):
                entry[key] = getattr(record, key)
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Assigns request ids and logs one line per request."""

    def __init__(self, app: FastAPI, config: Optional[LoggingConfig] = None):
        super().__init__(app)
        self.config = config or LoggingConfig()

    def redact(self, headers) -> dict[str, str]:
        return {
            key: REDACTED if key.lower() in self.config.redacted_headers else value
            for key, value in headers.items()
        }

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get(self.config.request_id_header) or uuid.uuid4().hex[:8]
        request_id_var.set(request_id)

        start = time.perf_counter()
        response = await call_next(request)
        duration_ms = round((time.perf_counter() - start) * 1000, 2)

        response.headers[self.config.request_id_header] = request_id

        if self.config.enabled and request.url.path not in self.config.skip_paths:
            level = logging.INFO
            if response.status_code >= 500:
                level = logging.ERROR
            elif response.status_code >= 400:
                level = logging.WARNING

            logger.log(
                level,
                f"{request.method} {request.url.path} -> {response.status_code} ({duration_ms}ms)",
                extra={
                    "request_data": {
                        "method": request.method,
                        "path": request.url.path,
                        "headers": self.redact(request.headers),
                    },
                    "status_code": response.status_code,
                    "duration_ms": duration_ms,
                },
            )

        return response


def setup_logging(
    app: FastAPI,
    config: Optional[LoggingConfig] = None,
    structured: bool = True,
) -> None:
    """
    Install the request logging middleware.

    Args:
        app: FastAPI application instance.
        config: Logging configuration.
        structured: Emit JSON lines on the "shelflink" logger.
    """
    if structured:
        app_logger = logging.getLogger("shelflink")
        if not any(isinstance(h.formatter, StructuredLogFormatter) for h in app_logger.handlers):
            handler = logging.StreamHandler()
            handler.setFormatter(StructuredLogFormatter())
            app_logger.addHandler(handler)
        app_logger.setLevel(logging.INFO)

    app.add_middleware(RequestLoggingMiddleware, config=config or LoggingConfig())
