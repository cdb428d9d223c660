"""Logging setup for the auth service.

Records are emitted on stdout, one JSON object per line in production and a
compact text line during development. Every record carries the service name
and, inside a request, the correlation id taken from ``X-Request-ID`` or
``X-Correlation-ID`` (a UUID is generated when neither is sent).
"""

from __future__ import annotations

import json
import logging
import sys
import time
from datetime import datetime, timezone
from typing import Any
from uuid import uuid4

from flask import Flask, Response, g, has_request_context, request

REQUEST_ID_HEADER = "X-Request-ID"
CORRELATION_HEADERS = (REQUEST_ID_HEADER, "X-Correlation-ID")
DEFAULT_SERVICE = "auth-service"

# ``extra=`` attributes promoted into the payload
EXTRA_KEYS = ("user_id", "code", "status", "method", "path", "elapsed_ms", "endpoint")

_request_log = logging.getLogger("ecommerce_auth.request")


class ServiceContextFilter(logging.Filter):
    """Stamp ``service`` and ``request_id`` onto every record."""

    def __init__(self, service: str = DEFAULT_SERVICE) -> None:
        super().__init__()
        self.service = service

    def filter(self, record: logging.LogRecord) -> bool:
        record.service = self.service
        record.request_id = ensure_request_id() if has_request_context() else None
        return True


class JSONFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "time": datetime.now(timezone.utc).isoformat(timespec="milliseconds"),
            "level": record.levelname,
            "service": getattr(record, "service", DEFAULT_SERVICE),
            "name": record.name,
            "message": record.getMessage(),
            "request_id": getattr(record, "request_id", None),
        }
        payload.update({k: getattr(record, k) for k in EXTRA_KEYS if hasattr(record, k)})
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


class ConsoleFormatter(logging.Formatter):
    """Readable single-line output for local development."""

    def __init__(self) -> None:
        super().__init__("%(asctime)s %(levelname)-7s [%(service)s] %(name)s: %(message)s")

    def format(self, record: logging.LogRecord) -> str:
        record.__dict__.setdefault("service", DEFAULT_SERVICE)
        line = super().format(record)
        extras = " ".join(f"{k}={getattr(record, k)}" for k in EXTRA_KEYS if hasattr(record, k))
        return f"{line} {extras}" if extras else line


def ensure_request_id() -> str:
    """Return the correlation id of the current request, assigning one if needed."""
    if not has_request_context():
        return str(uuid4())
    request_id = g.get("request_id")
    if request_id is None:
        request_id = next(
            (request.headers[h] for h in CORRELATION_HEADERS if request.headers.get(h)),
            None,
        ) or str(uuid4())
        g.request_id = request_id
    return request_id


def configure_logging(
    level: str | int = "INFO", *, fmt: str = "json", service: str = DEFAULT_SERVICE
) -> None:
    """Replace the root handlers with a single stdout handler.

    :param level: Level name or number; unknown names fall back to ``INFO``.
    :param fmt: ``"json"`` or ``"text"``.
    :param service: Value of the ``service`` field on every record.
    """
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(ConsoleFormatter() if fmt == "text" else JSONFormatter())
    handler.addFilter(ServiceContextFilter(service))

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    if isinstance(level, str):
        resolved = logging.getLevelName(level.upper())
        level = resolved if isinstance(resolved, int) else logging.INFO
    root.setLevel(level)


def redact_email(email: str) -> str:
    """Mask the local part of an email address before it reaches the logs."""
    if "@" not in email:
        return "redacted"
    local, domain = email.split("@", 1)
    return f"{local[:2]}***@{domain}"


def init_app(app: Flask) -> None:
    """Assign request ids, echo them back and log one line per request."""

    app.logger.addFilter(ServiceContextFilter(app.config.get("SERVICE_NAME", DEFAULT_SERVICE)))

    @app.before_request
    def _start_request() -> None:
        ensure_request_id()
        g.request_started = time.perf_counter()

    @app.after_request
    def _finish_request(response: Response) -> Response:
        response.headers.setdefault(REQUEST_ID_HEADER, ensure_request_id())
        started = g.get("request_started")
        if started is not None:
            _request_log.info(
                "%s %s %s",
                request.method,
                request.path,
                response.status_code,
                extra={
                    "method": request.method,
                    "path": request.path,
                    "status": response.status_code,
                    "elapsed_ms": round((time.perf_counter() - started) * 1000, 2),
                },
            )
        return response


__all__ = [
    "ConsoleFormatter",
    "JSONFormatter",
    "configure_logging",
    "ensure_request_id",
    "init_app",
    "redact_email",
]
