"""Centralized JSON error handling producing the API response envelope.

Every handled error renders as::

    {"success": false,
     "error": {"message": ..., "code": ..., "details": ..., "requestId": ...}}
"""

from __future__ import annotations

import logging
from http import HTTPStatus
from typing import Any

from flask import Flask, Response, current_app, jsonify, request
from marshmallow import ValidationError as MarshmallowValidationError
from redis.exceptions import RedisError  # type: ignore[import-untyped]
from sqlalchemy.exc import IntegrityError, OperationalError
from werkzeug.exceptions import HTTPException

from ecommerce_auth.core.logger import ensure_request_id
from ecommerce_auth.services._shared.errors import ServiceError

log = logging.getLogger(__name__)


def _http_status_to_code(status_code: int) -> str:
    """Map common HTTP status codes to canonical, stable error codes."""
    mapping = {
        400: "BAD_REQUEST",
        401: "AUTH_REQUIRED",
        403: "FORBIDDEN",
        404: "NOT_FOUND",
        405: "METHOD_NOT_ALLOWED",
        413: "PAYLOAD_TOO_LARGE",
        415: "UNSUPPORTED_MEDIA_TYPE",
        429: "TOO_MANY_REQUESTS",
        500: "INTERNAL_ERROR",
        503: "SERVICE_UNAVAILABLE",
    }
    return mapping.get(status_code, "ERROR")


def error_envelope(
    *,
    code: str,
    message: str,
    details: Any = None,
) -> dict[str, Any]:
    """
    Build the failure envelope.

    :param code: Stable machine-consumable error code.
    :param message: Human-readable error summary (safe for clients).
    :param details: Optional safe, structured details.
    :returns: Envelope dictionary with the correlation id attached.
    :rtype: dict
    """
    error: dict[str, Any] = {"message": message, "code": code}
    if details:
        error["details"] = details
    error["requestId"] = ensure_request_id()
    return {"success": False, "error": error}


def _error_response(status: int, envelope: dict[str, Any]) -> tuple[Response, int]:
    return jsonify(envelope), status


def _log_for(status: int):
    return log.error if status >= 500 else log.warning


def init_app(app: Flask) -> None:
    """
    Attach JSON error handlers to the Flask app.

    Notes
    -----
    - Guarantees the failure envelope for every handled error.
    - Ensures a correlation ``requestId`` is present on every error.
    - Emits 5xx with ``exc_info`` for traceability; 4xx as warnings.
    """

    @app.errorhandler(ServiceError)
    def handle_service_error(err: ServiceError):
        status = int(err.status_code)
        if status >= 500:
            log.error(
                "ServiceError: code=%s status=%s",
                err.code,
                status,
                exc_info=True,
                extra={"code": err.code, "status": status},
            )
        else:
            log.warning(
                "ServiceError: code=%s status=%s msg=%s",
                err.code,
                status,
                err.message,
                extra={"code": err.code, "status": status},
            )
        envelope = error_envelope(code=err.code, message=err.message, details=err.details)
        return _error_response(status, envelope)

    @app.errorhandler(HTTPException)
    def handle_http_exception(err: HTTPException):
        status = int(err.code or HTTPStatus.INTERNAL_SERVER_ERROR)
        error_code = _http_status_to_code(status)
        # Werkzeug may provide HTML-ish description; normalize for clients
        message = (err.description or error_code.replace("_", " ").capitalize()).strip()
        if status == HTTPStatus.NOT_FOUND:
            message = f"Route '{request.path}' not found"
        _log_for(status)(
            "HTTPException: code=%s status=%s detail=%s",
            error_code,
            status,
            message,
        )
        return _error_response(status, error_envelope(code=error_code, message=message))

    @app.errorhandler(MarshmallowValidationError)
    def handle_validation_error(err: MarshmallowValidationError):
        envelope = error_envelope(
            code="VALIDATION_ERROR",
            message="Validation failed",
            details=err.normalized_messages(),
        )
        log.warning("ValidationError: fields=%s", sorted(err.normalized_messages()))
        return _error_response(HTTPStatus.BAD_REQUEST, envelope)

    @app.errorhandler(IntegrityError)
    def handle_integrity_error(err: IntegrityError):
        # Do not leak raw DB error to clients
        log.error("IntegrityError", exc_info=True)
        envelope = error_envelope(code="CONFLICT", message="Resource conflict")
        return _error_response(HTTPStatus.BAD_REQUEST, envelope)

    @app.errorhandler(OperationalError)
    def handle_operational_error(err: OperationalError):
        log.error("OperationalError", exc_info=True)
        envelope = error_envelope(
            code="SERVICE_UNAVAILABLE", message="Service temporarily unavailable"
        )
        return _error_response(HTTPStatus.SERVICE_UNAVAILABLE, envelope)

    @app.errorhandler(RedisError)
    def handle_redis_error(err: RedisError):
        log.error("RedisError", exc_info=True)
        envelope = error_envelope(
            code="SERVICE_UNAVAILABLE", message="Service temporarily unavailable"
        )
        return _error_response(HTTPStatus.SERVICE_UNAVAILABLE, envelope)

    @app.errorhandler(Exception)
    def handle_unexpected_error(err: Exception):
        # Unexpected server-side error; message only surfaces in development
        log.error("Unhandled exception", exc_info=True)
        message = "Internal server error"
        if current_app.config.get("EXPOSE_ERROR_DETAILS"):
            message = str(err) or message
        envelope = error_envelope(code="INTERNAL_ERROR", message=message)
        return _error_response(HTTPStatus.INTERNAL_SERVER_ERROR, envelope)


__all__ = ["error_envelope", "init_app"]
