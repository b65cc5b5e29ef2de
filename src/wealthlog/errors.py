"""API error types and the Flask handlers that render them."""

from __future__ import annotations

from typing import Any, Mapping, Optional

from flask import Flask, current_app, g, jsonify, request
from sqlalchemy.exc import IntegrityError
from werkzeug.exceptions import HTTPException

from .logging_config import get_logger
from .responses import envelope

logger = get_logger(__name__)

INTERNAL_ERROR_MESSAGE = "Internal server error"


class ApiError(Exception):
    """Base class for errors that map onto an HTTP response."""

    status_code = 500
    error_type = "InternalError"
    default_message = INTERNAL_ERROR_MESSAGE

    def __init__(
        self,
        message: Optional[str] = None,
        *,
        status_code: Optional[int] = None,
        details: Optional[list[dict[str, Any]]] = None,
    ) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)
        if status_code is not None:
            self.status_code = status_code
        self.details = details

    def to_dict(self) -> dict[str, Any]:
        error: dict[str, Any] = {"type": self.error_type}
        if self.details:
            error["details"] = self.details
        return error


class ValidationError(ApiError):
    """Malformed or missing input, or a broken domain rule."""

    status_code = 400
    error_type = "ValidationError"
    default_message = "Validation failed"

    @classmethod
    def from_field_errors(
        cls, errors: Mapping[str, list[str]], message: str = "Validation failed"
    ) -> "ValidationError":
        """Build a 422 error carrying every collected field message."""

        return cls(message, status_code=422, details=field_error_details(errors))

    @classmethod
    def for_field(cls, field: str, message: str) -> "ValidationError":
        return cls(message, details=[{"field": field, "message": message}])


class AuthenticationError(ApiError):
    status_code = 401
    error_type = "AuthenticationError"
    default_message = "Authentication required"


class AuthorizationError(ApiError):
    status_code = 403
    error_type = "AuthorizationError"
    default_message = "Access denied"


class NotFoundError(ApiError):
    status_code = 404
    error_type = "NotFoundError"
    default_message = "Resource not found"


class ConflictError(ApiError):
    status_code = 409
    error_type = "ConflictError"
    default_message = "Resource already exists"


class InternalError(ApiError):
    status_code = 500
    error_type = "InternalError"


_HTTP_ERROR_TYPES = {
    400: ValidationError.error_type,
    401: AuthenticationError.error_type,
    403: AuthorizationError.error_type,
    404: NotFoundError.error_type,
    405: "MethodNotAllowedError",
    409: ConflictError.error_type,
}


def field_error_details(errors: Mapping[str, list[str]]) -> list[dict[str, str]]:
    """Flatten ``{field: [messages]}`` into a list of ``{field, message}`` entries."""

    return [
        {"field": field, "message": message}
        for field, messages in errors.items()
        for message in messages
    ]


def _error_response(status_code: int, message: str, error: dict[str, Any]):
    body = envelope(message=message, status_code=status_code)
    body["error"] = error
    return jsonify(body), status_code


def _request_context() -> dict[str, Any]:
    user = g.get("current_user")
    return {
        "method": request.method,
        "path": request.path,
        "user_id": getattr(user, "id", None),
        "remote_addr": request.remote_addr,
    }


def _dev_mode() -> bool:
    config = current_app.config.get("WEALTHLOG_CONFIG")
    return bool(getattr(config, "DEV_MODE", False))


def init_app(app: Flask) -> None:
    """Register JSON error handlers on the application."""

    @app.errorhandler(ApiError)
    def _handle_api_error(exc: ApiError):
        level = logger.error if exc.status_code >= 500 else logger.warning
        level(
            "Request failed: %s",
            exc.message,
            extra={**_request_context(), "status": exc.status_code, "error_type": exc.error_type},
        )
        message = exc.message
        if exc.status_code >= 500 and not _dev_mode():
            message = INTERNAL_ERROR_MESSAGE
        return _error_response(exc.status_code, message, exc.to_dict())

    @app.errorhandler(IntegrityError)
    def _handle_integrity_error(exc: IntegrityError):
        logger.warning(
            "Integrity error: %s", exc.orig, extra={**_request_context(), "status": 409}
        )
        conflict = ConflictError("Resource conflicts with an existing record")
        return _error_response(conflict.status_code, conflict.message, conflict.to_dict())

    @app.errorhandler(HTTPException)
    def _handle_http_exception(exc: HTTPException):
        status_code = exc.code or 500
        logger.warning(
            "HTTP error: %s", exc.description, extra={**_request_context(), "status": status_code}
        )
        error_type = _HTTP_ERROR_TYPES.get(status_code, InternalError.error_type)
        message = exc.description or exc.name
        if status_code == 404:
            message = f"Route {request.path} not found"
        return _error_response(status_code, message, {"type": error_type})

    @app.errorhandler(Exception)
    def _handle_unexpected(exc: Exception):
        logger.exception("Unhandled error", extra={**_request_context(), "status": 500})
        message = str(exc) if _dev_mode() else INTERNAL_ERROR_MESSAGE
        return _error_response(500, message or INTERNAL_ERROR_MESSAGE, {"type": InternalError.error_type})
