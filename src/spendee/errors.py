"""Error types raised by services and their JSON rendering."""

from __future__ import annotations

from typing import Optional

from flask import Flask, jsonify, request
from werkzeug.exceptions import HTTPException

from .logging_config import get_logger

logger = get_logger(__name__)


class SpendeeError(Exception):
    """Base class for errors that map onto an HTTP status."""

    status_code = 400

    def __init__(self, message: str, *, errors: Optional[dict[str, list[str]]] = None):
        super().__init__(message)
        self.message = message
        self.errors = errors or {}

    def to_dict(self) -> dict:
        payload: dict = {"error": self.message, "message": self.message, "success": False}
        if self.errors:
            payload["errors"] = self.errors
        return payload


class ValidationError(SpendeeError, ValueError):
    """Input failed validation."""

    status_code = 400


class NotFoundError(SpendeeError, LookupError):
    """Missing row, or a row owned by somebody else."""

    status_code = 404


class ConflictError(SpendeeError):
    """Unique constraint clash such as a duplicate email."""

    status_code = 409


class AuthenticationError(SpendeeError):
    """Missing, invalid or expired credentials."""

    status_code = 401


class PermissionDeniedError(SpendeeError):
    """Authenticated, but the role does not allow the action."""

    status_code = 403


def _is_api_request() -> bool:
    return request.path.startswith("/api/")


def register_error_handlers(app: Flask) -> None:
    """Render service errors as JSON for API paths."""

    @app.errorhandler(SpendeeError)
    def _handle_spendee_error(exc: SpendeeError):
        logger.info(
            "Request rejected",
            extra={"path": request.path, "status": exc.status_code, "reason": exc.message},
        )
        return jsonify(exc.to_dict()), exc.status_code

    @app.errorhandler(HTTPException)
    def _handle_http_error(exc: HTTPException):
        if not _is_api_request():
            return exc
        return jsonify({"error": exc.description, "success": False}), exc.code

    @app.errorhandler(Exception)
    def _handle_unexpected(exc: Exception):
        logger.exception("Unhandled error", extra={"path": request.path})
        if _is_api_request():
            return jsonify({"error": "Internal server error", "success": False}), 500
        return "Internal server error", 500
