from __future__ import annotations
import logging
from typing import Any, Dict, List

from flask import Flask, jsonify
from pydantic import ValidationError
from werkzeug.exceptions import HTTPException

log = logging.getLogger(__name__)

INVALID_DATA = "The given data was invalid."


class ApiError(Exception):
    """Base for errors rendered as a JSON body with a `message` key."""
    status_code = 400

    def __init__(self, message: str, payload: Dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.payload = payload or {}

    def to_dict(self) -> Dict[str, Any]:
        body = {"message": self.message}
        body.update(self.payload)
        return body


class NotFound(ApiError):
    status_code = 404


class Unprocessable(ApiError):
    status_code = 422


class Conflict(Unprocessable):
    """Duplicate value or combination; carries the existing row under `key`."""

    def __init__(self, message: str, key: str, existing: Any):
        super().__init__(message, {key: existing})


class ValidationFailed(Unprocessable):
    def __init__(self, errors: Dict[str, List[str]]):
        super().__init__(INVALID_DATA, {"errors": errors})
        self.errors = errors


class Unauthenticated(ApiError):
    status_code = 401

    def __init__(self, message: str = "Unauthenticated"):
        super().__init__(message)


class Forbidden(ApiError):
    status_code = 403


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(ApiError)
    def _api_error(ex: ApiError):
        return jsonify(ex.to_dict()), ex.status_code

    @app.errorhandler(ValidationError)
    def _pydantic_error(ex: ValidationError):
        from .validators import format_errors
        return jsonify(ValidationFailed(format_errors(ex)).to_dict()), 422

    @app.errorhandler(HTTPException)
    def _http_error(ex: HTTPException):
        return jsonify({"message": ex.description or ex.name}), ex.code

    @app.errorhandler(Exception)
    def _unhandled(ex: Exception):
        log.exception("unhandled error")
        return jsonify({"message": "Server Error"}), 500
