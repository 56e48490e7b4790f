# Overview: Error taxonomy shared by services and routes, and the JSON error handlers.

"""
Every failure a client can observe is one of the ApiError subclasses below.

Services raise them; routes let them propagate; the handlers registered in
register_error_handlers() turn them into {"message": ...} bodies. Storage
failures are logged server-side and reach the client as a generic message.
"""
from __future__ import annotations

from flask import current_app, jsonify
from sqlalchemy.exc import SQLAlchemyError
from werkzeug.exceptions import HTTPException

from .extensions import db


class ApiError(Exception):
    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: str | None = None, *, fields: dict | None = None):
        super().__init__(message or self.default_message)
        self.message = message or self.default_message
        self.fields = fields

    def to_dict(self) -> dict:
        body = {"message": self.message}
        if self.fields:
            body["fields"] = self.fields
        return body


class ValidationError(ApiError):
    """400-level input problem."""
    status_code = 400
    default_message = "Invalid request data"


class Unauthorized(ApiError):
    status_code = 401
    default_message = "Access token required"


class InvalidCredentials(ApiError):
    """Unknown username and wrong password share this message."""
    status_code = 401
    default_message = "Invalid credentials"


class AccountDisabled(ApiError):
    status_code = 401
    default_message = "Account is disabled"


class Forbidden(ApiError):
    status_code = 403
    default_message = "Insufficient permissions"


class NotFound(ApiError):
    status_code = 404
    default_message = "Not found"


class ConstraintViolation(ApiError):
    """409-level uniqueness / referential conflict (e.g., duplicate SKU)."""
    status_code = 409
    default_message = "Conflicts with an existing record"


class InvalidTransition(ApiError):
    status_code = 409
    default_message = "Status transition not allowed"


class StorageError(ApiError):
    status_code = 500
    default_message = "Internal storage error"


def register_error_handlers(app) -> None:
    @app.errorhandler(ApiError)
    def handle_api_error(err: ApiError):
        if isinstance(err, StorageError):
            current_app.logger.error("Storage failure: %s", err.__cause__ or err)
            return jsonify({"message": StorageError.default_message}), 500
        return jsonify(err.to_dict()), err.status_code

    @app.errorhandler(SQLAlchemyError)
    def handle_sqlalchemy_error(err: SQLAlchemyError):
        db.session.rollback()
        current_app.logger.exception("Unhandled database error")
        return jsonify({"message": StorageError.default_message}), 500

    @app.errorhandler(HTTPException)
    def handle_http_exception(err: HTTPException):
        return jsonify({"message": err.description or err.name}), err.code

    @app.errorhandler(Exception)
    def handle_unexpected(err: Exception):
        db.session.rollback()
        current_app.logger.exception("Unhandled error")
        return jsonify({"message": "Internal server error"}), 500
