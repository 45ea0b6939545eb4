"""
Translation boundary: every failure leaving a view becomes one JSON error body.

Domain errors are mapped through OUTCOMES (ErrorKind -> status + error code);
nothing here inspects concrete exception classes beyond the four handler
entry points. Bodies never contain stack traces or SQL.
"""
import logging
from typing import NamedTuple

from flask import current_app, jsonify
from marshmallow import ValidationError
from sqlalchemy.exc import OperationalError
from sqlalchemy.exc import TimeoutError as PoolTimeoutError
from werkzeug.exceptions import HTTPException

from exceptions import CatalogError, ErrorKind, TransientStorageFailure, ValidationFailure
from exceptions.storage import classify_transient_error
from utils.logging import get_correlation_id

logger = logging.getLogger(__name__)


class Outcome(NamedTuple):
    status: int
    error: str


OUTCOMES = {
    ErrorKind.VALIDATION: Outcome(400, "VALIDATION_ERROR"),
    ErrorKind.DUPLICATE_RESOURCE: Outcome(409, "DUPLICATE_RESOURCE"),
    ErrorKind.RESOURCE_IN_USE: Outcome(409, "RESOURCE_IN_USE"),
    ErrorKind.UNIQUE_KEY_VIOLATION: Outcome(409, "UNIQUE_KEY_VIOLATION"),
    ErrorKind.FOREIGN_KEY_VIOLATION: Outcome(409, "FOREIGN_KEY_VIOLATION"),
    ErrorKind.NOT_FOUND: Outcome(404, "NOT_FOUND"),
    ErrorKind.INVALID_OPERATION: Outcome(400, "INVALID_OPERATION"),
    ErrorKind.STORAGE_DEADLOCK: Outcome(503, "STORAGE_DEADLOCK"),
    ErrorKind.STORAGE_TIMEOUT: Outcome(504, "STORAGE_TIMEOUT"),
    ErrorKind.UNCLASSIFIED: Outcome(500, "INTERNAL_ERROR"),
}

GENERIC_MESSAGE = "An unexpected error occurred"


def outcome_for(kind: ErrorKind) -> Outcome:
    return OUTCOMES[kind]


def log_level_for(status: int) -> int:
    if status in (503, 504):
        return logging.WARNING
    if status >= 500:
        return logging.ERROR
    return logging.INFO


def error_response(error: str, message: str, status: int, details=None, **extra):
    payload = {
        "error": error,
        "message": message,
        "status": status,
        "correlation_id": get_correlation_id(),
    }
    if details:
        payload["details"] = details
    payload.update(extra)
    return jsonify(payload), status


def catalog_error_response(err: CatalogError):
    kind = err.kind
    outcome = outcome_for(kind)
    logger.log(log_level_for(outcome.status), "%s: %s", kind.value, err.message,
               exc_info=outcome.status == 500)

    if outcome.status == 500:
        return error_response(outcome.error, GENERIC_MESSAGE, outcome.status)

    extra = {}
    if isinstance(err, ValidationFailure):
        extra["errors"] = err.field_messages()
    retry_after = None
    if kind is ErrorKind.STORAGE_DEADLOCK:
        retry_after = current_app.config.get("RETRY_AFTER_SECONDS", 5)
        extra["retry_after"] = retry_after

    response, status = error_response(outcome.error, err.message, outcome.status, details=err.details(), **extra)
    if retry_after is not None:
        response.headers["Retry-After"] = str(retry_after)
    return response, status


def internal_error_response(err: Exception):
    logger.error("Unhandled exception", exc_info=err)
    outcome = outcome_for(ErrorKind.UNCLASSIFIED)
    return error_response(outcome.error, GENERIC_MESSAGE, outcome.status)


def register_error_handlers(app):
    @app.errorhandler(CatalogError)
    def handle_catalog_error(err: CatalogError):
        return catalog_error_response(err)

    # Views that load schemas themselves still land on the validation outcome
    @app.errorhandler(ValidationError)
    def handle_validation_error(err: ValidationError):
        return catalog_error_response(ValidationFailure(err.messages))

    # Reads run outside storage_errors(); classify lock/timeouts they hit here
    @app.errorhandler(OperationalError)
    @app.errorhandler(PoolTimeoutError)
    def handle_storage_error(err):
        reason = classify_transient_error(err)
        if reason is None:
            return internal_error_response(err)
        return catalog_error_response(TransientStorageFailure(reason))

    # Werkzeug HTTPExceptions (unknown route, wrong method, bad JSON) keep their status codes
    @app.errorhandler(HTTPException)
    def handle_http_exception(err: HTTPException):
        status = err.code or 400
        logger.log(log_level_for(status), "http %s: %s", status, err.description)
        error = (err.name or "Bad Request").upper().replace(" ", "_")
        return error_response(error, err.description, status)

    # 500 Internal Error (catch-all)
    @app.errorhandler(Exception)
    def internal_error(err: Exception):
        return internal_error_response(err)
