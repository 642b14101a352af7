from flask import jsonify, current_app
from werkzeug.exceptions import HTTPException
from marshmallow import ValidationError
from sqlalchemy.exc import IntegrityError
import logging

logger = logging.getLogger(__name__)

ERROR_NAMES = {
    400: "BAD_REQUEST",
    401: "UNAUTHORIZED",
    403: "FORBIDDEN",
    404: "NOT_FOUND",
    405: "METHOD_NOT_ALLOWED",
    409: "CONFLICT",
    413: "PAYLOAD_TOO_LARGE",
    422: "VALIDATION_ERROR",
}


def error_response(error: str, message: str, status: int, details: dict | None = None):
    payload = {"error": error, "message": message, "status": status}
    if details:
        payload["details"] = details
    return jsonify(payload), status


def first_error_message(err: ValidationError, order) -> str:
    """Return the message of the first failing field, following ``order``."""
    messages = err.normalized_messages()
    for field in order:
        if field in messages:
            value = messages[field]
            return value[0] if isinstance(value, list) else str(value)
    return "invalid input"


def register_error_handlers(app):
    # Werkzeug HTTPExceptions (including abort()) map to their status codes
    @app.errorhandler(HTTPException)
    def handle_http_exception(err: HTTPException):
        code = err.code or 400
        if current_app and current_app.debug and code >= 500:
            logger.exception("HTTP error", exc_info=err)
        return error_response(ERROR_NAMES.get(code, "HTTP_ERROR"), err.description, code)

    # Marshmallow validation errors that escape a handler map to 422
    @app.errorhandler(ValidationError)
    def handle_validation_error(err: ValidationError):
        return error_response("VALIDATION_ERROR", "Invalid input", 422, details=err.messages)

    # Integrity errors (e.g. two registrations racing on the same email)
    @app.errorhandler(IntegrityError)
    def handle_integrity_error(err: IntegrityError):
        message = str(getattr(err, "orig", err))
        lower_msg = message.lower()
        logger.warning("Integrity error: %s", message)
        if "unique" in lower_msg:
            return error_response("CONFLICT", "user already exists", 409)
        return error_response("BAD_REQUEST", "Integrity error.", 400)

    # 500 Internal Error (catch-all)
    @app.errorhandler(Exception)
    def internal_error(err: Exception):
        logger.exception("Unhandled exception", exc_info=err)
        details = None
        if current_app and current_app.debug:
            details = {"type": err.__class__.__name__, "message": str(err)}
        return error_response("INTERNAL_ERROR", "server error", 500, details=details)
