from flask import jsonify
from werkzeug.exceptions import HTTPException
from marshmallow import ValidationError as SchemaValidationError
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
import logging

from models.schemas.common import flatten_messages
from services.exceptions import StorefrontError, StoreError

logger = logging.getLogger(__name__)


def error_response(code: str, message: str, status: int, details: dict | None = None):
    payload = {"success": False, "error": message, "code": code, "status": status}
    if details:
        payload["details"] = details
    return jsonify(payload), status


def register_error_handlers(app):
    # Domain errors raised by the services carry their own status
    @app.errorhandler(StorefrontError)
    def handle_storefront_error(err: StorefrontError):
        if err.status >= 500:
            logger.exception("Service failure", exc_info=err)
        return error_response(err.code, err.message, err.status, details=err.details)

    # Marshmallow validation errors map to 400 with every field message
    @app.errorhandler(SchemaValidationError)
    def handle_validation_error(err: SchemaValidationError):
        message = "Validation failed: " + "; ".join(flatten_messages(err.messages))
        return error_response("VALIDATION_ERROR", message, 400, details=err.messages)

    # Integrity errors the services did not translate (check constraints, unique indexes)
    @app.errorhandler(IntegrityError)
    def handle_integrity_error(err: IntegrityError):
        logger.warning("Integrity error: %s", getattr(err, "orig", err))
        message = str(getattr(err, "orig", err)).lower()
        if "unique" in message:
            return error_response("CONFLICT", "Value must be unique.", 400)
        return error_response("BAD_REQUEST", "Constraint failed.", 400)

    # Anything else from the store: details stay in the log
    @app.errorhandler(SQLAlchemyError)
    def handle_store_error(err: SQLAlchemyError):
        logger.exception("Database error", exc_info=err)
        return error_response(StoreError.code, "A database error occurred", StoreError.status)

    # Werkzeug HTTPExceptions map to their status codes
    @app.errorhandler(HTTPException)
    def handle_http_exception(err: HTTPException):
        code = (err.name or "HTTP_ERROR").upper().replace(" ", "_")
        return error_response(code, err.description, err.code or 400)

    # 500 Internal Error (catch-all)
    @app.errorhandler(Exception)
    def internal_error(err: Exception):
        logger.exception("Unhandled exception", exc_info=err)
        details = None
        if app.debug:
            details = {"type": err.__class__.__name__, "message": str(err)}
        return error_response("INTERNAL_ERROR", "An unexpected error occurred", 500, details=details)
