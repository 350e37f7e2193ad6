"""
Error envelope middleware - Standardize all error responses.

Response format:
{
    "error": {
        "code": "INVALID_PARAMS",
        "message": "minPrice: Input should be a valid number",
        "requestId": "uuid",
        "field": "minPrice"
    }
}

Domain exceptions map to codes here, so routes can let them propagate:
    utils.normalize.ValidationError   -> 400 INVALID_PARAMS
    db.engine.StoreUnavailableError   -> 503 SERVICE_UNAVAILABLE
"""

import logging
from flask import Flask, jsonify, g
from werkzeug.exceptions import HTTPException

from api.serializers.response import error_envelope
from db.engine import StoreUnavailableError
from utils.normalize import ValidationError


logger = logging.getLogger('api.middleware.error')


# Error codes reference
ERROR_CODES = {
    # Client errors (4xx)
    "BAD_REQUEST": 400,
    "NOT_FOUND": 404,
    "METHOD_NOT_ALLOWED": 405,
    "INVALID_PARAMS": 400,

    # Server errors (5xx)
    "INTERNAL_ERROR": 500,
    "SERVICE_UNAVAILABLE": 503,
}


def make_error_response(
    code: str,
    message: str,
    status_code: int = None,
    field: str = None,
    details: dict = None,
    hint: str = None,
):
    """
    Create a standardized error response.

    Returns:
        Tuple of (response, status_code)
    """
    if status_code is None:
        status_code = ERROR_CODES.get(code, 500)

    # X-Request-ID is added by the request_id middleware
    return jsonify(error_envelope(code, message, field=field, details=details, hint=hint)), status_code


def setup_error_handlers(app: Flask) -> None:
    """
    Set up standardized error handlers on Flask app.

    Handles:
    - Input validation failures
    - Store unavailability (when a route does not fall back)
    - HTTP exceptions (404, 405, ...)
    - Unhandled Python exceptions
    """

    @app.errorhandler(ValidationError)
    def handle_validation_error(error):
        details = None
        if error.received_value is not None:
            details = {"received": str(error.received_value)}
        return make_error_response(
            "INVALID_PARAMS",
            str(error),
            field=error.field,
            details=details,
        )

    @app.errorhandler(StoreUnavailableError)
    def handle_store_unavailable(error):
        logger.warning(
            "store_unavailable request_id=%s err=%s",
            getattr(g, 'request_id', None), error,
        )
        return make_error_response(
            "SERVICE_UNAVAILABLE",
            "Transaction data is temporarily unavailable",
            hint="Retry later",
        )

    @app.errorhandler(HTTPException)
    def handle_http_error(error):
        # "Not Found" -> "NOT_FOUND"
        code = error.name.upper().replace(' ', '_')
        return make_error_response(code, error.description, status_code=error.code)

    @app.errorhandler(Exception)
    def handle_generic_error(error):
        """Handle unhandled Python exceptions."""
        request_id = getattr(g, 'request_id', None)

        logger.exception(
            "Unhandled error: %s",
            error,
            extra={
                "event": "unhandled_error",
                "request_id": request_id,
                "error_type": type(error).__name__,
            }
        )

        return make_error_response("INTERNAL_ERROR", "An unexpected error occurred")
