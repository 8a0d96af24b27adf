"""Centralized error handling middleware for the Flask API.

Every error leaves the API in the same JSON envelope, so the UI can show
why a save failed instead of assuming it worked.

Error response format:
{
    "error": {
        "code": "ERROR_CODE",
        "message": "Human-readable error message",
        "details": {...}  # Optional additional details
    }
}

Usage:
    from api.middleware.error_handler import register_error_handlers

    app = Flask(__name__)
    register_error_handlers(app)
"""

import logging
import time
import traceback
from typing import Any, Dict, Tuple, Union

from flask import Flask, current_app, g, jsonify, request
from werkzeug.exceptions import HTTPException

from api.middleware.exceptions import APIError, format_error_response
from core.exceptions import SettingsError
from utils.logger import get_logger

logger = get_logger(__name__)

ErrorResponse = Tuple[Dict[str, Any], int]


def log_error(error: Exception, include_traceback: bool = True) -> None:
    """Log an error with request context."""
    request_info = f"{request.method} {request.path}"

    if include_traceback:
        logger.error(f"Error handling request {request_info}", exc_info=error)
    else:
        logger.warning(f"Handled error for request {request_info}: {error}")


# =============================================================================
# Error Handlers
# =============================================================================


def handle_application_error(error: Union[APIError, SettingsError]) -> ErrorResponse:
    """Handle API and settings-layer errors."""
    # 4xx errors are expected; skip the traceback
    log_error(error, include_traceback=error.status_code >= 500)

    return (
        format_error_response(
            code=error.code,
            message=error.message,
            details=error.details if error.details else None,
        ),
        error.status_code,
    )


def handle_http_exception(error: HTTPException) -> ErrorResponse:
    """Handle Werkzeug HTTP exceptions."""
    code_map = {
        400: "BAD_REQUEST",
        404: "NOT_FOUND",
        405: "METHOD_NOT_ALLOWED",
        413: "PAYLOAD_TOO_LARGE",
        415: "UNSUPPORTED_MEDIA_TYPE",
        500: "INTERNAL_SERVER_ERROR",
    }

    code = code_map.get(error.code, f"HTTP_{error.code}")
    message = error.description or str(error)

    if error.code >= 500:
        log_error(error, include_traceback=True)

    return format_error_response(code=code, message=message), error.code


def handle_generic_exception(error: Exception) -> ErrorResponse:
    """Handle unexpected exceptions."""
    log_error(error, include_traceback=True)

    if current_app.debug:
        return (
            format_error_response(
                code="INTERNAL_ERROR",
                message=str(error),
                details={"traceback": traceback.format_exc()},
            ),
            500,
        )

    return (
        format_error_response(
            code="INTERNAL_ERROR",
            message="An unexpected error occurred. Please try again later.",
        ),
        500,
    )


# =============================================================================
# Registration Function
# =============================================================================


def register_error_handlers(app: Flask) -> None:
    """
    Register all error handlers with the Flask app.

    Args:
        app: The Flask application instance
    """

    @app.errorhandler(APIError)
    @app.errorhandler(SettingsError)
    def application_error_handler(error):
        response, status_code = handle_application_error(error)
        return jsonify(response), status_code

    @app.errorhandler(HTTPException)
    def http_exception_handler(error):
        response, status_code = handle_http_exception(error)
        return jsonify(response), status_code

    @app.errorhandler(Exception)
    def generic_exception_handler(error):
        response, status_code = handle_generic_exception(error)
        return jsonify(response), status_code


# =============================================================================
# Request/Response Logging Middleware
# =============================================================================


def register_request_logging(app: Flask, log_level: int = logging.INFO) -> None:
    """
    Register request/response logging middleware.

    Logs method, path, status code and time taken. Bodies are never
    logged here since they may carry credentials.

    Args:
        app: The Flask application instance
        log_level: Logging level for successful requests
    """

    @app.before_request
    def log_request_start():
        g.request_started = time.time()

    @app.after_request
    def log_request_end(response):
        duration_ms = 0
        if "request_started" in g:
            duration_ms = int((time.time() - g.request_started) * 1000)

        # Skip logging for static files
        if request.path.startswith("/static"):
            return response

        log_msg = (
            f"{request.method} {request.path} "
            f"- {response.status_code} "
            f"({duration_ms}ms)"
        )

        if response.status_code >= 400:
            logger.warning(log_msg)
        else:
            logger.log(log_level, log_msg)

        return response
