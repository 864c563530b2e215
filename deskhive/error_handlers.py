"""JSON error handlers shared by every blueprint."""

from flask import Blueprint, current_app, jsonify
from flask_wtf.csrf import CSRFError

from .errors import (
    AppError,
    DuplicateResourceError,
    NotFoundError,
    PermissionDeniedError,
    ProvisioningError,
    TransientError,
    ValidationError,
)

error_handlers_bp = Blueprint("error_handlers", __name__)


def _error_response(error):
    return (
        jsonify({"error": error.message, "retryable": error.retryable}),
        error.status_code,
    )


@error_handlers_bp.app_errorhandler(ValidationError)
def handle_validation_error(error):
    """Handles validation errors."""
    current_app.logger.warning(f"Validation Error: {error.message}")
    return _error_response(error)


@error_handlers_bp.app_errorhandler(PermissionDeniedError)
def handle_permission_denied_error(error):
    """Handles role checks that failed inside a service."""
    current_app.logger.warning(f"Permission Denied: {error.message}")
    return _error_response(error)


@error_handlers_bp.app_errorhandler(DuplicateResourceError)
def handle_duplicate_resource_error(error):
    """Handles duplicate resource errors."""
    current_app.logger.warning(f"Duplicate Resource Error: {error.message}")
    return _error_response(error)


@error_handlers_bp.app_errorhandler(NotFoundError)
def handle_not_found_error(error):
    """Handles not found errors."""
    current_app.logger.warning(f"Not Found Error: {error.message}")
    return _error_response(error)


@error_handlers_bp.app_errorhandler(TransientError)
def handle_transient_error(error):
    """Handles store outages; the caller may retry."""
    current_app.logger.error(f"Transient Error: {error.message}")
    return _error_response(error)


@error_handlers_bp.app_errorhandler(ProvisioningError)
def handle_provisioning_error(error):
    """Passes the provisioning function's message through unchanged."""
    current_app.logger.warning(f"Provisioning Error ({error.code}): {error.message}")
    return _error_response(error)


@error_handlers_bp.app_errorhandler(AppError)
def handle_app_error(error):
    """Handles generic application errors."""
    current_app.logger.error(f"Application Error: {error.message}")
    return _error_response(error)


@error_handlers_bp.app_errorhandler(404)
def handle_404(e):
    """Handles generic 404 errors for routes that don't exist."""
    return jsonify({"error": "Not found.", "retryable": False}), 404


@error_handlers_bp.app_errorhandler(405)
def handle_405(e):
    """Handles requests with the wrong method."""
    return jsonify({"error": "Method not allowed.", "retryable": False}), 405


@error_handlers_bp.app_errorhandler(500)
def handle_500(e):
    """Handles unexpected server errors."""
    current_app.logger.error(f"Internal Server Error: {e}")
    return jsonify(
        {"error": "Something went wrong. Please try again.", "retryable": True}
    ), 500


@error_handlers_bp.app_errorhandler(CSRFError)
def handle_csrf_error(e):
    """Handles CSRF errors, which usually indicate a session timeout."""
    current_app.logger.warning(f"CSRF Error: {e.description}")
    return jsonify(
        {
            "error": "Your session may have expired. Please try your action again.",
            "retryable": False,
        }
    ), 400
