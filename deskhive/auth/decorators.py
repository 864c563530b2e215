"""Decorators for the auth blueprint."""

from functools import wraps

from flask import g, jsonify

from deskhive.constants import ROLE_ADMIN, ROLE_PROJECT_LEAD


def _deny(message, status_code):
    return jsonify({"error": message, "retryable": False}), status_code


def login_required(f=None, admin_required=False, lead_required=False):
    """Reject the request if the user is not signed in or lacks the role.

    Usage:
    @login_required
    def protected_view():
        ...

    @login_required(admin_required=True)
    def admin_view():
        ...
    """

    def decorator(func):
        @wraps(func)
        def decorated_function(*args, **kwargs):
            user = g.get("user")
            if not user:
                return _deny("You must be signed in.", 401)
            if admin_required and user.get("role") != ROLE_ADMIN:
                return _deny("You are not authorized to perform this action.", 403)
            if lead_required and user.get("role") != ROLE_PROJECT_LEAD:
                return _deny("Only a project lead can perform this action.", 403)
            return func(*args, **kwargs)

        return decorated_function

    if f:
        return decorator(f)
    return decorator
