"""Routes for the auth blueprint.

Sign-in itself happens in the Firebase client SDK. The client sends the ID
token it receives here so the server can open a session.
"""

from firebase_admin import auth, firestore
from flask import current_app, g, jsonify, request, session
from flask_wtf.csrf import generate_csrf

from deskhive.constants import SESSION_ROLE, SESSION_USER_ID
from deskhive.core.forms import validate_form
from deskhive.directory.services import DirectoryService
from deskhive.errors import NotFoundError

from . import bp
from .decorators import login_required
from .forms import AdminSignUpForm


@bp.route("/session_login", methods=["POST"])
def session_login():
    """Verify a Firebase ID token and store the user in the session."""
    payload = request.get_json(silent=True) or {}
    id_token = payload.get("idToken")
    if not id_token:
        return jsonify({"error": "Missing ID token."}), 400

    try:
        decoded_token = auth.verify_id_token(id_token)
    except Exception as e:
        current_app.logger.warning(f"Rejected ID token: {e}")
        return jsonify({"error": "Invalid token. Please sign in again."}), 401

    db = firestore.client()
    try:
        user = DirectoryService.get_user(db, decoded_token["uid"])
    except NotFoundError:
        return jsonify(
            {"error": "Account data not found. Please contact your admin."}
        ), 404

    session[SESSION_USER_ID] = user["id"]
    session[SESSION_ROLE] = user["role"]
    return jsonify({"message": "Signed in.", "user": user})


@bp.route("/logout", methods=["POST"])
def logout():
    """Clear the server-side session."""
    session.clear()
    return jsonify({"message": "You have been logged out."})


@bp.route("/me", methods=["GET"])
@login_required
def me():
    """Return the signed-in user."""
    return jsonify({"user": g.user})


@bp.route("/install", methods=["GET"])
def install_status():
    """Report whether the one-time admin sign-up is still open."""
    db = firestore.client()
    return jsonify({"admin_exists": DirectoryService.admin_exists(db)})


@bp.route("/install", methods=["POST"])
def install():
    """Create the admin account if none exists yet."""
    form = validate_form(AdminSignUpForm())
    db = firestore.client()
    user = DirectoryService.register_admin(db, form.email.data, form.password.data)
    return jsonify(
        {"message": "Admin account created. You can now log in.", "user": user}
    ), 201


@bp.route("/csrf_token", methods=["GET"])
def csrf_token():
    """Hand the client a CSRF token to send back in the X-CSRFToken header."""
    return jsonify({"csrf_token": generate_csrf()})
