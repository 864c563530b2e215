"""Routes for the directory blueprint."""

from firebase_admin import firestore
from flask import current_app, g, jsonify

from deskhive.auth.decorators import login_required
from deskhive.core.forms import validate_form
from deskhive.errors import TransientError

from . import bp
from .forms import AddMemberForm
from .services import DirectoryService


@bp.route("/users", methods=["GET"])
@login_required(admin_required=True)
def list_users():
    """List every employee and project lead."""
    db = firestore.client()
    try:
        users = DirectoryService.list_non_admin(db)
    except TransientError as e:
        # Fail softly: the caller still gets a list to render.
        current_app.logger.error(f"Directory listing failed: {e.message}")
        return jsonify({"users": [], "error": e.message, "retryable": True}), 503
    return jsonify({"users": users})


@bp.route("/users/<string:user_id>", methods=["GET"])
@login_required
def get_user(user_id):
    """Fetch a single user."""
    db = firestore.client()
    return jsonify({"user": DirectoryService.get_user(db, user_id)})


@bp.route("/members", methods=["POST"])
@login_required(admin_required=True)
def add_member():
    """Provision a new member account."""
    form = validate_form(AddMemberForm())
    db = firestore.client()
    result = DirectoryService.provision_member(db, g.user["uid"], form.email.data)
    email = form.email.data.strip()
    return jsonify(
        {
            "message": f"Member account created! A welcome email has been sent to {email}.",
            "uid": result["uid"],
        }
    ), 201


@bp.route("/users/<string:user_id>/toggle_role", methods=["POST"])
@login_required(admin_required=True)
def toggle_role(user_id):
    """Switch a user between employee and project lead."""
    db = firestore.client()
    user = DirectoryService.toggle_role(db, user_id)
    role_name = DirectoryService.describe_role(user["role"])
    return jsonify({"message": f"{user['email']} is now a {role_name}.", "user": user})
