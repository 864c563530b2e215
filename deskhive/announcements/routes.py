"""Routes for the announcements blueprint."""

from firebase_admin import firestore
from flask import current_app, g, jsonify

from deskhive.auth.decorators import login_required
from deskhive.constants import ROLE_ADMIN, ROLE_PROJECT_LEAD
from deskhive.core.forms import validate_form
from deskhive.errors import PermissionDeniedError

from . import bp
from .forms import AnnouncementForm
from .services import AnnouncementService


@bp.route("/", methods=["GET"])
@login_required
def list_broadcasts():
    """Return the broadcast feed, newest first."""
    db = firestore.client()
    return jsonify({"announcements": AnnouncementService.list_broadcasts(db)})


@bp.route("/personal", methods=["GET"])
@login_required
def personal():
    """Return the signed-in user's promotion and task notices."""
    db = firestore.client()
    inbox = AnnouncementService.fetch_personal(db, g.user["uid"])
    return jsonify(inbox)


@bp.route("/", methods=["POST"])
@login_required
def post_broadcast():
    """Post an announcement to everyone."""
    if g.user.get("role") not in (ROLE_ADMIN, ROLE_PROJECT_LEAD):
        raise PermissionDeniedError("Only the admin or a project lead can post announcements.")
    form = validate_form(AnnouncementForm())
    db = firestore.client()
    ann = AnnouncementService.post_broadcast(
        db, form.title.data, form.body.data, form.priority.data
    )
    current_app.logger.info(f"Announcement {ann['id']} posted by {g.user['uid']}")
    return jsonify({"message": "Announcement posted!", "announcement": ann}), 201


@bp.route("/<string:announcement_id>/delete", methods=["POST"])
@login_required(admin_required=True)
def delete_announcement(announcement_id):
    """Delete an announcement."""
    db = firestore.client()
    AnnouncementService.delete_announcement(db, announcement_id)
    return jsonify({"message": "Announcement deleted."})
