"""Routes for the feed blueprint."""

from firebase_admin import firestore
from flask import g, jsonify

from deskhive.auth.decorators import login_required
from deskhive.community.models import member_ids
from deskhive.community.services import CommunityService
from deskhive.constants import ROLE_ADMIN
from deskhive.core.forms import validate_form
from deskhive.errors import PermissionDeniedError

from . import bp
from .forms import FeedMessageForm
from .services import FeedService


def _check_access(db, community_id):
    """Only the admin and the community's members may use its feed."""
    community = CommunityService.get_community(db, community_id)
    if g.user.get("role") != ROLE_ADMIN and g.user["uid"] not in member_ids(community):
        raise PermissionDeniedError("You are not a member of this community.")
    return community


@bp.route("/<string:community_id>/feed", methods=["GET"])
@login_required
def list_messages(community_id):
    """Return the community's feed, oldest first."""
    db = firestore.client()
    _check_access(db, community_id)
    return jsonify({"messages": FeedService.list_messages(db, community_id)})


@bp.route("/<string:community_id>/feed", methods=["POST"])
@login_required
def post_message(community_id):
    """Post to the community's feed."""
    form = validate_form(FeedMessageForm())
    db = firestore.client()
    _check_access(db, community_id)
    message = FeedService.post_message(db, community_id, form.body.data, g.user)
    return jsonify({"message": "Message sent.", "feed_message": message}), 201


@bp.route("/<string:community_id>/feed/<string:message_id>/delete", methods=["POST"])
@login_required(admin_required=True)
def delete_message(community_id, message_id):
    """Delete a feed message."""
    db = firestore.client()
    CommunityService.get_community(db, community_id)
    FeedService.delete_message(db, community_id, message_id)
    return jsonify({"message": "Message deleted."})
