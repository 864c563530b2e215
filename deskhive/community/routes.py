"""Routes for the community blueprint."""

from firebase_admin import firestore
from flask import g, jsonify, request

from deskhive.announcements.services import AnnouncementService
from deskhive.auth.decorators import login_required
from deskhive.constants import ROLE_ADMIN
from deskhive.core.forms import validate_form
from deskhive.core.responses import workflow_response
from deskhive.errors import PermissionDeniedError, ValidationError

from . import bp
from .forms import CommunityForm, CommunityNoticeForm, MemberForm
from .models import public_view
from .services import CommunityService


def _render(community):
    """Only the admin gets to see a lead's one-time password."""
    if g.user.get("role") == ROLE_ADMIN:
        return community
    return public_view(community)


@bp.route("/", methods=["GET"])
@login_required
def list_communities():
    """List every community, newest first."""
    db = firestore.client()
    communities = CommunityService.list_communities(db)
    return jsonify({"communities": [_render(c) for c in communities]})


@bp.route("/mine", methods=["GET"])
@login_required
def my_communities():
    """List the communities the signed-in user belongs to."""
    db = firestore.client()
    communities = CommunityService.list_for_member(db, g.user["uid"])
    return jsonify({"communities": [public_view(c) for c in communities]})


@bp.route("/led", methods=["GET"])
@login_required(lead_required=True)
def led_community():
    """Return the community the signed-in project lead runs."""
    db = firestore.client()
    community = CommunityService.find_led_community(db, g.user["uid"])
    return jsonify({"community": public_view(community) if community else None})


@bp.route("/<string:community_id>", methods=["GET"])
@login_required
def view_community(community_id):
    """Return one community."""
    db = firestore.client()
    community = CommunityService.get_community(db, community_id)
    return jsonify({"community": _render(community)})


@bp.route("/", methods=["POST"])
@login_required(admin_required=True)
def create_community():
    """Create a community."""
    form = validate_form(CommunityForm())
    payload = request.get_json(silent=True) or {}
    member_uids = payload.get("member_ids") or request.form.getlist("member_ids")
    if not isinstance(member_uids, list):
        raise ValidationError("member_ids must be a list of user IDs.")

    db = firestore.client()
    community = CommunityService.create_community(
        db,
        form.name.data,
        form.description.data,
        form.project.data,
        member_uids,
    )
    return jsonify(
        {"message": f'Community "{community["name"]}" created!', "community": community}
    ), 201


@bp.route("/<string:community_id>/members", methods=["POST"])
@login_required(admin_required=True)
def add_member(community_id):
    """Add a user to a community."""
    form = validate_form(MemberForm())
    db = firestore.client()
    community = CommunityService.add_member(db, community_id, form.user_id.data)
    return jsonify({"message": "Member added.", "community": community})


@bp.route("/<string:community_id>/members/<string:user_id>/remove", methods=["POST"])
@login_required(admin_required=True)
def remove_member(community_id, user_id):
    """Remove a user from a community."""
    db = firestore.client()
    community = CommunityService.remove_member(db, community_id, user_id)
    return jsonify({"message": "Member removed.", "community": community})


@bp.route("/<string:community_id>/lead", methods=["POST"])
@login_required(admin_required=True)
def set_lead(community_id):
    """Assign a member as the community's project lead."""
    form = validate_form(MemberForm())
    db = firestore.client()
    result = CommunityService.set_project_lead(db, community_id, form.user_id.data)
    return workflow_response(result)


@bp.route("/<string:community_id>/lead/remove", methods=["POST"])
@login_required(admin_required=True)
def remove_lead(community_id):
    """Remove the community's project lead."""
    db = firestore.client()
    result = CommunityService.remove_project_lead(db, community_id)
    return workflow_response(result)


@bp.route("/<string:community_id>/delete", methods=["POST"])
@login_required(admin_required=True)
def delete_community(community_id):
    """Delete a community."""
    db = firestore.client()
    CommunityService.delete_community(db, community_id)
    return jsonify({"message": "Community deleted."})


@bp.route("/<string:community_id>/notices", methods=["POST"])
@login_required(lead_required=True)
def post_notice(community_id):
    """Send a notice from the project lead to each member."""
    form = validate_form(CommunityNoticeForm())
    db = firestore.client()
    community = CommunityService.get_community(db, community_id)
    if community["projectLeadID"] != g.user["uid"]:
        raise PermissionDeniedError("You are not the project lead of this community.")
    result = AnnouncementService.post_to_community(
        db,
        community,
        g.user["email"],
        form.title.data,
        form.body.data,
        form.priority.data,
    )
    return workflow_response(result, success_code=201)
