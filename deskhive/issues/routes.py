"""Routes for the issues blueprint.

Nothing here records who filed a report; not even the logs carry the
session user.
"""

from firebase_admin import firestore
from flask import jsonify, request

from deskhive.auth.decorators import login_required
from deskhive.core.forms import validate_form

from . import bp
from .forms import IssueReportForm, IssueResponseForm
from .services import IssueService


@bp.route("/", methods=["POST"])
@login_required
def submit_issue():
    """File an anonymous report."""
    form = validate_form(IssueReportForm())
    db = firestore.client()
    report = IssueService.submit_issue(
        db, form.category.data, form.title.data, form.description.data
    )
    return jsonify(
        {
            "message": "Your report was submitted anonymously. Keep your Case ID to check on it.",
            "case_id": report["id"],
        }
    ), 201


@bp.route("/lookup", methods=["GET"])
@login_required
def lookup_issue():
    """Look a report up by its case ID."""
    db = firestore.client()
    report = IssueService.lookup_issue(db, request.args.get("case_id", ""))
    return jsonify({"issue": report})


@bp.route("/", methods=["GET"])
@login_required(admin_required=True)
def list_issues():
    """List every report for the admin."""
    db = firestore.client()
    return jsonify({"issues": IssueService.list_issues(db)})


@bp.route("/<string:case_id>/respond", methods=["POST"])
@login_required(admin_required=True)
def respond(case_id):
    """Answer a report and set its status."""
    form = validate_form(IssueResponseForm())
    db = firestore.client()
    report = IssueService.respond_to_issue(
        db, case_id, form.response.data, form.status.data
    )
    return jsonify({"message": "Response sent.", "issue": report})
