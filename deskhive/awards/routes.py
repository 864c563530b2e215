"""Routes for the awards blueprint."""

from firebase_admin import firestore
from flask import g, jsonify

from deskhive.auth.decorators import login_required
from deskhive.core.forms import validate_form

from . import bp
from .forms import AwardForm
from .services import AwardService


@bp.route("/current", methods=["GET"])
@login_required
def current():
    """Return this month's employee of the month."""
    db = firestore.client()
    return jsonify(
        {"award": AwardService.current_award(db), "month": AwardService.month_label()}
    )


@bp.route("/history", methods=["GET"])
@login_required
def history():
    """Return recent awards."""
    db = firestore.client()
    return jsonify({"awards": AwardService.award_history(db)})


@bp.route("/", methods=["POST"])
@login_required(admin_required=True)
def save():
    """Name this month's employee of the month."""
    form = validate_form(AwardForm())
    db = firestore.client()
    award = AwardService.save_award(
        db, form.employee_id.data, form.reason.data, g.user["email"]
    )
    return jsonify(
        {
            "message": f"{award['employeeEmail']} has been named Employee of the Month!",
            "award": award,
        }
    )


@bp.route("/clear", methods=["POST"])
@login_required(admin_required=True)
def clear():
    """Clear this month's award."""
    db = firestore.client()
    AwardService.clear_award(db)
    return jsonify({"message": "Award cleared for this month."})
