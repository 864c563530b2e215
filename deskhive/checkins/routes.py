"""Routes for the check-ins blueprint."""

from firebase_admin import firestore
from flask import g, jsonify, request

from deskhive.auth.decorators import login_required
from deskhive.core.forms import validate_form

from . import bp
from .forms import CheckInForm
from .services import CheckInService


@bp.route("/today", methods=["GET"])
@login_required
def today():
    """Return whether the signed-in user has checked in today."""
    date_key = CheckInService.validate_date_key(request.args.get("date_key"))
    db = firestore.client()
    check_in = CheckInService.todays_check_in(db, g.user["uid"], date_key)
    return jsonify(
        {
            "date_key": date_key,
            "checked_in": check_in is not None,
            "mood": check_in["mood"] if check_in else None,
        }
    )


@bp.route("/", methods=["POST"])
@login_required
def submit():
    """Submit today's check-in."""
    form = validate_form(CheckInForm())
    db = firestore.client()
    check_in = CheckInService.submit_check_in(
        db, g.user["uid"], form.mood.data, form.note.data, form.date_key.data
    )
    return jsonify(
        {"message": "Check-in submitted! Have a great day.", "check_in": check_in}
    ), 201


@bp.route("/recent", methods=["GET"])
@login_required
def recent():
    """Return the signed-in user's latest check-ins."""
    db = firestore.client()
    return jsonify({"check_ins": CheckInService.recent_check_ins(db, g.user["uid"])})


@bp.route("/summary", methods=["GET"])
@login_required(admin_required=True)
def summary():
    """Return the day's anonymous mood counts."""
    db = firestore.client()
    date_key = CheckInService.validate_date_key(request.args.get("date_key"))
    counts = CheckInService.mood_summary(db, date_key)
    return jsonify({"date_key": date_key, "moods": counts})
