"""The check-ins blueprint."""

from flask import Blueprint

bp = Blueprint("checkins", __name__, url_prefix="/checkins")

from . import routes  # noqa: E402
from .services import CheckInService  # noqa: E402

__all__ = ["CheckInService", "routes"]
