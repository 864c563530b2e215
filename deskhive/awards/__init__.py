"""The employee-of-the-month blueprint."""

from flask import Blueprint

bp = Blueprint("awards", __name__, url_prefix="/awards")

from . import routes  # noqa: E402
from .services import AwardService  # noqa: E402

__all__ = ["AwardService", "routes"]
