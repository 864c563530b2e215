"""The announcements blueprint."""

from flask import Blueprint

bp = Blueprint("announcements", __name__, url_prefix="/announcements")

from . import routes  # noqa: E402
from .services import AnnouncementService  # noqa: E402

__all__ = ["AnnouncementService", "routes"]
