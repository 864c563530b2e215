"""The community blueprint."""

from flask import Blueprint

bp = Blueprint("community", __name__, url_prefix="/communities")

from . import routes  # noqa: E402
from .services import CommunityService  # noqa: E402

__all__ = ["CommunityService", "routes"]
