"""The community feed blueprint."""

from flask import Blueprint

bp = Blueprint("feed", __name__, url_prefix="/communities")

from . import routes  # noqa: E402
from .services import FeedService  # noqa: E402

__all__ = ["FeedService", "routes"]
