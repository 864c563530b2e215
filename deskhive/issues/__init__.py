"""The issues blueprint."""

from flask import Blueprint

bp = Blueprint("issues", __name__, url_prefix="/issues")

from . import routes  # noqa: E402
from .services import IssueService  # noqa: E402

__all__ = ["IssueService", "routes"]
