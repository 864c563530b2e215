"""The tasks blueprint."""

from flask import Blueprint

bp = Blueprint("tasks", __name__, url_prefix="/tasks")

from . import routes  # noqa: E402
from .services import TaskService  # noqa: E402

__all__ = ["TaskService", "routes"]
