"""The directory blueprint."""

from flask import Blueprint

bp = Blueprint("directory", __name__, url_prefix="/directory")

from . import routes  # noqa: E402
from .services import DirectoryService  # noqa: E402

__all__ = ["DirectoryService", "routes"]
