"""Goals blueprint package."""

from __future__ import annotations

from flask import Blueprint

from ...security import protect_blueprint

bp = Blueprint("goals", __name__, url_prefix="/goals")
protect_blueprint(bp)

from . import routes  # noqa: E402,F401 - ensure routes get registered

__all__ = ["bp"]
