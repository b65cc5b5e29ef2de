"""Dashboard blueprint package."""

from __future__ import annotations

from flask import Blueprint

from ...security import protect_blueprint

bp = Blueprint("dashboard", __name__, url_prefix="/dashboard")
protect_blueprint(bp)

from . import routes  # noqa: E402,F401 - ensure routes get registered

__all__ = ["bp"]
