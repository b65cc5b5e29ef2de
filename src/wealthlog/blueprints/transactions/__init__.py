"""Transactions blueprint package."""

from __future__ import annotations

from flask import Blueprint

from ...security import protect_blueprint

bp = Blueprint("transactions", __name__, url_prefix="/transactions")
protect_blueprint(bp)

from . import routes  # noqa: E402,F401 - ensure routes get registered

__all__ = ["bp"]
