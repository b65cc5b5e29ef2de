"""Database and service wiring for the Flask app."""

from __future__ import annotations

from flask import Flask, current_app

from .config import BaseConfig
from .context import AppServices, create_app_services

EXTENSION_KEY = "wealthlog"


def init_services(app: Flask) -> AppServices:
    """Build the repository registry from app config and attach it to ``app``."""

    config: BaseConfig = app.config["WEALTHLOG_CONFIG"]
    services = create_app_services(config)
    app.extensions[EXTENSION_KEY] = services

    return services


def get_services() -> AppServices:
    """Return the registry attached to the current app."""

    services = current_app.extensions.get(EXTENSION_KEY)
    if services is None:  # pragma: no cover - exercised in integration tests
        raise RuntimeError("Application services not initialized")
    return services
