"""WealthLog application factory."""

from __future__ import annotations

from importlib import import_module
from typing import Iterable, Optional

from flask import Flask

from . import cli as _cli
from . import errors
from .config import BaseConfig, DevConfig, TestConfig
from .logging_config import get_logger, init_request_logging, setup_logging
from .responses import WealthLogJSONProvider, success

_CONFIG_MAP = {
    "development": DevConfig,
    "testing": TestConfig,
    "default": BaseConfig,
}


def _resolve_config(name: str | None) -> type[BaseConfig]:
    """Return the config class for the provided environment name."""

    if not name:
        return BaseConfig
    return _CONFIG_MAP.get(name.lower(), BaseConfig)


def _blueprint_paths() -> Iterable[str]:
    """Yield blueprint import paths in registration order."""

    yield "wealthlog.blueprints.auth"
    yield "wealthlog.blueprints.categories"
    yield "wealthlog.blueprints.transactions"
    yield "wealthlog.blueprints.goals"
    yield "wealthlog.blueprints.summary"
    yield "wealthlog.blueprints.dashboard"


def create_app(config_name: str | None = None, *, config: Optional[BaseConfig] = None) -> Flask:
    """Create and configure the Flask application instance."""

    app = Flask(__name__, instance_relative_config=True)
    config_obj = config or _resolve_config(config_name)()
    app.config["DEBUG"] = config_obj.DEBUG
    app.config["TESTING"] = config_obj.TESTING
    app.config["SECRET_KEY"] = config_obj.SECRET_KEY
    app.config["WEALTHLOG_CONFIG"] = config_obj

    setup_logging(config_obj)
    app.json = WealthLogJSONProvider(app)
    errors.init_app(app)
    init_request_logging(app)

    from .extensions import init_services
    from .services.categories import ensure_default_categories

    services = init_services(app)
    ensure_default_categories(services.category_repo)

    _register_blueprints(app, config_obj.API_PREFIX)

    @app.get(f"{config_obj.API_PREFIX}/health")
    def health():
        return success(
            {"status": "ok", "app": config_obj.APP_NAME}, "WealthLog API is running"
        )

    _cli.init_app(app)

    get_logger(__name__).info(
        "Application created",
        extra={"config": type(config_obj).__name__, "api_prefix": config_obj.API_PREFIX},
    )
    return app


def _register_blueprints(app: Flask, prefix: str) -> None:
    """Import and register all blueprints declared in `_blueprint_paths`."""

    for dotted_path in _blueprint_paths():
        module = import_module(dotted_path)
        blueprint = getattr(module, "bp")
        app.register_blueprint(blueprint, url_prefix=f"{prefix}{blueprint.url_prefix}")
