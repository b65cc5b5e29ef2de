"""Application configuration objects and helpers."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

load_dotenv()

_DEFAULT_SECRET_KEY = "replace-me"
_DEFAULT_JWT_SECRET = "dev-jwt-secret-change-in-production"


def _env_bool(name: str, default: bool = False) -> bool:
    """Interpret environment variable values as booleans."""

    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _env_int(name: str, default: int) -> int:
    """Read an integer environment variable, falling back on blanks or junk."""

    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    try:
        return int(value)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got {value!r}") from exc


class BaseConfig:
    """Base configuration shared across environments."""

    APP_NAME = "WealthLog"
    DB_FILENAME = "wealthlog.db"
    DEBUG = False
    TESTING = False
    JWT_ALGORITHM = "HS256"
    JWT_ISSUER = "wealthlog-api"
    JWT_AUDIENCE = "wealthlog-client"
    SUPPORTED_CURRENCIES = ("ETB", "USD", "EUR", "GBP")

    def __init__(self) -> None:
        self.SECRET_KEY = os.getenv("WEALTHLOG_SECRET_KEY", _DEFAULT_SECRET_KEY)
        self.JWT_SECRET = os.getenv("WEALTHLOG_JWT_SECRET", _DEFAULT_JWT_SECRET)
        self.JWT_EXPIRES_MINUTES = _env_int("WEALTHLOG_JWT_EXPIRES_MINUTES", 60 * 24 * 7)
        self.DATA_DIR = self._resolve_data_dir()
        self.DEV_MODE = _env_bool("WEALTHLOG_DEV_MODE", default=True)
        self.DATABASE_URL = os.getenv("WEALTHLOG_DATABASE_URL", self._build_sqlite_url())
        self.DEFAULT_CURRENCY = os.getenv("WEALTHLOG_DEFAULT_CURRENCY", "ETB").strip().upper()
        self.API_PREFIX = "/" + os.getenv("WEALTHLOG_API_PREFIX", "/api/v1").strip("/")
        self.LOG_LEVEL = os.getenv("WEALTHLOG_LOG_LEVEL", "INFO").upper()

        if self.DEFAULT_CURRENCY not in self.SUPPORTED_CURRENCIES:
            raise ValueError(
                "WEALTHLOG_DEFAULT_CURRENCY must be one of: " + ", ".join(self.SUPPORTED_CURRENCIES)
            )
        if not self.DEV_MODE:
            if self.SECRET_KEY == _DEFAULT_SECRET_KEY:
                raise ValueError("WEALTHLOG_SECRET_KEY must be set in non-dev mode.")
            if self.JWT_SECRET == _DEFAULT_JWT_SECRET:
                raise ValueError("WEALTHLOG_JWT_SECRET must be set in non-dev mode.")

    def _resolve_data_dir(self) -> Path:
        """Return the directory holding the SQLite file and logs."""

        data_root = os.getenv("WEALTHLOG_DATA_DIR", "instance")
        path = Path(data_root).expanduser().resolve()
        path.mkdir(parents=True, exist_ok=True)
        return path

    def _build_sqlite_url(self) -> str:
        db_path = self.DATA_DIR / self.DB_FILENAME
        return f"sqlite:///{db_path}"

    def sqlalchemy_engine_options(self) -> dict[str, Any]:
        """Expose engine kwargs for SQLModel to consume."""

        engine_options: dict[str, Any] = {}
        if self.DATABASE_URL.startswith("sqlite"):
            # Flask may serve requests from several threads.
            engine_options["connect_args"] = {"check_same_thread": False}
        return engine_options


class DevConfig(BaseConfig):
    """Development configuration using local SQLite."""

    DEBUG = True


class TestConfig(BaseConfig):
    """Configuration used by the test-suite and throwaway environments."""

    TESTING = True
