"""Application context for dependency injection."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional

from sqlalchemy.engine import Engine
from sqlmodel import Session

from .config import BaseConfig
from .infra.database import bootstrap_database
from .infra.repositories import (
    SQLModelCategoryRepository,
    SQLModelGoalRepository,
    SQLModelTransactionRepository,
    SQLModelUserRepository,
)


@dataclass
class AppServices:
    """Single registry of repositories shared by every request handler."""

    # Configuration
    config: BaseConfig

    # Database
    engine: Engine
    session_factory: Callable[[], Session]

    # Repositories
    user_repo: SQLModelUserRepository
    category_repo: SQLModelCategoryRepository
    transaction_repo: SQLModelTransactionRepository
    goal_repo: SQLModelGoalRepository


def create_app_services(config: Optional[BaseConfig] = None) -> AppServices:
    """Create the engine, initialize the schema and build every repository."""

    if config is None:
        config = BaseConfig()

    engine, session_factory = bootstrap_database(config)

    return AppServices(
        config=config,
        engine=engine,
        session_factory=session_factory,
        user_repo=SQLModelUserRepository(session_factory),
        category_repo=SQLModelCategoryRepository(session_factory),
        transaction_repo=SQLModelTransactionRepository(session_factory),
        goal_repo=SQLModelGoalRepository(session_factory),
    )
