"""Pytest configuration and shared fixtures for WealthLog tests.

This module provides database fixtures, repository fixtures, test data
factories and a Flask client bound to a throwaway database, so tests never
touch a real data directory.
"""

from __future__ import annotations

import tempfile
from datetime import datetime
from pathlib import Path

import pytest
from sqlmodel import SQLModel, create_engine

from wealthlog import create_app
from wealthlog import models  # noqa: F401 - register tables on the metadata
from wealthlog.infra.database import create_session_factory
from wealthlog.infra.repositories import (
    SQLModelCategoryRepository,
    SQLModelGoalRepository,
    SQLModelTransactionRepository,
    SQLModelUserRepository,
)
from wealthlog.models import Category, Goal, Transaction, User
from wealthlog.services.auth import hash_password
from wealthlog.services.categories import ensure_default_categories

# Fixed clock used by service tests so month windows are deterministic.
NOW = datetime(2024, 6, 15, 12, 0, 0)
PASSWORD = "Secret#123"

# =============================================================================
# Database Fixtures
# =============================================================================


@pytest.fixture(scope="function")
def db_engine():
    """Create an isolated SQLite database file for each test.

    Yields:
        Engine: SQLModel engine connected to the test database
    """
    with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as f:
        db_path = Path(f.name)

    engine = create_engine(f"sqlite:///{db_path}", echo=False)
    SQLModel.metadata.create_all(engine)

    yield engine

    engine.dispose()
    db_path.unlink(missing_ok=True)


@pytest.fixture(scope="function")
def session_factory(db_engine):
    """Session factory matching the one the application builds at startup."""

    return create_session_factory(db_engine)


@pytest.fixture
def user_repo(session_factory):
    return SQLModelUserRepository(session_factory)


@pytest.fixture
def category_repo(session_factory):
    repo = SQLModelCategoryRepository(session_factory)
    ensure_default_categories(repo)
    return repo


@pytest.fixture
def transaction_repo(session_factory):
    return SQLModelTransactionRepository(session_factory)


@pytest.fixture
def goal_repo(session_factory):
    return SQLModelGoalRepository(session_factory)


# =============================================================================
# Test Data Factories
# =============================================================================


@pytest.fixture
def user_factory(user_repo):
    """Factory for creating users with a known password."""

    counter = {"n": 0}

    def _create_user(
        email: str | None = None,
        currency: str = "ETB",
        is_active: bool = True,
    ) -> User:
        counter["n"] += 1
        return user_repo.create(
            User(
                first_name="Test",
                last_name="User",
                email=email or f"user{counter['n']}@example.com",
                password_hash=hash_password(PASSWORD),
                currency=currency,
                is_active=is_active,
            )
        )

    return _create_user


@pytest.fixture
def user(user_factory) -> User:
    """Default user for scoping data."""

    return user_factory(email="tester@example.com")


@pytest.fixture
def default_category(category_repo):
    """Look up a seeded default category by name."""

    defaults = {c.name: c for c in category_repo.list_defaults()}

    def _lookup(name: str) -> Category:
        return defaults[name]

    return _lookup


@pytest.fixture
def category_factory(category_repo, user):
    """Factory for creating user-owned categories."""

    def _create_category(
        name: str = "Test Category",
        category_type: str = "expense",
        color: str = "#FF5733",
        owner: User | None = None,
        is_active: bool = True,
    ) -> Category:
        owner = owner or user
        return category_repo.create(
            Category(
                user_id=owner.id,
                name=name,
                category_type=category_type,
                color=color,
                is_active=is_active,
            )
        )

    return _create_category


@pytest.fixture
def transaction_factory(transaction_repo, user):
    """Factory for creating transactions directly through the repository."""

    def _create_transaction(
        amount: float,
        category: Category,
        occurred_at: datetime | None = None,
        description: str = "Test transaction",
        owner: User | None = None,
    ) -> Transaction:
        owner = owner or user
        return transaction_repo.create(
            Transaction(
                user_id=owner.id,
                category_id=category.id,
                transaction_type=category.category_type,
                amount=amount,
                description=description,
                occurred_at=occurred_at or NOW,
                currency=owner.currency,
            )
        )

    return _create_transaction


@pytest.fixture
def goal_factory(goal_repo, user):
    """Factory for creating goals directly through the repository."""

    def _create_goal(
        title: str = "Emergency Fund",
        target_amount: float = 10000.0,
        current_amount: float = 0.0,
        status: str = "active",
        start_date: datetime | None = None,
        end_date: datetime | None = None,
        priority: str = "medium",
        category: str | None = None,
        owner: User | None = None,
    ) -> Goal:
        owner = owner or user
        return goal_repo.create(
            Goal(
                user_id=owner.id,
                title=title,
                target_amount=target_amount,
                current_amount=current_amount,
                status=status,
                start_date=start_date or datetime(2024, 1, 1),
                end_date=end_date,
                priority=priority,
                category=category,
            )
        )

    return _create_goal


# =============================================================================
# Flask Fixtures
# =============================================================================


@pytest.fixture()
def app(tmp_path, monkeypatch: pytest.MonkeyPatch):
    db_path = tmp_path / "wealthlog.db"
    monkeypatch.setenv("WEALTHLOG_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("WEALTHLOG_DATABASE_URL", f"sqlite:///{db_path}")
    monkeypatch.setenv("WEALTHLOG_JWT_SECRET", "test-jwt-secret")
    monkeypatch.setenv("WEALTHLOG_LOG_LEVEL", "DEBUG")
    return create_app("testing")


@pytest.fixture()
def client(app):
    with app.test_client() as client:
        yield client


@pytest.fixture()
def register_user(client):
    """Register an account through the API and return the auth payload."""

    def _register(email: str = "abebe@example.com", **overrides) -> dict:
        payload = {
            "firstName": "Abebe",
            "lastName": "Kebede",
            "email": email,
            "password": PASSWORD,
            "currency": "ETB",
        }
        payload.update(overrides)
        response = client.post("/api/v1/auth/register", json=payload)
        assert response.status_code == 201, response.get_json()
        return response.get_json()["data"]

    return _register


@pytest.fixture()
def auth_headers(register_user) -> dict[str, str]:
    """Bearer header for a freshly registered user."""

    data = register_user()
    return {"Authorization": f"Bearer {data['token']}"}


@pytest.fixture()
def api_categories(client, auth_headers) -> dict[str, dict]:
    """Visible categories keyed by name, as the API returns them."""

    response = client.get("/api/v1/categories", headers=auth_headers)
    return {item["name"]: item for item in response.get_json()["data"]}
