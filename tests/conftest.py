"""Pytest configuration and shared fixtures for Spendee tests.

Provides an isolated SQLite database per test, a wired ``AppContext``, data
factories and a Flask test client with bearer-token helpers.
"""

from __future__ import annotations

import tempfile
from datetime import date
from decimal import Decimal
from pathlib import Path

import pytest
from sqlmodel import create_engine

from spendee import create_app
from spendee.config import TestConfig
from spendee.context import build_context
from spendee.extensions import get_context
from spendee.infra.database import create_session_factory, init_database
from spendee.models import Category, SpendingLimit, Transaction, TransactionType, User
from spendee.models.spending_limit import LimitPeriod
from spendee.services.auth import hash_password, issue_token

# Friday; its ISO week starts on Monday 2024-03-11.
TODAY = date(2024, 3, 15)
PASSWORD = "Password1"


# =============================================================================
# Database Fixtures
# =============================================================================


@pytest.fixture(scope="function")
def db_engine():
    """Create an isolated SQLite database file for each test."""

    with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as f:
        db_path = Path(f.name)

    engine = create_engine(f"sqlite:///{db_path}", echo=False)
    init_database(engine)

    yield engine

    engine.dispose()
    db_path.unlink(missing_ok=True)


@pytest.fixture(scope="function")
def session_factory(db_engine):
    """Commit-on-success session factory, as used by the repositories."""

    return create_session_factory(db_engine)


@pytest.fixture
def config(tmp_path, monkeypatch) -> TestConfig:
    monkeypatch.setenv("SPENDEE_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("SPENDEE_SECRET_KEY", "test-secret-key-with-enough-length-for-hs256")
    return TestConfig()


@pytest.fixture
def ctx(config, session_factory, db_engine):
    """AppContext wired around the per-test database."""

    return build_context(config, session_factory, engine=db_engine)


# =============================================================================
# Test Data Factories
# =============================================================================


@pytest.fixture
def user_factory(ctx):
    """Factory for persisted users with a known password."""

    counter = {"n": 0}

    def _create_user(email: str | None = None, role: str = "user") -> User:
        counter["n"] += 1
        return ctx.user_repo.create(
            User(
                email=email or f"user{counter['n']}@example.com",
                password_hash=hash_password(PASSWORD),
                first_name="Test",
                last_name=f"User{counter['n']}",
                role=role,
            )
        )

    return _create_user


@pytest.fixture
def user(user_factory) -> User:
    return user_factory("tester@example.com")


@pytest.fixture
def other_user(user_factory) -> User:
    return user_factory("other@example.com")


@pytest.fixture
def category_factory(ctx, user):
    """Factory for categories; ``owner=None`` with ``is_default`` makes a system default."""

    def _create_category(
        name: str = "Food",
        *,
        owner: User | None = user,
        is_default: bool = False,
        color: str = "#FF5733",
    ) -> Category:
        return ctx.category_repo.create(
            Category(name=name, color=color, is_default=is_default),
            user_id=owner.id if owner is not None else None,
        )

    return _create_category


@pytest.fixture
def transaction_factory(ctx, user):
    """Factory for transactions written straight through the repository."""

    def _create_transaction(
        amount: str | Decimal = "10.00",
        *,
        on: date = TODAY,
        kind: TransactionType = TransactionType.EXPENSE,
        category: Category | None = None,
        description: str = "Test transaction",
        owner: User | None = None,
    ) -> Transaction:
        owner = owner or user
        return ctx.transaction_repo.create(
            Transaction(
                description=description,
                amount=Decimal(str(amount)),
                date=on,
                transaction_type=kind,
                category_id=category.id if category is not None else None,
            ),
            user_id=owner.id,
        )

    return _create_transaction


@pytest.fixture
def limit_factory(ctx, user):
    def _create_limit(
        amount: str = "500.00",
        *,
        category: Category | None = None,
        period: LimitPeriod = LimitPeriod.MONTHLY,
        threshold: str = "0.80",
        owner: User | None = None,
    ) -> SpendingLimit:
        owner = owner or user
        return ctx.spending_limit_repo.create(
            SpendingLimit(
                category_id=category.id if category is not None else None,
                limit_amount=Decimal(amount),
                period=period,
                notification_threshold=Decimal(threshold),
            ),
            user_id=owner.id,
        )

    return _create_limit


# =============================================================================
# Flask Fixtures
# =============================================================================


@pytest.fixture
def app(tmp_path, monkeypatch):
    monkeypatch.setenv("SPENDEE_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("SPENDEE_DATABASE_URL", f"sqlite:///{tmp_path / 'app.db'}")
    monkeypatch.setenv("SPENDEE_SECRET_KEY", "test-secret-key-with-enough-length-for-hs256")
    application = create_app("testing")
    yield application
    with application.app_context():
        engine = get_context().engine
    if engine is not None:
        engine.dispose()


@pytest.fixture
def client(app):
    with app.test_client() as test_client:
        yield test_client


@pytest.fixture
def app_ctx(app):
    with app.app_context():
        yield get_context()


@pytest.fixture
def api_user(app_ctx) -> User:
    return app_ctx.user_repo.create(
        User(
            email="api@example.com",
            password_hash=hash_password(PASSWORD),
            first_name="Api",
            last_name="User",
        )
    )


@pytest.fixture
def auth_headers(app_ctx, api_user) -> dict[str, str]:
    token = issue_token(app_ctx.config, api_user)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def today() -> date:
    return TODAY
