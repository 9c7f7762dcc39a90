"""Application context for dependency injection."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from sqlalchemy.engine import Engine

from .config import BaseConfig
from .domain.repositories import (
    CategoryRepository,
    GoalRepository,
    NotificationRepository,
    SpendingLimitRepository,
    TransactionRepository,
    UserRepository,
)
from .infra.database import SessionFactory, create_db_engine, create_session_factory, init_database
from .infra.repositories import (
    SQLModelCategoryRepository,
    SQLModelGoalRepository,
    SQLModelNotificationRepository,
    SQLModelSpendingLimitRepository,
    SQLModelTransactionRepository,
    SQLModelUserRepository,
)


@dataclass
class AppContext:
    """Configuration, session factory and repositories shared by services."""

    config: BaseConfig
    session_factory: SessionFactory

    user_repo: UserRepository
    category_repo: CategoryRepository
    transaction_repo: TransactionRepository
    spending_limit_repo: SpendingLimitRepository
    notification_repo: NotificationRepository
    goal_repo: GoalRepository

    engine: Optional[Engine] = None


def build_context(config: BaseConfig, session_factory: SessionFactory, *, engine: Optional[Engine] = None) -> AppContext:
    """Wire repositories around an existing session factory."""

    return AppContext(
        config=config,
        session_factory=session_factory,
        user_repo=SQLModelUserRepository(session_factory),
        category_repo=SQLModelCategoryRepository(session_factory),
        transaction_repo=SQLModelTransactionRepository(session_factory),
        spending_limit_repo=SQLModelSpendingLimitRepository(session_factory),
        notification_repo=SQLModelNotificationRepository(session_factory),
        goal_repo=SQLModelGoalRepository(session_factory),
        engine=engine,
    )


def create_app_context(config: Optional[BaseConfig] = None) -> AppContext:
    """Create the engine, ensure the schema exists and return a wired context."""

    if config is None:
        config = BaseConfig()

    engine = create_db_engine(config)
    init_database(engine)
    session_factory = create_session_factory(engine)
    return build_context(config, session_factory, engine=engine)
