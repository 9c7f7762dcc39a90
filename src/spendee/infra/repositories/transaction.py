"""SQLModel implementation of Transaction repository."""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Iterable, Optional

from sqlalchemy import func
from sqlalchemy.orm import selectinload
from sqlmodel import Session, select

from ...models.transaction import Transaction, TransactionType
from ..database import SessionFactory


_EDITABLE_COLUMNS = ("description", "amount", "date", "transaction_type", "category_id")


def _newest_first(statement):
    return statement.order_by(Transaction.date.desc(), Transaction.id.desc())  # type: ignore


class SQLModelTransactionRepository:
    """SQLModel-based transaction repository implementation.

    Rows are returned detached with ``category`` eagerly loaded.
    """

    def __init__(self, session_factory: SessionFactory):
        """Initialize with a session factory."""
        self.session_factory = session_factory

    def _load(self, session: Session, transaction_id: int) -> Transaction:
        obj = session.exec(
            select(Transaction)
            .options(selectinload(Transaction.category))  # type: ignore[arg-type]
            .where(Transaction.id == transaction_id)
            .execution_options(populate_existing=True)
        ).one()
        session.expunge(obj)
        return obj

    def get_by_id(self, transaction_id: int, *, user_id: int) -> Optional[Transaction]:
        """Retrieve a transaction by ID."""
        with self.session_factory() as session:
            obj = session.exec(
                select(Transaction)
                .options(selectinload(Transaction.category))  # type: ignore[arg-type]
                .where(Transaction.id == transaction_id)
                .where(Transaction.user_id == user_id)
            ).first()
            if obj:
                session.expunge(obj)
            return obj

    def list_all(self, *, user_id: int, limit: Optional[int] = None) -> list[Transaction]:
        """List transactions, newest first."""
        with self.session_factory() as session:
            statement = _newest_first(
                select(Transaction)
                .options(selectinload(Transaction.category))  # type: ignore[arg-type]
                .where(Transaction.user_id == user_id)
            )
            if limit is not None:
                statement = statement.limit(limit)
            rows = list(session.exec(statement).all())
            session.expunge_all()
            return rows

    def filter_by_date_range(
        self,
        start_date: date,
        end_date: date,
        *,
        user_id: int,
        category_id: Optional[int] = None,
        transaction_type: Optional[TransactionType] = None,
    ) -> list[Transaction]:
        """Get transactions dated within [start_date, end_date], newest first."""
        with self.session_factory() as session:
            statement = (
                select(Transaction)
                .options(selectinload(Transaction.category))  # type: ignore[arg-type]
                .where(Transaction.user_id == user_id)
                .where(Transaction.date >= start_date)
                .where(Transaction.date <= end_date)
            )
            if category_id is not None:
                statement = statement.where(Transaction.category_id == category_id)
            if transaction_type is not None:
                statement = statement.where(Transaction.transaction_type == transaction_type)
            rows = list(session.exec(_newest_first(statement)).all())
            session.expunge_all()
            return rows

    def total_by_type(
        self,
        transaction_type: TransactionType,
        *,
        user_id: int,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> Decimal:
        """Sum amounts of one transaction type, optionally within a date range."""
        with self.session_factory() as session:
            statement = (
                select(func.coalesce(func.sum(Transaction.amount), 0))
                .where(Transaction.user_id == user_id)
                .where(Transaction.transaction_type == transaction_type)
            )
            if start_date is not None:
                statement = statement.where(Transaction.date >= start_date)
            if end_date is not None:
                statement = statement.where(Transaction.date <= end_date)
            total = session.exec(statement).one()
            return Decimal(str(total)).quantize(Decimal("0.01"))

    def exists_like(
        self,
        *,
        user_id: int,
        on: date,
        description: str,
        amount: Decimal,
        transaction_type: TransactionType,
    ) -> bool:
        """Return True when an identical transaction is already recorded."""
        with self.session_factory() as session:
            found = session.exec(
                select(Transaction.id)
                .where(Transaction.user_id == user_id)
                .where(Transaction.date == on)
                .where(Transaction.description == description)
                .where(Transaction.amount == amount)
                .where(Transaction.transaction_type == transaction_type)
            ).first()
            return found is not None

    def create(self, transaction: Transaction, *, user_id: int) -> Transaction:
        """Create a new transaction."""
        with self.session_factory() as session:
            transaction.user_id = user_id
            session.add(transaction)
            session.commit()
            return self._load(session, transaction.id)  # type: ignore[arg-type]

    def create_many(self, transactions: Iterable[Transaction], *, user_id: int) -> int:
        """Insert several transactions in one unit of work."""
        count = 0
        with self.session_factory() as session:
            for transaction in transactions:
                transaction.user_id = user_id
                session.add(transaction)
                count += 1
            session.commit()
        return count

    def update(self, transaction: Transaction, *, user_id: int) -> Transaction:
        """Update an existing transaction's editable columns."""
        with self.session_factory() as session:
            row = session.exec(
                select(Transaction)
                .where(Transaction.id == transaction.id)
                .where(Transaction.user_id == user_id)
            ).one()
            for column in _EDITABLE_COLUMNS:
                setattr(row, column, getattr(transaction, column))
            session.add(row)
            session.commit()
            return self._load(session, row.id)  # type: ignore[arg-type]

    def delete(self, transaction_id: int, *, user_id: int) -> None:
        """Delete a transaction by ID."""
        with self.session_factory() as session:
            transaction = session.exec(
                select(Transaction)
                .where(Transaction.id == transaction_id)
                .where(Transaction.user_id == user_id)
            ).first()
            if transaction:
                session.delete(transaction)
                session.commit()

    def reassign_category(self, from_category_id: int, to_category_id: int, *, user_id: int) -> int:
        """Move every transaction of one category to another; returns rows moved."""
        return self.set_category(
            self._ids_for_category(from_category_id, user_id=user_id),
            to_category_id,
            user_id=user_id,
        )

    def _ids_for_category(self, category_id: int, *, user_id: int) -> list[int]:
        with self.session_factory() as session:
            return list(
                session.exec(
                    select(Transaction.id)
                    .where(Transaction.user_id == user_id)
                    .where(Transaction.category_id == category_id)
                ).all()
            )

    def set_category(
        self, transaction_ids: Iterable[int], category_id: Optional[int], *, user_id: int
    ) -> int:
        """Assign one category to the user's transactions among ``transaction_ids``."""
        ids = list(transaction_ids)
        if not ids:
            return 0
        with self.session_factory() as session:
            rows = list(
                session.exec(
                    select(Transaction)
                    .where(Transaction.user_id == user_id)
                    .where(Transaction.id.in_(ids))  # type: ignore[union-attr]
                ).all()
            )
            for row in rows:
                row.category_id = category_id
                session.add(row)
            session.commit()
            return len(rows)
