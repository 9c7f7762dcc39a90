"""Transaction repository protocol."""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Iterable, Optional, Protocol

from ...models.transaction import Transaction, TransactionType


class TransactionRepository(Protocol):
    """Repository for managing transaction entities."""

    def get_by_id(self, transaction_id: int, *, user_id: int) -> Optional[Transaction]:
        ...

    def list_all(self, *, user_id: int, limit: Optional[int] = None) -> list[Transaction]:
        """List transactions, newest first."""
        ...

    def filter_by_date_range(
        self,
        start_date: date,
        end_date: date,
        *,
        user_id: int,
        category_id: Optional[int] = None,
        transaction_type: Optional[TransactionType] = None,
    ) -> list[Transaction]:
        ...

    def total_by_type(
        self,
        transaction_type: TransactionType,
        *,
        user_id: int,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> Decimal:
        ...

    def exists_like(
        self,
        *,
        user_id: int,
        on: date,
        description: str,
        amount: Decimal,
        transaction_type: TransactionType,
    ) -> bool:
        ...

    def create(self, transaction: Transaction, *, user_id: int) -> Transaction:
        ...

    def create_many(self, transactions: Iterable[Transaction], *, user_id: int) -> int:
        ...

    def update(self, transaction: Transaction, *, user_id: int) -> Transaction:
        ...

    def delete(self, transaction_id: int, *, user_id: int) -> None:
        ...

    def reassign_category(self, from_category_id: int, to_category_id: int, *, user_id: int) -> int:
        ...

    def set_category(
        self, transaction_ids: Iterable[int], category_id: Optional[int], *, user_id: int
    ) -> int:
        ...
