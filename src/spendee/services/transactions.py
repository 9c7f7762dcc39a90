"""Transaction writes and queries.

Every write re-evaluates the owner's spending limits so that cached spend and
notifications follow the ledger.
"""

from __future__ import annotations

from calendar import monthrange
from datetime import date
from decimal import Decimal
from typing import TYPE_CHECKING, Iterable, Optional

from ..errors import NotFoundError, ValidationError
from ..logging_config import get_logger
from ..models.transaction import Transaction, TransactionType
from . import budgeting, spending_limits

if TYPE_CHECKING:
    from ..context import AppContext

logger = get_logger(__name__)

RECENT_LIMIT = 10


def _check_category(ctx: AppContext, category_id: Optional[int], *, user_id: int) -> None:
    if category_id is None:
        return
    if ctx.category_repo.get_by_id(category_id, user_id=user_id) is None:
        raise ValidationError("Category doesn't belong to user", errors={"categoryId": ["Unknown category"]})


def _check_fields(description: str, amount: Decimal) -> str:
    errors: dict[str, list[str]] = {}
    description = (description or "").strip()
    if not description:
        errors.setdefault("description", []).append("Description is required")
    elif len(description) > 255:
        errors.setdefault("description", []).append("Description must be 255 characters or fewer")
    problem = None if amount is None else budgeting.money_error(Decimal(amount))
    if problem:
        errors.setdefault("amount", []).append(problem)
    elif amount is None or Decimal(amount) <= 0:
        errors.setdefault("amount", []).append("Amount must be greater than zero")
    if errors:
        raise ValidationError("Invalid transaction", errors=errors)
    return description


def get_transaction(ctx: AppContext, *, user_id: int, transaction_id: int) -> Transaction:
    transaction = ctx.transaction_repo.get_by_id(transaction_id, user_id=user_id)
    if transaction is None:
        raise NotFoundError("Transaction not found")
    return transaction


def list_transactions(ctx: AppContext, *, user_id: int) -> list[Transaction]:
    """All of the user's transactions, newest first."""
    return ctx.transaction_repo.list_all(user_id=user_id)


def recent_transactions(ctx: AppContext, *, user_id: int, limit: int = RECENT_LIMIT) -> list[Transaction]:
    return ctx.transaction_repo.list_all(user_id=user_id, limit=limit)


def transactions_for_month(ctx: AppContext, *, user_id: int, year: int, month: int) -> list[Transaction]:
    if not 1 <= month <= 12:
        raise ValidationError("Month must be between 1 and 12")
    start = date(year, month, 1)
    end = date(year, month, monthrange(year, month)[1])
    return ctx.transaction_repo.filter_by_date_range(start, end, user_id=user_id)


def create_transaction(
    ctx: AppContext,
    *,
    user_id: int,
    description: str,
    amount: Decimal,
    on: date,
    transaction_type: TransactionType,
    category_id: Optional[int] = None,
) -> Transaction:
    description = _check_fields(description, amount)
    _check_category(ctx, category_id, user_id=user_id)
    transaction = ctx.transaction_repo.create(
        Transaction(
            description=description,
            amount=Decimal(amount),
            date=on,
            transaction_type=TransactionType(transaction_type),
            category_id=category_id,
        ),
        user_id=user_id,
    )
    logger.info(
        "Transaction created",
        extra={"user_id": user_id, "transaction_id": transaction.id, "type": transaction.transaction_type.value},
    )
    spending_limits.evaluate_after_write(ctx, user_id=user_id)
    return transaction


def update_transaction(
    ctx: AppContext,
    *,
    user_id: int,
    transaction_id: int,
    description: str,
    amount: Decimal,
    on: date,
    transaction_type: TransactionType,
    category_id: Optional[int] = None,
) -> Transaction:
    """Replace every editable field; a missing ``category_id`` clears the category."""

    transaction = get_transaction(ctx, user_id=user_id, transaction_id=transaction_id)
    description = _check_fields(description, amount)
    _check_category(ctx, category_id, user_id=user_id)
    transaction.description = description
    transaction.amount = Decimal(amount)
    transaction.date = on
    transaction.transaction_type = TransactionType(transaction_type)
    transaction.category_id = category_id
    saved = ctx.transaction_repo.update(transaction, user_id=user_id)
    spending_limits.evaluate_after_write(ctx, user_id=user_id)
    return saved


def delete_transaction(ctx: AppContext, *, user_id: int, transaction_id: int) -> None:
    get_transaction(ctx, user_id=user_id, transaction_id=transaction_id)
    ctx.transaction_repo.delete(transaction_id, user_id=user_id)
    logger.info("Transaction deleted", extra={"user_id": user_id, "transaction_id": transaction_id})
    spending_limits.evaluate_after_write(ctx, user_id=user_id)


def bulk_categorize(
    ctx: AppContext,
    *,
    user_id: int,
    transaction_ids: Iterable[int],
    category_id: Optional[int],
) -> int:
    """Assign one category to many transactions; ids owned by others are ignored."""

    ids = [int(i) for i in transaction_ids]
    if not ids:
        raise ValidationError("No transaction IDs provided")
    _check_category(ctx, category_id, user_id=user_id)
    updated = ctx.transaction_repo.set_category(ids, category_id, user_id=user_id)
    logger.info(
        "Transactions re-categorized",
        extra={"user_id": user_id, "category_id": category_id, "count": updated},
    )
    spending_limits.evaluate_after_write(ctx, user_id=user_id)
    return updated


def import_many(ctx: AppContext, *, user_id: int, transactions: list[Transaction]) -> int:
    """Persist already-validated transactions in one batch, then evaluate limits once."""

    if not transactions:
        return 0
    saved = ctx.transaction_repo.create_many(transactions, user_id=user_id)
    spending_limits.evaluate_after_write(ctx, user_id=user_id)
    return saved
