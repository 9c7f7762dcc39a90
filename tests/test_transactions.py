"""Tests for transaction writes, queries and their effect on limits."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest

from spendee.errors import NotFoundError, ValidationError
from spendee.models import TransactionType
from spendee.services import transactions


def test_create_transaction_validates_fields(ctx, user, today):
    with pytest.raises(ValidationError) as excinfo:
        transactions.create_transaction(
            ctx,
            user_id=user.id,
            description="  ",
            amount=Decimal("0"),
            on=today,
            transaction_type=TransactionType.EXPENSE,
        )
    assert set(excinfo.value.errors) == {"description", "amount"}


@pytest.mark.parametrize(
    "amount,message",
    [
        (Decimal("NaN"), "Must be a number"),
        (Decimal("Infinity"), "Must be a number"),
        (Decimal("1e40"), "Amount is too large"),
    ],
)
def test_create_transaction_rejects_unstorable_amounts(ctx, user, today, amount, message):
    with pytest.raises(ValidationError) as excinfo:
        transactions.create_transaction(
            ctx,
            user_id=user.id,
            description="Lunch",
            amount=amount,
            on=today,
            transaction_type=TransactionType.EXPENSE,
        )
    assert excinfo.value.errors == {"amount": [message]}
    assert transactions.list_transactions(ctx, user_id=user.id) == []


def test_create_transaction_rejects_foreign_category(ctx, user, other_user, category_factory, today):
    theirs = category_factory("Theirs", owner=other_user)

    with pytest.raises(ValidationError, match="doesn't belong"):
        transactions.create_transaction(
            ctx,
            user_id=user.id,
            description="Lunch",
            amount=Decimal("12.50"),
            on=today,
            transaction_type=TransactionType.EXPENSE,
            category_id=theirs.id,
        )


def test_create_transaction_with_default_category(ctx, user, category_factory, today):
    shared = category_factory("Groceries", owner=None, is_default=True)

    txn = transactions.create_transaction(
        ctx,
        user_id=user.id,
        description="  Weekly shop ",
        amount=Decimal("55.10"),
        on=today,
        transaction_type=TransactionType.EXPENSE,
        category_id=shared.id,
    )

    assert txn.description == "Weekly shop"
    assert txn.category.name == "Groceries"


def test_writes_trigger_limit_evaluation(ctx, user, category_factory, limit_factory):
    food = category_factory("Food")
    limit_factory("100.00", category=food)

    transactions.create_transaction(
        ctx,
        user_id=user.id,
        description="Dinner",
        amount=Decimal("120"),
        on=date.today(),
        transaction_type=TransactionType.EXPENSE,
        category_id=food.id,
    )

    assert ctx.notification_repo.count_unread(user_id=user.id) == 1


def test_update_replaces_fields_and_clears_category(ctx, user, category_factory, transaction_factory, today):
    food = category_factory("Food")
    txn = transaction_factory("10.00", category=food)

    updated = transactions.update_transaction(
        ctx,
        user_id=user.id,
        transaction_id=txn.id,
        description="Salary",
        amount=Decimal("2000"),
        on=today,
        transaction_type=TransactionType.INCOME,
    )

    assert updated.transaction_type is TransactionType.INCOME
    assert updated.amount == Decimal("2000")
    assert updated.category_id is None


def test_other_users_transactions_are_not_found(ctx, user, other_user, transaction_factory):
    theirs = transaction_factory("10.00", owner=other_user)

    with pytest.raises(NotFoundError):
        transactions.get_transaction(ctx, user_id=user.id, transaction_id=theirs.id)
    with pytest.raises(NotFoundError):
        transactions.delete_transaction(ctx, user_id=user.id, transaction_id=theirs.id)


def test_list_is_newest_first(ctx, user, transaction_factory):
    transaction_factory(description="old", on=date(2024, 1, 1))
    transaction_factory(description="new", on=date(2024, 3, 1))
    transaction_factory(description="mid", on=date(2024, 2, 1))

    listed = transactions.list_transactions(ctx, user_id=user.id)

    assert [t.description for t in listed] == ["new", "mid", "old"]
    assert len(transactions.recent_transactions(ctx, user_id=user.id, limit=2)) == 2


def test_transactions_for_month(ctx, user, transaction_factory):
    transaction_factory(description="feb-end", on=date(2024, 2, 29))
    transaction_factory(description="mar-start", on=date(2024, 3, 1))

    feb = transactions.transactions_for_month(ctx, user_id=user.id, year=2024, month=2)

    assert [t.description for t in feb] == ["feb-end"]
    with pytest.raises(ValidationError):
        transactions.transactions_for_month(ctx, user_id=user.id, year=2024, month=13)


def test_bulk_categorize_ignores_foreign_ids(ctx, user, other_user, category_factory, transaction_factory):
    food = category_factory("Food")
    mine = [transaction_factory("5.00"), transaction_factory("6.00")]
    theirs = transaction_factory("7.00", owner=other_user)

    updated = transactions.bulk_categorize(
        ctx,
        user_id=user.id,
        transaction_ids=[t.id for t in mine] + [theirs.id],
        category_id=food.id,
    )

    assert updated == 2
    assert ctx.transaction_repo.get_by_id(theirs.id, user_id=other_user.id).category_id is None


def test_bulk_categorize_requires_ids(ctx, user):
    with pytest.raises(ValidationError, match="No transaction IDs"):
        transactions.bulk_categorize(ctx, user_id=user.id, transaction_ids=[], category_id=None)
