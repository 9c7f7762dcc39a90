"""Tests for rule-based spending suggestions."""

from __future__ import annotations

from datetime import date, timedelta
from decimal import Decimal

from spendee.models import Transaction, TransactionType
from spendee.services import suggestions


def _txn(amount: str, on: date, *, kind=TransactionType.EXPENSE, description="Misc", category_id=None):
    return Transaction(
        description=description,
        amount=Decimal(amount),
        date=on,
        transaction_type=kind,
        category_id=category_id,
    )


def test_normalize_description():
    assert suggestions.normalize_description("NETFLIX.COM 12345 Subscription Monthly Plan") == (
        "netflix com subscription monthly"
    )
    assert suggestions.normalize_description(None) == ""


def test_no_data_suggests_getting_started():
    [only] = suggestions.build_suggestions([], [], [])
    assert only.type == "GET_STARTED"


def test_quiet_month_falls_back_to_info():
    current = [_txn("3000", date(2024, 3, 1), kind=TransactionType.INCOME), _txn("20", date(2024, 3, 2), category_id=1)]

    [only] = suggestions.build_suggestions(current, [], current)

    assert only.type == "INFO"
    assert only.confidence == 0.5


def test_spending_over_income_is_top_budget_suggestion():
    current = [
        _txn("500", date(2024, 3, 1), kind=TransactionType.INCOME),
        _txn("650", date(2024, 3, 3), category_id=1),
    ]

    previous = [_txn("650", date(2024, 2, 3), category_id=1)]

    result = suggestions.build_suggestions(current, previous, current)

    assert result[0].type == "BUDGET"
    assert result[0].potential_monthly_savings == Decimal("150.00")
    assert "$150.00" in result[0].message


def test_recurring_payment_detected_across_weeks():
    start = date(2024, 1, 5)
    recent = [
        _txn("15.99", start + timedelta(weeks=4 * i), description=f"Spotify Premium {i}", category_id=1)
        for i in range(3)
    ]

    result = suggestions.build_suggestions([], recent[-1:], recent)

    subscription = next(s for s in result if s.type == "SUBSCRIPTION")
    assert subscription.title == "Recurring payment: Spotify Premium"
    assert subscription.metrics["occurrences"] == 3


def test_many_uncategorized_expenses_trigger_hygiene():
    current = [_txn("10", date(2024, 3, day)) for day in range(1, 7)]
    current.append(_txn("5000", date(2024, 3, 1), kind=TransactionType.INCOME))

    types = [s.type for s in suggestions.build_suggestions(current, [], [])]

    assert "HYGIENE" in types


def test_results_capped_and_sorted():
    current = [_txn("10", date(2024, 3, day)) for day in range(1, 10)]
    result = suggestions.build_suggestions(current, [], current)

    assert len(result) <= suggestions.MAX_SUGGESTIONS
    assert [s.confidence for s in result] == sorted((s.confidence for s in result), reverse=True)


def test_spike_and_dominant_category_from_database(ctx, user, category_factory, transaction_factory, today):
    food = category_factory("Food")
    transaction_factory("3000", kind=TransactionType.INCOME, on=date(2024, 3, 1))
    transaction_factory("100", category=food, on=date(2024, 2, 10))
    transaction_factory("300", category=food, on=date(2024, 3, 4))

    result = suggestions.suggestions_for_user(ctx, user_id=user.id, today=today)

    by_type = {s.type: s for s in result}
    assert by_type["SPIKE"].category_name == "Food"
    assert "up 200%" in by_type["SPIKE"].message
    assert by_type["OVERVIEW"].metrics["sharePercent"] == 100
