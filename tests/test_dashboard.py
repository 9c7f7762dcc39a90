"""Tests for dashboard summary figures."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest

from spendee.models import TransactionType
from spendee.services import dashboard


@pytest.mark.parametrize(
    "previous,current,expected",
    [
        ("0", "0", 0.0),
        ("0", "50", 100.0),
        ("100", "150", 50.0),
        ("200", "100", -50.0),
        ("3", "4", 33.33),
    ],
)
def test_percentage_change(previous, current, expected):
    assert dashboard.percentage_change(Decimal(previous), Decimal(current)) == pytest.approx(expected)


def test_build_summary_totals_and_changes(ctx, user, transaction_factory, limit_factory, today):
    transaction_factory("1000.00", kind=TransactionType.INCOME, on=date(2024, 2, 10))
    transaction_factory("400.00", on=date(2024, 2, 12))
    transaction_factory("1500.00", kind=TransactionType.INCOME, on=date(2024, 3, 5))
    transaction_factory("200.00", on=date(2024, 3, 6))
    limit_factory("300.00")

    summary = dashboard.build_summary(ctx, user_id=user.id, today=today)

    assert summary.total_income == Decimal("2500.00")
    assert summary.total_expenses == Decimal("600.00")
    assert summary.balance == Decimal("1900.00")
    assert summary.monthly_income == Decimal("1500.00")
    assert summary.monthly_expenses == Decimal("200.00")
    assert summary.income_change == pytest.approx(50.0)
    assert summary.expense_change == pytest.approx(-50.0)
    assert summary.monthly_change == pytest.approx(100.0)
    assert [view.usage.current_spent for view in summary.spending_limits] == [Decimal("200.00")]


def test_empty_summary_is_all_zero(ctx, user, today):
    summary = dashboard.build_summary(ctx, user_id=user.id, today=today)

    assert summary.balance == Decimal("0.00")
    assert summary.monthly_change == 0.0
    assert summary.spending_limits == []


def test_january_compares_with_previous_december(ctx, user, transaction_factory):
    transaction_factory("100.00", on=date(2023, 12, 20))
    transaction_factory("150.00", on=date(2024, 1, 5))

    summary = dashboard.build_summary(ctx, user_id=user.id, today=date(2024, 1, 10))

    assert summary.expense_change == pytest.approx(50.0)
