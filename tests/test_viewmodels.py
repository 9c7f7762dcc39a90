"""Tests for page view models: badge text, limit cards, selection and login form."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest

from spendee.models import Category, LimitPeriod, SpendingLimit
from spendee.services import budgeting
from spendee.services.spending_limits import LimitView
from spendee.viewmodels import CategorySelection, LimitCard, LoginForm, badge_text, progress_width


@pytest.mark.parametrize(
    "count,expected",
    [(0, None), (-3, None), (1, "1"), (99, "99"), (100, "99+"), (250, "99+")],
)
def test_badge_text(count, expected):
    assert badge_text(count) == expected


@pytest.mark.parametrize(
    "usage,expected",
    [("0", 0.0), ("42.5", 42.5), ("100", 100.0), ("180", 100.0)],
)
def test_progress_width_is_clamped(usage, expected):
    assert progress_width(Decimal(usage)) == expected


def _card(spent: str) -> LimitCard:
    window = budgeting.period_window(LimitPeriod.MONTHLY, today=date(2024, 3, 15))
    usage = budgeting.evaluate(
        limit_amount=Decimal("500"),
        notification_threshold=Decimal("0.80"),
        spent=Decimal(spent),
        window=window,
    )
    limit = SpendingLimit(id=1, user_id=1, limit_amount=Decimal("500"), period=LimitPeriod.MONTHLY)
    return LimitCard.from_view(LimitView(limit=limit, usage=usage, category_name="Food"))


@pytest.mark.parametrize(
    "spent,state,remaining_class",
    [("100", "", ""), ("450", "warning", ""), ("500", "exceeded", ""), ("650", "exceeded", "exceeded")],
)
def test_limit_card_state(spent, state, remaining_class):
    card = _card(spent)

    assert card.state == state
    assert card.remaining_class == remaining_class
    assert card.title == "Food"
    assert card.period == "MONTHLY"
    assert card.notification_threshold == Decimal("0.80")


def test_over_limit_card_keeps_real_usage_but_clamps_bar():
    card = _card("650")

    assert card.usage_percentage == Decimal("130.00")
    assert card.progress_width == 100.0


def test_category_selection_rejects_defaults():
    custom = Category(id=1, name="Hobbies")
    default = Category(id=2, name="General", is_default=True)
    selection = CategorySelection()

    assert selection.is_empty
    assert selection.select(custom) is True
    assert selection.select(default) is False
    assert selection.ids == [1]
    assert selection.show_bulk_delete


def test_category_selection_toggle_and_remove_deleted():
    a, b = Category(id=1, name="A"), Category(id=2, name="B")
    selection = CategorySelection()

    selection.toggle(a)
    selection.toggle(b)
    assert selection.toggle(a) is False
    assert selection.ids == [2]

    selection.remove_deleted([2])
    assert selection.is_empty
    assert not selection.show_bulk_delete


def test_category_selection_from_ids_ignores_junk():
    categories = [Category(id=1, name="A"), Category(id=2, name="B", is_default=True)]

    selection = CategorySelection.from_ids(["1", "2", "x", "99"], categories)

    assert selection.ids == [1]


@pytest.mark.parametrize(
    "data,errors",
    [
        ({"email": "", "password": ""}, {"email", "password"}),
        ({"email": "jane@", "password": "x"}, {"email"}),
        ({"email": " jane@example.com ", "password": ""}, {"password"}),
        ({"email": "jane@example.com", "password": "anything"}, set()),
    ],
)
def test_login_form_validation(data, errors):
    form = LoginForm.from_mapping(data)

    assert form.validate() is (not errors)
    assert set(form.errors) == errors
