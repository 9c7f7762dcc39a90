"""Tests for category management and deletion fallbacks."""

from __future__ import annotations

import logging
from datetime import date

import pytest

from spendee.constants.categories import DEFAULT_CATEGORIES, GENERAL_CATEGORY
from spendee.errors import NotFoundError, ValidationError
from spendee.services import categories


def test_user_sees_own_and_default_categories(ctx, user, other_user, category_factory):
    category_factory("Travel")
    category_factory("Salary", owner=None, is_default=True)
    category_factory("Secret", owner=other_user)

    names = [c.name for c in categories.list_categories(ctx, user_id=user.id)]

    assert names == ["Salary", "Travel"]


def test_create_category_validates_name_and_color(ctx, user):
    with pytest.raises(ValidationError) as excinfo:
        categories.create_category(ctx, user_id=user.id, name="", color="red")
    assert set(excinfo.value.errors) == {"name", "color"}


def test_default_categories_are_read_only(ctx, user, category_factory):
    shared = category_factory("Groceries", owner=None, is_default=True)

    with pytest.raises(ValidationError, match="cannot be modified"):
        categories.update_category(ctx, user_id=user.id, category_id=shared.id, name="Food")
    with pytest.raises(ValidationError, match="cannot be deleted"):
        categories.delete_category(ctx, user_id=user.id, category_id=shared.id)


def test_delete_moves_transactions_to_general(ctx, user, category_factory, transaction_factory):
    travel = category_factory("Travel")
    txn = transaction_factory("20.00", category=travel)

    moved = categories.delete_category(ctx, user_id=user.id, category_id=travel.id)

    assert moved == 1
    reloaded = ctx.transaction_repo.get_by_id(txn.id, user_id=user.id)
    assert reloaded.category.name == GENERAL_CATEGORY
    assert ctx.category_repo.get_by_id(travel.id, user_id=user.id) is None


def test_delete_deactivates_category_limit(ctx, user, category_factory, limit_factory):
    travel = category_factory("Travel")
    limit = limit_factory("100.00", category=travel)

    categories.delete_category(ctx, user_id=user.id, category_id=travel.id)

    assert ctx.spending_limit_repo.get_by_id(limit.id, user_id=user.id).is_active is False


def test_general_fallback_prefers_existing_row(ctx, user, category_factory):
    shared = category_factory(GENERAL_CATEGORY, owner=None, is_default=True)

    assert categories.find_or_create_general(ctx, user_id=user.id).id == shared.id


def test_bulk_delete_skips_defaults_and_foreign_ids(ctx, user, other_user, category_factory):
    mine = category_factory("Mine")
    also_mine = category_factory("Also Mine")
    shared = category_factory("Shared", owner=None, is_default=True)
    theirs = category_factory("Theirs", owner=other_user)

    deleted = categories.delete_categories(
        ctx, user_id=user.id, category_ids=[mine.id, shared.id, theirs.id, also_mine.id, 9999]
    )

    assert deleted == [mine.id, also_mine.id]
    assert ctx.category_repo.get_by_id(shared.id, user_id=user.id) is not None
    assert ctx.category_repo.get_by_id(theirs.id, user_id=other_user.id) is not None


def test_bulk_delete_requires_ids(ctx, user):
    with pytest.raises(ValidationError):
        categories.delete_categories(ctx, user_id=user.id, category_ids=[])


def test_foreign_category_is_not_found(ctx, user, other_user, category_factory):
    theirs = category_factory("Theirs", owner=other_user)
    with pytest.raises(NotFoundError):
        categories.get_category(ctx, user_id=user.id, category_id=theirs.id)


def test_seed_defaults_is_idempotent(ctx, user):
    assert categories.seed_defaults(ctx) == len(DEFAULT_CATEGORIES)
    assert categories.seed_defaults(ctx) == 0
    assert len(categories.list_categories(ctx, user_id=user.id)) == len(DEFAULT_CATEGORIES)


def test_seed_defaults_logs_created_count(ctx, caplog):
    caplog.set_level(logging.INFO, logger="spendee")

    created = categories.seed_defaults(ctx)

    [record] = [r for r in caplog.records if r.getMessage() == "Default categories seeded"]
    assert record.categories_created == created == len(DEFAULT_CATEGORIES)


def test_delete_reevaluates_limit_on_general(ctx, user, category_factory, transaction_factory, limit_factory):
    general = categories.find_or_create_general(ctx, user_id=user.id)
    hobby = category_factory("Hobby")
    limit_factory("100.00", category=general)
    transaction_factory("95.00", on=date.today(), category=hobby)

    categories.delete_category(ctx, user_id=user.id, category_id=hobby.id)

    [alert] = ctx.notification_repo.list_unread(user_id=user.id)
    assert alert.title == "Spending Limit Warning"
    assert GENERAL_CATEGORY in alert.message


def test_bulk_delete_reevaluates_limits(ctx, user, category_factory, transaction_factory, limit_factory):
    general = categories.find_or_create_general(ctx, user_id=user.id)
    first, second = category_factory("Hobby"), category_factory("Games")
    limit_factory("100.00", category=general)
    transaction_factory("60.00", on=date.today(), category=first)
    transaction_factory("50.00", on=date.today(), category=second)

    categories.delete_categories(ctx, user_id=user.id, category_ids=[first.id, second.id])

    [alert] = ctx.notification_repo.list_unread(user_id=user.id)
    assert alert.title == "Spending Limit Exceeded!"
