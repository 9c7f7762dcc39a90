"""Tests for CSV transaction import."""

from __future__ import annotations

import io
from datetime import date
from decimal import Decimal

import pytest

from spendee.errors import ValidationError
from spendee.models import TransactionType
from spendee.services.import_csv import ColumnMapping, import_csv, normalize_frame, parse_rows


def test_normalize_frame_lowercases_headers():
    frame = normalize_frame(io.StringIO(" Date ,Amount,DESCRIPTION\n2024-03-01,10,Coffee\n"))
    assert list(frame.columns) == ["date", "amount", "description"]


def test_parse_rows_defaults_and_errors():
    rows = [
        {"date": "2024-03-01", "amount": "-12.50", "description": "Coffee", "type": "", "category": "food"},
        {"date": "2024-03-02", "amount": "1,200", "description": "Pay", "type": "income", "category": ""},
        {"date": "not a date", "amount": "5", "description": "Bad date", "type": "", "category": ""},
        {"date": "2024-03-03", "amount": "abc", "description": "Bad amount", "type": "", "category": ""},
        {"date": "2024-03-03", "amount": "5", "description": "Bad type", "type": "transfer", "category": ""},
        {"date": "2024-03-03", "amount": "0", "description": "Zero", "type": "", "category": ""},
    ]

    parsed, errors = parse_rows(rows, mapping=ColumnMapping(), category_ids={"food": 3})

    assert [(t.amount, t.transaction_type, t.category_id) for t in parsed] == [
        (Decimal("12.50"), TransactionType.EXPENSE, 3),
        (Decimal("1200.00"), TransactionType.INCOME, None),
    ]
    assert parsed[0].date == date(2024, 3, 1)
    assert errors == [
        "Row 4: invalid date",
        "Row 5: invalid amount",
        "Row 6: unknown type 'transfer'",
        "Row 7: description and a non-zero amount are required",
    ]


def test_parse_rows_rejects_non_finite_and_oversized_amounts():
    rows = [
        {"date": "2024-03-01", "amount": "NaN", "description": "Nan", "type": "", "category": ""},
        {"date": "2024-03-01", "amount": "-inf", "description": "Inf", "type": "", "category": ""},
        {"date": "2024-03-01", "amount": "1e40", "description": "Huge", "type": "", "category": ""},
        {"date": "2024-03-01", "amount": "7", "description": "Fine", "type": "", "category": ""},
    ]

    parsed, errors = parse_rows(rows, mapping=ColumnMapping(), category_ids={})

    assert [t.description for t in parsed] == ["Fine"]
    assert errors == ["Row 2: invalid amount", "Row 3: invalid amount", "Row 4: invalid amount"]


def test_import_csv_persists_rows(ctx, user, category_factory):
    food = category_factory("Food")
    source = io.StringIO(
        "date,amount,description,type,category\n"
        "2024-03-01,12.50,Coffee,EXPENSE,Food\n"
        "2024-03-02,2000,Salary,INCOME,\n"
        "2024-03-03,oops,Broken,EXPENSE,\n"
    )

    result = import_csv(ctx, user_id=user.id, source=source)

    assert result.imported == 2
    assert result.skipped == 1
    saved = {t.description: t for t in ctx.transaction_repo.list_all(user_id=user.id)}
    assert saved["Coffee"].category_id == food.id
    assert saved["Salary"].transaction_type is TransactionType.INCOME


def test_import_csv_with_custom_mapping(ctx, user):
    source = io.StringIO("When,Value,Memo\n2024-03-01,7.25,Bus fare\n")
    mapping = ColumnMapping(description="memo", amount="value", date="when", type=None, category=None)

    result = import_csv(ctx, user_id=user.id, source=source, mapping=mapping)

    assert result.imported == 1


def test_import_csv_missing_columns(ctx, user):
    with pytest.raises(ValidationError, match="Missing required columns: amount"):
        import_csv(ctx, user_id=user.id, source=io.StringIO("date,description\n2024-03-01,x\n"))


def test_import_csv_rejects_empty_file(ctx, user):
    with pytest.raises(ValidationError, match="Could not read CSV"):
        import_csv(ctx, user_id=user.id, source=io.StringIO(""))
