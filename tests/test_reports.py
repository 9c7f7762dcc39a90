"""Tests for report aggregation and PDF rendering."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest

from spendee.errors import ValidationError
from spendee.models import TransactionType
from spendee.services import reports
from spendee.services.reports import ReportFilter


def test_filter_defaults_to_last_month():
    resolved = ReportFilter().resolved(today=date(2024, 3, 31))

    assert resolved.start_date == date(2024, 2, 29)
    assert resolved.end_date == date(2024, 3, 31)
    assert resolved.report_type == "BOTH"
    assert resolved.group_by == "DAILY"


def test_filter_validation():
    with pytest.raises(ValidationError) as excinfo:
        ReportFilter(
            start_date=date(2024, 3, 2),
            end_date=date(2024, 3, 1),
            report_type="SAVINGS",
            group_by="hourly",
        ).resolved(today=date(2024, 3, 15))
    assert set(excinfo.value.errors) == {"startDate", "reportType", "groupBy"}


@pytest.mark.parametrize(
    "group_by,expected",
    [("DAILY", "Mar 05"), ("WEEKLY", "Week 10 2024"), ("MONTHLY", "Mar 2024")],
)
def test_period_label(group_by, expected):
    assert reports.period_label(date(2024, 3, 5), group_by) == expected


@pytest.fixture
def populated(user, category_factory, transaction_factory):
    food = category_factory("Food")
    salary = category_factory("Salary")
    transaction_factory("2000.00", kind=TransactionType.INCOME, category=salary, on=date(2024, 3, 1))
    transaction_factory("30.00", category=food, on=date(2024, 3, 2))
    transaction_factory("45.50", category=food, on=date(2024, 3, 10))
    transaction_factory("12.00", on=date(2024, 3, 10), description="Parking")
    transaction_factory("99.00", category=food, on=date(2024, 1, 10))
    return {"food": food, "salary": salary}


def test_generate_report_totals_and_breakdown(ctx, user, populated, today):
    report = reports.generate_report(
        ctx,
        user_id=user.id,
        report_filter=ReportFilter(start_date=date(2024, 3, 1), end_date=today),
    )

    assert report.total_income == Decimal("2000.00")
    assert report.total_expense == Decimal("87.50")
    assert report.net_savings == Decimal("1912.50")
    assert report.category_breakdown == {"Salary": Decimal("2000.00"), "Food": Decimal("75.50")}
    assert [line.date for line in report.transactions] == sorted(
        (line.date for line in report.transactions), reverse=True
    )
    assert "Uncategorized" in {line.category for line in report.transactions}


def test_generate_report_filters_type_and_category(ctx, user, populated, today):
    report = reports.generate_report(
        ctx,
        user_id=user.id,
        report_filter=ReportFilter(
            start_date=date(2024, 1, 1),
            end_date=today,
            report_type="expense",
            category_id=populated["food"].id,
        ),
    )

    assert report.total_income == Decimal("0")
    assert report.total_expense == Decimal("174.50")
    assert len(report.transactions) == 3


def test_time_series_is_chronological(ctx, user, populated, today):
    report = reports.generate_report(
        ctx,
        user_id=user.id,
        report_filter=ReportFilter(start_date=date(2024, 3, 1), end_date=today, group_by="DAILY"),
    )

    assert [point.period for point in report.time_series] == ["Mar 01", "Mar 02", "Mar 10"]
    assert report.time_series[2].expense == Decimal("57.50")


def test_time_series_by_category(ctx, user, populated, today):
    report = reports.generate_report(
        ctx,
        user_id=user.id,
        report_filter=ReportFilter(start_date=date(2024, 3, 1), end_date=today, group_by="CATEGORY"),
    )

    assert [point.period for point in report.time_series] == ["Food", "Salary", "Uncategorized"]


def test_render_pdf_produces_pdf_bytes(ctx, user, populated, today):
    report = reports.generate_report(
        ctx,
        user_id=user.id,
        report_filter=ReportFilter(start_date=date(2024, 1, 1), end_date=today),
    )

    payload = reports.render_pdf(report)

    assert payload.startswith(b"%PDF")


def test_render_pdf_for_empty_report(today):
    empty = reports.summarize([], ReportFilter().resolved(today=today))

    assert reports.render_pdf(empty).startswith(b"%PDF")
