"""Financial reports: aggregation and PDF rendering."""

from __future__ import annotations

import io
from collections import OrderedDict
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import TYPE_CHECKING, Iterable, Optional

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt  # noqa: E402
from matplotlib.backends.backend_pdf import PdfPages  # noqa: E402
from matplotlib.figure import Figure  # noqa: E402

from ..constants.categories import UNCATEGORIZED_LABEL  # noqa: E402
from ..errors import ValidationError  # noqa: E402
from ..logging_config import get_logger  # noqa: E402
from ..models.transaction import Transaction, TransactionType  # noqa: E402

if TYPE_CHECKING:
    from ..context import AppContext

logger = get_logger(__name__)

REPORT_TYPES = ("INCOME", "EXPENSE", "BOTH")
GROUPINGS = ("DAILY", "WEEKLY", "MONTHLY", "CATEGORY")
PDF_FILENAME = "financial-report.pdf"
_ROWS_PER_PAGE = 28


def _one_month_before(value: date) -> date:
    year, month = (value.year - 1, 12) if value.month == 1 else (value.year, value.month - 1)
    day = value.day
    while True:
        try:
            return date(year, month, day)
        except ValueError:
            day -= 1


@dataclass(slots=True)
class ReportFilter:
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    report_type: str = "BOTH"
    category_id: Optional[int] = None
    group_by: str = "DAILY"

    def resolved(self, *, today: date) -> "ReportFilter":
        """Fill in defaults (last month to today) and validate the enumerations."""

        end = self.end_date or today
        start = self.start_date or _one_month_before(today)
        report_type = (self.report_type or "BOTH").upper()
        group_by = (self.group_by or "DAILY").upper()
        errors: dict[str, list[str]] = {}
        if report_type not in REPORT_TYPES:
            errors.setdefault("reportType", []).append("Report type must be INCOME, EXPENSE or BOTH")
        if group_by not in GROUPINGS:
            errors.setdefault("groupBy", []).append("Group by must be DAILY, WEEKLY, MONTHLY or CATEGORY")
        if start > end:
            errors.setdefault("startDate", []).append("Start date must not be after end date")
        if errors:
            raise ValidationError("Invalid report filter", errors=errors)
        return ReportFilter(
            start_date=start,
            end_date=end,
            report_type=report_type,
            category_id=self.category_id,
            group_by=group_by,
        )


@dataclass(slots=True)
class ReportLine:
    date: date
    description: str
    category: str
    type: str
    amount: Decimal


@dataclass(slots=True)
class SeriesPoint:
    period: str
    income: Decimal = Decimal("0")
    expense: Decimal = Decimal("0")


@dataclass(slots=True)
class ReportData:
    start_date: date
    end_date: date
    total_income: Decimal
    total_expense: Decimal
    transactions: list[ReportLine] = field(default_factory=list)
    category_breakdown: dict[str, Decimal] = field(default_factory=dict)
    time_series: list[SeriesPoint] = field(default_factory=list)

    @property
    def net_savings(self) -> Decimal:
        return self.total_income - self.total_expense


def _category_label(txn: Transaction) -> str:
    category = getattr(txn, "category", None)
    return category.name if category is not None else UNCATEGORIZED_LABEL


def period_label(value: date, group_by: str) -> str:
    if group_by == "WEEKLY":
        iso_year, iso_week, _ = value.isocalendar()
        return f"Week {iso_week} {iso_year}"
    if group_by == "MONTHLY":
        return value.strftime("%b %Y")
    return value.strftime("%b %d")


def build_time_series(transactions: Iterable[Transaction], group_by: str) -> list[SeriesPoint]:
    """Bucket income and expense per period, in chronological (or name) order."""

    ordered = sorted(transactions, key=lambda t: (t.date, t.id or 0))
    if group_by == "CATEGORY":
        ordered = sorted(ordered, key=_category_label)
    buckets: "OrderedDict[str, SeriesPoint]" = OrderedDict()
    for txn in ordered:
        key = _category_label(txn) if group_by == "CATEGORY" else period_label(txn.date, group_by)
        point = buckets.setdefault(key, SeriesPoint(period=key))
        if txn.transaction_type == TransactionType.INCOME:
            point.income += Decimal(str(txn.amount))
        else:
            point.expense += Decimal(str(txn.amount))
    return list(buckets.values())


def summarize(transactions: list[Transaction], report_filter: ReportFilter) -> ReportData:
    """Aggregate already-fetched transactions according to a resolved filter."""

    selected = [
        txn
        for txn in transactions
        if (report_filter.category_id is None or txn.category_id == report_filter.category_id)
        and (report_filter.report_type == "BOTH" or txn.transaction_type.value == report_filter.report_type)
    ]

    total_income = sum(
        (Decimal(str(t.amount)) for t in selected if t.transaction_type == TransactionType.INCOME),
        Decimal("0"),
    )
    total_expense = sum(
        (Decimal(str(t.amount)) for t in selected if t.transaction_type == TransactionType.EXPENSE),
        Decimal("0"),
    )

    breakdown: dict[str, Decimal] = {}
    for txn in selected:
        if txn.category_id is None:
            continue
        label = _category_label(txn)
        breakdown[label] = breakdown.get(label, Decimal("0")) + Decimal(str(txn.amount))

    lines = [
        ReportLine(
            date=txn.date,
            description=txn.description,
            category=_category_label(txn),
            type=txn.transaction_type.value,
            amount=Decimal(str(txn.amount)),
        )
        for txn in sorted(selected, key=lambda t: (t.date, t.id or 0), reverse=True)
    ]

    return ReportData(
        start_date=report_filter.start_date,  # type: ignore[arg-type]
        end_date=report_filter.end_date,  # type: ignore[arg-type]
        total_income=total_income,
        total_expense=total_expense,
        transactions=lines,
        category_breakdown=breakdown,
        time_series=build_time_series(selected, report_filter.group_by),
    )


def generate_report(
    ctx: AppContext,
    *,
    user_id: int,
    report_filter: ReportFilter,
    today: Optional[date] = None,
) -> ReportData:
    resolved = report_filter.resolved(today=today or date.today())
    transactions = ctx.transaction_repo.filter_by_date_range(
        resolved.start_date,  # type: ignore[arg-type]
        resolved.end_date,  # type: ignore[arg-type]
        user_id=user_id,
    )
    return summarize(transactions, resolved)


def build_category_chart(report: ReportData) -> Figure:
    """Donut chart of the category breakdown."""

    items = sorted(report.category_breakdown.items(), key=lambda item: item[1], reverse=True)
    fig, ax = plt.subplots(figsize=(8.27, 5.5))
    if items:
        labels = [label for label, _ in items]
        sizes = [float(value) for _, value in items]
        total = sum(sizes)
        cmap = plt.get_cmap("tab20c")
        colors = [cmap(i / max(len(sizes), 1)) for i in range(len(sizes))]
        wedges, _, autotexts = ax.pie(
            sizes,
            labels=None,
            autopct=lambda pct: f"{pct:.1f}%" if pct > 4 else "",
            wedgeprops=dict(width=0.45, edgecolor="white", linewidth=1.5),
            startangle=90,
            colors=colors,
            pctdistance=0.78,
        )
        for autotext in autotexts:
            autotext.set_fontsize(8)
            autotext.set_color("white")
        ax.text(0, 0, f"${total:,.2f}", ha="center", va="center", fontsize=14, fontweight="bold")
        ax.legend(
            wedges,
            [f"{label}: ${size:,.2f}" for label, size in zip(labels, sizes)],
            title="Categories",
            loc="center left",
            bbox_to_anchor=(1.02, 0.5),
            fontsize=8,
        )
        ax.axis("equal")
    else:
        ax.text(0.5, 0.5, "No categorized transactions", ha="center", va="center", fontsize=12, color="#666")
        ax.axis("off")
    ax.set_title("Category Breakdown", fontsize=14, fontweight="bold")
    fig.tight_layout()
    return fig


def build_time_series_chart(report: ReportData) -> Figure:
    fig, ax = plt.subplots(figsize=(8.27, 5.5))
    if report.time_series:
        positions = list(range(len(report.time_series)))
        width = 0.4
        ax.bar([p - width / 2 for p in positions], [float(p.income) for p in report.time_series],
               width=width, label="Income", color="#43A047")
        ax.bar([p + width / 2 for p in positions], [float(p.expense) for p in report.time_series],
               width=width, label="Expense", color="#E53935")
        ax.set_xticks(positions)
        ax.set_xticklabels([p.period for p in report.time_series], rotation=45, ha="right", fontsize=8)
        ax.legend()
        ax.grid(axis="y", alpha=0.3)
    else:
        ax.text(0.5, 0.5, "No transactions in range", ha="center", va="center", fontsize=12, color="#666")
        ax.axis("off")
    ax.set_title("Income vs Expense", fontsize=14, fontweight="bold")
    fig.tight_layout()
    return fig


def _summary_page(report: ReportData, title: str) -> Figure:
    fig = plt.figure(figsize=(8.27, 11.69))
    fig.text(0.5, 0.94, title, ha="center", fontsize=20, fontweight="bold")
    fig.text(0.5, 0.90, f"{report.start_date.isoformat()} to {report.end_date.isoformat()}",
             ha="center", fontsize=11, color="#555")
    rows = (
        ("Total Income", report.total_income),
        ("Total Expense", report.total_expense),
        ("Net Savings", report.net_savings),
    )
    for index, (label, value) in enumerate(rows):
        y = 0.80 - index * 0.05
        fig.text(0.2, y, label, fontsize=13)
        fig.text(0.8, y, f"${value:,.2f}", fontsize=13, ha="right", fontweight="bold")
    fig.text(0.2, 0.62, f"Transactions: {len(report.transactions)}", fontsize=11, color="#555")
    return fig


def _table_pages(report: ReportData) -> list[Figure]:
    pages: list[Figure] = []
    lines = report.transactions
    for offset in range(0, len(lines), _ROWS_PER_PAGE):
        chunk = lines[offset:offset + _ROWS_PER_PAGE]
        fig, ax = plt.subplots(figsize=(8.27, 11.69))
        ax.axis("off")
        table = ax.table(
            cellText=[
                [line.date.isoformat(), line.description[:40], line.category, line.type, f"{line.amount:,.2f}"]
                for line in chunk
            ],
            colLabels=["Date", "Description", "Category", "Type", "Amount"],
            loc="upper center",
            cellLoc="left",
        )
        table.auto_set_font_size(False)
        table.set_fontsize(8)
        table.scale(1, 1.4)
        ax.set_title("Transactions", fontsize=14, fontweight="bold")
        pages.append(fig)
    return pages


def render_pdf(report: ReportData, *, title: str = "Financial Report") -> bytes:
    """Render the report as a multi-page PDF and return its bytes."""

    buffer = io.BytesIO()
    figures = [
        _summary_page(report, title),
        build_category_chart(report),
        build_time_series_chart(report),
        *_table_pages(report),
    ]
    try:
        with PdfPages(buffer) as pdf:
            for fig in figures:
                pdf.savefig(fig)
    finally:
        for fig in figures:
            plt.close(fig)
    logger.info("Report PDF rendered", extra={"pages": len(figures), "rows": len(report.transactions)})
    return buffer.getvalue()
