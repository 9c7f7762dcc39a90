"""Dashboard summary figures."""

from __future__ import annotations

from calendar import monthrange
from dataclasses import dataclass, field
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import TYPE_CHECKING, Optional

from ..models.transaction import TransactionType
from . import spending_limits
from .spending_limits import LimitView

if TYPE_CHECKING:
    from ..context import AppContext


@dataclass(slots=True)
class DashboardSummary:
    total_income: Decimal
    total_expenses: Decimal
    monthly_income: Decimal
    monthly_expenses: Decimal
    income_change: float
    expense_change: float
    spending_limits: list[LimitView] = field(default_factory=list)

    @property
    def balance(self) -> Decimal:
        return self.total_income - self.total_expenses

    @property
    def monthly_change(self) -> float:
        if self.total_income == 0 and self.total_expenses == 0:
            return 0.0
        return self.income_change - self.expense_change


def percentage_change(previous: Decimal, current: Decimal) -> float:
    """Month-over-month change in percent; from zero it is 0 or 100."""

    if previous == 0:
        return 0.0 if current == 0 else 100.0
    ratio = ((current - previous) / previous).quantize(Decimal("0.0001"), rounding=ROUND_HALF_UP)
    return float(ratio * 100)


def _month_bounds(year: int, month: int) -> tuple[date, date]:
    return date(year, month, 1), date(year, month, monthrange(year, month)[1])


def _previous_month(today: date) -> tuple[int, int]:
    if today.month == 1:
        return today.year - 1, 12
    return today.year, today.month - 1


def build_summary(ctx: AppContext, *, user_id: int, today: Optional[date] = None) -> DashboardSummary:
    today = today or date.today()
    repo = ctx.transaction_repo
    start, end = _month_bounds(today.year, today.month)
    prev_start, prev_end = _month_bounds(*_previous_month(today))

    def total(kind: TransactionType, first: Optional[date] = None, last: Optional[date] = None) -> Decimal:
        return repo.total_by_type(kind, user_id=user_id, start_date=first, end_date=last)

    monthly_income = total(TransactionType.INCOME, start, end)
    monthly_expenses = total(TransactionType.EXPENSE, start, end)
    return DashboardSummary(
        total_income=total(TransactionType.INCOME),
        total_expenses=total(TransactionType.EXPENSE),
        monthly_income=monthly_income,
        monthly_expenses=monthly_expenses,
        income_change=percentage_change(total(TransactionType.INCOME, prev_start, prev_end), monthly_income),
        expense_change=percentage_change(total(TransactionType.EXPENSE, prev_start, prev_end), monthly_expenses),
        spending_limits=spending_limits.list_limits(ctx, user_id=user_id, today=today),
    )
