"""Spending limit evaluation.

Pure functions: nothing here touches the database, so callers decide which
transactions to feed in and what "today" is.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Optional

from ..models.spending_limit import AlertLevel, LimitPeriod
from ..models.transaction import Transaction, TransactionType

_CENT = Decimal("0.01")
_RATIO_PLACES = Decimal("0.0001")
_HUNDRED = Decimal("100")

# Money columns are NUMERIC(14, 2).
MAX_AMOUNT = Decimal("999999999999.99")


@dataclass(frozen=True, slots=True)
class PeriodWindow:
    """Inclusive date range a limit is measured over."""

    start: date
    end: date

    def contains(self, value: date) -> bool:
        return self.start <= value <= self.end


def period_window(period: LimitPeriod, *, today: date) -> PeriodWindow:
    """Resolve the current window for ``period``.

    Weeks start on Monday. Every window ends today, so future-dated
    transactions are never counted.
    """

    period = LimitPeriod(period)
    if period is LimitPeriod.DAILY:
        start = today
    elif period is LimitPeriod.WEEKLY:
        start = today - timedelta(days=today.weekday())
    elif period is LimitPeriod.MONTHLY:
        start = today.replace(day=1)
    else:
        start = date(today.year, 1, 1)
    return PeriodWindow(start=start, end=today)


def _money(value) -> Decimal:
    return Decimal(str(value)).quantize(_CENT, rounding=ROUND_HALF_UP)


def money_error(value: Decimal) -> Optional[str]:
    """Return why ``value`` cannot be stored as an amount, or None if it can."""

    if not value.is_finite():
        return "Must be a number"
    if abs(value) > MAX_AMOUNT:
        return "Amount is too large"
    return None


def usage_percentage(spent: Decimal, limit_amount: Decimal) -> Decimal:
    """Return spent/limit as a percentage; the ratio is rounded to 4 places first."""

    if limit_amount <= 0:
        return Decimal("0")
    ratio = (Decimal(spent) / Decimal(limit_amount)).quantize(_RATIO_PLACES, rounding=ROUND_HALF_UP)
    return (ratio * _HUNDRED).quantize(_CENT)


def current_spent(
    transactions: Iterable[Transaction],
    *,
    category_id: Optional[int],
    window: PeriodWindow,
) -> Decimal:
    """Sum EXPENSE amounts inside ``window``; ``category_id=None`` counts every category."""

    total = Decimal("0")
    for txn in transactions:
        if txn.transaction_type != TransactionType.EXPENSE:
            continue
        if not window.contains(txn.date):
            continue
        if category_id is not None and txn.category_id != category_id:
            continue
        total += Decimal(str(txn.amount))
    return _money(total)


@dataclass(frozen=True, slots=True)
class LimitUsage:
    """Derived state of one limit inside its current window."""

    limit_amount: Decimal
    notification_threshold: Decimal
    current_spent: Decimal
    usage_percentage: Decimal
    remaining_amount: Decimal
    is_threshold_exceeded: bool
    is_limit_exceeded: bool
    window: PeriodWindow

    @property
    def alert_level(self) -> AlertLevel:
        if self.is_limit_exceeded:
            return AlertLevel.EXCEEDED
        if self.is_threshold_exceeded:
            return AlertLevel.WARNING
        return AlertLevel.NONE


def evaluate(
    *,
    limit_amount: Decimal,
    notification_threshold: Decimal,
    spent: Decimal,
    window: PeriodWindow,
) -> LimitUsage:
    """Compute usage, remaining amount and both exceeded flags."""

    limit_amount = _money(limit_amount)
    threshold = Decimal(str(notification_threshold))
    spent = _money(spent)
    percentage = usage_percentage(spent, limit_amount)
    return LimitUsage(
        limit_amount=limit_amount,
        notification_threshold=threshold,
        current_spent=spent,
        usage_percentage=percentage,
        remaining_amount=limit_amount - spent,
        is_threshold_exceeded=percentage / _HUNDRED >= threshold,
        is_limit_exceeded=spent >= limit_amount,
        window=window,
    )


def evaluate_limit(
    *,
    limit_amount: Decimal,
    notification_threshold: Decimal,
    period: LimitPeriod,
    category_id: Optional[int],
    transactions: Iterable[Transaction],
    today: date,
) -> LimitUsage:
    """Resolve the window, total matching expenses and evaluate in one step."""

    window = period_window(period, today=today)
    spent = current_spent(transactions, category_id=category_id, window=window)
    return evaluate(
        limit_amount=limit_amount,
        notification_threshold=notification_threshold,
        spent=spent,
        window=window,
    )


def alert_transition(
    usage: LimitUsage,
    *,
    notified_level: AlertLevel,
    notified_period_start: Optional[date],
) -> tuple[AlertLevel, Optional[AlertLevel]]:
    """Decide whether a notification is due.

    Returns ``(level_to_store, level_to_notify)``. Each level is notified at
    most once per window; a new window starts again from ``NONE``.
    """

    baseline = AlertLevel(notified_level) if notified_period_start == usage.window.start else AlertLevel.NONE
    current = usage.alert_level
    if current.rank > baseline.rank:
        return current, current
    return baseline, None
