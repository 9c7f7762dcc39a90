"""Spending limit lifecycle: validation, persistence, evaluation and alerts."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import TYPE_CHECKING, Optional

from ..errors import NotFoundError, ValidationError
from ..logging_config import get_logger
from ..models.notification import Notification
from ..models.spending_limit import DEFAULT_THRESHOLD, AlertLevel, LimitPeriod, SpendingLimit
from ..models.transaction import TransactionType
from . import budgeting, notifications
from .budgeting import LimitUsage

if TYPE_CHECKING:
    from ..context import AppContext

logger = get_logger(__name__)

GLOBAL_LIMIT_NAME = "Total Spending"
DUPLICATE_LIMIT_MESSAGE = "Spending limit already exists for this category"


@dataclass(frozen=True, slots=True)
class LimitView:
    """A limit row together with its evaluated usage."""

    limit: SpendingLimit
    usage: LimitUsage
    category_name: str


def _coerce_decimal(value, field: str, errors: dict[str, list[str]]) -> Optional[Decimal]:
    if value is None or value == "":
        return None
    try:
        number = Decimal(str(value))
    except (InvalidOperation, ValueError):
        number = None
    problem = "Must be a number" if number is None else budgeting.money_error(number)
    if problem:
        errors.setdefault(field, []).append(problem)
        return None
    return number


def _validated(
    limit_amount,
    period,
    notification_threshold,
) -> tuple[Decimal, LimitPeriod, Decimal]:
    errors: dict[str, list[str]] = {}

    amount = _coerce_decimal(limit_amount, "limitAmount", errors)
    if amount is None and "limitAmount" not in errors:
        errors.setdefault("limitAmount", []).append("Limit amount is required")
    elif amount is not None and amount <= 0:
        errors.setdefault("limitAmount", []).append("Limit amount must be greater than zero")

    threshold = _coerce_decimal(notification_threshold, "notificationThreshold", errors)
    if threshold is None and "notificationThreshold" not in errors:
        threshold = DEFAULT_THRESHOLD
    if threshold is not None and not (Decimal("0") <= threshold <= Decimal("1")):
        errors.setdefault("notificationThreshold", []).append(
            "Notification threshold must be between 0 and 1"
        )

    resolved_period = LimitPeriod.MONTHLY
    if period not in (None, ""):
        try:
            resolved_period = LimitPeriod(str(period).upper())
        except ValueError:
            errors.setdefault("period", []).append(
                "Period must be one of " + ", ".join(p.value for p in LimitPeriod)
            )

    if errors:
        raise ValidationError("Invalid spending limit", errors=errors)
    return amount, resolved_period, threshold  # type: ignore[return-value]


def _usage_for(ctx: AppContext, limit: SpendingLimit, *, today: date) -> LimitUsage:
    window = budgeting.period_window(limit.period, today=today)
    transactions = ctx.transaction_repo.filter_by_date_range(
        window.start,
        window.end,
        user_id=limit.user_id,
        category_id=limit.category_id,
        transaction_type=TransactionType.EXPENSE,
    )
    return budgeting.evaluate_limit(
        limit_amount=limit.limit_amount,
        notification_threshold=limit.notification_threshold,
        period=limit.period,
        category_id=limit.category_id,
        transactions=transactions,
        today=today,
    )


def _category_names(ctx: AppContext, *, user_id: int) -> dict[int, str]:
    return {c.id: c.name for c in ctx.category_repo.list_all(user_id=user_id) if c.id is not None}


def _name_for(limit: SpendingLimit, names: dict[int, str]) -> str:
    if limit.category_id is None:
        return GLOBAL_LIMIT_NAME
    return names.get(limit.category_id, GLOBAL_LIMIT_NAME)


def _refresh(
    ctx: AppContext,
    limit: SpendingLimit,
    *,
    today: date,
    category_name: str,
    notify: bool,
) -> tuple[LimitView, Optional[Notification]]:
    """Recompute spend, persist it and emit at most one notification."""

    usage = _usage_for(ctx, limit, today=today)
    limit.current_spent = usage.current_spent
    emitted: Optional[Notification] = None
    if notify:
        stored, due = budgeting.alert_transition(
            usage,
            notified_level=limit.alert_level,
            notified_period_start=limit.alert_period_start,
        )
        limit.alert_level = stored
        limit.alert_period_start = usage.window.start
        if due is not None:
            emitted = notifications.notify_limit(
                ctx,
                user_id=limit.user_id,
                level=due,
                category_name=None if limit.category_id is None else category_name,
                limit_amount=usage.limit_amount,
                current_spent=usage.current_spent,
                limit_id=limit.id,
            )
    saved = ctx.spending_limit_repo.update(limit, user_id=limit.user_id)
    return LimitView(limit=saved, usage=usage, category_name=category_name), emitted


def list_limits(ctx: AppContext, *, user_id: int, today: Optional[date] = None) -> list[LimitView]:
    """Return active limits with spend refreshed for the current window."""

    today = today or date.today()
    names = _category_names(ctx, user_id=user_id)
    views = []
    for limit in ctx.spending_limit_repo.list_active(user_id=user_id):
        view, _ = _refresh(ctx, limit, today=today, category_name=_name_for(limit, names), notify=False)
        views.append(view)
    return views


def get_limit(ctx: AppContext, *, user_id: int, limit_id: int, today: Optional[date] = None) -> LimitView:
    limit = ctx.spending_limit_repo.get_by_id(limit_id, user_id=user_id)
    if limit is None:
        raise NotFoundError("Spending limit not found")
    names = _category_names(ctx, user_id=user_id)
    view, _ = _refresh(
        ctx, limit, today=today or date.today(), category_name=_name_for(limit, names), notify=False
    )
    return view


def create_limit(
    ctx: AppContext,
    *,
    user_id: int,
    limit_amount,
    category_id: Optional[int] = None,
    period=None,
    notification_threshold=None,
    today: Optional[date] = None,
) -> LimitView:
    """Create a limit and alert straight away if it is already at threshold."""

    amount, resolved_period, threshold = _validated(limit_amount, period, notification_threshold)

    category_name = GLOBAL_LIMIT_NAME
    if category_id is not None:
        category = ctx.category_repo.get_by_id(category_id, user_id=user_id)
        if category is None:
            raise NotFoundError("Category not found")
        category_name = category.name

    if ctx.spending_limit_repo.find_active(category_id, user_id=user_id) is not None:
        raise ValidationError(DUPLICATE_LIMIT_MESSAGE)

    limit = ctx.spending_limit_repo.create(
        SpendingLimit(
            category_id=category_id,
            limit_amount=amount,
            period=resolved_period,
            notification_threshold=threshold,
        ),
        user_id=user_id,
    )
    logger.info(
        "Spending limit created",
        extra={"user_id": user_id, "limit_id": limit.id, "category_id": category_id},
    )
    view, _ = _refresh(ctx, limit, today=today or date.today(), category_name=category_name, notify=True)
    return view


def update_limit(
    ctx: AppContext,
    *,
    user_id: int,
    limit_id: int,
    limit_amount,
    period=None,
    notification_threshold=None,
    today: Optional[date] = None,
) -> LimitView:
    """Change amount, period and threshold; the category stays fixed.

    Any change restarts alerting, so crossings of the new figures are
    notified even if the old ones were already reported this window.
    """

    limit = ctx.spending_limit_repo.get_by_id(limit_id, user_id=user_id)
    if limit is None:
        raise NotFoundError("Spending limit not found")
    amount, resolved_period, threshold = _validated(limit_amount, period, notification_threshold)

    if (amount, resolved_period, threshold) != (
        Decimal(str(limit.limit_amount)),
        LimitPeriod(limit.period),
        Decimal(str(limit.notification_threshold)),
    ):
        limit.alert_level = AlertLevel.NONE
        limit.alert_period_start = None
    limit.limit_amount = amount
    limit.period = resolved_period
    limit.notification_threshold = threshold
    names = _category_names(ctx, user_id=user_id)
    view, _ = _refresh(
        ctx, limit, today=today or date.today(), category_name=_name_for(limit, names), notify=True
    )
    logger.info("Spending limit updated", extra={"user_id": user_id, "limit_id": limit_id})
    return view


def delete_limit(ctx: AppContext, *, user_id: int, limit_id: int) -> None:
    """Deactivate a limit; history and notifications are kept."""

    if not ctx.spending_limit_repo.deactivate(limit_id, user_id=user_id):
        raise NotFoundError("Spending limit not found")
    logger.info("Spending limit deactivated", extra={"user_id": user_id, "limit_id": limit_id})


def evaluate_after_write(
    ctx: AppContext, *, user_id: int, today: Optional[date] = None
) -> list[Notification]:
    """Re-evaluate every active limit of a user after their transactions changed."""

    today = today or date.today()
    limits = ctx.spending_limit_repo.list_active(user_id=user_id)
    if not limits:
        return []
    names = _category_names(ctx, user_id=user_id)
    emitted: list[Notification] = []
    for limit in limits:
        _, notification = _refresh(
            ctx, limit, today=today, category_name=_name_for(limit, names), notify=True
        )
        if notification is not None:
            emitted.append(notification)
    return emitted


def evaluate_all(ctx: AppContext, *, today: Optional[date] = None) -> int:
    """Evaluate the active limits of every user; returns notifications emitted."""

    today = today or date.today()
    emitted = 0
    for user_id in ctx.spending_limit_repo.list_owner_ids():
        emitted += len(evaluate_after_write(ctx, user_id=user_id, today=today))
    logger.info("Evaluated all spending limits", extra={"notifications": emitted})
    return emitted

