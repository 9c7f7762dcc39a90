"""Savings goals and their derived progress figures."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import TYPE_CHECKING, Optional

from ..errors import NotFoundError, ValidationError
from ..logging_config import get_logger
from ..models.goal import Goal
from . import budgeting

if TYPE_CHECKING:
    from ..context import AppContext

logger = get_logger(__name__)

DEFAULT_ICON = "piggy-bank"


@dataclass(frozen=True, slots=True)
class GoalProgress:
    goal: Goal
    progress_percentage: float
    remaining_amount: Decimal
    days_remaining: Optional[int]


def progress_for(goal: Goal, *, today: Optional[date] = None) -> GoalProgress:
    today = today or date.today()
    target = Decimal(str(goal.target_amount))
    current = Decimal(str(goal.current_amount))
    percentage = 0.0
    if target > 0:
        percentage = float((current / target).quantize(Decimal("0.0001"), rounding=ROUND_HALF_UP) * 100)
    days = (goal.deadline - today).days if goal.deadline else None
    return GoalProgress(
        goal=goal,
        progress_percentage=percentage,
        remaining_amount=target - current,
        days_remaining=days,
    )


def _validated(name: str, target_amount: Optional[Decimal], start_date: Optional[date], deadline: Optional[date]) -> str:
    errors: dict[str, list[str]] = {}
    name = (name or "").strip()
    if not name:
        errors.setdefault("name", []).append("Name is required")
    problem = None if target_amount is None else budgeting.money_error(target_amount)
    if problem:
        errors.setdefault("targetAmount", []).append(problem)
    elif target_amount is None or target_amount <= 0:
        errors.setdefault("targetAmount", []).append("Target amount must be greater than zero")
    if deadline and start_date and deadline < start_date:
        errors.setdefault("deadline", []).append("Deadline cannot be before the start date")
    if errors:
        raise ValidationError("Invalid goal", errors=errors)
    return name


def list_goals(ctx: AppContext, *, user_id: int) -> list[Goal]:
    """Goals newest first."""
    return ctx.goal_repo.list_all(user_id=user_id)


def get_goal(ctx: AppContext, *, user_id: int, goal_id: int) -> Goal:
    goal = ctx.goal_repo.get_by_id(goal_id, user_id=user_id)
    if goal is None:
        raise NotFoundError("Goal not found")
    return goal


def create_goal(
    ctx: AppContext,
    *,
    user_id: int,
    name: str,
    target_amount: Optional[Decimal],
    start_date: Optional[date] = None,
    deadline: Optional[date] = None,
    icon: Optional[str] = None,
) -> Goal:
    """Create a goal; progress always starts at zero."""

    start_date = start_date or date.today()
    name = _validated(name, target_amount, start_date, deadline)
    goal = ctx.goal_repo.create(
        Goal(
            name=name,
            target_amount=target_amount,
            current_amount=Decimal("0.00"),
            start_date=start_date,
            deadline=deadline,
            icon=icon or DEFAULT_ICON,
        ),
        user_id=user_id,
    )
    logger.info("Goal created", extra={"user_id": user_id, "goal_id": goal.id})
    return goal


def update_goal(
    ctx: AppContext,
    *,
    user_id: int,
    goal_id: int,
    name: str,
    target_amount: Optional[Decimal],
    start_date: Optional[date] = None,
    deadline: Optional[date] = None,
    icon: Optional[str] = None,
) -> Goal:
    goal = get_goal(ctx, user_id=user_id, goal_id=goal_id)
    start_date = start_date or goal.start_date
    goal.name = _validated(name, target_amount, start_date, deadline)
    goal.target_amount = target_amount  # type: ignore[assignment]
    goal.start_date = start_date
    goal.deadline = deadline
    goal.icon = icon or goal.icon or DEFAULT_ICON
    goal.completed = goal.current_amount >= goal.target_amount
    return ctx.goal_repo.update(goal, user_id=user_id)


def add_progress(ctx: AppContext, *, user_id: int, goal_id: int, amount: Optional[Decimal]) -> Goal:
    """Add a positive contribution to the goal's current amount."""

    problem = None if amount is None else budgeting.money_error(amount)
    if problem:
        raise ValidationError("Invalid amount", errors={"amount": [problem]})
    if amount is None or amount <= 0:
        raise ValidationError("Amount must be greater than zero", errors={"amount": ["Must be positive"]})
    goal = get_goal(ctx, user_id=user_id, goal_id=goal_id)
    total = Decimal(str(goal.current_amount)) + amount
    problem = budgeting.money_error(total)
    if problem:
        raise ValidationError("Invalid amount", errors={"amount": [problem]})
    goal.current_amount = total
    goal.completed = goal.current_amount >= goal.target_amount
    saved = ctx.goal_repo.update(goal, user_id=user_id)
    logger.info(
        "Goal progress recorded",
        extra={"user_id": user_id, "goal_id": goal_id, "completed": saved.completed},
    )
    return saved


def delete_goal(ctx: AppContext, *, user_id: int, goal_id: int) -> None:
    get_goal(ctx, user_id=user_id, goal_id=goal_id)
    ctx.goal_repo.delete(goal_id, user_id=user_id)
