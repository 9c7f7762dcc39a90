"""camelCase JSON shapes returned by the API."""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Any, Optional

from .constants.categories import UNCATEGORIZED_LABEL
from .models import Category, Goal, Notification, Transaction, User
from .services.dashboard import DashboardSummary
from .services.goals import progress_for
from .services.reports import ReportData
from .services.spending_limits import LimitView
from .services.suggestions import Suggestion


def money(value: Optional[Decimal]) -> Optional[float]:
    return None if value is None else float(value)


def _iso(value: Optional[date | datetime]) -> Optional[str]:
    return value.isoformat() if value is not None else None


def envelope(message: str, data: Any = None) -> dict:
    """Wrapper used by mutation endpoints."""

    return {"message": message, "data": data, "success": True}


def category_to_dict(category: Category) -> dict:
    return {
        "id": category.id,
        "name": category.name,
        "color": category.color,
        "icon": category.icon,
        "description": category.description,
        "isDefault": category.is_default,
    }


def transaction_to_dict(transaction: Transaction) -> dict:
    category = transaction.category
    return {
        "id": transaction.id,
        "categoryId": transaction.category_id,
        "categoryName": category.name if category is not None else UNCATEGORIZED_LABEL,
        "date": _iso(transaction.date),
        "amount": money(transaction.amount),
        "description": transaction.description,
        "type": transaction.transaction_type.value,
    }


def limit_to_dict(view: LimitView) -> dict:
    limit, usage = view.limit, view.usage
    return {
        "id": limit.id,
        "categoryId": limit.category_id,
        "categoryName": view.category_name,
        "limitAmount": money(limit.limit_amount),
        "currentSpent": money(usage.current_spent),
        "period": limit.period.value,
        "notificationThreshold": money(limit.notification_threshold),
        "isActive": limit.is_active,
        "usagePercentage": money(usage.usage_percentage),
        "remainingAmount": money(usage.remaining_amount),
        "isThresholdExceeded": usage.is_threshold_exceeded,
        "isLimitExceeded": usage.is_limit_exceeded,
    }


def notification_to_dict(notification: Notification) -> dict:
    return {
        "id": notification.id,
        "type": notification.notification_type.value,
        "title": notification.title,
        "message": notification.message,
        "isRead": notification.is_read,
        "relatedEntityId": notification.related_entity_id,
        "relatedEntityType": notification.related_entity_type,
        "createdAt": _iso(notification.created_at),
    }


def goal_to_dict(goal: Goal, *, today: Optional[date] = None) -> dict:
    progress = progress_for(goal, today=today)
    return {
        "id": goal.id,
        "name": goal.name,
        "targetAmount": money(goal.target_amount),
        "currentAmount": money(goal.current_amount),
        "startDate": _iso(goal.start_date),
        "deadline": _iso(goal.deadline),
        "icon": goal.icon,
        "completed": goal.completed,
        "progressPercentage": progress.progress_percentage,
        "remainingAmount": money(progress.remaining_amount),
        "daysRemaining": progress.days_remaining,
    }


def user_to_dict(user: User) -> dict:
    return {
        "id": user.id,
        "firstName": user.first_name,
        "lastName": user.last_name,
        "email": user.email,
        "role": user.role,
        "photoUrl": "/api/user/photo",
    }


def summary_to_dict(summary: DashboardSummary) -> dict:
    return {
        "totalIncome": money(summary.total_income),
        "totalExpenses": money(summary.total_expenses),
        "balance": money(summary.balance),
        "monthlyIncome": money(summary.monthly_income),
        "monthlyExpenses": money(summary.monthly_expenses),
        "incomeChange": summary.income_change,
        "expenseChange": summary.expense_change,
        "monthlyChange": summary.monthly_change,
        "spendingLimits": [limit_to_dict(view) for view in summary.spending_limits],
    }


def report_to_dict(report: ReportData) -> dict:
    return {
        "startDate": _iso(report.start_date),
        "endDate": _iso(report.end_date),
        "totalIncome": money(report.total_income),
        "totalExpense": money(report.total_expense),
        "netSavings": money(report.net_savings),
        "transactions": [
            {
                "date": _iso(line.date),
                "description": line.description,
                "category": line.category,
                "type": line.type,
                "amount": money(line.amount),
            }
            for line in report.transactions
        ],
        "categoryBreakdown": {name: money(total) for name, total in report.category_breakdown.items()},
        "timeSeriesData": [
            {"period": point.period, "income": money(point.income), "expense": money(point.expense)}
            for point in report.time_series
        ],
    }


def _metric(value: Any) -> Any:
    return float(value) if isinstance(value, Decimal) else value


def suggestion_to_dict(suggestion: Suggestion) -> dict:
    return {
        "type": suggestion.type,
        "title": suggestion.title,
        "message": suggestion.message,
        "categoryName": suggestion.category_name,
        "confidence": suggestion.confidence,
        "potentialMonthlySavings": money(suggestion.potential_monthly_savings),
        "metrics": {key: _metric(value) for key, value in suggestion.metrics.items()},
    }
