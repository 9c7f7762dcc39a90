"""Rule-based spending suggestions derived from recent transactions."""

from __future__ import annotations

import re
import string
from calendar import monthrange
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import date, timedelta
from decimal import ROUND_HALF_UP, Decimal
from typing import TYPE_CHECKING, Any, Optional

from ..constants.categories import UNCATEGORIZED_LABEL
from ..models.transaction import Transaction, TransactionType
from .dashboard import percentage_change

if TYPE_CHECKING:
    from ..context import AppContext

MAX_SUGGESTIONS = 5
RECURRING_LOOKBACK_DAYS = 90

_CENT = Decimal("0.01")
_ZERO = Decimal("0.00")
_DIGITS = re.compile(r"\d+")
_PUNCTUATION = re.compile("[" + re.escape(string.punctuation) + "]")


@dataclass(slots=True)
class Suggestion:
    type: str
    title: str
    message: str
    confidence: float
    category_name: Optional[str] = None
    potential_monthly_savings: Optional[Decimal] = None
    metrics: dict[str, Any] = field(default_factory=dict)


def _fmt(amount: Decimal) -> str:
    return "$" + str(Decimal(amount).quantize(_CENT, rounding=ROUND_HALF_UP))


def _sum_by_type(transactions: list[Transaction], kind: TransactionType) -> Decimal:
    total = sum((Decimal(str(t.amount)) for t in transactions if t.transaction_type == kind), Decimal("0"))
    return total.quantize(_CENT, rounding=ROUND_HALF_UP)


def _expenses_by_category(transactions: list[Transaction]) -> dict[str, Decimal]:
    totals: dict[str, Decimal] = defaultdict(lambda: Decimal("0"))
    for txn in transactions:
        if txn.transaction_type != TransactionType.EXPENSE:
            continue
        label = txn.category.name if txn.category is not None else UNCATEGORIZED_LABEL
        totals[label] += Decimal(str(txn.amount))
    return dict(totals)


def normalize_description(description: Optional[str]) -> str:
    """Signature used to group recurring payments: lowercase, no digits, first four words."""

    if not description:
        return ""
    text = _DIGITS.sub("", description.lower().strip())
    text = _PUNCTUATION.sub(" ", text)
    return " ".join(text.split()[:4])


def _prettify(signature: str) -> str:
    if not signature.strip():
        return "Recurring payment"
    return " ".join(token[:1].upper() + token[1:] for token in signature.split() if token)


def _distinct_weeks(transactions: list[Transaction]) -> int:
    return len({(t.date.year, t.date.month, t.date.isocalendar()[1]) for t in transactions})


def _budget_rules(income: Decimal, expense: Decimal) -> list[Suggestion]:
    if income > 0:
        if expense > income:
            diff = expense - income
            return [
                Suggestion(
                    type="BUDGET",
                    title="Spending exceeds income",
                    message=(
                        f"Your expenses this month exceed your income by {_fmt(diff)}. "
                        "Consider reducing discretionary spending or setting a category budget."
                    ),
                    confidence=0.9,
                    potential_monthly_savings=diff,
                    metrics={"monthlyIncome": income, "monthlyExpenses": expense},
                )
            ]
    elif expense > Decimal("100"):
        return [
            Suggestion(
                type="BUDGET",
                title="Set a monthly budget",
                message=(
                    f"We couldn't detect income this month, but you've spent {_fmt(expense)}. "
                    "Consider setting targets to keep spending in check."
                ),
                confidence=0.6,
                metrics={"monthlyExpenses": expense},
            )
        ]
    return []


def _spike_rules(current: dict[str, Decimal], previous: dict[str, Decimal]) -> list[Suggestion]:
    found = []
    for category, amount in current.items():
        if amount < Decimal("50"):
            continue
        before = previous.get(category, _ZERO)
        pct = percentage_change(before, amount)
        if pct >= 40.0:
            found.append(
                Suggestion(
                    type="SPIKE",
                    title=f"Higher spend in {category}",
                    message=(
                        f"Spending in {category} is up {pct:.0f}% vs last month. "
                        "Consider setting a limit or looking for savings."
                    ),
                    confidence=min(0.5 + pct / 200.0, 0.95),
                    category_name=category,
                    metrics={"current": amount, "previous": before},
                )
            )
    return found


def _dominant_rule(current: dict[str, Decimal], expense: Decimal) -> list[Suggestion]:
    if expense <= 0 or not current:
        return []
    category, amount = max(current.items(), key=lambda item: item[1])
    share = float((amount / expense).quantize(Decimal("0.0001"), rounding=ROUND_HALF_UP)) * 100.0
    if share < 35.0 or amount < Decimal("100"):
        return []
    return [
        Suggestion(
            type="OVERVIEW",
            title=f"{category} dominates spending",
            message=(
                f"{category} accounts for {share:.0f}% of your expenses this month ({_fmt(amount)}). "
                "You may trim this category to boost savings."
            ),
            confidence=0.7,
            category_name=category,
            metrics={"sharePercent": round(share), "categoryTotal": amount, "monthlyExpenses": expense},
        )
    ]


def _recurring_rules(transactions: list[Transaction]) -> list[Suggestion]:
    groups: dict[str, list[Transaction]] = defaultdict(list)
    for txn in transactions:
        if txn.transaction_type == TransactionType.EXPENSE:
            groups[normalize_description(txn.description)].append(txn)

    found = []
    for signature, items in groups.items():
        if len(items) < 3 or _distinct_weeks(items) < 3:
            continue
        amounts = [Decimal(str(t.amount)) for t in items]
        average = (sum(amounts, Decimal("0")) / len(amounts)).quantize(_CENT, rounding=ROUND_HALF_UP)
        if average < Decimal("5"):
            continue
        if max(amounts) - min(amounts) > average * Decimal("0.2"):
            continue
        label = _prettify(signature)
        found.append(
            Suggestion(
                type="SUBSCRIPTION",
                title=f"Recurring payment: {label}",
                message=(
                    f"We detected a recurring expense (~{_fmt(average)}) for '{label}'. "
                    "If it's not essential, consider canceling or switching to a cheaper plan."
                ),
                confidence=0.75,
                potential_monthly_savings=average,
                metrics={"occurrences": len(items), "avgAmount": average},
            )
        )
    return found


def _hygiene_rule(transactions: list[Transaction], expense: Decimal) -> list[Suggestion]:
    uncategorized = sum(
        1 for t in transactions if t.transaction_type == TransactionType.EXPENSE and t.category_id is None
    )
    ratio = uncategorized / max(1, len(transactions))
    if uncategorized >= 5 or (expense > 0 and ratio > 0.2):
        return [
            Suggestion(
                type="HYGIENE",
                title="Categorize your expenses",
                message=(
                    f"You have {uncategorized} uncategorized expenses this month. "
                    "Categorizing them improves reports and future suggestions."
                ),
                confidence=0.6,
                metrics={"uncategorizedCount": uncategorized},
            )
        ]
    return []


def build_suggestions(
    current: list[Transaction],
    previous: list[Transaction],
    recent: list[Transaction],
) -> list[Suggestion]:
    """Apply every rule and keep the most confident ones."""

    income = _sum_by_type(current, TransactionType.INCOME)
    expense = _sum_by_type(current, TransactionType.EXPENSE)
    by_category = _expenses_by_category(current)

    found: list[Suggestion] = []
    found += _budget_rules(income, expense)
    found += _spike_rules(by_category, _expenses_by_category(previous))
    found += _dominant_rule(by_category, expense)
    found += _recurring_rules(recent)
    found += _hygiene_rule(current, expense)
    if not current and not previous:
        found.append(
            Suggestion(
                type="GET_STARTED",
                title="Start tracking",
                message="Add your first transactions to unlock personalized spending insights and suggestions.",
                confidence=0.8,
            )
        )

    ranked = sorted(found, key=lambda s: s.confidence, reverse=True)[:MAX_SUGGESTIONS]
    if not ranked:
        ranked.append(
            Suggestion(
                type="INFO",
                title="Looking good",
                message=(
                    "No pressing insights this month. "
                    "Keep tracking your spending to get more tailored suggestions."
                ),
                confidence=0.5,
            )
        )
    return ranked


def suggestions_for_user(ctx: AppContext, *, user_id: int, today: Optional[date] = None) -> list[Suggestion]:
    today = today or date.today()
    cur_start = today.replace(day=1)
    cur_end = today.replace(day=monthrange(today.year, today.month)[1])
    prev_end = cur_start - timedelta(days=1)
    prev_start = prev_end.replace(day=1)

    repo = ctx.transaction_repo
    return build_suggestions(
        repo.filter_by_date_range(cur_start, cur_end, user_id=user_id),
        repo.filter_by_date_range(prev_start, prev_end, user_id=user_id),
        repo.filter_by_date_range(today - timedelta(days=RECURRING_LOOKBACK_DAYS), today, user_id=user_id),
    )
