"""Per-request view models for the server-rendered pages."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Optional

from .models.category import Category
from .services.auth import EMAIL_PATTERN
from .services.spending_limits import LimitView

BADGE_CAP = 99


def badge_text(count: int) -> Optional[str]:
    """Text for the unread badge; ``None`` hides it."""

    if count <= 0:
        return None
    if count > BADGE_CAP:
        return f"{BADGE_CAP}+"
    return str(count)


def progress_width(usage_percentage: Decimal) -> float:
    return float(max(Decimal("0"), min(Decimal(usage_percentage), Decimal("100"))))


@dataclass(frozen=True, slots=True)
class LimitCard:
    id: int
    title: str
    period: str
    limit_amount: Decimal
    current_spent: Decimal
    remaining_amount: Decimal
    usage_percentage: Decimal
    is_threshold_exceeded: bool
    is_limit_exceeded: bool
    notification_threshold: Decimal

    @classmethod
    def from_view(cls, view: LimitView) -> LimitCard:
        usage = view.usage
        return cls(
            id=view.limit.id,  # type: ignore[arg-type]
            title=view.category_name,
            period=view.limit.period.value,
            limit_amount=usage.limit_amount,
            current_spent=usage.current_spent,
            remaining_amount=usage.remaining_amount,
            usage_percentage=usage.usage_percentage,
            is_threshold_exceeded=usage.is_threshold_exceeded,
            is_limit_exceeded=usage.is_limit_exceeded,
            notification_threshold=Decimal(str(view.limit.notification_threshold)),
        )

    @property
    def progress_width(self) -> float:
        return progress_width(self.usage_percentage)

    @property
    def state(self) -> str:
        if self.is_limit_exceeded:
            return "exceeded"
        if self.is_threshold_exceeded:
            return "warning"
        return ""

    @property
    def remaining_class(self) -> str:
        return "exceeded" if self.remaining_amount < 0 else ""


@dataclass(slots=True)
class CategorySelection:
    """Categories ticked for bulk delete. Defaults can never be selected."""

    selected: set[int] = field(default_factory=set)

    def select(self, category: Category) -> bool:
        if category.is_default or category.id is None:
            return False
        self.selected.add(category.id)
        return True

    def deselect(self, category_id: int) -> None:
        self.selected.discard(category_id)

    def toggle(self, category: Category) -> bool:
        if category.id in self.selected:
            self.deselect(category.id)  # type: ignore[arg-type]
            return False
        return self.select(category)

    def remove_deleted(self, deleted_ids: Iterable[int]) -> None:
        self.selected.difference_update(deleted_ids)

    @property
    def ids(self) -> list[int]:
        return sorted(self.selected)

    @property
    def is_empty(self) -> bool:
        return not self.selected

    @property
    def show_bulk_delete(self) -> bool:
        return bool(self.selected)

    @classmethod
    def from_ids(cls, raw_ids: Iterable[Any], categories: Iterable[Category]) -> CategorySelection:
        by_id = {c.id: c for c in categories}
        selection = cls()
        for raw in raw_ids:
            try:
                category = by_id.get(int(raw))
            except (TypeError, ValueError):
                continue
            if category is not None:
                selection.select(category)
        return selection


@dataclass(slots=True)
class LoginForm:
    """Login input; an invalid email never reaches authentication."""

    email: str = ""
    password: str = ""
    errors: dict[str, list[str]] = field(default_factory=dict, init=False)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> LoginForm:
        return cls(email=str(data.get("email") or "").strip(), password=str(data.get("password") or ""))

    def validate(self) -> bool:
        self.errors.clear()
        if not self.email:
            self._add_error("email", "Email is required.")
        elif not EMAIL_PATTERN.match(self.email):
            self._add_error("email", "Enter a valid email address.")
        if not self.password:
            self._add_error("password", "Password is required.")
        return not self.errors

    def _add_error(self, field: str, message: str) -> None:
        self.errors.setdefault(field, []).append(message)
