"""Transaction payload validation."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Any, Optional

from ..common import coerce_date, coerce_decimal, coerce_int
from ...models.transaction import TransactionType


@dataclass(slots=True)
class TransactionForm:
    """Transaction input prior to validation; keys are the API's camelCase names."""

    description: str = ""
    amount: Optional[Decimal] = None
    date: Optional[date] = None
    type: Optional[TransactionType] = None
    category_id: Optional[int] = None
    errors: dict[str, list[str]] = field(default_factory=dict, init=False)
    raw_data: dict[str, Any] = field(default_factory=dict, init=False)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> TransactionForm:
        form = cls()
        form.load(data)
        return form

    def load(self, data: Mapping[str, Any]) -> None:
        self.raw_data = {key: data.get(key) for key in ("description", "amount", "date", "type", "categoryId")}
        self.description = str(self.raw_data.get("description") or "").strip()

    def validate(self) -> bool:
        """Coerce types only; business rules live in the service."""

        self.errors.clear()

        self.amount = coerce_decimal(self.raw_data.get("amount"))
        if self.amount is None:
            self._add_error("amount", "Enter a valid number for the amount.")

        self.date = coerce_date(self.raw_data.get("date"))
        if self.date is None:
            self._add_error("date", "Enter a valid date (YYYY-MM-DD).")

        raw_type = str(self.raw_data.get("type") or "").strip().upper()
        self.type = None
        try:
            self.type = TransactionType(raw_type)
        except ValueError:
            self._add_error("type", "Type must be INCOME or EXPENSE.")

        raw_category = self.raw_data.get("categoryId")
        self.category_id = coerce_int(raw_category)
        if self.category_id is None and raw_category not in (None, ""):
            self._add_error("categoryId", "Category must be a whole number.")

        return not self.errors

    def _add_error(self, field: str, message: str) -> None:
        self.errors.setdefault(field, []).append(message)
