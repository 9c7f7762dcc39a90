"""Request parsing helpers shared by the API blueprints."""

from __future__ import annotations

from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Any, Mapping, Optional

from flask import request

from ..errors import ValidationError


def json_body() -> dict[str, Any]:
    """Return the JSON object body or raise a 400."""

    payload = request.get_json(silent=True)
    if payload is None:
        return {}
    if not isinstance(payload, dict):
        raise ValidationError("Request body must be a JSON object")
    return payload


def coerce_decimal(value: Any) -> Optional[Decimal]:
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    try:
        number = Decimal(str(value).strip())
    except InvalidOperation:
        return None
    return number if number.is_finite() else None


def coerce_int(value: Any) -> Optional[int]:
    if value is None or value == "":
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def coerce_date(value: Any) -> Optional[date]:
    if isinstance(value, date):
        return value
    if not value:
        return None
    try:
        return date.fromisoformat(str(value)[:10])
    except ValueError:
        return None


class FieldReader:
    """Typed access to a mapping that records coercion failures per field."""

    def __init__(self, data: Mapping[str, Any]):
        self.data = data
        self.errors: dict[str, list[str]] = {}

    def _fail(self, key: str, message: str) -> None:
        self.errors.setdefault(key, []).append(message)

    def text(self, key: str) -> str:
        value = self.data.get(key)
        return "" if value is None else str(value)

    def optional_text(self, key: str) -> Optional[str]:
        value = self.data.get(key)
        return None if value is None else str(value)

    def decimal(self, key: str) -> Optional[Decimal]:
        raw = self.data.get(key)
        value = coerce_decimal(raw)
        if value is None and raw not in (None, ""):
            self._fail(key, "Must be a number")
        return value

    def integer(self, key: str) -> Optional[int]:
        raw = self.data.get(key)
        value = coerce_int(raw)
        if value is None and raw not in (None, ""):
            self._fail(key, "Must be a whole number")
        return value

    def date(self, key: str) -> Optional[date]:
        raw = self.data.get(key)
        value = coerce_date(raw)
        if value is None and raw not in (None, ""):
            self._fail(key, "Enter a valid date (YYYY-MM-DD)")
        return value

    def raise_for_errors(self, message: str) -> None:
        if self.errors:
            raise ValidationError(message, errors=self.errors)
