"""CSV ingestion of transactions."""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import IO, TYPE_CHECKING, Iterable, Mapping, Optional, Union

import pandas as pd

from ..errors import ValidationError
from ..logging_config import get_logger
from ..models.transaction import Transaction, TransactionType
from . import budgeting
from . import transactions as transaction_service

if TYPE_CHECKING:
    from pathlib import Path

    from ..context import AppContext

logger = get_logger(__name__)


@dataclass(slots=True)
class ColumnMapping:
    """Maps expected transaction fields to CSV headers."""

    description: str = "description"
    amount: str = "amount"
    date: str = "date"
    type: Optional[str] = "type"
    category: Optional[str] = "category"


@dataclass(slots=True)
class CsvImportResult:
    imported: int = 0
    skipped: int = 0
    errors: list[str] = field(default_factory=list)


def normalize_frame(source: Union[str, "Path", IO], *, encoding: str = "utf-8") -> pd.DataFrame:
    """Load a CSV into a DataFrame with stripped, lower-case headers."""

    try:
        frame = pd.read_csv(source, encoding=encoding, dtype=str, keep_default_na=False)
    except (pd.errors.ParserError, pd.errors.EmptyDataError, UnicodeDecodeError) as exc:
        raise ValidationError(f"Could not read CSV file: {exc}") from exc
    frame.columns = [str(c).strip().lower() for c in frame.columns]
    return frame


def parse_rows(
    rows: Iterable[Mapping],
    *,
    mapping: ColumnMapping,
    category_ids: Mapping[str, int],
) -> tuple[list[Transaction], list[str]]:
    """Turn CSV rows into unsaved transactions plus one message per rejected row.

    Amounts are stored as absolute values; rows without a type are expenses.
    """

    parsed: list[Transaction] = []
    errors: list[str] = []
    for number, row in enumerate(rows, start=2):
        description = str(row.get(mapping.description) or "").strip()
        try:
            amount = Decimal(str(row.get(mapping.amount) or "").replace(",", "").strip())
        except InvalidOperation:
            errors.append(f"Row {number}: invalid amount")
            continue
        if budgeting.money_error(amount):
            errors.append(f"Row {number}: invalid amount")
            continue
        occurred = pd.to_datetime(row.get(mapping.date) or None, errors="coerce")
        if pd.isna(occurred):
            errors.append(f"Row {number}: invalid date")
            continue
        raw_type = str(row.get(mapping.type) or "").strip() if mapping.type else ""
        if raw_type:
            try:
                kind = TransactionType(raw_type.upper())
            except ValueError:
                errors.append(f"Row {number}: unknown type '{raw_type}'")
                continue
        else:
            kind = TransactionType.EXPENSE
        amount = abs(amount)
        if not description or amount == 0:
            errors.append(f"Row {number}: description and a non-zero amount are required")
            continue

        category_id = None
        if mapping.category:
            name = str(row.get(mapping.category) or "").strip().lower()
            category_id = category_ids.get(name)

        parsed.append(
            Transaction(
                description=description[:255],
                amount=amount.quantize(Decimal("0.01")),
                date=occurred.date(),
                transaction_type=kind,
                category_id=category_id,
            )
        )
    return parsed, errors


def import_csv(
    ctx: AppContext,
    *,
    user_id: int,
    source: Union[str, "Path", IO],
    mapping: Optional[ColumnMapping] = None,
) -> CsvImportResult:
    """Parse the file and persist every valid row for ``user_id``."""

    mapping = mapping or ColumnMapping()
    frame = normalize_frame(source)
    missing = [c for c in (mapping.description, mapping.amount, mapping.date) if c not in frame.columns]
    if missing:
        raise ValidationError("Missing required columns: " + ", ".join(missing))

    category_ids = {c.name.lower(): c.id for c in ctx.category_repo.list_all(user_id=user_id)}
    rows = frame.to_dict(orient="records")
    parsed, errors = parse_rows(rows, mapping=mapping, category_ids=category_ids)
    imported = transaction_service.import_many(ctx, user_id=user_id, transactions=parsed)
    logger.info(
        "CSV imported",
        extra={"user_id": user_id, "imported": imported, "skipped": len(errors)},
    )
    return CsvImportResult(imported=imported, skipped=len(errors), errors=errors)
