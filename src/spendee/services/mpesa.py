"""M-Pesa PDF statement import.

Only the SUMMARY table is imported: each ``<type> <paid in> <paid out>`` row
becomes up to two transactions dated on the statement date.
"""

from __future__ import annotations

import io
import re
from dataclasses import dataclass
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import TYPE_CHECKING, Optional

from pypdf import PdfReader
from pypdf.errors import PdfReadError

from ..constants.categories import MPESA_CATEGORY
from ..errors import ValidationError
from ..logging_config import get_logger
from ..models.transaction import Transaction, TransactionType
from . import transactions as transaction_service

if TYPE_CHECKING:
    from ..context import AppContext

logger = get_logger(__name__)

MAX_STATEMENT_BYTES = 10 * 1024 * 1024
SUPPORTED_FORMATS = ("PDF",)
UPLOAD_INSTRUCTIONS = (
    "Download your M-Pesa statement from the Safaricom app",
    "Select the PDF file to upload",
    "We'll automatically extract and categorize your transactions",
    "Duplicate transactions will be skipped",
)

_ORDINAL = re.compile(r"(\d+)(st|nd|rd|th)")
_HEADER_MARKERS = (
    "receipt",
    "completion time",
    "transaction status",
    "paid in",
    "withdraw",
    "balance",
    "mpesa",
    "customer name",
    "mobile number",
    "statement period",
    "summary",
    "transaction type",
    "paid out",
    "total",
)


@dataclass(slots=True)
class StatementLine:
    date: date
    description: str
    amount: Decimal
    type: TransactionType
    details: str = ""


@dataclass(slots=True)
class ImportResult:
    message: str
    total_transactions: int = 0
    saved_transactions: int = 0
    skipped_transactions: int = 0
    total_income: Decimal = Decimal("0")
    total_expense: Decimal = Decimal("0")

    def as_dict(self) -> dict:
        return {
            "success": True,
            "message": self.message,
            "totalTransactions": self.total_transactions,
            "savedTransactions": self.saved_transactions,
            "skippedTransactions": self.skipped_transactions,
            "totalIncome": float(self.total_income),
            "totalExpense": float(self.total_expense),
        }


def parse_statement_date(line: str, *, default: date) -> date:
    """Parse ``Date of Statement: 21st 10 2025`` style headers."""

    value = _ORDINAL.sub(r"\1", line.split(":", 1)[-1].strip())
    parts = value.split()
    if len(parts) >= 3:
        try:
            return date(int(parts[2]), int(parts[1]), int(parts[0]))
        except ValueError:
            logger.debug("Unparseable statement date", extra={"line": line})
    return default


def _is_header(line: str) -> bool:
    lower = line.lower()
    if not lower.replace("|", "").strip():
        return True
    return any(marker in lower for marker in _HEADER_MARKERS)


def _is_numeric(token: str) -> bool:
    cleaned = re.sub(r"[Ksh,\s]", "", token)
    try:
        float(cleaned)
    except ValueError:
        return False
    return True


def parse_amount(token: Optional[str]) -> Optional[Decimal]:
    """Strip currency text and thousands separators; ``None`` when nothing numeric remains."""

    if token is None or not token.strip():
        return None
    cleaned = re.sub(r"[^0-9.]", "", token)
    if not cleaned or cleaned == ".":
        return None
    head, dot, tail = cleaned.rpartition(".")
    if dot and head:
        cleaned = head.replace(".", "") + "." + tail
    try:
        return Decimal(cleaned)
    except InvalidOperation:
        return None


def parse_summary_line(line: str, on: date) -> list[StatementLine]:
    parts = line.split()
    if len(parts) < 3:
        return []
    if len(parts) == 3:
        label, paid_in, paid_out = parts
    else:
        numeric = [i for i in range(len(parts)) if _is_numeric(parts[i])]
        if len(numeric) < 2 or numeric[-2] == 0 or numeric[-2] + 1 >= len(parts):
            return []
        first = numeric[-2]
        label = " ".join(parts[:first])
        paid_in, paid_out = parts[first], parts[first + 1]
    label = label.strip()
    if not label:
        return []

    found = []
    received = parse_amount(paid_in)
    if received is not None and received > 0:
        found.append(StatementLine(on, f"{label} (Received)", received, TransactionType.INCOME, f"Summary: {label}"))
    sent = parse_amount(paid_out)
    if sent is not None and sent > 0:
        found.append(StatementLine(on, f"{label} (Sent)", sent, TransactionType.EXPENSE, f"Summary: {label}"))
    return found


def extract_transactions(text: str, *, today: Optional[date] = None) -> list[StatementLine]:
    """Extract summary transactions from the statement's plain text."""

    lines = text.splitlines()
    statement_date = today or date.today()
    for raw in lines:
        if "Date of Statement:" in raw:
            statement_date = parse_statement_date(raw, default=statement_date)
            break

    found: list[StatementLine] = []
    in_summary = False
    for raw in lines:
        line = " ".join(raw.split())
        if not line:
            continue
        if "SUMMARY" in line:
            in_summary = True
            continue
        if "DETAILED STATEMENT" in line:
            in_summary = False
            continue
        if not in_summary or _is_header(line):
            continue
        found.extend(parse_summary_line(line, statement_date))
    logger.info("Statement text parsed", extra={"transactions": len(found)})
    return found


def read_pdf_text(payload: bytes) -> str:
    try:
        reader = PdfReader(io.BytesIO(payload))
        return "\n".join(page.extract_text() or "" for page in reader.pages)
    except (PdfReadError, ValueError) as exc:
        raise ValidationError(f"Failed to parse M-Pesa statement: {exc}") from exc


def import_statement(
    ctx: AppContext,
    *,
    user_id: int,
    filename: Optional[str],
    payload: bytes,
    today: Optional[date] = None,
) -> ImportResult:
    """Parse an uploaded statement and persist the new transactions."""

    if not payload:
        return ImportResult(message="File uploaded successfully")
    if not (filename or "").lower().endswith(".pdf"):
        raise ValidationError("Only PDF statements are supported", errors={"file": ["Upload a PDF file"]})
    if len(payload) > MAX_STATEMENT_BYTES:
        raise ValidationError("Statement is larger than 10 MB", errors={"file": ["File too large"]})

    parsed = extract_transactions(read_pdf_text(payload), today=today)
    if not parsed:
        return ImportResult(message="Statement processed successfully - no new transactions found")

    category = ctx.category_repo.get_by_name(MPESA_CATEGORY, user_id=user_id)
    category_id = category.id if category is not None else None

    result = ImportResult(message="", total_transactions=len(parsed))
    pending: list[Transaction] = []
    seen: set[tuple] = set()
    for line in parsed:
        key = (line.date, line.description, line.amount, line.type)
        if key in seen or ctx.transaction_repo.exists_like(
            user_id=user_id,
            on=line.date,
            description=line.description,
            amount=line.amount,
            transaction_type=line.type,
        ):
            result.skipped_transactions += 1
            continue
        seen.add(key)
        pending.append(
            Transaction(
                description=line.description,
                amount=line.amount,
                date=line.date,
                transaction_type=line.type,
                category_id=category_id,
            )
        )
        if line.type == TransactionType.INCOME:
            result.total_income += line.amount
        else:
            result.total_expense += line.amount

    result.saved_transactions = transaction_service.import_many(ctx, user_id=user_id, transactions=pending)
    result.message = f"Statement processed successfully! Imported {result.saved_transactions} transactions"
    logger.info(
        "M-Pesa statement imported",
        extra={
            "user_id": user_id,
            "saved": result.saved_transactions,
            "skipped": result.skipped_transactions,
        },
    )
    return result
