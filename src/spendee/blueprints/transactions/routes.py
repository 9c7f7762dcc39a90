"""Transaction API routes."""

from __future__ import annotations

from flask import jsonify, request

from ...errors import ValidationError
from ...extensions import get_context
from ...security import current_user_id, login_required
from ...serializers import transaction_to_dict
from ...services import import_csv as csv_service
from ...services import transactions as service
from ..common import coerce_int, json_body
from . import bp
from .forms import TransactionForm


def _bound_form() -> TransactionForm:
    form = TransactionForm.from_mapping(json_body())
    if not form.validate():
        raise ValidationError("Invalid transaction", errors=form.errors)
    return form


@bp.get("")
@login_required
def list_transactions():
    items = service.list_transactions(get_context(), user_id=current_user_id())
    return jsonify([transaction_to_dict(t) for t in items])


@bp.post("")
@login_required
def create_transaction():
    form = _bound_form()
    transaction = service.create_transaction(
        get_context(),
        user_id=current_user_id(),
        description=form.description,
        amount=form.amount,
        on=form.date,
        transaction_type=form.type,
        category_id=form.category_id,
    )
    return jsonify(transaction_to_dict(transaction)), 201


@bp.get("/<int:transaction_id>")
@login_required
def get_transaction(transaction_id: int):
    transaction = service.get_transaction(get_context(), user_id=current_user_id(), transaction_id=transaction_id)
    return jsonify(transaction_to_dict(transaction))


@bp.put("/<int:transaction_id>")
@login_required
def update_transaction(transaction_id: int):
    form = _bound_form()
    transaction = service.update_transaction(
        get_context(),
        user_id=current_user_id(),
        transaction_id=transaction_id,
        description=form.description,
        amount=form.amount,
        on=form.date,
        transaction_type=form.type,
        category_id=form.category_id,
    )
    return jsonify(transaction_to_dict(transaction))


@bp.delete("/<int:transaction_id>")
@login_required
def delete_transaction(transaction_id: int):
    service.delete_transaction(get_context(), user_id=current_user_id(), transaction_id=transaction_id)
    return "", 204


@bp.get("/monthly")
@login_required
def monthly_transactions():
    year = coerce_int(request.args.get("year"))
    month = coerce_int(request.args.get("month"))
    if year is None or month is None:
        raise ValidationError("year and month query parameters are required")
    items = service.transactions_for_month(get_context(), user_id=current_user_id(), year=year, month=month)
    return jsonify([transaction_to_dict(t) for t in items])


@bp.patch("/bulk-categorize")
@login_required
def bulk_categorize():
    payload = json_body()
    raw_ids = payload.get("transactionIds") or []
    if not isinstance(raw_ids, list):
        raise ValidationError("transactionIds must be a list")
    ids = [coerce_int(value) for value in raw_ids]
    if any(value is None for value in ids):
        raise ValidationError("transactionIds must contain whole numbers")
    updated = service.bulk_categorize(
        get_context(),
        user_id=current_user_id(),
        transaction_ids=ids,
        category_id=coerce_int(payload.get("categoryId")),
    )
    return jsonify({"message": f"{updated} transactions updated", "updated": updated, "success": True})


@bp.post("/import-csv")
@login_required
def import_transactions_csv():
    upload = request.files.get("file")
    if upload is None or not upload.filename:
        raise ValidationError("No file uploaded", errors={"file": ["Choose a CSV file"]})
    result = csv_service.import_csv(get_context(), user_id=current_user_id(), source=upload.stream)
    return jsonify(
        {
            "success": True,
            "message": f"Imported {result.imported} transactions",
            "imported": result.imported,
            "skipped": result.skipped,
            "errors": result.errors,
        }
    )
