"""Dashboard routes: summary figures plus transaction shortcuts."""

from __future__ import annotations

from flask import jsonify

from ...errors import ValidationError
from ...extensions import get_context
from ...security import current_user_id, login_required
from ...serializers import summary_to_dict, transaction_to_dict
from ...services import dashboard as dashboard_service
from ...services import transactions as transaction_service
from ..common import json_body
from ..transactions.forms import TransactionForm
from . import bp


@bp.get("/summary")
@login_required
def summary():
    data = dashboard_service.build_summary(get_context(), user_id=current_user_id())
    return jsonify(summary_to_dict(data))


@bp.get("/recent-transactions")
@login_required
def recent_transactions():
    items = transaction_service.recent_transactions(get_context(), user_id=current_user_id())
    return jsonify([transaction_to_dict(t) for t in items])


@bp.get("/transactions")
@login_required
def list_transactions():
    items = transaction_service.list_transactions(get_context(), user_id=current_user_id())
    return jsonify([transaction_to_dict(t) for t in items])


@bp.post("/transactions")
@login_required
def create_transaction():
    form = TransactionForm.from_mapping(json_body())
    if not form.validate():
        raise ValidationError("Invalid transaction", errors=form.errors)
    transaction = transaction_service.create_transaction(
        get_context(),
        user_id=current_user_id(),
        description=form.description,
        amount=form.amount,
        on=form.date,
        transaction_type=form.type,
        category_id=form.category_id,
    )
    return jsonify(transaction_to_dict(transaction)), 201


@bp.delete("/transactions/<int:transaction_id>")
@login_required
def delete_transaction(transaction_id: int):
    transaction_service.delete_transaction(get_context(), user_id=current_user_id(), transaction_id=transaction_id)
    return "", 204
