"""Spending limit and category pages (POST-redirect-GET)."""

from __future__ import annotations

from flask import flash, redirect, render_template, request, url_for

from ...errors import SpendeeError
from ...extensions import get_context
from ...models.spending_limit import LimitPeriod
from ...security import current_user_id, login_required
from ...services import categories as category_service
from ...services import notifications as notification_service
from ...services import spending_limits as limit_service
from ...viewmodels import CategorySelection, LimitCard, badge_text
from ..common import FieldReader, coerce_int
from . import bp


def _page_context(user_id: int) -> dict:
    ctx = get_context()
    return {
        "badge": badge_text(notification_service.unread_count(ctx, user_id=user_id)),
        "poll_seconds": ctx.config.NOTIFICATION_POLL_SECONDS,
    }


@bp.get("/")
@login_required
def index():
    return redirect(url_for("web.spending_limits"))


@bp.get("/spending-limits")
@login_required
def spending_limits():
    ctx = get_context()
    user_id = current_user_id()
    cards = [LimitCard.from_view(view) for view in limit_service.list_limits(ctx, user_id=user_id)]
    return render_template(
        "spending_limits.html",
        cards=cards,
        categories=category_service.list_categories(ctx, user_id=user_id),
        periods=[p.value for p in LimitPeriod],
        **_page_context(user_id),
    )


def _limit_fields() -> dict:
    reader = FieldReader(request.form)
    fields = {
        "limit_amount": reader.decimal("limitAmount"),
        "period": request.form.get("period") or None,
        "notification_threshold": reader.decimal("notificationThreshold"),
    }
    reader.raise_for_errors("Invalid spending limit")
    return fields


def _flash_error(exc: SpendeeError) -> None:
    details = [message for messages in exc.errors.values() for message in messages]
    flash(f"{exc.message}: {'; '.join(details)}" if details else exc.message, "danger")


@bp.post("/spending-limits")
@login_required
def create_spending_limit():
    try:
        limit_service.create_limit(
            get_context(),
            user_id=current_user_id(),
            category_id=coerce_int(request.form.get("categoryId")),
            **_limit_fields(),
        )
    except SpendeeError as exc:
        _flash_error(exc)
    else:
        flash("Spending limit created successfully", "success")
    return redirect(url_for("web.spending_limits"))


@bp.post("/spending-limits/<int:limit_id>")
@login_required
def update_spending_limit(limit_id: int):
    try:
        limit_service.update_limit(
            get_context(),
            user_id=current_user_id(),
            limit_id=limit_id,
            **_limit_fields(),
        )
    except SpendeeError as exc:
        _flash_error(exc)
    else:
        flash("Spending limit updated successfully", "success")
    return redirect(url_for("web.spending_limits"))


@bp.post("/spending-limits/<int:limit_id>/delete")
@login_required
def delete_spending_limit(limit_id: int):
    try:
        limit_service.delete_limit(get_context(), user_id=current_user_id(), limit_id=limit_id)
    except SpendeeError as exc:
        _flash_error(exc)
    else:
        flash("Spending limit deleted successfully", "success")
    return redirect(url_for("web.spending_limits"))


@bp.get("/categories")
@login_required
def categories():
    ctx = get_context()
    user_id = current_user_id()
    items = category_service.list_categories(ctx, user_id=user_id)
    selection = CategorySelection.from_ids(request.args.getlist("selected"), items)
    return render_template(
        "categories.html",
        categories=items,
        selection=selection,
        **_page_context(user_id),
    )


@bp.post("/categories/delete")
@login_required
def delete_categories():
    ctx = get_context()
    user_id = current_user_id()
    items = category_service.list_categories(ctx, user_id=user_id)
    selection = CategorySelection.from_ids(request.form.getlist("ids"), items)
    if selection.is_empty:
        flash("Select at least one custom category", "warning")
        return redirect(url_for("web.categories"))
    try:
        deleted = category_service.delete_categories(ctx, user_id=user_id, category_ids=selection.ids)
    except SpendeeError as exc:
        _flash_error(exc)
        return redirect(url_for("web.categories", selected=selection.ids))
    selection.remove_deleted(deleted)
    flash(f"Deleted {len(deleted)} categories", "success")
    return redirect(url_for("web.categories", selected=selection.ids))
