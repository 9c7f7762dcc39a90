"""Tests for the background limit scheduler and the Flask CLI commands."""

from __future__ import annotations

from datetime import date

from spendee.constants.categories import DEFAULT_CATEGORIES
from spendee.scheduler import JOB_ID, LimitScheduler
from spendee.services import spending_limits


def test_run_once_evaluates_limits(ctx, user, transaction_factory, limit_factory):
    limit_factory("10.00")
    transaction_factory("25.00", on=date.today())

    assert LimitScheduler(ctx).run_once() == 1
    assert ctx.notification_repo.count_unread(user_id=user.id) == 1


def test_run_once_logs_and_swallows_failures(ctx, monkeypatch):
    def boom(_ctx):
        raise RuntimeError("database offline")

    monkeypatch.setattr(spending_limits, "evaluate_all", boom)

    assert LimitScheduler(ctx).run_once() == 0


def test_start_and_stop_register_interval_job(ctx):
    scheduler = LimitScheduler(ctx, minutes=5)
    scheduler.start()
    try:
        assert scheduler.running
        job = scheduler.scheduler.get_job(JOB_ID)
        assert job is not None
        assert job.trigger.interval.total_seconds() == 300
    finally:
        scheduler.stop()
    assert not scheduler.running


def test_seed_command(app):
    result = app.test_cli_runner().invoke(args=["spendee-seed"])

    assert result.exit_code == 0
    assert f"Default categories created: {len(DEFAULT_CATEGORIES)}" in result.output


def test_create_admin_then_promote_existing(app, app_ctx):
    runner = app.test_cli_runner()

    created = runner.invoke(
        args=["spendee-create-admin", "--email", "boss@example.com", "--password", "Password1"]
    )
    assert created.exit_code == 0
    assert app_ctx.user_repo.get_by_email("boss@example.com").role == "admin"

    again = runner.invoke(
        args=["spendee-create-admin", "--email", "boss@example.com", "--password", "Password1"]
    )
    assert "Promoted boss@example.com to admin" in again.output


def test_create_admin_rejects_weak_password(app):
    result = app.test_cli_runner().invoke(
        args=["spendee-create-admin", "--email", "boss@example.com", "--password", "weak"]
    )

    assert result.exit_code != 0
    assert "Password must be at least 8 characters long" in result.output


def test_evaluate_limits_command(app):
    result = app.test_cli_runner().invoke(args=["spendee-evaluate-limits"])

    assert result.exit_code == 0
    assert "Notifications emitted: 0" in result.output
