"""Flask CLI commands for Spendee."""

from __future__ import annotations

import click
from flask import Flask

from .errors import SpendeeError
from .extensions import get_context


def init_app(app: Flask) -> None:
    """Register CLI commands on the Flask app."""

    @app.cli.command("spendee-seed")
    def spendee_seed() -> None:
        """Create the shared default categories."""

        from .services.categories import seed_defaults

        created = seed_defaults(get_context())
        click.echo(f"Default categories created: {created}")

    @app.cli.command("spendee-evaluate-limits")
    def spendee_evaluate_limits() -> None:
        """Re-evaluate every active spending limit once."""

        from .services.spending_limits import evaluate_all

        emitted = evaluate_all(get_context())
        click.echo(f"Notifications emitted: {emitted}")

    @app.cli.command("spendee-create-admin")
    @click.option("--email", prompt=True, help="Admin email address")
    @click.option("--password", prompt=True, hide_input=True, confirmation_prompt=True)
    @click.option("--first-name", default="", help="First name")
    @click.option("--last-name", default="", help="Last name")
    def spendee_create_admin(email: str, password: str, first_name: str, last_name: str) -> None:
        """Register an administrator, or promote an existing account."""

        from .services.auth import register_user, set_role

        ctx = get_context()
        existing = ctx.user_repo.get_by_email(email)
        try:
            if existing is not None:
                set_role(ctx, user_id=existing.id, role="admin")
                click.echo(f"Promoted {existing.email} to admin")
                return
            user = register_user(
                ctx,
                email=email,
                password=password,
                first_name=first_name,
                last_name=last_name,
                role="admin",
            )
        except SpendeeError as exc:
            raise click.ClickException(exc.message) from exc
        click.echo(f"Admin created: {user.email}")
