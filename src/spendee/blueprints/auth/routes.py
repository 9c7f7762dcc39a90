"""Login page: sets the token cookie on success."""

from __future__ import annotations

from flask import flash, redirect, render_template, request, session, url_for

from ...errors import AuthenticationError
from ...extensions import get_context
from ...security import SESSION_EXPIRED, SESSION_TOKEN_KEY, clear_auth_cookies
from ...services import auth as service
from ...viewmodels import LoginForm
from . import bp


@bp.get("/login")
def login():
    if request.args.get("error") == SESSION_EXPIRED:
        flash("Your session has expired. Please sign in again.", "warning")
    return render_template("login.html", form=LoginForm())


@bp.post("/login")
def login_submit():
    form = LoginForm.from_mapping(request.form)
    if not form.validate():
        return render_template("login.html", form=form), 400

    ctx = get_context()
    try:
        user = service.authenticate(ctx, email=form.email, password=form.password)
    except AuthenticationError as exc:
        form.errors.setdefault("form", []).append(exc.message)
        return render_template("login.html", form=form), 401

    token = service.issue_token(ctx.config, user)
    session[SESSION_TOKEN_KEY] = token
    response = redirect(url_for("web.spending_limits"))
    max_age = ctx.config.TOKEN_TTL_MINUTES * 60
    response.set_cookie(ctx.config.TOKEN_COOKIE, token, max_age=max_age, httponly=True, samesite="Lax")
    response.set_cookie(ctx.config.EMAIL_COOKIE, user.email, max_age=max_age, samesite="Lax")
    return response


@bp.get("/logout")
def logout():
    flash("You have been signed out.", "info")
    return clear_auth_cookies(redirect(url_for("auth.login")))
