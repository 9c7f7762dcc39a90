"""Request authentication for API and web views."""

from __future__ import annotations

from functools import wraps
from typing import Callable, Optional

from flask import g, jsonify, redirect, request, session, url_for

from .errors import AuthenticationError
from .extensions import get_context
from .logging_config import get_logger
from .models.user import User
from .services.auth import decode_token

logger = get_logger(__name__)

SESSION_TOKEN_KEY = "jwt_token"
SESSION_EXPIRED = "session_expired"
UNAUTHORIZED = "unauthorized"


def _request_token() -> Optional[str]:
    """Bearer header first, then the token cookie, then the signed session."""

    header = request.headers.get("Authorization", "")
    if header.lower().startswith("bearer "):
        token = header[7:].strip()
        if token:
            return token
    config = get_context().config
    return request.cookies.get(config.TOKEN_COOKIE) or session.get(SESSION_TOKEN_KEY)


def resolve_user(token: str) -> User:
    ctx = get_context()
    user = ctx.user_repo.get_by_id(decode_token(ctx.config, token))
    if user is None:
        raise AuthenticationError(SESSION_EXPIRED)
    return user


def clear_auth_cookies(response):
    config = get_context().config
    response.delete_cookie(config.TOKEN_COOKIE)
    response.delete_cookie(config.EMAIL_COOKIE)
    session.pop(SESSION_TOKEN_KEY, None)
    return response


def _reject(reason: str):
    if request.path.startswith("/api/"):
        return jsonify({"error": reason, "success": False}), 401
    if reason == SESSION_EXPIRED:
        return clear_auth_cookies(redirect(url_for("auth.login", error=SESSION_EXPIRED)))
    return redirect(url_for("auth.login"))


def login_required(view: Callable) -> Callable:
    """Populate ``g.current_user`` or reject the request.

    API paths answer 401 JSON; pages clear the auth cookies and redirect to the
    login page.
    """

    @wraps(view)
    def wrapper(*args, **kwargs):
        token = _request_token()
        if not token:
            return _reject(UNAUTHORIZED)
        try:
            g.current_user = resolve_user(token)
        except AuthenticationError:
            logger.info("Rejected expired or invalid token", extra={"path": request.path})
            return _reject(SESSION_EXPIRED)
        return view(*args, **kwargs)

    return wrapper


def current_user_id() -> int:
    return g.current_user.id
