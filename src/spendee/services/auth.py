"""Authentication, credential validation and token handling."""

from __future__ import annotations

import re
from datetime import datetime, timedelta, timezone
from typing import TYPE_CHECKING, Optional

import jwt
from argon2 import PasswordHasher
from argon2.exceptions import InvalidHash, VerificationError, VerifyMismatchError

from ..errors import AuthenticationError, ConflictError, NotFoundError, ValidationError
from ..logging_config import get_logger
from ..models.user import User

if TYPE_CHECKING:
    from ..config import BaseConfig
    from ..context import AppContext

logger = get_logger(__name__)

_hasher = PasswordHasher()
_ALLOWED_ROLES = {"user", "admin"}

EMAIL_PATTERN = re.compile(
    r"^[a-zA-Z0-9_+&*-]+(?:\.[a-zA-Z0-9_+&*-]+)*@(?:[a-zA-Z0-9-]+\.)+[a-zA-Z]{2,7}$"
)
TOKEN_ISSUER = "spendee"


def validate_email(email: Optional[str]) -> str:
    """Return the trimmed email or raise ``ValidationError``."""

    if email is None or not email.strip():
        raise ValidationError("Email cannot be empty", errors={"email": ["Email cannot be empty"]})
    email = email.strip()
    if not EMAIL_PATTERN.match(email):
        raise ValidationError("Invalid email format", errors={"email": ["Invalid email format"]})
    return email


def validate_password(password: Optional[str]) -> str:
    if password is None or not password.strip():
        message = "Password cannot be empty"
    elif len(password) < 8:
        message = "Password must be at least 8 characters long"
    elif not re.search(r"[A-Z]", password):
        message = "Password must contain at least one uppercase letter"
    elif not re.search(r"\d", password):
        message = "Password must contain at least one digit"
    else:
        return password
    raise ValidationError(message, errors={"password": [message]})


def hash_password(password: str) -> str:
    return _hasher.hash(password)


def verify_password(password_hash: str, password: str) -> bool:
    try:
        return _hasher.verify(password_hash, password)
    except (VerifyMismatchError, InvalidHash, VerificationError):
        return False


def _normalize_role(role: str) -> str:
    role = (role or "user").lower()
    if role not in _ALLOWED_ROLES:
        raise ValidationError(f"Invalid role: {role}")
    return role


def register_user(
    ctx: AppContext,
    *,
    email: str,
    password: str,
    first_name: str = "",
    last_name: str = "",
    role: str = "user",
) -> User:
    """Create an account after validating credentials; duplicate emails conflict."""

    email = validate_email(email)
    validate_password(password)
    if ctx.user_repo.get_by_email(email) is not None:
        logger.warning("Registration rejected: email already registered", extra={"email": email})
        raise ConflictError("User already exists with this email")

    user = ctx.user_repo.create(
        User(
            email=email,
            password_hash=hash_password(password),
            first_name=(first_name or "").strip(),
            last_name=(last_name or "").strip(),
            role=_normalize_role(role),
            currency=ctx.config.DEFAULT_CURRENCY,
            date_format=ctx.config.DEFAULT_DATE_FORMAT,
        )
    )
    logger.info("User registered", extra={"user_id": user.id})
    return user


def authenticate(ctx: AppContext, *, email: str, password: str) -> User:
    """Validate credentials and stamp ``last_login``."""

    email = (email or "").strip()
    user = ctx.user_repo.get_by_email(email) if email else None
    if user is None or not verify_password(user.password_hash, password or ""):
        logger.warning("Login failed", extra={"email": email})
        raise AuthenticationError("Invalid email or password")

    user.last_login = datetime.now(timezone.utc)
    user = ctx.user_repo.update(user)
    logger.info("User logged in", extra={"user_id": user.id})
    return user


def issue_token(config: BaseConfig, user: User, *, now: Optional[datetime] = None) -> str:
    """Sign a bearer token whose subject is the user id."""

    now = now or datetime.now(timezone.utc)
    payload = {
        "iss": TOKEN_ISSUER,
        "sub": str(user.id),
        "email": user.email,
        "iat": now,
        "exp": now + timedelta(minutes=config.TOKEN_TTL_MINUTES),
    }
    return jwt.encode(payload, config.SECRET_KEY, algorithm=config.JWT_ALGORITHM)


def decode_token(config: BaseConfig, token: str) -> int:
    """Return the user id carried by ``token``.

    Raises ``AuthenticationError("session_expired")`` for expired or tampered tokens.
    """

    try:
        payload = jwt.decode(
            token,
            config.SECRET_KEY,
            algorithms=[config.JWT_ALGORITHM],
            issuer=TOKEN_ISSUER,
            options={"require": ["exp", "sub"]},
        )
        return int(payload["sub"])
    except jwt.ExpiredSignatureError as exc:
        raise AuthenticationError("session_expired") from exc
    except (jwt.InvalidTokenError, ValueError) as exc:
        raise AuthenticationError("session_expired") from exc


def change_password(ctx: AppContext, *, user_id: int, current_password: str, new_password: str) -> User:
    user = ctx.user_repo.get_by_id(user_id)
    if user is None:
        raise NotFoundError("User not found")
    if not verify_password(user.password_hash, current_password or ""):
        raise ValidationError(
            "Current password is incorrect",
            errors={"currentPassword": ["Current password is incorrect"]},
        )
    validate_password(new_password)
    user.password_hash = hash_password(new_password)
    logger.info("Password changed", extra={"user_id": user_id})
    return ctx.user_repo.update(user)


def set_role(ctx: AppContext, *, user_id: int, role: str) -> User:
    """Update the role for a user."""

    user = ctx.user_repo.get_by_id(user_id)
    if user is None:
        raise NotFoundError("User not found")
    user.role = _normalize_role(role)
    return ctx.user_repo.update(user)
