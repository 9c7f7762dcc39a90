"""Profile, photo and display preference management."""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from ..errors import ConflictError, NotFoundError, ValidationError
from ..logging_config import get_logger
from ..models.user import User
from .auth import validate_email

if TYPE_CHECKING:
    from ..context import AppContext

logger = get_logger(__name__)

SUPPORTED_DATE_FORMATS = ("MM/DD/YYYY", "DD/MM/YYYY", "YYYY-MM-DD")
MAX_PHOTO_BYTES = 2 * 1024 * 1024


def get_user(ctx: AppContext, *, user_id: int) -> User:
    user = ctx.user_repo.get_by_id(user_id)
    if user is None:
        raise NotFoundError("User not found")
    return user


def update_profile(
    ctx: AppContext,
    *,
    user_id: int,
    first_name: str,
    last_name: str,
    email: str,
    photo: Optional[bytes] = None,
    photo_content_type: Optional[str] = None,
) -> User:
    """Update names, email and optionally the profile photo."""

    user = get_user(ctx, user_id=user_id)
    email = validate_email(email).lower()
    if email != user.email:
        other = ctx.user_repo.get_by_email(email)
        if other is not None and other.id != user_id:
            raise ConflictError("User already exists with this email")

    if photo:
        if not (photo_content_type or "").startswith("image/"):
            raise ValidationError("Error uploading photo: file is not an image")
        if len(photo) > MAX_PHOTO_BYTES:
            raise ValidationError("Error uploading photo: image is larger than 2 MB")
        user.photo = photo
        user.photo_content_type = photo_content_type

    user.first_name = (first_name or "").strip()
    user.last_name = (last_name or "").strip()
    user.email = email
    saved = ctx.user_repo.update(user)
    logger.info("Profile updated", extra={"user_id": user_id, "photo": bool(photo)})
    return saved


def get_preferences(ctx: AppContext, *, user_id: int) -> dict[str, str]:
    user = get_user(ctx, user_id=user_id)
    return {"currency": user.currency, "dateFormat": user.date_format}


def update_preferences(
    ctx: AppContext,
    *,
    user_id: int,
    currency: Optional[str] = None,
    date_format: Optional[str] = None,
) -> dict[str, str]:
    """Store the submitted preferences as-is; the browser copy wins on conflict."""

    user = get_user(ctx, user_id=user_id)
    errors: dict[str, list[str]] = {}
    if currency is not None:
        currency = currency.strip().upper()
        if len(currency) != 3 or not currency.isalpha():
            errors.setdefault("currency", []).append("Currency must be a 3-letter ISO code")
        else:
            user.currency = currency
    if date_format is not None:
        if date_format not in SUPPORTED_DATE_FORMATS:
            errors.setdefault("dateFormat", []).append(
                "Date format must be one of " + ", ".join(SUPPORTED_DATE_FORMATS)
            )
        else:
            user.date_format = date_format
    if errors:
        raise ValidationError("Invalid preferences", errors=errors)
    ctx.user_repo.update(user)
    return {"currency": user.currency, "dateFormat": user.date_format}
