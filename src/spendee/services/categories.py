"""Category management, including the General fallback category."""

from __future__ import annotations

from typing import TYPE_CHECKING, Iterable, Optional

from ..constants.categories import (
    DEFAULT_CATEGORIES,
    GENERAL_CATEGORY,
    GENERAL_COLOR,
    GENERAL_DESCRIPTION,
    GENERAL_ICON,
)
from ..errors import NotFoundError, ValidationError
from ..logging_config import get_logger
from ..models.category import Category
from . import spending_limits

if TYPE_CHECKING:
    from ..context import AppContext

logger = get_logger(__name__)

_HEX_DIGITS = set("0123456789abcdefABCDEF")


def _clean_fields(
    name: Optional[str],
    color: Optional[str],
    icon: Optional[str],
    description: Optional[str],
) -> dict:
    errors: dict[str, list[str]] = {}
    name = (name or "").strip()
    if not name:
        errors.setdefault("name", []).append("Name is required")
    elif len(name) > 64:
        errors.setdefault("name", []).append("Name must be 64 characters or fewer")

    color = (color or "").strip() or None
    if color is not None and not (
        len(color) == 7 and color.startswith("#") and set(color[1:]) <= _HEX_DIGITS
    ):
        errors.setdefault("color", []).append("Color must look like #RRGGBB")

    if errors:
        raise ValidationError("Invalid category", errors=errors)
    return {
        "name": name,
        "color": color,
        "icon": (icon or "").strip() or None,
        "description": (description or "").strip() or None,
    }


def list_categories(ctx: AppContext, *, user_id: int) -> list[Category]:
    """User-owned categories plus system defaults, ordered by name."""

    return ctx.category_repo.list_all(user_id=user_id)


def get_category(ctx: AppContext, *, user_id: int, category_id: int) -> Category:
    category = ctx.category_repo.get_by_id(category_id, user_id=user_id)
    if category is None:
        raise NotFoundError("Category not found")
    return category


def _editable_category(ctx: AppContext, *, user_id: int, category_id: int, action: str) -> Category:
    category = ctx.category_repo.get_by_id(category_id, user_id=user_id)
    if category is None:
        raise NotFoundError("Category not found or not owned by user")
    if category.is_default:
        raise ValidationError(f"Default categories cannot be {action}")
    if category.user_id != user_id:
        raise NotFoundError("Category not found or not owned by user")
    return category


def create_category(
    ctx: AppContext,
    *,
    user_id: int,
    name: str,
    color: Optional[str] = None,
    icon: Optional[str] = None,
    description: Optional[str] = None,
) -> Category:
    fields = _clean_fields(name, color, icon, description)
    category = ctx.category_repo.create(Category(**fields), user_id=user_id)
    logger.info("Category created", extra={"user_id": user_id, "category_id": category.id})
    return category


def update_category(
    ctx: AppContext,
    *,
    user_id: int,
    category_id: int,
    name: str,
    color: Optional[str] = None,
    icon: Optional[str] = None,
    description: Optional[str] = None,
) -> Category:
    category = _editable_category(ctx, user_id=user_id, category_id=category_id, action="modified")
    fields = _clean_fields(name, color, icon, description)
    for key, value in fields.items():
        setattr(category, key, value)
    return ctx.category_repo.update(category, user_id=user_id)


def find_or_create_general(ctx: AppContext, *, user_id: int) -> Category:
    """Return the user's General category, the shared one, or create one for the user."""

    own = ctx.category_repo.get_by_name(GENERAL_CATEGORY, user_id=user_id)
    if own is not None:
        return own
    return ctx.category_repo.create(
        Category(
            name=GENERAL_CATEGORY,
            description=GENERAL_DESCRIPTION,
            color=GENERAL_COLOR,
            icon=GENERAL_ICON,
            is_default=True,
        ),
        user_id=user_id,
    )


def _remove(ctx: AppContext, category: Category, *, user_id: int, general: Category) -> int:
    moved = ctx.transaction_repo.reassign_category(category.id, general.id, user_id=user_id)  # type: ignore[arg-type]
    limit = ctx.spending_limit_repo.find_active(category.id, user_id=user_id)
    if limit is not None and limit.id is not None:
        ctx.spending_limit_repo.deactivate(limit.id, user_id=user_id)
    ctx.category_repo.delete(category.id, user_id=user_id)  # type: ignore[arg-type]
    return moved


def delete_category(ctx: AppContext, *, user_id: int, category_id: int) -> int:
    """Delete an owned category; its transactions move to General.

    Returns the number of transactions reassigned. Limits are re-evaluated
    because the move can push General over its limit.
    """

    category = _editable_category(ctx, user_id=user_id, category_id=category_id, action="deleted")
    general = find_or_create_general(ctx, user_id=user_id)
    moved = _remove(ctx, category, user_id=user_id, general=general)
    logger.info(
        "Category deleted",
        extra={"user_id": user_id, "category_id": category_id, "moved": moved},
    )
    spending_limits.evaluate_after_write(ctx, user_id=user_id)
    return moved


def delete_categories(ctx: AppContext, *, user_id: int, category_ids: Iterable[int]) -> list[int]:
    """Bulk delete; defaults and missing ids are skipped. Returns ids actually deleted."""

    ids = list(category_ids)
    if not ids:
        raise ValidationError("No category IDs provided")

    general = find_or_create_general(ctx, user_id=user_id)
    deleted: list[int] = []
    for category_id in ids:
        category = ctx.category_repo.get_by_id(category_id, user_id=user_id)
        if category is None or category.user_id != user_id:
            logger.warning(
                "Skipping category during bulk delete: not found or not owned",
                extra={"user_id": user_id, "category_id": category_id},
            )
            continue
        if category.is_default:
            logger.info(
                "Skipping default category during bulk delete",
                extra={"user_id": user_id, "category_id": category_id},
            )
            continue
        _remove(ctx, category, user_id=user_id, general=general)
        deleted.append(category_id)
    if deleted:
        spending_limits.evaluate_after_write(ctx, user_id=user_id)
    return deleted


def seed_defaults(ctx: AppContext) -> int:
    """Create the shared default categories that do not exist yet."""

    created = 0
    for name, color, icon in DEFAULT_CATEGORIES:
        if ctx.category_repo.get_system_by_name(name) is not None:
            continue
        ctx.category_repo.create(
            Category(name=name, color=color, icon=icon, is_default=True),
            user_id=None,
        )
        created += 1
    logger.info("Default categories seeded", extra={"categories_created": created})
    return created
