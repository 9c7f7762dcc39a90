"""SQLModel implementation of Category repository."""

from __future__ import annotations

from typing import Optional

from sqlalchemy import or_
from sqlmodel import select

from ...models.category import Category
from ..database import SessionFactory


def _visible_to(user_id: int):
    return or_(Category.user_id == user_id, Category.user_id.is_(None))  # type: ignore[union-attr]


class SQLModelCategoryRepository:
    """SQLModel-based category repository implementation.

    A user sees their own categories plus the shared system defaults
    (rows with no owner).
    """

    def __init__(self, session_factory: SessionFactory):
        """Initialize with a session factory."""
        self.session_factory = session_factory

    def get_by_id(self, category_id: int, *, user_id: int) -> Optional[Category]:
        """Retrieve a category visible to the user."""
        with self.session_factory() as session:
            obj = session.exec(
                select(Category).where(Category.id == category_id, _visible_to(user_id))
            ).first()
            if obj:
                session.expunge(obj)
            return obj

    def get_by_name(self, name: str, *, user_id: int) -> Optional[Category]:
        """Retrieve a visible category by exact name, preferring the user's own row."""
        with self.session_factory() as session:
            rows = list(
                session.exec(
                    select(Category).where(Category.name == name, _visible_to(user_id))
                ).all()
            )
            session.expunge_all()
        owned = [row for row in rows if row.user_id == user_id]
        if owned:
            return owned[0]
        return rows[0] if rows else None

    def get_system_by_name(self, name: str) -> Optional[Category]:
        """Retrieve a shared default category by name."""
        with self.session_factory() as session:
            obj = session.exec(
                select(Category).where(Category.name == name, Category.user_id.is_(None))  # type: ignore[union-attr]
            ).first()
            if obj:
                session.expunge(obj)
            return obj

    def list_all(self, *, user_id: int) -> list[Category]:
        """List the user's categories together with the system defaults."""
        with self.session_factory() as session:
            statement = (
                select(Category)
                .where(_visible_to(user_id))
                .order_by(Category.name)  # type: ignore
            )
            rows = list(session.exec(statement).all())
            session.expunge_all()
            return rows

    def create(self, category: Category, *, user_id: Optional[int]) -> Category:
        """Create a new category; ``user_id=None`` creates a system default."""
        with self.session_factory() as session:
            category.user_id = user_id
            session.add(category)
            session.commit()
            session.refresh(category)
            session.expunge(category)
            return category

    def update(self, category: Category, *, user_id: int) -> Category:
        """Update a category owned by the user."""
        with self.session_factory() as session:
            category.user_id = user_id
            merged = session.merge(category)
            session.commit()
            session.refresh(merged)
            session.expunge(merged)
            return merged

    def delete(self, category_id: int, *, user_id: int) -> None:
        """Delete a category owned by the user."""
        with self.session_factory() as session:
            category = session.exec(
                select(Category).where(Category.id == category_id, Category.user_id == user_id)
            ).first()
            if category:
                session.delete(category)
                session.commit()
