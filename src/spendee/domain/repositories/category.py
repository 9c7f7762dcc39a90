"""Category repository protocol."""

from __future__ import annotations

from typing import Optional, Protocol

from ...models.category import Category


class CategoryRepository(Protocol):
    """Repository for managing category entities."""

    def get_by_id(self, category_id: int, *, user_id: int) -> Optional[Category]:
        """Retrieve a category visible to the user."""
        ...

    def get_by_name(self, name: str, *, user_id: int) -> Optional[Category]:
        ...

    def get_system_by_name(self, name: str) -> Optional[Category]:
        ...

    def list_all(self, *, user_id: int) -> list[Category]:
        """List the user's categories plus shared defaults."""
        ...

    def create(self, category: Category, *, user_id: Optional[int]) -> Category:
        ...

    def update(self, category: Category, *, user_id: int) -> Category:
        ...

    def delete(self, category_id: int, *, user_id: int) -> None:
        ...
