"""Spending limit repository protocol."""

from __future__ import annotations

from typing import Optional, Protocol

from ...models.spending_limit import SpendingLimit


class SpendingLimitRepository(Protocol):
    """Repository for active spending limits."""

    def get_by_id(self, limit_id: int, *, user_id: int) -> Optional[SpendingLimit]:
        ...

    def find_active(self, category_id: Optional[int], *, user_id: int) -> Optional[SpendingLimit]:
        """Return the active limit for a category, or the global limit when ``None``."""
        ...

    def list_active(self, *, user_id: int) -> list[SpendingLimit]:
        ...

    def list_owner_ids(self) -> list[int]:
        ...

    def create(self, limit: SpendingLimit, *, user_id: int) -> SpendingLimit:
        ...

    def update(self, limit: SpendingLimit, *, user_id: int) -> SpendingLimit:
        ...

    def deactivate(self, limit_id: int, *, user_id: int) -> bool:
        ...
