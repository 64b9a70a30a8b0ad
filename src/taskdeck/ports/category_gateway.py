"""Category gateway interface."""

from typing import Protocol

from taskdeck.core.models import Category, CategoryInput, CategoryUpdate


class CategoryGateway(Protocol):
    """Interface for category CRUD against any backend."""

    async def fetch_categories(self, owner: str) -> list[Category]:
        ...

    async def create_category(self, owner: str, data: CategoryInput) -> Category:
        ...

    async def update_category(self, category_id: str, changes: CategoryUpdate) -> Category:
        ...

    async def delete_category(self, category_id: str) -> None:
        """Delete a category and every association that references it."""
        ...
