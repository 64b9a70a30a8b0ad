"""Task gateway interface."""

from typing import Protocol

from taskdeck.core.models import Task, TaskInput, TaskUpdate


class PersistenceError(Exception):
    """Raised by any gateway operation that fails. Callers should not interpret it."""

    pass


class TaskGateway(Protocol):
    """Interface for task CRUD against any backend."""

    async def fetch_tasks(self, owner: str) -> list[Task]:
        """Fetch all tasks of a user with categories resolved."""
        ...

    async def create_task(self, owner: str, data: TaskInput) -> Task:
        ...

    async def update_task(self, task_id: str, changes: TaskUpdate) -> Task:
        ...

    async def delete_task(self, task_id: str) -> None:
        ...

    async def toggle_completion(self, task_id: str, completed: bool) -> Task:
        ...

    async def set_task_categories(self, task_id: str, category_ids: list[str]) -> Task:
        """Replace the task's category associations. Returns the resolved task."""
        ...
