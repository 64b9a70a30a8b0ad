"""In-memory gateway adapter - tasks, categories and their associations in dicts."""

import uuid
from dataclasses import replace
from datetime import datetime, timezone

from taskdeck.core.models import (
    Category,
    CategoryInput,
    CategoryUpdate,
    Priority,
    Task,
    TaskInput,
    TaskUpdate,
)
from taskdeck.ports.task_gateway import PersistenceError


def _now() -> datetime:
    return datetime.now(timezone.utc)


class InMemoryGateway:
    """
    In-memory store.

    Implements TaskGateway and CategoryGateway. Tasks are stored without
    categories; the association table is a set of (task_id, category_id)
    pairs and is joined on every read, as a relational backend would.
    """

    def __init__(self, tasks: list[Task] | None = None, categories: list[Category] | None = None):
        self._tasks: dict[str, Task] = {}
        self._categories: dict[str, Category] = {c.id: c for c in categories or []}
        self._links: set[tuple[str, str]] = set()
        for task in tasks or []:
            self._tasks[task.id] = replace(task, categories=())
            for category in task.categories:
                self._categories.setdefault(category.id, category)
                self._links.add((task.id, category.id))

    def _get_task(self, task_id: str) -> Task:
        try:
            return self._tasks[task_id]
        except KeyError:
            raise PersistenceError(f"Task {task_id} not found") from None

    def _get_category(self, category_id: str) -> Category:
        try:
            return self._categories[category_id]
        except KeyError:
            raise PersistenceError(f"Category {category_id} not found") from None

    def _resolve(self, task: Task) -> Task:
        categories = tuple(
            self._categories[cid]
            for tid, cid in sorted(self._links)
            if tid == task.id and self._categories[cid].owner == task.owner
        )
        return replace(task, categories=categories)

    # ---- tasks ----

    async def fetch_tasks(self, owner: str) -> list[Task]:
        tasks = [self._resolve(t) for t in self._tasks.values() if t.owner == owner]
        # newest first
        return sorted(tasks, key=lambda t: t.created_at, reverse=True)

    async def create_task(self, owner: str, data: TaskInput) -> Task:
        now = _now()
        task = Task(
            id=str(uuid.uuid4()),
            title=data.title,
            owner=owner,
            priority=Priority.parse(data.priority),
            description=data.description or None,
            scheduled_at=data.scheduled_at,
            deadline=data.deadline,
            created_at=now,
            updated_at=now,
        )
        self._tasks[task.id] = task
        return task

    async def update_task(self, task_id: str, changes: TaskUpdate) -> Task:
        task = replace(self._get_task(task_id), **changes.changes(), updated_at=_now())
        self._tasks[task_id] = task
        return self._resolve(task)

    async def delete_task(self, task_id: str) -> None:
        self._get_task(task_id)
        del self._tasks[task_id]
        self._links = {(tid, cid) for tid, cid in self._links if tid != task_id}

    async def toggle_completion(self, task_id: str, completed: bool) -> Task:
        return await self.update_task(task_id, TaskUpdate(completed=completed))

    async def set_task_categories(self, task_id: str, category_ids: list[str]) -> Task:
        task = self._get_task(task_id)
        for cid in category_ids:
            if self._get_category(cid).owner != task.owner:
                raise PersistenceError(f"Category {cid} belongs to another user")
        self._links = {(tid, cid) for tid, cid in self._links if tid != task_id}
        self._links.update((task_id, cid) for cid in category_ids)
        return self._resolve(task)

    # ---- categories ----

    async def fetch_categories(self, owner: str) -> list[Category]:
        return sorted((c for c in self._categories.values() if c.owner == owner), key=lambda c: c.name)

    async def create_category(self, owner: str, data: CategoryInput) -> Category:
        category = Category(
            id=str(uuid.uuid4()),
            name=data.name,
            owner=owner,
            color=data.color,
            icon=data.icon or None,
            created_at=_now(),
        )
        self._categories[category.id] = category
        return category

    async def update_category(self, category_id: str, changes: CategoryUpdate) -> Category:
        category = self._get_category(category_id)
        category = replace(category, **changes.to_api())
        self._categories[category_id] = category
        return category

    async def delete_category(self, category_id: str) -> None:
        self._get_category(category_id)
        del self._categories[category_id]
        self._links = {(tid, cid) for tid, cid in self._links if cid != category_id}
