"""File-based gateway adapter - the in-memory store persisted as one JSON file."""

import json
import logging
from pathlib import Path

from taskdeck.core.models import Category, Task
from taskdeck.ports.task_gateway import PersistenceError

from .memory import InMemoryGateway

logger = logging.getLogger(__name__)


class JsonFileGateway(InMemoryGateway):
    """
    Local JSON storage for offline use.

    Implements TaskGateway and CategoryGateway. The whole store is rewritten
    through a temporary file after every mutation. If the write fails, the
    mutation is undone in memory too, so memory and file never disagree.
    """

    def __init__(self, path: Path | str):
        super().__init__()
        self.path = Path(path).expanduser()
        self._load()

    def _load(self) -> None:
        if not self.path.exists():
            return
        try:
            data = json.loads(self.path.read_text())
            categories = [Category.from_api(c) for c in data.get("categories", [])]
            tasks = [Task.from_api(t) for t in data.get("tasks", [])]
            links = {(link["task_id"], link["category_id"]) for link in data.get("task_categories", [])}
        except (json.JSONDecodeError, AttributeError, KeyError, TypeError) as e:
            raise PersistenceError(f"Corrupt store {self.path}: {e}") from e

        self._categories = {c.id: c for c in categories}
        self._tasks = {t.id: t for t in tasks}
        self._links = {
            (tid, cid) for tid, cid in links if tid in self._tasks and cid in self._categories
        }
        logger.debug(f"Loaded {len(self._tasks)} tasks from {self.path}")

    def _save(self) -> None:
        data = {
            "tasks": [t.to_api() for t in self._tasks.values()],
            "categories": [c.to_api() for c in self._categories.values()],
            "task_categories": [
                {"task_id": tid, "category_id": cid} for tid, cid in sorted(self._links)
            ],
        }
        tmp = self.path.with_name(self.path.name + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp.write_text(json.dumps(data, indent=2))
            tmp.replace(self.path)
        except OSError as e:
            raise PersistenceError(f"Cannot write {self.path}: {e}") from e

    async def _commit(self, operation):
        """Run a store mutation and persist it, restoring the previous state if either fails."""
        snapshot = (dict(self._tasks), dict(self._categories), set(self._links))
        try:
            result = await operation
            self._save()
        except PersistenceError:
            self._tasks, self._categories, self._links = snapshot
            raise
        return result

    async def create_task(self, owner, data):
        return await self._commit(super().create_task(owner, data))

    async def update_task(self, task_id, changes):
        return await self._commit(super().update_task(task_id, changes))

    async def delete_task(self, task_id):
        await self._commit(super().delete_task(task_id))

    async def set_task_categories(self, task_id, category_ids):
        return await self._commit(super().set_task_categories(task_id, category_ids))

    async def create_category(self, owner, data):
        return await self._commit(super().create_category(owner, data))

    async def update_category(self, category_id, changes):
        return await self._commit(super().update_category(category_id, changes))

    async def delete_category(self, category_id):
        await self._commit(super().delete_category(category_id))
