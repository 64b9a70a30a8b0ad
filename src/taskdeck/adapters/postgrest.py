"""PostgREST adapter - HTTP client for task and category persistence."""

import asyncio
import logging
from datetime import datetime, timezone

import requests

from taskdeck.config import Config, Session, load_config
from taskdeck.core.models import (
    Category,
    CategoryInput,
    CategoryUpdate,
    Task,
    TaskInput,
    TaskUpdate,
)
from taskdeck.ports.task_gateway import PersistenceError

logger = logging.getLogger(__name__)

REST_PATH = "/rest/v1"
TASK_SELECT = "*,task_categories(category:categories(*))"


class AuthenticationError(Exception):
    """Raised when no usable session is available."""

    pass


class PostgrestGateway:
    """
    PostgREST (Supabase-style) adapter.

    Implements TaskGateway and CategoryGateway. Blocking HTTP calls run in
    a worker thread so callers can await them and gather them. No business
    logic and no retries - just I/O.
    """

    def __init__(
        self,
        config: Config | None = None,
        session: Session | None = None,
        timeout: int = 30,
    ):
        self.config = config or load_config()
        self.session = session or Session.load()
        self.timeout = timeout
        self._http = requests.Session()

    def _headers(self) -> dict[str, str]:
        if not self.session.access_token:
            raise AuthenticationError("No session. Run 'taskdeck login' first.")
        return {
            "apikey": self.config.api_key,
            "Authorization": f"Bearer {self.session.access_token}",
            "Prefer": "return=representation",
        }

    def _request(
        self,
        method: str,
        table: str,
        params: dict | None = None,
        json_data: dict | list | None = None,
    ) -> list[dict]:
        """Make authenticated request. Returns the JSON rows (empty for no content)."""
        if not self.config.api_url:
            raise PersistenceError("No API_URL configured")

        url = f"{self.config.api_url}{REST_PATH}/{table}"
        headers = self._headers()
        logger.debug(f"{method} {url} params={params}")
        try:
            resp = self._http.request(
                method,
                url,
                headers=headers,
                params=params,
                json=json_data,
                timeout=self.timeout,
            )
            resp.raise_for_status()
        except requests.RequestException as e:
            logger.error(f"{method} {table} failed: {e}")
            raise PersistenceError(f"{method} {table} failed: {e}") from e

        if not resp.content:
            return []
        try:
            data = resp.json()
        except ValueError as e:
            logger.error(f"{method} {table} returned invalid JSON: {e}")
            raise PersistenceError(f"{method} {table} returned invalid JSON") from e
        return data if isinstance(data, list) else [data]

    async def _call(self, *args, **kwargs) -> list[dict]:
        return await asyncio.to_thread(self._request, *args, **kwargs)

    @staticmethod
    def _single(rows: list[dict], action: str) -> dict:
        if not rows:
            raise PersistenceError(f"Failed to {action}")
        return rows[0]

    # ---- tasks ----

    async def fetch_tasks(self, owner: str) -> list[Task]:
        rows = await self._call(
            "GET",
            "tasks",
            params={"select": TASK_SELECT, "user_id": f"eq.{owner}", "order": "created_at.desc"},
        )
        return [Task.from_api(row) for row in rows]

    async def create_task(self, owner: str, data: TaskInput) -> Task:
        rows = await self._call(
            "POST",
            "tasks",
            params={"select": TASK_SELECT},
            json_data={"user_id": owner, **data.to_api()},
        )
        return Task.from_api(self._single(rows, "create task"))

    async def update_task(self, task_id: str, changes: TaskUpdate) -> Task:
        payload = {**changes.to_api(), "updated_at": datetime.now(timezone.utc).isoformat()}
        rows = await self._call(
            "PATCH",
            "tasks",
            params={"select": TASK_SELECT, "id": f"eq.{task_id}"},
            json_data=payload,
        )
        return Task.from_api(self._single(rows, "update task"))

    async def delete_task(self, task_id: str) -> None:
        await self._call("DELETE", "tasks", params={"id": f"eq.{task_id}"})

    async def toggle_completion(self, task_id: str, completed: bool) -> Task:
        return await self.update_task(task_id, TaskUpdate(completed=completed))

    async def set_task_categories(self, task_id: str, category_ids: list[str]) -> Task:
        await self._call("DELETE", "task_categories", params={"task_id": f"eq.{task_id}"})
        if category_ids:
            await self._call(
                "POST",
                "task_categories",
                json_data=[{"task_id": task_id, "category_id": cid} for cid in dict.fromkeys(category_ids)],
            )
        rows = await self._call("GET", "tasks", params={"select": TASK_SELECT, "id": f"eq.{task_id}"})
        return Task.from_api(self._single(rows, "load task"))

    # ---- categories ----

    async def fetch_categories(self, owner: str) -> list[Category]:
        rows = await self._call(
            "GET",
            "categories",
            params={"select": "*", "user_id": f"eq.{owner}", "order": "name.asc"},
        )
        return [Category.from_api(row) for row in rows]

    async def create_category(self, owner: str, data: CategoryInput) -> Category:
        rows = await self._call("POST", "categories", json_data={"user_id": owner, **data.to_api()})
        return Category.from_api(self._single(rows, "create category"))

    async def update_category(self, category_id: str, changes: CategoryUpdate) -> Category:
        rows = await self._call(
            "PATCH",
            "categories",
            params={"id": f"eq.{category_id}"},
            json_data=changes.to_api(),
        )
        return Category.from_api(self._single(rows, "update category"))

    async def delete_category(self, category_id: str) -> None:
        await self._call("DELETE", "task_categories", params={"category_id": f"eq.{category_id}"})
        await self._call("DELETE", "categories", params={"id": f"eq.{category_id}"})
