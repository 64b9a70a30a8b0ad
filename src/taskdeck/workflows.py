"""Shared workflow layer between the CLI and any other front end.

Each function wires gateway and advisor calls around the pure core. Gateway
failures propagate unchanged; advisor calls never fail.
"""

import asyncio
import logging
from dataclasses import dataclass, field, replace
from datetime import date

from .adapters.llm_advisor import LLMAdvisor
from .adapters.llm_cli import LLMCLIService
from .adapters.json_file import JsonFileGateway
from .adapters.postgrest import PostgrestGateway
from .config import DATA_DIR, TASKDECK_HOME, Config, Session
from .core.filters import split_by_completion
from .core.models import (
    Category,
    Priority,
    SortOption,
    Task,
    TaskFilters,
    TaskInput,
    TaskUpdate,
)
from .core.sorting import sort_tasks
from .core.views import TaskView, assemble_view
from .ports.advisor import Advisor
from .ports.gateway import Gateway

logger = logging.getLogger(__name__)


def build_gateway(config: Config, session: Session, offline: bool = False) -> Gateway:
    """Pick the persistence backend: REST when configured, else the local file store."""
    if offline or not config.api_url:
        logger.debug(f"Using local store in {DATA_DIR}")
        return JsonFileGateway(DATA_DIR / "taskdeck.json")
    return PostgrestGateway(config=config, session=session)


def build_advisor(config: Config) -> LLMAdvisor:
    """Advisor backed by the configured LLM CLI, or an inert one if AI is off."""
    if not config.ai_enabled:
        return LLMAdvisor()
    llm = LLMCLIService(command=config.llm_command, cwd=TASKDECK_HOME, timeout=config.llm_timeout)
    if not llm.is_available():
        logger.debug(f"LLM command not found: {config.llm_command}")
        return LLMAdvisor()
    return LLMAdvisor(llm)


async def load_task_view(
    gateway: Gateway,
    owner: str,
    filters: TaskFilters,
    sort: SortOption | str = SortOption.SMART,
    as_of: date | None = None,
) -> TaskView:
    """Fetch tasks and categories in parallel, then assemble the view."""
    tasks, categories = await asyncio.gather(
        gateway.fetch_tasks(owner),
        gateway.fetch_categories(owner),
    )
    logger.debug(f"Loaded {len(tasks)} tasks and {len(categories)} categories for {owner}")
    return assemble_view(tasks, categories, filters, sort, as_of)


def resolve_category_ids(categories: list[Category], refs: list[str]) -> list[str]:
    """
    Map category references (ids or case-insensitive names) to ids.

    Raises ValueError naming the first reference that matches nothing.
    """
    by_id = {c.id: c.id for c in categories}
    by_name = {c.name.lower(): c.id for c in categories}
    ids = []
    for ref in refs:
        cid = by_id.get(ref) or by_name.get(ref.lower())
        if cid is None:
            raise ValueError(f"Unknown category: {ref}")
        ids.append(cid)
    return ids


async def create_task(
    gateway: Gateway,
    owner: str,
    data: TaskInput,
    category_ids: list[str] | None = None,
) -> Task:
    """Create a task, then attach categories once it exists."""
    task = await gateway.create_task(owner, data)
    logger.info(f"Created task {task.id}")
    if category_ids:
        task = await gateway.set_task_categories(task.id, category_ids)
    return task


async def update_task(
    gateway: Gateway,
    task_id: str,
    changes: TaskUpdate,
    category_ids: list[str] | None = None,
) -> Task:
    """
    Apply a partial update and optionally replace category associations.

    category_ids=None leaves associations alone; an empty list clears them.
    """
    task = None
    if not changes.is_empty():
        task = await gateway.update_task(task_id, changes)
    if category_ids is not None:
        task = await gateway.set_task_categories(task_id, category_ids)
    if task is None:
        raise ValueError("Nothing to update")
    return task


@dataclass
class Suggestions:
    """Advisor output for a piece of task text."""

    priority: Priority = Priority.MEDIUM
    deadline: date | None = None
    subtasks: list[str] = field(default_factory=list)


async def suggest_for_text(advisor: Advisor, text: str, as_of: date | None = None) -> Suggestions:
    """Ask for priority, deadline and subtasks concurrently."""
    priority, deadline, subtasks = await asyncio.gather(
        advisor.suggest_priority(text),
        advisor.suggest_deadline(text, as_of or date.today()),
        advisor.generate_subtasks(text),
    )
    return Suggestions(priority=priority, deadline=deadline, subtasks=subtasks)


async def apply_suggestions(
    advisor: Advisor,
    data: TaskInput,
    keep_priority: bool = False,
    as_of: date | None = None,
) -> TaskInput:
    """Fill in priority (unless kept) and a missing deadline from the advisor."""
    text = f"{data.title}\n{data.description}" if data.description else data.title
    priority, deadline = await asyncio.gather(
        advisor.suggest_priority(text),
        advisor.suggest_deadline(text, as_of or date.today()),
    )
    return replace(
        data,
        priority=data.priority if keep_priority else priority,
        deadline=data.deadline or deadline,
    )


async def generate_summary(
    gateway: Gateway,
    advisor: Advisor,
    owner: str,
    as_of: date | None = None,
) -> str:
    """Daily summary of open tasks, most pressing first. Empty if unavailable."""
    tasks = await gateway.fetch_tasks(owner)
    pending, _ = split_by_completion(sort_tasks(tasks, SortOption.SMART, as_of))
    if not pending:
        return ""
    return await advisor.generate_daily_summary(pending)
