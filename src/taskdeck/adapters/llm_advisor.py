"""LLM-backed advisor - best-effort suggestions that never raise."""

import asyncio
import logging
from datetime import date

from taskdeck.core.advice import (
    deadline_prompt,
    parse_deadline,
    parse_priority,
    parse_subtasks,
    priority_prompt,
    subtasks_prompt,
    summary_prompt,
)
from taskdeck.core.models import Priority, Task
from taskdeck.ports.llm_service import LLMService

logger = logging.getLogger(__name__)


class LLMAdvisor:
    """
    Implements Advisor protocol on top of an LLMService.

    With no service configured every call returns its default at once.
    Any failure of the service is logged and replaced by the default.
    """

    def __init__(self, llm: LLMService | None = None):
        self.llm = llm

    @property
    def is_configured(self) -> bool:
        return self.llm is not None

    async def _ask(self, purpose: str, build_prompt, *args) -> str | None:
        if self.llm is None:
            return None
        try:
            prompt = build_prompt(*args)
            return await asyncio.to_thread(self.llm.generate, prompt)
        except Exception as e:
            logger.warning(f"Error generating {purpose}: {e}")
            return None

    async def suggest_priority(self, text: str) -> Priority:
        raw = await self._ask("priority suggestion", priority_prompt, text)
        return parse_priority(raw) if raw else Priority.MEDIUM

    async def suggest_deadline(self, text: str, as_of: date | None = None) -> date | None:
        raw = await self._ask("deadline suggestion", deadline_prompt, text, as_of or date.today())
        return parse_deadline(raw) if raw else None

    async def generate_subtasks(self, text: str) -> list[str]:
        raw = await self._ask("subtasks", subtasks_prompt, text)
        return parse_subtasks(raw) if raw else []

    async def generate_daily_summary(self, tasks: list[Task]) -> str:
        raw = await self._ask("daily summary", summary_prompt, tasks)
        return raw.strip() if raw else ""
