"""Advisory service interface."""

from datetime import date
from typing import Protocol

from taskdeck.core.models import Priority, Task


class Advisor(Protocol):
    """
    Best-effort AI suggestions.

    Implementations never raise: on failure they return MEDIUM, None,
    an empty list or an empty string respectively.
    """

    async def suggest_priority(self, text: str) -> Priority:
        ...

    async def suggest_deadline(self, text: str, as_of: date | None = None) -> date | None:
        ...

    async def generate_subtasks(self, text: str) -> list[str]:
        ...

    async def generate_daily_summary(self, tasks: list[Task]) -> str:
        ...
