"""Prompt building and response parsing for AI suggestions - no I/O."""

import json
import re
from datetime import date

from .models import Priority, Task, parse_date

_ISO_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_CODE_FENCE_OPEN = re.compile(r"^```(?:json)?\s*")
_CODE_FENCE_CLOSE = re.compile(r"\s*```$")
_BULLET = re.compile(r"^(?:[-*•]|\d+[.)])\s*")


def priority_prompt(text: str) -> str:
    return (
        "You are a task management assistant. Analyze the following task description "
        "and suggest a priority level (low, medium, high). Strictly return only one "
        'word: "low", "medium", or "high".\n\n'
        f"Task: {text}"
    )


def parse_priority(raw: str) -> Priority:
    """Accept only an exact one-word answer; anything else is MEDIUM."""
    answer = raw.strip().lower()
    try:
        return Priority(answer)
    except ValueError:
        return Priority.MEDIUM


def deadline_prompt(text: str, as_of: date) -> str:
    return (
        "Analyze the following task description and extract an implied deadline if "
        "present. Return the date in YYYY-MM-DD format. If no deadline is implied, "
        'strictly return the string "null".\n\n'
        f"Current Date: {as_of.isoformat()}\n"
        f"Task: {text}"
    )


def parse_deadline(raw: str) -> date | None:
    answer = raw.strip()
    if not answer or answer == "null" or not _ISO_DATE.match(answer):
        return None
    try:
        return date.fromisoformat(answer)
    except ValueError:
        return None


def subtasks_prompt(text: str) -> str:
    return (
        "Break down the following task into 3-5 actionable subtasks. Return them as "
        "a valid JSON array of strings. Do not include markdown formatting like ```json.\n\n"
        f"Task: {text}"
    )


def parse_subtasks(raw: str) -> list[str]:
    """
    Parse a subtask list.

    Prefers a JSON array of strings. Falls back to one subtask per
    non-empty line with bullet markers stripped.
    """
    content = _CODE_FENCE_CLOSE.sub("", _CODE_FENCE_OPEN.sub("", raw.strip()))
    if not content:
        return []

    try:
        parsed = json.loads(content)
    except json.JSONDecodeError:
        lines = (_BULLET.sub("", line.strip()).strip() for line in content.splitlines())
        return [line for line in lines if line]

    if isinstance(parsed, list):
        return [str(item).strip() for item in parsed if str(item).strip()]
    return []


def _due(task: Task) -> str:
    deadline = parse_date(task.deadline)
    return deadline.isoformat() if deadline else "None"


def summary_prompt(tasks: list[Task]) -> str:
    task_list = "\n".join(
        f"- {t.title} (Priority: {t.priority.value}, Due: {_due(t)})" for t in tasks
    )
    return (
        "You are a helpful assistant. Provide an encouraging daily summary for the "
        "user based on their tasks. Highlight high priority items and immediate "
        "deadlines. Keep it brief (2-3 sentences).\n\n"
        f"Tasks:\n{task_list}"
    )
