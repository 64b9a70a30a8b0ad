"""Pure task ranking - no I/O dependencies."""

import logging
import unicodedata
from datetime import date
from enum import Enum

from .models import PRIORITY_WEIGHTS, SortOption, Task, parse_date

logger = logging.getLogger(__name__)


class UrgencyLevel(str, Enum):
    """Display classification derived from deadline proximity."""

    ALERT = "alert"
    WARNING = "warning"
    NONE = "none"


def urgency_score(task: Task, as_of: date | None = None) -> int:
    """
    Numeric deadline pressure. Higher = more pressing.

    Overdue tasks score 100 plus the number of days overdue, with no cap.
    Otherwise the score falls in coarse buckets by days remaining.
    """
    days = task.days_until_deadline(as_of or date.today())
    if days is None:
        return 0
    if days < 0:
        return 100 + abs(days)
    if days <= 1:
        return 50
    if days <= 3:
        return 30
    if days <= 7:
        return 20
    if days <= 14:
        return 10
    return 5


def smart_score(task: Task, as_of: date | None = None) -> int:
    """Composite of urgency and priority used by the smart sort."""
    return urgency_score(task, as_of) * 2 + PRIORITY_WEIGHTS[task.priority] * 10


def _newest_first(task: Task) -> float:
    return -task.created_at.timestamp()


def _collation_key(title: str) -> tuple[str, str, str]:
    # accent/case-insensitive first, lowercase before uppercase last
    decomposed = unicodedata.normalize("NFKD", title)
    base = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return base.casefold(), title.casefold(), title.swapcase()


def _smart_sort(tasks: list[Task], as_of: date) -> list[Task]:
    return sorted(tasks, key=lambda t: (t.completed, -smart_score(t, as_of), _newest_first(t)))


def _sort_by_deadline(tasks: list[Task]) -> list[Task]:
    def sort_key(t: Task) -> tuple[bool, bool, date]:
        deadline = parse_date(t.deadline)
        return (t.completed, deadline is None, deadline or date.min)

    return sorted(tasks, key=sort_key)


def _sort_by_priority(tasks: list[Task]) -> list[Task]:
    return sorted(
        tasks, key=lambda t: (t.completed, -PRIORITY_WEIGHTS[t.priority], _newest_first(t))
    )


def _sort_by_created(tasks: list[Task]) -> list[Task]:
    return sorted(tasks, key=lambda t: (t.completed, _newest_first(t)))


def _sort_alphabetically(tasks: list[Task]) -> list[Task]:
    return sorted(tasks, key=lambda t: (t.completed, _collation_key(t.title)))


def sort_tasks(
    tasks: list[Task],
    mode: SortOption | str,
    as_of: date | None = None,
) -> list[Task]:
    """
    Order tasks for display.

    Incomplete tasks always precede completed ones; within each group the
    selected mode decides. An unrecognized mode leaves the order untouched.
    Returns a new list - the input is never mutated.
    """
    try:
        mode = SortOption(mode)
    except ValueError:
        logger.debug(f"Unknown sort mode {mode!r}, keeping input order")
        return list(tasks)

    as_of = as_of or date.today()
    match mode:
        case SortOption.SMART:
            return _smart_sort(tasks, as_of)
        case SortOption.DEADLINE:
            return _sort_by_deadline(tasks)
        case SortOption.PRIORITY:
            return _sort_by_priority(tasks)
        case SortOption.CREATED:
            return _sort_by_created(tasks)
        case SortOption.ALPHABETICAL:
            return _sort_alphabetically(tasks)


def urgency_label(task: Task, as_of: date | None = None) -> str | None:
    """Short deadline badge for an open task, or None."""
    if task.completed:
        return None
    days = task.days_until_deadline(as_of or date.today())
    if days is None:
        return None
    if days < 0:
        return "Overdue"
    if days == 0:
        return "Due Today"
    if days == 1:
        return "Due Tomorrow"
    if days <= 3:
        return "Due Soon"
    return None


def urgency_level(task: Task, as_of: date | None = None) -> UrgencyLevel:
    """Alert for overdue or due within a day, warning within three days."""
    if task.completed:
        return UrgencyLevel.NONE
    days = task.days_until_deadline(as_of or date.today())
    if days is None:
        return UrgencyLevel.NONE
    if days <= 1:
        return UrgencyLevel.ALERT
    if days <= 3:
        return UrgencyLevel.WARNING
    return UrgencyLevel.NONE
