"""Pure task filtering - no I/O dependencies."""

from .models import Task, TaskFilters


def _search_term(filters: TaskFilters) -> str | None:
    if not filters.search or not filters.search.strip():
        return None
    return filters.search.strip().lower()


def _matches_search(task: Task, term: str) -> bool:
    if term in task.title.lower():
        return True
    return bool(task.description) and term in task.description.lower()


def filter_tasks(tasks: list[Task], filters: TaskFilters) -> list[Task]:
    """
    Reduce tasks to those matching every active criterion.

    Input order is preserved. A task missing the field an active criterion
    compares against (e.g. no deadline while a date range is set) never
    matches. Pure function - no I/O, never raises on malformed dates.
    """
    term = _search_term(filters)
    filtered = list(tasks)

    if term:
        filtered = [t for t in filtered if _matches_search(t, term)]

    if filters.priorities:
        filtered = [t for t in filtered if t.priority in filters.priorities]

    if filters.categories:
        wanted = set(filters.categories)
        filtered = [t for t in filtered if t.category_ids & wanted]

    if filters.date_range is not None:
        filtered = [
            t for t in filtered if t.deadline is not None and filters.date_range.contains(t.deadline)
        ]

    return filtered


def count_active_filters(filters: TaskFilters) -> int:
    """Number of criteria that would change the output of filter_tasks."""
    count = 0
    if _search_term(filters):
        count += 1
    if filters.priorities:
        count += 1
    if filters.categories:
        count += 1
    if filters.date_range is not None:
        count += 1
    return count


def has_active_filters(filters: TaskFilters) -> bool:
    return count_active_filters(filters) > 0


def split_by_completion(tasks: list[Task]) -> tuple[list[Task], list[Task]]:
    """
    Split tasks into pending and completed, preserving order.

    Returns: (pending, completed)
    """
    pending = [t for t in tasks if not t.completed]
    completed = [t for t in tasks if t.completed]
    return pending, completed
