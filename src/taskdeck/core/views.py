"""Pure task view assembly - no I/O dependencies."""

from dataclasses import dataclass
from datetime import date

from .filters import count_active_filters, filter_tasks, split_by_completion
from .models import Category, SortOption, Task, TaskFilters, parse_date
from .sorting import sort_tasks, urgency_label
from .stats import TaskStats, compute_stats


@dataclass
class TaskView:
    """A filtered, ordered task list ready for rendering."""

    tasks: list[Task]
    pending: list[Task]
    completed: list[Task]
    categories: list[Category]
    stats: TaskStats
    sort: SortOption | str
    active_filter_count: int
    as_of: date


def assemble_view(
    tasks: list[Task],
    categories: list[Category],
    filters: TaskFilters,
    sort: SortOption | str = SortOption.SMART,
    as_of: date | None = None,
) -> TaskView:
    """
    Filter, then sort, then split by completion.

    Stats describe the whole collection, not just the filtered subset.
    Pure function - no I/O.
    """
    as_of = as_of or date.today()
    ordered = sort_tasks(filter_tasks(tasks, filters), sort, as_of)
    pending, completed = split_by_completion(ordered)
    return TaskView(
        tasks=ordered,
        pending=pending,
        completed=completed,
        categories=list(categories),
        stats=compute_stats(tasks, as_of),
        sort=sort,
        active_filter_count=count_active_filters(filters),
        as_of=as_of,
    )


def format_task_line(task: Task, as_of: date | None = None) -> str:
    """Format a single task for text display."""
    as_of = as_of or date.today()
    mark = "x" if task.completed else " "
    parts = [f"[{mark}] {task.title}", f"({task.priority.value}"]
    deadline = parse_date(task.deadline)
    if deadline:
        parts[-1] += f", due {deadline.isoformat()}"
    parts[-1] += ")"

    label = urgency_label(task, as_of)
    if label:
        parts.append(f"!{label}")
    if task.categories:
        parts.append(" ".join(f"#{c.name}" for c in sorted(task.categories, key=lambda c: c.name)))
    return " ".join(parts)
