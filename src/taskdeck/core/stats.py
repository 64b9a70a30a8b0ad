"""Task collection statistics - no I/O dependencies."""

from dataclasses import dataclass
from datetime import date

from .models import Task


@dataclass
class TaskStats:
    total: int
    completed: int
    pending: int
    overdue: int
    completion_rate: int

    def format(self) -> str:
        return (
            f"{self.total} tasks · {self.completed} completed ({self.completion_rate}%) · "
            f"{self.pending} pending · {self.overdue} overdue"
        )


def compute_stats(tasks: list[Task], as_of: date | None = None) -> TaskStats:
    """
    Summarize a task collection.

    Overdue counts only incomplete tasks whose deadline is before as_of.
    Completion rate is a whole percentage, rounded half up.
    """
    as_of = as_of or date.today()
    total = len(tasks)
    completed = sum(1 for t in tasks if t.completed)
    overdue = sum(1 for t in tasks if not t.completed and t.is_overdue(as_of))
    rate = (completed * 200 + total) // (total * 2) if total else 0
    return TaskStats(
        total=total,
        completed=completed,
        pending=total - completed,
        overdue=overdue,
        completion_rate=rate,
    )
