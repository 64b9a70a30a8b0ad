"""Functional core - pure business logic with no I/O."""

from .models import (
    Category,
    CategoryInput,
    CategoryUpdate,
    DateRange,
    Priority,
    SortOption,
    Task,
    TaskFilters,
    TaskInput,
    TaskUpdate,
)
from .filters import filter_tasks, has_active_filters, count_active_filters, split_by_completion
from .sorting import UrgencyLevel, sort_tasks, smart_score, urgency_score, urgency_label, urgency_level
from .stats import TaskStats, compute_stats
from .views import TaskView, assemble_view, format_task_line

__all__ = [
    # Model
    "Category",
    "CategoryInput",
    "CategoryUpdate",
    "DateRange",
    "Priority",
    "SortOption",
    "Task",
    "TaskFilters",
    "TaskInput",
    "TaskUpdate",
    # Filtering
    "filter_tasks",
    "has_active_filters",
    "count_active_filters",
    "split_by_completion",
    # Sorting
    "UrgencyLevel",
    "sort_tasks",
    "smart_score",
    "urgency_score",
    "urgency_label",
    "urgency_level",
    # Stats and views
    "TaskStats",
    "compute_stats",
    "TaskView",
    "assemble_view",
    "format_task_line",
]
