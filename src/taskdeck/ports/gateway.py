"""Combined persistence interface."""

from typing import Protocol

from .category_gateway import CategoryGateway
from .task_gateway import TaskGateway


class Gateway(TaskGateway, CategoryGateway, Protocol):
    """A backend serving both tasks and categories."""
