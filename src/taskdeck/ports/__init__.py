"""Ports - interfaces/protocols for external dependencies."""

from .task_gateway import TaskGateway, PersistenceError
from .category_gateway import CategoryGateway
from .gateway import Gateway
from .advisor import Advisor
from .llm_service import LLMService

__all__ = [
    "TaskGateway",
    "PersistenceError",
    "CategoryGateway",
    "Gateway",
    "Advisor",
    "LLMService",
]
