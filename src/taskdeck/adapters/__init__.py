"""Adapters - I/O implementations of ports."""

from .postgrest import PostgrestGateway, AuthenticationError
from .memory import InMemoryGateway
from .json_file import JsonFileGateway
from .llm_cli import LLMCLIService
from .llm_advisor import LLMAdvisor

__all__ = [
    "PostgrestGateway",
    "AuthenticationError",
    "InMemoryGateway",
    "JsonFileGateway",
    "LLMCLIService",
    "LLMAdvisor",
]
