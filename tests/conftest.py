"""Shared fixtures."""

from datetime import date, datetime, timedelta, timezone

import pytest

from taskdeck.core.models import Category, Priority, Task

BASE_TIME = datetime(2025, 1, 1, 9, 0, tzinfo=timezone.utc)


@pytest.fixture
def today():
    return date(2025, 1, 15)


@pytest.fixture
def make_task():
    """Factory for tasks. `age` is hours after BASE_TIME (higher = newer)."""

    def factory(
        id: str,
        title: str | None = None,
        priority: Priority = Priority.MEDIUM,
        deadline: date | None = None,
        completed: bool = False,
        age: int = 0,
        **kwargs,
    ) -> Task:
        created = BASE_TIME + timedelta(hours=age)
        return Task(
            id=id,
            title=title or f"Task {id}",
            owner=kwargs.pop("owner", "u1"),
            priority=priority,
            deadline=deadline,
            completed=completed,
            created_at=created,
            updated_at=created,
            **kwargs,
        )

    return factory


@pytest.fixture
def work():
    return Category(id="c-work", name="Work", owner="u1", color="#ff0000")


@pytest.fixture
def home():
    return Category(id="c-home", name="Home", owner="u1", color="#00ff00", icon="🏠")
