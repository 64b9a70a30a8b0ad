"""Task domain model - no I/O dependencies."""

import logging
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from enum import Enum

logger = logging.getLogger(__name__)

DEFAULT_CATEGORY_COLOR = "#3b82f6"


class Priority(str, Enum):
    """Task priority, ordered low < medium < high."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @property
    def weight(self) -> int:
        return PRIORITY_WEIGHTS[self]

    @classmethod
    def parse(cls, value: "str | Priority | None") -> "Priority":
        """Lenient parse. Unknown or missing values become MEDIUM."""
        if isinstance(value, Priority):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return cls.MEDIUM


PRIORITY_WEIGHTS = {
    Priority.HIGH: 3,
    Priority.MEDIUM: 2,
    Priority.LOW: 1,
}


class SortOption(str, Enum):
    """Ranking strategy for a task view."""

    SMART = "smart"
    DEADLINE = "deadline"
    PRIORITY = "priority"
    CREATED = "created"
    ALPHABETICAL = "alphabetical"

    @property
    def label(self) -> str:
        labels = {
            SortOption.SMART: "Smart Sort",
            SortOption.DEADLINE: "Deadline",
            SortOption.PRIORITY: "Priority",
            SortOption.CREATED: "Created",
            SortOption.ALPHABETICAL: "A-Z",
        }
        return labels[self]

    @property
    def description(self) -> str:
        descriptions = {
            SortOption.SMART: "Urgency + Priority + Time",
            SortOption.DEADLINE: "Earliest deadline first",
            SortOption.PRIORITY: "High to low priority",
            SortOption.CREATED: "Newest first",
            SortOption.ALPHABETICAL: "Alphabetical order",
        }
        return descriptions[self]


def parse_date(value) -> date | None:
    """
    Coerce a date-ish value to a date.

    Accepts date, datetime or an ISO string ("2024-01-05" or a full
    timestamp). Anything else, including malformed strings, yields None.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str) and value.strip():
        try:
            return date.fromisoformat(value.strip()[:10])
        except ValueError:
            logger.debug(f"Ignoring malformed date: {value!r}")
    return None


def parse_datetime(value) -> datetime | None:
    """Coerce an ISO timestamp to a datetime. Malformed values yield None."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value
    if isinstance(value, str) and value.strip():
        raw = value.strip()
        if raw.endswith("Z"):
            raw = raw[:-1] + "+00:00"
        try:
            return datetime.fromisoformat(raw)
        except ValueError:
            logger.debug(f"Ignoring malformed timestamp: {value!r}")
    return None


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class Category:
    """A user-defined label attached to tasks."""

    id: str
    name: str
    owner: str = ""
    color: str = DEFAULT_CATEGORY_COLOR
    icon: str | None = None
    created_at: datetime | None = None

    @classmethod
    def from_api(cls, data: dict) -> "Category":
        """Create Category from a REST record."""
        return cls(
            id=str(data["id"]),
            name=data["name"],
            owner=str(data.get("user_id") or ""),
            color=data.get("color") or DEFAULT_CATEGORY_COLOR,
            icon=data.get("icon") or None,
            created_at=parse_datetime(data.get("created_at")),
        )

    def to_api(self) -> dict:
        return {
            "id": self.id,
            "user_id": self.owner,
            "name": self.name,
            "color": self.color,
            "icon": self.icon,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }


@dataclass(frozen=True)
class Task:
    """
    A to-do item as seen by the filter and sort engines.

    Instances are point-in-time projections handed out by a gateway.
    `categories` is resolved by the gateway from the association table.
    """

    id: str
    title: str
    owner: str = ""
    priority: Priority = Priority.MEDIUM
    description: str | None = None
    scheduled_at: datetime | None = None
    deadline: date | None = None
    completed: bool = False
    created_at: datetime = field(default_factory=_utcnow)
    updated_at: datetime = field(default_factory=_utcnow)
    categories: tuple[Category, ...] = ()

    @property
    def category_ids(self) -> set[str]:
        return {c.id for c in self.categories}

    def days_until_deadline(self, as_of: date | None = None) -> int | None:
        """Whole days until the deadline (negative if overdue)."""
        deadline = parse_date(self.deadline)
        if deadline is None:
            return None
        as_of = as_of or date.today()
        return (deadline - as_of).days

    def is_overdue(self, as_of: date | None = None) -> bool:
        days = self.days_until_deadline(as_of)
        return days is not None and days < 0

    @classmethod
    def from_api(cls, data: dict) -> "Task":
        """
        Create Task from a REST record.

        Resolved categories may arrive either as a flat "categories" list or
        as the embedded association rows of a join ("task_categories").
        """
        categories = [Category.from_api(c) for c in data.get("categories") or []]
        for link in data.get("task_categories") or []:
            if link.get("category"):
                categories.append(Category.from_api(link["category"]))

        created_at = parse_datetime(data.get("created_at")) or _utcnow()
        return cls(
            id=str(data["id"]),
            title=data["title"],
            owner=str(data.get("user_id") or ""),
            priority=Priority.parse(data.get("priority")),
            description=data.get("description") or None,
            scheduled_at=parse_datetime(data.get("date_time")),
            deadline=parse_date(data.get("deadline")),
            completed=bool(data.get("completed", False)),
            created_at=created_at,
            updated_at=parse_datetime(data.get("updated_at")) or created_at,
            categories=tuple(categories),
        )

    def to_api(self) -> dict:
        return {
            "id": self.id,
            "user_id": self.owner,
            "title": self.title,
            "description": self.description,
            "date_time": self.scheduled_at.isoformat() if self.scheduled_at else None,
            "deadline": self.deadline.isoformat() if self.deadline else None,
            "priority": self.priority.value,
            "completed": self.completed,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
            "categories": [c.to_api() for c in self.categories],
        }


@dataclass
class DateRange:
    """Inclusive deadline window. ISO strings are accepted for either end."""

    start: date | str
    end: date | str

    def contains(self, day) -> bool:
        """True if `day` parses and falls within [start, end]."""
        start, end, day = parse_date(self.start), parse_date(self.end), parse_date(day)
        if start is None or end is None or day is None:
            return False
        return start <= day <= end


@dataclass
class TaskFilters:
    """Filter criteria. Non-empty criteria combine with logical AND."""

    search: str | None = None
    priorities: set[Priority] = field(default_factory=set)
    categories: set[str] = field(default_factory=set)
    date_range: DateRange | None = None


@dataclass
class TaskInput:
    """Payload for creating a task."""

    title: str
    description: str | None = None
    scheduled_at: datetime | None = None
    deadline: date | None = None
    priority: Priority = Priority.MEDIUM

    def to_api(self) -> dict:
        return {
            "title": self.title,
            "description": self.description or None,
            "date_time": self.scheduled_at.isoformat() if self.scheduled_at else None,
            "deadline": self.deadline.isoformat() if self.deadline else None,
            "priority": Priority.parse(self.priority).value,
        }


_UNSET = object()


@dataclass
class TaskUpdate:
    """
    Partial update for a task.

    Fields left at their sentinel default are not sent. Passing None (or an
    empty string for text fields) clears an optional field.
    """

    title: str = _UNSET
    description: str | None = _UNSET
    scheduled_at: datetime | None = _UNSET
    deadline: date | None = _UNSET
    priority: Priority = _UNSET
    completed: bool = _UNSET

    def changes(self) -> dict:
        """Explicitly set fields as Task attribute names, with clears as None."""
        data = {}
        for name in ("title", "description", "scheduled_at", "deadline", "priority", "completed"):
            value = getattr(self, name)
            if value is _UNSET:
                continue
            if name == "priority":
                value = Priority.parse(value)
            elif name == "completed":
                value = bool(value)
            elif name in ("description", "scheduled_at", "deadline") and value == "":
                value = None
            data[name] = value
        return data

    def is_empty(self) -> bool:
        return not self.changes()

    def to_api(self) -> dict:
        data = self.changes()
        if "scheduled_at" in data:
            scheduled_at = data.pop("scheduled_at")
            data["date_time"] = scheduled_at.isoformat() if scheduled_at else None
        if "deadline" in data:
            data["deadline"] = data["deadline"].isoformat() if data["deadline"] else None
        if "priority" in data:
            data["priority"] = data["priority"].value
        return data


@dataclass
class CategoryInput:
    """Payload for creating a category."""

    name: str
    color: str = DEFAULT_CATEGORY_COLOR
    icon: str | None = None

    def to_api(self) -> dict:
        return {"name": self.name, "color": self.color, "icon": self.icon or None}


@dataclass
class CategoryUpdate:
    """Partial update for a category. None means "leave unchanged"."""

    name: str | None = None
    color: str | None = None
    icon: str | None = None

    def to_api(self) -> dict:
        data = {}
        if self.name is not None:
            data["name"] = self.name
        if self.color is not None:
            data["color"] = self.color
        if self.icon is not None:
            data["icon"] = self.icon or None
        return data
