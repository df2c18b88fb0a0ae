"""Read-only domain records handed over by the persistence layer."""

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, Optional

from .recurring import RecurrenceSchedule, describe_schedule, schedule_to_dict
from .utils.datetime import ensure_aware, now_utc, to_calendar_date, to_iso_string


class Priority(Enum):
    """Task priority levels."""
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    URGENT = "URGENT"

    @classmethod
    def parse(cls, value: Any) -> "Priority":
        """Accept an enum member or a case-insensitive name."""
        if isinstance(value, cls):
            return value
        return cls(str(value).strip().upper())


@dataclass
class Category:
    """Task category as listed for the requesting user."""

    id: str
    name: str
    color: str = "#3B82F6"
    task_count: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "color": self.color,
            "taskCount": self.task_count,
        }


@dataclass
class Task:
    """A single task snapshot.

    ``updated_at`` stands in for the completion time: the tracker stores no
    dedicated completion timestamp, so the calendar date of the last
    modification of a completed task is its completion signal.
    """

    id: str
    title: str = ""
    completed: bool = False
    priority: Priority = Priority.MEDIUM
    due_date: Optional[date] = None
    category_id: Optional[str] = None
    created_at: datetime = field(default_factory=now_utc)
    updated_at: datetime = field(default_factory=now_utc)

    def __post_init__(self):
        self.priority = Priority.parse(self.priority)
        self.due_date = to_calendar_date(self.due_date)
        self.created_at = ensure_aware(self.created_at)
        self.updated_at = ensure_aware(self.updated_at)

    @property
    def completion_signal_date(self) -> date:
        """Calendar date used by the productive-day and streak calculations."""
        return to_calendar_date(self.updated_at)

    @property
    def created_date(self) -> date:
        return to_calendar_date(self.created_at)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the camelCase shape used by the persistence layer."""
        return {
            "id": self.id,
            "title": self.title,
            "completed": self.completed,
            "priority": self.priority.value,
            "dueDate": self.due_date.isoformat() if self.due_date else None,
            "categoryId": self.category_id,
            "createdAt": to_iso_string(self.created_at),
            "updatedAt": to_iso_string(self.updated_at),
        }


@dataclass
class Routine:
    """A recurring task template.

    The schedule is a validated ``RecurrenceSchedule``. Routines are only
    counted by the reports; no dated occurrences are generated from them.
    """

    id: str
    title: str
    schedule: RecurrenceSchedule
    is_active: bool = True
    priority: Priority = Priority.MEDIUM
    category_id: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    created_at: datetime = field(default_factory=now_utc)

    def __post_init__(self):
        self.priority = Priority.parse(self.priority)
        self.start_date = to_calendar_date(self.start_date)
        self.end_date = to_calendar_date(self.end_date)
        self.created_at = ensure_aware(self.created_at)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "priority": self.priority.value,
            "categoryId": self.category_id,
            "schedule": schedule_to_dict(self.schedule),
            "description": describe_schedule(self.schedule),
            "isActive": self.is_active,
            "startDate": self.start_date.isoformat() if self.start_date else None,
            "endDate": self.end_date.isoformat() if self.end_date else None,
            "createdAt": to_iso_string(self.created_at),
        }
