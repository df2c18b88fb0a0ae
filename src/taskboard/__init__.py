"""taskboard - due-date classification, streaks and reports for a task tracker."""

__version__ = "0.1.0"
__author__ = "taskboard team"

from .task import (
    Task,
    Category,
    Routine,
    Priority,
)
from .recurring import (
    RecurrenceType,
    Weekday,
    ScheduleValidationError,
    validate_schedule,
    describe_schedule,
)

__all__ = [
    "Task",
    "Category",
    "Routine",
    "Priority",
    "RecurrenceType",
    "Weekday",
    "ScheduleValidationError",
    "validate_schedule",
    "describe_schedule",
    "__version__",
]
