"""Temporal status classification for tasks.

A task's due date is compared with "today" on calendar dates only, so a task
due later today is never overdue and the result does not depend on the time
of day the check runs.
"""

from enum import Enum
from math import ceil
from typing import Any, Iterable, List, Optional

from ..task import Priority
from ..utils.datetime import DateLike, days_between, to_calendar_date


DUE_SOON_DAYS = 3

DEFAULT_COLOR = "text-gray-700 bg-gray-100 border-gray-200"


class TaskStatus(Enum):
    """Status buckets, in display order"""
    COMPLETED = "completed"
    OVERDUE = "overdue"
    DUE_TODAY = "due-today"
    DUE_SOON = "due-soon"
    FUTURE = "future"


STATUS_COLORS = {
    TaskStatus.OVERDUE: "text-red-700 bg-red-100 border-red-200",
    TaskStatus.DUE_TODAY: "text-orange-700 bg-orange-100 border-orange-200",
    TaskStatus.DUE_SOON: "text-yellow-700 bg-yellow-100 border-yellow-200",
    TaskStatus.FUTURE: "text-green-700 bg-green-100 border-green-200",
    TaskStatus.COMPLETED: DEFAULT_COLOR,
}

PRIORITY_COLORS = {
    Priority.URGENT: "text-red-700 bg-red-100 border-red-200",
    Priority.HIGH: "text-orange-700 bg-orange-100 border-orange-200",
    Priority.MEDIUM: "text-yellow-700 bg-yellow-100 border-yellow-200",
    Priority.LOW: "text-green-700 bg-green-100 border-green-200",
}


def days_until_due(due_date: DateLike, today: DateLike) -> int:
    """Signed number of days from today to the due date."""
    return days_between(to_calendar_date(today), to_calendar_date(due_date))


def overdue_days(due_date: DateLike, today: DateLike) -> int:
    """Days past due, or 0 if the task is not overdue."""
    diff = days_until_due(due_date, today)
    return -diff if diff < 0 else 0


def classify(
    due_date: Optional[DateLike],
    completed: bool,
    today: DateLike,
    due_soon_days: int = DUE_SOON_DAYS,
) -> Optional[TaskStatus]:
    """Classify a task into a status bucket.

    Completion wins over any date. Without a due date there is no date-based
    status, and ``None`` is returned for the caller to handle.
    """
    if completed:
        return TaskStatus.COMPLETED
    if due_date is None or due_date == "":
        return None

    diff = days_until_due(due_date, today)
    if diff < 0:
        return TaskStatus.OVERDUE
    if diff == 0:
        return TaskStatus.DUE_TODAY
    if diff <= due_soon_days:
        return TaskStatus.DUE_SOON
    return TaskStatus.FUTURE


def _plural(count: int, word: str) -> str:
    return f"{count} {word}{'s' if count > 1 else ''}"


def status_text(due_date: Optional[DateLike], completed: bool, today: DateLike) -> str:
    """Short human-readable status, e.g. "Due tomorrow" or "Overdue by 3 days"."""
    if completed:
        return "Completed"
    if due_date is None or due_date == "":
        return "No due date"

    diff = days_until_due(due_date, today)
    if diff < 0:
        return f"Overdue by {_plural(-diff, 'day')}"
    if diff == 0:
        return "Due today"
    if diff == 1:
        return "Due tomorrow"
    if diff <= 7:
        return f"Due in {diff} days"
    if diff <= 30:
        return f"Due in {_plural(ceil(diff / 7), 'week')}"
    return f"Due in {_plural(ceil(diff / 30), 'month')}"


def status_color_class(status: Optional[TaskStatus]) -> str:
    """CSS class token for a status badge. Unknown or missing status is grey."""
    if isinstance(status, str):
        try:
            status = TaskStatus(status)
        except ValueError:
            return DEFAULT_COLOR
    return STATUS_COLORS.get(status, DEFAULT_COLOR)


def priority_color_class(priority: Any) -> str:
    """CSS class token for a priority badge. Unknown priority is grey."""
    try:
        priority = Priority.parse(priority)
    except ValueError:
        return DEFAULT_COLOR
    return PRIORITY_COLORS.get(priority, DEFAULT_COLOR)


def sort_tasks_by_due_date(tasks: Iterable[Any], ascending: bool = True) -> List[Any]:
    """Sort tasks for display: incomplete first, then by due date.

    Tasks without a due date follow the dated tasks of their group whichever
    way the dates run. Ties keep their input order.
    """
    tasks = list(tasks)
    result = []
    for done in (False, True):
        group = [t for t in tasks if bool(t.completed) == done]
        dated = sorted(
            (t for t in group if t.due_date is not None),
            key=lambda t: to_calendar_date(t.due_date),
            reverse=not ascending,
        )
        result.extend(dated)
        result.extend(t for t in group if t.due_date is None)
    return result
