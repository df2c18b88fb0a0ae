"""Task views for the dashboard and scheduled-tasks pages."""

from datetime import timedelta
from typing import Any, Dict, Iterable, List, Optional, Union

from ..task import Task
from ..utils.datetime import DateLike, to_calendar_date
from .status import (
    DUE_SOON_DAYS,
    TaskStatus,
    classify,
    priority_color_class,
    status_color_class,
    status_text,
)

STATUS_FILTERS = ("all", "pending", "overdue", "due-today", "due-soon", "future", "completed")


def tasks_for_today(tasks: Iterable[Task], today: DateLike) -> List[Task]:
    """Tasks due today, plus incomplete tasks that have no due date."""
    today = to_calendar_date(today)
    return [
        t for t in tasks
        if (t.due_date is not None and to_calendar_date(t.due_date) == today)
        or (t.due_date is None and not t.completed)
    ]


def tasks_due_within(tasks: Iterable[Task], days: int, today: DateLike) -> List[Task]:
    """Incomplete tasks due after today and at most ``days`` days ahead."""
    today = to_calendar_date(today)
    horizon = today + timedelta(days=days)
    return [
        t for t in tasks
        if not t.completed and t.due_date is not None
        and today < to_calendar_date(t.due_date) <= horizon
    ]


def overdue_tasks(tasks: Iterable[Task], today: DateLike) -> List[Task]:
    """Incomplete tasks whose due date has passed."""
    return [t for t in tasks if classify(t.due_date, t.completed, today) == TaskStatus.OVERDUE]


def filter_by_status(
    tasks: Iterable[Task],
    status: Union[TaskStatus, str, None],
    today: DateLike,
    due_soon_days: int = DUE_SOON_DAYS,
) -> List[Task]:
    """Apply a status filter.

    ``None`` or ``"all"`` keeps everything and ``"pending"`` keeps incomplete
    tasks. Any other value is a ``TaskStatus``; undated incomplete tasks match
    none of those.

    Raises:
        ValueError: If ``status`` is not a known filter.
    """
    tasks = list(tasks)
    if status is None or status == "all":
        return tasks
    if status == "pending":
        return [t for t in tasks if not t.completed]

    wanted = status if isinstance(status, TaskStatus) else TaskStatus(status)
    return [t for t in tasks if classify(t.due_date, t.completed, today, due_soon_days) == wanted]


def status_counts(tasks: Iterable[Task], today: DateLike) -> Dict[str, int]:
    """Counts for the filter tabs."""
    tasks = list(tasks)
    return {
        "all": len(tasks),
        "pending": sum(1 for t in tasks if not t.completed),
        "overdue": len(overdue_tasks(tasks, today)),
        "completed": sum(1 for t in tasks if t.completed),
    }


def annotate(task: Task, today: DateLike, due_soon_days: int = DUE_SOON_DAYS) -> Dict[str, Any]:
    """Display fields for a task row."""
    status: Optional[TaskStatus] = classify(task.due_date, task.completed, today, due_soon_days)
    return {
        "id": task.id,
        "title": task.title,
        "status": status.value if status else None,
        "statusText": status_text(task.due_date, task.completed, today),
        "statusColor": status_color_class(status),
        "priorityColor": priority_color_class(task.priority),
    }
