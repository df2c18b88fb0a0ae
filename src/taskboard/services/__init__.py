"""Application services for taskboard."""

from .status import (
    TaskStatus,
    classify,
    status_text,
    status_color_class,
    priority_color_class,
    sort_tasks_by_due_date,
)
from .streaks import productive_dates, calculate_streak, count_productive_days
from .analytics import (
    ReportPeriod,
    DateRange,
    ReportPayload,
    resolve_date_range,
    build_report,
    build_trends,
)
from .dashboard import (
    tasks_for_today,
    tasks_due_within,
    overdue_tasks,
    filter_by_status,
    status_counts,
    annotate,
)

__all__ = [
    "TaskStatus",
    "classify",
    "status_text",
    "status_color_class",
    "priority_color_class",
    "sort_tasks_by_due_date",
    "productive_dates",
    "calculate_streak",
    "count_productive_days",
    "ReportPeriod",
    "DateRange",
    "ReportPayload",
    "resolve_date_range",
    "build_report",
    "build_trends",
    "tasks_for_today",
    "tasks_due_within",
    "overdue_tasks",
    "filter_by_status",
    "status_counts",
    "annotate",
]
