"""Reports and productivity trends for taskboard.

This module turns a user's task snapshot into the report document shown on
the reports page:
- completion overview for a reporting period
- priority and category distributions
- productive days and the current streak over the full history
- today / week / month summaries
- a per-day created/completed trend line
"""

import logging
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Sequence, Union

from ..config import ConfigModel, default_clock, get_config
from ..task import Category, Priority, Routine, Task
from ..utils.datetime import Clock, date_range, start_of_day, to_iso_string
from .status import TaskStatus, classify
from .streaks import calculate_streak, count_productive_days

logger = logging.getLogger(__name__)


class ReportPeriod(Enum):
    """Reporting periods accepted by the reports page"""
    TODAY = "today"
    WEEK = "week"
    MONTH = "month"
    ALL = "all"

    @classmethod
    def parse(cls, value: Union["ReportPeriod", str, None]) -> "ReportPeriod":
        """Parse a period name. Unknown or missing names mean ``all``."""
        if isinstance(value, cls):
            return value
        if value is None:
            return cls.ALL
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            logger.warning("Unknown report period %r, reporting on all time", value)
            return cls.ALL


@dataclass
class DateRange:
    """Closed interval of moments ``[start, end]``"""
    start: datetime
    end: datetime

    def __contains__(self, moment: datetime) -> bool:
        return self.start <= moment <= self.end

    def to_dict(self) -> Dict[str, Any]:
        return {"start": to_iso_string(self.start), "end": to_iso_string(self.end)}


def resolve_date_range(
    period: Union[ReportPeriod, str],
    now: datetime,
    config: Optional[ConfigModel] = None,
) -> DateRange:
    """Map a reporting period to the window it covers, ending at ``now``."""
    config = config or get_config()
    period = ReportPeriod.parse(period)

    if period == ReportPeriod.TODAY:
        start = start_of_day(now)
    elif period == ReportPeriod.WEEK:
        start = now - timedelta(days=config.week_days)
    elif period == ReportPeriod.MONTH:
        start = now - timedelta(days=config.month_days)
    else:
        start = config.all_time_start_datetime

    return DateRange(start=start, end=now)


def completion_rate(completed: int, total: int) -> float:
    """Percentage of completed tasks, 0.0 when there are none."""
    if total <= 0:
        return 0.0
    return completed / total * 100


@dataclass
class CompletionSummary:
    """Task and completion counts for one window"""
    total: int = 0
    completed: int = 0

    @property
    def pending(self) -> int:
        return self.total - self.completed

    @property
    def completion_rate(self) -> float:
        return completion_rate(self.completed, self.total)

    @classmethod
    def of(cls, tasks: Iterable[Task]) -> "CompletionSummary":
        tasks = list(tasks)
        return cls(total=len(tasks), completed=sum(1 for t in tasks if t.completed))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total": self.total,
            "completed": self.completed,
            "completionRate": self.completion_rate,
        }


@dataclass
class CategoryStats:
    """Per-category task counts"""
    name: str
    total: int
    completed: int
    color: str

    def to_dict(self, include_name: bool = False) -> Dict[str, Any]:
        data = {"total": self.total, "completed": self.completed, "color": self.color}
        if include_name:
            data = {"name": self.name, **data}
        return data


@dataclass
class ReportOverview:
    """Headline numbers of a report"""
    total_tasks: int
    completed_tasks: int
    overdue_tasks: int
    productive_days: int
    current_streak: int
    total_routines: int = 0
    active_routines: int = 0

    @property
    def pending_tasks(self) -> int:
        return self.total_tasks - self.completed_tasks

    @property
    def completion_rate(self) -> float:
        return completion_rate(self.completed_tasks, self.total_tasks)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization"""
        return {
            "totalTasks": self.total_tasks,
            "completedTasks": self.completed_tasks,
            "pendingTasks": self.pending_tasks,
            "completionRate": round(self.completion_rate, 2),
            "overdueTasks": self.overdue_tasks,
            "productiveDays": self.productive_days,
            "currentStreak": self.current_streak,
            "totalRoutines": self.total_routines,
            "activeRoutines": self.active_routines,
        }


@dataclass
class ReportPayload:
    """Complete report for one user, period and category filter"""
    overview: ReportOverview
    priority_distribution: Dict[str, int]
    category_distribution: List[CategoryStats]
    top_categories: List[CategoryStats]
    summary: Dict[str, CompletionSummary]
    period: ReportPeriod
    date_range: DateRange

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the report response document"""
        return {
            "overview": self.overview.to_dict(),
            "priorityDistribution": dict(self.priority_distribution),
            "categoryDistribution": {c.name: c.to_dict() for c in self.category_distribution},
            "topCategories": [c.to_dict(include_name=True) for c in self.top_categories],
            "summary": {name: s.to_dict() for name, s in self.summary.items()},
            "period": self.period.value,
            "dateRange": self.date_range.to_dict(),
        }


def _filter_tasks(
    tasks: Iterable[Task],
    window: Optional[DateRange] = None,
    category_id: Optional[str] = None,
) -> List[Task]:
    """Tasks created inside ``window`` and, if given, in ``category_id``."""
    filtered = []
    for task in tasks:
        if window is not None and task.created_at not in window:
            continue
        if category_id is not None and task.category_id != category_id:
            continue
        filtered.append(task)
    return filtered


def priority_distribution(tasks: Iterable[Task]) -> Dict[str, int]:
    """Task counts for every priority level, highest first."""
    counts = {p.value: 0 for p in (Priority.URGENT, Priority.HIGH, Priority.MEDIUM, Priority.LOW)}
    for task in tasks:
        counts[task.priority.value] += 1
    return counts


def category_distribution(tasks: Sequence[Task], categories: Iterable[Category]) -> List[CategoryStats]:
    """Stats for each category holding at least one of ``tasks``, by name."""
    stats = []
    for category in sorted(categories, key=lambda c: c.name):
        in_category = [t for t in tasks if t.category_id == category.id]
        if not in_category:
            continue
        stats.append(CategoryStats(
            name=category.name,
            total=len(in_category),
            completed=sum(1 for t in in_category if t.completed),
            color=category.color,
        ))
    return stats


def top_categories(distribution: Iterable[CategoryStats], limit: int = 5) -> List[CategoryStats]:
    """Largest categories by task count; equal counts keep name order."""
    return sorted(distribution, key=lambda c: c.total, reverse=True)[:limit]


def build_report(
    tasks: Iterable[Task],
    categories: Iterable[Category] = (),
    period: Union[ReportPeriod, str] = ReportPeriod.ALL,
    category_id: Optional[str] = None,
    clock: Optional[Clock] = None,
    routines: Iterable[Routine] = (),
    history: Optional[Iterable[Task]] = None,
    config: Optional[ConfigModel] = None,
) -> ReportPayload:
    """Build the report for a user's tasks.

    Args:
        tasks: The user's tasks.
        categories: Categories available to the user.
        period: ``today``, ``week``, ``month`` or ``all``.
        category_id: Restrict to one category; ``None`` or ``"all"`` means no filter.
        clock: Source of "now"; defaults to the configured system clock.
        routines: The user's routines, counted when created inside the window.
        history: Full task history for productive days and the streak;
            defaults to ``tasks``.
        config: Configuration; defaults to the loaded one.
    """
    config = config or get_config()
    clock = clock or default_clock(config)
    now = clock.now()
    today = clock.today()

    tasks = list(tasks)
    history = tasks if history is None else list(history)
    if category_id == "all":
        category_id = None

    period = ReportPeriod.parse(period)
    window = resolve_date_range(period, now, config)
    in_window = _filter_tasks(tasks, window, category_id)
    logger.debug(
        "Report for %s (%s to %s): %d of %d tasks",
        period.value, window.start, window.end, len(in_window), len(tasks),
    )

    overdue = sum(
        1 for t in in_window
        if classify(t.due_date, t.completed, today, config.due_soon_days) == TaskStatus.OVERDUE
    )

    routines_in_window = [r for r in routines if r.created_at in window]

    overview = ReportOverview(
        total_tasks=len(in_window),
        completed_tasks=sum(1 for t in in_window if t.completed),
        overdue_tasks=overdue,
        productive_days=count_productive_days(history),
        current_streak=calculate_streak(history, today),
        total_routines=len(routines_in_window),
        active_routines=sum(1 for r in routines_in_window if r.is_active),
    )

    distribution = category_distribution(in_window, categories)

    summary = {
        p.value: CompletionSummary.of(_filter_tasks(tasks, resolve_date_range(p, now, config), category_id))
        for p in (ReportPeriod.TODAY, ReportPeriod.WEEK, ReportPeriod.MONTH)
    }

    return ReportPayload(
        overview=overview,
        priority_distribution=priority_distribution(in_window),
        category_distribution=distribution,
        top_categories=top_categories(distribution, config.top_categories_limit),
        summary=summary,
        period=period,
        date_range=window,
    )


@dataclass
class TrendPoint:
    """Created/completed counts for one calendar day"""
    day: date
    tasks_created: int = 0
    tasks_completed: int = 0

    @property
    def productivity(self) -> int:
        return 1 if self.tasks_completed > 0 else 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "date": self.day.isoformat(),
            "tasksCreated": self.tasks_created,
            "tasksCompleted": self.tasks_completed,
            "productivity": self.productivity,
        }


def build_trends(
    tasks: Iterable[Task],
    days: Optional[int] = None,
    clock: Optional[Clock] = None,
    config: Optional[ConfigModel] = None,
) -> List[Dict[str, Any]]:
    """Per-day created and completed counts from ``today - days`` to today."""
    config = config or get_config()
    clock = clock or default_clock(config)
    if days is None:
        days = config.trend_days
    days = max(int(days), 0)

    today = clock.today()
    points = {d: TrendPoint(day=d) for d in date_range(today - timedelta(days=days), today)}

    for task in tasks:
        created = points.get(task.created_date)
        if created is not None:
            created.tasks_created += 1
        if task.completed:
            finished = points.get(task.completion_signal_date)
            if finished is not None:
                finished.tasks_completed += 1

    logger.debug("Trends over %d day(s) ending %s", days, today)
    return [point.to_dict() for point in points.values()]
