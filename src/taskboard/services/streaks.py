"""Productivity streaks over completion events.

A day is *productive* when at least one completed task carries it as its
completion signal date. The current streak counts consecutive productive days
ending today, or ending yesterday when nothing has been completed yet today,
so a streak is not lost before the day is over.
"""

import logging
from datetime import date, timedelta
from typing import Any, Iterable, Set, Tuple, Union

from ..utils.datetime import DateLike, to_calendar_date

logger = logging.getLogger(__name__)

CompletionEvent = Union[Any, Tuple[bool, DateLike]]


def _unpack(event: CompletionEvent) -> Tuple[bool, Any]:
    if isinstance(event, tuple):
        completed, signal = event
        return bool(completed), signal
    return bool(event.completed), event.completion_signal_date


def productive_dates(events: Iterable[CompletionEvent]) -> Set[date]:
    """Distinct completion signal dates of the completed events."""
    dates = set()
    for event in events:
        completed, signal = _unpack(event)
        if completed and signal is not None:
            dates.add(to_calendar_date(signal))
    return dates


def count_productive_days(events: Iterable[CompletionEvent]) -> int:
    """Number of distinct productive days."""
    return len(productive_dates(events))


def calculate_streak(events: Iterable[CompletionEvent], today: DateLike) -> int:
    """Length of the current run of consecutive productive days.

    Returns 0 when neither today nor yesterday is productive.
    """
    dates = productive_dates(events)
    if not dates:
        return 0

    today = to_calendar_date(today)
    if today in dates:
        cursor = today
    elif today - timedelta(days=1) in dates:
        cursor = today - timedelta(days=1)
    else:
        return 0

    streak = 0
    while cursor in dates:
        streak += 1
        cursor -= timedelta(days=1)

    logger.debug("Streak of %d day(s) ending %s", streak, cursor + timedelta(days=1))
    return streak
