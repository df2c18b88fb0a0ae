"""Date and clock utilities shared by the classifier, streak and report code.

All classification in taskboard happens on calendar dates (``datetime.date``)
rather than on timestamps. Timestamps coming from the persistence layer are
normalized to UTC-aware datetimes here and reduced to a date with
:func:`to_calendar_date` before they are compared.

"Now" is never read from the system clock directly by the services. Callers
pass a :class:`Clock`; :class:`FixedClock` pins it for tests.
"""

from datetime import date, datetime, time, timedelta, timezone, tzinfo
from typing import Optional, Protocol, Union
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError


DateLike = Union[date, datetime, str]


class Clock(Protocol):
    """Source of the current moment."""

    def now(self) -> datetime:
        ...

    def today(self) -> date:
        ...


class SystemClock:
    """Clock backed by the system time, observed in a given timezone.

    The timezone decides which calendar day "today" is. It defaults to UTC.
    """

    def __init__(self, tz: Union[str, tzinfo, None] = None):
        self.tz = resolve_timezone(tz)

    def now(self) -> datetime:
        return datetime.now(self.tz)

    def today(self) -> date:
        return self.now().date()

    def __repr__(self) -> str:
        return f"SystemClock(tz={self.tz!r})"


class FixedClock:
    """Clock frozen at a single moment.

    Accepts a datetime, a date (interpreted as noon UTC, so that +/- a few
    hours never changes the day) or an ISO string.
    """

    def __init__(self, moment: DateLike):
        if isinstance(moment, str):
            moment = datetime.fromisoformat(moment)
        if not isinstance(moment, datetime):
            moment = datetime.combine(moment, time(12, 0), tzinfo=timezone.utc)
        self.moment = ensure_aware(moment)

    def now(self) -> datetime:
        return self.moment

    def today(self) -> date:
        return self.moment.date()

    def __repr__(self) -> str:
        return f"FixedClock({self.moment.isoformat()})"


def resolve_timezone(tz: Union[str, tzinfo, None]) -> tzinfo:
    """Turn a timezone name (or tzinfo, or None) into a tzinfo.

    Raises:
        ValueError: If the name is not a known IANA timezone.
    """
    if tz is None:
        return timezone.utc
    if isinstance(tz, tzinfo):
        return tz
    if tz.upper() == "UTC":
        return timezone.utc
    try:
        return ZoneInfo(tz)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise ValueError(f"Unknown timezone: {tz}") from exc


def now_utc() -> datetime:
    """Return current datetime in UTC timezone."""
    return datetime.now(timezone.utc)


def ensure_aware(dt: Optional[datetime]) -> Optional[datetime]:
    """Ensure datetime is timezone-aware, assuming UTC if naive.

    Args:
        dt: Datetime to check/convert, or None

    Returns:
        Timezone-aware datetime, or None if input was None
    """
    if dt is None:
        return None

    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)

    return dt


def parse_datetime(value: Optional[DateLike]) -> Optional[datetime]:
    """Parse an ISO timestamp (or pass a datetime through) as an aware datetime.

    A bare ``YYYY-MM-DD`` string or a ``date`` becomes midnight UTC. A trailing
    ``Z`` is accepted.

    Raises:
        ValueError: If the string is not ISO-8601.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return ensure_aware(value)
    if isinstance(value, date):
        return datetime.combine(value, time.min, tzinfo=timezone.utc)

    text = str(value).strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    return ensure_aware(datetime.fromisoformat(text))


def to_calendar_date(value: Optional[DateLike]) -> Optional[date]:
    """Reduce a timestamp, date or ISO string to its calendar date.

    This is the single date-extraction convention of the package. Strings keep
    the date written in them (``"2025-03-01T23:30:00-05:00"`` is March 1st), so
    a stored due date never shifts by a day. Aware datetimes keep their own
    wall-clock date for the same reason.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value

    text = str(value).strip()
    return date.fromisoformat(text[:10])


def days_between(start: date, end: date) -> int:
    """Whole days from ``start`` to ``end`` (negative if ``end`` is earlier)."""
    return (end - start).days


def start_of_day(moment: datetime) -> datetime:
    """Midnight of the moment's own calendar day, same tzinfo."""
    return moment.replace(hour=0, minute=0, second=0, microsecond=0)


def date_range(start: date, end: date):
    """Yield every calendar date from ``start`` to ``end`` inclusive."""
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)


def to_iso_string(dt: Optional[datetime]) -> Optional[str]:
    """Convert datetime to ISO string with timezone info.

    Args:
        dt: Datetime to convert, or None

    Returns:
        ISO format string with timezone, or None if input was None
    """
    if dt is None:
        return None

    return ensure_aware(dt).isoformat()
