"""
Recurring schedule model for routines.

A schedule is one of four variants (daily, weekly, monthly, custom interval),
each a frozen dataclass holding only its own fields, so a weekly schedule with
a day-of-month simply cannot be built. Raw request data is turned into a
schedule by :func:`validate_schedule`, which checks the rules in a fixed order
and reports the first failure as a value.
"""

import logging
import re
from dataclasses import dataclass
from datetime import time
from enum import Enum
from typing import Any, ClassVar, Dict, FrozenSet, Iterable, Mapping, Optional, Union

logger = logging.getLogger(__name__)

_TIME_RE = re.compile(r"^([01]\d|2[0-3]):([0-5]\d)$")


class RecurrenceType(Enum):
    """Types of recurrence patterns"""
    DAILY = "DAILY"
    WEEKLY = "WEEKLY"
    MONTHLY = "MONTHLY"
    CUSTOM = "CUSTOM"  # every N days


class Weekday(Enum):
    """Weekday codes, Monday first."""
    MON = "MON"
    TUE = "TUE"
    WED = "WED"
    THU = "THU"
    FRI = "FRI"
    SAT = "SAT"
    SUN = "SUN"

    @property
    def index(self) -> int:
        """0=Monday, 6=Sunday, matching ``date.weekday()``."""
        return list(Weekday).index(self)

    @property
    def label(self) -> str:
        return self.value.capitalize()


# ---------------------------------------------------------------------------
# Validation errors
# ---------------------------------------------------------------------------

class ScheduleValidationError(ValueError):
    """A user-correctable problem with a proposed schedule."""

    code: ClassVar[str] = "ScheduleValidationError"
    default_field: ClassVar[str] = "schedule"
    default_message: ClassVar[str] = "Invalid schedule"

    def __init__(self, message: Optional[str] = None, field: Optional[str] = None, value: Any = None):
        self.message = message or self.default_message
        self.field = field or self.default_field
        self.value = value
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        return {"code": self.code, "field": self.field, "message": self.message}


class InvalidRecurrenceType(ScheduleValidationError):
    code = "InvalidRecurrenceType"
    default_field = "recurrenceType"
    default_message = "Invalid recurrence type"


class EmptyWeeklyDays(ScheduleValidationError):
    code = "EmptyWeeklyDays"
    default_field = "daysOfWeek"
    default_message = "Select at least one day for weekly routine"


class DayOfMonthOutOfRange(ScheduleValidationError):
    code = "DayOfMonthOutOfRange"
    default_field = "dayOfMonth"
    default_message = "Day of month must be between 1 and 31"


class IntervalTooSmall(ScheduleValidationError):
    code = "IntervalTooSmall"
    default_field = "interval"
    default_message = "Interval must be at least 1"


class InvalidTimeFormat(ScheduleValidationError):
    code = "InvalidTimeFormat"
    default_field = "time"
    default_message = "Time must be in HH:MM format"


# ---------------------------------------------------------------------------
# Schedule variants
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class DailySchedule:
    """Every day."""
    time: Optional[time] = None

    type: ClassVar[RecurrenceType] = RecurrenceType.DAILY


@dataclass(frozen=True)
class WeeklySchedule:
    """On a fixed, non-empty set of weekdays."""
    days_of_week: FrozenSet[Weekday]
    time: Optional[time] = None

    type: ClassVar[RecurrenceType] = RecurrenceType.WEEKLY

    def __post_init__(self):
        days = frozenset(Weekday(d) for d in self.days_of_week)
        if not days:
            raise EmptyWeeklyDays(value=self.days_of_week)
        object.__setattr__(self, "days_of_week", days)

    @property
    def ordered_days(self):
        return sorted(self.days_of_week, key=lambda d: d.index)


@dataclass(frozen=True)
class MonthlySchedule:
    """On one day of the month.

    Days 29-31 are accepted even though some months are shorter; what happens
    in those months is not defined here.
    """
    day_of_month: int
    time: Optional[time] = None

    type: ClassVar[RecurrenceType] = RecurrenceType.MONTHLY

    def __post_init__(self):
        if isinstance(self.day_of_month, bool) or not 1 <= self.day_of_month <= 31:
            raise DayOfMonthOutOfRange(value=self.day_of_month)


@dataclass(frozen=True)
class CustomSchedule:
    """Every ``interval`` days."""
    interval: int
    time: Optional[time] = None

    type: ClassVar[RecurrenceType] = RecurrenceType.CUSTOM

    def __post_init__(self):
        if isinstance(self.interval, bool) or self.interval < 1:
            raise IntervalTooSmall(value=self.interval)


RecurrenceSchedule = Union[DailySchedule, WeeklySchedule, MonthlySchedule, CustomSchedule]


@dataclass(frozen=True)
class ScheduleValidationResult:
    """Either a validated schedule or the first validation error."""
    schedule: Optional[RecurrenceSchedule] = None
    error: Optional[ScheduleValidationError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> RecurrenceSchedule:
        """Return the schedule, raising the validation error if there is one."""
        if self.error is not None:
            raise self.error
        return self.schedule


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------

def _coerce_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str) and re.fullmatch(r"\s*-?\d+\s*", value):
        return int(value)
    return None


def _parse_weekdays(value: Any) -> Optional[FrozenSet[Weekday]]:
    if isinstance(value, (str, bytes)) or not isinstance(value, Iterable):
        return None
    days = set()
    for item in value:
        if isinstance(item, Weekday):
            days.add(item)
            continue
        try:
            days.add(Weekday(str(item).strip().upper()))
        except ValueError:
            return None
    return frozenset(days)


def parse_time(value: Any) -> Optional[time]:
    """Parse a 24-hour ``HH:MM`` string; ``None`` if it is not one."""
    if isinstance(value, time):
        return value.replace(second=0, microsecond=0)
    if not isinstance(value, str):
        return None
    match = _TIME_RE.match(value.strip())
    if not match:
        return None
    return time(int(match.group(1)), int(match.group(2)))


def _fail(error: ScheduleValidationError) -> ScheduleValidationResult:
    logger.debug("Schedule rejected: %s (%s)", error.code, error.message)
    return ScheduleValidationResult(error=error)


def validate_schedule(data: Mapping[str, Any]) -> ScheduleValidationResult:
    """Validate a proposed schedule and build the matching variant.

    ``data`` uses the request field names: ``recurrenceType`` plus the optional
    ``interval``, ``daysOfWeek``, ``dayOfMonth`` and ``time``. Rules are applied
    in order (type, weekly days, day of month, interval, time) and the first
    failure is returned. Fields that do not belong to the selected type are
    ignored.

    Never raises.
    """
    if not isinstance(data, Mapping):
        return _fail(InvalidRecurrenceType(value=data))

    raw_type = data.get("recurrenceType")
    if isinstance(raw_type, RecurrenceType):
        rec_type = raw_type
    else:
        try:
            rec_type = RecurrenceType(raw_type)
        except ValueError:
            return _fail(InvalidRecurrenceType(value=raw_type))

    days = None
    if rec_type == RecurrenceType.WEEKLY:
        days = _parse_weekdays(data.get("daysOfWeek"))
        if not days:
            return _fail(EmptyWeeklyDays(value=data.get("daysOfWeek")))

    day_of_month = None
    if rec_type == RecurrenceType.MONTHLY:
        day_of_month = _coerce_int(data.get("dayOfMonth"))
        if day_of_month is None or not 1 <= day_of_month <= 31:
            return _fail(DayOfMonthOutOfRange(value=data.get("dayOfMonth")))

    interval = None
    if rec_type == RecurrenceType.CUSTOM:
        interval = _coerce_int(data.get("interval"))
        if interval is None or interval < 1:
            return _fail(IntervalTooSmall(value=data.get("interval")))

    at = None
    raw_time = data.get("time")
    if raw_time not in (None, ""):
        at = parse_time(raw_time)
        if at is None:
            return _fail(InvalidTimeFormat(value=raw_time))

    if rec_type == RecurrenceType.DAILY:
        schedule = DailySchedule(time=at)
    elif rec_type == RecurrenceType.WEEKLY:
        schedule = WeeklySchedule(days_of_week=days, time=at)
    elif rec_type == RecurrenceType.MONTHLY:
        schedule = MonthlySchedule(day_of_month=day_of_month, time=at)
    else:
        schedule = CustomSchedule(interval=interval, time=at)

    return ScheduleValidationResult(schedule=schedule)


# ---------------------------------------------------------------------------
# Rendering and serialization
# ---------------------------------------------------------------------------

def ordinal_suffix(number: int) -> str:
    """English ordinal suffix: 1st, 2nd, 3rd, 4th, 11th, 12th, 13th, 21st."""
    if number % 100 in (11, 12, 13):
        return "th"
    return {1: "st", 2: "nd", 3: "rd"}.get(number % 10, "th")


def _plural(count: int, word: str) -> str:
    return f"{count} {word}{'s' if count > 1 else ''}"


def _with_time(text: str, schedule: RecurrenceSchedule) -> str:
    if schedule.time is not None:
        return f"{text} at {schedule.time.strftime('%H:%M')}"
    return text


def describe_schedule(schedule: RecurrenceSchedule) -> str:
    """Human-readable sentence for a schedule, as shown in the routine editor."""
    if isinstance(schedule, DailySchedule):
        text = "Every day"
    elif isinstance(schedule, WeeklySchedule):
        text = f"Every {', '.join(d.label for d in schedule.ordered_days)}"
    elif isinstance(schedule, MonthlySchedule):
        day = schedule.day_of_month
        text = f"Every {day}{ordinal_suffix(day)} of the month"
    elif isinstance(schedule, CustomSchedule):
        text = f"Every {_plural(schedule.interval, 'day')}"
    else:
        raise TypeError(f"Not a recurrence schedule: {schedule!r}")
    return _with_time(text, schedule)


def schedule_label(schedule: RecurrenceSchedule) -> str:
    """Compact label used in routine lists ("Weekly on Mon, Fri")."""
    if isinstance(schedule, DailySchedule):
        text = "Daily"
    elif isinstance(schedule, WeeklySchedule):
        text = f"Weekly on {', '.join(d.label for d in schedule.ordered_days)}"
    elif isinstance(schedule, MonthlySchedule):
        day = schedule.day_of_month
        text = f"Monthly on the {day}{ordinal_suffix(day)}"
    elif isinstance(schedule, CustomSchedule):
        text = f"Every {_plural(schedule.interval, 'day')}"
    else:
        raise TypeError(f"Not a recurrence schedule: {schedule!r}")
    return _with_time(text, schedule)


def schedule_to_dict(schedule: RecurrenceSchedule) -> Dict[str, Any]:
    """Serialize a schedule to the request/response shape."""
    data: Dict[str, Any] = {"recurrenceType": schedule.type.value}
    if isinstance(schedule, WeeklySchedule):
        data["daysOfWeek"] = [d.value for d in schedule.ordered_days]
    elif isinstance(schedule, MonthlySchedule):
        data["dayOfMonth"] = schedule.day_of_month
    elif isinstance(schedule, CustomSchedule):
        data["interval"] = schedule.interval
    if schedule.time is not None:
        data["time"] = schedule.time.strftime("%H:%M")
    return data


def schedule_from_dict(data: Mapping[str, Any]) -> RecurrenceSchedule:
    """Deserialize a stored schedule.

    Raises:
        ScheduleValidationError: If the stored data is not a valid schedule.
    """
    return validate_schedule(data).unwrap()
