"""Tests for recurring schedules and their validation."""

from datetime import time

import pytest

from taskboard.recurring import (
    CustomSchedule,
    DailySchedule,
    DayOfMonthOutOfRange,
    EmptyWeeklyDays,
    IntervalTooSmall,
    InvalidRecurrenceType,
    InvalidTimeFormat,
    MonthlySchedule,
    RecurrenceType,
    ScheduleValidationError,
    Weekday,
    WeeklySchedule,
    describe_schedule,
    ordinal_suffix,
    parse_time,
    schedule_from_dict,
    schedule_label,
    schedule_to_dict,
    validate_schedule,
)


class TestValidateSchedule:
    """Test building schedules from request data."""

    def test_weekly_schedule(self):
        result = validate_schedule({"recurrenceType": "WEEKLY", "daysOfWeek": ["MON", "WED"], "time": "09:30"})

        assert result.ok
        assert result.error is None
        assert result.schedule == WeeklySchedule(days_of_week={Weekday.MON, Weekday.WED}, time=time(9, 30))

    def test_weekly_without_days(self):
        result = validate_schedule({"recurrenceType": "WEEKLY", "daysOfWeek": []})

        assert not result.ok
        assert isinstance(result.error, EmptyWeeklyDays)
        assert result.error.code == "EmptyWeeklyDays"
        assert result.error.field == "daysOfWeek"
        assert result.error.message == "Select at least one day for weekly routine"

    def test_weekly_with_missing_days(self):
        result = validate_schedule({"recurrenceType": "WEEKLY"})
        assert isinstance(result.error, EmptyWeeklyDays)

    def test_weekly_with_unknown_day_code(self):
        result = validate_schedule({"recurrenceType": "WEEKLY", "daysOfWeek": ["MON", "FUNDAY"]})
        assert isinstance(result.error, EmptyWeeklyDays)

    def test_weekly_days_not_a_list(self):
        result = validate_schedule({"recurrenceType": "WEEKLY", "daysOfWeek": "MON"})
        assert isinstance(result.error, EmptyWeeklyDays)

    def test_weekly_duplicate_days_collapse(self):
        schedule = validate_schedule({"recurrenceType": "WEEKLY", "daysOfWeek": ["FRI", "FRI", "MON"]}).unwrap()
        assert schedule.days_of_week == frozenset({Weekday.MON, Weekday.FRI})

    def test_monthly_out_of_range(self):
        result = validate_schedule({"recurrenceType": "MONTHLY", "dayOfMonth": 32})

        assert isinstance(result.error, DayOfMonthOutOfRange)
        assert result.error.message == "Day of month must be between 1 and 31"

    @pytest.mark.parametrize("day", [0, -1, None, "abc", 1.5, True])
    def test_monthly_invalid_day(self, day):
        result = validate_schedule({"recurrenceType": "MONTHLY", "dayOfMonth": day})
        assert isinstance(result.error, DayOfMonthOutOfRange)

    @pytest.mark.parametrize("day", [1, 15, 29, 31])
    def test_monthly_accepted_days(self, day):
        schedule = validate_schedule({"recurrenceType": "MONTHLY", "dayOfMonth": day}).unwrap()
        assert schedule == MonthlySchedule(day_of_month=day)

    def test_monthly_day_as_numeric_string(self):
        schedule = validate_schedule({"recurrenceType": "MONTHLY", "dayOfMonth": "21"}).unwrap()
        assert schedule.day_of_month == 21

    def test_custom_with_zero_interval(self):
        result = validate_schedule({"recurrenceType": "CUSTOM", "interval": 0})

        assert isinstance(result.error, IntervalTooSmall)
        assert result.error.message == "Interval must be at least 1"

    def test_custom_without_interval(self):
        result = validate_schedule({"recurrenceType": "CUSTOM"})
        assert isinstance(result.error, IntervalTooSmall)

    def test_custom_interval(self):
        schedule = validate_schedule({"recurrenceType": "CUSTOM", "interval": 3}).unwrap()
        assert schedule == CustomSchedule(interval=3)

    def test_daily_with_bad_time(self):
        result = validate_schedule({"recurrenceType": "DAILY", "time": "25:00"})

        assert isinstance(result.error, InvalidTimeFormat)
        assert result.error.field == "time"
        assert result.error.message == "Time must be in HH:MM format"

    @pytest.mark.parametrize("value", ["9:30", "12:60", "noon", "12:00:00", 930])
    def test_invalid_times(self, value):
        result = validate_schedule({"recurrenceType": "DAILY", "time": value})
        assert isinstance(result.error, InvalidTimeFormat)

    @pytest.mark.parametrize("value", [None, ""])
    def test_absent_time_is_allowed(self, value):
        schedule = validate_schedule({"recurrenceType": "DAILY", "time": value}).unwrap()
        assert schedule == DailySchedule()

    @pytest.mark.parametrize("value", ["MONTHLYISH", "daily", None, 3])
    def test_invalid_recurrence_type(self, value):
        result = validate_schedule({"recurrenceType": value})

        assert isinstance(result.error, InvalidRecurrenceType)
        assert result.error.field == "recurrenceType"
        assert result.error.message == "Invalid recurrence type"

    def test_not_a_mapping(self):
        result = validate_schedule(["DAILY"])
        assert isinstance(result.error, InvalidRecurrenceType)

    def test_enum_member_accepted(self):
        schedule = validate_schedule({"recurrenceType": RecurrenceType.DAILY}).unwrap()
        assert isinstance(schedule, DailySchedule)

    def test_first_failure_wins(self):
        """A bad day of month is reported before a bad time."""
        result = validate_schedule({"recurrenceType": "MONTHLY", "dayOfMonth": 0, "time": "99:99"})
        assert isinstance(result.error, DayOfMonthOutOfRange)

    def test_fields_of_other_types_are_ignored(self):
        result = validate_schedule({
            "recurrenceType": "WEEKLY",
            "daysOfWeek": ["TUE"],
            "dayOfMonth": 99,
            "interval": 0,
        })

        assert result.ok
        assert schedule_to_dict(result.schedule) == {"recurrenceType": "WEEKLY", "daysOfWeek": ["TUE"]}

    def test_unwrap_raises_error(self):
        result = validate_schedule({"recurrenceType": "CUSTOM", "interval": -2})

        with pytest.raises(IntervalTooSmall) as excinfo:
            result.unwrap()
        assert isinstance(excinfo.value, ValueError)
        assert excinfo.value.to_dict() == {
            "code": "IntervalTooSmall",
            "field": "interval",
            "message": "Interval must be at least 1",
        }


class TestScheduleVariants:
    """Test that variants enforce their own bounds."""

    def test_weekly_requires_days(self):
        with pytest.raises(EmptyWeeklyDays):
            WeeklySchedule(days_of_week=frozenset())

    def test_weekly_accepts_codes(self):
        schedule = WeeklySchedule(days_of_week=["SUN", "MON"])
        assert schedule.ordered_days == [Weekday.MON, Weekday.SUN]

    def test_monthly_bounds(self):
        with pytest.raises(DayOfMonthOutOfRange):
            MonthlySchedule(day_of_month=32)

    def test_custom_bounds(self):
        with pytest.raises(IntervalTooSmall):
            CustomSchedule(interval=0)

    def test_variants_are_frozen(self):
        schedule = DailySchedule()
        with pytest.raises(AttributeError):
            schedule.time = time(8, 0)

    def test_type_tags(self):
        assert DailySchedule.type == RecurrenceType.DAILY
        assert WeeklySchedule.type == RecurrenceType.WEEKLY
        assert MonthlySchedule.type == RecurrenceType.MONTHLY
        assert CustomSchedule.type == RecurrenceType.CUSTOM

    def test_errors_share_base_class(self):
        for error in (InvalidRecurrenceType(), EmptyWeeklyDays(), DayOfMonthOutOfRange(),
                      IntervalTooSmall(), InvalidTimeFormat()):
            assert isinstance(error, ScheduleValidationError)


class TestDescribeSchedule:
    """Test human-readable schedule text."""

    def test_daily(self):
        assert describe_schedule(DailySchedule()) == "Every day"

    def test_weekly_in_monday_first_order(self):
        schedule = WeeklySchedule(days_of_week={Weekday.WED, Weekday.MON})
        assert describe_schedule(schedule) == "Every Mon, Wed"

    def test_monthly(self):
        assert describe_schedule(MonthlySchedule(day_of_month=21)) == "Every 21st of the month"

    def test_custom_singular_and_plural(self):
        assert describe_schedule(CustomSchedule(interval=1)) == "Every 1 day"
        assert describe_schedule(CustomSchedule(interval=3)) == "Every 3 days"

    def test_with_time(self):
        assert describe_schedule(DailySchedule(time=time(7, 5))) == "Every day at 07:05"

    def test_not_a_schedule(self):
        with pytest.raises(TypeError):
            describe_schedule("DAILY")

    @pytest.mark.parametrize("number,suffix", [
        (1, "st"), (2, "nd"), (3, "rd"), (4, "th"), (11, "th"), (12, "th"),
        (13, "th"), (21, "st"), (22, "nd"), (23, "rd"), (30, "th"), (31, "st"),
        (111, "th"), (101, "st"),
    ])
    def test_ordinal_suffix(self, number, suffix):
        assert ordinal_suffix(number) == suffix


class TestScheduleLabel:
    """Test the compact list labels."""

    def test_labels(self):
        assert schedule_label(DailySchedule()) == "Daily"
        assert schedule_label(WeeklySchedule(days_of_week={Weekday.FRI, Weekday.MON})) == "Weekly on Mon, Fri"
        assert schedule_label(MonthlySchedule(day_of_month=3)) == "Monthly on the 3rd"
        assert schedule_label(CustomSchedule(interval=2)) == "Every 2 days"

    def test_label_with_time(self):
        assert schedule_label(DailySchedule(time=time(18, 0))) == "Daily at 18:00"


class TestScheduleSerialization:
    """Test the stored shape of schedules."""

    def test_to_dict(self):
        schedule = MonthlySchedule(day_of_month=15, time=time(8, 0))
        assert schedule_to_dict(schedule) == {"recurrenceType": "MONTHLY", "dayOfMonth": 15, "time": "08:00"}

    def test_from_dict(self):
        schedule = schedule_from_dict({"recurrenceType": "CUSTOM", "interval": 10})
        assert schedule == CustomSchedule(interval=10)

    def test_from_dict_rejects_invalid(self):
        with pytest.raises(ScheduleValidationError):
            schedule_from_dict({"recurrenceType": "WEEKLY", "daysOfWeek": []})

    def test_parse_time(self):
        assert parse_time("23:59") == time(23, 59)
        assert parse_time(time(6, 30, 15)) == time(6, 30)
        assert parse_time("24:00") is None
