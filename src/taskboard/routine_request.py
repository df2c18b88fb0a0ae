"""
Pydantic models for routine create/update requests
"""

from datetime import date
from typing import Any, Dict, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .recurring import RecurrenceSchedule, schedule_from_dict, schedule_to_dict, validate_schedule
from .task import Priority, Routine
from .utils.datetime import to_calendar_date

# Messages for required fields that are absent altogether
_MISSING_MESSAGES = {
    "title": "Title is required",
    "schedule": "Invalid recurrence type",
}


def _check_schedule(value: Any) -> Dict[str, Any]:
    if not isinstance(value, Mapping):
        raise ValueError("Invalid recurrence type")
    result = validate_schedule(value)
    if not result.ok:
        raise ValueError(result.error.message)
    return schedule_to_dict(result.schedule)


def _check_priority(value: Any) -> str:
    if not isinstance(value, (str, Priority)):
        raise ValueError("Invalid priority")
    try:
        return Priority.parse(value).value
    except ValueError:
        raise ValueError("Invalid priority") from None


def _check_date(value: Any) -> Optional[date]:
    if value is None or value == "":
        return None
    if isinstance(value, (str, date)):
        return to_calendar_date(value)
    return value


class RoutineRequest(BaseModel):
    """Routine creation model"""
    model_config = ConfigDict(populate_by_name=True)

    title: str
    priority: str = "MEDIUM"
    schedule: Dict[str, Any]
    description: Optional[str] = None
    category_id: Optional[str] = Field(None, alias="categoryId")
    is_active: bool = Field(True, alias="isActive")
    start_date: Optional[date] = Field(None, alias="startDate")
    end_date: Optional[date] = Field(None, alias="endDate")

    @field_validator("title", mode="before")
    @classmethod
    def validate_title(cls, v):
        """Title must contain something besides whitespace"""
        if not isinstance(v, str) or not v.strip():
            raise ValueError("Title is required")
        return v.strip()

    @field_validator("priority", mode="before")
    @classmethod
    def validate_priority(cls, v):
        return _check_priority(v)

    @field_validator("schedule", mode="before")
    @classmethod
    def validate_schedule_field(cls, v):
        return _check_schedule(v)

    @field_validator("start_date", "end_date", mode="before")
    @classmethod
    def validate_dates(cls, v):
        return _check_date(v)

    @property
    def recurrence(self) -> RecurrenceSchedule:
        return schedule_from_dict(self.schedule)

    def to_routine(self, routine_id: str) -> Routine:
        """Build the routine record this request describes."""
        return Routine(
            id=routine_id,
            title=self.title,
            schedule=self.recurrence,
            is_active=self.is_active,
            priority=self.priority,
            category_id=self.category_id,
            start_date=self.start_date,
            end_date=self.end_date,
        )


class RoutineUpdateRequest(BaseModel):
    """Routine update model - all fields optional"""
    model_config = ConfigDict(populate_by_name=True)

    title: Optional[str] = None
    priority: Optional[str] = None
    schedule: Optional[Dict[str, Any]] = None
    description: Optional[str] = None
    category_id: Optional[str] = Field(None, alias="categoryId")
    is_active: Optional[bool] = Field(None, alias="isActive")
    start_date: Optional[date] = Field(None, alias="startDate")
    end_date: Optional[date] = Field(None, alias="endDate")

    @field_validator("title", mode="before")
    @classmethod
    def validate_title(cls, v):
        if v is None:
            return None
        if not isinstance(v, str) or not v.strip():
            raise ValueError("Title cannot be empty")
        return v.strip()

    @field_validator("priority", mode="before")
    @classmethod
    def validate_priority(cls, v):
        return None if v is None else _check_priority(v)

    @field_validator("schedule", mode="before")
    @classmethod
    def validate_schedule_field(cls, v):
        return None if v is None else _check_schedule(v)

    @field_validator("start_date", "end_date", mode="before")
    @classmethod
    def validate_dates(cls, v):
        return _check_date(v)


def _first_message(error: ValidationError) -> str:
    """Message of the first failing field, in field order."""
    first = error.errors()[0]
    field_name = str(first["loc"][0]) if first["loc"] else ""
    if first["type"] == "value_error":
        return str(first["ctx"]["error"])
    if first["type"] == "missing" and field_name in _MISSING_MESSAGES:
        return _MISSING_MESSAGES[field_name]
    return f"{field_name}: {first['msg']}" if field_name else first["msg"]


def validate_routine_request(data: Mapping[str, Any]) -> Optional[str]:
    """Validate a routine creation payload.

    Returns the message of the first failing rule, or ``None`` when the payload
    is valid. Title and priority are checked before the schedule rules.
    """
    try:
        RoutineRequest.model_validate(dict(data))
    except ValidationError as e:
        return _first_message(e)
    return None


def validate_routine_update(data: Mapping[str, Any]) -> Optional[str]:
    """Same as :func:`validate_routine_request` for a partial update."""
    try:
        RoutineUpdateRequest.model_validate(dict(data))
    except ValidationError as e:
        return _first_message(e)
    return None
