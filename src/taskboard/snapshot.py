"""Loading task snapshots exported by the persistence layer.

A snapshot is a JSON or YAML document with ``tasks``, ``categories`` and
``routines`` lists, using the persistence layer's camelCase field names.
"""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, List, Union

import yaml

from .recurring import ScheduleValidationError, schedule_from_dict
from .task import Category, Routine, Task
from .utils.datetime import parse_datetime, to_calendar_date

logger = logging.getLogger(__name__)


class SnapshotError(ValueError):
    """Raised when a snapshot document cannot be turned into records."""


@dataclass
class Snapshot:
    """Records of one user, as handed over by the persistence layer"""
    tasks: List[Task] = field(default_factory=list)
    categories: List[Category] = field(default_factory=list)
    routines: List[Routine] = field(default_factory=list)

    def category(self, category_id: str) -> Category:
        for category in self.categories:
            if category.id == category_id:
                return category
        raise KeyError(category_id)


def _flag(data: Dict[str, Any], key: str, default: bool) -> bool:
    value = data.get(key, default)
    if not isinstance(value, bool):
        raise ValueError(f"'{key}' must be true or false, got {value!r}")
    return value


def _deserialize_task(data: Dict[str, Any]) -> Task:
    kwargs = {
        "id": str(data["id"]),
        "title": data.get("title", ""),
        "completed": _flag(data, "completed", False),
        "priority": data.get("priority", "MEDIUM"),
        "due_date": to_calendar_date(data.get("dueDate")),
        "category_id": data.get("categoryId"),
    }
    for key, attr in (("createdAt", "created_at"), ("updatedAt", "updated_at")):
        if data.get(key):
            kwargs[attr] = parse_datetime(data[key])
    return Task(**kwargs)


def _deserialize_category(data: Dict[str, Any]) -> Category:
    return Category(
        id=str(data["id"]),
        name=data["name"],
        color=data.get("color", "#3B82F6"),
        task_count=int(data.get("taskCount", 0)),
    )


def _deserialize_routine(data: Dict[str, Any]) -> Routine:
    kwargs = {
        "id": str(data["id"]),
        "title": data.get("title", ""),
        "schedule": schedule_from_dict(data.get("schedule") or {}),
        "is_active": _flag(data, "isActive", True),
        "priority": data.get("priority", "MEDIUM"),
        "category_id": data.get("categoryId"),
        "start_date": to_calendar_date(data.get("startDate")),
        "end_date": to_calendar_date(data.get("endDate")),
    }
    if data.get("createdAt"):
        kwargs["created_at"] = parse_datetime(data["createdAt"])
    return Routine(**kwargs)


def _load_items(data: Dict[str, Any], key: str, build: Callable[[Dict[str, Any]], Any]) -> List[Any]:
    items = data.get(key) or []
    if not isinstance(items, list):
        raise SnapshotError(f"'{key}' must be a list")

    records = []
    for index, item in enumerate(items):
        if not isinstance(item, dict):
            raise SnapshotError(f"{key}[{index}] must be a mapping")
        try:
            records.append(build(item))
        except KeyError as e:
            raise SnapshotError(f"{key}[{index}] is missing field {e}") from e
        except ScheduleValidationError as e:
            raise SnapshotError(f"{key}[{index}] has an invalid schedule: {e.message}") from e
        except (TypeError, ValueError) as e:
            raise SnapshotError(f"{key}[{index}] is invalid: {e}") from e
    return records


def parse_snapshot(data: Any) -> Snapshot:
    """Build records from an already-decoded snapshot document."""
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise SnapshotError("Snapshot must be a mapping")

    snapshot = Snapshot(
        tasks=_load_items(data, "tasks", _deserialize_task),
        categories=_load_items(data, "categories", _deserialize_category),
        routines=_load_items(data, "routines", _deserialize_routine),
    )
    logger.debug(
        "Loaded snapshot: %d tasks, %d categories, %d routines",
        len(snapshot.tasks), len(snapshot.categories), len(snapshot.routines),
    )
    return snapshot


def load_snapshot(path: Union[str, Path]) -> Snapshot:
    """Read a snapshot file. ``.json`` files are read as JSON, anything else as YAML.

    Raises:
        SnapshotError: If the file cannot be read or holds invalid records.
    """
    path = Path(path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            content = f.read()
    except OSError as e:
        raise SnapshotError(f"Cannot read {path}: {e}") from e

    try:
        if path.suffix.lower() == ".json":
            data = json.loads(content)
        else:
            data = yaml.safe_load(content)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise SnapshotError(f"Cannot parse {path}: {e}") from e

    return parse_snapshot(data)
