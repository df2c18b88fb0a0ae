"""Tests for loading task snapshots."""

import json
from datetime import date, datetime, timezone

import pytest

from taskboard.recurring import Weekday, WeeklySchedule
from taskboard.snapshot import SnapshotError, load_snapshot, parse_snapshot
from taskboard.task import Priority


SNAPSHOT = {
    "tasks": [
        {
            "id": "t1",
            "title": "Write report",
            "completed": False,
            "priority": "HIGH",
            "dueDate": "2025-03-14T00:00:00.000Z",
            "categoryId": "c1",
            "createdAt": "2025-03-01T09:00:00.000Z",
            "updatedAt": "2025-03-02T09:00:00.000Z",
        },
        {"id": 2, "title": "Call bank", "completed": True},
    ],
    "categories": [{"id": "c1", "name": "Work", "color": "#EF4444", "taskCount": 1}],
    "routines": [
        {
            "id": "r1",
            "title": "Gym",
            "schedule": {"recurrenceType": "WEEKLY", "daysOfWeek": ["MON", "THU"], "time": "07:00"},
            "isActive": False,
            "createdAt": "2025-02-01T00:00:00Z",
        },
    ],
}


class TestParseSnapshot:
    """Test building records from decoded documents."""

    def test_records(self):
        snapshot = parse_snapshot(SNAPSHOT)

        task = snapshot.tasks[0]
        assert task.id == "t1"
        assert task.priority == Priority.HIGH
        assert task.due_date == date(2025, 3, 14)
        assert task.category_id == "c1"
        assert task.created_at == datetime(2025, 3, 1, 9, 0, tzinfo=timezone.utc)
        assert task.completion_signal_date == date(2025, 3, 2)

        assert snapshot.tasks[1].id == "2"
        assert snapshot.tasks[1].due_date is None

        assert snapshot.categories[0].name == "Work"
        assert snapshot.category("c1").task_count == 1

        routine = snapshot.routines[0]
        assert routine.schedule.days_of_week == frozenset({Weekday.MON, Weekday.THU})
        assert isinstance(routine.schedule, WeeklySchedule)
        assert routine.is_active is False

    def test_empty_document(self):
        snapshot = parse_snapshot(None)
        assert snapshot.tasks == []
        assert snapshot.categories == []
        assert snapshot.routines == []

    def test_not_a_mapping(self):
        with pytest.raises(SnapshotError):
            parse_snapshot(["tasks"])

    def test_missing_id_names_the_item(self):
        with pytest.raises(SnapshotError, match=r"tasks\[0\] is missing field 'id'"):
            parse_snapshot({"tasks": [{"title": "no id"}]})

    def test_bad_priority(self):
        with pytest.raises(SnapshotError, match=r"tasks\[0\]"):
            parse_snapshot({"tasks": [{"id": "x", "priority": "SOMEDAY"}]})

    def test_bad_date(self):
        with pytest.raises(SnapshotError, match=r"tasks\[0\]"):
            parse_snapshot({"tasks": [{"id": "x", "dueDate": "next week"}]})

    @pytest.mark.parametrize("value", ["false", "true", 0, 1, None])
    def test_completed_must_be_boolean(self, value):
        with pytest.raises(SnapshotError, match=r"tasks\[0\] is invalid: 'completed' must be true or false"):
            parse_snapshot({"tasks": [{"id": "x", "completed": value}]})

    def test_is_active_must_be_boolean(self):
        routine = {"id": "r", "title": "x", "schedule": {"recurrenceType": "DAILY"}, "isActive": "false"}
        with pytest.raises(SnapshotError, match=r"routines\[0\] is invalid: 'isActive' must be true or false"):
            parse_snapshot({"routines": [routine]})

    def test_bad_schedule(self):
        with pytest.raises(SnapshotError, match="Interval must be at least 1"):
            parse_snapshot({"routines": [{"id": "r", "title": "x", "schedule": {"recurrenceType": "CUSTOM"}}]})

    def test_list_required(self):
        with pytest.raises(SnapshotError, match="'tasks' must be a list"):
            parse_snapshot({"tasks": {"id": "t1"}})

    def test_unknown_category(self):
        with pytest.raises(KeyError):
            parse_snapshot(SNAPSHOT).category("nope")


class TestLoadSnapshot:
    """Test reading snapshot files."""

    def test_json_file(self, tmp_path):
        path = tmp_path / "snapshot.json"
        path.write_text(json.dumps(SNAPSHOT))

        snapshot = load_snapshot(path)
        assert len(snapshot.tasks) == 2

    def test_yaml_file(self, tmp_path):
        path = tmp_path / "snapshot.yaml"
        path.write_text(
            "tasks:\n"
            "  - id: t1\n"
            "    title: Water plants\n"
            "    dueDate: 2025-03-14\n"
            "    createdAt: 2025-03-01T09:00:00Z\n"
            "categories: []\n"
        )

        snapshot = load_snapshot(path)
        assert snapshot.tasks[0].due_date == date(2025, 3, 14)
        assert snapshot.tasks[0].created_at.tzinfo is not None

    def test_missing_file(self, tmp_path):
        with pytest.raises(SnapshotError, match="Cannot read"):
            load_snapshot(tmp_path / "missing.json")

    def test_malformed_json(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{not json")
        with pytest.raises(SnapshotError, match="Cannot parse"):
            load_snapshot(path)

    def test_snapshot_error_is_value_error(self):
        assert issubclass(SnapshotError, ValueError)
