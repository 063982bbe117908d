# tests/test_file_source.py

from __future__ import annotations

import json
from datetime import date, datetime
from pathlib import Path

import pytest

from current_task.tasks.file_source import JsonFileTaskSource, TaskFileError, load_tasks


def _write(path: Path, data) -> Path:
    path.write_text(json.dumps(data), "utf-8")
    return path


def test_load_tasks_parses_dates(tmp_path: Path) -> None:
    path = _write(
        tmp_path / "tasks.json",
        [
            {"title": "A", "dueDate": "2020-08-14", "markedCurrent": True},
            {"title": "B", "dueDatetime": "2020-08-15T17:00:00"},
            {"title": "C"},
            "not a task",
        ],
    )

    a, b, c = load_tasks(path)

    assert a.title == "A" and a.marked_current is True
    assert a.due_date == date(2020, 8, 14) and a.due_datetime is None
    assert b.due_datetime == datetime(2020, 8, 15, 17, 0)
    assert b.due_date == date(2020, 8, 15)
    assert b.marked_current is False
    assert c.due_date is None and c.due_datetime is None


def test_load_tasks_converts_aware_datetimes_to_local(tmp_path: Path) -> None:
    path = _write(tmp_path / "tasks.json", [{"title": "A", "dueDatetime": "2020-08-15T17:00:00+00:00"}])

    (task,) = load_tasks(path)

    assert task.due_datetime is not None
    assert task.due_datetime.tzinfo is None


@pytest.mark.parametrize(
    "content",
    ["{not json", json.dumps({"title": "A"}), json.dumps([{"title": "A", "dueDate": "someday"}])],
)
def test_load_tasks_errors(tmp_path: Path, content: str) -> None:
    path = tmp_path / "tasks.json"
    path.write_text(content, "utf-8")

    with pytest.raises(TaskFileError):
        load_tasks(path)


@pytest.mark.asyncio
async def test_source_reports_missing_file(tmp_path: Path) -> None:
    source = JsonFileTaskSource(tmp_path / "missing.json")

    with pytest.raises(TaskFileError, match="not found"):
        await source.fetch_tasks()

    await source.perform_cleanup()


@pytest.mark.asyncio
async def test_source_rereads_file(tmp_path: Path) -> None:
    path = _write(tmp_path / "tasks.json", [{"title": "A"}])
    source = JsonFileTaskSource(path)
    assert [t.title for t in await source.fetch_tasks()] == ["A"]

    _write(path, [{"title": "A"}, {"title": "B"}])
    assert [t.title for t in await source.fetch_tasks()] == ["A", "B"]
