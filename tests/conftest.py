# tests/conftest.py

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from types import SimpleNamespace

import pytest

from study_planner.core.state import AppState
from study_planner.tasks.calendar_grid import MonthCursor
from study_planner.tasks.task_api import TaskPlanner
from study_planner.tasks.task_models import Priority, Task
from study_planner.tasks.task_store import TaskStore

from .fakes import RecordingNotifier

# Fixed evaluation time for deterministic tests: Monday 2026-10-19 12:00.
NOW = datetime(2026, 10, 19, 12, 0)


def make_task(
    task_id: str,
    *,
    date: str,
    time: str = "23:59",
    name: str | None = None,
    subject: str = "Math",
    priority: Priority = Priority.MEDIUM,
    completed: bool = False,
) -> Task:
    return Task(
        id=task_id,
        name=name or f"task {task_id}",
        subject=subject,
        date=date,
        time=time,
        priority=priority,
        completed=completed,
        created_at="2026-10-01T09:00:00",
        completed_at="2026-10-02T09:00:00" if completed else None,
    )


@pytest.fixture()
def now() -> datetime:
    return NOW


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and bootstrap.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="study-planner-test",
        data_dir=tmp_path,
        db_path=tmp_path / "planner.sqlite3",
        storage_key="studyPlannerTasks",
        reminders_enabled=False,
        reminder_interval_seconds=60.0,
        notification_ttl_seconds=4.0,
        subjects=["Math", "Science", "Other"],
    )


@pytest.fixture()
def store(settings: SimpleNamespace) -> TaskStore:
    # Real SQLite store: its round-trip behaviour is part of what we test.
    return TaskStore(settings.db_path, storage_key=settings.storage_key)


@pytest.fixture()
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture()
def planner(store: TaskStore, notifier: RecordingNotifier) -> TaskPlanner:
    return TaskPlanner(store, notifier)


@pytest.fixture()
def state(settings: SimpleNamespace, store: TaskStore, planner: TaskPlanner, notifier: RecordingNotifier) -> AppState:
    return AppState(
        settings=settings,
        task_store=store,
        planner=planner,
        notifier=notifier,
        calendar_month=MonthCursor(2026, 10),
    )
