# tests/test_filtering.py

from __future__ import annotations

from datetime import datetime, timedelta

import pytest

from study_planner.tasks.filtering import filter_tasks, sort_tasks
from study_planner.tasks.status import due_datetime, is_overdue, task_status
from study_planner.tasks.task_models import TaskStatus

from .conftest import make_task


def test_yesterday_incomplete_is_overdue(now: datetime) -> None:
    yesterday = (now - timedelta(days=1)).date().isoformat()
    t = make_task("1", date=yesterday)
    assert is_overdue(t, now) is True
    assert task_status(t, now) == TaskStatus.OVERDUE


def test_completed_is_never_overdue(now: datetime) -> None:
    t = make_task("1", date="2020-01-01", completed=True)
    assert is_overdue(t, now) is False
    assert task_status(t, now) == TaskStatus.COMPLETED


def test_overdue_uses_time_of_day(now: datetime) -> None:
    earlier_today = make_task("1", date="2026-10-19", time="11:59")
    later_today = make_task("2", date="2026-10-19", time="12:01")
    assert task_status(earlier_today, now) == TaskStatus.OVERDUE
    assert task_status(later_today, now) == TaskStatus.PENDING


def test_due_exactly_now_is_not_overdue(now: datetime) -> None:
    t = make_task("1", date="2026-10-19", time="12:00")
    assert due_datetime(t) == now
    assert task_status(t, now) == TaskStatus.PENDING


def test_status_is_recomputed_as_time_advances(now: datetime) -> None:
    t = make_task("1", date="2026-10-20", time="09:00")
    assert task_status(t, now) == TaskStatus.PENDING
    assert task_status(t, now + timedelta(days=2)) == TaskStatus.OVERDUE


def test_all_all_returns_whole_collection_sorted(now: datetime) -> None:
    tasks = [
        make_task("late", date="2026-11-01"),
        make_task("soon", date="2026-10-20"),
        make_task("over", date="2026-10-10"),
        make_task("done", date="2026-10-01", completed=True),
    ]
    out = filter_tasks(tasks, now=now)
    assert [t.id for t in out] == ["over", "done", "soon", "late"]


def test_sort_is_stable_for_overdue_ties(now: datetime) -> None:
    a = make_task("A", date="2026-10-15")
    b = make_task("B", date="2026-10-15")
    c = make_task("C", date="2026-10-14", completed=True)
    assert [t.id for t in sort_tasks([a, b, c], now)] == ["A", "B", "C"]
    assert [t.id for t in sort_tasks([b, a, c], now)] == ["B", "A", "C"]


def test_same_date_keeps_collection_order(now: datetime) -> None:
    tasks = [make_task(str(i), date="2026-10-25", time=f"{20 - i:02d}:00") for i in range(5)]
    assert [t.id for t in sort_tasks(tasks, now)] == ["0", "1", "2", "3", "4"]


def test_subject_filter_is_exact(now: datetime) -> None:
    tasks = [
        make_task("1", date="2026-10-25", subject="Math"),
        make_task("2", date="2026-10-25", subject="math"),
        make_task("3", date="2026-10-25", subject="Science"),
    ]
    assert [t.id for t in filter_tasks(tasks, now=now, subject="Math")] == ["1"]


@pytest.mark.parametrize(
    ("status", "expected"),
    [
        ("completed", ["done"]),
        ("overdue", ["over"]),
        ("pending", ["soon"]),
    ],
)
def test_status_filter(now: datetime, status: str, expected: list[str]) -> None:
    tasks = [
        make_task("soon", date="2026-10-20"),
        make_task("over", date="2026-10-10"),
        make_task("done", date="2026-10-10", completed=True),
    ]
    assert [t.id for t in filter_tasks(tasks, now=now, status=status)] == expected


def test_subject_and_status_combine(now: datetime) -> None:
    tasks = [
        make_task("1", date="2026-10-10", subject="Math"),
        make_task("2", date="2026-10-10", subject="Science"),
        make_task("3", date="2026-10-30", subject="Math"),
    ]
    out = filter_tasks(tasks, now=now, subject="Math", status="overdue")
    assert [t.id for t in out] == ["1"]


def test_unknown_status_filter_raises(now: datetime) -> None:
    with pytest.raises(ValueError):
        filter_tasks([], now=now, status="someday")
