# src/study_planner/tasks/filtering.py

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime

from .status import is_overdue, parse_due_date, task_status
from .task_models import Task, TaskStatus

ALL = "all"


def sort_tasks(tasks: Iterable[Task], now: datetime) -> list[Task]:
    """
    Display order: overdue-and-incomplete tasks first, then ascending by due date.

    Ties keep collection order (sorted() is stable).
    """

    def key(t: Task) -> tuple[int, object]:
        bucket = 0 if (not t.completed and is_overdue(t, now)) else 1
        return bucket, parse_due_date(t.date)

    return sorted(tasks, key=key)


def filter_tasks(
    tasks: Iterable[Task],
    *,
    now: datetime,
    subject: str = ALL,
    status: str = ALL,
) -> list[Task]:
    """
    Select the displayable subset for a subject filter and a status filter.

    subject: "all" or an exact subject string.
    status:  "all" or one of completed / pending / overdue (derived at `now`).
    """
    wanted: TaskStatus | None = None
    if status != ALL:
        try:
            wanted = TaskStatus(status)
        except ValueError:
            raise ValueError(f"unknown status filter: {status!r}") from None

    out = list(tasks)
    if subject != ALL:
        out = [t for t in out if t.subject == subject]
    if wanted is not None:
        out = [t for t in out if task_status(t, now) == wanted]

    return sort_tasks(out, now)
