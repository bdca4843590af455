# src/study_planner/tasks/dashboard.py

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime, time, timedelta

from .status import is_overdue, parse_due_date
from .task_models import Task

UPCOMING_HORIZON_DAYS = 7
UPCOMING_LIMIT = 5


@dataclass(frozen=True, slots=True)
class UpcomingTask:
    task: Task
    days_until_due: int

    @property
    def days_label(self) -> str:
        if self.days_until_due == 0:
            return "Today"
        return f"{self.days_until_due} days"


@dataclass(frozen=True, slots=True)
class DashboardSummary:
    total: int
    completed: int
    pending: int
    overdue: int
    progress_percentage: int
    upcoming: tuple[UpcomingTask, ...]


def _round_half_up(x: float) -> int:
    return int(math.floor(x + 0.5))


def progress_percentage(tasks: Sequence[Task]) -> int:
    """Share of completed tasks in percent, 0 for an empty collection."""
    total = len(tasks)
    if total == 0:
        return 0
    completed = sum(1 for t in tasks if t.completed)
    return _round_half_up(100 * completed / total)


def upcoming_tasks(
    tasks: Sequence[Task],
    now: datetime,
    *,
    horizon_days: int = UPCOMING_HORIZON_DAYS,
    limit: int = UPCOMING_LIMIT,
) -> list[UpcomingTask]:
    """
    Incomplete tasks due within [today, today + horizon_days], earliest first.

    Window and day counts work on calendar dates: a task due today reports
    0 ("Today"), tomorrow 1, and so on.
    """
    first = now.date()
    last = (now + timedelta(days=horizon_days)).date()

    window = [
        t for t in tasks
        if not t.completed and first <= parse_due_date(t.date) <= last
    ]
    window.sort(key=lambda t: parse_due_date(t.date))

    out: list[UpcomingTask] = []
    for t in window[: max(0, limit)]:
        due_midnight = datetime.combine(parse_due_date(t.date), time.min)
        days = math.ceil((due_midnight - now) / timedelta(days=1))
        out.append(UpcomingTask(task=t, days_until_due=max(0, days)))
    return out


def summarize(tasks: Sequence[Task], now: datetime) -> DashboardSummary:
    total = len(tasks)
    completed = sum(1 for t in tasks if t.completed)
    overdue = sum(1 for t in tasks if not t.completed and is_overdue(t, now))
    return DashboardSummary(
        total=total,
        completed=completed,
        pending=total - completed,
        overdue=overdue,
        progress_percentage=progress_percentage(tasks),
        upcoming=tuple(upcoming_tasks(tasks, now)),
    )
