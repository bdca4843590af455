# src/study_planner/tasks/status.py

"""
Status derivation.

Status is a function of (task, now) and is recomputed on every evaluation;
nothing here caches on the Task. All datetimes are naive local time.
"""

from __future__ import annotations

from datetime import date, datetime, time

from .task_models import DEFAULT_TIME, Task, TaskStatus


def parse_due_date(raw: str) -> date:
    return date.fromisoformat(raw)


def parse_due_time(raw: str) -> time:
    return datetime.strptime(raw or DEFAULT_TIME, "%H:%M").time()


def due_datetime(task: Task) -> datetime:
    """Combined due date + time of day."""
    return datetime.combine(parse_due_date(task.date), parse_due_time(task.time))


def is_overdue(task: Task, now: datetime) -> bool:
    if task.completed:
        return False
    return due_datetime(task) < now


def task_status(task: Task, now: datetime) -> TaskStatus:
    if task.completed:
        return TaskStatus.COMPLETED
    if is_overdue(task, now):
        return TaskStatus.OVERDUE
    return TaskStatus.PENDING
