# src/study_planner/tasks/task_api.py

from __future__ import annotations

import logging
import math
from datetime import datetime

from ..core.notifications import DEFAULT_TTL_SECONDS, Notification, NotificationLevel
from ..core.ports import ConfirmGate, Notifier, TaskRepo
from .status import parse_due_date, parse_due_time
from .task_models import DEFAULT_DURATION, DEFAULT_TIME, Priority, Task

logger = logging.getLogger(__name__)

OTHER_SUBJECT = "Other"
DELETE_CONFIRM_MESSAGE = "Are you sure you want to delete this task?"
REQUIRED_FIELDS_MESSAGE = "Please fill in all required fields"


class TaskValidationError(ValueError):
    """Raised by add_task when the submitted fields are incomplete or malformed."""

    def __init__(self, missing: list[str], problems: list[str] | None = None) -> None:
        self.missing = list(missing)
        self.problems = list(problems or [])
        parts: list[str] = []
        if self.missing:
            parts.append("missing: " + ", ".join(self.missing))
        parts.extend(self.problems)
        super().__init__("; ".join(parts) or "invalid task")

    @property
    def user_message(self) -> str:
        if self.missing:
            return REQUIRED_FIELDS_MESSAGE
        return "; ".join(self.problems)


def _parse_duration(raw: float | str | None) -> float:
    if raw is None or (isinstance(raw, str) and not raw.strip()):
        return DEFAULT_DURATION
    value = float(raw)
    if not math.isfinite(value) or value <= 0:
        raise ValueError("duration must be a positive finite number")
    return value


class TaskPlanner:
    """
    Owns the in-memory task collection and its three mutation entry points.

    Every successful mutation persists the full collection through the repo and
    reports a notification through the notifier.
    """

    def __init__(
        self,
        repo: TaskRepo,
        notifier: Notifier | None = None,
        *,
        notification_ttl_seconds: float = DEFAULT_TTL_SECONDS,
    ) -> None:
        self._repo = repo
        self._notifier = notifier
        self._ttl = notification_ttl_seconds
        self._tasks: list[Task] = repo.load()
        logger.info("TaskPlanner loaded %d tasks", len(self._tasks))

    # ---- queries ----

    @property
    def tasks(self) -> tuple[Task, ...]:
        return tuple(self._tasks)

    def get(self, task_id: str) -> Task | None:
        for t in self._tasks:
            if t.id == task_id:
                return t
        return None

    def subjects(self) -> list[str]:
        """Distinct subjects in the collection, sorted (for the subject filter)."""
        return sorted({t.subject for t in self._tasks})

    def reload(self) -> None:
        """Replace the in-memory collection with what the repo currently holds."""
        self._tasks = self._repo.load()
        logger.debug("TaskPlanner reloaded %d tasks", len(self._tasks))

    # ---- helpers ----

    def _notify(self, message: str, level: NotificationLevel = NotificationLevel.SUCCESS) -> None:
        if self._notifier is None:
            return
        self._notifier.notify(Notification(message=message, level=level, ttl_seconds=self._ttl))

    def _persist(self) -> None:
        self._repo.save(self._tasks)

    def _new_id(self, now: datetime) -> str:
        candidate = int(now.timestamp() * 1000)
        taken = {t.id for t in self._tasks}
        while str(candidate) in taken:
            candidate += 1
        return str(candidate)

    # ---- mutations ----

    def add_task(
        self,
        *,
        name: str,
        subject: str,
        date: str,
        now: datetime,
        custom_subject: str = "",
        time: str = "",
        duration: float | str | None = None,
        priority: Priority | str = Priority.MEDIUM,
        notes: str = "",
    ) -> Task:
        name = (name or "").strip()
        subject = (subject or "").strip()
        custom_subject = (custom_subject or "").strip()
        date = (date or "").strip()
        time = (time or "").strip()

        missing: list[str] = []
        if not name:
            missing.append("name")
        if not date:
            missing.append("date")
        if not subject and not custom_subject:
            missing.append("subject")

        resolved_subject = custom_subject if subject == OTHER_SUBJECT else (subject or custom_subject)
        if not missing and not resolved_subject:
            missing.append("custom subject")

        problems: list[str] = []
        if date:
            try:
                parse_due_date(date)
            except ValueError:
                problems.append(f"invalid date {date!r} (expected YYYY-MM-DD)")
        if time:
            try:
                parse_due_time(time)
            except ValueError:
                problems.append(f"invalid time {time!r} (expected HH:MM)")
        try:
            duration_h = _parse_duration(duration)
        except ValueError:
            duration_h = DEFAULT_DURATION
            problems.append(f"invalid duration {duration!r} (expected a positive number of hours)")
        try:
            prio = Priority(str(priority).strip().lower()) if priority else Priority.MEDIUM
        except ValueError:
            prio = Priority.MEDIUM
            problems.append(f"invalid priority {priority!r} (expected low, medium or high)")

        if missing or problems:
            err = TaskValidationError(missing, problems)
            logger.debug("add_task rejected: %s", err)
            self._notify(err.user_message, NotificationLevel.ERROR)
            raise err

        task = Task(
            id=self._new_id(now),
            name=name,
            subject=resolved_subject,
            date=date,
            time=time or DEFAULT_TIME,
            duration=duration_h,
            priority=prio,
            notes=(notes or "").strip(),
            completed=False,
            created_at=now.isoformat(),
        )
        self._tasks.append(task)
        self._persist()
        logger.info("Task added id=%s subject=%s due=%s %s", task.id, task.subject, task.date, task.time)
        self._notify("Task added successfully!")
        return task

    def toggle_complete(self, task_id: str, *, now: datetime) -> Task | None:
        task = self.get(task_id)
        if task is None:
            logger.debug("toggle_complete: no task id=%s", task_id)
            return None

        task.completed = not task.completed
        task.completed_at = now.isoformat() if task.completed else None
        self._persist()
        logger.info("Task %s -> %s", task.id, "completed" if task.completed else "pending")
        self._notify("Task completed!" if task.completed else "Task marked as pending")
        return task

    def delete_task(self, task_id: str, *, confirm: ConfirmGate) -> bool:
        if not confirm(DELETE_CONFIRM_MESSAGE):
            logger.debug("delete_task declined id=%s", task_id)
            return False

        task = self.get(task_id)
        if task is None:
            logger.debug("delete_task: no task id=%s", task_id)
            return False

        self._tasks = [t for t in self._tasks if t.id != task_id]
        self._persist()
        logger.info("Task deleted id=%s", task_id)
        self._notify("Task deleted")
        return True
