# src/study_planner/tasks/task_models.py

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date, datetime
from enum import StrEnum
from typing import Any

DEFAULT_TIME = "23:59"
DEFAULT_DURATION = 1.0


class Priority(StrEnum):
    """Task priority. Only affects presentation color and sort weighting."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @classmethod
    def from_raw(cls, raw: str | None) -> Priority:
        if not raw:
            return cls.MEDIUM
        try:
            return cls(str(raw).strip().lower())
        except ValueError:
            return cls.MEDIUM


class TaskStatus(StrEnum):
    """
    Derived task status.

    Never stored on the Task: "overdue" depends on the evaluation time,
    see tasks/status.py.
    """

    COMPLETED = "completed"
    OVERDUE = "overdue"
    PENDING = "pending"


@dataclass(slots=True)
class Task:
    id: str
    name: str
    subject: str
    date: str  # YYYY-MM-DD
    time: str = DEFAULT_TIME  # HH:MM
    duration: float = DEFAULT_DURATION  # hours
    priority: Priority = Priority.MEDIUM
    notes: str = ""
    completed: bool = False
    created_at: str = ""
    completed_at: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Serialize using the stored (camelCase) field names."""
        out: dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "subject": self.subject,
            "date": self.date,
            "time": self.time,
            "duration": self.duration,
            "priority": self.priority.value,
            "notes": self.notes,
            "completed": self.completed,
            "createdAt": self.created_at,
        }
        if self.completed_at is not None:
            out["completedAt"] = self.completed_at
        return out

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> Task:
        """
        Build a Task from a stored record.

        Optional fields fall back to their defaults. Raises ValueError if
        id, name or date is missing, or if date or time cannot be parsed.
        """
        for key in ("id", "name", "date"):
            if not raw.get(key):
                raise ValueError(f"task record is missing {key!r}")

        due_date = str(raw["date"])
        due_time = str(raw.get("time") or DEFAULT_TIME)
        try:
            date.fromisoformat(due_date)
        except ValueError:
            raise ValueError(f"task record has invalid date {due_date!r}") from None
        try:
            datetime.strptime(due_time, "%H:%M")
        except ValueError:
            raise ValueError(f"task record has invalid time {due_time!r}") from None

        duration_raw = raw.get("duration")
        try:
            duration = float(duration_raw) if duration_raw not in (None, "") else DEFAULT_DURATION
        except (TypeError, ValueError):
            duration = DEFAULT_DURATION
        if not math.isfinite(duration) or duration <= 0:
            duration = DEFAULT_DURATION

        # Only a JSON true counts; strings like "false" must not.
        completed = raw.get("completed") is True
        completed_at = raw.get("completedAt") if completed else None

        return cls(
            id=str(raw["id"]),
            name=str(raw["name"]),
            subject=str(raw.get("subject") or ""),
            date=due_date,
            time=due_time,
            duration=duration,
            priority=Priority.from_raw(raw.get("priority")),
            notes=str(raw.get("notes") or ""),
            completed=completed,
            created_at=str(raw.get("createdAt") or ""),
            completed_at=str(completed_at) if completed_at else None,
        )
