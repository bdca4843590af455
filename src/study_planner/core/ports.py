# src/study_planner/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The planner and the reminder loop depend on Protocols instead of concrete
implementations, so the console can be swapped for another view and tests
can use fakes.
"""

from collections.abc import Iterable
from typing import Protocol

from ..tasks.task_models import Task
from .notifications import Notification


class TaskRepo(Protocol):
    """Single persistent slot holding the whole task collection."""

    def load(self) -> list[Task]: ...
    def save(self, tasks: Iterable[Task]) -> None: ...


class Notifier(Protocol):
    """Presentation-side port: show a transient notification."""

    def notify(self, notification: Notification) -> None: ...


class ConfirmGate(Protocol):
    """Ask the user a yes/no question; True means confirmed."""

    def __call__(self, message: str) -> bool: ...
