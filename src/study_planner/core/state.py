# src/study_planner/core/state.py

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from datetime import date
from typing import Any

from ..tasks.calendar_grid import MonthCursor
from ..tasks.filtering import ALL
from ..tasks.task_api import TaskPlanner
from ..tasks.task_store import TaskStore
from .ports import Notifier


@dataclass
class AppState:
    # Store Settings on the state for easy access in other modules later.
    settings: Any

    task_store: TaskStore
    planner: TaskPlanner
    notifier: Notifier

    # Displayed calendar month and task-list filters (view state, not persisted).
    calendar_month: MonthCursor = field(default_factory=lambda: MonthCursor.for_date(date.today()))
    subject_filter: str = ALL
    status_filter: str = ALL

    # Held by every command and every reminder scan (run-to-completion).
    lock: threading.RLock = field(default_factory=threading.RLock)

    def change_month(self, direction: int) -> MonthCursor:
        self.calendar_month = self.calendar_month.shift(direction)
        return self.calendar_month
