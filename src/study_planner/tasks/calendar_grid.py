# src/study_planner/tasks/calendar_grid.py

"""
Month calendar geometry.

A grid is 7 weekday headers followed by day cells, Sunday first:
- trailing days of the previous month,
- every day of the current month (annotated with tasks due that day),
- leading days of the next month, padding the cells to a multiple of 7.
"""

from __future__ import annotations

import calendar
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date

from .task_models import Priority, Task

WEEKDAY_HEADERS: tuple[str, ...] = ("Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat")
MAX_MARKERS_PER_DAY = 3

PRIORITY_COLORS: dict[Priority, str] = {
    Priority.HIGH: "#f44336",
    Priority.MEDIUM: "#ff9800",
    Priority.LOW: "#4caf50",
}


def priority_color(priority: Priority | str) -> str:
    try:
        return PRIORITY_COLORS[Priority(priority)]
    except ValueError:
        return PRIORITY_COLORS[Priority.MEDIUM]


@dataclass(frozen=True, slots=True)
class TaskMarker:
    task_id: str
    priority: Priority
    color: str


@dataclass(frozen=True, slots=True)
class DayCell:
    day: int
    in_month: bool
    date: date | None = None  # set for current-month cells only
    is_today: bool = False
    task_count: int = 0
    markers: tuple[TaskMarker, ...] = ()

    @property
    def has_tasks(self) -> bool:
        return self.task_count > 0


@dataclass(frozen=True, slots=True)
class CalendarGrid:
    year: int
    month: int
    headers: tuple[str, ...]
    cells: tuple[DayCell, ...]

    @property
    def title(self) -> str:
        return f"{calendar.month_name[self.month]} {self.year}"

    def weeks(self) -> list[tuple[DayCell, ...]]:
        return [self.cells[i : i + 7] for i in range(0, len(self.cells), 7)]


@dataclass(frozen=True, slots=True)
class MonthCursor:
    """The (year, month) currently displayed by the calendar view."""

    year: int
    month: int

    @classmethod
    def for_date(cls, d: date) -> MonthCursor:
        return cls(year=d.year, month=d.month)

    def shift(self, months: int) -> MonthCursor:
        index = self.year * 12 + (self.month - 1) + int(months)
        return MonthCursor(year=index // 12, month=index % 12 + 1)


def first_weekday(year: int, month: int) -> int:
    """Weekday of the 1st, 0=Sunday .. 6=Saturday."""
    return (date(year, month, 1).weekday() + 1) % 7


def days_in_month(year: int, month: int) -> int:
    return calendar.monthrange(year, month)[1]


def build_month_grid(
    year: int,
    month: int,
    tasks: Sequence[Task],
    *,
    today: date,
) -> CalendarGrid:
    if not 1 <= month <= 12:
        raise ValueError(f"month out of range: {month}")

    lead = first_weekday(year, month)
    n_days = days_in_month(year, month)
    prev = MonthCursor(year, month).shift(-1)
    n_prev = days_in_month(prev.year, prev.month)

    by_date: dict[str, list[Task]] = {}
    for t in tasks:
        by_date.setdefault(t.date, []).append(t)

    cells: list[DayCell] = []

    for day in range(n_prev - lead + 1, n_prev + 1):
        cells.append(DayCell(day=day, in_month=False))

    for day in range(1, n_days + 1):
        d = date(year, month, day)
        day_tasks = by_date.get(d.isoformat(), [])
        markers = tuple(
            TaskMarker(task_id=t.id, priority=t.priority, color=priority_color(t.priority))
            for t in day_tasks[:MAX_MARKERS_PER_DAY]
        )
        cells.append(
            DayCell(
                day=day,
                in_month=True,
                date=d,
                is_today=(d == today),
                task_count=len(day_tasks),
                markers=markers,
            )
        )

    trailing = (-len(cells)) % 7
    for day in range(1, trailing + 1):
        cells.append(DayCell(day=day, in_month=False))

    return CalendarGrid(year=year, month=month, headers=WEEKDAY_HEADERS, cells=tuple(cells))
