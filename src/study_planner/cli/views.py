# src/study_planner/cli/views.py

"""
Plain-text renderings of the three views (dashboard, task list, calendar).

Everything here is a pure function of already-derived data plus `now`;
printing is left to the connector.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import date, datetime

from ..core.notifications import Notification
from ..tasks.calendar_grid import CalendarGrid, DayCell
from ..tasks.dashboard import DashboardSummary, UpcomingTask
from ..tasks.status import is_overdue, parse_due_date, task_status
from ..tasks.task_models import Priority, Task

PRIORITY_MARKS = {Priority.HIGH: "!", Priority.MEDIUM: "*", Priority.LOW: "."}
PROGRESS_BAR_WIDTH = 30
CELL_WIDTH = 7


def format_date(raw: str) -> str:
    """'2026-10-19' -> 'Mon, Oct 19, 2026' (falls back to the raw string)."""
    try:
        d = parse_due_date(raw)
    except ValueError:
        return raw
    return f"{d:%a, %b} {d.day}, {d.year}"


def _hours(duration: float) -> str:
    return f"{duration:g} hours"


def progress_bar(percentage: int, width: int = PROGRESS_BAR_WIDTH) -> str:
    pct = max(0, min(100, percentage))
    filled = round(width * pct / 100)
    return "[" + "#" * filled + "-" * (width - filled) + f"] {pct}% Complete"


def render_upcoming(item: UpcomingTask, now: datetime) -> str:
    t = item.task
    flag = " (overdue)" if is_overdue(t, now) else ""
    return (
        f"  {PRIORITY_MARKS[t.priority]} {t.name} [{t.subject}]{flag}\n"
        f"      Due: {format_date(t.date)} {t.time} | Days left: {item.days_label}"
        f" | Duration: {_hours(t.duration)}"
    )


def render_dashboard(summary: DashboardSummary, now: datetime) -> str:
    lines = [
        "Dashboard",
        f"  Total: {summary.total}  Completed: {summary.completed}  "
        f"Pending: {summary.pending}  Overdue: {summary.overdue}",
        "  " + progress_bar(summary.progress_percentage),
        "",
        "Upcoming (next 7 days):",
    ]
    if not summary.upcoming:
        lines.append("  No upcoming tasks")
    else:
        lines.extend(render_upcoming(u, now) for u in summary.upcoming)
    return "\n".join(lines)


def render_task(t: Task, now: datetime) -> str:
    status = task_status(t, now).value.capitalize()
    out = (
        f"  [{t.id}] {PRIORITY_MARKS[t.priority]} {t.name} [{t.subject}]\n"
        f"      Due: {format_date(t.date)} {t.time} | Duration: {_hours(t.duration)}"
        f" | Priority: {t.priority.value} | Status: {status}"
    )
    if t.notes:
        out += f"\n      Notes: {t.notes}"
    return out


def render_task_list(tasks: Sequence[Task], now: datetime, *, subject: str, status: str) -> str:
    header = f"Tasks (subject={subject}, status={status}):"
    if not tasks:
        return header + "\n  No tasks found"
    return "\n".join([header, *(render_task(t, now) for t in tasks)])


def _render_cell(cell: DayCell) -> str:
    if not cell.in_month:
        return f"({cell.day:>2})".ljust(CELL_WIDTH)
    marks = "".join(PRIORITY_MARKS[m.priority] for m in cell.markers)
    text = f"{cell.day:>2}{marks}"
    if cell.is_today:
        text = f"[{text}]"
    return text.ljust(CELL_WIDTH)


def render_calendar(grid: CalendarGrid) -> str:
    lines = [grid.title.center(CELL_WIDTH * 7).rstrip()]
    lines.append("".join(h.ljust(CELL_WIDTH) for h in grid.headers).rstrip())
    for week in grid.weeks():
        lines.append("".join(_render_cell(c) for c in week).rstrip())
    lines.append("Markers: ! high, * medium, . low; (n) other month; [n] today")
    return "\n".join(lines)


def render_notification(n: Notification) -> str:
    return f"[{n.created_at:%Y-%m-%d %H:%M:%S}] [{n.level.value.upper()}] {n.message}"


def today_label(d: date) -> str:
    return f"Today is {format_date(d.isoformat())}"
