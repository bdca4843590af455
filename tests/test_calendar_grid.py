# tests/test_calendar_grid.py

from __future__ import annotations

from datetime import date

import pytest

from study_planner.tasks.calendar_grid import (
    PRIORITY_COLORS,
    WEEKDAY_HEADERS,
    MonthCursor,
    build_month_grid,
    first_weekday,
    priority_color,
)
from study_planner.tasks.task_models import Priority

from .conftest import make_task

TODAY = date(2026, 10, 19)


def test_october_2026_layout() -> None:
    grid = build_month_grid(2026, 10, [], today=TODAY)

    assert grid.headers == WEEKDAY_HEADERS
    assert grid.title == "October 2026"
    assert first_weekday(2026, 10) == 4  # Thursday

    leading = [c.day for c in grid.cells[:4]]
    assert leading == [27, 28, 29, 30]
    assert all(not c.in_month for c in grid.cells[:4])
    assert [c.day for c in grid.cells[4:]] == list(range(1, 32))
    assert len(grid.cells) == 35


def test_trailing_cells_pad_to_full_week() -> None:
    # November 2026 starts on Sunday and has 30 days -> 5 trailing cells.
    grid = build_month_grid(2026, 11, [], today=TODAY)
    assert first_weekday(2026, 11) == 0
    assert grid.cells[0].day == 1 and grid.cells[0].in_month
    trailing = [c.day for c in grid.cells if not c.in_month]
    assert trailing == [1, 2, 3, 4, 5]


@pytest.mark.parametrize("year", [2023, 2024, 2025, 2026, 2100, 2000])
def test_cell_count_is_multiple_of_seven(year: int) -> None:
    for month in range(1, 13):
        grid = build_month_grid(year, month, [], today=TODAY)
        assert len(grid.cells) % 7 == 0
        assert sum(1 for c in grid.cells if c.in_month) == len(
            [d for d in range(1, 32) if _valid(year, month, d)]
        )


def _valid(year: int, month: int, day: int) -> bool:
    try:
        date(year, month, day)
    except ValueError:
        return False
    return True


def test_february_leap_and_non_leap() -> None:
    leap = build_month_grid(2024, 2, [], today=TODAY)
    plain = build_month_grid(2026, 2, [], today=TODAY)
    assert max(c.day for c in leap.cells if c.in_month) == 29
    assert max(c.day for c in plain.cells if c.in_month) == 28
    # February 2026 starts on Sunday: exactly four rows, no padding.
    assert len(plain.cells) == 28


def test_january_leading_cells_come_from_december() -> None:
    grid = build_month_grid(2027, 1, [], today=TODAY)
    lead = first_weekday(2027, 1)
    assert [c.day for c in grid.cells[:lead]] == list(range(31 - lead + 1, 32))


def test_markers_by_exact_date_and_capped_at_three() -> None:
    tasks = [
        make_task("1", date="2026-10-20", priority=Priority.HIGH),
        make_task("2", date="2026-10-20", priority=Priority.LOW),
        make_task("3", date="2026-10-20"),
        make_task("4", date="2026-10-20", priority=Priority.HIGH),
        make_task("5", date="2026-11-20"),
    ]
    grid = build_month_grid(2026, 10, tasks, today=TODAY)
    cell = next(c for c in grid.cells if c.in_month and c.day == 20)

    assert cell.task_count == 4
    assert cell.has_tasks
    assert [m.task_id for m in cell.markers] == ["1", "2", "3"]
    assert [m.color for m in cell.markers] == ["#f44336", "#4caf50", "#ff9800"]

    other = next(c for c in grid.cells if c.in_month and c.day == 21)
    assert other.markers == () and not other.has_tasks


def test_today_flag() -> None:
    grid = build_month_grid(2026, 10, [], today=TODAY)
    flagged = [c for c in grid.cells if c.is_today]
    assert len(flagged) == 1 and flagged[0].date == TODAY

    elsewhere = build_month_grid(2026, 9, [], today=TODAY)
    assert not any(c.is_today for c in elsewhere.cells)


def test_weeks_split_rows() -> None:
    grid = build_month_grid(2026, 10, [], today=TODAY)
    weeks = grid.weeks()
    assert len(weeks) == 5
    assert all(len(w) == 7 for w in weeks)


def test_month_cursor_wraps_years() -> None:
    assert MonthCursor(2026, 12).shift(1) == MonthCursor(2027, 1)
    assert MonthCursor(2026, 1).shift(-1) == MonthCursor(2025, 12)
    assert MonthCursor(2026, 10).shift(-22) == MonthCursor(2024, 12)
    assert MonthCursor(2026, 10).shift(0) == MonthCursor(2026, 10)


def test_priority_color_falls_back_to_medium() -> None:
    assert priority_color("high") == PRIORITY_COLORS[Priority.HIGH]
    assert priority_color("unknown") == PRIORITY_COLORS[Priority.MEDIUM]


def test_rejects_invalid_month() -> None:
    with pytest.raises(ValueError):
        build_month_grid(2026, 13, [], today=TODAY)
