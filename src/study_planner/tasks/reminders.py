# src/study_planner/tasks/reminders.py

from __future__ import annotations

"""
Reminder scan.

A small polling loop that:
- looks at every incomplete task's time-to-due,
- raises a warning once the task enters the 24-hour window,
- raises an error-class reminder once it enters the 1-hour window.

Each reminder fires once per task, on the first scan that sees the task
inside its window (a scan interval can never skip a boundary). The loop
only reads tasks; it never mutates them.
"""

import asyncio
import contextlib
import logging
import math
import threading
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import Enum
from typing import TYPE_CHECKING

from ..core.notifications import DEFAULT_TTL_SECONDS, Notification, NotificationLevel
from ..core.ports import Notifier
from .status import due_datetime
from .task_models import Task

if TYPE_CHECKING:
    from .task_api import TaskPlanner

logger = logging.getLogger(__name__)

DAY_WINDOW = timedelta(hours=24)
HOUR_WINDOW = timedelta(hours=1)


class ReminderKind(str, Enum):
    DAY = "24h"
    HOUR = "1h"


@dataclass(frozen=True, slots=True)
class Reminder:
    task_id: str
    kind: ReminderKind
    hours_left: int
    text: str

    @property
    def level(self) -> NotificationLevel:
        return NotificationLevel.ERROR if self.kind == ReminderKind.HOUR else NotificationLevel.WARNING

    def to_notification(self, *, at: datetime, ttl_seconds: float = DEFAULT_TTL_SECONDS) -> Notification:
        return Notification(message=self.text, level=self.level, created_at=at, ttl_seconds=ttl_seconds)


@dataclass(slots=True)
class ReminderLedger:
    """Remembers which (task, kind) reminders were already raised this session."""

    sent: set[tuple[str, ReminderKind]] = field(default_factory=set)

    def was_sent(self, task_id: str, kind: ReminderKind) -> bool:
        return (task_id, kind) in self.sent

    def mark(self, task_id: str, kind: ReminderKind) -> None:
        self.sent.add((task_id, kind))

    def forget_missing(self, live_ids: Iterable[str]) -> None:
        live = set(live_ids)
        self.sent = {entry for entry in self.sent if entry[0] in live}


def _hours_left(diff: timedelta) -> int:
    return math.ceil(diff / timedelta(hours=1))


def due_reminders(tasks: Iterable[Task], now: datetime, *, ledger: ReminderLedger) -> list[Reminder]:
    """
    Reminders due at `now`, marking them in `ledger`.

    Inside the 1-hour window the 24-hour reminder is considered covered and
    is not raised afterwards.
    """
    out: list[Reminder] = []
    for task in tasks:
        if task.completed:
            continue
        try:
            diff = due_datetime(task) - now
        except ValueError:
            logger.debug("Skipping task with unparseable due date id=%s", task.id)
            continue
        if diff <= timedelta(0):
            continue

        if diff <= HOUR_WINDOW:
            if not ledger.was_sent(task.id, ReminderKind.HOUR):
                out.append(
                    Reminder(
                        task_id=task.id,
                        kind=ReminderKind.HOUR,
                        hours_left=1,
                        text=f'Urgent: "{task.name}" is due in 1 hour!',
                    )
                )
                ledger.mark(task.id, ReminderKind.HOUR)
            ledger.mark(task.id, ReminderKind.DAY)
            continue

        if diff <= DAY_WINDOW and not ledger.was_sent(task.id, ReminderKind.DAY):
            hours = _hours_left(diff)
            out.append(
                Reminder(
                    task_id=task.id,
                    kind=ReminderKind.DAY,
                    hours_left=hours,
                    text=f'Reminder: "{task.name}" is due in {hours} hours!',
                )
            )
            ledger.mark(task.id, ReminderKind.DAY)

    return out


def scan_once(
    planner: TaskPlanner,
    notifier: Notifier,
    *,
    now: datetime,
    ledger: ReminderLedger,
    ttl_seconds: float = DEFAULT_TTL_SECONDS,
) -> list[Reminder]:
    """One pass of the reminder scan: compute and deliver due reminders."""
    tasks = planner.tasks
    ledger.forget_missing(t.id for t in tasks)
    reminders = due_reminders(tasks, now, ledger=ledger)
    for r in reminders:
        logger.info("Reminder task_id=%s kind=%s hours_left=%s", r.task_id, r.kind.value, r.hours_left)
        notifier.notify(r.to_notification(at=now, ttl_seconds=ttl_seconds))
    return reminders


async def run_reminder_scheduler(
    planner: TaskPlanner,
    notifier: Notifier,
    *,
    interval_seconds: float = 60.0,
    ledger: ReminderLedger | None = None,
    clock: Callable[[], datetime] = datetime.now,
    lock: threading.RLock | None = None,
    ttl_seconds: float = DEFAULT_TTL_SECONDS,
) -> None:
    """
    Simple polling scheduler.

    Scans once immediately, then every interval_seconds. Scan failures are
    logged and the loop keeps going. `lock`, when given, is held for the
    duration of each scan so it never interleaves with a user command.

    To stop the scheduler, cancel the coroutine/task.
    """
    sleep_s = max(0.01, float(interval_seconds))
    ledger = ledger if ledger is not None else ReminderLedger()

    while True:
        try:
            if lock is not None:
                with lock:
                    scan_once(planner, notifier, now=clock(), ledger=ledger, ttl_seconds=ttl_seconds)
            else:
                scan_once(planner, notifier, now=clock(), ledger=ledger, ttl_seconds=ttl_seconds)
        except Exception:
            logger.exception("Reminder scan failed")

        await asyncio.sleep(sleep_s)


@dataclass
class ReminderBackgroundRunner:
    thread: threading.Thread
    loop: asyncio.AbstractEventLoop
    task: asyncio.Task

    def stop(self) -> None:
        try:
            self.loop.call_soon_threadsafe(self.task.cancel)
        except RuntimeError:
            logger.debug("Reminder loop already closed.", exc_info=True)

    def join(self, timeout: float | None = None) -> None:
        self.thread.join(timeout=timeout)


def start_reminders_in_background(
    planner: TaskPlanner,
    notifier: Notifier,
    *,
    interval_seconds: float = 60.0,
    lock: threading.RLock | None = None,
    ttl_seconds: float = DEFAULT_TTL_SECONDS,
) -> ReminderBackgroundRunner | None:
    """
    Run the reminder scheduler in a daemon thread with its own event loop.

    The console REPL blocks on input(), so the scheduler needs its own thread.
    """
    ready = threading.Event()
    holder: dict[str, object] = {}

    def runner() -> None:
        loop = asyncio.new_event_loop()
        asyncio.set_event_loop(loop)
        task = loop.create_task(
            run_reminder_scheduler(
                planner,
                notifier,
                interval_seconds=interval_seconds,
                lock=lock,
                ttl_seconds=ttl_seconds,
            )
        )
        holder["loop"] = loop
        holder["task"] = task
        ready.set()

        try:
            with contextlib.suppress(asyncio.CancelledError):
                loop.run_until_complete(task)
        finally:
            with contextlib.suppress(Exception):
                loop.close()
            logger.info("Reminder scheduler stopped.")

    t = threading.Thread(target=runner, name="reminders", daemon=True)
    t.start()

    ready.wait(timeout=5.0)
    loop = holder.get("loop")
    task = holder.get("task")

    if not isinstance(loop, asyncio.AbstractEventLoop) or not isinstance(task, asyncio.Task):
        logger.error("Reminder thread did not initialize properly.")
        return None

    logger.info("Reminder scheduler started (every %.0fs).", interval_seconds)
    return ReminderBackgroundRunner(thread=t, loop=loop, task=task)
