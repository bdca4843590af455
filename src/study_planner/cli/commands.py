# src/study_planner/cli/commands.py

from __future__ import annotations

import inspect
import logging
import shlex
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import cast

from ..core.state import AppState
from ..tasks.calendar_grid import MonthCursor, build_month_grid
from ..tasks.dashboard import summarize
from ..tasks.filtering import ALL, filter_tasks
from ..tasks.task_api import OTHER_SUBJECT, TaskValidationError
from ..tasks.task_models import Priority, TaskStatus
from . import views

logger = logging.getLogger(__name__)

STATUS_CHOICES = (ALL, *(s.value for s in TaskStatus))
ADD_FIELDS = ("name", "subject", "custom_subject", "date", "time", "duration", "priority", "notes")


def _never_confirm(message: str) -> bool:
    return False


def _no_prompt(message: str) -> str:
    return ""


@dataclass(slots=True)
class CommandContext:
    """What a handler may need from the connector besides the state."""

    now: datetime = field(default_factory=datetime.now)
    prompt: Callable[[str], str] = _no_prompt
    confirm: Callable[[str], bool] = _never_confirm

    @property
    def today(self) -> date:
        return self.now.date()


CommandHandler2 = Callable[[AppState, list[str]], str]
CommandHandler3 = Callable[[AppState, list[str], CommandContext], str]
CommandHandler = CommandHandler2 | CommandHandler3


class CommandRegistry:
    """Simple slash-command registry used by the console (/help, /add, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}
        self._aliases: dict[str, list[str]] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        self._aliases[key] = [a.lower() for a in aliases]
        for alias in self._aliases[key]:
            self._handlers[alias] = handler

    def handle(
        self,
        state: AppState,
        line: str,
        ctx: CommandContext | None = None,
    ) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        """
        if not line.startswith("/"):
            return None

        try:
            parts = shlex.split(line[1:])
        except ValueError as e:
            return f"Could not parse command: {e}"
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        try:
            nparams = len(inspect.signature(handler).parameters)
        except (TypeError, ValueError):
            nparams = 3

        if nparams >= 3:
            h3 = cast(CommandHandler3, handler)
            return h3(state, args, ctx or CommandContext())

        h2 = cast(CommandHandler2, handler)
        return h2(state, args)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            aka = self._aliases.get(name) or []
            shown = ", ".join(f"/{n}" for n in [name, *aka])
            lines.append(f"  {shown} - {help_text}")
        lines.append("  /exit - Quit.")
        return "\n".join(lines)


registry = CommandRegistry()


def _parse_kv(args: list[str]) -> tuple[dict[str, str], list[str]]:
    """Split `key=value` arguments from positional ones."""
    kv: dict[str, str] = {}
    rest: list[str] = []
    for a in args:
        if "=" in a:
            k, v = a.split("=", 1)
            kv[k.strip().lower().replace("-", "_")] = v.strip()
        else:
            rest.append(a)
    return kv, rest


def _prompt_add_fields(state: AppState, ctx: CommandContext) -> dict[str, str]:
    subjects = list(getattr(state.settings, "subjects", []) or [])
    values: dict[str, str] = {}
    values["name"] = ctx.prompt("Task name: ").strip()
    hint = f" ({', '.join(subjects)})" if subjects else ""
    values["subject"] = ctx.prompt(f"Subject{hint}: ").strip()
    if values["subject"] == OTHER_SUBJECT:
        values["custom_subject"] = ctx.prompt("Custom subject: ").strip()
    values["date"] = ctx.prompt("Due date (YYYY-MM-DD): ").strip()
    values["time"] = ctx.prompt("Due time (HH:MM, default 23:59): ").strip()
    values["duration"] = ctx.prompt("Duration in hours (default 1): ").strip()
    values["priority"] = ctx.prompt("Priority (low/medium/high, default medium): ").strip()
    values["notes"] = ctx.prompt("Notes: ").strip()
    return values


def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


def cmd_add(state: AppState, args: list[str], ctx: CommandContext) -> str:
    """
    /add                                   -> interactive prompts
    /add name="Read Ch.3" subject=Math date=2026-10-20 [time=10:00]
         [duration=2] [priority=high] [notes="..."] [custom_subject=...]
    """
    if args:
        values, rest = _parse_kv(args)
        unknown = sorted(set(values) - set(ADD_FIELDS))
        if unknown or rest:
            return (
                f"Unknown /add arguments: {', '.join(unknown + rest)}. "
                f"Fields: {', '.join(ADD_FIELDS)}."
            )
    else:
        values = _prompt_add_fields(state, ctx)

    # Same floor as the task form: no due dates before today.
    raw_date = values.get("date", "")
    if raw_date:
        try:
            if date.fromisoformat(raw_date) < ctx.today:
                return "Due date cannot be in the past."
        except ValueError:
            pass  # reported by add_task validation

    try:
        task = state.planner.add_task(
            name=values.get("name", ""),
            subject=values.get("subject", ""),
            custom_subject=values.get("custom_subject", ""),
            date=raw_date,
            time=values.get("time", ""),
            duration=values.get("duration") or None,
            priority=values.get("priority") or Priority.MEDIUM,
            notes=values.get("notes", ""),
            now=ctx.now,
        )
    except TaskValidationError as e:
        return f"Task not added ({e})."

    return f"Added task {task.id}: {task.name} [{task.subject}] due {views.format_date(task.date)} {task.time}"


def cmd_list(state: AppState, args: list[str], ctx: CommandContext) -> str:
    """
    /list                          -> list with the current filters
    /list subject=Math status=overdue
    /list all                      -> reset both filters
    """
    values, rest = _parse_kv(args)
    if ALL in [r.lower() for r in rest]:
        state.subject_filter = ALL
        state.status_filter = ALL

    if "status" in values:
        status = values["status"].lower()
        if status not in STATUS_CHOICES:
            return f"Unknown status filter: {status}. Use one of: {', '.join(STATUS_CHOICES)}."
        state.status_filter = status
    if "subject" in values:
        state.subject_filter = values["subject"] or ALL

    tasks = filter_tasks(
        state.planner.tasks,
        now=ctx.now,
        subject=state.subject_filter,
        status=state.status_filter,
    )
    return views.render_task_list(tasks, ctx.now, subject=state.subject_filter, status=state.status_filter)


def cmd_done(state: AppState, args: list[str], ctx: CommandContext) -> str:
    """/done <id> -> toggle completion."""
    if len(args) != 1:
        return "Usage: /done <id>"
    task = state.planner.toggle_complete(args[0], now=ctx.now)
    if task is None:
        return ""
    return f"{task.name}: {'completed' if task.completed else 'pending'}"


def cmd_rm(state: AppState, args: list[str], ctx: CommandContext) -> str:
    """/rm <id> -> delete after confirmation."""
    if len(args) != 1:
        return "Usage: /rm <id>"
    state.planner.delete_task(args[0], confirm=ctx.confirm)
    return ""


def cmd_dash(state: AppState, args: list[str], ctx: CommandContext) -> str:
    return views.render_dashboard(summarize(state.planner.tasks, ctx.now), ctx.now)


def cmd_cal(state: AppState, args: list[str], ctx: CommandContext) -> str:
    """
    /cal          -> show the displayed month
    /cal next     -> next month (also: +1, n)
    /cal prev     -> previous month (also: -1, p)
    /cal today    -> back to the current month
    """
    if args:
        arg = args[0].lower()
        if arg in ("next", "n"):
            state.change_month(1)
        elif arg in ("prev", "p"):
            state.change_month(-1)
        elif arg == "today":
            state.calendar_month = MonthCursor.for_date(ctx.today)
        else:
            try:
                state.change_month(int(arg))
            except ValueError:
                return "Usage: /cal [next|prev|today|+N|-N]"

    cursor = state.calendar_month
    grid = build_month_grid(cursor.year, cursor.month, state.planner.tasks, today=ctx.today)
    return views.render_calendar(grid) + "\n" + views.today_label(ctx.today)


def cmd_subjects(state: AppState, args: list[str]) -> str:
    subjects = state.planner.subjects()
    if not subjects:
        return "No subjects yet."
    return "Subjects: " + ", ".join(subjects)


def cmd_reload(state: AppState, args: list[str]) -> str:
    """/reload -> re-read the task collection from storage."""
    state.planner.reload()
    return f"Reloaded {len(state.planner.tasks)} tasks."


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("add", cmd_add, help_text="Add a task: /add (prompts) | /add name=... subject=... date=...")
registry.register(
    "list", cmd_list, help_text="List tasks: /list [subject=...] [status=all|pending|overdue|completed] | /list all",
    aliases=["ls"],
)
registry.register("done", cmd_done, help_text="Toggle completion: /done <id>.", aliases=["toggle"])
registry.register("rm", cmd_rm, help_text="Delete a task (asks for confirmation): /rm <id>.", aliases=["delete"])
registry.register("dash", cmd_dash, help_text="Dashboard: totals, progress, upcoming tasks.", aliases=["dashboard"])
registry.register("cal", cmd_cal, help_text="Month calendar: /cal [next|prev|today].", aliases=["calendar"])
registry.register("subjects", cmd_subjects, help_text="Subjects used by your tasks.")
registry.register("reload", cmd_reload, help_text="Re-read tasks from storage.")
