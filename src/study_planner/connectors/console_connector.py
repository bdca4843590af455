# src/study_planner/connectors/console_connector.py

from __future__ import annotations

import logging
import sys
import threading
from datetime import datetime

from ..cli import views
from ..cli.commands import CommandContext
from ..cli.commands import registry as command_registry
from ..core.notifications import Notification
from ..core.state import AppState

logger = logging.getLogger(__name__)


class ConsoleNotifier:
    """
    Prints notifications as soon as they arrive.

    The reminder thread may notify while the REPL waits in input(); printing is
    serialized with a lock and the prompt is not redrawn.
    """

    def __init__(self, stream=None) -> None:
        self._stream = stream
        self._lock = threading.Lock()

    def notify(self, notification: Notification) -> None:
        stream = self._stream or sys.stdout
        with self._lock:
            print(views.render_notification(notification), file=stream, flush=True)


def confirm_on_console(message: str) -> bool:
    try:
        answer = input(f"{message} [y/N]: ").strip().lower()
    except EOFError:
        return False
    return answer in ("y", "yes")


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


def run_console_loop(state: AppState) -> None:
    logger.info("Console connector started.")
    app_name = str(getattr(getattr(state, "settings", None), "app_name", "study-planner"))
    print(f"[{_ts_local()}] [{app_name}] Type /help for commands. Use /exit to quit.\n")

    try:
        with state.lock:
            print(command_registry.handle(state, "/dash", CommandContext()))
    except Exception:
        logger.exception("Startup dashboard failed.")
        print("Could not render the dashboard.")
    print()

    while True:
        try:
            user_input = input(">>> ").strip()
        except EOFError:
            logger.info("Console EOF received, exiting.")
            break
        except KeyboardInterrupt:
            logger.info("Console KeyboardInterrupt, exiting.")
            print()
            break

        if not user_input:
            continue

        if user_input.lower() in ("/exit", "/quit"):
            logger.info("Console exit command received.")
            break

        if not user_input.startswith("/"):
            user_input = "/" + user_input

        ctx = CommandContext(now=datetime.now(), prompt=input, confirm=confirm_on_console)
        try:
            with state.lock:
                response = command_registry.handle(state, user_input, ctx)
        except (EOFError, KeyboardInterrupt):
            print()
            response = "Cancelled."
        except Exception:
            logger.exception("Command handler crashed.")
            response = "Internal error while handling a command."

        if response:
            print(response)
        print()

    logger.info("Console connector finished.")
