# src/study_planner/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds AppState, then starts:
- the reminder scheduler in a background thread (optional),
- the console REPL in the main thread.
"""

from __future__ import annotations

import logging

from ..cli.bootstrap import create_initial_state
from ..config import get_settings
from ..connectors.console_connector import ConsoleNotifier, run_console_loop
from ..logging_setup import setup_logging
from ..tasks.reminders import ReminderBackgroundRunner, start_reminders_in_background

logger = logging.getLogger(__name__)


def main() -> None:
    settings = get_settings()

    # Console stays quiet (WARNING+); the REPL prints its own output.
    log_file = setup_logging(log_dir=settings.data_dir, console_level=logging.WARNING, file_level=settings.log_level)

    logger.info("Starting %s... (log file %s)", settings.app_name, log_file)

    notifier = ConsoleNotifier()
    state = create_initial_state(notifier=notifier, settings=settings)

    runner: ReminderBackgroundRunner | None = None
    if settings.reminders_enabled:
        runner = start_reminders_in_background(
            state.planner,
            notifier,
            interval_seconds=settings.reminder_interval_seconds,
            lock=state.lock,
            ttl_seconds=settings.notification_ttl_seconds,
        )
    else:
        logger.info("Reminders disabled.")

    try:
        run_console_loop(state)
    finally:
        if runner is not None:
            runner.stop()
            runner.join(timeout=5.0)
        logger.info("Bye.")


if __name__ == "__main__":
    main()
