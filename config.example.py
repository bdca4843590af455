# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).
This file exists to make the repo self-documenting even without opening .env.example.
"""

ENV_VARS = {
    # App / logging
    "STUDY_APP_NAME": "App display name (default: study-planner).",
    "STUDY_LOG_LEVEL": "Log file level (default: INFO). The console only shows warnings.",
    # Paths (gitignored)
    "STUDY_DATA_DIR": "Local data directory (default: .local/study_planner).",
    "STUDY_DB_PATH": "SQLite key-value store path (default: <data_dir>/planner.sqlite3).",
    "STUDY_STORAGE_KEY": "Slot name holding the task collection (default: studyPlannerTasks).",
    # Reminders / notifications
    "STUDY_REMINDERS_ENABLED": "Run the background reminder scan (true/false, default: true).",
    "STUDY_REMINDER_INTERVAL_SECONDS": "Seconds between reminder scans (default: 60).",
    "STUDY_NOTIFICATION_TTL_SECONDS": "How long a notification stays visible (default: 4).",
    # Task form
    "STUDY_SUBJECTS": "Comma separated preset subjects (default: Math,Science,English,History,Computer Science,Other).",
}
