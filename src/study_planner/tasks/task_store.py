# src/study_planner/tasks/task_store.py

from __future__ import annotations

import contextlib
import json
import logging
import sqlite3
import time
from collections.abc import Iterable
from pathlib import Path

from .task_models import Task

logger = logging.getLogger(__name__)

DEFAULT_STORAGE_KEY = "studyPlannerTasks"


class TaskStore:
    """
    Persistent slot for the whole task collection.

    Backed by a tiny SQLite key-value table; the collection lives in a single
    row (JSON array) under `storage_key` and is always rewritten as a whole.

    Thread-safety:
    - each method opens its own SQLite connection
    """

    def __init__(
        self,
        db_path: str | Path = "planner.sqlite3",
        *,
        storage_key: str = DEFAULT_STORAGE_KEY,
    ) -> None:
        self._db_path = Path(db_path)
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._key = storage_key
        self._ensure_schema()
        logger.info("TaskStore ready db=%s key=%s", self._db_path, self._key)

    @property
    def storage_key(self) -> str:
        return self._key

    # ---- low-level helpers ----

    def _get_conn(self) -> sqlite3.Connection:
        conn = sqlite3.connect(str(self._db_path), timeout=30.0)
        conn.row_factory = sqlite3.Row
        with contextlib.suppress(sqlite3.Error):
            conn.execute("PRAGMA journal_mode=WAL")
        return conn

    def _ensure_schema(self) -> None:
        conn = self._get_conn()
        try:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS kv (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL,
                    updated_at REAL NOT NULL
                )
                """
            )
            conn.commit()
        finally:
            conn.close()

    def _read_raw(self) -> str | None:
        conn = self._get_conn()
        try:
            cur = conn.execute("SELECT value FROM kv WHERE key = ?", (self._key,))
            row = cur.fetchone()
            return None if row is None else str(row["value"])
        finally:
            conn.close()

    # ---- public API ----

    def load(self) -> list[Task]:
        """
        Restore the collection in insertion order.

        Absent slot or malformed content -> empty list (never raises for bad data).
        Individual malformed records are skipped.
        """
        raw = self._read_raw()
        if raw is None:
            return []

        try:
            data = json.loads(raw)
        except json.JSONDecodeError:
            logger.warning("Stored tasks under %s are not valid JSON; starting empty.", self._key)
            return []

        if not isinstance(data, list):
            logger.warning("Stored tasks under %s are not a list; starting empty.", self._key)
            return []

        tasks: list[Task] = []
        for item in data:
            if not isinstance(item, dict):
                continue
            try:
                tasks.append(Task.from_dict(item))
            except ValueError as e:
                logger.warning("Skipping malformed task record: %s", e)

        logger.debug("Loaded %d tasks from %s", len(tasks), self._key)
        return tasks

    def save(self, tasks: Iterable[Task]) -> None:
        """Overwrite the slot with the full collection."""
        payload = json.dumps([t.to_dict() for t in tasks], ensure_ascii=False)
        conn = self._get_conn()
        try:
            conn.execute(
                """
                INSERT INTO kv(key, value, updated_at)
                VALUES (?, ?, ?)
                ON CONFLICT(key) DO UPDATE SET
                    value = excluded.value,
                    updated_at = excluded.updated_at
                """,
                (self._key, payload, time.time()),
            )
            conn.commit()
        finally:
            conn.close()
        logger.debug("Saved tasks to %s (%d bytes)", self._key, len(payload))

    def _write_raw(self, value: str) -> None:
        """Store a raw string in the slot, bypassing serialization."""
        conn = self._get_conn()
        try:
            conn.execute(
                "INSERT OR REPLACE INTO kv(key, value, updated_at) VALUES (?, ?, ?)",
                (self._key, value, time.time()),
            )
            conn.commit()
        finally:
            conn.close()
