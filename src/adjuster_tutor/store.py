"""Persistent progress store and user settings.

The whole of a user's progress lives in one JSON document stored under
``STORAGE_KEY`` in the ``progress_slots`` table. Reads never fail: missing or
unreadable data comes back as an empty snapshot. Writes are best-effort and
only log on failure, so the app keeps working without persistence.
"""
import json
import logging
import sqlite3
from datetime import datetime

from adjuster_tutor.db import DEFAULT_DB_PATH, get_connection, init_db
from adjuster_tutor.models import ProgressSnapshot

logger = logging.getLogger(__name__)

STORAGE_KEY = "sonpyeong_v2"


def _reject_constant(name: str):
    raise ValueError(f"non-finite number {name} in stored progress")


class ProgressStore:
    """Owns the in-memory snapshot and its single persisted slot."""

    def __init__(self, db_path: str = DEFAULT_DB_PATH, key: str = STORAGE_KEY):
        self.db_path = db_path
        self.key = key
        self.snapshot = ProgressSnapshot()

    def load(self) -> ProgressSnapshot:
        self.snapshot = load_snapshot(self.db_path, self.key)
        return self.snapshot

    def save(self) -> None:
        save_snapshot(self.db_path, self.snapshot, self.key)

    def reset(self) -> None:
        """Forget every answer, bookmark and card level."""
        self.snapshot = ProgressSnapshot()
        self.save()
        logger.info("Progress reset for %s", self.db_path)


def load_snapshot(db_path: str, key: str = STORAGE_KEY) -> ProgressSnapshot:
    try:
        init_db(db_path)
        conn = get_connection(db_path)
        try:
            row = conn.execute(
                "SELECT value FROM progress_slots WHERE key = ?", (key,)
            ).fetchone()
        finally:
            conn.close()
        if row is None or not row["value"]:
            return ProgressSnapshot()
        data = json.loads(row["value"], parse_constant=_reject_constant)
        if not isinstance(data, dict):
            raise ValueError(f"expected a JSON object, got {type(data).__name__}")
        return ProgressSnapshot.from_dict(data)
    except (sqlite3.Error, OSError, ValueError, TypeError, KeyError, AttributeError, OverflowError) as e:
        logger.warning("State load error, starting from empty progress: %s", e)
        return ProgressSnapshot()


def save_snapshot(db_path: str, snapshot: ProgressSnapshot, key: str = STORAGE_KEY) -> None:
    try:
        payload = json.dumps(snapshot.to_dict(), ensure_ascii=False)
        init_db(db_path)
        conn = get_connection(db_path)
        try:
            conn.execute(
                "INSERT INTO progress_slots (key, value, updated_at) VALUES (?, ?, ?) "
                "ON CONFLICT(key) DO UPDATE SET value=excluded.value, updated_at=excluded.updated_at",
                (key, payload, datetime.now().isoformat()),
            )
            conn.commit()
        finally:
            conn.close()
    except (sqlite3.Error, OSError, ValueError, TypeError) as e:
        logger.warning("State save error, progress not persisted: %s", e)


def get_setting(db_path: str, key: str, default: str = None) -> str | None:
    try:
        conn = get_connection(db_path)
        try:
            row = conn.execute("SELECT value FROM user_settings WHERE key = ?", (key,)).fetchone()
        finally:
            conn.close()
    except sqlite3.Error as e:
        logger.warning("Could not read setting %r: %s", key, e)
        return default
    return row["value"] if row else default


def set_setting(db_path: str, key: str, value: str) -> None:
    try:
        conn = get_connection(db_path)
        try:
            conn.execute(
                "INSERT INTO user_settings (key, value) VALUES (?, ?) ON CONFLICT(key) DO UPDATE SET value=?",
                (key, value, value),
            )
            conn.commit()
        finally:
            conn.close()
    except sqlite3.Error as e:
        logger.warning("Could not save setting %r: %s", key, e)
