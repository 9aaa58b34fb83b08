"""
db.py — SQLite cache of synced recordings

This module provides:
  - RecordingStore: one object per process, opened with a database path
  - Idempotent schema setup
  - Insert-or-replace by event_id and lookup by event_id

Structured values (lists/dicts) are written as JSON text; readers get the raw
row back and decode it through services.normalizer.
"""

import json
import logging
import sqlite3
from contextlib import closing
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

from .errors import CacheError

# Columns of the recordings table, in insert order (event_id is the key)
COLUMNS: List[str] = [
    "id",
    "category_id",
    "meeting_title",
    "meeting_date",
    "meeting_start_time",
    "meeting_end_time",
    "meet_url",
    "meeting_admin_id",
    "meeting_code",
    "organizer_email",
    "source",
    "bot_id",
    "is_public",
    "summary",
    "error_message",
    "action_points",
    "topics",
    "key_takeaways",
    "questions",
    "participants",
]

# Wire names that differ from the column name
_ALIASES = {"categoryId": "category_id"}


def _utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="seconds")


def _to_column_value(value: Any) -> Any:
    if isinstance(value, (list, dict)):
        return json.dumps(value, ensure_ascii=False)
    if isinstance(value, bool):
        return 1 if value else 0
    return value


class RecordingStore:
    def __init__(self, db_path: Path) -> None:
        self.db_path = Path(db_path).expanduser().resolve()
        self.logger = logging.getLogger("app.store")

    def get_connection(self) -> sqlite3.Connection:
        """
        Open a connection with rows addressable by column name.
        A fresh connection per call keeps the store usable from worker threads;
        callers wrap it in closing(): the connection's own context manager
        only commits or rolls back.
        """
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        conn = sqlite3.connect(str(self.db_path))
        conn.row_factory = sqlite3.Row
        return conn

    def initialize(self) -> None:
        """Create the recordings table if needed. Safe to call on every startup."""
        with closing(self.get_connection()) as conn, conn:
            cur = conn.cursor()
            cur.execute(
                """
                CREATE TABLE IF NOT EXISTS recordings (
                    event_id           TEXT PRIMARY KEY,
                    id                 INTEGER,
                    category_id        INTEGER,
                    meeting_title      TEXT,
                    meeting_date       TEXT,      -- YYYY-MM-DD as sent by the API
                    meeting_start_time TEXT,
                    meeting_end_time   TEXT,
                    meet_url           TEXT,
                    meeting_admin_id   INTEGER,
                    meeting_code       TEXT,
                    organizer_email    TEXT,
                    source             TEXT,
                    bot_id             INTEGER,
                    is_public          INTEGER DEFAULT 0,
                    summary            TEXT,
                    error_message      TEXT,
                    action_points      TEXT,      -- JSON
                    topics             TEXT,      -- JSON
                    key_takeaways      TEXT,      -- JSON
                    questions          TEXT,      -- JSON
                    participants       TEXT,      -- JSON
                    synced_at          TEXT
                );
                """
            )

    def upsert(self, event_id: str, fields: Mapping[str, Any]) -> None:
        """Insert the row for ``event_id`` or overwrite the existing one."""
        if not event_id:
            raise CacheError("event_id is required")
        values: Dict[str, Any] = {}
        for key, value in fields.items():
            col = _ALIASES.get(key, key)
            if col in COLUMNS:
                values[col] = _to_column_value(value)
        row = [values.get(col) for col in COLUMNS]

        cols = ", ".join(["event_id", *COLUMNS, "synced_at"])
        marks = ", ".join("?" for _ in range(len(COLUMNS) + 2))
        updates = ", ".join(f"{c}=excluded.{c}" for c in [*COLUMNS, "synced_at"])
        try:
            with closing(self.get_connection()) as conn, conn:
                conn.execute(
                    f"INSERT INTO recordings ({cols}) VALUES ({marks}) "
                    f"ON CONFLICT(event_id) DO UPDATE SET {updates}",
                    (event_id, *row, _utc_now_iso()),
                )
        except sqlite3.Error as e:
            raise CacheError(f"could not write recording {event_id}: {e}") from e

    def get_by_event_id(self, event_id: str) -> Optional[Dict[str, Any]]:
        try:
            with closing(self.get_connection()) as conn, conn:
                cur = conn.cursor()
                cur.execute("SELECT * FROM recordings WHERE event_id = ?", (event_id,))
                row = cur.fetchone()
        except sqlite3.Error as e:
            raise CacheError(f"could not read recording {event_id}: {e}") from e
        if row is None:
            return None
        return dict(row)

    def list_event_ids(self) -> List[str]:
        try:
            with closing(self.get_connection()) as conn, conn:
                rows = conn.execute("SELECT event_id FROM recordings ORDER BY event_id").fetchall()
        except sqlite3.Error as e:
            raise CacheError(f"could not list recordings: {e}") from e
        return [r[0] for r in rows]

    def count(self) -> int:
        return len(self.list_event_ids())
