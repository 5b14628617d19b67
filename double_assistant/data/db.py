"""
Double Assistant — Session Database.

The Memory pillar: each chat's Session persists in SQLite as one JSON
payload, surviving bot restarts. Implements SessionStorePort; a failed save
is logged and reported, never raised.
"""

from __future__ import annotations

import json
import logging
import sqlite3
from datetime import datetime
from pathlib import Path

from pydantic import ValidationError

from double_assistant.data.models import Session
from double_assistant.data.records import SessionRecord, record_to_session, session_to_record

logger = logging.getLogger(__name__)


class SessionDB:
    """SQLite-backed key-value storage for sessions, one row per chat."""

    def __init__(self, key: str, db_path: str | None = None) -> None:
        if db_path is None:
            from double_assistant.config import settings
            db_path = settings.DATABASE_PATH

        self._key = key
        self._db_path = db_path
        if db_path != ":memory:":
            Path(db_path).parent.mkdir(parents=True, exist_ok=True)
        self._init_db()

    @property
    def key(self) -> str:
        return self._key

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self._db_path)
        conn.row_factory = sqlite3.Row
        return conn

    def _init_db(self) -> None:
        """Create the sessions table if it doesn't exist."""
        with self._connect() as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS sessions (
                    key        TEXT PRIMARY KEY,
                    payload    TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                )
            """)
        logger.debug("Sessions table initialized at %s", self._db_path)

    def load(self) -> Session | None:
        """Return the stored Session, or None if absent or unreadable."""
        with self._connect() as conn:
            row = conn.execute(
                "SELECT payload FROM sessions WHERE key = ?", (self._key,)
            ).fetchone()
        if row is None:
            return None

        try:
            record = SessionRecord.model_validate(json.loads(row["payload"]))
        except (json.JSONDecodeError, ValidationError) as exc:
            logger.error("Stored session '%s' is unreadable, starting fresh: %s", self._key, exc)
            return None

        session = record_to_session(record)
        logger.info(
            "Session '%s' restored: %d active task(s), %d message(s)",
            self._key, len(session.active_tasks), len(session.transcript),
        )
        return session

    def save(self, session: Session) -> bool:
        """Upsert the Session. Returns False (and logs) on failure."""
        try:
            payload = session_to_record(session).model_dump_json()
            with self._connect() as conn:
                conn.execute(
                    """
                    INSERT INTO sessions (key, payload, updated_at) VALUES (?, ?, ?)
                    ON CONFLICT(key) DO UPDATE SET
                        payload = excluded.payload,
                        updated_at = excluded.updated_at
                    """,
                    (self._key, payload, datetime.now().isoformat()),
                )
        except (sqlite3.Error, ValidationError, ValueError) as exc:
            logger.error("Failed to save session '%s': %s", self._key, exc)
            return False

        logger.debug("Session '%s' saved", self._key)
        return True

    def list_keys(self) -> list[str]:
        """All session keys stored in this database file."""
        with self._connect() as conn:
            rows = conn.execute("SELECT key FROM sessions ORDER BY key").fetchall()
        return [r["key"] for r in rows]
