"""SQLite-backed key/value store with per-entry expiry, used for OAuth state."""

from __future__ import annotations

import sqlite3
import time
from pathlib import Path
from typing import Callable, Optional


class SQLiteStateStore:
    """Short-lived ``key -> value`` entries that vanish after their TTL."""

    def __init__(self, db_path: str, *, clock: Callable[[], float] = time.time) -> None:
        self._db_path = Path(db_path)
        self._clock = clock
        if self._db_path.parent and not self._db_path.parent.exists():
            self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._ensure_schema()

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self._db_path, check_same_thread=False)
        conn.row_factory = sqlite3.Row
        return conn

    def _ensure_schema(self) -> None:
        with self._connect() as conn:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS oauth_states (
                    state TEXT PRIMARY KEY,
                    value TEXT NOT NULL,
                    expires_at REAL NOT NULL
                )
                """
            )

    def _prune(self, conn: sqlite3.Connection) -> None:
        conn.execute("DELETE FROM oauth_states WHERE expires_at <= ?", (self._clock(),))

    def put(self, key: str, value: str, ttl_seconds: int) -> None:
        with self._connect() as conn:
            self._prune(conn)
            conn.execute(
                """
                INSERT INTO oauth_states (state, value, expires_at)
                VALUES (?, ?, ?)
                ON CONFLICT(state) DO UPDATE SET
                    value = excluded.value,
                    expires_at = excluded.expires_at
                """,
                (key, value, self._clock() + ttl_seconds),
            )

    def get(self, key: str) -> Optional[str]:
        with self._connect() as conn:
            row = conn.execute(
                "SELECT value FROM oauth_states WHERE state = ? AND expires_at > ?",
                (key, self._clock()),
            ).fetchone()
        if not row:
            return None
        return row["value"]

    def delete(self, key: str) -> None:
        with self._connect() as conn:
            conn.execute("DELETE FROM oauth_states WHERE state = ?", (key,))

    def pop(self, key: str) -> Optional[str]:
        """Atomically delete an entry and return its value if it was still live."""
        with self._connect() as conn:
            rows = conn.execute(
                "DELETE FROM oauth_states WHERE state = ? RETURNING value, expires_at",
                (key,),
            ).fetchall()
        if not rows or rows[0]["expires_at"] <= self._clock():
            return None
        return rows[0]["value"]


__all__ = ["SQLiteStateStore"]
