"""SQLite-backed row store for per-user Meta credentials."""

from __future__ import annotations

import sqlite3
from pathlib import Path
from typing import Any, Dict, Optional


def _ensure_directory(db_path: Path) -> None:
    if db_path.parent and not db_path.parent.exists():
        db_path.parent.mkdir(parents=True, exist_ok=True)


class SQLiteCredentialStore:
    """Upsert, fetch and delete rows of the ``user_tokens`` table."""

    def __init__(self, db_path: str) -> None:
        self._db_path = Path(db_path)
        _ensure_directory(self._db_path)
        self._ensure_schema()

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self._db_path, check_same_thread=False)
        conn.row_factory = sqlite3.Row
        return conn

    def _ensure_schema(self) -> None:
        with self._connect() as conn:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS user_tokens (
                    user_id TEXT PRIMARY KEY,
                    meta_access_token TEXT NOT NULL,
                    token_expires_at INTEGER NOT NULL,
                    ad_accounts TEXT NOT NULL DEFAULT '[]',
                    created_at INTEGER NOT NULL,
                    updated_at INTEGER NOT NULL
                )
                """
            )

    def upsert_row(
        self,
        *,
        user_id: str,
        access_token: str,
        expires_at: int,
        ad_accounts: str,
        now: int,
    ) -> None:
        """Insert a row or replace everything except ``created_at``."""
        with self._connect() as conn:
            conn.execute(
                """
                INSERT INTO user_tokens (
                    user_id,
                    meta_access_token,
                    token_expires_at,
                    ad_accounts,
                    created_at,
                    updated_at
                )
                VALUES (?, ?, ?, ?, ?, ?)
                ON CONFLICT(user_id) DO UPDATE SET
                    meta_access_token = excluded.meta_access_token,
                    token_expires_at = excluded.token_expires_at,
                    ad_accounts = excluded.ad_accounts,
                    updated_at = excluded.updated_at
                """,
                (user_id, access_token, expires_at, ad_accounts, now, now),
            )

    def get_row(self, user_id: str) -> Optional[Dict[str, Any]]:
        with self._connect() as conn:
            row = conn.execute(
                "SELECT * FROM user_tokens WHERE user_id = ?",
                (user_id,),
            ).fetchone()
        if not row:
            return None
        return dict(row)

    def delete_row(self, user_id: str) -> bool:
        """Delete a row, returning whether one existed."""
        with self._connect() as conn:
            cursor = conn.execute(
                "DELETE FROM user_tokens WHERE user_id = ?",
                (user_id,),
            )
        return cursor.rowcount > 0


__all__ = ["SQLiteCredentialStore"]
