"""
Local key-value persistence for the Merinfo explorer.

Annotations and UI preferences are stored as plain strings under fixed
keys, the same way the browser build kept them in localStorage. One SQLite
file per client; nothing here is shared between users.
"""

import logging
import sqlite3
from datetime import datetime
from pathlib import Path
from typing import Optional, Union

logger = logging.getLogger(__name__)


class KeyValueStore:
    """String key-value table backed by SQLite."""

    def __init__(self, db_path: Union[str, Path] = "data/merinfo.db"):
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_db()

    def _get_connection(self) -> sqlite3.Connection:
        conn = sqlite3.connect(str(self.db_path))
        conn.execute("PRAGMA journal_mode=WAL")
        return conn

    def _init_db(self) -> None:
        conn = self._get_connection()
        try:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS kv_store (
                    key         TEXT PRIMARY KEY,
                    value       TEXT NOT NULL,
                    updated_at  TEXT NOT NULL
                )
            """)
            conn.commit()
        finally:
            conn.close()

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        conn = self._get_connection()
        try:
            row = conn.execute(
                "SELECT value FROM kv_store WHERE key = ?", (key,)
            ).fetchone()
        finally:
            conn.close()
        return row[0] if row is not None else default

    def set(self, key: str, value: str) -> None:
        conn = self._get_connection()
        try:
            conn.execute(
                "INSERT INTO kv_store (key, value, updated_at) VALUES (?, ?, ?) "
                "ON CONFLICT(key) DO UPDATE SET value = excluded.value, "
                "updated_at = excluded.updated_at",
                (key, value, datetime.utcnow().isoformat()),
            )
            conn.commit()
        finally:
            conn.close()
        logger.debug(f"Stored {len(value)} chars under '{key}'")

