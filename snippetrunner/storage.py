"""String key/value store with SQLite backend, shaped like ``localStorage``."""

from __future__ import annotations

import logging
import sqlite3
import threading
import time
from pathlib import Path

logger = logging.getLogger(__name__)

IN_MEMORY = ":memory:"


class LocalStorage:
    """Key/value store holding text values.

    Defaults to an in-memory database so a lesson never touches disk; pass a
    path to keep values between runs.
    """

    def __init__(self, db_path: Path | str | None = None):
        """Initialize the store.

        Args:
            db_path: Path to SQLite database file, or None for in-memory
        """
        self.db_path = str(db_path) if db_path else IN_MEMORY
        self._lock = threading.Lock()

        if self.db_path != IN_MEMORY:
            Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)

        # A single connection keeps an in-memory database alive
        self._conn = sqlite3.connect(self.db_path, timeout=10.0, check_same_thread=False)
        self._conn.row_factory = sqlite3.Row
        self._init_db()

    def _init_db(self) -> None:
        """Initialize the database schema."""
        with self._lock:
            self._conn.execute("""
                CREATE TABLE IF NOT EXISTS storage (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL,
                    created_at INTEGER NOT NULL
                )
            """)
            self._conn.commit()

    def set_item(self, key: str, value: object) -> None:
        """Store ``value`` under ``key``. Values are always kept as text.

        Args:
            key: Item key
            value: Any value; stored as ``str(value)``
        """
        now = int(time.time() * 1000000)
        with self._lock:
            # Re-setting keeps the original insertion position for key()
            self._conn.execute(
                """
                INSERT INTO storage (key, value, created_at)
                VALUES (?, ?, ?)
                ON CONFLICT(key) DO UPDATE SET value = excluded.value
                """,
                (str(key), str(value), now),
            )
            self._conn.commit()
        logger.debug(f"Stored item {key!r}")

    def get_item(self, key: str) -> str | None:
        """Return the stored text, or None when the key is missing."""
        with self._lock:
            row = self._conn.execute(
                "SELECT value FROM storage WHERE key = ?",
                (str(key),),
            ).fetchone()
        return None if row is None else row["value"]

    def remove_item(self, key: str) -> None:
        with self._lock:
            self._conn.execute("DELETE FROM storage WHERE key = ?", (str(key),))
            self._conn.commit()
        logger.debug(f"Removed item {key!r}")

    def clear(self) -> None:
        """Remove every item."""
        with self._lock:
            self._conn.execute("DELETE FROM storage")
            self._conn.commit()
        logger.debug("Storage cleared")

    def key(self, index: int) -> str | None:
        """Return the key at ``index`` in insertion order, or None."""
        if index < 0:
            return None
        with self._lock:
            row = self._conn.execute(
                "SELECT key FROM storage ORDER BY created_at ASC, rowid ASC LIMIT 1 OFFSET ?",
                (index,),
            ).fetchone()
        return None if row is None else row["key"]

    @property
    def length(self) -> int:
        with self._lock:
            return self._conn.execute("SELECT COUNT(*) FROM storage").fetchone()[0]

    def close(self) -> None:
        self._conn.close()

    def __enter__(self) -> LocalStorage:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
