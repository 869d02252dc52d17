"""
A string-keyed SQLite table standing in for the browser's persisted key/value storage.
"""

import logging
import sqlite3
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

log = logging.getLogger(__name__)


class KeyValueStore:
    """
    Persists string values under string keys in a single SQLite table.

    Every operation opens its own short-lived connection, so the store can be
    shared freely between commands of one process.
    """

    def __init__(self, config_dir_path: Path, filename: str = "download_history.sqlite"):
        config_dir_path.mkdir(parents=True, exist_ok=True)
        self.db_path = config_dir_path / filename
        self._initialize_db()

    def _get_connection(self) -> sqlite3.Connection:
        """Gets a new database connection with WAL journaling enabled."""
        try:
            conn = sqlite3.connect(self.db_path, timeout=30)
            conn.execute("PRAGMA journal_mode=WAL;")
            conn.execute("PRAGMA synchronous=NORMAL;")
            return conn
        except sqlite3.Error as e:
            log.error(f"Failed to connect to history database: {e}")
            raise

    @contextmanager
    def _connection(self) -> Iterator[sqlite3.Connection]:
        """Yields a connection inside a transaction and closes it afterwards."""
        conn = self._get_connection()
        try:
            with conn:
                yield conn
        finally:
            conn.close()

    def _initialize_db(self) -> None:
        """Creates the key/value table if it doesn't exist."""
        with self._connection() as conn:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS kv_store (
                    key TEXT PRIMARY KEY NOT NULL,
                    value TEXT NOT NULL,
                    updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
                );
                """
            )

    def get(self, key: str) -> str | None:
        """Returns the stored value, or None when the key is absent."""
        with self._connection() as conn:
            row = conn.execute(
                "SELECT value FROM kv_store WHERE key = ?", (key,)
            ).fetchone()
        return row[0] if row else None

    def set(self, key: str, value: str) -> None:
        with self._connection() as conn:
            conn.execute(
                "INSERT INTO kv_store (key, value) VALUES (?, ?) "
                "ON CONFLICT(key) DO UPDATE SET value = excluded.value, "
                "updated_at = CURRENT_TIMESTAMP",
                (key, value),
            )

    def remove(self, key: str) -> bool:
        """Deletes a key. Returns True if something was removed."""
        with self._connection() as conn:
            cursor = conn.execute("DELETE FROM kv_store WHERE key = ?", (key,))
            return cursor.rowcount > 0

    def keys(self, prefix: str = "") -> list[str]:
        """Lists stored keys starting with `prefix`, in sorted order."""
        with self._connection() as conn:
            rows = conn.execute(
                "SELECT key FROM kv_store WHERE substr(key, 1, ?) = ? ORDER BY key",
                (len(prefix), prefix),
            ).fetchall()
        return [row[0] for row in rows]
