"""
Repository pattern for data access.

Key-value stores holding small JSON records, in the manner of browser local
storage. The rate limiter only needs get/set, so any backend with those two
methods can be injected.
"""

import threading
from typing import Dict, Optional

from .db import get_connection


class UsageStore:
    """Interface for a persistent key-value store of string records."""

    def get(self, key: str) -> Optional[str]:
        """Return the value stored under ``key``, or None when absent."""
        raise NotImplementedError

    def set(self, key: str, value: str) -> None:
        """Store ``value`` under ``key``, replacing any previous value."""
        raise NotImplementedError


class MemoryUsageStore(UsageStore):
    """Process-local store, used by tests and one-shot CLI calls."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[str]:
        with self._lock:
            return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        with self._lock:
            self._data[key] = value


class SqliteUsageStore(UsageStore):
    """SQLite-backed store that survives between CLI invocations.

    Each call opens its own connection so the store can be shared across
    threads.
    """

    def __init__(self, db_path: str = ".refaq.db"):
        """Initialize the store and create its table if needed.

        Args:
            db_path: Path to SQLite database file
        """
        self.db_path = db_path
        initialize_schema(db_path)

    def get(self, key: str) -> Optional[str]:
        conn = get_connection(self.db_path)
        try:
            cursor = conn.execute("SELECT value FROM kv_store WHERE key = ?", (key,))
            row = cursor.fetchone()
            return row[0] if row else None
        finally:
            conn.close()

    def set(self, key: str, value: str) -> None:
        conn = get_connection(self.db_path)
        try:
            conn.execute("""
                INSERT INTO kv_store (key, value) VALUES (?, ?)
                ON CONFLICT(key) DO UPDATE SET value = excluded.value
            """, (key, value))
            conn.commit()
        finally:
            conn.close()


def initialize_schema(db_path: str = ".refaq.db") -> None:
    """Create the kv_store table if it doesn't exist.

    Args:
        db_path: Path to SQLite database file
    """
    conn = get_connection(db_path)
    try:
        conn.execute("""
            CREATE TABLE IF NOT EXISTS kv_store (
                key TEXT PRIMARY KEY,
                value TEXT NOT NULL
            )
        """)
        conn.commit()
    finally:
        conn.close()
