from __future__ import annotations

import logging
import os
import sqlite3
import threading
from typing import Protocol

from ats_matcher.errors import StorageError

logger = logging.getLogger(__name__)


class KeyValueStore(Protocol):
    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...

    def remove(self, key: str) -> None: ...


class InMemoryStore:
    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def remove(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self) -> list[str]:
        return list(self._data)


class SqliteStore:
    """String key/value pairs kept in a local SQLite file."""

    def __init__(self, db_path: str) -> None:
        self._db_path = db_path
        self._conn: sqlite3.Connection | None = None
        self._conn_lock = threading.Lock()

    def _get_connection(self) -> sqlite3.Connection:
        with self._conn_lock:
            if self._conn is not None:
                return self._conn

            directory = os.path.dirname(self._db_path)
            if directory:
                os.makedirs(directory, exist_ok=True)

            conn = sqlite3.connect(
                self._db_path,
                check_same_thread=False,
                timeout=5,
                isolation_level=None,
            )
            conn.execute("PRAGMA journal_mode=WAL;")
            conn.execute("PRAGMA synchronous=NORMAL;")
            conn.execute("PRAGMA busy_timeout=5000;")
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS session_store (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL
                );
                """
            )
            self._conn = conn
            return conn

    def get(self, key: str) -> str | None:
        try:
            conn = self._get_connection()
            with self._conn_lock:
                row = conn.execute("SELECT value FROM session_store WHERE key = ?", (key,)).fetchone()
        except (sqlite3.Error, OSError) as exc:
            raise StorageError(f"Failed to read '{key}' from session store: {exc}") from exc
        return row[0] if row else None

    def set(self, key: str, value: str) -> None:
        try:
            conn = self._get_connection()
            with self._conn_lock:
                conn.execute(
                    """
                    INSERT INTO session_store (key, value) VALUES (?, ?)
                    ON CONFLICT(key) DO UPDATE SET value = excluded.value
                    """,
                    (key, value),
                )
        except (sqlite3.Error, OSError) as exc:
            raise StorageError(f"Failed to write '{key}' to session store: {exc}") from exc

    def remove(self, key: str) -> None:
        try:
            conn = self._get_connection()
            with self._conn_lock:
                conn.execute("DELETE FROM session_store WHERE key = ?", (key,))
        except (sqlite3.Error, OSError) as exc:
            raise StorageError(f"Failed to remove '{key}' from session store: {exc}") from exc

    def close(self) -> None:
        with self._conn_lock:
            if self._conn is not None:
                self._conn.close()
                self._conn = None
