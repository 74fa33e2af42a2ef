"""Local key-value persistence for the study planner.

Every backend exposes the same three calls:
    get(key) -> str | None
    set(key, value)
    delete(key)

Backends raise their native errors (sqlite3.Error, OSError); translating
them into PersistenceError is the block store's job.
"""

import logging
import sqlite3
from contextlib import contextmanager
from pathlib import Path

from studyplan import paths
from studyplan.clock import to_iso, utc_now

log = logging.getLogger(__name__)

SCHEMA = """
CREATE TABLE IF NOT EXISTS kv (
    key TEXT PRIMARY KEY,
    value TEXT NOT NULL,
    updated_at TEXT NOT NULL
);
"""


class SqliteKeyValueStore:
    """
    Key-value records in a single SQLite table.

    One connection per call; each write is a single-statement transaction,
    so a failed write leaves the previous value in place.
    """

    def __init__(self, db_path: str | Path | None = None):
        self.db_path = Path(db_path) if db_path is not None else paths.db_path()
        self._ready = False

    def init_db(self) -> None:
        """Create the table. Safe to call multiple times."""
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        with self.get_connection() as conn:
            conn.executescript(SCHEMA)
            conn.execute("PRAGMA journal_mode=WAL")
        self._ready = True
        log.info("Timetable database initialized at %s", self.db_path)

    @contextmanager
    def get_connection(self):
        """Get database connection with auto-commit/rollback."""
        conn = sqlite3.connect(self.db_path, timeout=30.0)
        try:
            yield conn
            conn.commit()
        except (sqlite3.Error, ValueError, OSError) as e:
            conn.rollback()
            log.error("Database error: %s", e)
            raise
        finally:
            conn.close()

    def _ensure(self) -> None:
        if not self._ready:
            self.init_db()

    def get(self, key: str) -> str | None:
        self._ensure()
        with self.get_connection() as conn:
            row = conn.execute("SELECT value FROM kv WHERE key = ?", [key]).fetchone()
        return row[0] if row else None

    def set(self, key: str, value: str) -> None:
        self._ensure()
        with self.get_connection() as conn:
            conn.execute(
                "INSERT OR REPLACE INTO kv (key, value, updated_at) VALUES (?, ?, ?)",
                [key, value, to_iso(utc_now())],
            )

    def delete(self, key: str) -> None:
        self._ensure()
        with self.get_connection() as conn:
            conn.execute("DELETE FROM kv WHERE key = ?", [key])


class MemoryKeyValueStore:
    """Dict-backed store for tests and throwaway sessions."""

    def __init__(self, initial: dict[str, str] | None = None):
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._data.pop(key, None)

    def __contains__(self, key: str) -> bool:
        return key in self._data
