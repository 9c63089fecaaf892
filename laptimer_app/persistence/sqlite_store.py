"""SQLite-backed key-value store for session persistence."""

import sqlite3
import threading
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Mapping, Optional

from ..errors import PersistenceError
from ..logging.config import get_persistence_logger
from .base import KeyValueStore, StoredValue

KIND_FLOAT = "float"
KIND_BOOL = "bool"
KIND_BYTES = "bytes"


class SqliteKeyValueStore(KeyValueStore):
    """SQLite-based key-value persistence layer."""

    def __init__(self, db_path: str = "laptimer.db"):
        self.db_path = Path(db_path)
        self.logger = get_persistence_logger("kv.sqlite")
        self._lock = threading.Lock()

        self._init_database()

    def _init_database(self) -> None:
        """Initialize database schema."""
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

        with self._get_connection() as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS kv (
                    key TEXT PRIMARY KEY,
                    kind TEXT NOT NULL,
                    value BLOB,
                    updated_at TEXT NOT NULL
                )
            """)
            conn.commit()

    @contextmanager
    def _get_connection(self):
        """Get database connection, translating sqlite errors."""
        conn = None
        try:
            conn = sqlite3.connect(self.db_path, timeout=30.0)
            conn.row_factory = sqlite3.Row
            yield conn
        except sqlite3.Error as e:
            if conn:
                conn.rollback()
            self.logger.error("Database error", db_path=str(self.db_path), error=str(e))
            raise PersistenceError(
                f"Database error: {e}",
                operation="query",
                context={"db_path": str(self.db_path)}
            ) from e
        finally:
            if conn:
                conn.close()

    def set_float(self, key: str, value: float) -> None:
        self._put(key, KIND_FLOAT, float(value))

    def get_float(self, key: str) -> Optional[float]:
        value = self._fetch(key, KIND_FLOAT)
        return float(value) if value is not None else None

    def set_bool(self, key: str, value: bool) -> None:
        self._put(key, KIND_BOOL, 1 if value else 0)

    def get_bool(self, key: str) -> Optional[bool]:
        value = self._fetch(key, KIND_BOOL)
        return bool(value) if value is not None else None

    def set_bytes(self, key: str, value: bytes) -> None:
        self._put(key, KIND_BYTES, sqlite3.Binary(value))

    def get_bytes(self, key: str) -> Optional[bytes]:
        value = self._fetch(key, KIND_BYTES)
        return bytes(value) if value is not None else None

    def set_many(self, values: Mapping[str, StoredValue]) -> None:
        """Write all values in a single transaction."""
        rows = [(key,) + self._encode(value) for key, value in values.items()]

        with self._lock:
            with self._get_connection() as conn:
                now = datetime.now(timezone.utc).isoformat()
                conn.executemany("""
                    INSERT OR REPLACE INTO kv (key, kind, value, updated_at)
                    VALUES (?, ?, ?, ?)
                """, [row + (now,) for row in rows])
                conn.commit()

    @staticmethod
    def _encode(value: StoredValue) -> tuple[str, Any]:
        if isinstance(value, bool):
            return KIND_BOOL, 1 if value else 0
        if isinstance(value, (bytes, bytearray)):
            return KIND_BYTES, sqlite3.Binary(value)
        return KIND_FLOAT, float(value)

    def remove(self, key: str) -> None:
        with self._lock:
            with self._get_connection() as conn:
                conn.execute("DELETE FROM kv WHERE key = ?", (key,))
                conn.commit()

    def keys(self) -> list[str]:
        with self._get_connection() as conn:
            rows = conn.execute("SELECT key FROM kv ORDER BY key").fetchall()
            return [row["key"] for row in rows]

    def health_check(self) -> bool:
        try:
            with self._get_connection() as conn:
                conn.execute("SELECT 1").fetchone()
            return True
        except PersistenceError:
            return False

    def _put(self, key: str, kind: str, value: Any) -> None:
        with self._lock:
            with self._get_connection() as conn:
                now = datetime.now(timezone.utc).isoformat()
                conn.execute("""
                    INSERT OR REPLACE INTO kv (key, kind, value, updated_at)
                    VALUES (?, ?, ?, ?)
                """, (key, kind, value, now))
                conn.commit()

    def _fetch(self, key: str, kind: str) -> Any:
        with self._get_connection() as conn:
            row = conn.execute(
                "SELECT kind, value FROM kv WHERE key = ?", (key,)
            ).fetchone()

        if row is None:
            return None

        if row["kind"] != kind:
            raise PersistenceError(
                f"Stored value for {key} is {row['kind']}, expected {kind}",
                operation="get",
                key=key
            )
        return row["value"]
