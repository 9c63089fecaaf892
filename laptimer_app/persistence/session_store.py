"""
Session store: maps clock and ledger state onto key-value storage.

Saving never raises. A failed save is logged and reported through the
return value so that the in-memory state change it follows always stands.
Loading never raises either; missing or corrupt values fall back to the
defaults of a fresh session, key by key.
"""

import math
from typing import Optional

from ..config.defaults import PersistenceParams
from ..errors import CorruptSessionDataError
from ..logging.config import get_persistence_logger
from ..state.models import SessionSnapshot
from .base import KeyValueStore
from .codec import decode_laps, encode_laps
from .memory_store import MemoryKeyValueStore
from .sqlite_store import SqliteKeyValueStore

logger = get_persistence_logger(__name__)


class SessionStore:
    """Persists session snapshots through a ``KeyValueStore`` port."""

    def __init__(self, backend: KeyValueStore, params: Optional[PersistenceParams] = None):
        self.backend = backend
        self.params = params or PersistenceParams()
        self.logger = logger
        self.save_count = 0
        self.failure_count = 0

    @property
    def keys(self) -> tuple[str, str, str]:
        return (self.params.key_elapsed, self.params.key_is_running, self.params.key_laps)

    def save(self, snapshot: SessionSnapshot) -> bool:
        """
        Write the snapshot to storage.

        Returns:
            True if every key was written, False if storage failed
        """
        try:
            self.backend.set_many({
                self.params.key_elapsed: float(snapshot.elapsed),
                self.params.key_is_running: bool(snapshot.is_running),
                self.params.key_laps: encode_laps(snapshot.laps),
            })
        except Exception as e:
            self.failure_count += 1
            self.logger.error(
                "Failed to save session",
                error=str(e),
                error_type=type(e).__name__,
                failure_count=self.failure_count
            )
            return False

        self.save_count += 1
        self.logger.debug(
            "Session saved",
            elapsed=snapshot.elapsed,
            is_running=snapshot.is_running,
            lap_count=len(snapshot.laps)
        )
        return True

    def load(self) -> SessionSnapshot:
        """
        Read the persisted session.

        Returns:
            The stored snapshot, with defaults substituted for anything that
            is missing, unreadable or corrupt
        """
        elapsed = self._load_elapsed()
        is_running = self._load_is_running()
        laps = self._load_laps()

        snapshot = SessionSnapshot(is_running=is_running, elapsed=elapsed, laps=tuple(laps))

        self.logger.info(
            "Session loaded",
            elapsed=snapshot.elapsed,
            is_running=snapshot.is_running,
            lap_count=len(snapshot.laps)
        )
        return snapshot

    def clear(self) -> bool:
        """Remove all session keys from storage."""
        try:
            for key in self.keys:
                self.backend.remove(key)
        except Exception as e:
            self.failure_count += 1
            self.logger.error("Failed to clear session", error=str(e))
            return False

        self.logger.info("Session cleared from storage")
        return True

    def _load_elapsed(self) -> float:
        key = self.params.key_elapsed
        try:
            value = self.backend.get_float(key)
        except Exception as e:
            self._warn_fallback(key, e)
            return 0.0

        if value is None:
            return 0.0

        if not math.isfinite(value) or value < 0:
            self._warn_fallback(key, CorruptSessionDataError(f"Invalid elapsed value: {value}"))
            return 0.0

        return value

    def _load_is_running(self) -> bool:
        key = self.params.key_is_running
        try:
            value = self.backend.get_bool(key)
        except Exception as e:
            self._warn_fallback(key, e)
            return False

        return bool(value)

    def _load_laps(self) -> list:
        key = self.params.key_laps
        try:
            raw = self.backend.get_bytes(key)
            if raw is None:
                return []
            return decode_laps(raw)
        except Exception as e:
            self._warn_fallback(key, e)
            return []

    def _warn_fallback(self, key: str, error: Exception) -> None:
        self.logger.warning(
            "Stored session value unusable, using default",
            key=key,
            error=str(error),
            error_type=type(error).__name__
        )


def create_backend(params: PersistenceParams) -> KeyValueStore:
    """
    Build the key-value backend named in the persistence parameters.

    Raises:
        ValueError: If the backend name is unknown
    """
    if params.backend == "sqlite":
        return SqliteKeyValueStore(params.db_path)
    if params.backend == "memory":
        return MemoryKeyValueStore()
    raise ValueError(f"Unsupported persistence backend: {params.backend}")
