"""Pytest configuration and shared fixtures."""

import pytest
from datetime import datetime, timezone

from laptimer_app.config.defaults import get_default_config
from laptimer_app.persistence.memory_store import MemoryKeyValueStore
from laptimer_app.persistence.session_store import SessionStore
from laptimer_app.state.models import Lap
from laptimer_app.state.session import LapTimerSession
from laptimer_app.ticker.manual import ManualTickSource


@pytest.fixture
def fixed_time() -> datetime:
    """A fixed lap creation timestamp."""
    return datetime(2025, 9, 12, 8, 30, 15, 250000, tzinfo=timezone.utc)


@pytest.fixture
def ticker() -> ManualTickSource:
    """Deterministic tick source."""
    return ManualTickSource()


@pytest.fixture
def memory_backend() -> MemoryKeyValueStore:
    """Empty in-memory key-value store."""
    return MemoryKeyValueStore()


@pytest.fixture
def session_store(memory_backend: MemoryKeyValueStore) -> SessionStore:
    """Session store over the in-memory backend."""
    return SessionStore(memory_backend, get_default_config().persistence)


@pytest.fixture
def session(session_store: SessionStore, ticker: ManualTickSource) -> LapTimerSession:
    """Fresh session driven by the manual ticker."""
    return LapTimerSession(store=session_store, tick_source=ticker)


@pytest.fixture
def sample_laps(fixed_time: datetime) -> list:
    """Three laps in ledger (newest first) order."""
    return [
        Lap(id="lap-3", name="Lap 3", created_at=fixed_time, elapsed=3.0),
        Lap(id="lap-2", name="Warmup", created_at=fixed_time, elapsed=2.0),
        Lap(id="lap-1", name="", created_at=fixed_time, elapsed=1.0),
    ]
