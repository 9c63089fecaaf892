"""
Error handling tests for the lap timer core.

Covers the error classification, contract rejections at the edges of the
core and degradation when storage misbehaves.
"""

import pytest
from unittest.mock import Mock

from laptimer_app.errors import (
    LapTimerError,
    ContractViolationError,
    ConfigurationError,
    PersistenceError,
    CorruptSessionDataError,
)
from laptimer_app.persistence.memory_store import MemoryKeyValueStore
from laptimer_app.persistence.session_store import SessionStore
from laptimer_app.state.models import MutationKind
from laptimer_app.state.session import LapTimerSession


class TestErrorClassification:
    """Test error classification system."""

    def test_contract_errors_are_not_recoverable(self):
        error = ContractViolationError("bad delta", argument="delta", value=-1)

        assert isinstance(error, LapTimerError)
        assert error.recoverable is False
        assert error.argument == "delta"
        assert error.value == -1
        assert error.context == {}

    def test_persistence_errors_are_recoverable(self):
        error = PersistenceError("locked", operation="set", key="clock.laps")

        assert error.recoverable is True
        assert error.operation == "set"
        assert error.key == "clock.laps"

    def test_corrupt_data_is_a_persistence_error(self):
        error = CorruptSessionDataError("bad json", raw_data=b"{", context={"offset": 1})

        assert isinstance(error, PersistenceError)
        assert error.operation == "decode"
        assert error.raw_data == b"{"
        assert error.context == {"offset": 1}
        assert error.recoverable is True

    def test_configuration_error_carries_errors(self):
        error = ConfigurationError("invalid", errors=["a", "b"])
        assert error.errors == ["a", "b"]
        assert str(error) == "invalid"


class TestContractRejections:
    """Invalid input raises instead of being absorbed."""

    def test_negative_delta_leaves_session_untouched(self, session):
        session.start()
        session.advance(1.0)
        events = []
        session.subscribe(events.append)

        with pytest.raises(ContractViolationError):
            session.advance(-0.5)

        assert session.elapsed == 1.0
        assert events == []

    def test_not_found_is_not_an_error(self, session):
        """Unknown ids and positions are benign no-ops."""
        assert session.rename("nope", "x") is None
        assert session.delete_laps([0, 5, -2]) == []


class TestStorageDegradation:
    """Storage failures never block in-memory changes."""

    def test_failing_backend_during_session(self):
        backend = Mock()
        backend.set_many.side_effect = PersistenceError("disk full", operation="set")
        session = LapTimerSession(store=SessionStore(backend))
        events = []
        session.subscribe(events.append)

        session.start()
        session.advance(2.0)
        lap = session.save_lap()
        session.rename(lap.id, "Kept in memory")

        assert session.laps[0].name == "Kept in memory"
        assert [event.kind for event in events] == [
            MutationKind.STARTED,
            MutationKind.TICKED,
            MutationKind.LAP_SAVED,
            MutationKind.LAP_RENAMED,
        ]

    def test_corrupt_storage_restores_fresh_ledger(self):
        backend = MemoryKeyValueStore()
        backend.set_float("clock.elapsed", 8.0)
        backend.set_bytes("clock.laps", b"[1, 2, 3]")

        session = LapTimerSession(store=SessionStore(backend))
        snapshot = session.restore()

        assert snapshot.elapsed == 8.0
        assert snapshot.laps == ()

    def test_recovers_after_transient_failure(self):
        backend = MemoryKeyValueStore()
        store = SessionStore(backend)
        session = LapTimerSession(store=store)

        original = backend.set_many
        backend.set_many = Mock(side_effect=PersistenceError("busy"))
        session.start()
        assert store.failure_count == 1

        backend.set_many = original
        session.advance(0.5)
        session.stop()

        assert backend.get_float("clock.elapsed") == 0.5
        assert backend.get_bool("clock.isRunning") is False
