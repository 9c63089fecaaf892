"""Tests for structured logging of clock transitions and ledger changes."""

import pytest

from laptimer_app.logging.config import (
    configure_logging, get_state_logger, log_clock_transition, log_ledger_change
)
from laptimer_app.persistence.memory_store import MemoryKeyValueStore
from laptimer_app.persistence.session_store import SessionStore
from laptimer_app.state.clock import ClockEngine
from laptimer_app.state.ledger import LapLedger
from laptimer_app.state.models import SessionSnapshot


class CapturingLogger:
    """Minimal bound logger that records emitted events with their bindings."""

    def __init__(self, records, bindings=None):
        self.records = records
        self.bindings = bindings or {}

    def bind(self, **kwargs):
        return CapturingLogger(self.records, {**self.bindings, **kwargs})

    def _emit(self, level, message, **kwargs):
        self.records.append({
            'message': message,
            'level': level,
            'kwargs': {**self.bindings, **kwargs}
        })

    def info(self, message, **kwargs):
        self._emit('info', message, **kwargs)

    def debug(self, message, **kwargs):
        self._emit('debug', message, **kwargs)

    def warning(self, message, **kwargs):
        self._emit('warning', message, **kwargs)


class TestLoggingIntegration:
    """Clock and ledger emit one structured entry per change."""

    def setup_method(self):
        configure_logging(level="DEBUG", format_json=True)
        self.log_messages = []
        self.logger = CapturingLogger(self.log_messages)

    def messages(self, text):
        return [m for m in self.log_messages if m['message'] == text]

    def test_clock_transitions_logged(self):
        engine = ClockEngine()
        engine.logger = self.logger

        engine.start()
        engine.advance(1.5)
        engine.stop()

        transitions = self.messages("Clock transition")
        assert [(t['kwargs']['from_state'], t['kwargs']['to_state']) for t in transitions] == [
            ("stopped", "running"),
            ("running", "stopped"),
        ]
        assert transitions[1]['kwargs']['context'] == {"elapsed": 1.5}
        assert transitions[1]['kwargs']['trigger'] == "stop"

    def test_idempotent_calls_not_logged(self):
        engine = ClockEngine()
        engine.logger = self.logger

        engine.stop()
        engine.reset()

        assert self.messages("Clock transition") == []

    def test_reset_logged_with_previous_elapsed(self):
        engine = ClockEngine()
        engine.logger = self.logger
        engine.start()
        engine.advance(2.0)

        engine.reset()

        reset = self.messages("Clock transition")[-1]
        assert reset['kwargs']['trigger'] == "reset"
        assert reset['kwargs']['context'] == {"previous_elapsed": 2.0}

    def test_ledger_changes_logged(self):
        ledger = LapLedger()
        ledger.logger = self.logger

        lap = ledger.save_lap(1.0)
        ledger.rename(lap.id, "Warmup")
        ledger.delete_laps([0])

        actions = [m['kwargs']['action'] for m in self.messages("Ledger change")]
        assert actions == ["saved", "renamed", "deleted"]
        assert all(m['kwargs']['transition'] == "ledger" for m in self.messages("Ledger change"))

    def test_missing_rename_logged_at_debug(self):
        ledger = LapLedger()
        ledger.logger = self.logger

        ledger.rename("missing", "x")

        assert self.log_messages == [{
            'message': "Rename target not found",
            'level': 'debug',
            'kwargs': {'lap_id': "missing"}
        }]

    def test_helpers_bind_standard_fields(self):
        log_clock_transition(self.logger, "stopped", "running", "start")
        log_ledger_change(self.logger, "cleared", context={"removed": 2})

        clock_entry, ledger_entry = self.log_messages
        assert clock_entry['kwargs'] == {
            'from_state': "stopped",
            'to_state': "running",
            'trigger': "start",
            'transition': "clock",
        }
        assert ledger_entry['kwargs']['lap_id'] is None
        assert ledger_entry['kwargs']['context'] == {"removed": 2}

    def test_state_logger_is_usable(self):
        """A real structlog logger accepts the same calls."""
        log_clock_transition(get_state_logger("test"), "stopped", "running", "start")

    def test_configure_logging_rejects_unknown_level(self):
        with pytest.raises(AttributeError):
            configure_logging(level="LOUD")


class TestLoggerConfiguration:
    """Module-level loggers follow configure_logging, whenever it runs."""

    def test_state_logs_respect_level_and_stay_off_stdout(self, capsys):
        configure_logging(level="ERROR")

        engine = ClockEngine()
        engine.start()
        engine.stop()
        LapLedger().save_lap(1.0)

        captured = capsys.readouterr()
        assert captured.out == ""
        assert "Clock transition" not in captured.err

    def test_ledger_logs_carry_subsystem_on_stderr(self, capsys):
        configure_logging(level="INFO")

        LapLedger().save_lap(1.0)

        captured = capsys.readouterr()
        assert captured.out == ""
        assert "Ledger change" in captured.err
        assert "lap_ledger" in captured.err
        assert "audit_trail" in captured.err

    def test_session_store_logs_respect_level(self, capsys):
        configure_logging(level="ERROR")

        store = SessionStore(MemoryKeyValueStore())
        store.save(SessionSnapshot(elapsed=1.0))
        store.load()

        captured = capsys.readouterr()
        assert captured.out == ""
        assert "Session loaded" not in captured.err
