"""
Session orchestration for the lap timer.

``LapTimerSession`` is the surface a presentation layer talks to. It owns
the clock engine and lap ledger, serializes every mutation behind one
re-entrant lock shared with the tick path, persists after each mutation and
emits one ``SessionEvent`` per completed change.
"""

import threading
import time
from collections.abc import Iterable
from typing import Callable, Optional

import structlog

from ..config.defaults import DefaultConfig, get_default_config
from ..persistence.base import KeyValueStore
from ..persistence.session_store import SessionStore, create_backend
from ..ticker.base import TickSource
from .clock import ClockEngine
from .ledger import LapLedger
from .models import Lap, MutationKind, SessionEvent, SessionSnapshot

logger = structlog.get_logger(__name__)

SessionListener = Callable[[SessionEvent], None]


class LapTimerSession:
    """Clock engine plus lap ledger, persisted and observable."""

    def __init__(
        self,
        store: Optional[SessionStore] = None,
        tick_source: Optional[TickSource] = None,
        config: Optional[DefaultConfig] = None,
        monotonic: Callable[[], float] = time.monotonic
    ):
        self.config = config or get_default_config()
        self.store = store
        self.logger = logger

        self._lock = threading.RLock()
        self._listeners: list[SessionListener] = []
        self._monotonic = monotonic
        self._last_tick_save: Optional[float] = None

        self.engine = ClockEngine(
            tick_source=tick_source,
            tick_interval=self.config.clock.tick_interval_seconds,
            on_tick=self._after_tick,
            lock=self._lock
        )
        self.ledger = LapLedger(name_prefix=self.config.laps.default_name_prefix)

    # Observation

    @property
    def is_running(self) -> bool:
        return self.engine.is_running

    @property
    def elapsed(self) -> float:
        return self.engine.elapsed

    @property
    def laps(self) -> tuple[Lap, ...]:
        return self.ledger.laps

    def snapshot(self) -> SessionSnapshot:
        """Consistent view of clock and ledger."""
        with self._lock:
            return self._snapshot()

    def subscribe(self, listener: SessionListener) -> Callable[[], None]:
        """
        Register a change listener.

        Returns:
            A callable that removes the listener again
        """
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    # Lifecycle

    def restore(self) -> SessionSnapshot:
        """
        Install the persisted session, resuming ticks if it was running.

        Without a store this leaves the fresh session untouched.
        """
        if self.store is None:
            return self.snapshot()

        stored = self.store.load()

        with self._lock:
            self.ledger.replace_all(stored.laps)
            self.engine.restore(stored.elapsed, stored.is_running)

            snapshot = self._snapshot()
            self._notify(MutationKind.RESTORED, snapshot, {"lap_count": len(snapshot.laps)})
            return snapshot

    def clear(self) -> None:
        """Reset the clock, drop every lap and wipe persisted state."""
        with self._lock:
            self.engine.reset()
            removed = self.ledger.clear()
            if self.store is not None:
                self.store.clear()

            self.logger.info("Session cleared", removed_laps=removed)
            self._notify(MutationKind.CLEARED, self._snapshot(), {"removed_laps": removed})

    def close(self) -> None:
        """Persist the current state and release the tick source."""
        with self._lock:
            if self.store is not None:
                self.store.save(self._snapshot())
            self.engine.release()

        tick_source = self.engine.tick_source
        join = getattr(tick_source, "join", None)
        if callable(join):
            join(1.0)

        self.logger.info("Session closed", elapsed=self.engine.elapsed, is_running=self.engine.is_running)

    # Clock operations

    def start(self) -> bool:
        with self._lock:
            changed = self.engine.start()
            if changed:
                self._commit(MutationKind.STARTED)
            return changed

    def stop(self) -> bool:
        with self._lock:
            changed = self.engine.stop()
            if changed:
                self._commit(MutationKind.STOPPED)
            return changed

    def toggle(self) -> bool:
        """Flip running state; returns the running flag afterwards."""
        with self._lock:
            running = self.engine.toggle()
            self._commit(MutationKind.STARTED if running else MutationKind.STOPPED)
            return running

    def reset(self) -> bool:
        """Stop and zero the clock. Laps are kept."""
        with self._lock:
            changed = self.engine.reset()
            if changed:
                self._commit(MutationKind.RESET)
            return changed

    def advance(self, delta: float) -> bool:
        """
        Apply a tick delta, as the tick source would.

        Returns:
            True if the clock was running and elapsed time changed
        """
        with self._lock:
            applied = self.engine.advance(delta)
            if applied:
                self._after_tick(delta)
            return applied

    # Ledger operations

    def save_lap(self) -> Lap:
        """Record a lap at the current elapsed time."""
        with self._lock:
            lap = self.ledger.save_lap(self.engine.elapsed)
            self._commit(MutationKind.LAP_SAVED, {"lap_id": lap.id, "name": lap.name})
            return lap

    def delete_laps(self, indices: Iterable[int]) -> list[Lap]:
        """Remove laps by position; invalid positions are ignored."""
        with self._lock:
            removed = self.ledger.delete_laps(indices)
            if removed:
                self._commit(MutationKind.LAPS_DELETED, {"lap_ids": [lap.id for lap in removed]})
            return removed

    def rename(self, lap_id: str, new_name: str) -> Optional[Lap]:
        """Rename a lap by id; unknown ids are ignored."""
        with self._lock:
            renamed = self.ledger.rename(lap_id, new_name)
            if renamed is not None:
                self._commit(MutationKind.LAP_RENAMED, {"lap_id": lap_id, "name": new_name})
            return renamed

    def total_lap_time(self) -> float:
        return self.ledger.total_lap_time()

    # Internals, called with the lock held

    def _snapshot(self) -> SessionSnapshot:
        return SessionSnapshot(
            is_running=self.engine.is_running,
            elapsed=self.engine.elapsed,
            laps=self.ledger.laps
        )

    def _commit(self, kind: MutationKind, context: Optional[dict] = None) -> None:
        snapshot = self._snapshot()
        if self.store is not None:
            self.store.save(snapshot)
            self._last_tick_save = self._monotonic()
        self._notify(kind, snapshot, context)

    def _after_tick(self, delta: float) -> None:
        snapshot = self._snapshot()

        interval = self.config.persistence.tick_save_interval_seconds
        if self.store is not None and interval >= 0:
            now = self._monotonic()
            if self._last_tick_save is None or now - self._last_tick_save >= interval:
                self.store.save(snapshot)
                self._last_tick_save = now

        self._notify(MutationKind.TICKED, snapshot, {"delta": delta})

    def _notify(self, kind: MutationKind, snapshot: SessionSnapshot, context: Optional[dict] = None) -> None:
        event = SessionEvent(kind=kind, snapshot=snapshot, context=context)

        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception as e:
                self.logger.error(
                    "Session listener failed",
                    mutation=kind.value,
                    error=str(e)
                )


def open_session(
    config: Optional[DefaultConfig] = None,
    tick_source: Optional[TickSource] = None,
    backend: Optional[KeyValueStore] = None
) -> LapTimerSession:
    """
    Create a session wired to its configured storage and restore it.

    Args:
        config: Effective configuration, defaults when omitted
        tick_source: Tick source driving the clock; none means manual advance
        backend: Key-value backend overriding the configured one
    """
    config = config or get_default_config()
    if backend is None:
        backend = create_backend(config.persistence)

    session = LapTimerSession(
        store=SessionStore(backend, config.persistence),
        tick_source=tick_source,
        config=config
    )
    session.restore()
    return session
