"""
Clock engine: running state and accumulated elapsed time.

Elapsed time only moves through ``advance`` while running, or back to zero
through ``reset``. Ticks arrive from an injected tick source and are applied
under the engine's lock, which the session shares so that ticks and user
actions never interleave.
"""

import math
import threading
from typing import Callable, Optional

from ..errors import ContractViolationError
from ..logging.config import get_state_logger, log_clock_transition
from ..ticker.base import TickSource
from .models import ClockState

state_logger = get_state_logger(__name__)

DEFAULT_TICK_INTERVAL = 0.01


class ClockEngine:
    """Stopwatch engine driven by a periodic tick source."""

    def __init__(
        self,
        tick_source: Optional[TickSource] = None,
        tick_interval: float = DEFAULT_TICK_INTERVAL,
        on_tick: Optional[Callable[[float], None]] = None,
        lock: Optional[threading.RLock] = None
    ):
        if tick_interval <= 0:
            raise ContractViolationError(
                "Tick interval must be positive",
                argument="tick_interval",
                value=tick_interval
            )

        self.logger = state_logger
        self._tick_source = tick_source
        self._tick_interval = tick_interval
        self._on_tick = on_tick
        self._lock = lock or threading.RLock()

        self._is_running = False
        self._elapsed = 0.0

        # Bumped on every arm/disarm so ticks from a stale arming are dropped
        self._generation = 0

    @property
    def is_running(self) -> bool:
        return self._is_running

    @property
    def elapsed(self) -> float:
        return self._elapsed

    @property
    def tick_interval(self) -> float:
        return self._tick_interval

    @property
    def tick_source(self) -> Optional[TickSource]:
        return self._tick_source

    def snapshot(self) -> ClockState:
        """Current running flag and elapsed time."""
        with self._lock:
            return ClockState(is_running=self._is_running, elapsed=self._elapsed)

    def start(self) -> bool:
        """
        Start the clock and arm the tick source.

        Starting an already running clock does not register a second tick
        subscription.

        Returns:
            True if the clock was stopped before the call
        """
        with self._lock:
            changed = not self._is_running
            self._is_running = True
            self._arm()

            if changed:
                log_clock_transition(
                    self.logger,
                    from_state="stopped",
                    to_state="running",
                    trigger="start",
                    context={"elapsed": self._elapsed}
                )

            return changed

    def stop(self) -> bool:
        """
        Stop the clock and disarm the tick source.

        Returns:
            True if the clock was running before the call
        """
        with self._lock:
            changed = self._is_running
            self._is_running = False
            self._disarm()

            if changed:
                log_clock_transition(
                    self.logger,
                    from_state="running",
                    to_state="stopped",
                    trigger="stop",
                    context={"elapsed": self._elapsed}
                )

            return changed

    def toggle(self) -> bool:
        """
        Flip between running and stopped.

        Returns:
            The running flag after the toggle
        """
        with self._lock:
            if self._is_running:
                self.stop()
            else:
                self.start()
            return self._is_running

    def advance(self, delta: float) -> bool:
        """
        Add ``delta`` seconds to the elapsed time if the clock is running.

        Args:
            delta: Non-negative seconds since the previous tick

        Returns:
            True if elapsed time changed

        Raises:
            ContractViolationError: If delta is negative, not finite or not a number
        """
        if (isinstance(delta, bool) or not isinstance(delta, (int, float))
                or not math.isfinite(delta) or delta < 0):
            raise ContractViolationError(
                "Tick delta must be a finite, non-negative number of seconds",
                argument="delta",
                value=delta
            )

        with self._lock:
            if not self._is_running:
                return False

            self._elapsed += delta
            return True

    def reset(self) -> bool:
        """
        Stop the clock and zero the elapsed time.

        Returns:
            True if the clock was running or had non-zero elapsed time
        """
        with self._lock:
            was_running = self._is_running
            previous = self._elapsed

            self.stop()
            self._elapsed = 0.0

            changed = was_running or previous != 0.0
            if changed:
                log_clock_transition(
                    self.logger,
                    from_state="running" if was_running else "stopped",
                    to_state="stopped",
                    trigger="reset",
                    context={"previous_elapsed": previous}
                )

            return changed

    def restore(self, elapsed: float, is_running: bool) -> None:
        """
        Install persisted state, resuming ticks if the clock was running.

        Raises:
            ContractViolationError: If elapsed is negative or not finite
        """
        if not math.isfinite(elapsed) or elapsed < 0:
            raise ContractViolationError(
                "Restored elapsed time must be a finite, non-negative number",
                argument="elapsed",
                value=elapsed
            )

        with self._lock:
            self._elapsed = float(elapsed)
            if is_running:
                self.start()
            else:
                self.stop()

            self.logger.info(
                "Clock restored",
                elapsed=self._elapsed,
                is_running=self._is_running
            )

    def release(self) -> None:
        """
        Disarm the tick source while keeping the running flag.

        Used at shutdown so a running clock is persisted as running and
        resumes on the next restore.
        """
        with self._lock:
            self._disarm()

    def _arm(self) -> None:
        if self._tick_source is None or self._tick_source.armed:
            return

        self._generation += 1
        generation = self._generation
        self._tick_source.arm(
            lambda delta: self._handle_tick(generation, delta),
            self._tick_interval
        )

    def _disarm(self) -> None:
        self._generation += 1
        if self._tick_source is not None:
            self._tick_source.disarm()

    def _handle_tick(self, generation: int, delta: float) -> None:
        with self._lock:
            if generation != self._generation:
                return

            if self.advance(delta) and self._on_tick is not None:
                self._on_tick(delta)
