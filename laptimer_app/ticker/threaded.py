"""Background-thread tick source."""

import threading
import time
from typing import Optional

import structlog

from .base import TickCallback, TickSource

logger = structlog.get_logger(__name__)


class ThreadedTickSource(TickSource):
    """
    Tick source backed by a daemon thread.

    The thread wakes every nominal interval and reports the monotonic time
    actually elapsed since the previous tick, so late or bunched wake-ups
    never lose or invent time.

    ``disarm`` only signals the thread and returns immediately; a tick that
    is already in flight may still be delivered once. Callers that need the
    thread gone use ``join``.
    """

    def __init__(self, name: str = "laptimer-ticker"):
        self.name = name
        self.logger = logger
        self._lock = threading.Lock()
        self._thread: Optional[threading.Thread] = None
        self._stop_event: Optional[threading.Event] = None
        self._retired: list[threading.Thread] = []
        self.tick_count = 0

    @property
    def armed(self) -> bool:
        with self._lock:
            return self._thread is not None

    def arm(self, callback: TickCallback, interval: float) -> None:
        if interval <= 0:
            raise ValueError(f"Tick interval must be positive, got {interval}")

        with self._lock:
            if self._thread is not None:
                self.logger.debug("Tick source already armed", ticker=self.name)
                return

            stop_event = threading.Event()
            thread = threading.Thread(
                target=self._run,
                args=(callback, interval, stop_event),
                name=self.name,
                daemon=True
            )
            self._stop_event = stop_event
            self._thread = thread
            thread.start()

        self.logger.debug("Tick source armed", ticker=self.name, interval=interval)

    def disarm(self) -> None:
        with self._lock:
            thread, stop_event = self._thread, self._stop_event
            self._thread = None
            self._stop_event = None
            self._retired = [t for t in self._retired if t.is_alive()]
            if thread is not None:
                self._retired.append(thread)

        if stop_event is None:
            return

        stop_event.set()
        self.logger.debug("Tick source disarmed", ticker=self.name)

    def join(self, timeout: Optional[float] = None) -> None:
        """Wait for disarmed tick threads to exit."""
        with self._lock:
            retired, self._retired = self._retired, []

        current = threading.current_thread()
        for thread in retired:
            if thread is not current:
                thread.join(timeout)

    def _run(self, callback: TickCallback, interval: float, stop_event: threading.Event) -> None:
        last = time.monotonic()

        while not stop_event.wait(interval):
            now = time.monotonic()
            delta = now - last
            last = now

            try:
                callback(delta)
                self.tick_count += 1
            except Exception as e:
                self.logger.error(
                    "Tick callback failed",
                    ticker=self.name,
                    error=str(e)
                )
