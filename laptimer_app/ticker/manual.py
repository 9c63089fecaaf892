"""Deterministic tick source for tests and headless harnesses."""

from typing import Optional

from .base import TickCallback, TickSource


class ManualTickSource(TickSource):
    """Tick source that only fires when told to."""

    def __init__(self):
        self._callback: Optional[TickCallback] = None
        self.interval: Optional[float] = None
        self.arm_count = 0
        self.fired_count = 0

    @property
    def armed(self) -> bool:
        return self._callback is not None

    def arm(self, callback: TickCallback, interval: float) -> None:
        self._callback = callback
        self.interval = interval
        self.arm_count += 1

    def disarm(self) -> None:
        self._callback = None

    def fire(self, delta: Optional[float] = None) -> bool:
        """
        Deliver one tick.

        Args:
            delta: Seconds to report, defaults to the nominal interval

        Returns:
            True if a callback was armed and invoked
        """
        if self._callback is None:
            return False

        if delta is None:
            delta = self.interval or 0.0

        self.fired_count += 1
        self._callback(delta)
        return True

    def fire_many(self, count: int, delta: Optional[float] = None) -> int:
        """Deliver up to ``count`` ticks; returns how many were delivered."""
        delivered = 0
        for _ in range(count):
            if not self.fire(delta):
                break
            delivered += 1
        return delivered
