"""Base class for periodic tick sources."""

from abc import ABC, abstractmethod
from typing import Callable

TickCallback = Callable[[float], None]


class TickSource(ABC):
    """Periodic callback source used to advance the clock engine."""

    @property
    @abstractmethod
    def armed(self) -> bool:
        """Whether a callback is currently registered."""
        pass

    @abstractmethod
    def arm(self, callback: TickCallback, interval: float) -> None:
        """
        Register a callback to be invoked roughly every ``interval`` seconds.

        Args:
            callback: Receives the seconds elapsed since the previous tick
            interval: Nominal tick period in seconds
        """
        pass

    @abstractmethod
    def disarm(self) -> None:
        """Stop invoking the callback. Safe to call when not armed."""
        pass
