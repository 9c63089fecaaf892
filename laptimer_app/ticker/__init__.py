"""
Tick sources that drive the clock engine.

A tick source invokes a callback with the measured delta since the previous
tick while it is armed.
"""
from .base import TickCallback, TickSource
from .manual import ManualTickSource
from .threaded import ThreadedTickSource

__all__ = ["TickCallback", "TickSource", "ManualTickSource", "ThreadedTickSource"]
