"""
Persistence error classifications.

Storage failures never block an in-memory state change; the session store
catches these, logs them and degrades to default state where needed.
"""

from typing import Optional

from .contract import LapTimerError


class PersistenceError(LapTimerError):
    """Key-value storage was unavailable or rejected an operation."""

    def __init__(self, message: str, operation: Optional[str] = None,
                 key: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.operation = operation
        self.key = key
        self.recoverable = True


class CorruptSessionDataError(PersistenceError):
    """Stored session data exists but cannot be decoded."""

    def __init__(self, message: str, raw_data: Optional[bytes] = None, **kwargs):
        super().__init__(message, operation="decode", **kwargs)
        self.raw_data = raw_data
