"""
Contract and configuration error classifications.

These exceptions represent caller mistakes that the core rejects instead of
silently absorbing, such as a negative tick delta.
"""

from typing import Any, Optional, Dict, List


class LapTimerError(Exception):
    """Base class for all lap timer errors."""

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.context = context or {}
        self.recoverable = False


class ContractViolationError(LapTimerError):
    """An operation was called with input outside its contract."""

    def __init__(self, message: str, argument: Optional[str] = None,
                 value: Any = None, **kwargs):
        super().__init__(message, **kwargs)
        self.argument = argument
        self.value = value


class ConfigurationError(LapTimerError):
    """Configuration file or values failed validation."""

    def __init__(self, message: str, errors: Optional[List[Any]] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.errors = errors or []
