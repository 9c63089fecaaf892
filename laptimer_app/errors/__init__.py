"""
Error classification for the lap timer core.

The core is intentionally error-light: not-found conditions are benign
no-ops and persistence failures are absorbed at the session store. The
exceptions here cover broken input contracts, storage problems and invalid
configuration.
"""

from .contract import (
    LapTimerError,
    ContractViolationError,
    ConfigurationError,
)
from .persistence import (
    PersistenceError,
    CorruptSessionDataError,
)

__all__ = [
    "LapTimerError",
    "ContractViolationError",
    "ConfigurationError",
    "PersistenceError",
    "CorruptSessionDataError",
]
