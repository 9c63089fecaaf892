"""
Lap timer data models.

This module defines immutable data structures for laps, clock engine
snapshots, whole-session snapshots and the change events emitted to
observers after every completed mutation.
"""

import math
import uuid
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional

from ..errors import ContractViolationError
from ..utils.time import utc_now


def new_lap_id() -> str:
    """Generate an opaque unique lap identifier."""
    return str(uuid.uuid4())


class MutationKind(str, Enum):
    """Kinds of session mutation reported to observers."""
    STARTED = "started"
    STOPPED = "stopped"
    TICKED = "ticked"
    RESET = "reset"
    LAP_SAVED = "lap_saved"
    LAPS_DELETED = "laps_deleted"
    LAP_RENAMED = "lap_renamed"
    RESTORED = "restored"
    CLEARED = "cleared"


@dataclass(frozen=True)
class Lap:
    """A named checkpoint of the elapsed time at the moment it was saved."""

    elapsed: float
    name: str = "Lap"
    id: str = field(default_factory=new_lap_id)
    created_at: datetime = field(default_factory=utc_now)

    def __post_init__(self) -> None:
        if not math.isfinite(self.elapsed) or self.elapsed < 0:
            raise ContractViolationError(
                "Lap elapsed time must be a finite, non-negative number",
                argument="elapsed",
                value=self.elapsed
            )

        # Naive timestamps are taken as UTC so stored laps decode to equal values
        if self.created_at.tzinfo is None:
            object.__setattr__(self, "created_at", self.created_at.replace(tzinfo=timezone.utc))

    @property
    def display_name(self) -> str:
        """Name shown to users; an empty name displays as "Lap"."""
        return self.name or "Lap"

    def with_name(self, name: str) -> 'Lap':
        """Create a copy with a new name; id, creation time and elapsed are kept."""
        return replace(self, name=name)


@dataclass(frozen=True)
class ClockState:
    """Snapshot of the clock engine."""

    is_running: bool = False
    elapsed: float = 0.0

    @property
    def label(self) -> str:
        return "running" if self.is_running else "stopped"


@dataclass(frozen=True)
class SessionSnapshot:
    """Read-only view of the whole session (clock plus ledger)."""

    is_running: bool = False
    elapsed: float = 0.0
    laps: tuple[Lap, ...] = ()

    @property
    def total_lap_time(self) -> float:
        return sum(lap.elapsed for lap in self.laps)

    @property
    def clock(self) -> ClockState:
        return ClockState(is_running=self.is_running, elapsed=self.elapsed)


@dataclass(frozen=True)
class SessionEvent:
    """Change notification emitted once per completed mutation."""

    kind: MutationKind
    snapshot: SessionSnapshot
    timestamp: datetime = field(default_factory=utc_now)

    # Operation-specific details, e.g. the saved lap id or removed indices
    context: Optional[dict[str, Any]] = None
