"""
Lap ledger: the ordered collection of saved laps.

Laps are kept newest first. Every mutation rebuilds the sequence in one
step, so readers never observe a half-applied change. Lookups for rename go
through the stable lap id, never through position or value equality.
"""

from collections.abc import Iterable, Iterator
from datetime import datetime
from typing import Optional

from ..errors import ContractViolationError
from ..logging.config import get_state_logger, log_ledger_change
from ..utils.time import utc_now
from .models import Lap

logger = get_state_logger(__name__, subsystem="lap_ledger")


class LapLedger:
    """Newest-first sequence of laps keyed by stable id."""

    def __init__(self, laps: Optional[Iterable[Lap]] = None, name_prefix: str = "Lap"):
        self.logger = logger
        self.name_prefix = name_prefix
        self._laps: tuple[Lap, ...] = ()
        if laps is not None:
            self.replace_all(laps)

    @property
    def laps(self) -> tuple[Lap, ...]:
        return self._laps

    def __len__(self) -> int:
        return len(self._laps)

    def __iter__(self) -> Iterator[Lap]:
        return iter(self._laps)

    def save_lap(self, current_elapsed: float, now: Optional[datetime] = None) -> Lap:
        """
        Record a lap at the front of the ledger.

        The default name is positional, based on the ledger size at the
        moment of insertion ("Lap 1", "Lap 2", ...).

        Args:
            current_elapsed: Clock elapsed time to capture
            now: Creation timestamp, defaults to the current UTC time

        Returns:
            The newly created lap
        """
        lap = Lap(
            elapsed=float(current_elapsed),
            name=f"{self.name_prefix} {len(self._laps) + 1}",
            created_at=now or utc_now()
        )
        self._laps = (lap,) + self._laps

        log_ledger_change(
            self.logger,
            action="saved",
            lap_id=lap.id,
            context={"name": lap.name, "elapsed": lap.elapsed, "lap_count": len(self._laps)}
        )

        return lap

    def delete_laps(self, indices: Iterable[int]) -> list[Lap]:
        """
        Remove the laps at the given positions in a single update.

        Positions refer to the ordering before the call. Indices that are
        negative or out of range are ignored individually.

        Returns:
            The removed laps in their former order
        """
        doomed = {i for i in indices if 0 <= i < len(self._laps)}
        if not doomed:
            return []

        removed = [lap for i, lap in enumerate(self._laps) if i in doomed]
        self._laps = tuple(lap for i, lap in enumerate(self._laps) if i not in doomed)

        log_ledger_change(
            self.logger,
            action="deleted",
            context={
                "indices": sorted(doomed),
                "lap_ids": [lap.id for lap in removed],
                "lap_count": len(self._laps)
            }
        )

        return removed

    def rename(self, lap_id: str, new_name: str) -> Optional[Lap]:
        """
        Replace the name of the lap with the given id.

        Empty names are stored as-is. An unknown id is a silent no-op, since
        the lap may have been deleted in the meantime.

        Returns:
            The renamed lap, or None if no lap has that id
        """
        index = self.index_of(lap_id)
        if index is None:
            self.logger.debug("Rename target not found", lap_id=lap_id)
            return None

        renamed = self._laps[index].with_name(new_name)
        self._laps = self._laps[:index] + (renamed,) + self._laps[index + 1:]

        log_ledger_change(
            self.logger,
            action="renamed",
            lap_id=lap_id,
            context={"name": new_name}
        )

        return renamed

    def total_lap_time(self) -> float:
        """Sum of elapsed time over all laps."""
        return sum(lap.elapsed for lap in self._laps)

    def get(self, lap_id: str) -> Optional[Lap]:
        index = self.index_of(lap_id)
        return self._laps[index] if index is not None else None

    def index_of(self, lap_id: str) -> Optional[int]:
        for i, lap in enumerate(self._laps):
            if lap.id == lap_id:
                return i
        return None

    def replace_all(self, laps: Iterable[Lap]) -> None:
        """
        Install a complete lap sequence, e.g. one restored from storage.

        Raises:
            ContractViolationError: If two laps share an id
        """
        new_laps = tuple(laps)
        ids = [lap.id for lap in new_laps]
        if len(ids) != len(set(ids)):
            raise ContractViolationError(
                "Lap ids must be unique within a ledger",
                argument="laps",
                value=ids
            )
        self._laps = new_laps

    def clear(self) -> int:
        """Remove every lap; returns how many were removed."""
        count = len(self._laps)
        self._laps = ()
        if count:
            log_ledger_change(self.logger, action="cleared", context={"removed": count})
        return count
