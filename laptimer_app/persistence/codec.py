"""
Lap sequence serialization.

Laps are stored as a UTF-8 JSON array in ledger order (newest first). Each
entry carries ``id``, ``name``, ``createdAt`` (ISO-8601) and ``elapsed``
(seconds).
"""

import json
import math
from collections.abc import Iterable
from typing import Any

from ..errors import ContractViolationError, CorruptSessionDataError
from ..state.models import Lap
from ..utils.time import format_timestamp, parse_timestamp

REQUIRED_FIELDS = ("id", "name", "createdAt", "elapsed")


def lap_to_dict(lap: Lap) -> dict[str, Any]:
    """Convert a lap to its serialized mapping."""
    return {
        "id": lap.id,
        "name": lap.name,
        "createdAt": format_timestamp(lap.created_at),
        "elapsed": lap.elapsed,
    }


def lap_from_dict(data: Any) -> Lap:
    """
    Build a lap from its serialized mapping.

    Raises:
        CorruptSessionDataError: If fields are missing or have the wrong type
    """
    if not isinstance(data, dict):
        raise CorruptSessionDataError(f"Lap entry must be an object, got {type(data).__name__}")

    missing = [name for name in REQUIRED_FIELDS if name not in data]
    if missing:
        raise CorruptSessionDataError(
            f"Lap entry missing fields: {', '.join(missing)}",
            context={"missing_fields": missing}
        )

    lap_id, name, created_at, elapsed = (data[f] for f in REQUIRED_FIELDS)

    if not isinstance(lap_id, str) or not lap_id:
        raise CorruptSessionDataError("Lap id must be a non-empty string", context={"id": lap_id})

    if not isinstance(name, str):
        raise CorruptSessionDataError("Lap name must be a string", context={"id": lap_id})

    if isinstance(elapsed, bool) or not isinstance(elapsed, (int, float)) or not math.isfinite(elapsed):
        raise CorruptSessionDataError("Lap elapsed must be a number", context={"id": lap_id})

    try:
        created = parse_timestamp(created_at)
    except (TypeError, ValueError, AttributeError) as e:
        raise CorruptSessionDataError(
            f"Lap createdAt is not an ISO-8601 timestamp: {created_at!r}",
            context={"id": lap_id}
        ) from e

    try:
        return Lap(id=lap_id, name=name, created_at=created, elapsed=float(elapsed))
    except ContractViolationError as e:
        raise CorruptSessionDataError(str(e), context={"id": lap_id}) from e


def encode_laps(laps: Iterable[Lap]) -> bytes:
    """Serialize laps, preserving order."""
    return json.dumps([lap_to_dict(lap) for lap in laps], separators=(",", ":")).encode("utf-8")


def decode_laps(raw: bytes) -> list[Lap]:
    """
    Deserialize laps produced by ``encode_laps``.

    Raises:
        CorruptSessionDataError: If the payload is not a valid lap array or
            contains duplicate ids
    """
    try:
        payload = json.loads(raw.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise CorruptSessionDataError(f"Lap data is not valid JSON: {e}", raw_data=raw) from e

    if not isinstance(payload, list):
        raise CorruptSessionDataError(
            f"Lap data must be a JSON array, got {type(payload).__name__}",
            raw_data=raw
        )

    laps = [lap_from_dict(entry) for entry in payload]

    seen: set[str] = set()
    for lap in laps:
        if lap.id in seen:
            raise CorruptSessionDataError(
                f"Duplicate lap id in stored data: {lap.id}",
                raw_data=raw
            )
        seen.add(lap.id)

    return laps
