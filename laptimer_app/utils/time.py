"""
Time formatting utilities for elapsed durations and lap timestamps.

Elapsed durations are float seconds and render as ``MM:SS:CC``. Lap
creation timestamps are timezone-aware UTC datetimes and serialize as
ISO-8601 strings.
"""

import math
from datetime import datetime, timezone
from typing import Optional

from ..errors import ContractViolationError

HUNDREDTHS_PER_SECOND = 100
HUNDREDTHS_PER_MINUTE = 60 * HUNDREDTHS_PER_SECOND


def to_hundredths(seconds: float) -> int:
    """
    Round a duration to the nearest hundredth of a second.

    Halves round up, so 0.125s becomes 13 hundredths.

    Args:
        seconds: Non-negative duration in seconds

    Returns:
        Whole number of hundredths
    """
    if not math.isfinite(seconds) or seconds < 0:
        raise ContractViolationError(
            "Duration must be a finite, non-negative number of seconds",
            argument="seconds",
            value=seconds
        )

    return int(math.floor(seconds * HUNDREDTHS_PER_SECOND + 0.5))


def format_elapsed(seconds: float) -> str:
    """
    Format a duration as ``MM:SS:CC``.

    Minutes are padded to two digits and keep growing past 99. The input is
    rounded to the nearest hundredth before it is split, so 0.999s renders
    as ``00:01:00``.

    Args:
        seconds: Non-negative duration in seconds

    Returns:
        Formatted duration string
    """
    total = to_hundredths(seconds)
    minutes, remainder = divmod(total, HUNDREDTHS_PER_MINUTE)
    secs, hundredths = divmod(remainder, HUNDREDTHS_PER_SECOND)
    return f"{minutes:02d}:{secs:02d}:{hundredths:02d}"


def utc_now() -> datetime:
    """Current wall-clock time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def format_timestamp(ts: datetime) -> str:
    """
    Format a timestamp for persistence and display.

    Args:
        ts: Timestamp to format; naive values are assumed to be UTC

    Returns:
        ISO8601 formatted string
    """
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    return ts.isoformat()


def parse_timestamp(text: str) -> datetime:
    """
    Parse an ISO8601 timestamp produced by ``format_timestamp``.

    A trailing ``Z`` is accepted. Naive values are assumed to be UTC.

    Raises:
        ValueError: If the text is not a valid ISO8601 timestamp
    """
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"

    ts = datetime.fromisoformat(text)
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    return ts


def format_clock_time(ts: datetime, tz: Optional[timezone] = None) -> str:
    """
    Format a lap creation time as ``HH:MM:SS`` for listings.

    Args:
        ts: Timestamp to render
        tz: Target timezone, defaults to the local timezone
    """
    return ts.astimezone(tz).strftime("%H:%M:%S")
