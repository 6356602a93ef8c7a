"""Helpers for converting option durations and stamping log records.

Options are expressed in milliseconds to match the chart widget convention,
while schedulers (``threading.Timer``, ``asyncio``) work in seconds.
"""
from __future__ import annotations

from datetime import datetime, timezone


def ms_to_seconds(value_ms: float) -> float:
    """Convert a millisecond duration to seconds, never negative."""

    return max(float(value_ms), 0.0) / 1000.0


def utc_from_timestamp(timestamp: float) -> datetime:
    """Return an aware UTC datetime for a POSIX timestamp."""

    return datetime.fromtimestamp(timestamp, tz=timezone.utc)
