"""Enumerations shared across the loop subsystems.

Values are the literal strings understood by the rendering engine, so members
can be placed into action payloads and compared with raw series ``type`` tags
directly.
"""
from __future__ import annotations

from enum import Enum


class SeriesType(str, Enum):
    """Series type tags that change how a data point is presented."""

    MAP = "map"
    PIE = "pie"
    CHORD = "chord"
    RADAR = "radar"


class ActionType(str, Enum):
    """Actions dispatched to the chart handle."""

    HIGHLIGHT = "highlight"
    DOWNPLAY = "downplay"
    SHOW_TIP = "showTip"


class ChartEvent(str, Enum):
    """Events the controller subscribes to."""

    MOUSEMOVE = "mousemove"
    GLOBALOUT = "globalout"


# Series presented by the entry's ``name`` when it has one.
NAMED_SERIES_TYPES: frozenset[str] = frozenset(
    {SeriesType.MAP.value, SeriesType.PIE.value, SeriesType.CHORD.value}
)

# Series that keep a highlighted state until explicitly downplayed.
HIGHLIGHT_SERIES_TYPES: frozenset[str] = frozenset({SeriesType.PIE.value, SeriesType.RADAR.value})
