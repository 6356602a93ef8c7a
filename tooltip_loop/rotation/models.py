"""Datamodels for the cycling state and the two timer roles.

:class:`CyclingState` is the mutable cursor a controller advances on every
tick. :class:`TimerSlot` wraps one timer role (repeat or resume) so that
arming a new timer always cancels the previous one, and so that a callback
which fires after being superseded can recognise itself as stale.
"""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Callable, Optional, Tuple

from tooltip_loop.core.types import Scheduler, TimerHandle

SeriesPoint = Tuple[int, int]


@dataclass(slots=True)
class CyclingState:
    """Cursor over the series catalog.

    ``series_count``, ``data_len`` and ``chart_type`` describe the series that
    was current at the last refresh; they are re-read at every pass boundary.
    ``pass_completed`` is set when the last advance wrapped back to the pass
    start, which calls for ``update_data`` before the next presentation;
    ``refresh_pending`` only asks for the metrics to be re-read.
    ``last_presented`` holds the most recently shown pair and
    ``last_highlighted`` the pair still highlighted on screen, if any.
    """

    series_index: int = 0
    data_index: int = 0
    series_count: int = 0
    data_len: int = 0
    chart_type: Optional[str] = None
    first: bool = True
    pass_completed: bool = False
    refresh_pending: bool = True
    last_presented: Optional[SeriesPoint] = None
    last_highlighted: Optional[SeriesPoint] = None

    def copy(self) -> "CyclingState":
        return replace(self)


@dataclass(slots=True)
class TimerSlot:
    """At most one live timer for a named role."""

    name: str
    handle: Optional[TimerHandle] = None
    generation: int = 0
    _armed: bool = field(default=False, repr=False)

    @property
    def active(self) -> bool:
        return self._armed

    def arm(self, scheduler: Scheduler, delay: float, callback: Callable[[int], Any]) -> int:
        """Cancel any pending timer and schedule ``callback(generation)``."""

        self.clear()
        self.generation += 1
        generation = self.generation
        self._armed = True
        self.handle = scheduler.call_later(delay, lambda: callback(generation))
        return generation

    def clear(self) -> bool:
        """Cancel the pending timer. Returns whether one was active."""

        was_armed = self._armed
        if self.handle is not None:
            self.handle.cancel()
        self.handle = None
        self._armed = False
        # Invalidate callbacks that already left the scheduler's queue.
        self.generation += 1
        return was_armed

    def is_current(self, generation: int) -> bool:
        return self._armed and generation == self.generation


__all__ = ["CyclingState", "SeriesPoint", "TimerSlot"]
