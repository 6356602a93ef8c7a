"""Tooltip rotation controller.

``LoopController`` walks the data points of a chart's series and dispatches a
``showTip`` action per tick, adding ``downplay``/``highlight`` pairs for series
types that keep a highlighted state. Pointer movement over the chart suspends
the rotation; it resumes after a debounce window or when the pointer leaves
the surface. All timers come from an injected scheduler so the controller can
run on threads, on an ``asyncio`` loop, or on a manual clock in tests.
"""
from __future__ import annotations

import logging
import threading
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any, Callable, Optional

from tooltip_loop.config.loader import build_options
from tooltip_loop.config.models import LoopOptions
from tooltip_loop.core.enums import (
    HIGHLIGHT_SERIES_TYPES,
    NAMED_SERIES_TYPES,
    ActionType,
    ChartEvent,
)
from tooltip_loop.core.errors import CatalogError, LoopStateError
from tooltip_loop.core.scheduler import ThreadingScheduler
from tooltip_loop.core.time_utils import ms_to_seconds
from tooltip_loop.core.types import (
    ActionPayload,
    ChartHandle,
    ChartOption,
    EventSource,
    Scheduler,
    SeriesCatalog,
)
from tooltip_loop.rotation.models import CyclingState, SeriesPoint, TimerSlot

LOGGER = logging.getLogger(__name__)

_MISSING = object()


@dataclass(frozen=True, slots=True)
class LoopHandle:
    """What :func:`looping` hands back to the host."""

    clear_loop: Callable[[], None]


def _noop() -> None:
    return None


def clamp_series_index(series_index: int, series_count: int) -> int:
    """Return ``series_index`` if it addresses a series, otherwise 0."""

    if 0 <= series_index < series_count:
        return series_index
    return 0


class LoopController:
    """Drive the tooltip rotation for one chart.

    The controller owns its :class:`CyclingState` and both timer slots
    exclusively. Every entry point (timer callbacks and event handlers) runs
    under one re-entrant lock, and timer callbacks check their slot generation
    so that nothing fires after a stop or teardown has returned.
    """

    def __init__(
        self,
        chart: ChartHandle,
        chart_option: ChartOption,
        options: LoopOptions | Mapping[str, Any] | None = None,
        *,
        scheduler: Scheduler | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self._chart = chart
        self._chart_option = chart_option
        self._options = build_options(options)
        self._scheduler: Scheduler = scheduler or ThreadingScheduler()
        self._logger = logger or LOGGER
        self._lock = threading.RLock()
        self._repeat = TimerSlot("repeat")
        self._resume = TimerSlot("resume")
        self._render_context: Optional[EventSource] = None
        self._started = False
        self._closed = False

        series = self._series()
        start_index = clamp_series_index(self._options.series_index, len(series))
        if start_index != self._options.series_index:
            self._logger.debug(
                "Series index out of range, starting from 0",
                extra={"series_index": self._options.series_index, "series_count": len(series)},
            )
        self._state = CyclingState(series_index=start_index, series_count=len(series))
        if series:
            self._state.data_len = len(self._series_data(series[start_index]))
            self._state.chart_type = self._series_type(series[start_index])

        # Bound once so ``off`` receives the exact objects passed to ``on``.
        self._chart_mousemove = self._on_chart_mousemove
        self._context_mousemove = self._on_context_mousemove
        self._context_globalout = self._on_context_globalout

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------
    @property
    def options(self) -> LoopOptions:
        return self._options

    @property
    def running(self) -> bool:
        """Whether the repeat timer is currently driving ticks."""

        with self._lock:
            return self._repeat.active

    @property
    def resume_pending(self) -> bool:
        with self._lock:
            return self._resume.active

    @property
    def closed(self) -> bool:
        return self._closed

    def snapshot(self) -> CyclingState:
        """Return a copy of the cycling state."""

        with self._lock:
            return self._state.copy()

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def start(self) -> None:
        """Bind the pointer handlers and schedule the first tick."""

        with self._lock:
            if self._closed:
                raise LoopStateError("Cannot start a controller after clear_loop()")
            if self._started:
                return
            self._started = True
            self._chart.on(ChartEvent.MOUSEMOVE.value, self._chart_mousemove)
            self._render_context = self._chart.get_render_context()
            self._render_context.on(ChartEvent.MOUSEMOVE.value, self._context_mousemove)
            self._render_context.on(ChartEvent.GLOBALOUT.value, self._context_globalout)
            self._schedule_resume(self._options.initial_delay)
            self._logger.info(
                "Tooltip loop started",
                extra={
                    "interval_ms": self._options.interval,
                    "initial_delay_ms": self._options.initial_delay,
                    "series_index": self._state.series_index,
                    "series_count": self._state.series_count,
                },
            )

    def clear_loop(self) -> None:
        """Cancel both timers and release every event binding. Idempotent."""

        with self._lock:
            if self._closed:
                return
            self._closed = True
            self._repeat.clear()
            self._resume.clear()
            if self._started:
                self._chart.off(ChartEvent.MOUSEMOVE.value, self._chart_mousemove)
                if self._render_context is not None:
                    self._render_context.off(ChartEvent.MOUSEMOVE.value, self._context_mousemove)
                    self._render_context.off(ChartEvent.GLOBALOUT.value, self._context_globalout)
            self._logger.info("Tooltip loop cleared")

    def stop(self) -> None:
        """Suspend ticking and drop any pending resumption."""

        with self._lock:
            self._stop_ticking()

    # ------------------------------------------------------------------
    # Event handlers
    # ------------------------------------------------------------------
    def _on_chart_mousemove(self, *_: Any) -> None:
        with self._lock:
            if self._closed:
                return
            self._stop_ticking()

    def _on_context_mousemove(self, param: Any = None, *_: Any) -> None:
        _cancel_bubble(param)
        with self._lock:
            if self._closed:
                return
            self._stop_ticking()
            self._schedule_resume(self._options.debounce_ms)

    def _on_context_globalout(self, *_: Any) -> None:
        with self._lock:
            if self._closed or self._repeat.active:
                return
            self._schedule_resume(self._options.initial_delay)

    # ------------------------------------------------------------------
    # Timers
    # ------------------------------------------------------------------
    def _schedule_resume(self, delay_ms: float) -> None:
        self._resume.arm(self._scheduler, ms_to_seconds(delay_ms), self._on_resume)

    def _on_resume(self, generation: int) -> None:
        with self._lock:
            if self._closed or not self._resume.is_current(generation):
                return
            self._resume.clear()
            if self._repeat.active:
                return
            self._logger.debug("Resuming tooltip rotation")
            self._start_ticking()

    def _on_repeat(self, generation: int) -> None:
        with self._lock:
            if self._closed or not self._repeat.is_current(generation):
                return
            self._arm_repeat()
            self._tick()

    def _start_ticking(self) -> None:
        self._arm_repeat()
        self._tick()

    def _arm_repeat(self) -> None:
        self._repeat.arm(self._scheduler, ms_to_seconds(self._options.interval), self._on_repeat)

    def _stop_ticking(self) -> None:
        self._resume.clear()
        if not self._repeat.clear():
            return
        state = self._state
        if state.last_highlighted is not None:
            self._dispatch(ActionType.DOWNPLAY, *state.last_highlighted)
            state.last_highlighted = None
        self._logger.debug("Tooltip rotation suspended", extra={"last_presented": state.last_presented})

    # ------------------------------------------------------------------
    # Presentation
    # ------------------------------------------------------------------
    def _tick(self) -> None:
        """Present one data point and advance the cursor."""

        state = self._state
        if state.pass_completed:
            state.pass_completed = False
            try:
                self._run_update_data()
            finally:
                self._refresh_series()
        elif state.refresh_pending:
            self._refresh_series()

        if self._closed:
            # update_data tore the loop down.
            return
        if state.data_len == 0:
            # Nothing to show; re-read the catalog next tick without calling update_data.
            state.refresh_pending = True
            self._logger.debug("No data to present", extra={"series_index": state.series_index})
            return

        entry = self._entry_at(state.series_index, state.data_index)
        if entry is _MISSING:
            # The catalog shrank mid-pass; restart the pass on fresh metrics.
            self._refresh_series()
            if state.data_len == 0:
                return
            entry = self._entry_at(state.series_index, state.data_index)
        series_index = state.series_index
        data_index = state.data_index

        if state.chart_type in HIGHLIGHT_SERIES_TYPES:
            previous = state.last_presented or self._wrap_predecessor(series_index, data_index)
            self._dispatch(ActionType.DOWNPLAY, *previous)
            self._dispatch(ActionType.HIGHLIGHT, series_index, data_index)
            state.last_highlighted = (series_index, data_index)
        elif state.last_highlighted is not None:
            self._dispatch(ActionType.DOWNPLAY, *state.last_highlighted)
            state.last_highlighted = None

        self._chart.dispatch_action(self._tip_params(series_index, data_index, entry))
        state.last_presented = (series_index, data_index)

        step = -1 if self._options.reverse_direction else 1
        state.data_index = (data_index + step) % state.data_len
        if state.data_index == self._pass_start(state.data_len):
            state.pass_completed = True
            if self._options.loop_series and state.series_count and not state.first:
                state.series_index = (series_index + 1) % state.series_count
        state.first = False

    def _run_update_data(self) -> None:
        callback = self._options.update_data
        if callback is None:
            return
        try:
            callback()
        except Exception:
            self._logger.exception("update_data callback failed")
            raise
        if self._options.refresh_chart and not self._closed:
            set_option = getattr(self._chart, "set_option", None)
            if callable(set_option):
                set_option(self._chart_option)

    def _refresh_series(self) -> None:
        """Re-read series metrics at a pass boundary.

        Empty series are skipped when looping across series. The data index is
        re-seated at the pass start of the refreshed length, which also clamps
        an index left over from a longer, since-mutated series.
        """

        state = self._state
        state.refresh_pending = False
        series = self._series()
        state.series_count = len(series)
        state.series_index = clamp_series_index(state.series_index, state.series_count)
        if not series:
            state.data_len = 0
            state.chart_type = None
            return

        attempts = state.series_count if self._options.loop_series else 1
        for _ in range(attempts):
            current = series[state.series_index]
            state.data_len = len(self._series_data(current))
            state.chart_type = self._series_type(current)
            if state.data_len:
                break
            if self._options.loop_series:
                state.series_index = (state.series_index + 1) % state.series_count
        state.data_index = self._pass_start(state.data_len)

    def _pass_start(self, data_len: int) -> int:
        if self._options.reverse_direction:
            return max(data_len - 1, 0)
        return 0

    def _wrap_predecessor(self, series_index: int, data_index: int) -> SeriesPoint:
        step = 1 if self._options.reverse_direction else -1
        return (series_index, (data_index + step) % self._state.data_len)

    def _tip_params(self, series_index: int, data_index: int, entry: Any) -> ActionPayload:
        params: ActionPayload = {"type": ActionType.SHOW_TIP.value, "seriesIndex": series_index}
        name = entry.get("name") if isinstance(entry, Mapping) else None
        if self._state.chart_type in NAMED_SERIES_TYPES and name is not None:
            params["name"] = name
        else:
            params["dataIndex"] = data_index
        return params

    def _dispatch(self, action: ActionType, series_index: int, data_index: int) -> None:
        if self._closed:
            return
        self._chart.dispatch_action(
            {"type": action.value, "seriesIndex": series_index, "dataIndex": data_index}
        )

    # ------------------------------------------------------------------
    # Catalog access
    # ------------------------------------------------------------------
    def _series(self) -> SeriesCatalog:
        series = self._chart_option.get("series")
        if series is None:
            return ()
        if isinstance(series, Mapping):
            return (series,)
        if not isinstance(series, Sequence) or isinstance(series, str):
            raise CatalogError("chart option `series` must be a sequence of mappings")
        return series

    def _entry_at(self, series_index: int, data_index: int) -> Any:
        series = self._series()
        if series_index >= len(series):
            return _MISSING
        data = self._series_data(series[series_index])
        if data_index >= len(data):
            return _MISSING
        return data[data_index]

    @staticmethod
    def _series_data(series: Mapping[str, Any]) -> Sequence[Any]:
        data = series.get("data")
        if data is None:
            return ()
        if not isinstance(data, Sequence) or isinstance(data, str):
            raise CatalogError("series `data` must be a sequence")
        return data

    @staticmethod
    def _series_type(series: Mapping[str, Any]) -> Optional[str]:
        value = series.get("type")
        return str(value) if value is not None else None


def _cancel_bubble(param: Any) -> None:
    """Mark the raw pointer event carried by ``param`` as non-propagating."""

    if param is None:
        return
    raw = param.get("event") if isinstance(param, Mapping) else getattr(param, "event", None)
    if raw is None:
        return
    if isinstance(raw, dict):
        raw["cancelBubble"] = True
    else:
        setattr(raw, "cancel_bubble", True)


def looping(
    chart: ChartHandle | None,
    chart_option: ChartOption | None,
    options: LoopOptions | Mapping[str, Any] | None = None,
    *,
    scheduler: Scheduler | None = None,
    logger: logging.Logger | None = None,
) -> LoopHandle:
    """Start rotating tooltips on ``chart`` and return its teardown handle.

    A missing chart or chart option yields a handle whose ``clear_loop`` does
    nothing; no timers are started and no events are bound.
    """

    if chart is None or chart_option is None:
        (logger or LOGGER).debug("Chart or chart option missing, tooltip loop disabled")
        return LoopHandle(clear_loop=_noop)
    controller = LoopController(chart, chart_option, options, scheduler=scheduler, logger=logger)
    controller.start()
    return LoopHandle(clear_loop=controller.clear_loop)


__all__ = ["LoopController", "LoopHandle", "clamp_series_index", "looping"]
