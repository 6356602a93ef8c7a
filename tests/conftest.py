from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List

import pytest

from tooltip_loop.rotation.controller import LoopController


@dataclass
class FakeTimer:
    deadline: float
    seq: int
    callback: Callable[[], Any]
    cancelled: bool = False

    def cancel(self) -> None:
        self.cancelled = True


class FakeScheduler:
    """Manual clock: timers only fire inside :meth:`advance`."""

    def __init__(self) -> None:
        self.now = 0.0
        self._seq = 0
        self._timers: List[FakeTimer] = []

    def call_later(self, delay: float, callback: Callable[[], Any]) -> FakeTimer:
        self._seq += 1
        timer = FakeTimer(deadline=self.now + delay, seq=self._seq, callback=callback)
        self._timers.append(timer)
        return timer

    @property
    def pending(self) -> List[FakeTimer]:
        return [timer for timer in self._timers if not timer.cancelled]

    def advance(self, seconds: float) -> None:
        target = self.now + seconds
        while True:
            due = [timer for timer in self.pending if timer.deadline <= target + 1e-9]
            if not due:
                break
            timer = min(due, key=lambda item: (item.deadline, item.seq))
            self._timers.remove(timer)
            self.now = max(self.now, timer.deadline)
            timer.callback()
        self.now = target


class FakeEventSource:
    def __init__(self) -> None:
        self.handlers: Dict[str, List[Callable[..., None]]] = defaultdict(list)

    def on(self, event_name: str, handler: Callable[..., None]) -> None:
        self.handlers[event_name].append(handler)

    def off(self, event_name: str, handler: Callable[..., None]) -> None:
        if handler in self.handlers[event_name]:
            self.handlers[event_name].remove(handler)

    def emit(self, event_name: str, param: Any = None) -> None:
        for handler in list(self.handlers[event_name]):
            handler(param)

    def bound_count(self) -> int:
        return sum(len(handlers) for handlers in self.handlers.values())


class FakeRenderContext(FakeEventSource):
    pass


class FakeChart(FakeEventSource):
    def __init__(self) -> None:
        super().__init__()
        self.actions: List[Dict[str, Any]] = []
        self.render_context = FakeRenderContext()
        self.set_option_calls: List[Any] = []

    def dispatch_action(self, payload: Dict[str, Any]) -> None:
        self.actions.append(dict(payload))

    def get_render_context(self) -> FakeRenderContext:
        return self.render_context

    def set_option(self, option: Any) -> None:
        self.set_option_calls.append(option)

    def tips(self) -> List[Dict[str, Any]]:
        return [action for action in self.actions if action["type"] == "showTip"]

    def tip_indices(self) -> List[int]:
        return [action["dataIndex"] for action in self.tips()]

    def actions_of(self, action_type: str) -> List[Dict[str, Any]]:
        return [action for action in self.actions if action["type"] == action_type]


@dataclass
class RawPointerEvent:
    cancel_bubble: bool = False


@dataclass
class PointerParam:
    event: RawPointerEvent = field(default_factory=RawPointerEvent)


@pytest.fixture
def pointer_param() -> Callable[[], PointerParam]:
    return PointerParam


@pytest.fixture
def scheduler() -> FakeScheduler:
    return FakeScheduler()


@pytest.fixture
def chart() -> FakeChart:
    return FakeChart()


@pytest.fixture
def series_factory() -> Callable[..., Dict[str, Any]]:
    def _factory(series_type: str = "bar", length: int = 3, *, named: bool = False) -> Dict[str, Any]:
        if named:
            data: List[Any] = [{"name": f"{series_type}-{i}", "value": i} for i in range(length)]
        else:
            data = [10 * (i + 1) for i in range(length)]
        return {"type": series_type, "data": data}

    return _factory


@pytest.fixture
def controller_factory(chart: FakeChart, scheduler: FakeScheduler) -> Callable[..., LoopController]:
    def _factory(chart_option: Dict[str, Any], **options: Any) -> LoopController:
        options.setdefault("interval", 100)
        options.setdefault("initial_delay", 0)
        controller = LoopController(chart, chart_option, options, scheduler=scheduler)
        controller.start()
        return controller

    return _factory
