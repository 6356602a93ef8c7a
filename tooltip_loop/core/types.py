"""Type aliases and protocols for the external collaborators.

The controller never imports a rendering engine. It talks to whatever object
the host passes in, as long as it provides the capabilities declared here.
"""
from __future__ import annotations

from typing import Any, Callable, Dict, Mapping, Protocol, Sequence, TypeAlias

ActionPayload: TypeAlias = Dict[str, Any]
EventHandler: TypeAlias = Callable[..., None]
SeriesCatalog: TypeAlias = Sequence[Mapping[str, Any]]
ChartOption: TypeAlias = Mapping[str, Any]


class EventSource(Protocol):
    """Anything handlers can be bound to and released from."""

    def on(self, event_name: str, handler: EventHandler) -> None: ...

    def off(self, event_name: str, handler: EventHandler) -> None: ...


class ChartHandle(EventSource, Protocol):
    """Primary chart handle. ``set_option`` is looked up optionally."""

    def dispatch_action(self, payload: ActionPayload) -> None: ...

    def get_render_context(self) -> EventSource: ...


class TimerHandle(Protocol):
    def cancel(self) -> None: ...


class Scheduler(Protocol):
    """Deferred-call capability; ``asyncio`` loops satisfy it as-is."""

    def call_later(self, delay: float, callback: Callable[[], Any]) -> TimerHandle: ...
