"""Thread-backed scheduler used when the host does not provide one."""
from __future__ import annotations

import logging
import threading
from typing import Any, Callable

LOGGER = logging.getLogger(__name__)


class ThreadingScheduler:
    """Run deferred callbacks on daemon ``threading.Timer`` threads.

    Each call gets its own timer; cancellation only prevents callbacks that
    have not started yet, so callers must still check their own state under a
    lock when the callback runs.
    """

    def __init__(self, *, thread_name_prefix: str = "tooltip-loop") -> None:
        self._prefix = thread_name_prefix
        self._counter = 0
        self._lock = threading.Lock()

    def call_later(self, delay: float, callback: Callable[[], Any]) -> threading.Timer:
        with self._lock:
            self._counter += 1
            name = f"{self._prefix}-{self._counter}"
        timer = threading.Timer(max(delay, 0.0), callback)
        timer.name = name
        timer.daemon = True
        timer.start()
        LOGGER.debug("Timer scheduled", extra={"timer": name, "delay_sec": delay})
        return timer


__all__ = ["ThreadingScheduler"]
