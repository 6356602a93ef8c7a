"""Typed options for the tooltip loop.

Options are validated with pydantic and frozen once built. Field names are
snake_case; the camelCase keys used by the chart widget are accepted as
aliases so existing option mappings load unchanged.
"""
from __future__ import annotations

from typing import Any, Callable, Optional

from pydantic import BaseModel, ConfigDict, Field


class LoopOptions(BaseModel):
    """Cadence, direction and series selection for one controller.

    Durations are milliseconds. ``series_index`` is not range-checked here
    because the series count is only known once a chart option is attached;
    the controller clamps it.
    """

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        extra="ignore",
    )

    interval: float = Field(2000, gt=0, description="Tick period in ms")
    loop_series: bool = Field(True, alias="loopSeries")
    series_index: int = Field(0, alias="seriesIndex")
    update_data: Optional[Callable[[], Any]] = Field(None, alias="updateData")
    reverse_direction: bool = Field(False, alias="reverseDirection")
    initial_delay: float = Field(2000, ge=0, alias="initialDelay")
    resume_delay: Optional[float] = Field(
        None,
        gt=0,
        alias="resumeDelay",
        description="Debounce window after pointer movement; defaults to interval / 2",
    )
    refresh_chart: bool = Field(True, alias="refreshChart")

    @property
    def debounce_ms(self) -> float:
        """Quiet period before rotation resumes after pointer movement."""

        if self.resume_delay is not None:
            return self.resume_delay
        return self.interval / 2


__all__ = ["LoopOptions"]
