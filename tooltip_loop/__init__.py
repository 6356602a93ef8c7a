"""Automatic tooltip rotation for chart surfaces.

The package cycles tooltips (and highlight/downplay for pie and radar series)
through the data points of a chart without user interaction. It pauses while
the pointer moves over the chart and resumes after a quiet period. The public
entry point is :func:`looping`, which returns a handle with a single
``clear_loop`` teardown operation.
"""
from .config import LoopOptions, build_options, load_loop_options
from .rotation import LoopController, LoopHandle, looping

__all__ = [
    "LoopController",
    "LoopHandle",
    "LoopOptions",
    "build_options",
    "load_loop_options",
    "looping",
]
