"""Options model and loaders for the tooltip loop."""

from .loader import build_options, load_loop_options
from .models import LoopOptions

__all__ = [
    "LoopOptions",
    "build_options",
    "load_loop_options",
]
