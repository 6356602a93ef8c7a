"""Tooltip rotation package."""
from .controller import LoopController, LoopHandle, looping
from .models import CyclingState, TimerSlot

__all__ = ["CyclingState", "LoopController", "LoopHandle", "TimerSlot", "looping"]
