"""Error hierarchy shared by the tooltip loop subsystems.

Missing chart handles and out-of-range options degrade silently, so the
exceptions below are reserved for inputs that cannot be interpreted at all
and for lifecycle misuse by the host.
"""
from __future__ import annotations


class TooltipLoopError(Exception):
    """Base class for all custom exceptions in the package."""


class ConfigurationError(TooltipLoopError):
    """Raised when loop options or option files are missing or invalid."""


class CatalogError(TooltipLoopError):
    """Raised when the chart option's series catalog cannot be read."""


class LoopStateError(TooltipLoopError):
    """Raised when a controller is used outside of its lifecycle."""
