"""Logging setup for hosts embedding the tooltip loop."""
from .logging_setup import PACKAGE_LOGGER_NAME, JsonFormatter, configure_logging

__all__ = ["PACKAGE_LOGGER_NAME", "JsonFormatter", "configure_logging"]
