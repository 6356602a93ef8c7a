"""Centralized logging configuration for the tooltip loop."""
from __future__ import annotations

import json
import logging
from logging import Logger
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path
from typing import Any, Dict

from tooltip_loop.core.time_utils import utc_from_timestamp

# Controller and scheduler loggers live under this name, so configuring it
# covers every module in the package.
PACKAGE_LOGGER_NAME = __name__.split(".")[0]

# LogRecord attributes that are never copied into the JSON payload.
_RESERVED_ATTRS = frozenset(vars(logging.makeLogRecord({})).keys()) | {"message", "asctime"}


class JsonFormatter(logging.Formatter):
    """Serialize LogRecord fields as JSON for ingestion-friendly logs."""

    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "timestamp": utc_from_timestamp(record.created).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "name": record.name,
            "component": _component(record.name),
            "message": record.getMessage(),
        }
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        for key, value in record.__dict__.items():
            if key.startswith("_") or key in _RESERVED_ATTRS or key in payload:
                continue
            try:
                json.dumps({key: value})
            except TypeError:
                continue
            payload[key] = value
        return json.dumps(payload, ensure_ascii=False)


def _component(logger_name: str) -> str:
    """Strip the package prefix: ``tooltip_loop.rotation.controller`` -> ``rotation.controller``."""

    prefix = PACKAGE_LOGGER_NAME + "."
    if logger_name.startswith(prefix):
        return logger_name[len(prefix):]
    return logger_name


def configure_logging(
    *,
    level: str = "INFO",
    log_dir: Path | None = None,
    logger_name: str = PACKAGE_LOGGER_NAME,
) -> Logger:
    """Configure the package logger with JSON stream (and optional file) output."""

    logger = logging.getLogger(logger_name)
    logger.setLevel(level.upper())
    logger.handlers.clear()

    stream_handler = logging.StreamHandler()
    stream_handler.setFormatter(JsonFormatter())
    logger.addHandler(stream_handler)

    log_file: Path | None = None
    if log_dir is not None:
        log_dir.mkdir(parents=True, exist_ok=True)
        log_file = log_dir / f"{logger_name}.jsonl"
        handler = TimedRotatingFileHandler(
            log_file,
            when="midnight",
            backupCount=14,
            encoding="utf-8",
        )
        handler.setFormatter(JsonFormatter())
        logger.addHandler(handler)

    logger.propagate = False
    logger.debug("JSON logging configured", extra={"log_file": str(log_file) if log_file else None})
    return logger


__all__ = ["PACKAGE_LOGGER_NAME", "JsonFormatter", "configure_logging"]
