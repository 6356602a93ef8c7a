from __future__ import annotations

import json
import logging
from pathlib import Path

from tooltip_loop.telemetry import PACKAGE_LOGGER_NAME, JsonFormatter, configure_logging


def _reset(logger: logging.Logger) -> None:
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)
    logger.propagate = True
    logger.setLevel(logging.NOTSET)


def test_json_formatter_should_include_extra_fields() -> None:
    record = logging.makeLogRecord(
        {"name": "tooltip_loop.rotation.controller", "levelname": "INFO", "msg": "Tooltip loop started", "interval_ms": 2000.0}
    )

    payload = json.loads(JsonFormatter().format(record))

    assert payload["message"] == "Tooltip loop started"
    assert payload["component"] == "rotation.controller"
    assert payload["interval_ms"] == 2000.0
    assert payload["timestamp"].endswith("Z")
    assert "args" not in payload


def test_json_formatter_should_keep_foreign_logger_names() -> None:
    record = logging.makeLogRecord({"name": "host.dashboard", "levelname": "INFO", "msg": "ready"})
    assert json.loads(JsonFormatter().format(record))["component"] == "host.dashboard"


def test_configure_logging_should_write_jsonl_file(tmp_path: Path) -> None:
    logger = configure_logging(level="debug", log_dir=tmp_path, logger_name="tooltip_loop_test")
    logger.info("Tooltip loop cleared", extra={"series_index": 1})
    for handler in logger.handlers:
        handler.flush()

    lines = (tmp_path / "tooltip_loop_test.jsonl").read_text(encoding="utf-8").strip().splitlines()
    entries = [json.loads(line) for line in lines]

    assert entries[-1]["message"] == "Tooltip loop cleared"
    assert entries[-1]["series_index"] == 1
    assert logger.propagate is False
    _reset(logger)


def test_configure_logging_default_should_capture_controller_records(tmp_path: Path) -> None:
    logger = configure_logging(level="debug", log_dir=tmp_path)
    logging.getLogger("tooltip_loop.rotation.controller").info(
        "Tooltip rotation suspended", extra={"last_presented": (0, 2)}
    )
    for handler in logger.handlers:
        handler.flush()

    lines = (tmp_path / f"{PACKAGE_LOGGER_NAME}.jsonl").read_text(encoding="utf-8").strip().splitlines()
    entry = json.loads(lines[-1])

    assert PACKAGE_LOGGER_NAME == "tooltip_loop"
    assert entry["component"] == "rotation.controller"
    assert entry["last_presented"] == [0, 2]
    _reset(logger)
