"""
tests.test_logging

Hourly log files written by `HourlyFileHandler`.
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from pathlib import Path

from school_portal.observability.logging import HourlyFileHandler, hourly_log_path


def _record(message: str, moment: datetime) -> logging.LogRecord:
    record = logging.LogRecord("school_portal", logging.INFO, __file__, 1, message, None, None)
    record.created = moment.timestamp()
    return record


def test_hourly_log_path_naming(tmp_path: Path) -> None:
    moment = datetime(2025, 3, 1, 9, 30, tzinfo=UTC)
    assert hourly_log_path(tmp_path, moment) == tmp_path / "combined_2025-03-01_9.log"


def test_handler_switches_file_when_the_hour_changes(tmp_path: Path) -> None:
    handler = HourlyFileHandler(tmp_path)
    handler.setFormatter(logging.Formatter("%(message)s"))
    nine = datetime(2025, 3, 1, 9, 15, tzinfo=UTC)
    ten = datetime(2025, 3, 1, 10, 5, tzinfo=UTC)
    try:
        handler.emit(_record("first", nine))
        handler.emit(_record("second", nine))
        handler.emit(_record("third", ten))
    finally:
        handler.close()

    assert hourly_log_path(tmp_path, nine).read_text().splitlines() == ["first", "second"]
    assert hourly_log_path(tmp_path, ten).read_text().splitlines() == ["third"]
