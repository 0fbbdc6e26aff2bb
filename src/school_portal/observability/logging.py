"""
school_portal.observability.logging

Structured logging configuration for the service.

Responsibilities:
- Configure `structlog` for JSON logs on stdout.
- Optionally mirror logs into hourly files (`combined_YYYY-MM-DD_HH.log`).
- Provide a small wrapper for obtaining bound loggers.
"""

from __future__ import annotations

import logging
import sys
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

import structlog

LOG_FILE_PREFIX = "combined"


def hourly_log_path(log_dir: str | Path, moment: datetime) -> Path:
    # File naming is shared with the housekeeping job that mails these files.
    return Path(log_dir) / f"{LOG_FILE_PREFIX}_{moment:%Y-%m-%d}_{moment.hour}.log"


class HourlyFileHandler(logging.FileHandler):
    """
    Writes each record to the file of the current UTC hour, switching files lazily
    when the first record of a new hour arrives.
    """

    def __init__(self, log_dir: str | Path, encoding: str = "utf-8") -> None:
        self._log_dir = Path(log_dir)
        self._log_dir.mkdir(parents=True, exist_ok=True)
        self._current = hourly_log_path(self._log_dir, datetime.now(tz=UTC))
        super().__init__(self._current, encoding=encoding, delay=True)

    def emit(self, record: logging.LogRecord) -> None:
        target = hourly_log_path(self._log_dir, datetime.fromtimestamp(record.created, tz=UTC))
        if target != self._current:
            self.acquire()
            try:
                if self.stream is not None:
                    self.stream.close()
                    self.stream = None  # type: ignore[assignment]
                self._current = target
                self.baseFilename = str(target.resolve())
            finally:
                self.release()
        super().emit(record)


def configure_logging(*, service_name: str, level: str, log_dir: str | None = None) -> None:
    """
    Structured JSON logs on stdout, plus hourly files when `log_dir` is set.
    """

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_dir:
        handlers.append(HourlyFileHandler(log_dir))

    logging.basicConfig(
        format="%(message)s",
        level=getattr(logging, level.upper(), logging.INFO),
        handlers=handlers,
        force=True,
    )

    # structlog processors run on each log event; keep this list focused and stable.
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            _add_service_name(service_name),
            structlog.processors.dict_tracebacks,
            structlog.processors.JSONRenderer(),
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def _add_service_name(service_name: str):
    # Adds a stable "service" field for log routing/aggregation across environments.
    def processor(_: Any, __: str, event_dict: dict[str, Any]) -> dict[str, Any]:
        event_dict.setdefault("service", service_name)
        return event_dict

    return processor


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


# --- Module Notes -----------------------------------------------------------
# Request-scoped metadata is bound via contextvars in `observability.middleware`.
