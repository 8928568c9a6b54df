"""Logging setup and an in-memory buffer of recent records."""

from __future__ import annotations

import logging
import os
import time
from collections import deque
from typing import Any

LOG_CAPACITY = 100
ERROR_CAPACITY = 50

_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class RecentLogHandler(logging.Handler):
    """Keeps the most recent log records, and separately the most recent errors."""

    def __init__(
        self,
        capacity: int = LOG_CAPACITY,
        error_capacity: int = ERROR_CAPACITY,
        level: int = logging.NOTSET,
    ) -> None:
        super().__init__(level)
        self._records: deque[dict[str, Any]] = deque(maxlen=capacity)
        self._errors: deque[dict[str, Any]] = deque(maxlen=error_capacity)

    def emit(self, record: logging.LogRecord) -> None:
        try:
            entry = {
                "timestamp": time.strftime(
                    "%Y-%m-%dT%H:%M:%S", time.gmtime(record.created)
                ) + f".{int(record.msecs):03d}Z",
                "level": record.levelname,
                "logger": record.name,
                "message": record.getMessage(),
            }
            self._records.append(entry)
            if record.levelno >= logging.ERROR:
                error = dict(entry)
                if record.exc_info and record.exc_info[1] is not None:
                    error["error"] = repr(record.exc_info[1])
                self._errors.append(error)
        except Exception:
            self.handleError(record)

    def records(self) -> list[dict[str, Any]]:
        return list(self._records)

    def errors(self) -> list[dict[str, Any]]:
        return list(self._errors)

    def clear(self) -> None:
        self._records.clear()
        self._errors.clear()


def configure_logging(level: str | int | None = None) -> RecentLogHandler:
    """Attach a stream handler and a RecentLogHandler to the package logger.

    Level defaults to IV_LOG_LEVEL (INFO when unset). Calling this again
    returns the handler installed the first time.
    """
    logger = logging.getLogger("ivmonitor")
    if level is None:
        level = os.environ.get("IV_LOG_LEVEL", "INFO").strip().upper() or "INFO"
    logger.setLevel(level)

    for handler in logger.handlers:
        if isinstance(handler, RecentLogHandler):
            return handler

    stream = logging.StreamHandler()
    stream.setFormatter(logging.Formatter(_FORMAT))
    logger.addHandler(stream)

    recent = RecentLogHandler()
    logger.addHandler(recent)
    return recent
