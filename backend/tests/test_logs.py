"""Tests for the recent-log buffer and logging setup."""

import logging

from ivmonitor.logs import RecentLogHandler, configure_logging


def _logger_with(handler: RecentLogHandler, name: str = "ivmonitor.test.logs") -> logging.Logger:
    logger = logging.getLogger(name)
    logger.setLevel(logging.DEBUG)
    logger.propagate = False
    logger.handlers = [handler]
    return logger


class TestRecentLogHandler:
    def test_records_are_captured(self):
        handler = RecentLogHandler()
        logger = _logger_with(handler)
        logger.info("Refreshed %d symbols", 3)

        records = handler.records()
        assert len(records) == 1
        assert records[0]["level"] == "INFO"
        assert records[0]["message"] == "Refreshed 3 symbols"
        assert records[0]["timestamp"].endswith("Z")
        assert handler.errors() == []

    def test_capacity_keeps_most_recent(self):
        handler = RecentLogHandler(capacity=3, error_capacity=2)
        logger = _logger_with(handler)
        for i in range(5):
            logger.error("failure %d", i)

        assert [r["message"] for r in handler.records()] == ["failure 2", "failure 3", "failure 4"]
        assert [r["message"] for r in handler.errors()] == ["failure 3", "failure 4"]

    def test_exception_details_kept_for_errors(self):
        handler = RecentLogHandler()
        logger = _logger_with(handler)
        try:
            raise RuntimeError("store offline")
        except RuntimeError:
            logger.exception("Refresh cycle failed")

        error = handler.errors()[0]
        assert error["message"] == "Refresh cycle failed"
        assert "store offline" in error["error"]

    def test_clear(self):
        handler = RecentLogHandler()
        logger = _logger_with(handler)
        logger.error("x")
        handler.clear()
        assert handler.records() == [] and handler.errors() == []


class TestConfigureLogging:
    def test_installs_handler_once(self):
        first = configure_logging("DEBUG")
        second = configure_logging("INFO")
        assert first is second
        assert first in logging.getLogger("ivmonitor").handlers
        assert logging.getLogger("ivmonitor").level == logging.INFO
