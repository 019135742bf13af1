"""Tests for logging configuration."""

import json
import logging

import pytest

from openvolume.config import LoggingConfig
from openvolume.logging import PluginJsonFormatter, RateLimitFilter, setup_logging


def _record(msg: str, level: int = logging.INFO, **extra) -> logging.LogRecord:
    record = logging.LogRecord("openvolume.test", level, __file__, 10, msg, None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestSetupLogging:
    """Tests for setup_logging function."""

    def test_configures_root_logger(self):
        setup_logging(LoggingConfig(level="DEBUG"))
        root_logger = logging.getLogger()

        assert root_logger.level == logging.DEBUG
        assert len(root_logger.handlers) == 1

    def test_json_format(self):
        setup_logging(LoggingConfig(format="json"))
        handler = logging.getLogger().handlers[0]

        assert isinstance(handler.formatter, PluginJsonFormatter)

    def test_text_format(self):
        setup_logging(LoggingConfig(format="text"))
        handler = logging.getLogger().handlers[0]

        assert not isinstance(handler.formatter, PluginJsonFormatter)

    def test_unknown_level_falls_back_to_info(self):
        setup_logging(LoggingConfig(level="chatty"))
        assert logging.getLogger().level == logging.INFO


class TestPluginJsonFormatter:
    """Tests for PluginJsonFormatter."""

    def test_standard_fields(self):
        formatter = PluginJsonFormatter(LoggingConfig(service_name="openvolume-test"))
        record = _record("Volume created", volume="db", event="volume_created")

        data = json.loads(formatter.format(record))

        assert data["message"] == "Volume created"
        assert data["service"] == "openvolume-test"
        assert data["level"] == "INFO"
        assert data["volume"] == "db"
        assert data["event"] == "volume_created"
        assert "timestamp" in data


class TestRateLimitFilter:
    """Tests for RateLimitFilter."""

    def test_duplicate_suppressed(self):
        f = RateLimitFilter(rate_limit_seconds=60)

        assert f.filter(_record("Volume mounted", volume="db")) is True
        assert f.filter(_record("Volume mounted", volume="db")) is False

    def test_different_volumes_not_merged(self):
        f = RateLimitFilter(rate_limit_seconds=60)

        assert f.filter(_record("Volume mounted", volume="db")) is True
        assert f.filter(_record("Volume mounted", volume="cache")) is True

    @pytest.mark.parametrize("level", [logging.WARNING, logging.ERROR, logging.CRITICAL])
    def test_failures_always_pass(self, level):
        f = RateLimitFilter(rate_limit_seconds=60)

        assert f.filter(_record("Tool timed out", level)) is True
        assert f.filter(_record("Tool timed out", level)) is True

    def test_cache_bounded(self):
        f = RateLimitFilter(rate_limit_seconds=60, max_cache_size=150)

        for i in range(200):
            f.filter(_record(f"message {i}"))

        assert len(f._last_log) <= 150
