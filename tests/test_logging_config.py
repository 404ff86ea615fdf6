import logging

import pytest

from chatlib.logging_config import ErrorAggregator, LoggerConfigurator, parse_log_level


@pytest.mark.parametrize(
    ("name", "level"),
    [
        ("trace", logging.DEBUG),
        ("debug", logging.DEBUG),
        ("INFO", logging.INFO),
        ("warn", logging.WARNING),
        ("error", logging.ERROR),
        ("fatal", logging.CRITICAL),
        (None, logging.INFO),
    ],
)
def test_parse_log_level(name, level):
    assert parse_log_level(name) == level


def test_parse_log_level_invalid():
    with pytest.raises(ValueError, match="invalid log level"):
        parse_log_level("chatty")


def test_debug_env_forces_debug(monkeypatch):
    monkeypatch.setenv("DEBUG", "1")
    assert LoggerConfigurator("error").resolve_level() == logging.DEBUG
    monkeypatch.setenv("DEBUG", "false")
    assert LoggerConfigurator("error").resolve_level() == logging.ERROR


def test_error_aggregator_summary():
    agg = ErrorAggregator()
    agg.record_error("network", "reset", {"peer": "h"})
    agg.record_error("network", "reset again")
    summary = agg.get_error_summary()
    assert summary["network"]["total_count"] == 2
    assert summary["network"]["last_occurrence"]["message"] == "reset again"
    agg.clear()
    assert agg.get_error_summary() == {}
