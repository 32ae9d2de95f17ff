"""Tests for hundred_days/observability/logging.py."""

from __future__ import annotations

import json
import logging

from asgi_correlation_id.context import correlation_id

from hundred_days.observability import CorrelationIdFilter, configure_logging


def _record() -> logging.LogRecord:
    return logging.LogRecord("hundred_days", logging.INFO, __file__, 1, "hi", (), None)


def test_filter_defaults_to_dash():
    record = _record()
    assert CorrelationIdFilter().filter(record) is True
    assert record.correlation_id == "-"


def test_filter_uses_request_id():
    token = correlation_id.set("abc123")
    try:
        record = _record()
        CorrelationIdFilter().filter(record)
        assert record.correlation_id == "abc123"
    finally:
        correlation_id.reset(token)


def test_json_output_fields():
    configure_logging("DEBUG")
    handler = logging.getLogger("hundred_days").handlers[0]
    record = _record()
    for log_filter in handler.filters:
        log_filter.filter(record)
    payload = json.loads(handler.format(record))
    assert payload["level"] == "INFO"
    assert payload["message"] == "hi"
    assert payload["correlation_id"] == "-"
    assert "time" in payload
    configure_logging("INFO")
