"""Structured Logging — tests for the JSON formatter and setup.

Tests cover:
    - Base fields always present
    - Known extra fields surfaced, unknown ones dropped
    - setup_logging does not stack handlers across calls
"""

import json
import logging

from settle.infrastructure import observability
from settle.infrastructure.observability import JSONFormatter, setup_logging


def _record(**extra) -> logging.LogRecord:
    record = logging.LogRecord(
        "settle.test", logging.INFO, __file__, 1, "hello %s", ("world",), None,
    )
    record.__dict__.update(extra)
    return record


def test_json_formatter_base_fields():
    payload = json.loads(JSONFormatter().format(_record()))
    assert payload["level"] == "INFO"
    assert payload["logger"] == "settle.test"
    assert payload["message"] == "hello world"
    assert "timestamp" in payload


def test_json_formatter_surfaces_known_extras():
    payload = json.loads(JSONFormatter().format(
        _record(user_token="user_1", error_code="price_invalid", secret="s3cr3t"),
    ))
    assert payload["user_token"] == "user_1"
    assert payload["error_code"] == "price_invalid"
    assert "secret" not in payload


def test_setup_logging_replaces_handler():
    before = list(logging.root.handlers)
    try:
        setup_logging("DEBUG", "json")
        setup_logging("INFO", "text")
        added = [h for h in logging.root.handlers if h not in before]
        assert len(added) == 1
        assert added[0] is observability._handler
        assert logging.root.level == logging.INFO
    finally:
        if observability._handler is not None:
            logging.root.removeHandler(observability._handler)
            observability._handler = None
