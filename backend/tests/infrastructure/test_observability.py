"""Structured Logging — verifies JSON output, extra-field surfacing, and handler setup."""

import json
import logging

from concept_studio.infrastructure.observability import JSONFormatter, setup_logging


def _record(**extra):
    record = logging.LogRecord("concept_studio.test", logging.INFO, __file__, 1, "hello", None, None)
    for k, v in extra.items():
        setattr(record, k, v)
    return record


def test_json_formatter_surfaces_extra_fields():
    out = json.loads(JSONFormatter().format(_record(branch="event", new_count=2)))
    assert out["message"] == "hello"
    assert out["level"] == "INFO"
    assert out["branch"] == "event"
    assert out["new_count"] == 2


def test_json_formatter_skips_unknown_and_missing_fields():
    out = json.loads(JSONFormatter().format(_record(secret="x")))
    assert "secret" not in out
    assert "branch" not in out


def test_timestamp_comes_from_the_record():
    record = _record()
    record.created = 0
    out = json.loads(JSONFormatter().format(record))
    assert out["timestamp"].startswith("1970-01-01T00:00:00")


def test_setup_logging_replaces_its_own_handler():
    root = logging.getLogger()
    saved_level = root.level
    try:
        first = setup_logging("DEBUG", "json")
        second = setup_logging("WARNING", "text")
        assert first not in root.handlers
        assert second in root.handlers
        assert root.level == logging.WARNING
        assert logging.getLogger("httpx").level == logging.WARNING
    finally:
        root.removeHandler(second)
        root.setLevel(saved_level)
