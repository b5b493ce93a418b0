"""Structured Logging — one JSON line per record, with generation context attached.

Invariants:
    - Every line carries timestamp, level, logger, and message
    - Generation context (branch, task_count, absent_slots, new_count, ...) is copied
      from `extra=` when present; anything else passed as extra is dropped
    - setup_logging is idempotent: calling it again replaces its own handler
    - SDK transport loggers (httpx, httpcore, anthropic, google_genai) stay at WARNING,
      so request bodies carrying base64 images never reach the log

Design Decisions:
    - Hand-written JSONFormatter on stdlib logging, no logging dependency
    - Identity emails are never logged by callers; the formatter does not filter them
"""

import logging
import json
from datetime import datetime, timezone

_EXTRA_FIELDS = (
    "branch", "task_count", "concept_count", "absent_slots", "error_code",
    "new_count", "attempt", "input_tokens", "output_tokens", "path",
)

_QUIET_LOGGERS = ("httpx", "httpcore", "anthropic", "google_genai")

_HANDLER_NAME = "concept_studio"


class JSONFormatter(logging.Formatter):
    """Render a record as a single JSON object."""

    def format(self, record: logging.LogRecord) -> str:
        log = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        log.update(
            (key, record.__dict__[key])
            for key in _EXTRA_FIELDS
            if record.__dict__.get(key) is not None
        )
        if record.exc_info:
            log["exception"] = self.formatException(record.exc_info)
        return json.dumps(log, ensure_ascii=False, default=str)


def setup_logging(level: str = "INFO", fmt: str = "json") -> logging.Handler:
    """Install the application handler on the root logger."""
    root = logging.getLogger()
    for existing in [h for h in root.handlers if h.get_name() == _HANDLER_NAME]:
        root.removeHandler(existing)

    handler = logging.StreamHandler()
    handler.set_name(_HANDLER_NAME)
    if fmt == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(
            "%(asctime)s %(levelname)s %(name)s: %(message)s",
        ))
    root.addHandler(handler)
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
    return handler
