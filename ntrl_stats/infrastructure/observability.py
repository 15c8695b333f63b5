"""Structured Logging — JSON (default) or plain-text log lines tagged with stats context.

Invariants:
    - Every line carries timestamp, level, logger name and message
    - story_id, range, error_code and path are attached when the call site
      passes them as extras, in both formats
    - setup_logging() replaces the root handlers it installed earlier, so a
      second lifespan in the same process does not double every line
"""

import json
import logging
from datetime import datetime, timezone

STATS_EXTRAS = ("story_id", "range", "error_code", "path")

_TEXT_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def _stats_extras(record: logging.LogRecord) -> dict:
    return {
        key: record.__dict__[key]
        for key in STATS_EXTRAS
        if record.__dict__.get(key) is not None
    }


class JSONFormatter(logging.Formatter):
    """One JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        log = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            **_stats_extras(record),
        }
        if record.exc_info:
            log["exception"] = self.formatException(record.exc_info)
        return json.dumps(log, ensure_ascii=False)


class TextFormatter(logging.Formatter):
    """Human-readable line with the stats extras appended as key=value."""

    def __init__(self):
        super().__init__(_TEXT_FORMAT)

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        extras = _stats_extras(record)
        if not extras:
            return line
        tags = " ".join(f"{k}={v}" for k, v in extras.items())
        first, sep, rest = line.partition("\n")
        return f"{first} [{tags}]{sep}{rest}"


_handler: logging.Handler | None = None


def setup_logging(level: str = "INFO", fmt: str = "json") -> None:
    """Install the ntrl-stats handler on the root logger."""
    global _handler
    if _handler is not None:
        logging.root.removeHandler(_handler)
    _handler = logging.StreamHandler()
    _handler.setFormatter(JSONFormatter() if fmt == "json" else TextFormatter())
    logging.root.addHandler(_handler)
    logging.root.setLevel(getattr(logging, level.upper(), logging.INFO))
