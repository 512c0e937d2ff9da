"""Structured logging: JSON formatter and one-shot setup.

Every record carries timestamp, level, logger, file and message; the
``component``, ``path``, ``status`` and ``user_id`` extras are surfaced when present.
"""

import json
import logging
from datetime import datetime, timezone

_EXTRA_FIELDS = ("component", "path", "status", "user_id")


class JSONFormatter(logging.Formatter):
    """Format log records as single-line JSON."""

    def format(self, record: logging.LogRecord) -> str:
        log = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "file": record.filename,
            "message": record.getMessage(),
        }
        for key in _EXTRA_FIELDS:
            val = record.__dict__.get(key)
            if val is not None:
                log[key] = val
        if record.exc_info:
            log["exception"] = self.formatException(record.exc_info)
        return json.dumps(log, ensure_ascii=False)


def setup_logging(level: str = "INFO", fmt: str = "json") -> None:
    """Configure the root logger; calling it again replaces the previous handler."""
    root = logging.getLogger()
    for handler in list(root.handlers):
        if getattr(handler, "_accounts_handler", False):
            root.removeHandler(handler)
    handler = logging.StreamHandler()
    handler._accounts_handler = True  # type: ignore[attr-defined]
    if fmt == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s [%(filename)s] %(message)s"))
    root.addHandler(handler)
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
