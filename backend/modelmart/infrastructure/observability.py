"""Structured Logging — JSON log lines carrying marketplace context fields.

Invariants:
    - Every line has timestamp (record creation time, UTC), level, logger, message
    - Purchase context (model_id, caller_id, purchased) and request context
      (error_code, path, store) are emitted only when the call site set them
    - setup_logging is safe to call twice: the "modelmart" handler is replaced,
      never duplicated

Design Decisions:
    - Plain logging + JSONFormatter, set up once by the FastAPI lifespan
    - sqlalchemy.engine and httpx are held at WARNING: per-statement and
      per-request INFO lines from them drown the purchase audit trail
"""

import json
import logging
from datetime import datetime, timezone

HANDLER_NAME = "modelmart"
CONTEXT_FIELDS = ("model_id", "caller_id", "purchased", "error_code", "path", "store")
_QUIET_LOGGERS = ("sqlalchemy.engine", "httpx", "httpcore")


class JSONFormatter(logging.Formatter):
    """One JSON object per record."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        entry.update(
            (name, record.__dict__[name])
            for name in CONTEXT_FIELDS
            if record.__dict__.get(name) is not None
        )
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        # ids may be UUIDs
        return json.dumps(entry, ensure_ascii=False, default=str)


def setup_logging(level: str = "INFO", fmt: str = "json") -> None:
    handler = logging.StreamHandler()
    handler.set_name(HANDLER_NAME)
    handler.setFormatter(
        JSONFormatter() if fmt == "json"
        else logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
    )

    root = logging.getLogger()
    for existing in [h for h in root.handlers if h.get_name() == HANDLER_NAME]:
        root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
