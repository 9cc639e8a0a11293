"""Structured Logging — one JSON object per log line, configured once from the lifespan.

Invariants:
    - Every line carries timestamp (record time, UTC), level, logger and message
    - Only whitelisted extra fields are emitted: user_id, error_code, path,
      resource_type, resource_id, reason
    - Tokens and passwords are never passed as extra fields
    - setup_logging is idempotent: repeated lifespans do not stack handlers

Design Decisions:
    - Hand-written JSONFormatter over a logging library: the record shape is small and fixed
    - fmt="text" for local development and tests
    - sqlalchemy.engine stays at WARNING unless the root level is DEBUG
"""

import json
import logging
from datetime import datetime, timezone

_EXTRA_FIELDS = (
    "user_id", "error_code", "path", "resource_type", "resource_id", "reason",
)
_HANDLER_NAME = "vidtube"


class JSONFormatter(logging.Formatter):

    def format(self, record: logging.LogRecord) -> str:
        log = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        log.update(
            (key, record.__dict__[key]) for key in _EXTRA_FIELDS
            if record.__dict__.get(key) is not None
        )
        if record.exc_info:
            log["exception"] = self.formatException(record.exc_info)
        return json.dumps(log, ensure_ascii=False, default=str)


def setup_logging(level: str = "INFO", fmt: str = "json") -> None:
    root = logging.getLogger()
    for handler in [h for h in root.handlers if h.get_name() == _HANDLER_NAME]:
        root.removeHandler(handler)

    handler = logging.StreamHandler()
    handler.set_name(_HANDLER_NAME)
    if fmt == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(
            "%(asctime)s %(levelname)s %(name)s: %(message)s",
        ))
    root.addHandler(handler)

    root_level = getattr(logging, level.upper(), logging.INFO)
    root.setLevel(root_level)
    if root_level > logging.DEBUG:
        logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
