"""Logging setup for the command line.

Library modules only create ``logging.getLogger(__name__)`` loggers; handlers
are attached here when the CLI asks for verbose or JSON output.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone

_HANDLER_NAME = "treewalk"


class JSONFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key in ("property_name", "trial", "tree_size"):
            value = record.__dict__.get(key)
            if value is not None:
                payload[key] = value
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False, default=repr)


def setup_logging(level: str = "WARNING", fmt: str = "text") -> logging.Logger:
    logger = logging.getLogger("treewalk")
    for handler in list(logger.handlers):
        if handler.get_name() == _HANDLER_NAME:
            logger.removeHandler(handler)

    handler = logging.StreamHandler()
    handler.set_name(_HANDLER_NAME)
    if fmt == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
    logger.addHandler(handler)
    logger.setLevel(getattr(logging, level.upper(), logging.WARNING))
    return logger


__all__ = ["JSONFormatter", "setup_logging"]
