"""Structured JSON logging.

Usage:
    logger = get_logger(__name__)
    logger.info("reservation created", extra={"extra_fields": {"reservation_id": rid}})

Fields passed under ``extra_fields`` are merged into the JSON line. Callers
pass customer data through safe_log_context() first.
"""

import json
import logging
import os
import sys
from datetime import datetime, timezone
from typing import Any

from .correlation import current_correlation_id

LOG_LEVEL_ENV = "LOG_LEVEL"


class JsonFormatter(logging.Formatter):
    """One JSON object per record, tagged with the request correlation ID."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }

        cid = current_correlation_id()
        if cid:
            entry["correlationId"] = cid

        extra_fields = getattr(record, "extra_fields", None)
        if isinstance(extra_fields, dict):
            entry.update(extra_fields)

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str, ensure_ascii=False)


def get_logger(name: str) -> logging.Logger:
    """Return a logger writing JSON lines to stdout.

    The level comes from LOG_LEVEL (default INFO). Handlers are attached once.
    """
    logger = logging.getLogger(name)

    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(JsonFormatter())
        logger.addHandler(handler)
        logger.setLevel(os.environ.get(LOG_LEVEL_ENV, "INFO").upper())
        logger.propagate = False

    return logger
