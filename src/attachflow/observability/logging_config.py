"""Logging setup for the attachment pipeline.

JSON lines by default, plain text for interactive use. Both are stamped
with the active batch id; pipeline context passed through `extra=`
(owner, file, document) is emitted as top-level JSON keys.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import IO, Optional

from .batch_id import NO_BATCH, get_batch_id

# Context keys services pass via `extra=`
CONTEXT_FIELDS = ("owner_id", "file_name", "document_id")

TEXT_FORMAT = "%(asctime)s %(levelname)-7s [%(batch_id)s] %(name)s: %(message)s"

# Transport libraries log every request at INFO
QUIET_LOGGERS = ("httpx", "httpcore")


class BatchIDFilter(logging.Filter):
    """Stamp every record with the active batch id."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.batch_id = get_batch_id()
        return True


class JSONFormatter(logging.Formatter):
    """One JSON object per record."""

    def format(self, record: logging.LogRecord) -> str:
        created = datetime.fromtimestamp(record.created, tz=timezone.utc)
        entry = {
            "timestamp": created.isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "batch_id": getattr(record, "batch_id", NO_BATCH),
            "function": record.funcName,
            "message": record.getMessage(),
        }

        for field in CONTEXT_FIELDS:
            value = getattr(record, field, None)
            if value is not None:
                entry[field] = value

        if record.exc_info:
            entry["error"] = str(record.exc_info[1])
            entry["traceback"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str)


def configure_logging(
    level: str = "INFO",
    json_format: bool = True,
    stream: Optional[IO[str]] = None,
) -> logging.Handler:
    """Install a single handler on the root logger, replacing existing ones.

    Args:
        level: Log level name (DEBUG, INFO, WARNING, ERROR)
        json_format: JSON lines if True, otherwise TEXT_FORMAT
        stream: Output stream (defaults to stderr so CLI output stays clean)

    Returns:
        The installed handler

    Raises:
        ValueError: If the level name is unknown
    """
    numeric_level = logging.getLevelName(level.upper())
    if not isinstance(numeric_level, int):
        raise ValueError(f"Unknown log level: {level}")

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(JSONFormatter() if json_format else logging.Formatter(TEXT_FORMAT))
    handler.addFilter(BatchIDFilter())

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(numeric_level)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(numeric_level, logging.WARNING))

    return handler
