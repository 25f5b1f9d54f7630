"""Observability for attachflow: structured logging with batch correlation."""

from .batch_id import NO_BATCH, batch_scope, get_batch_id, new_batch_id
from .logging_config import BatchIDFilter, JSONFormatter, configure_logging

__all__ = [
    # Logging
    "configure_logging",
    "BatchIDFilter",
    "JSONFormatter",
    # Batch ID
    "NO_BATCH",
    "batch_scope",
    "get_batch_id",
    "new_batch_id",
]
