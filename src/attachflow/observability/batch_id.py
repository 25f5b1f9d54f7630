"""Correlation id for upload batches.

Every log line written while a batch runs (per-file validation, uploads,
list refreshes) carries the same id, so one drop or picker selection can
be followed through the log even when several screens log at once.
"""

import uuid
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Iterator, Optional

NO_BATCH = "no-batch-id"

# Async-safe: each task sees the id bound by its own batch
_current_batch: ContextVar[Optional[str]] = ContextVar("attachflow_batch_id", default=None)


def new_batch_id() -> str:
    """Short random id, e.g. 'b-3f9c2a7d10e4'."""
    return f"b-{uuid.uuid4().hex[:12]}"


def get_batch_id() -> str:
    """Id of the batch running in this context, or NO_BATCH outside one."""
    return _current_batch.get() or NO_BATCH


@contextmanager
def batch_scope(batch_id: Optional[str] = None) -> Iterator[str]:
    """Bind a batch id for the duration of the block.

    Nested scopes restore the outer id on exit.

    Example:
        with batch_scope() as batch_id:
            logger.info("Starting upload batch")  # stamped with batch_id
    """
    token = _current_batch.set(batch_id or new_batch_id())
    try:
        yield get_batch_id()
    finally:
        _current_batch.reset(token)
