"""Correlation ID management for lifecycle operations.

Every lifecycle operation binds a correlation id so that the log lines of a
single upload or transition (including the post-commit routing note) can be
tied together. Callers that already carry a request id from their own
transport layer can pass it in; otherwise a fresh one is generated.
"""

import uuid
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Iterator, Optional

# Context variable for correlation_id (async-safe)
correlation_id_var: ContextVar[Optional[str]] = ContextVar("correlation_id", default=None)


def generate_correlation_id() -> str:
    return str(uuid.uuid4())


def get_correlation_id() -> str:
    """Get current correlation id, or "no-correlation-id" outside any operation."""
    return correlation_id_var.get() or "no-correlation-id"


@contextmanager
def correlation_scope(correlation_id: Optional[str] = None) -> Iterator[str]:
    """Bind a correlation id for the duration of the block.

    Nested scopes reuse the outer id unless one is passed explicitly, so an
    operation that calls another operation keeps a single id.
    """
    current = correlation_id_var.get()
    value = correlation_id or current or generate_correlation_id()
    token = correlation_id_var.set(value)
    try:
        yield value
    finally:
        correlation_id_var.reset(token)
