"""Prometheus metrics for the document lifecycle engine.

Counters for uploads and status changes, and a latency histogram for blob
store calls. The embedding application exposes the default registry.
"""

import time
from contextlib import contextmanager
from typing import Iterator, Optional

from prometheus_client import Counter, Histogram

from ..domain.documents.document_type import DocumentType
from ..domain.documents.errors import (
    AuthorizationError,
    ConflictError,
    InvalidTransitionError,
    NotFoundError,
    StorageError,
    ValidationError,
)

# Lifecycle metrics
document_transitions_total = Counter(
    "efile_document_transitions_total",
    "Document lifecycle operations by status change and outcome",
    ["operation", "from_status", "to_status", "outcome"],
)

documents_uploaded_total = Counter(
    "efile_documents_uploaded_total",
    "Document uploads by type and outcome",
    ["document_type", "outcome"],  # outcome: success|invalid|unauthorized|not_found|storage_error|conflict|error
)

# Storage metrics
blob_store_duration_seconds = Histogram(
    "efile_blob_store_duration_seconds",
    "Blob store call latency in seconds",
    ["action", "outcome"],  # action: store|load|delete
    buckets=[0.005, 0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0],
)

# Checked in order; subclasses before their bases
_OUTCOMES = (
    (InvalidTransitionError, "invalid_transition"),
    (AuthorizationError, "unauthorized"),
    (ValidationError, "invalid"),
    (NotFoundError, "not_found"),
    (ConflictError, "conflict"),
    (StorageError, "storage_error"),
)


def outcome_label(error: Optional[BaseException] = None) -> str:
    """Bounded outcome label for an operation that raised ``error``."""
    if error is None:
        return "success"
    for error_type, label in _OUTCOMES:
        if isinstance(error, error_type):
            return label
    return "error"


def _status_label(status) -> str:
    if status is None:
        return "NONE"
    return getattr(status, "value", str(status))


def _type_label(document_type) -> str:
    if isinstance(document_type, DocumentType):
        return document_type.value
    try:
        return DocumentType(str(document_type).strip().upper()).value
    except ValueError:
        return "UNKNOWN"


def record_transition(operation, from_status, to_status, outcome: str) -> None:
    document_transitions_total.labels(
        operation=getattr(operation, "value", str(operation)),
        from_status=_status_label(from_status),
        to_status=_status_label(to_status),
        outcome=outcome,
    ).inc()


def record_upload(document_type, outcome: str) -> None:
    documents_uploaded_total.labels(document_type=_type_label(document_type), outcome=outcome).inc()


@contextmanager
def observe_blob_call(action: str) -> Iterator[None]:
    """Time one blob store call, labelled with how it ended."""
    start = time.perf_counter()
    outcome = "success"
    try:
        yield
    except Exception as e:
        outcome = outcome_label(e)
        raise
    finally:
        blob_store_duration_seconds.labels(action=action, outcome=outcome).observe(
            time.perf_counter() - start
        )
