"""Documents domain module - review lifecycle, routing, validation, receipts"""

from .document_status import (
    ALLOWED_TRANSITIONS,
    INITIAL_STATUS,
    DocumentStatus,
    can_transition,
    get_allowed_transitions,
    is_terminal,
    validate_transition,
)
from .document_type import DocumentType, parse_document_type
from .errors import (
    AuthorizationError,
    ConflictError,
    DocumentError,
    InvalidTransitionError,
    NotFoundError,
    ReceiptNumberExhaustedError,
    StorageError,
    ValidationError,
)
from .receipt_numbers import ReceiptNumberGenerator
from .routing import resolve_routing_target

__all__ = [
    "ALLOWED_TRANSITIONS",
    "INITIAL_STATUS",
    "DocumentStatus",
    "can_transition",
    "get_allowed_transitions",
    "is_terminal",
    "validate_transition",
    "DocumentType",
    "parse_document_type",
    "AuthorizationError",
    "ConflictError",
    "DocumentError",
    "InvalidTransitionError",
    "NotFoundError",
    "ReceiptNumberExhaustedError",
    "StorageError",
    "ValidationError",
    "ReceiptNumberGenerator",
    "resolve_routing_target",
]
