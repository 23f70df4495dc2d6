"""Error taxonomy for the document lifecycle engine.

Callers distinguish "not allowed" (AuthorizationError) from "not possible
right now" (InvalidTransitionError, ConflictError) and from bad input
(ValidationError). Everything derives from DocumentError so a transport
layer can map the whole family in one place.
"""

from typing import Optional


class DocumentError(Exception):
    """Base class for all lifecycle engine errors."""


class ValidationError(DocumentError):
    """Missing or malformed input (blank title, short rejection reason, bad file)."""


class NotFoundError(DocumentError):
    """A document, case, department or stored blob does not exist."""

    def __init__(self, entity: str, identifier: object):
        self.entity = entity
        self.identifier = identifier
        super().__init__(f"{entity} not found: {identifier}")


class InvalidTransitionError(DocumentError):
    """The state machine does not allow moving from current to attempted."""

    def __init__(self, current, attempted, allowed=()):
        self.current = current
        self.attempted = attempted
        self.allowed = list(allowed)
        allowed_values = [s.value for s in self.allowed]
        super().__init__(
            f"Invalid transition: {current.value} -> {attempted.value}. "
            f"Allowed transitions from {current.value}: {allowed_values}"
        )


class AuthorizationError(DocumentError):
    """The actor's role (or ownership) is insufficient for the operation."""

    def __init__(self, operation: str, actor_id: object, reason: str):
        self.operation = operation
        self.actor_id = actor_id
        super().__init__(f"Actor {actor_id} is not allowed to {operation}: {reason}")


class StorageError(DocumentError):
    """The blob store rejected or failed an operation.

    The underlying exception is kept on ``cause`` and chained with
    ``raise ... from``.
    """

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        self.cause = cause
        super().__init__(message)


class ConflictError(DocumentError):
    """A concurrent transition won the race; re-read the document and retry."""


class ReceiptNumberExhaustedError(DocumentError):
    """No unique receipt number could be produced within the allowed attempts."""
