"""DocumentStatus state machine for the document review lifecycle.

State flow:
    DRAFT → SUBMITTED → UNDER_REVIEW → APPROVED | REJECTED
    REJECTED → DRAFT (revision) | WITHDRAWN
    DRAFT | SUBMITTED → WITHDRAWN

Terminal States: APPROVED, WITHDRAWN
"""

from enum import Enum
from typing import Dict, List

from .errors import InvalidTransitionError


class DocumentStatus(str, Enum):
    """Document lifecycle status.

    Values are stored as TEXT in the database and must match exactly.
    """
    DRAFT = "DRAFT"                # Uploaded, editable by the uploader
    SUBMITTED = "SUBMITTED"        # Routed to a department, waiting for a reviewer
    UNDER_REVIEW = "UNDER_REVIEW"  # A reviewer picked it up
    APPROVED = "APPROVED"          # Terminal success state
    REJECTED = "REJECTED"          # Can be revised (back to DRAFT) or withdrawn
    WITHDRAWN = "WITHDRAWN"        # Terminal


INITIAL_STATUS = DocumentStatus.DRAFT

ALLOWED_TRANSITIONS: Dict[DocumentStatus, List[DocumentStatus]] = {
    DocumentStatus.DRAFT: [DocumentStatus.SUBMITTED, DocumentStatus.WITHDRAWN],
    DocumentStatus.SUBMITTED: [DocumentStatus.UNDER_REVIEW, DocumentStatus.WITHDRAWN],
    DocumentStatus.UNDER_REVIEW: [DocumentStatus.APPROVED, DocumentStatus.REJECTED],
    DocumentStatus.APPROVED: [],  # Terminal state
    DocumentStatus.REJECTED: [DocumentStatus.DRAFT, DocumentStatus.WITHDRAWN],
    DocumentStatus.WITHDRAWN: [],  # Terminal state
}

TERMINAL_STATUSES = frozenset(
    status for status, targets in ALLOWED_TRANSITIONS.items() if not targets
)


def can_transition(current_status: DocumentStatus, new_status: DocumentStatus) -> bool:
    """Check if a state transition is allowed without raising.

    Example:
        >>> can_transition(DocumentStatus.DRAFT, DocumentStatus.SUBMITTED)
        True
        >>> can_transition(DocumentStatus.APPROVED, DocumentStatus.DRAFT)
        False
    """
    return new_status in ALLOWED_TRANSITIONS.get(current_status, [])


def validate_transition(current_status: DocumentStatus, new_status: DocumentStatus) -> None:
    """Validate that a state transition is allowed.

    Raises:
        InvalidTransitionError: If the transition is not in ALLOWED_TRANSITIONS
    """
    if not can_transition(current_status, new_status):
        raise InvalidTransitionError(
            current_status,
            new_status,
            get_allowed_transitions(current_status),
        )


def get_allowed_transitions(status: DocumentStatus) -> List[DocumentStatus]:
    return list(ALLOWED_TRANSITIONS.get(status, []))


def is_terminal(status: DocumentStatus) -> bool:
    return status in TERMINAL_STATUSES
