"""Actor, role and authorization policy for document operations."""

from .policy import OPERATION_POLICY, Operation, authorize, is_allowed
from .principal import Actor
from .roles import Capability, UserRole, capabilities_for, has_capability

__all__ = [
    "Actor",
    "Capability",
    "UserRole",
    "capabilities_for",
    "has_capability",
    "OPERATION_POLICY",
    "Operation",
    "authorize",
    "is_allowed",
]
