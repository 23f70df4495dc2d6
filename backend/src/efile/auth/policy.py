"""Authorization policy for document operations.

One table maps each operation to its requirement; ``authorize`` evaluates it
once per call. The state machine knows nothing about roles, and this module
knows nothing about states.

Policy:
┌──────────────┬─────────────────────┬─────────────────┐
│ Operation    │ Capability          │ Uploader may?   │
├──────────────┼─────────────────────┼─────────────────┤
│ UPLOAD       │ UPLOAD              │ -               │
│ SUBMIT       │ ADMINISTER          │ yes             │
│ REVISE       │ ADMINISTER          │ yes             │
│ WITHDRAW     │ ADMINISTER          │ yes             │
│ START_REVIEW │ REVIEW              │ no              │
│ APPROVE      │ APPROVE             │ no              │
│ REJECT       │ APPROVE             │ no              │
│ DELETE       │ ADMINISTER          │ no              │
└──────────────┴─────────────────────┴─────────────────┘
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional
from uuid import UUID

from ..domain.documents.errors import AuthorizationError
from .principal import Actor
from .roles import Capability, has_capability


class Operation(str, Enum):
    UPLOAD = "upload"
    SUBMIT = "submit"
    REVISE = "revise"
    WITHDRAW = "withdraw"
    START_REVIEW = "start_review"
    APPROVE = "approve"
    REJECT = "reject"
    DELETE = "delete"


@dataclass(frozen=True)
class Requirement:
    capability: Capability
    owner_allowed: bool = False


OPERATION_POLICY: Dict[Operation, Requirement] = {
    Operation.UPLOAD: Requirement(Capability.UPLOAD),
    Operation.SUBMIT: Requirement(Capability.ADMINISTER, owner_allowed=True),
    Operation.REVISE: Requirement(Capability.ADMINISTER, owner_allowed=True),
    Operation.WITHDRAW: Requirement(Capability.ADMINISTER, owner_allowed=True),
    Operation.START_REVIEW: Requirement(Capability.REVIEW),
    Operation.APPROVE: Requirement(Capability.APPROVE),
    Operation.REJECT: Requirement(Capability.APPROVE),
    Operation.DELETE: Requirement(Capability.ADMINISTER),
}


def is_allowed(operation: Operation, actor: Actor, owner_id: Optional[UUID] = None) -> bool:
    """Evaluate the policy for one call.

    Args:
        operation: Operation being attempted
        actor: Acting user
        owner_id: Uploader of the target document, for ownership-based rules
    """
    requirement = OPERATION_POLICY[operation]
    if requirement.owner_allowed and owner_id is not None and actor.id == owner_id:
        return True
    return has_capability(actor.role, requirement.capability)


def authorize(operation: Operation, actor: Actor, owner_id: Optional[UUID] = None) -> None:
    """Raise AuthorizationError unless the policy allows the call."""
    if is_allowed(operation, actor, owner_id):
        return

    requirement = OPERATION_POLICY[operation]
    if requirement.owner_allowed:
        reason = f"only the uploader or a holder of {requirement.capability.value} may do this"
    else:
        reason = f"role {actor.role.value} lacks {requirement.capability.value}"
    raise AuthorizationError(operation.value, actor.id, reason)
