"""User roles and the capabilities they grant.

The document workflow never checks role names directly. Each role maps to a
set of capabilities, and operations require capabilities (see policy.py).

Capability Matrix:
┌─────────────┬───────┬─────┬─────┬─────────────┬────────────┬─────────┬────┬──────────┐
│ Capability  │ ADMIN │ CEO │ CFO │ PROCUREMENT │ ACCOUNTANT │ AUDITOR │ IT │ INVESTOR │
├─────────────┼───────┼─────┼─────┼─────────────┼────────────┼─────────┼────┼──────────┤
│ UPLOAD      │   ✓   │  ✓  │  ✓  │      ✓      │     ✓      │         │    │          │
│ REVIEW      │   ✓   │  ✓  │  ✓  │             │            │    ✓    │    │          │
│ APPROVE     │   ✓   │  ✓  │  ✓  │             │            │         │    │          │
│ ADMINISTER  │   ✓   │     │     │             │            │         │    │          │
└─────────────┴───────┴─────┴─────┴─────────────┴────────────┴─────────┴────┴──────────┘
"""

from enum import Enum
from typing import Dict, FrozenSet, Set, Union

from ..domain.documents.errors import ValidationError


class UserRole(str, Enum):
    """User roles in the organization.

    Values are stored as TEXT in the database and must match exactly.
    """
    ADMIN = "ADMIN"
    CEO = "CEO"
    CFO = "CFO"
    PROCUREMENT = "PROCUREMENT"
    ACCOUNTANT = "ACCOUNTANT"
    AUDITOR = "AUDITOR"
    IT = "IT"
    INVESTOR = "INVESTOR"


class Capability(str, Enum):
    UPLOAD = "UPLOAD"          # uploader-equivalent
    REVIEW = "REVIEW"          # reviewer-eligible
    APPROVE = "APPROVE"        # approver-eligible
    ADMINISTER = "ADMINISTER"  # administrative


ROLE_CAPABILITIES: Dict[UserRole, FrozenSet[Capability]] = {
    UserRole.ADMIN: frozenset(Capability),
    UserRole.CEO: frozenset({Capability.UPLOAD, Capability.REVIEW, Capability.APPROVE}),
    UserRole.CFO: frozenset({Capability.UPLOAD, Capability.REVIEW, Capability.APPROVE}),
    UserRole.PROCUREMENT: frozenset({Capability.UPLOAD}),
    UserRole.ACCOUNTANT: frozenset({Capability.UPLOAD}),
    UserRole.AUDITOR: frozenset({Capability.REVIEW}),
    UserRole.IT: frozenset(),
    UserRole.INVESTOR: frozenset(),
}


def parse_role(role: Union[UserRole, str]) -> UserRole:
    """Coerce a role name to UserRole.

    Raises:
        ValidationError: If the name is not a known role
    """
    if isinstance(role, UserRole):
        return role
    try:
        return UserRole(str(role).strip().upper())
    except ValueError:
        raise ValidationError(f"Unknown role: {role}")


def capabilities_for(role: Union[UserRole, str]) -> FrozenSet[Capability]:
    """Capabilities granted to a role (empty for unknown roles).

    Examples:
        >>> Capability.APPROVE in capabilities_for(UserRole.CFO)
        True
        >>> Capability.APPROVE in capabilities_for("AUDITOR")
        False
    """
    try:
        return ROLE_CAPABILITIES.get(parse_role(role), frozenset())
    except ValidationError:
        return frozenset()


def has_capability(role: Union[UserRole, str], capability: Capability) -> bool:
    return capability in capabilities_for(role)


def get_roles_with(capability: Capability) -> Set[UserRole]:
    """All roles that hold a capability.

    Example:
        >>> sorted(r.value for r in get_roles_with(Capability.REVIEW))
        ['ADMIN', 'AUDITOR', 'CEO', 'CFO']
    """
    return {role for role, caps in ROLE_CAPABILITIES.items() if capability in caps}
