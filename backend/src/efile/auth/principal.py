"""The acting user as handed to the lifecycle engine.

Authentication happens upstream; the engine receives an already-resolved
Actor and trusts its id and role.
"""

from dataclasses import dataclass
from typing import Optional
from uuid import UUID

from .roles import UserRole, parse_role


@dataclass(frozen=True)
class Actor:
    id: UUID
    role: UserRole
    name: str = ""
    department: Optional[str] = None

    def __post_init__(self):
        object.__setattr__(self, "role", parse_role(self.role))

    @property
    def display_name(self) -> str:
        return self.name or str(self.id)
