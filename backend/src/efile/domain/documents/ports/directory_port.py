"""Directory ports for collaborators owned outside the lifecycle engine.

Cases and departments are managed by other parts of the system. The engine
only needs to know whether a case exists and who (if anyone) heads a
department, so the ports expose exactly that as plain data.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional
from uuid import UUID


@dataclass(frozen=True)
class CaseRef:
    id: UUID
    title: str


@dataclass(frozen=True)
class DepartmentRef:
    """A department and its optional designated reviewer."""
    id: UUID
    name: str
    head_id: Optional[UUID] = None
    head_name: Optional[str] = None

    @property
    def has_reviewer(self) -> bool:
        return self.head_id is not None


class CaseDirectoryPort(ABC):

    @abstractmethod
    def get(self, case_id: UUID) -> CaseRef:
        """Return the case.

        Raises:
            NotFoundError: If the case does not exist
        """


class DepartmentDirectoryPort(ABC):

    @abstractmethod
    def find_by_name(self, name: str) -> Optional[DepartmentRef]:
        """Case-insensitive lookup; None when no department has that name."""
