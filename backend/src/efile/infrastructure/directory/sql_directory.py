"""SQLAlchemy-backed directory adapters for cases and departments."""

from typing import Optional
from uuid import UUID

from sqlalchemy.orm import Session, joinedload

from ...domain.documents.errors import NotFoundError
from ...domain.documents.ports.directory_port import (
    CaseDirectoryPort,
    CaseRef,
    DepartmentDirectoryPort,
    DepartmentRef,
)
from ...models import Case, Department
from ...models.department import department_name_key


class SqlCaseDirectory(CaseDirectoryPort):
    """Case lookups on the caller's session."""

    def __init__(self, session: Session):
        self.session = session

    def get(self, case_id: UUID) -> CaseRef:
        case = self.session.get(Case, case_id)
        if case is None:
            raise NotFoundError("Case", case_id)
        return CaseRef(id=case.id, title=case.title)


class SqlDepartmentDirectory(DepartmentDirectoryPort):
    """Department lookups on the caller's session.

    Names are matched case-insensitively, so "finance" finds "Finance".
    """

    def __init__(self, session: Session):
        self.session = session

    def find_by_name(self, name: str) -> Optional[DepartmentRef]:
        if not name or not name.strip():
            return None

        department = (
            self.session.query(Department)
            .options(joinedload(Department.head))
            .filter(Department.name_key == department_name_key(name))
            .first()
        )
        if department is None:
            return None

        head = department.head
        return DepartmentRef(
            id=department.id,
            name=department.name,
            head_id=head.id if head is not None else None,
            head_name=head.name if head is not None else None,
        )
