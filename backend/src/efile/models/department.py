"""Department SQLAlchemy model"""

from uuid import uuid4

from sqlalchemy import Column, String, Uuid
from sqlalchemy.orm import relationship, validates

from .base import Base, UTCDateTime, utcnow


def department_name_key(name: str) -> str:
    """Case-folded form of a department name; unique across departments."""
    return name.strip().casefold()


class Department(Base):
    """Organizational department, optionally headed by a designated reviewer.

    Submitted documents are routed to a department by type; the head (if
    any) is recorded in the document's history as the routed reviewer.
    Names are unique regardless of case ("Finance" and "FINANCE" clash).
    """
    __tablename__ = "department"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid4)
    name = Column(String(191), nullable=False, unique=True)
    # Maintained from name; the unique index makes names case-insensitively unique
    name_key = Column(String(191), nullable=False, unique=True)
    # Plain column: app_user.department_id already references this table
    head_id = Column(Uuid(as_uuid=True), nullable=True)
    created_at = Column(UTCDateTime, nullable=False, default=utcnow)

    # Relationships
    users = relationship("User", back_populates="department", foreign_keys="User.department_id")
    head = relationship(
        "User",
        primaryjoin="foreign(Department.head_id) == User.id",
        viewonly=True,
    )

    @validates("name")
    def _sync_name_key(self, key, value):
        self.name_key = department_name_key(value)
        return value
