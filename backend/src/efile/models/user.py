"""User SQLAlchemy model"""

import re
from uuid import uuid4

from sqlalchemy import CheckConstraint, Column, ForeignKey, Index, String, Text, Uuid
from sqlalchemy.orm import relationship, validates

from .base import Base, UTCDateTime, utcnow


class User(Base):
    """User model for the people who upload and review documents.

    User management lives outside the document workflow; the workflow only
    reads name, email, role and department.
    """
    __tablename__ = "app_user"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid4)
    name = Column(String(191), nullable=False)
    email = Column(String(191), nullable=False, unique=True)
    role = Column(String(32), nullable=False)
    department_id = Column(Uuid(as_uuid=True), ForeignKey("department.id", ondelete="SET NULL"), nullable=True)
    status = Column(Text, nullable=False, default="ACTIVE")
    created_at = Column(UTCDateTime, nullable=False, default=utcnow)

    # Relationships
    department = relationship("Department", back_populates="users", foreign_keys=[department_id])

    __table_args__ = (
        CheckConstraint(
            "role IN ('ADMIN', 'CEO', 'CFO', 'PROCUREMENT', 'ACCOUNTANT', 'AUDITOR', 'IT', 'INVESTOR')",
            name="ck_app_user_role",
        ),
        CheckConstraint("status IN ('ACTIVE', 'DISABLED')", name="ck_app_user_status"),
        Index("idx_app_user_role", "role"),
        Index("idx_app_user_department", "department_id"),
    )

    @validates("email")
    def validate_email(self, key, value):
        """Basic email format validation"""
        if not re.match(r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$", value):
            raise ValueError("Invalid email format")
        return value.lower()

    @validates("role")
    def validate_role(self, key, value):
        return getattr(value, "value", value)
