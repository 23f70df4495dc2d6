"""Case SQLAlchemy model

Cases are created and managed by case management; documents are filed
against exactly one case.
"""

from uuid import uuid4

from sqlalchemy import Column, String, Text, Uuid
from sqlalchemy.orm import relationship

from .base import Base, UTCDateTime, utcnow


class Case(Base):
    __tablename__ = "case_file"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid4)
    title = Column(String(191), nullable=False)
    description = Column(Text, nullable=True)
    status = Column(String(32), nullable=False, default="OPEN")
    created_at = Column(UTCDateTime, nullable=False, default=utcnow)

    # Relationships
    documents = relationship("Document", back_populates="case", passive_deletes=True)
