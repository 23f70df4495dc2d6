"""DocumentStatusHistory SQLAlchemy model"""

from sqlalchemy import Column, Enum as SQLEnum, ForeignKey, Index, Integer, Text, Uuid, event
from sqlalchemy.orm import relationship

from ..domain.documents.document_status import DocumentStatus
from .base import Base, UTCDateTime, utcnow


class DocumentStatusHistory(Base):
    """One immutable audit record per status change of a document.

    Entries are append-only and are only ever removed together with their
    document (ON DELETE CASCADE). Informational entries (routing notes)
    repeat the document's current status.
    """
    __tablename__ = "document_status_history"
    __table_args__ = (
        Index("idx_document_history_document_changed", "document_id", "changed_at", "id"),
    )

    # Integer key doubles as insertion order when changed_at ties
    id = Column(Integer, primary_key=True, autoincrement=True)
    document_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("document.id", ondelete="CASCADE"),
        nullable=False,
    )
    status = Column(
        SQLEnum(DocumentStatus, name="documentstatus", native_enum=False, length=32),
        nullable=False,
    )
    comment = Column(Text, nullable=False)
    changed_at = Column(UTCDateTime, nullable=False, default=utcnow)

    # Relationships
    document = relationship("Document", back_populates="history")


@event.listens_for(DocumentStatusHistory, "before_update")
def _reject_history_update(mapper, connection, target):
    raise ValueError("document_status_history rows are append-only")
