"""Document SQLAlchemy model

Document represents a file filed against a case and the state of its review.
The status column is a cached copy of the newest history entry: it can only
be changed through ``apply_transition``, which writes both in the same unit
of work.
"""

from datetime import datetime
from typing import Optional
from uuid import uuid4

from sqlalchemy import BigInteger, Column, Enum as SQLEnum, ForeignKey, Index, Integer, String, Text, Uuid
from sqlalchemy.orm import relationship, validates

from ..domain.documents.document_status import INITIAL_STATUS, DocumentStatus, validate_transition
from ..domain.documents.document_type import DocumentType
from .base import Base, UTCDateTime, utcnow
from .document_status_history import DocumentStatusHistory


class Document(Base):
    """Document model: file metadata, review state and review outcome.

    Each document belongs to one case and one uploader. Documents are
    stored in the blob store under ``file_path``; the receipt number is the
    external reference handed to the uploader.
    """
    __tablename__ = "document"
    __table_args__ = (
        Index("uq_document_receipt_number", "receipt_number", unique=True),
        Index("idx_document_case", "case_id"),
        Index("idx_document_status", "status"),
        Index("idx_document_uploaded_by", "uploaded_by_id"),
        Index("idx_document_uploaded_at", "uploaded_at"),
    )

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid4)
    title = Column(String(191), nullable=False)
    type = Column(
        SQLEnum(DocumentType, name="documenttype", native_enum=False, length=32),
        nullable=False,
    )
    status = Column(
        SQLEnum(DocumentStatus, name="documentstatus", native_enum=False, length=32),
        nullable=False,
    )
    file_path = Column(String(512), nullable=False)  # Blob store locator
    file_size = Column(BigInteger, nullable=False)
    original_filename = Column(String(255), nullable=False)
    case_id = Column(Uuid(as_uuid=True), ForeignKey("case_file.id", ondelete="RESTRICT"), nullable=False)
    uploaded_by_id = Column(Uuid(as_uuid=True), ForeignKey("app_user.id", ondelete="RESTRICT"), nullable=False)
    approved_by_id = Column(Uuid(as_uuid=True), ForeignKey("app_user.id", ondelete="SET NULL"), nullable=True)
    rejection_reason = Column(Text, nullable=True)
    receipt_number = Column(String(191), nullable=False)
    uploaded_at = Column(UTCDateTime, nullable=False, default=utcnow)
    processed_at = Column(UTCDateTime, nullable=True)
    version = Column(Integer, nullable=False)

    __mapper_args__ = {"version_id_col": version}

    # Relationships
    case = relationship("Case", back_populates="documents")
    uploaded_by = relationship("User", foreign_keys=[uploaded_by_id])
    approved_by = relationship("User", foreign_keys=[approved_by_id])
    history = relationship(
        DocumentStatusHistory,
        back_populates="document",
        order_by=[DocumentStatusHistory.changed_at, DocumentStatusHistory.id],
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    @validates("status")
    def _guard_status(self, key, value):
        value = DocumentStatus(value)
        if getattr(self, "_transition_in_progress", False):
            return value
        if self.status is None and value == INITIAL_STATUS:
            return value
        raise AttributeError("Document status can only change through apply_transition()")

    @classmethod
    def create_draft(cls, comment: str, at: Optional[datetime] = None, **fields) -> "Document":
        """Build a new document in the initial status with its first history entry."""
        at = at or utcnow()
        document = cls(status=INITIAL_STATUS, uploaded_at=at, **fields)
        document._append_history(INITIAL_STATUS, comment, at)
        return document

    def apply_transition(
        self,
        new_status: DocumentStatus,
        comment: str,
        at: Optional[datetime] = None,
    ) -> DocumentStatusHistory:
        """Move to ``new_status`` and record the change.

        Raises:
            InvalidTransitionError: If the state machine forbids the move;
                nothing is modified in that case
        """
        validate_transition(self.status, new_status)
        self._transition_in_progress = True
        try:
            self.status = new_status
        finally:
            self._transition_in_progress = False
        return self._append_history(new_status, comment, at)

    def record_note(self, comment: str, at: Optional[datetime] = None) -> DocumentStatusHistory:
        """Append an informational entry that repeats the current status."""
        return self._append_history(self.status, comment, at)

    def _append_history(self, status: DocumentStatus, comment: str, at: Optional[datetime]) -> DocumentStatusHistory:
        changed_at = at or utcnow()
        if self.history:
            # Keep changed_at non-decreasing even if the clock steps back
            changed_at = max(changed_at, self.history[-1].changed_at)
        entry = DocumentStatusHistory(status=status, comment=comment, changed_at=changed_at)
        self.history.append(entry)
        return entry
