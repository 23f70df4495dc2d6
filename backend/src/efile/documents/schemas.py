"""Pydantic schemas for document views and search.

Read-side contracts returned by the lifecycle service. Entities never leave
the unit of work that loaded them; callers get these snapshots instead.
"""

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from ..domain.documents.document_status import DocumentStatus
from ..domain.documents.document_type import DocumentType
from ..models.base import as_utc


# ============================================================================
# Document views
# ============================================================================

class DocumentResponse(BaseModel):
    """Snapshot of a document and its review outcome."""
    id: UUID
    title: str
    type: DocumentType
    status: DocumentStatus
    case_id: UUID
    case_title: Optional[str] = None
    uploaded_by_id: UUID
    uploaded_by_name: Optional[str] = None
    approved_by_id: Optional[UUID] = None
    approved_by_name: Optional[str] = None
    original_filename: str
    file_path: str = Field(..., description="Blob store locator")
    file_size: int = Field(..., ge=0)
    receipt_number: str
    rejection_reason: Optional[str] = None
    uploaded_at: datetime
    processed_at: Optional[datetime] = None
    version: int

    model_config = ConfigDict(from_attributes=True)

    @classmethod
    def from_document(cls, document) -> "DocumentResponse":
        """Build a snapshot from a Document row, flattening related names."""
        return cls(
            id=document.id,
            title=document.title,
            type=document.type,
            status=document.status,
            case_id=document.case_id,
            case_title=document.case.title if document.case is not None else None,
            uploaded_by_id=document.uploaded_by_id,
            uploaded_by_name=document.uploaded_by.name if document.uploaded_by is not None else None,
            approved_by_id=document.approved_by_id,
            approved_by_name=document.approved_by.name if document.approved_by is not None else None,
            original_filename=document.original_filename,
            file_path=document.file_path,
            file_size=document.file_size,
            receipt_number=document.receipt_number,
            rejection_reason=document.rejection_reason,
            uploaded_at=document.uploaded_at,
            processed_at=document.processed_at,
            version=document.version,
        )


class DocumentHistoryEntry(BaseModel):
    """One audit record, oldest first in every listing."""
    id: int
    status: DocumentStatus
    comment: str
    changed_at: datetime

    model_config = ConfigDict(from_attributes=True)


class DocumentDownload(BaseModel):
    """Stored content together with the name it was uploaded under."""
    filename: str
    content: bytes
    size_bytes: int


# ============================================================================
# Search
# ============================================================================

class DocumentSearchCriteria(BaseModel):
    """Optional filters, combined with AND. No filters matches everything."""
    status: Optional[DocumentStatus] = None
    type: Optional[DocumentType] = None
    case_id: Optional[UUID] = None
    title_keyword: Optional[str] = Field(None, description="Case-insensitive substring of the title")
    uploaded_after: Optional[datetime] = Field(None, description="Inclusive lower bound on uploaded_at")
    uploaded_before: Optional[datetime] = Field(None, description="Inclusive upper bound on uploaded_at")

    model_config = ConfigDict(extra="forbid")

    @field_validator("title_keyword")
    @classmethod
    def blank_keyword_is_no_filter(cls, value: Optional[str]) -> Optional[str]:
        if value is None or not value.strip():
            return None
        return value.strip()

    @field_validator("uploaded_after", "uploaded_before")
    @classmethod
    def bounds_in_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        # Naive bounds are read as UTC, like stored timestamps
        if value is None:
            return None
        return as_utc(value)

    @model_validator(mode="after")
    def check_date_range(self) -> "DocumentSearchCriteria":
        if (
            self.uploaded_after is not None
            and self.uploaded_before is not None
            and self.uploaded_after > self.uploaded_before
        ):
            raise ValueError("uploaded_after must not be later than uploaded_before")
        return self


class DocumentPage(BaseModel):
    """One page of search results, newest upload first."""
    items: List[DocumentResponse]
    total: int = Field(..., description="Total number of documents matching the criteria")
    page: int = Field(..., ge=1)
    per_page: int = Field(..., ge=1)

    @property
    def pages(self) -> int:
        return (self.total + self.per_page - 1) // self.per_page
