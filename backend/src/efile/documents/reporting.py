"""Read-only reporting over documents: history, receipts and downloads.

Nothing here writes to the database or the blob store. Output for a
document depends only on its stored state, so repeated calls return the
same result until the document changes.
"""

import logging
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from sqlalchemy.orm import sessionmaker

from ..database import session_scope
from ..domain.documents.ports.object_storage_port import BlobStorePort
from ..observability.correlation import correlation_scope
from ..observability.metrics import observe_blob_call
from .history import load_history
from .registry import DocumentRegistry
from .schemas import DocumentDownload, DocumentHistoryEntry

logger = logging.getLogger(__name__)

RULE = "=" * 60
SECTION_RULE = "-" * 30


def format_file_size(size: Optional[int]) -> str:
    """Human-readable size.

    Example:
        >>> format_file_size(512)
        '512 B'
        >>> format_file_size(2048)
        '2.0 KB'
        >>> format_file_size(5 * 1024 * 1024)
        '5.0 MB'
    """
    if size is None:
        return "Unknown"
    if size < 1024:
        return f"{size} B"
    if size < 1024 * 1024:
        return f"{size / 1024:.1f} KB"
    return f"{size / (1024 * 1024):.1f} MB"


def _format_timestamp(value: Optional[datetime]) -> str:
    if value is None:
        return "-"
    return value.strftime("%Y-%m-%d %H:%M:%S UTC")


def render_receipt(document) -> str:
    """Render the fixed-layout receipt text for a loaded Document."""
    lines = [
        RULE,
        "E-FILE RECEIPT".center(60).rstrip(),
        RULE,
        "",
        f"Receipt Number: {document.receipt_number}",
        f"Document ID: {document.id}",
        f"Document Title: {document.title}",
        f"Document Type: {document.type.value}",
        f"File Name: {document.original_filename}",
        f"File Size: {format_file_size(document.file_size)}",
        f"Status: {document.status.value}",
        "",
        "Submission Details:",
        SECTION_RULE,
        f"Uploaded By: {document.uploaded_by.name}",
        f"Email: {document.uploaded_by.email}",
        f"Upload Date: {_format_timestamp(document.uploaded_at)}",
    ]

    if document.case is not None:
        lines += [
            "",
            "Case Information:",
            SECTION_RULE,
            f"Case ID: {document.case.id}",
            f"Case Title: {document.case.title}",
        ]

    if document.approved_by is not None:
        lines += [
            "",
            "Review Decision:",
            SECTION_RULE,
            f"Reviewed By: {document.approved_by.name}",
            f"Process Date: {_format_timestamp(document.processed_at)}",
        ]

    if document.rejection_reason is not None:
        lines += ["", f"Rejection Reason: {document.rejection_reason}"]

    lines += [
        "",
        RULE,
        "This is an electronically generated receipt".center(60).rstrip(),
        "Valid for record keeping only".center(60).rstrip(),
        RULE,
    ]
    return "\n".join(lines) + "\n"


class DocumentReportingService:
    """History view, receipt rendering and content download."""

    def __init__(self, blob_store: BlobStorePort, session_factory: Optional[sessionmaker] = None):
        self.blob_store = blob_store
        self.session_factory = session_factory

    def get_history(self, document_id: UUID) -> List[DocumentHistoryEntry]:
        """Every history entry of the document, oldest first.

        Raises:
            NotFoundError: If the document does not exist
        """
        with session_scope(self.session_factory) as session:
            entries = load_history(session, document_id)
            return [DocumentHistoryEntry.model_validate(entry) for entry in entries]

    def generate_receipt(self, document_id: UUID) -> str:
        """Fixed-layout text receipt for the document.

        Raises:
            NotFoundError: If the document does not exist
        """
        with session_scope(self.session_factory) as session:
            document = DocumentRegistry(session).get(document_id)
            return render_receipt(document)

    def download(self, document_id: UUID) -> DocumentDownload:
        """Load the stored content together with its original filename.

        The blob store call happens after the read transaction has ended.

        Raises:
            NotFoundError: If the document or its stored content is missing
            StorageError: If the blob store fails
        """
        with correlation_scope():
            with session_scope(self.session_factory) as session:
                document = DocumentRegistry(session).get(document_id)
                filename = document.original_filename
                locator = document.file_path

            with observe_blob_call("load"):
                content = self.blob_store.load(locator)
            logger.info(
                f"Document downloaded: {filename}",
                extra={"document_id": str(document_id), "storage_key": locator},
            )
        return DocumentDownload(filename=filename, content=content, size_bytes=len(content))
