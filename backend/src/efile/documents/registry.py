"""Document persistence queries.

DocumentRegistry wraps the queries the lifecycle service needs against one
session. It never commits; the caller's session scope owns the transaction.
"""

from typing import Dict, List, Optional, Tuple
from uuid import UUID

from sqlalchemy import and_, func
from sqlalchemy.orm import Session, joinedload

from ..domain.documents.document_status import DocumentStatus
from ..domain.documents.errors import NotFoundError
from ..models import Document
from .schemas import DocumentSearchCriteria

# Related rows needed to build DocumentResponse without lazy loads
_VIEW_OPTIONS = (
    joinedload(Document.case),
    joinedload(Document.uploaded_by),
    joinedload(Document.approved_by),
)


class DocumentRegistry:
    """Query helper for Document rows.

    Example:
        with session_scope() as session:
            registry = DocumentRegistry(session)
            document = registry.get(document_id)
    """

    def __init__(self, session: Session):
        self.session = session

    def add(self, document: Document) -> Document:
        self.session.add(document)
        return document

    def delete(self, document: Document) -> None:
        self.session.delete(document)

    def get(self, document_id: UUID) -> Document:
        """Load a document with its case and users.

        Raises:
            NotFoundError: If no document has this id
        """
        document = (
            self.session.query(Document)
            .options(*_VIEW_OPTIONS)
            .filter(Document.id == document_id)
            .first()
        )
        if document is None:
            raise NotFoundError("Document", document_id)
        return document

    def get_for_update(self, document_id: UUID) -> Document:
        """Load a document and lock its row until the transaction ends.

        Databases without row locks (SQLite) ignore FOR UPDATE; the version
        column still rejects a lost update at flush time.

        Raises:
            NotFoundError: If no document has this id
        """
        document = (
            self.session.query(Document)
            .filter(Document.id == document_id)
            .with_for_update()
            .first()
        )
        if document is None:
            raise NotFoundError("Document", document_id)
        return document

    def find_by_receipt_number(self, receipt_number: str) -> Optional[Document]:
        return (
            self.session.query(Document)
            .options(*_VIEW_OPTIONS)
            .filter(Document.receipt_number == receipt_number)
            .first()
        )

    def receipt_number_exists(self, receipt_number: str) -> bool:
        return (
            self.session.query(Document.id)
            .filter(Document.receipt_number == receipt_number)
            .first()
        ) is not None

    def list_by_case(self, case_id: UUID) -> List[Document]:
        """All documents of a case, newest upload first."""
        return (
            self.session.query(Document)
            .options(*_VIEW_OPTIONS)
            .filter(Document.case_id == case_id)
            .order_by(Document.uploaded_at.desc(), Document.id)
            .all()
        )

    def count_by_status(self) -> Dict[DocumentStatus, int]:
        """Number of documents per status; statuses with none report 0."""
        counts = {status: 0 for status in DocumentStatus}
        rows = (
            self.session.query(Document.status, func.count(Document.id))
            .group_by(Document.status)
            .all()
        )
        for status, count in rows:
            counts[DocumentStatus(status)] = count
        return counts

    def search(
        self,
        criteria: DocumentSearchCriteria,
        page: int,
        per_page: int,
    ) -> Tuple[List[Document], int]:
        """Filter, count and page documents.

        Returns:
            Tuple of (documents on this page, total matching documents)
        """
        query = self.session.query(Document)
        condition = self._build_condition(criteria)
        if condition is not None:
            query = query.filter(condition)

        total = query.with_entities(func.count(Document.id)).scalar() or 0

        offset = (page - 1) * per_page
        documents = (
            query.options(*_VIEW_OPTIONS)
            .order_by(Document.uploaded_at.desc(), Document.id)
            .offset(offset)
            .limit(per_page)
            .all()
        )
        return documents, total

    @staticmethod
    def _build_condition(criteria: DocumentSearchCriteria):
        """AND of one predicate per provided criterion, or None for no filter."""
        predicates = []
        if criteria.status is not None:
            predicates.append(Document.status == criteria.status)
        if criteria.type is not None:
            predicates.append(Document.type == criteria.type)
        if criteria.case_id is not None:
            predicates.append(Document.case_id == criteria.case_id)
        if criteria.title_keyword:
            pattern = f"%{_escape_like(criteria.title_keyword.lower())}%"
            predicates.append(func.lower(Document.title).like(pattern, escape="\\"))
        if criteria.uploaded_after is not None:
            predicates.append(Document.uploaded_at >= criteria.uploaded_after)
        if criteria.uploaded_before is not None:
            predicates.append(Document.uploaded_at <= criteria.uploaded_before)

        if not predicates:
            return None
        return and_(*predicates)


def _escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
