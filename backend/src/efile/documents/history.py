"""Read access to a document's status history.

History rows are written only by Document.apply_transition and
Document.record_note; this module never modifies them.
"""

from typing import List
from uuid import UUID

from sqlalchemy.orm import Session

from ..domain.documents.errors import NotFoundError
from ..models import Document, DocumentStatusHistory


def load_history(session: Session, document_id: UUID) -> List[DocumentStatusHistory]:
    """Return every history entry of a document, oldest first.

    Ties on changed_at are broken by insertion order.

    Raises:
        NotFoundError: If the document does not exist
    """
    exists = session.query(Document.id).filter(Document.id == document_id).first()
    if exists is None:
        raise NotFoundError("Document", document_id)

    return (
        session.query(DocumentStatusHistory)
        .filter(DocumentStatusHistory.document_id == document_id)
        .order_by(DocumentStatusHistory.changed_at.asc(), DocumentStatusHistory.id.asc())
        .all()
    )

