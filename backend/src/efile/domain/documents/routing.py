"""Department routing for submitted documents.

Routing is a pure decision: given the document type and the uploader's own
department, pick the department that should review the document. Looking up
that department's head and recording the assignment happens separately,
after the submission has been committed.
"""

from typing import Dict, Optional

from .document_type import DocumentType

FINANCE = "Finance"
LEGAL = "Legal"
AUDIT = "Audit"

# Types not listed here fall back to the uploader's department
ROUTING_TABLE: Dict[DocumentType, str] = {
    DocumentType.FINANCIAL_REPORT: FINANCE,
    DocumentType.PROCUREMENT_BID: FINANCE,
    DocumentType.LEGAL_DOCUMENT: LEGAL,
    DocumentType.AUDIT_REPORT: AUDIT,
    DocumentType.INVESTMENT_REPORT: FINANCE,
}


def resolve_routing_target(
    document_type: DocumentType,
    uploader_department: Optional[str] = None,
) -> Optional[str]:
    """Return the name of the department a document is routed to.

    Args:
        document_type: Type of the submitted document
        uploader_department: Name of the uploader's department, if any

    Returns:
        Department name, or None when the type has no fixed department and
        the uploader belongs to none.

    Example:
        >>> resolve_routing_target(DocumentType.LEGAL_DOCUMENT)
        'Legal'
        >>> resolve_routing_target(DocumentType.GENERAL, "Operations")
        'Operations'
    """
    return ROUTING_TABLE.get(document_type, uploader_department)


def submission_comment(target: Optional[str]) -> str:
    if target is None:
        return "Document submitted for review (no routing department)"
    return f"Document submitted for review and routed to {target}"
