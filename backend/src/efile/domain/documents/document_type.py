"""Document type enumeration. The type drives department routing."""

from enum import Enum
from typing import Union

from .errors import ValidationError


class DocumentType(str, Enum):
    FINANCIAL_REPORT = "FINANCIAL_REPORT"
    PROCUREMENT_BID = "PROCUREMENT_BID"
    LEGAL_DOCUMENT = "LEGAL_DOCUMENT"
    AUDIT_REPORT = "AUDIT_REPORT"
    INVESTMENT_REPORT = "INVESTMENT_REPORT"
    GENERAL = "GENERAL"


def parse_document_type(value: Union[DocumentType, str, None]) -> DocumentType:
    """Coerce caller input to a DocumentType.

    Raises:
        ValidationError: If the value is missing or not a known type
    """
    if value is None:
        raise ValidationError("Document type is required")
    if isinstance(value, DocumentType):
        return value
    try:
        return DocumentType(str(value).strip().upper())
    except ValueError:
        allowed = ", ".join(t.value for t in DocumentType)
        raise ValidationError(f"Unknown document type '{value}'. Allowed: {allowed}")
