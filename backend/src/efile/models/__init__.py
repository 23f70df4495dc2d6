"""SQLAlchemy Models for the E-File backend"""

from .base import Base, UTCDateTime, utcnow
from .case import Case
from .department import Department
from .document import Document
from .document_status_history import DocumentStatusHistory
from .user import User

__all__ = [
    "Base",
    "UTCDateTime",
    "utcnow",
    "Case",
    "Department",
    "Document",
    "DocumentStatusHistory",
    "User",
]
