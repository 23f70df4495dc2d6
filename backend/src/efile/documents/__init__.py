"""Document lifecycle, registry and reporting services"""

from .lifecycle import DocumentLifecycleService
from .registry import DocumentRegistry
from .reporting import DocumentReportingService, format_file_size, render_receipt
from .schemas import (
    DocumentDownload,
    DocumentHistoryEntry,
    DocumentPage,
    DocumentResponse,
    DocumentSearchCriteria,
)

__all__ = [
    "DocumentLifecycleService",
    "DocumentRegistry",
    "DocumentReportingService",
    "format_file_size",
    "render_receipt",
    "DocumentDownload",
    "DocumentHistoryEntry",
    "DocumentPage",
    "DocumentResponse",
    "DocumentSearchCriteria",
]
