from .directory_port import CaseDirectoryPort, CaseRef, DepartmentDirectoryPort, DepartmentRef
from .object_storage_port import BlobStorePort, StoredBlob

__all__ = [
    "BlobStorePort",
    "StoredBlob",
    "CaseDirectoryPort",
    "CaseRef",
    "DepartmentDirectoryPort",
    "DepartmentRef",
]
