"""Blob store adapters"""

from .local_storage_adapter import LocalBlobStore
from .s3_storage_adapter import S3BlobStore
from .storage_config import StorageConfig, build_blob_store, load_storage_config, validate_storage_config

__all__ = [
    "LocalBlobStore",
    "S3BlobStore",
    "StorageConfig",
    "build_blob_store",
    "load_storage_config",
    "validate_storage_config",
]
