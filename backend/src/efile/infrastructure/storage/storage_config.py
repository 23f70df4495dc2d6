"""Blob store configuration and construction.

Reads storage settings from the application Settings and builds the
configured BlobStorePort implementation. Supports the local filesystem
(development, single node) and S3-compatible object storage (MinIO in
development, AWS S3 in production) behind the same interface.
"""

import logging
from dataclasses import dataclass, field
from typing import FrozenSet, Optional

from ...config import Settings
from ...domain.documents.ports.object_storage_port import BlobStorePort
from .local_storage_adapter import LocalBlobStore
from .s3_storage_adapter import S3BlobStore

logger = logging.getLogger(__name__)

SUPPORTED_BACKENDS = ("local", "s3")


@dataclass
class StorageConfig:
    """Configuration for the blob store.

    Attributes:
        backend: "local" or "s3"
        base_path: Root directory for the local backend
        endpoint_url: S3 endpoint URL (None for AWS S3 default endpoints)
        access_key: S3 access key ID
        secret_key: S3 secret access key
        bucket_name: S3 bucket name for storing documents
        region: AWS region (default: 'us-east-1')
        timeout_seconds: Upper bound for one storage call
        max_size_bytes: Largest accepted upload
        allowed_extensions: Accepted file extensions
    """
    backend: str
    base_path: str = "uploads"
    endpoint_url: Optional[str] = None
    access_key: str = ""
    secret_key: str = ""
    bucket_name: str = ""
    region: str = "us-east-1"
    timeout_seconds: float = 10.0
    max_size_bytes: int = 10 * 1024 * 1024
    allowed_extensions: FrozenSet[str] = field(default_factory=frozenset)


def load_storage_config(settings: Settings) -> StorageConfig:
    """Build a StorageConfig from application settings."""
    return StorageConfig(
        backend=settings.STORAGE_BACKEND.strip().lower(),
        base_path=settings.STORAGE_BASE_PATH,
        endpoint_url=settings.S3_ENDPOINT_URL or None,
        access_key=settings.S3_ACCESS_KEY_ID,
        secret_key=settings.S3_SECRET_ACCESS_KEY,
        bucket_name=settings.S3_BUCKET_NAME,
        region=settings.S3_REGION,
        timeout_seconds=settings.STORAGE_TIMEOUT_SECONDS,
        max_size_bytes=settings.MAX_UPLOAD_SIZE_BYTES,
        allowed_extensions=frozenset(ext.lower().lstrip(".") for ext in settings.ALLOWED_EXTENSIONS),
    )


def validate_storage_config(config: StorageConfig) -> None:
    """Validate storage configuration.

    Args:
        config: Storage configuration to validate

    Raises:
        ValueError: If configuration is invalid
    """
    if config.backend not in SUPPORTED_BACKENDS:
        raise ValueError(
            f"Unsupported storage backend: {config.backend}. "
            f"Expected one of {list(SUPPORTED_BACKENDS)}"
        )

    if config.timeout_seconds <= 0:
        raise ValueError("Storage timeout_seconds must be positive")

    if config.backend == "local":
        if not config.base_path:
            raise ValueError("Storage base_path is required for the local backend")
        return

    if not config.access_key:
        raise ValueError("Storage access_key is required")

    if not config.secret_key:
        raise ValueError("Storage secret_key is required")

    if not config.bucket_name:
        raise ValueError("Storage bucket_name is required")

    if config.endpoint_url:
        # MinIO configuration
        if not config.endpoint_url.startswith(("http://", "https://")):
            raise ValueError(
                f"Invalid endpoint_url: {config.endpoint_url}. "
                "Must start with http:// or https://"
            )
    elif not config.region:
        raise ValueError("AWS region is required when using S3 without an endpoint_url")


def build_blob_store(settings: Settings) -> BlobStorePort:
    """Create the blob store selected by STORAGE_BACKEND.

    Raises:
        ValueError: If the storage settings are invalid
        StorageError: If the backend cannot be initialized
    """
    config = load_storage_config(settings)
    validate_storage_config(config)
    logger.info(f"Building blob store: backend={config.backend}")

    if config.backend == "s3":
        return S3BlobStore(
            endpoint_url=config.endpoint_url,
            access_key=config.access_key,
            secret_key=config.secret_key,
            bucket_name=config.bucket_name,
            region=config.region,
            timeout_seconds=config.timeout_seconds,
            max_size_bytes=config.max_size_bytes,
            allowed_extensions=config.allowed_extensions,
        )

    return LocalBlobStore(
        config.base_path,
        max_size_bytes=config.max_size_bytes,
        allowed_extensions=config.allowed_extensions,
    )
