"""Blob Store Port - Domain interface for document content storage.

This port defines the contract for storing and retrieving the raw bytes of a
document. The lifecycle engine never looks inside the content; it only keeps
the locator returned by ``store``.

Adapters must implement this interface (local filesystem, S3/MinIO).
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class StoredBlob:
    """Metadata for content accepted by the blob store.

    Attributes:
        locator: Stable storage key (format: {year}/{month}/{group_key}/{uuid}.{ext})
        sha256: SHA256 hash of the content (hex format)
        size_bytes: Content size in bytes
    """
    locator: str
    sha256: str
    size_bytes: int


class BlobStorePort(ABC):
    """Port interface for document content storage.

    Key Design Principles:
    - Content is validated (size, extension) before it is accepted
    - Locators are opaque to callers and never reused
    - Every call is bounded by a timeout; failures surface as StorageError
      and are not retried by the adapter
    """

    @abstractmethod
    def store(self, content: bytes, filename: str, group_key: str) -> StoredBlob:
        """Store content and return its locator.

        Args:
            content: Raw document bytes
            filename: Original filename (for extension validation)
            group_key: Logical grouping key (the owning case id)

        Raises:
            ValidationError: If the content is empty, too large, or has a
                disallowed extension
            StorageError: If the backend fails
        """

    @abstractmethod
    def load(self, locator: str) -> bytes:
        """Load content by locator.

        Raises:
            NotFoundError: If nothing is stored under the locator
            StorageError: If the backend fails
        """

    @abstractmethod
    def delete(self, locator: str) -> bool:
        """Delete content by locator.

        Returns:
            bool: True if content was deleted, False if it didn't exist

        Raises:
            StorageError: If the backend fails
        """

    @abstractmethod
    def exists(self, locator: str) -> bool:
        """Check whether content exists under the locator."""
