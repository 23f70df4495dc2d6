"""Local filesystem implementation of BlobStorePort.

Stores document content below a base directory, grouped by year, month and
case. Used in development and tests, and in single-node deployments.
"""

import hashlib
import logging
from pathlib import Path
from typing import Iterable, Optional

from ...domain.documents.errors import NotFoundError, StorageError
from ...domain.documents.ports.object_storage_port import BlobStorePort, StoredBlob
from ...domain.documents.validation import ensure_valid_upload
from .locator import generate_locator, is_safe_locator

logger = logging.getLogger(__name__)


class LocalBlobStore(BlobStorePort):
    """Filesystem blob store.

    Example:
        store = LocalBlobStore("uploads")
        blob = store.store(b"%PDF-1.4 ...", "minutes.pdf", group_key=str(case_id))
        content = store.load(blob.locator)
    """

    def __init__(
        self,
        base_path: str,
        max_size_bytes: Optional[int] = None,
        allowed_extensions: Optional[Iterable[str]] = None,
    ):
        self.base_path = Path(base_path).resolve()
        self.max_size_bytes = max_size_bytes
        self.allowed_extensions = set(allowed_extensions) if allowed_extensions else None
        try:
            self.base_path.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StorageError(f"Could not create base upload directory: {e}", cause=e) from e

        logger.info(f"Initialized local blob store: base_path={self.base_path}")

    def store(self, content: bytes, filename: str, group_key: str) -> StoredBlob:
        extension = ensure_valid_upload(
            filename,
            len(content),
            max_size=self.max_size_bytes,
            allowed_extensions=self.allowed_extensions,
        )
        locator = generate_locator(group_key, extension)
        target = self._resolve(locator)

        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(content)
        except OSError as e:
            logger.error(f"Failed to store file: locator={locator}, error={e}")
            raise StorageError(f"Failed to store file: {e}", cause=e) from e

        sha256_hex = hashlib.sha256(content).hexdigest()
        logger.info(
            f"Stored file: locator={locator}, sha256={sha256_hex}, size={len(content)}",
            extra={"storage_key": locator},
        )
        return StoredBlob(locator=locator, sha256=sha256_hex, size_bytes=len(content))

    def load(self, locator: str) -> bytes:
        path = self._resolve(locator)
        if not path.is_file():
            raise NotFoundError("Stored file", locator)
        try:
            return path.read_bytes()
        except OSError as e:
            raise StorageError(f"Could not read file: {e}", cause=e) from e

    def delete(self, locator: str) -> bool:
        path = self._resolve(locator)
        try:
            if not path.exists():
                return False
            path.unlink()
        except OSError as e:
            raise StorageError(f"Failed to delete file: {e}", cause=e) from e
        logger.info(f"Deleted file: locator={locator}", extra={"storage_key": locator})
        return True

    def exists(self, locator: str) -> bool:
        return self._resolve(locator).is_file()

    def _resolve(self, locator: str) -> Path:
        if not is_safe_locator(locator):
            raise StorageError(f"Invalid file path: {locator}")
        path = (self.base_path / locator).resolve()
        if not path.is_relative_to(self.base_path):
            raise StorageError(f"Invalid file path: {locator}")
        return path
