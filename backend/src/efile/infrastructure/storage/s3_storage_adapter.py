"""S3 Storage Adapter - Implementation of BlobStorePort using boto3.

Provides S3-compatible storage operations for AWS S3, MinIO, and other
S3-compatible services.

Every call is bounded by connect/read timeouts and the botocore retry
machinery is disabled (one attempt in total), so a slow or failing backend
surfaces as StorageError instead of being retried behind the caller's back.
"""

import hashlib
import logging
from io import BytesIO
from typing import Iterable, Optional

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError, NoCredentialsError

from ...domain.documents.errors import NotFoundError, StorageError
from ...domain.documents.ports.object_storage_port import BlobStorePort, StoredBlob
from ...domain.documents.validation import ensure_valid_upload
from .locator import generate_locator

logger = logging.getLogger(__name__)

MISSING_KEY_CODES = {"NoSuchKey", "404", "NotFound"}


class S3BlobStore(BlobStorePort):
    """S3-compatible blob store using boto3.

    Example:
        config = load_storage_config(get_settings())
        storage = S3BlobStore(
            endpoint_url=config.endpoint_url,
            access_key=config.access_key,
            secret_key=config.secret_key,
            bucket_name=config.bucket_name,
            region=config.region,
            timeout_seconds=config.timeout_seconds,
        )
        blob = storage.store(content, "contract.docx", group_key=str(case_id))
    """

    def __init__(
        self,
        endpoint_url: Optional[str],
        access_key: str,
        secret_key: str,
        bucket_name: str,
        region: str = "us-east-1",
        timeout_seconds: float = 10.0,
        max_size_bytes: Optional[int] = None,
        allowed_extensions: Optional[Iterable[str]] = None,
    ):
        """Initialize S3 blob store.

        Args:
            endpoint_url: S3 endpoint URL (None for AWS S3, URL for MinIO)
            access_key: S3 access key ID
            secret_key: S3 secret access key
            bucket_name: S3 bucket name
            region: AWS region (default: 'us-east-1')
            timeout_seconds: Connect and read timeout per call
            max_size_bytes: Largest accepted object
            allowed_extensions: Accepted file extensions

        Raises:
            StorageError: If S3 client initialization fails
        """
        self.bucket_name = bucket_name
        self.region = region
        self.max_size_bytes = max_size_bytes
        self.allowed_extensions = set(allowed_extensions) if allowed_extensions else None

        client_config = Config(
            connect_timeout=timeout_seconds,
            read_timeout=timeout_seconds,
            retries={"total_max_attempts": 1, "mode": "standard"},
        )
        try:
            self.s3_client = boto3.client(
                "s3",
                endpoint_url=endpoint_url,
                aws_access_key_id=access_key,
                aws_secret_access_key=secret_key,
                region_name=region,
                config=client_config,
            )
        except NoCredentialsError as e:
            raise StorageError(f"Invalid S3 credentials: {e}", cause=e) from e
        except (BotoCoreError, ValueError) as e:
            raise StorageError(f"Failed to initialize S3 client: {e}", cause=e) from e

        logger.info(
            f"Initialized S3 blob store: bucket={bucket_name}, "
            f"endpoint={endpoint_url or 'AWS S3'}, region={region}"
        )

    def store(self, content: bytes, filename: str, group_key: str) -> StoredBlob:
        extension = ensure_valid_upload(
            filename,
            len(content),
            max_size=self.max_size_bytes,
            allowed_extensions=self.allowed_extensions,
        )
        locator = generate_locator(group_key, extension)
        sha256_hex = hashlib.sha256(content).hexdigest()

        try:
            self.s3_client.put_object(
                Bucket=self.bucket_name,
                Key=locator,
                Body=BytesIO(content),
                Metadata={
                    "sha256": sha256_hex,
                    "group_key": str(group_key),
                },
            )
        except ClientError as e:
            error_code = e.response.get("Error", {}).get("Code", "Unknown")
            logger.error(f"S3 upload failed: locator={locator}, error={error_code}, message={e}")
            raise StorageError(f"Failed to upload file: {error_code}", cause=e) from e
        except BotoCoreError as e:
            logger.error(f"S3 upload failed: locator={locator}, error={e}")
            raise StorageError(f"Failed to upload file: {e}", cause=e) from e

        logger.info(
            f"Uploaded file: locator={locator}, sha256={sha256_hex}, size={len(content)}",
            extra={"storage_key": locator},
        )
        return StoredBlob(locator=locator, sha256=sha256_hex, size_bytes=len(content))

    def load(self, locator: str) -> bytes:
        try:
            response = self.s3_client.get_object(Bucket=self.bucket_name, Key=locator)
            return response["Body"].read()
        except ClientError as e:
            error_code = e.response.get("Error", {}).get("Code", "Unknown")
            if error_code in MISSING_KEY_CODES:
                logger.warning(f"File not found: locator={locator}")
                raise NotFoundError("Stored file", locator) from e
            logger.error(f"S3 retrieval failed: locator={locator}, error={error_code}")
            raise StorageError(f"Failed to retrieve file: {error_code}", cause=e) from e
        except BotoCoreError as e:
            raise StorageError(f"Failed to retrieve file: {e}", cause=e) from e

    def delete(self, locator: str) -> bool:
        if not self.exists(locator):
            return False
        try:
            self.s3_client.delete_object(Bucket=self.bucket_name, Key=locator)
        except ClientError as e:
            error_code = e.response.get("Error", {}).get("Code", "Unknown")
            logger.error(f"S3 deletion failed: locator={locator}, error={error_code}")
            raise StorageError(f"Failed to delete file: {error_code}", cause=e) from e
        except BotoCoreError as e:
            raise StorageError(f"Failed to delete file: {e}", cause=e) from e

        logger.info(f"Deleted file: locator={locator}", extra={"storage_key": locator})
        return True

    def exists(self, locator: str) -> bool:
        try:
            self.s3_client.head_object(Bucket=self.bucket_name, Key=locator)
            return True
        except ClientError as e:
            error_code = e.response.get("Error", {}).get("Code", "Unknown")
            if error_code in MISSING_KEY_CODES:
                return False
            raise StorageError(f"Failed to check file existence: {error_code}", cause=e) from e
        except BotoCoreError as e:
            raise StorageError(f"Failed to check file existence: {e}", cause=e) from e
