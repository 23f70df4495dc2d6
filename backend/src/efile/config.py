"""Application configuration via environment variables.

Provides type-safe settings loading using pydantic-settings.
Environment variables can be loaded from a .env file.
"""

from functools import lru_cache
from typing import Optional, Set

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    All settings have sensible defaults for development.

    Environment Variables:
        DATABASE_URL: SQLAlchemy connection string
        STORAGE_BACKEND: Blob store implementation ("local" or "s3")
        STORAGE_BASE_PATH: Root directory for the local blob store
        STORAGE_TIMEOUT_SECONDS: Upper bound for a single blob store call
        S3_ENDPOINT_URL: S3-compatible endpoint (MinIO in dev)
        S3_ACCESS_KEY_ID: S3 access key
        S3_SECRET_ACCESS_KEY: S3 secret key
        S3_BUCKET_NAME: Bucket holding document content
        MAX_UPLOAD_SIZE_BYTES: Largest accepted document (default 10 MB)
        ALLOWED_EXTENSIONS: JSON list of accepted file extensions
        LOG_LEVEL: Logging level (default INFO)
    """

    # Database
    DATABASE_URL: str = "sqlite:///./efile.db"
    DATABASE_ECHO: bool = False

    # Blob storage
    STORAGE_BACKEND: str = "local"
    STORAGE_BASE_PATH: str = "uploads"
    STORAGE_TIMEOUT_SECONDS: float = 10.0

    S3_ENDPOINT_URL: Optional[str] = "http://localhost:9000"
    S3_ACCESS_KEY_ID: str = "minioadmin"
    S3_SECRET_ACCESS_KEY: str = "minioadmin"
    S3_BUCKET_NAME: str = "efile-documents"
    S3_REGION: str = "us-east-1"

    # Upload rules
    MAX_UPLOAD_SIZE_BYTES: int = 10 * 1024 * 1024
    ALLOWED_EXTENSIONS: Set[str] = {"pdf", "docx", "xlsx", "png"}

    # Document workflow
    REJECTION_REASON_MIN_LENGTH: int = 10
    RECEIPT_PREFIX: str = "EF"
    RECEIPT_MAX_ATTEMPTS: int = 100

    # Search
    DEFAULT_PAGE_SIZE: int = 20
    MAX_PAGE_SIZE: int = 100

    # Application
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = True
    ENVIRONMENT: str = "development"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = True
        extra = "ignore"


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance.

    Uses lru_cache for singleton behavior.
    Call get_settings.cache_clear() to reload settings.
    """
    return Settings()
