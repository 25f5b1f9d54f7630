"""Application configuration via environment variables.

Provides type-safe settings loading using pydantic-settings.
Environment variables can be loaded from a .env file.
"""

from typing import Optional
from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings loaded from environment variables.

    Environment Variables:
        API_BASE_URL: Document backend root (e.g., https://api.example.com/api)
        API_TOKEN: Bearer token, sent as Authorization header when set
        DOCUMENT_TYPES_PATH: GET document types
        OWNER_DOCUMENTS_PATH: GET list / POST upload, formatted with owner_id
        DOCUMENT_PATH: DELETE, formatted with document_id
        MAX_UPLOAD_SIZE_BYTES: Per-file size cap (default 10MB)
        HTTP_TIMEOUT_SECONDS: Transport timeout (unset = transport default)
        LOG_LEVEL: Logging level (default INFO)
        LOG_JSON: JSON log lines (default True)
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # Backend
    API_BASE_URL: str = "https://localhost:7160/api"
    API_TOKEN: Optional[str] = None
    DOCUMENT_TYPES_PATH: str = "/LR/master-data/document-types"
    OWNER_DOCUMENTS_PATH: str = "/LR/entries/{owner_id}/documents"
    DOCUMENT_PATH: str = "/LR/documents/{document_id}"
    HTTP_TIMEOUT_SECONDS: Optional[float] = None

    # Uploads
    MAX_UPLOAD_SIZE_BYTES: int = 10 * 1024 * 1024  # 10 MB

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = True


@lru_cache()
def get_settings() -> Settings:
    """Settings read once per process (tests call get_settings.cache_clear())."""
    return Settings()
