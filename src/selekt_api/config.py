"""Application configuration."""

import os
from datetime import timedelta

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")

_BYTES_PER_MB = 1024 * 1024


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    session_ttl_days: int = 7
    max_photos_per_session: int = 50
    max_file_size_mb: int = 25
    blob_backend: str = "filesystem"
    blob_root: str = "./data"
    supabase_url: str | None = None
    supabase_service_key: str | None = None
    supabase_bucket: str = "photos"
    log_level: str = "INFO"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )

    @property
    def session_ttl(self) -> timedelta:
        """Lifetime of a newly created session."""
        return timedelta(days=self.session_ttl_days)

    @property
    def max_file_size_bytes(self) -> int:
        """Per-file upload ceiling in bytes."""
        return self.max_file_size_mb * _BYTES_PER_MB
