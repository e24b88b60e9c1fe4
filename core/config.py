"""
Application configuration via Pydantic Settings.
Loads from environment variables with validation and defaults.
"""

from typing import List, Optional
from pydantic_settings import BaseSettings
from pydantic import Field
from functools import lru_cache


VERSION = "1.0.0"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # === Server ===
    server_host: str = Field(default="0.0.0.0", alias="SERVER_HOST")
    server_port: int = Field(default=8001, alias="SERVER_PORT")
    debug: bool = Field(default=False, alias="DEBUG")

    # === Supabase ===
    supabase_url: str = Field(default="", alias="SUPABASE_URL")
    supabase_service_role_key: str = Field(default="", alias="SUPABASE_SERVICE_ROLE_KEY")
    galleries_table: str = Field(default="customer_galleries", alias="GALLERIES_TABLE")
    legacy_favorites_table: str = Field(default="customer_favorites", alias="LEGACY_FAVORITES_TABLE")

    # === CORS ===
    allowed_origins: str = Field(default="*", alias="ALLOWED_ORIGINS")

    # === AWS Rekognition ===
    aws_access_key_id: Optional[str] = Field(default=None, alias="AWS_ACCESS_KEY_ID")
    aws_secret_access_key: Optional[str] = Field(default=None, alias="AWS_SECRET_ACCESS_KEY")
    aws_region: str = Field(default="us-east-1", alias="AWS_REGION")
    face_collection_prefix: str = Field(default="gallery-", alias="FACE_COLLECTION_PREFIX")

    # === Search defaults ===
    # Query-time matching is tuned loose (recall over precision)
    search_similarity_threshold: float = Field(default=60.0, ge=0, le=100, alias="SEARCH_SIMILARITY_THRESHOLD")
    search_max_results: int = Field(default=50, ge=1, le=4096, alias="SEARCH_MAX_RESULTS")

    # === Indexing ===
    indexing_stale_minutes: int = Field(default=30, ge=1, alias="INDEXING_STALE_MINUTES")
    photo_fetch_timeout: float = Field(default=30.0, gt=0, alias="PHOTO_FETCH_TIMEOUT")

    # === Archive ===
    archive_fetch_concurrency: int = Field(default=10, ge=1, alias="ARCHIVE_FETCH_CONCURRENCY")
    archive_temp_dir: Optional[str] = Field(default=None, alias="ARCHIVE_TEMP_DIR")
    archive_compression_level: int = Field(default=6, ge=0, le=9, alias="ARCHIVE_COMPRESSION_LEVEL")

    @property
    def cors_origins(self) -> List[str]:
        """Parse ALLOWED_ORIGINS into list."""
        return [origin.strip() for origin in self.allowed_origins.split(",")]

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False
        extra = "ignore"  # Ignore extra env vars


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Global settings instance
settings = get_settings()
