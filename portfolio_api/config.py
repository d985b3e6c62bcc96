"""Application Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - All secrets come from environment variables (never hardcoded outside dev defaults)
    - get_settings() is cached (lru_cache): one Settings instance per process
    - List settings accept comma-separated strings (ALLOWED_IMAGE_TYPES, CORS_ORIGINS)

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env file support
    - Defaults provided for all non-secret settings: works out-of-the-box with docker-compose
"""

from functools import lru_cache
from typing import Annotated, Literal

from pydantic import field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

DEFAULT_IMAGE_TYPES = ["image/jpeg", "image/png", "image/gif", "image/webp"]


def async_database_url(url: str) -> str:
    """Managed Postgres hands out postgres(ql):// but asyncpg needs postgresql+asyncpg://."""
    if url.startswith("postgres://"):
        url = url.replace("postgres://", "postgresql://", 1)
    if url.startswith("postgresql://"):
        return url.replace("postgresql://", "postgresql+asyncpg://", 1)
    return url


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")

    # Database
    database_url: str = (
        "postgresql+asyncpg://portfolio:portfolio@db:5432/portfolio"
    )

    @field_validator("database_url", mode="before")
    @classmethod
    def convert_postgres_url(cls, v: str) -> str:
        return async_database_url(v) if isinstance(v, str) else v

    database_pool_size: int = 20
    database_max_overflow: int = 10

    # Auth
    jwt_secret: str = "change-me-in-production"
    jwt_algorithm: str = "HS256"
    jwt_expires_in_seconds: int = 7 * 24 * 3600

    # Uploads
    max_file_size: int = 10 * 1024 * 1024
    allowed_image_types: Annotated[list[str], NoDecode] = DEFAULT_IMAGE_TYPES

    # Blob storage (S3-compatible)
    storage_backend: Literal["s3", "memory"] = "s3"
    storage_bucket: str = "project-images"
    storage_endpoint_url: str | None = None
    storage_region: str | None = None
    storage_access_key_id: str | None = None
    storage_secret_access_key: str | None = None
    storage_public_base_url: str | None = None

    # Rate limiting (per client address, fixed window)
    rate_limit_enabled: bool = True
    rate_limit_window_seconds: int = 15 * 60
    rate_limit_max_requests: int = 100

    # API
    cors_origins: Annotated[list[str], NoDecode] = ["http://localhost:5173"]

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"

    @field_validator("allowed_image_types", "cors_origins", mode="before")
    @classmethod
    def split_comma_list(cls, v):
        if isinstance(v, str):
            return [item.strip() for item in v.split(",") if item.strip()]
        return v


@lru_cache
def get_settings() -> Settings:
    return Settings()
