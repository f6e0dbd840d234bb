"""
Configuration and settings for the portfolio backend.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Environment-backed settings for the FastAPI service."""

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    api_prefix: str = Field(default="/api")
    functions_prefix: str = Field(default="/functions/v1")

    # Database (Postgres expected, any SQLAlchemy URL works)
    database_url: Optional[str] = Field(default=None)

    # S3-compatible storage (the BaaS storage gateway in production)
    storage_endpoint: Optional[str] = Field(default=None)
    storage_region: Optional[str] = Field(default=None)
    storage_public_url: Optional[str] = Field(default=None)
    storage_access_key_id: Optional[str] = Field(default=None)
    storage_secret_access_key: Optional[str] = Field(default=None)
    developer_profiles_bucket: str = Field(default="developer_profiles")
    project_images_bucket: str = Field(default="project_images")

    # Development toggles
    use_in_memory_backends: bool = Field(default=False)

    # Admin session tokens
    admin_token_ttl_seconds: int = Field(default=24 * 60 * 60)
    admin_token_secret: Optional[str] = Field(default=None)
    max_login_attempts: int = Field(default=5)
    lockout_minutes: int = Field(default=15)

    cors_origins: list[str] = Field(default_factory=lambda: ["*"])
    log_level: str = Field(default="INFO")

    github_api_url: str = Field(default="https://api.github.com")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached settings instance."""
    return Settings()
