"""
Configuration management for Creative Showcase.
"""

from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    # Application
    app_name: str = Field(default="Creative Showcase")
    debug: bool = Field(default=False)
    environment: str = Field(default="development")

    # API
    api_host: str = Field(default="0.0.0.0")
    api_port: int = Field(default=8000)
    api_workers: int = Field(default=1)
    cors_origins: str = Field(
        default="http://localhost:5173",
        description="Comma-separated list of allowed browser origins",
    )

    # Database
    database_url: str = Field(default="sqlite:///./creative_showcase.db")

    # Security
    secret_key: str = Field(default="change-me-in-production")
    jwt_algorithm: str = Field(default="HS256")
    access_token_expire_minutes: int = Field(default=60 * 24 * 7)
    bcrypt_rounds: int = Field(default=12, ge=4, le=31)

    # Media storage
    media_store_uri: str = Field(
        default="file://./media",
        description="file://<dir> for local storage or s3://<bucket>/<prefix>",
    )
    media_public_url: str = Field(
        default="/media",
        description="Base URL under which stored media keys are served",
    )
    max_artwork_bytes: int = Field(default=10 * 1024 * 1024)
    max_avatar_bytes: int = Field(default=2 * 1024 * 1024)
    max_cover_bytes: int = Field(default=5 * 1024 * 1024)

    # Logging
    log_level: str = Field(default="INFO")
    log_format: str = Field(default="json")

    @property
    def cors_origin_list(self) -> List[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]


# Global settings instance
settings = Settings()


def get_settings() -> Settings:
    """Get application settings."""
    return settings
