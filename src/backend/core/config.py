"""
Application configuration using Pydantic Settings.

All configuration is loaded from environment variables or a local .env file.
"""

from functools import lru_cache
from typing import Any

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # Application
    APP_NAME: str = "Postboard"
    APP_ENV: str = "development"
    DEBUG: bool = False
    SECRET_KEY: str = ""  # Required - loaded from environment

    # Database - PostgreSQL
    POSTGRES_HOST: str = "localhost"
    POSTGRES_PORT: int = 5432
    POSTGRES_USER: str = "postboard"
    POSTGRES_PASSWORD: str = ""
    POSTGRES_DB: str = "postboard"
    POSTGRES_SSL: bool = False

    # Full SQLAlchemy URL; overrides the POSTGRES_* settings when set
    DATABASE_URL: str | None = None
    DB_ECHO: bool = False
    DB_POOL_SIZE: int = 5
    DB_AUTO_CREATE: bool = False  # create_all() on startup (local dev only)

    @field_validator("SECRET_KEY")
    @classmethod
    def validate_required_secrets(cls, v: str, info: Any) -> str:
        """Validate that required secrets are set."""
        if not v:
            raise ValueError(f"{info.field_name} must be set in environment")
        return v

    @property
    def POSTGRES_URL(self) -> str:
        """Construct PostgreSQL connection URL."""
        url = (
            f"postgresql+asyncpg://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}"
            f"@{self.POSTGRES_HOST}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"
        )
        if self.POSTGRES_SSL:
            url += "?ssl=require"
        return url

    @property
    def database_url(self) -> str:
        """Connection URL actually used by the engine."""
        return self.DATABASE_URL or self.POSTGRES_URL

    # Authentication (tokens are issued by the external identity provider)
    JWT_ALGORITHM: str = "HS256"
    JWT_ISSUER: str = "postboard-auth"
    JWT_AUDIENCE: str = "postboard-api"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 30

    # CORS - stored as comma-separated string to avoid pydantic-settings JSON parsing issues
    CORS_ORIGINS: str = "http://localhost:3000"

    @property
    def cors_origins_list(self) -> list[str]:
        """Get CORS origins as a list."""
        import json

        try:
            return json.loads(self.CORS_ORIGINS)
        except json.JSONDecodeError:
            return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = True  # JSON lines in production, console renderer when False

    # Request handling
    STORAGE_TIMEOUT_SECONDS: float = 10.0

    # Feed pagination
    DEFAULT_PAGE_SIZE: int = 8
    MAX_PAGE_SIZE: int = 50

    # Post limits
    MAX_TITLE_LENGTH: int = 300
    MAX_COMMENT_LENGTH: int = 1000
    MAX_TAGS_PER_POST: int = 10
    MAX_TAG_LENGTH: int = 30
    MAX_IMAGES_PER_POST: int = 10
    MAX_IMAGE_BYTES: int = 5 * 1024 * 1024  # 5MB per inline image


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
