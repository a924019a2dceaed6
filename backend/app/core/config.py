"""Application configuration using pydantic-settings."""

from functools import lru_cache
from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore", # Allow extra env vars without failing
    )

    # App
    app_name: str = "noblogg"
    app_version: str = "0.1.0"
    environment: str = "development"
    debug: bool = False
    log_level: str = "INFO"

    # Auth
    # Secret key MUST be provided via environment (e.g. SECRET_KEY in .env)
    secret_key: str
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 60 * 24 * 7
    bcrypt_rounds: int = 10

    # API
    api_prefix: str = "/api"
    # Default for local Next.js frontend; override via ALLOWED_ORIGINS env for cloud
    allowed_origins: List[str] = ["http://localhost:3000"]
    default_page_size: int = 10
    max_page_size: int = 100

    # Database
    database_url: str = "sqlite+aiosqlite:///./noblogg.db"
    database_pool_size: int = 5
    database_max_overflow: int = 10
    auto_create_tables: bool = False

    # Observability
    tracing_enabled: bool = False

    # Plugins
    enabled_plugins: List[str] = ["newsletter"]

    @property
    def is_development(self) -> bool:
        return self.environment == "development"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
