"""
docrepo Configuration Management

Uses Pydantic Settings for type-safe configuration from environment variables.
Store connection settings live with the adapter (see storage.mongo_adapter.MongoConfig).
"""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    # =========================================================================
    # APPLICATION
    # =========================================================================
    APP_NAME: str = "docrepo"
    APP_ENV: str = "development"
    DEBUG: bool = False
    LOG_LEVEL: str = "info"
    VERSION: str = "0.1.0"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Singleton instance for easy import
settings = get_settings()
