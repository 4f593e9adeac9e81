"""
Configuration module - Central access point for environment variables.

CRITICAL: Access ALL environment variables through this module.
NEVER use os.getenv() directly in application code.
"""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # REST API
    API_BASE_URL: str = Field(
        default="http://localhost:3001/api/v1",
        description="Root URL of the console REST API"
    )
    API_TIMEOUT_SECONDS: float = Field(default=30.0)
    API_MAX_RETRIES: int = Field(
        default=2,
        description="Retries after the first attempt for transient GET failures"
    )
    API_RETRY_MIN_WAIT_SECONDS: float = Field(default=1.0)
    API_RETRY_MAX_WAIT_SECONDS: float = Field(default=10.0)

    # Local persisted state (browser localStorage equivalent)
    STORAGE_BACKEND: str = Field(
        default="file",
        description="Key/value backend: memory, file or redis"
    )
    STORAGE_PATH: str = Field(default=".repairdesk/storage.json")
    REDIS_URL: str = Field(
        default="redis://localhost:6379/0",
        description="Redis connection string (redis storage backend only)"
    )
    STORAGE_KEY_PREFIX: str = Field(default="repairdesk:")
    SESSION_TOKEN_KEY: str = Field(default="token")
    SEEN_NOTIFICATIONS_KEY: str = Field(default="seen_notification_ids")
    SEEN_NOTIFICATIONS_MAX: int = Field(
        default=500,
        description="Most recent notification ids kept in the seen set"
    )

    # Notifications
    NOTIFICATION_POLL_INTERVAL_SECONDS: float = Field(default=30.0)
    NOTIFICATION_POLL_LIMIT: int = Field(default=10)
    NOTIFICATION_STORE_MAX: int = Field(default=100)

    # Application Settings
    TOAST_HISTORY_MAX: int = Field(default=50)
    TIMEZONE: str = Field(default="UTC")
    LOG_LEVEL: str = Field(default="INFO")
    LOG_CONFIGURE: bool = Field(default=True)

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = True
        extra = "ignore"


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are loaded only once.
    """
    return Settings()
