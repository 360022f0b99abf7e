"""Application configuration."""

from enum import Enum
from typing import Literal
from zoneinfo import ZoneInfo

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Environment(str, Enum):
    """Runtime environment for the application."""

    DEVELOPMENT = "development"
    PRODUCTION = "production"


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # Allow extra env vars without error
    )

    environment: Environment = Field(
        default=Environment.PRODUCTION,
        description="Runtime environment: development or production",
    )

    # API
    api_host: str = Field(default="0.0.0.0", description="API host")
    api_port: int = Field(default=8080, description="API port")
    api_prefix: str = Field(default="/api", description="API prefix")
    api_key: str | None = Field(
        default=None,
        description="Optional API key required on /api routes (X-API-Key header)",
    )

    # Oura
    oura_api_token: str | None = Field(
        default=None,
        description="Oura personal access token for the subject's ring",
    )
    oura_api_base: str = Field(
        default="https://api.ouraring.com/v2",
        description="Oura API v2 base URL",
    )
    oura_timeout_seconds: float = Field(default=10.0, description="Oura request timeout")

    # Subject
    subject_key: str = Field(
        default="emily_nap_status",
        description="Cache key identifying the single subject",
    )
    timezone: str = Field(
        default="America/Denver",
        description="IANA timezone the subject lives in (all windows use local time)",
    )
    sleep_lookback_days: int = Field(
        default=2,
        ge=1,
        le=14,
        description="Days before today to fetch (Oura dates sleep by the day it ends)",
    )

    # Cache and refresh
    cache_ttl_seconds: int = Field(default=300, ge=1, description="Advisory cache TTL")
    refresh_enabled: bool = Field(
        default=True,
        description="Periodically refresh the cached advisory in the background",
    )
    refresh_interval_minutes: int = Field(
        default=5,
        ge=1,
        description="How often to refresh the advisory (minutes)",
    )

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Log level",
    )

    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.environment == Environment.DEVELOPMENT

    def get_timezone(self) -> ZoneInfo:
        """Get the subject's local timezone.

        Raises:
            ZoneInfoNotFoundError: If TIMEZONE is not a known IANA zone
        """
        return ZoneInfo(self.timezone)


# Global settings instance
settings = Settings()
