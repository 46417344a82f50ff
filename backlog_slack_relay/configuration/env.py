"""Pydantic Settings model for application configuration."""

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

from backlog_slack_relay.utils.constants import DEFAULT_BACKLOG_DOMAIN


class Settings(BaseSettings):
    """Environment variable settings for the application."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # Generic application-wide settings
    DEBUG: bool = False
    ISOLATE_TENANT_FAILURES: bool = False

    # Property store holding tenant configuration and watermarks
    PROPERTIES_FILE: Path = Path("properties.yaml")

    # Backlog API settings
    BACKLOG_DOMAIN: str = DEFAULT_BACKLOG_DOMAIN

    # HTTP transport settings
    HTTP_TIMEOUT_SECONDS: float = 30.0
