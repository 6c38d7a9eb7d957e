"""Configuration management for radar-alerts."""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="RADAR_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Server settings
    host: str = Field(default="0.0.0.0", description="Server host")
    port: int = Field(default=8000, description="Server port")
    debug: bool = Field(default=False, description="Debug mode")

    # Logging
    log_level: str = Field(default="INFO", description="Log level")
    log_format: str = Field(default="json", description="Log format (json or text)")

    # Rule evaluation
    dedupe_window_minutes: int = Field(
        default=60,
        ge=0,
        description="Window in which an unread alert for the same rule suppresses a new one",
    )

    # Notification settings
    notification_min_severity: str = Field(
        default="info",
        pattern="^(info|warning|critical)$",
        description="Lowest severity that is delivered to notification channels",
    )
    console_notifications: bool = Field(
        default=True, description="Log notifications to the console handler"
    )
    webhook_url: str | None = Field(default=None, description="Webhook URL for notifications")
    webhook_timeout_seconds: int = Field(default=10, ge=1, description="Webhook request timeout")

    smtp_host: str | None = Field(default=None, description="SMTP server host")
    smtp_port: int = Field(default=587, description="SMTP server port")
    smtp_username: str | None = Field(default=None, description="SMTP username")
    smtp_password: str | None = Field(default=None, description="SMTP password")
    smtp_use_tls: bool = Field(default=True, description="Use STARTTLS for SMTP")
    alert_from_email: str | None = Field(default=None, description="Sender address for alert mail")
    alert_recipients: list[str] = Field(
        default_factory=list, description="Recipient addresses for alert mail"
    )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
