"""
Settings Module for Connection Monitor

Configuration management using Pydantic Settings.
Supports environment variables, .env files, and runtime configuration.
Includes validation, type checking, and sensible defaults.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Optional
from enum import Enum

from pydantic import (
    Field,
    SecretStr,
    ValidationError,
    field_validator,
    model_validator,
)
from pydantic_settings import BaseSettings, SettingsConfigDict

from config.constants import Defaults
from exceptions.base import ConfigurationError


class Environment(str, Enum):
    """Application environment enumeration."""
    DEVELOPMENT = "development"
    PRODUCTION = "production"
    TESTING = "testing"


class LogLevel(str, Enum):
    """Logging level enumeration."""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class BaseSettingsConfig(BaseSettings):
    """Base configuration class with common settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        validate_default=True
    )


class MonitoringSettings(BaseSettingsConfig):
    """
    Monitoring Configuration Settings

    Default target, probe cadence and probe timeout used when the
    monitoring session is created at start-up.
    """

    model_config = SettingsConfigDict(
        env_prefix="MONITOR_",
        env_file=".env",
        extra="ignore"
    )

    target_url: str = Field(
        default=Defaults.TARGET_URL,
        description="Endpoint probed for reachability"
    )
    interval_seconds: int = Field(
        default=Defaults.INTERVAL_SECONDS,
        ge=1,
        le=86400,
        description="Seconds between two probes"
    )
    timeout_seconds: float = Field(
        default=Defaults.TIMEOUT_SECONDS,
        gt=0,
        le=300,
        description="Upper bound for a single probe"
    )
    # The HTTP transport never exposes the IP TTL; this is a placeholder.
    ttl_sentinel: Optional[int] = Field(
        default=Defaults.TTL_SENTINEL,
        ge=0,
        le=255,
        description="TTL reported for reachable probes (None = absent)"
    )
    user_agent: str = Field(
        default=Defaults.USER_AGENT,
        description="User agent string for probe requests"
    )
    autostart: bool = Field(
        default=False,
        description="Start monitoring as soon as the application is up"
    )

    @field_validator("target_url")
    @classmethod
    def validate_target_url(cls, v: str) -> str:
        """Reject anything that is not an http(s) URL."""
        v = v.strip()
        if not v.lower().startswith(("http://", "https://")):
            raise ValueError("target_url must start with http:// or https://")
        return v


class NotificationSettings(BaseSettingsConfig):
    """
    Notification Configuration Settings

    Periodic report delivery to an external service that forwards the
    report by e-mail.
    """

    model_config = SettingsConfigDict(
        env_prefix="NOTIFY_",
        env_file=".env",
        extra="ignore"
    )

    enabled: bool = Field(
        default=False,
        description="Send periodic reports while monitoring"
    )
    email: str = Field(
        default="",
        description="Recipient address for periodic reports"
    )
    endpoint_url: str = Field(
        default="",
        description="Delivery service endpoint receiving the report payload"
    )
    api_key: SecretStr = Field(
        default=SecretStr(""),
        description="Bearer token for the delivery service"
    )
    interval_seconds: int = Field(
        default=Defaults.NOTIFY_INTERVAL_SECONDS,
        ge=60,
        le=604800,
        description="Seconds between two periodic reports"
    )
    timeout_seconds: float = Field(
        default=15.0,
        gt=0,
        le=120,
        description="HTTP timeout for the delivery request"
    )

    @model_validator(mode="after")
    def validate_endpoint(self) -> "NotificationSettings":
        """An enabled notifier needs somewhere to deliver to."""
        if self.enabled and not self.endpoint_url:
            raise ValueError("endpoint_url is required when notifications are enabled")
        return self


class ReportSettings(BaseSettingsConfig):
    """Saved report artifact settings."""

    model_config = SettingsConfigDict(
        env_prefix="REPORT_",
        env_file=".env",
        extra="ignore"
    )

    directory: Path = Field(
        default=Path("reports"),
        description="Directory where saved reports are written"
    )
    filename_prefix: str = Field(
        default=Defaults.REPORT_FILENAME_PREFIX,
        min_length=1,
        max_length=64,
        description="Prefix of saved report filenames"
    )


class LoggingSettings(BaseSettingsConfig):
    """
    Logging Configuration Settings

    Console and file sinks for loguru, with rotation and retention.
    """

    model_config = SettingsConfigDict(
        env_prefix="LOG_",
        env_file=".env",
        extra="ignore"
    )

    level: LogLevel = Field(
        default=LogLevel.INFO,
        description="Minimum logging level"
    )
    to_console: bool = Field(
        default=True,
        description="Enable console logging"
    )
    colorize: bool = Field(
        default=True,
        description="Enable colored console output"
    )
    to_file: bool = Field(
        default=False,
        description="Enable file logging"
    )
    file_path: Path = Field(
        default=Path("logs/connection_monitor.log"),
        description="Main log file path"
    )
    max_size: str = Field(
        default="10 MB",
        description="Rotate the log file at this size"
    )
    backup_count: int = Field(
        default=5,
        ge=0,
        le=100,
        description="Number of rotated files to keep"
    )
    serialize: bool = Field(
        default=False,
        description="Write the log file as JSON lines"
    )

    @field_validator("level", mode="before")
    @classmethod
    def normalize_level(cls, v: Any) -> Any:
        """Accept lower-case level names from the environment."""
        if isinstance(v, str):
            return v.upper()
        return v

    @property
    def logs_dir(self) -> Path:
        """Directory holding the log files."""
        return self.file_path.parent


class ServerSettings(BaseSettingsConfig):
    """Control server settings."""

    model_config = SettingsConfigDict(
        env_prefix="SERVER_",
        env_file=".env",
        extra="ignore"
    )

    enabled: bool = Field(
        default=True,
        description="Expose the HTTP control surface"
    )
    host: str = Field(
        default="127.0.0.1",
        description="Control server bind address"
    )
    port: int = Field(
        default=8080,
        ge=1,
        le=65535,
        description="Control server port"
    )


class Settings(BaseSettingsConfig):
    """
    Main Settings Class

    Aggregates all settings sections and provides the main
    configuration interface for the application.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    environment: Environment = Field(
        default=Environment.DEVELOPMENT,
        description="Application environment"
    )
    app_name: str = Field(
        default="Connection Monitor",
        description="Application name"
    )
    app_version: str = Field(
        default="1.0.0",
        description="Application version"
    )

    # Nested settings
    monitoring: MonitoringSettings = Field(
        default_factory=MonitoringSettings
    )
    notification: NotificationSettings = Field(
        default_factory=NotificationSettings
    )
    report: ReportSettings = Field(
        default_factory=ReportSettings
    )
    logging: LoggingSettings = Field(
        default_factory=LoggingSettings
    )
    server: ServerSettings = Field(
        default_factory=ServerSettings
    )

    @property
    def is_testing(self) -> bool:
        """Check if running in testing environment."""
        return self.environment == Environment.TESTING

    @model_validator(mode="after")
    def configure_for_environment(self) -> "Settings":
        """Apply environment-specific configuration."""
        if self.is_testing:
            self.logging.to_file = False
            self.server.enabled = False
            self.monitoring.autostart = False
        return self

    def to_dict(self, *, exclude_secrets: bool = True) -> Dict[str, Any]:
        """Convert settings to dictionary."""
        data = self.model_dump(mode="json")

        if exclude_secrets:
            def remove_secrets(obj: Any) -> Any:
                if isinstance(obj, dict):
                    return {
                        k: remove_secrets(v)
                        for k, v in obj.items()
                        if "secret" not in k.lower()
                        and "key" not in k.lower()
                    }
                elif isinstance(obj, list):
                    return [remove_secrets(item) for item in obj]
                return obj

            data = remove_secrets(data)

        return data


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    This function is cached to ensure a single settings instance
    is used throughout the application lifecycle.

    Returns:
        Settings: Application settings instance

    Raises:
        ConfigurationError: an environment variable or .env value is invalid
    """
    try:
        return Settings()
    except ValidationError as e:
        first = e.errors()[0]
        raise ConfigurationError(
            f"Invalid configuration: {first['msg']}",
            config_key=".".join(str(part) for part in first["loc"]),
            cause=e,
        ) from e
