# src/screenshot_api/config/settings.py
import json
from functools import lru_cache
from typing import List

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

MEGABYTE = 1024 * 1024


class Settings(BaseSettings):
    """
    Single source of truth for all application settings.

    Configuration precedence:
    1. Environment variables (highest priority)
    2. .env file (if exists)
    3. Default values in this class (lowest priority)

    List values (the CORS fields) are read from the environment as JSON,
    e.g. ``CORS_ALLOW_ORIGINS='["https://example.com"]'``.

    Usage:
        from screenshot_api.config.settings import get_settings
        settings = get_settings()
        uploads_dir = settings.uploads_dir
    """

    # Application Settings
    app_name: str = Field(
        default="screenshot-api",
        description="Application name"
    )

    host: str = Field(
        default="0.0.0.0",
        description="Interface the server binds to"
    )

    port: int = Field(
        default=8081,
        validation_alias=AliasChoices("PORT", "API_PORT"),
        description="Listening port (PORT takes precedence over API_PORT)"
    )

    # Storage Configuration
    uploads_dir: str = Field(
        default="uploads",
        description="Local directory used as the flat image store"
    )

    max_upload_bytes: int = Field(
        default=10 * MEGABYTE,
        gt=0,
        description="Largest accepted image, in bytes"
    )

    # CORS
    cors_allow_origins: List[str] = Field(
        default=["*"],
        description="Origins allowed to call the API and load uploaded images"
    )

    cors_allow_methods: List[str] = Field(
        default=["GET", "POST", "OPTIONS"],
        description="Methods allowed in cross-origin requests"
    )

    cors_allow_headers: List[str] = Field(
        default=["Content-Type", "Authorization"],
        description="Headers allowed in cross-origin requests"
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Logging level"
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v):
        """Accept lower-case level names from the environment."""
        if isinstance(v, str):
            return v.upper()
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v):
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v not in valid_levels:
            raise ValueError(f"Invalid log_level: {v}. Must be one of {valid_levels}")
        return v

    @property
    def max_upload_mb(self) -> int:
        """Upload limit rounded down to whole megabytes, for error messages."""
        return self.max_upload_bytes // MEGABYTE

    @property
    def cors_response_origin(self) -> str:
        """Value sent in ``Access-Control-Allow-Origin`` for stored images."""
        if not self.cors_allow_origins:
            return "*"
        return self.cors_allow_origins[0]

    def get_environment_dict(self) -> dict:
        """Get configuration as a dictionary suitable for docker-compose or subprocess.

        Returns:
            Dictionary of environment variables
        """
        return {
            "APP_NAME": self.app_name,
            "HOST": self.host,
            "PORT": str(self.port),
            "UPLOADS_DIR": self.uploads_dir,
            "MAX_UPLOAD_BYTES": str(self.max_upload_bytes),
            "CORS_ALLOW_ORIGINS": json.dumps(self.cors_allow_origins),
            "LOG_LEVEL": self.log_level,
        }

    model_config = SettingsConfigDict(
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.
    This ensures we only create one Settings instance per process.
    """
    return Settings()
