"""Configuration models for NOISE.

This module contains all configuration-related Pydantic models used throughout the application.
"""

import logging
from typing import Literal

from pydantic import BaseModel, Field, field_validator

logger = logging.getLogger(__name__)

KNOWN_ENVIRONMENTS = ("development", "production", "test")

DEFAULT_ALLOWED_MIME_TYPES = [
    "audio/webm",
    "audio/ogg",
    "audio/wav",
    "audio/wave",
    "audio/x-wav",
    "audio/mpeg",
    "audio/mp3",
]


class LoggingConfig(BaseModel):
    """Structlog-based logging configuration."""

    level: str = "INFO"
    json_logs: bool | None = None  # None = auto-detect based on environment
    include_caller: bool = False  # Include file:line info (useful for debugging)
    extra_fields: dict[str, str] = Field(default_factory=lambda: {"service": "noise"})


class ServerConfig(BaseModel):
    """HTTP server binding."""

    host: str = "0.0.0.0"  # nosec B104
    port: int = Field(default=3001, ge=1, le=65535)


class JwtConfig(BaseModel):
    """Anonymous session token settings."""

    secret: str = "default-dev-secret-change-me"
    expires_in_days: int = Field(default=30, ge=1)
    algorithm: str = "HS256"


class CorsConfig(BaseModel):
    """Cross-origin settings for the browser frontend."""

    origins: list[str] = Field(
        default_factory=lambda: ["http://localhost:5173", "http://localhost:3000"]
    )


class UploadConfig(BaseModel):
    """Audio upload limits."""

    max_file_size_mb: int = Field(default=20, ge=1)
    upload_dir: str | None = None  # None = <data_dir>/uploads
    allowed_mime_types: list[str] = Field(
        default_factory=lambda: list(DEFAULT_ALLOWED_MIME_TYPES)
    )

    @property
    def max_file_size_bytes(self) -> int:
        """Maximum accepted upload size in bytes."""
        return self.max_file_size_mb * 1024 * 1024


class S3Config(BaseModel):
    """S3 bucket settings (storage backend is a stub)."""

    access_key_id: str = ""
    secret_access_key: str = ""
    region: str = "us-east-1"
    bucket: str = "noise-audio-files"
    endpoint: str | None = None


class StorageConfig(BaseModel):
    """Audio file storage backend selection."""

    type: Literal["local", "s3"] = "local"
    s3: S3Config = Field(default_factory=S3Config)


class RateLimitConfig(BaseModel):
    """Fixed-window request limits applied to the API."""

    enabled: bool = True
    window_seconds: float = Field(default=60.0, gt=0)
    max_requests: int = Field(default=100, ge=1)
    upload_window_seconds: float = Field(default=60.0, gt=0)
    upload_max_requests: int = Field(default=10, ge=1)


class TextConfig(BaseModel):
    """Text item limits."""

    max_length: int = Field(default=200, ge=1)


class NoiseConfig(BaseModel):
    """Configuration settings for the NOISE application."""

    environment: str = "development"

    server: ServerConfig = Field(default_factory=ServerConfig)
    jwt: JwtConfig = Field(default_factory=JwtConfig)
    cors: CorsConfig = Field(default_factory=CorsConfig)
    upload: UploadConfig = Field(default_factory=UploadConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)
    rate_limit: RateLimitConfig = Field(default_factory=RateLimitConfig)
    text: TextConfig = Field(default_factory=TextConfig)

    # Logging settings
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        """Normalise the deployment environment name.

        Anything other than a known name runs as development.
        """
        v = v.strip().lower()
        if v not in KNOWN_ENVIRONMENTS:
            logger.warning("Unknown environment %r, running as development", v)
            return "development"
        return v

    @property
    def is_production(self) -> bool:
        """Whether the application runs in production mode."""
        return self.environment == "production"
