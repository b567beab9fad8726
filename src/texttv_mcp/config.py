"""Configuration management for the Text TV MCP server.

Configuration is loaded from environment variables with sensible defaults.
A `.env` file in the working directory is honoured via python-dotenv.
"""

import logging
import os
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://texttv.nu/api"
DEFAULT_APP_ID = "swedish-text-tv-mcp"

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


class AppConfig(BaseModel):
    """Application configuration loaded from environment variables."""

    # Upstream API
    base_url: str = Field(
        default=DEFAULT_BASE_URL, description="Base URL of the texttv.nu API"
    )
    app_id: str = Field(
        default=DEFAULT_APP_ID, description="Application identifier sent upstream"
    )
    include_plain_text_content: bool = Field(
        default=True, description="Ask upstream for plain text page content"
    )
    request_timeout_seconds: float = Field(
        default=10.0, description="Timeout for a single upstream request"
    )

    # Cache
    cache_duration_seconds: float = Field(
        default=30.0, description="Freshness window for cached pages"
    )

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")

    @field_validator("base_url")
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        """Require an http(s) URL and strip trailing slashes."""
        if not v.startswith(("http://", "https://")):
            raise ValueError(f"Invalid base URL: {v}. Must start with http:// or https://")
        return v.rstrip("/")

    @field_validator("app_id")
    @classmethod
    def validate_app_id(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("app_id must not be empty")
        return v

    @field_validator("request_timeout_seconds", "cache_duration_seconds")
    @classmethod
    def validate_positive(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("Durations must be positive")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate and normalize log level."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        level = v.upper()
        if level not in valid_levels:
            raise ValueError(f"Invalid log level: {v}. Must be one of {valid_levels}")
        return level


def parse_bool(value: str) -> bool:
    """Parse a boolean environment variable value."""
    normalized = value.strip().lower()
    if normalized in _TRUE_VALUES:
        return True
    if normalized in _FALSE_VALUES:
        return False
    raise ValueError(f"Invalid boolean value: {value}")


def load_default_config() -> AppConfig:
    """Load configuration from environment variables with defaults."""
    load_dotenv()

    config = AppConfig(
        base_url=os.getenv("TEXTTV_BASE_URL", DEFAULT_BASE_URL),
        app_id=os.getenv("TEXTTV_APP_ID", DEFAULT_APP_ID),
        include_plain_text_content=parse_bool(
            os.getenv("TEXTTV_INCLUDE_PLAIN_TEXT", "true")
        ),
        request_timeout_seconds=float(os.getenv("TEXTTV_REQUEST_TIMEOUT", "10")),
        cache_duration_seconds=float(os.getenv("TEXTTV_CACHE_SECONDS", "30")),
        log_level=os.getenv("LOG_LEVEL", "INFO"),
    )
    logger.debug(f"Loaded configuration for {config.base_url}")
    return config


# Singleton config instance
_config: Optional[AppConfig] = None


def get_current_config() -> AppConfig:
    """Get the current application configuration (singleton)."""
    global _config
    if _config is None:
        _config = load_default_config()
    return _config
