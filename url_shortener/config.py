"""Configuration management for URL shortener."""

from typing import Optional
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field


class Config(BaseSettings):
    """Application configuration."""

    # Database settings
    database_url: Optional[str] = Field(
        default=None,
        description="PostgreSQL connection URL; the in-memory store is used when unset",
    )

    database_create_tables: bool = Field(
        default=False,
        description="Create the users and urls tables on start-up if they are missing",
    )

    database_pool_max_size: int = Field(
        default=10,
        ge=1,
        description="Maximum connections per event loop",
    )

    # Redis settings (optional)
    redis_url: Optional[str] = Field(
        default=None,
        description="Redis connection URL for caching",
    )

    cache_ttl_seconds: int = Field(
        default=3600,
        ge=1,
        description="Cache TTL in seconds",
    )

    # Server settings
    host: str = Field(
        default="0.0.0.0",
        description="Host to bind to",
    )

    port: int = Field(
        default=9200,
        description="Port to listen on",
    )

    workers: int = Field(
        default=1,
        ge=1,
        description="Number of uvicorn worker processes. 1 = single process (async handles many connections); >1 = multi-process.",
    )

    # URL shortener settings
    base_url: str = Field(
        default="http://localhost:9200",
        description="Base URL for generating short URLs",
    )

    path_prefix: str = Field(
        default="",
        description="Path prefix for short URLs (e.g., '/s' for /s/abc123)",
    )

    short_code_length: int = Field(
        default=6,
        ge=1,
        le=40,
        description="Length of generated short codes",
    )

    max_collision_retries: int = Field(
        default=5,
        ge=1,
        description="Candidates tried per code length before the code is widened",
    )

    short_code_max_growth: int = Field(
        default=2,
        ge=0,
        le=10,
        description="Extra characters the collision fallback may add to a code",
    )

    # Auth settings
    bcrypt_rounds: int = Field(
        default=12,
        ge=4,
        le=31,
        description="bcrypt cost factor for password hashes",
    )

    # Logging settings
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )

    log_file: Optional[str] = Field(
        default=None,
        description="Log file path (logs to stdout if not specified)",
    )

    log_json: bool = Field(
        default=False,
        description="Use JSON format for logs",
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    def safe_dump(self) -> dict:
        """Settings for logging, with credentials masked."""
        data = self.model_dump()
        for key in ("database_url", "redis_url"):
            if data.get(key):
                data[key] = "***"
        return data


def load_config() -> Config:
    """Load configuration from environment."""
    return Config()
