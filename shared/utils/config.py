"""
Configuration management using Pydantic Settings.

Loads configuration from environment variables with validation and type safety.
"""

from functools import lru_cache
from pathlib import Path
from typing import List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Uses .env file in development, environment variables in production.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    environment: str = Field(default="development", description="Deployment environment")
    log_level: str = Field(default="INFO", description="Logging verbosity")
    log_format: str = Field(default="text", description="Log format: json or text")
    log_output: str = Field(default="stdout", description="Log destination")
    app_name: str = Field(default="BibShelf", description="Application name")
    app_version: str = Field(default="0.1.0", description="Application version")

    # API Service
    api_host: str = Field(default="0.0.0.0", description="API bind host")
    api_port: int = Field(default=3000, ge=1, le=65535, description="API port")
    api_reload: bool = Field(default=False, description="Hot reload in dev")
    cors_origins: str = Field(
        default="*",
        description="Allowed CORS origins (comma-separated)",
    )
    enable_compression: bool = Field(default=True, description="Gzip API responses")
    compression_minimum_size: int = Field(
        default=1000, ge=0, description="Smallest response body to compress (bytes)"
    )

    # Bibliography source
    bib_source_path: str = Field(
        default="./citations.bib", description="BibTeX file served by the API"
    )

    # Publication cache
    cache_ttl_seconds: int = Field(default=3600, ge=0, description="Publication cache TTL")

    # Pagination
    default_page_limit: int = Field(default=20, ge=1, description="Page size when none is given")
    max_page_limit: int = Field(default=1000, ge=1, description="Largest accepted page size")

    @field_validator("cors_origins")
    @classmethod
    def parse_cors_origins(cls, v: str) -> List[str]:
        """Parse comma-separated CORS origins."""
        return [origin.strip() for origin in v.split(",") if origin.strip()]

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        """Ensure environment is valid."""
        allowed = ["development", "testing", "staging", "production"]
        if v not in allowed:
            raise ValueError(f"Environment must be one of {allowed}")
        return v

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        """Ensure log format is supported."""
        v = v.lower()
        if v not in ("text", "json"):
            raise ValueError("Log format must be 'text' or 'json'")
        return v

    @property
    def is_production(self) -> bool:
        """Check if running in production."""
        return self.environment == "production"

    @property
    def is_development(self) -> bool:
        """Check if running in development."""
        return self.environment == "development"

    @property
    def bib_source(self) -> Path:
        """Bibliography source as a Path."""
        return Path(self.bib_source_path).expanduser()


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Using lru_cache ensures settings are loaded once and reused.
    """
    return Settings()
