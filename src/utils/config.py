"""
Configuration management using pydantic-settings.

Loads settings from environment variables and .env files.
"""

from functools import lru_cache
from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    app_name: str = Field(
        default="MotherGrid Maternity Coverage API",
        description="Service name reported by the health endpoints",
    )

    # Server Configuration
    host: str = Field(default="0.0.0.0", description="Server host")
    port: int = Field(default=5000, description="Server port")
    debug: bool = Field(default=False, description="Enable debug mode")
    cors_origins: List[str] = Field(
        default=[
            "http://localhost:5000",
            "http://localhost:5173",
            "http://127.0.0.1:5000",
            "http://127.0.0.1:5173",
        ],
        description="Front-end origins allowed to call the API (JSON list in env)",
    )

    # Storage
    seed_sample_data: bool = Field(
        default=True,
        description="Populate the in-memory store with the demo user on startup",
    )
    upload_base_url: str = Field(
        default="https://storage.mothergrid.com/documents",
        description="Base URL used to build synthetic document URLs for uploads",
    )

    # Claim lifecycle
    transaction_hash_length: int = Field(
        default=12,
        ge=1,
        description="Number of hex characters after '0x' in synthetic transaction hashes",
    )


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses LRU cache to avoid re-reading environment on every call.
    """
    return Settings()


# Convenience access
settings = get_settings()
