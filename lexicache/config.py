"""
Client configuration.

Loads settings from environment variables (prefixed ``LEXICACHE_``) and an
optional ``.env`` file, with sensible defaults.
"""

from __future__ import annotations

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Translation client settings loaded from environment."""

    model_config = SettingsConfigDict(
        env_prefix="LEXICACHE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ==========================================================================
    # Service
    # ==========================================================================

    api_key: str = ""
    customer_id: str = ""
    endpoint: str = "http://localhost:8000"
    request_timeout: float = 10.0

    # ==========================================================================
    # Behaviour
    # ==========================================================================

    default_language: str | None = None
    batch_requests: bool = True
    debug: bool = False

    # ==========================================================================
    # Cache
    # ==========================================================================

    cache_max_entries: int = 500
    cache_ttl_hours: float = 1.0
    cache_prefix: str = "lexicache_"
    # Path to a JSON file for the durable tier; ":memory:" for an in-process
    # store; empty for memory-only
    cache_path: str = ""
    preload_max_items: int = 50

    # ==========================================================================
    # Helpers
    # ==========================================================================

    @property
    def is_configured(self) -> bool:
        """Whether credentials for the translation service are present."""
        return bool(self.api_key and self.customer_id)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
