"""
Unified application settings.

Aggregates all configuration modules into a single Settings class.
Provides dependency injection factory for FastAPI.

Dependencies: All config modules
System role: Central configuration aggregator for the application
"""

from functools import lru_cache

from pydantic import Field

from visual_notes.configs.base import BaseSettings
from visual_notes.configs.database import DatabaseSettings
from visual_notes.configs.generation import GenerationSettings
from visual_notes.configs.model_provider import ModelProviderSettings
from visual_notes.configs.quota import QuotaSettings


class Settings(BaseSettings):
    """Unified application settings aggregating all config modules."""

    log_level: str = Field(default="INFO", description="Root log level name")
    cors_origins: list[str] = Field(
        default_factory=lambda: ["*"],
        description="Origins allowed to call the API from a browser",
    )

    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    model_provider: ModelProviderSettings = Field(default_factory=ModelProviderSettings)
    generation: GenerationSettings = Field(default_factory=GenerationSettings)
    quota: QuotaSettings = Field(default_factory=QuotaSettings)


@lru_cache
def get_settings() -> Settings:
    """
    Get application settings singleton.

    Returns Settings instance, cached for dependency injection.
    Environment variables loaded once at startup.

    Returns:
        Settings: Application settings instance

    Usage:
        from visual_notes.configs import get_settings
        settings = get_settings()
    """
    return Settings()
