"""
Shared settings plumbing.

Every settings group reads the process environment first and falls back to
a local `.env`. Groups differ only in their variable prefix, so they build
their config through `settings_config`.

Dependencies: pydantic_settings
System role: Common loader for the configuration groups
"""

from pydantic_settings import BaseSettings as PydanticBaseSettings, SettingsConfigDict


def settings_config(prefix: str = "") -> SettingsConfigDict:
    """Loader options for a settings group whose variables start with `prefix`."""
    return SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix=prefix,
        case_sensitive=False,
        extra="ignore",
    )


class BaseSettings(PydanticBaseSettings):
    """Settings root for the service. Unknown variables are ignored."""

    model_config = settings_config()
