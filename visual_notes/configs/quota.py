"""
Free-tier quota settings.

Dependencies: pydantic, pydantic_settings
System role: Daily usage cap configuration
"""

from pydantic import Field

from visual_notes.configs.base import BaseSettings, settings_config


class QuotaSettings(BaseSettings):
    """Daily usage limits for non-privileged callers."""

    model_config = settings_config("VISUAL_NOTES_")

    free_daily_limit: int = Field(
        default=3,
        description="Successful generations allowed per UTC day on the free tier",
    )
    reservation_ttl_seconds: int = Field(
        default=600,
        description="In-flight reservations older than this are ignored",
    )
    admin_emails: list[str] = Field(
        default_factory=list,
        description="Accounts with permanent unlimited access",
    )
