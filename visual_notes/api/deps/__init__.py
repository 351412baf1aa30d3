"""API-specific dependencies."""

from .dependencies import (
    get_current_caller,
    get_quota_service,
    get_service_cache,
    get_settings_dependency,
    get_visualization_service,
    hash_token,
)

__all__ = [
    "get_current_caller",
    "get_quota_service",
    "get_service_cache",
    "get_settings_dependency",
    "get_visualization_service",
    "hash_token",
]
