"""
Dependency injection container.

Factory functions for FastAPI dependencies.

Dependencies: visual_notes.configs, visual_notes.application, visual_notes.boundary
System role: DI container for service injection
"""

import hashlib
from functools import lru_cache

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from visual_notes.application.services import (
    CallerContext,
    QuotaService,
    VisualizationService,
    caller_from_user,
)
from visual_notes.boundary.db.base import utc_now
from visual_notes.boundary.db.connection import get_async_db
from visual_notes.boundary.db.CRUD import user_crud
from visual_notes.configs import Settings, get_settings
from visual_notes.core.agentic_system.visual_notes_agent import VisualNotesAgent
from visual_notes.core.exceptions import UnauthenticatedError
from visual_notes.core.input_normalizer import InputNormalizer

bearer_scheme = HTTPBearer(auto_error=False)


class ServiceCache:
    """Container for cached service instances."""

    def __init__(self) -> None:
        self._agent: VisualNotesAgent | None = None

    @property
    def visual_notes_agent(self) -> VisualNotesAgent:
        """Get cached pipeline agent (built on first use)."""
        if self._agent is None:
            self._agent = VisualNotesAgent.from_settings(get_settings())
        return self._agent

    def clear(self) -> None:
        """Drop cached instances."""
        self._agent = None


@lru_cache
def get_service_cache() -> ServiceCache:
    """Get singleton service cache."""
    return ServiceCache()


def get_settings_dependency() -> Settings:
    """Get application settings."""
    return get_settings()


def hash_token(token: str) -> str:
    """SHA-256 hex digest used to look up bearer tokens."""
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


async def get_current_caller(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    db: AsyncSession = Depends(get_async_db),
    settings: Settings = Depends(get_settings_dependency),
) -> CallerContext:
    """
    Resolve the authenticated caller from the bearer token.

    Raises:
        UnauthenticatedError: Missing or unknown token
    """
    if credentials is None or not credentials.credentials:
        raise UnauthenticatedError("Unauthorized")

    user = await user_crud.get_by_token_hash(db, hash_token(credentials.credentials))
    if user is None:
        raise UnauthenticatedError("Unauthorized")

    return caller_from_user(user, settings.quota.admin_emails, utc_now())


def get_quota_service(
    db: AsyncSession = Depends(get_async_db),
    settings: Settings = Depends(get_settings_dependency),
) -> QuotaService:
    """Get quota service bound to the request's db session."""
    return QuotaService(db=db, settings=settings.quota)


def get_visualization_service(
    quota_service: QuotaService = Depends(get_quota_service),
    settings: Settings = Depends(get_settings_dependency),
) -> VisualizationService:
    """Get visualization service with the cached pipeline agent."""
    cache = get_service_cache()
    return VisualizationService(
        quota_service=quota_service,
        normalizer=InputNormalizer(settings.generation),
        agent_provider=lambda: cache.visual_notes_agent,
    )
