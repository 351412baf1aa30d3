"""
Health check API endpoints.

Routes:
    GET /health        - liveness, never touches dependencies
    GET /health/ready  - readiness: database reachable and model credentials present

System role: Health check HTTP API
"""

import logging

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from visual_notes import __version__
from visual_notes.api.deps.dependencies import get_settings_dependency
from visual_notes.boundary.db.connection import get_async_db
from visual_notes.configs import Settings

logger = logging.getLogger(__name__)


class HealthResponse(BaseModel):
    status: str
    version: str


class ReadinessResponse(BaseModel):
    status: str
    database: bool
    model_provider: bool


router = APIRouter(prefix="/health", tags=["health"])


@router.get("", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    return HealthResponse(status="healthy", version=__version__)


@router.get("/ready", response_model=ReadinessResponse)
async def readiness_check(
    db: AsyncSession = Depends(get_async_db),
    settings: Settings = Depends(get_settings_dependency),
):
    """Report 503 until the service can actually serve a generation."""
    try:
        await db.execute(text("SELECT 1"))
        database_ok = True
    except SQLAlchemyError as e:
        logger.warning(f"{__name__}:readiness_check - database unreachable: {e}")
        database_ok = False

    provider_ok = bool(settings.model_provider.api_key)
    body = ReadinessResponse(
        status="ready" if database_ok and provider_ok else "unavailable",
        database=database_ok,
        model_provider=provider_ok,
    )
    code = status.HTTP_200_OK if body.status == "ready" else status.HTTP_503_SERVICE_UNAVAILABLE
    return JSONResponse(status_code=code, content=body.model_dump())
