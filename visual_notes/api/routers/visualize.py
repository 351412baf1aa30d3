"""
Visualize endpoints.

Routes:
- POST /visualize - Generate an editable diagram from text, a PDF or an image
- GET /visualize/usage - Remaining daily allowance for the caller

Dependencies: visual_notes.application.services, visual_notes.api.deps
System role: Visual notes HTTP API
"""

import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from visual_notes.api.deps import (
    get_current_caller,
    get_quota_service,
    get_visualization_service,
)
from visual_notes.api.routers.router_utils import parse_visualize_request
from visual_notes.application.services import (
    CallerContext,
    QuotaService,
    VisualizationService,
)
from visual_notes.models.visualize import (
    ErrorResponse,
    QuotaErrorResponse,
    UsageResponse,
    VisualizeResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/visualize", tags=["visualize"])


@router.post(
    "",
    response_model=VisualizeResponse,
    status_code=200,
    responses={
        400: {"model": ErrorResponse},
        401: {"model": ErrorResponse},
        403: {"model": QuotaErrorResponse},
        500: {"model": ErrorResponse},
    },
)
async def visualize(
    request: Request,
    caller: CallerContext = Depends(get_current_caller),
    visualization_service: VisualizationService = Depends(get_visualization_service),
) -> JSONResponse:
    """Generate a diagram document.

    Accepts multipart (file, theme, expandContent, optional text) or a
    JSON / urlencoded body (text, theme, expandContent).

    Args:
        request: Raw request (body parsed by content type)
        caller: Authenticated caller
        visualization_service: Injected orchestrator

    Returns:
        VisualizeResponse: Elements, suggested name, and the caller's
        remaining uses when quota-limited
    """
    options, raw = await parse_visualize_request(request)
    logger.info(
        f"{__name__}:visualize - START user={caller.user_id} "
        f"has_file={raw.file_bytes is not None} theme={options.theme}"
    )

    outcome = await visualization_service.visualize(
        caller,
        raw,
        theme=options.theme,
        expand_content=options.expand_content,
    )
    response = VisualizeResponse(
        elements=outcome.result.elements,
        suggested_project_name=outcome.result.suggested_project_name,
        remaining_uses=outcome.remaining_uses,
        daily_limit=outcome.daily_limit,
    )
    # Quota fields are omitted for unlimited callers; element fields keep their nulls
    omitted = {"remaining_uses", "daily_limit"} if outcome.remaining_uses is None else set()
    return JSONResponse(content=response.model_dump(mode="json", by_alias=True, exclude=omitted))


@router.get("/usage", response_model=UsageResponse, status_code=200)
async def get_usage(
    caller: CallerContext = Depends(get_current_caller),
    quota_service: QuotaService = Depends(get_quota_service),
) -> UsageResponse:
    """Report the caller's remaining daily allowance."""
    status = await quota_service.status(caller)
    return UsageResponse(
        remaining_uses=status.remaining_uses,
        daily_limit=status.daily_limit,
        is_pro=status.is_privileged,
    )
