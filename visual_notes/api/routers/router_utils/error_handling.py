"""
Error handling for visual notes endpoints.

Maps the domain exception hierarchy onto HTTP status codes and the
{"error": ...} body the client expects.

Dependencies: fastapi, visual_notes.core.exceptions
System role: Exception-to-HTTP translation
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from visual_notes.core.exceptions import (
    GenerationFailedError,
    InvalidInputError,
    QuotaExceededError,
    UnauthenticatedError,
    VisualNotesError,
)
from visual_notes.models.visualize import ErrorResponse, QuotaErrorResponse
from visual_notes.observability.log_utils import log_with_context

logger = logging.getLogger(__name__)

GENERIC_FAILURE_MESSAGE = "Failed to generate visual notes"


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=message).model_dump(),
    )


async def invalid_input_handler(request: Request, exc: InvalidInputError) -> JSONResponse:
    log_with_context(
        logger,
        logging.INFO,
        f"{__name__}:invalid_input_handler - {exc.message}",
        path=request.url.path,
        details=exc.details,
    )
    return _error(status.HTTP_400_BAD_REQUEST, exc.message)


async def unauthenticated_handler(request: Request, exc: UnauthenticatedError) -> JSONResponse:
    return _error(status.HTTP_401_UNAUTHORIZED, exc.message)


async def quota_exceeded_handler(request: Request, exc: QuotaExceededError) -> JSONResponse:
    body = QuotaErrorResponse(
        error=exc.message,
        remaining_uses=exc.remaining_uses,
        daily_limit=exc.daily_limit,
    )
    return JSONResponse(
        status_code=status.HTTP_403_FORBIDDEN,
        content=body.model_dump(by_alias=True),
    )


async def generation_failed_handler(request: Request, exc: GenerationFailedError) -> JSONResponse:
    log_with_context(
        logger,
        logging.ERROR,
        f"{__name__}:generation_failed_handler - {exc.kind.value}: {exc.message}",
        path=request.url.path,
        failure_kind=exc.kind.value,
    )
    return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, exc.message)


async def visual_notes_error_handler(request: Request, exc: VisualNotesError) -> JSONResponse:
    logger.error(f"{__name__}:visual_notes_error_handler - {type(exc).__name__}: {exc}")
    return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, GENERIC_FAILURE_MESSAGE)


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        f"{__name__}:unhandled_error_handler - {type(exc).__name__}: {exc}",
        exc_info=exc,
    )
    return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, GENERIC_FAILURE_MESSAGE)


def register_error_handlers(app: FastAPI) -> None:
    """Attach the domain exception handlers to an application."""
    app.add_exception_handler(InvalidInputError, invalid_input_handler)
    app.add_exception_handler(UnauthenticatedError, unauthenticated_handler)
    app.add_exception_handler(QuotaExceededError, quota_exceeded_handler)
    app.add_exception_handler(GenerationFailedError, generation_failed_handler)
    app.add_exception_handler(VisualNotesError, visual_notes_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
