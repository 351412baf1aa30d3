"""HTTP request and response schemas."""

from visual_notes.models.visualize import (
    ErrorResponse,
    QuotaErrorResponse,
    UsageResponse,
    VisualizeRequest,
    VisualizeResponse,
)

__all__ = [
    "ErrorResponse",
    "QuotaErrorResponse",
    "UsageResponse",
    "VisualizeRequest",
    "VisualizeResponse",
]
