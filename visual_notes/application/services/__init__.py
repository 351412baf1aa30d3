"""Service orchestrators."""

from .caller_context import CallerContext, caller_from_user, is_privileged_user
from .quota_service import QuotaService, QuotaStatus, QuotaTicket
from .visualization_service import VisualizationOutcome, VisualizationService

__all__ = [
    "CallerContext",
    "QuotaService",
    "QuotaStatus",
    "QuotaTicket",
    "VisualizationOutcome",
    "VisualizationService",
    "caller_from_user",
    "is_privileged_user",
]
