"""
Observability module.

Provides structured logging and correlation ID tracking.
"""

from visual_notes.observability.correlation import get_correlation_id
from visual_notes.observability.log_utils import log_with_context, summarize_elements
from visual_notes.observability.logger import configure_logging

__all__ = [
    "configure_logging",
    "get_correlation_id",
    "log_with_context",
    "summarize_elements",
]
