"""Router helpers."""

from .error_handling import register_error_handlers
from .request_parsing import parse_visualize_request

__all__ = ["parse_visualize_request", "register_error_handlers"]
