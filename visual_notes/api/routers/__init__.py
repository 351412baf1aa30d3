"""API routers."""

from .health import router as health_router
from .visualize import router as visualize_router

__all__ = [
    "health_router",
    "visualize_router",
]
