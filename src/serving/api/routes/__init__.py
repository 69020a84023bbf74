"""
API Routes Module
"""
from .health import router as health_router
from .dashboards import router as dashboards_router

__all__ = [
    "health_router",
    "dashboards_router",
]
