"""
Health Check Endpoints

Provides health and liveness checks for orchestration systems.
"""

from datetime import datetime
from typing import Any, Dict

from fastapi import APIRouter, Request
from pydantic import BaseModel

from src.config import get_settings

router = APIRouter()


class HealthResponse(BaseModel):
    """Health check response"""
    status: str
    version: str
    environment: str
    timestamp: datetime
    checks: Dict[str, Any]


@router.get("/health", response_model=HealthResponse)
async def health_check(request: Request) -> HealthResponse:
    """
    Health check endpoint.

    Reports the analytics endpoint in use and which dashboards currently
    hold a published snapshot.
    """
    settings = get_settings()
    checks: Dict[str, Any] = {"analytics_api": {"url": settings.analytics_api.url}}
    overall_status = "healthy"

    service = getattr(request.app.state, "dashboard_service", None)
    if service is None:
        checks["dashboards"] = {"status": "not_initialized"}
        overall_status = "degraded"
    else:
        store = service.store
        checks["dashboards"] = {
            key: {
                "generation": store.latest_generation(key),
                "published": store.snapshot(key) is not None,
            }
            for key in ("sales", "channels")
        }

    return HealthResponse(
        status=overall_status,
        version=settings.version,
        environment=settings.app_env,
        timestamp=datetime.utcnow(),
        checks=checks,
    )


@router.get("/health/live")
async def liveness_check() -> Dict[str, str]:
    """
    Liveness probe endpoint.

    Returns 200 if the application is running.
    """
    return {"status": "alive"}
