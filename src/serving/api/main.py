"""
FastAPI Application Factory

Creates and configures the dashboard API application.
"""

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
import structlog

from src.config import get_settings
from src.domain.exceptions import AnalyticsError
from src.ingestion.client import AnalyticsClient
from src.serving.service import DashboardService
from .middleware import RequestLoggingMiddleware
from .routes import dashboards_router, health_router

logger = structlog.get_logger(__name__)


async def analytics_error_handler(request: Request, exc: AnalyticsError) -> JSONResponse:
    """Render a fetch cycle failure as a problem details body"""
    logger.warning(
        "Request failed",
        path=request.url.path,
        error_code=exc.code,
        status_code=exc.status_code,
        error=exc.message,
    )
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "type": f"/errors/{exc.code.lower().replace('_', '-')}",
            "title": exc.title,
            "status": exc.status_code,
            "detail": exc.message,
            "code": exc.code,
            "details": exc.details,
        },
        media_type="application/problem+json",
    )


def create_api_app(service: Optional[DashboardService] = None) -> FastAPI:
    """
    Create and configure FastAPI application.

    Args:
        service: Dashboard service to use; one backed by a fresh
            AnalyticsClient is created at startup when omitted

    Returns:
        Configured FastAPI app instance
    """
    settings = get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        from src.config.logging import configure_logging
        configure_logging()

        logger.info("Starting Storefront Analytics API", analytics_url=settings.analytics_api.url)

        owned = service is None
        app.state.dashboard_service = service or DashboardService(AnalyticsClient())

        yield

        logger.info("Shutting down...")
        if owned:
            await app.state.dashboard_service.aclose()

    app = FastAPI(
        title="Storefront Analytics API",
        description="Sales, product and marketing channel dashboards",
        version=settings.version,
        docs_url="/docs" if settings.is_development else None,
        redoc_url="/redoc" if settings.is_development else None,
        lifespan=lifespan,
    )

    if service is not None:
        app.state.dashboard_service = service

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.security.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=1000)
    app.add_middleware(RequestLoggingMiddleware)

    app.add_exception_handler(AnalyticsError, analytics_error_handler)

    app.include_router(health_router, prefix="/api/v1", tags=["Health"])
    app.include_router(dashboards_router, prefix="/api/v1/dashboards", tags=["Dashboards"])

    return app
