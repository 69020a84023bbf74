"""
Dashboard API Endpoints

Runs fetch cycles for the sales and channel dashboards and serves the last
published snapshot. Every number in a response is derived by the engine.
"""

from datetime import date
from typing import Optional, Tuple

from fastapi import APIRouter, Depends, Request
import structlog

from src.domain.exceptions import DataUnavailableError
from src.domain.models import ChannelDashboard, SalesDashboard
from src.serving.service import DashboardKind, DashboardService

router = APIRouter()
logger = structlog.get_logger(__name__)


def get_dashboard_service(request: Request) -> DashboardService:
    """Dashboard service created at application startup"""
    return request.app.state.dashboard_service


def resolve_range(start_date: Optional[date], end_date: Optional[date]) -> Tuple[date, date]:
    """Missing dates default to today"""
    today = date.today()
    return start_date or today, end_date or today


@router.get("/sales", response_model=SalesDashboard)
async def get_sales_dashboard(
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    service: DashboardService = Depends(get_dashboard_service),
) -> SalesDashboard:
    """
    Fetch and build the sales dashboard for a date range.
    """
    start_date, end_date = resolve_range(start_date, end_date)
    logger.info("get_sales_dashboard called", start_date=str(start_date), end_date=str(end_date))
    return await service.refresh_sales(start_date, end_date)


@router.get("/channels", response_model=ChannelDashboard)
async def get_channel_dashboard(
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    service: DashboardService = Depends(get_dashboard_service),
) -> ChannelDashboard:
    """
    Fetch and build the channel performance dashboard for a date range.
    """
    start_date, end_date = resolve_range(start_date, end_date)
    logger.info("get_channel_dashboard called", start_date=str(start_date), end_date=str(end_date))
    return await service.refresh_channels(start_date, end_date)


@router.get("/{kind}/latest")
async def get_latest_dashboard(
    kind: DashboardKind,
    service: DashboardService = Depends(get_dashboard_service),
):
    """
    Last published snapshot of a dashboard.

    Responds 404 when no cycle has succeeded yet or the last one failed.
    """
    snapshot = service.latest(kind)
    if snapshot is None:
        raise DataUnavailableError(details={"dashboard": kind.value})
    return snapshot
