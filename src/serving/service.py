"""
Dashboard Service

Runs fetch cycles: fetch the dashboard's queries for a date range, run the
engine over the response, and publish the snapshot if no newer request has
been issued in the meantime.
"""

from datetime import date
from enum import Enum
from typing import Optional

import structlog
from pydantic import BaseModel

from src.domain.exceptions import AnalyticsError, InvalidDateRangeError
from src.domain.models import ChannelDashboard, SalesDashboard
from src.ingestion.client import AnalyticsClient
from src.ingestion.queries import query_texts
from src.transformation.transformers import DashboardTransformer
from .formatters import present_channel_dashboard, present_sales_dashboard
from .snapshots import SnapshotStore

logger = structlog.get_logger(__name__)


class DashboardKind(str, Enum):
    """Dashboards served by the engine"""
    SALES = "sales"
    CHANNELS = "channels"


class DashboardService:
    """
    Fetch cycle coordinator.

    Every refresh issues a new generation for its dashboard. A response is
    published only if its generation is still the latest; responses to
    superseded requests are returned to their caller but never stored.
    A failed cycle clears the published snapshot and re-raises.

    Example:
        service = DashboardService(AnalyticsClient())
        dashboard = await service.refresh_channels(start, end)
    """

    def __init__(
        self,
        client: AnalyticsClient,
        transformer: Optional[DashboardTransformer] = None,
        store: Optional[SnapshotStore] = None,
    ):
        self.client = client
        self.transformer = transformer or DashboardTransformer()
        self.store = store or SnapshotStore()

    async def refresh_sales(self, start_date: date, end_date: date) -> SalesDashboard:
        """Run a sales dashboard fetch cycle"""
        return await self.refresh(DashboardKind.SALES, start_date, end_date)

    async def refresh_channels(self, start_date: date, end_date: date) -> ChannelDashboard:
        """Run a channel dashboard fetch cycle"""
        return await self.refresh(DashboardKind.CHANNELS, start_date, end_date)

    async def refresh(self, kind: DashboardKind, start_date: date, end_date: date) -> BaseModel:
        """
        Run one fetch cycle for a dashboard.

        Args:
            kind: Dashboard to refresh
            start_date: First day of the range
            end_date: Last day of the range

        Returns:
            The snapshot built from this cycle's response

        Raises:
            InvalidDateRangeError: If start_date is after end_date
            TransportError, MalformedTableError, DataUnavailableError: The
                cycle failed; the published snapshot has been cleared
        """
        if start_date > end_date:
            raise InvalidDateRangeError(
                f"Start date {start_date} is after end date {end_date}",
                details={"start_date": str(start_date), "end_date": str(end_date)},
            )

        key = kind.value
        generation = self.store.issue(key)
        log = logger.bind(dashboard=key, generation=generation)
        log.info("Fetch cycle started", start_date=str(start_date), end_date=str(end_date))

        if kind == DashboardKind.SALES:
            queries = self.transformer.sales_queries
            build = self.transformer.build_sales_dashboard
            present = present_sales_dashboard
        else:
            queries = self.transformer.channel_queries
            build = self.transformer.build_channel_dashboard
            present = present_channel_dashboard

        try:
            response = await self.client.fetch(start_date, end_date, query_texts(queries))
            snapshot = build(response.data, start_date, end_date, queries=response.queries)
        except AnalyticsError as e:
            log.warning("Fetch cycle failed", error_code=e.code, error=e.message)
            self.store.invalidate(key, generation, e.message)
            raise

        snapshot = present(snapshot).model_copy(update={"generation": generation})
        applied = self.store.apply(key, generation, snapshot)
        log.info("Fetch cycle completed", applied=applied)
        return snapshot

    def latest(self, kind: DashboardKind) -> Optional[BaseModel]:
        """Published snapshot for a dashboard, None if absent or cleared"""
        return self.store.snapshot(kind.value)

    async def aclose(self) -> None:
        await self.client.aclose()
