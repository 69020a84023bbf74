"""
Dashboard Transformer

Runs the full engine over one analytics response: dataset correlation, row
reconstruction, derived metrics, then ranking and aggregation. Each
dashboard view is derived from a single canonical enriched sequence.
"""

from datetime import date, datetime
from typing import List, Optional, Sequence

import structlog

from src.config import get_settings
from src.config.settings import DashboardSettings
from src.domain.models import (
    ChannelBreakdownRow,
    ChannelDashboard,
    ChannelMetrics,
    Column,
    SalesDashboard,
)
from src.ingestion.queries import (
    CHANNEL_DASHBOARD_QUERIES,
    SALES_DASHBOARD_QUERIES,
    DashboardQuery,
    query_bindings,
)
from src.quality.validators import DatasetCorrelator
from .aggregations import (
    filter_positive,
    roas_tier,
    safe_divide,
    share_of_total,
    sort_records,
    top_n,
    total,
)
from .enrichers import MetricsEnricher

logger = structlog.get_logger(__name__)


class DashboardTransformer:
    """
    Engine pipeline orchestrator.

    Turns the tables of one fetch cycle into an immutable dashboard
    snapshot. Holds no state between calls.

    Example:
        transformer = DashboardTransformer()
        dashboard = transformer.build_channel_dashboard(response.data, start, end)
    """

    def __init__(
        self,
        settings: Optional[DashboardSettings] = None,
        sales_queries: Sequence[DashboardQuery] = SALES_DASHBOARD_QUERIES,
        channel_queries: Sequence[DashboardQuery] = CHANNEL_DASHBOARD_QUERIES,
    ):
        self.settings = settings or get_settings().dashboard
        self.enricher = MetricsEnricher()
        self.sales_queries = list(sales_queries)
        self.channel_queries = list(channel_queries)
        self.sales_correlator = DatasetCorrelator(query_bindings(sales_queries))
        self.channel_correlator = DatasetCorrelator(query_bindings(channel_queries))

    def build_sales_dashboard(
        self,
        tables: Sequence[Optional[Sequence[Column]]],
        start_date: date,
        end_date: date,
        queries: Optional[List[str]] = None,
    ) -> SalesDashboard:
        """
        Build the sales dashboard.

        Pipeline:
        1. Correlate tables with the product and monthly datasets
        2. Enrich periods with AOV, discounts and growth
        3. Rank products by units sold
        4. Total sales, orders and discounts across every period
        """
        started_at = datetime.utcnow()
        datasets = self.sales_correlator.correlate(tables)

        products = datasets["products"]
        periods = self.enricher.enrich_periods(datasets["periods"])

        ranked_products = sort_records(products, "total_items_sold")
        total_sales = total(periods, "total_sales")
        total_orders = total(periods, "orders_count")

        dashboard = SalesDashboard(
            start_date=start_date,
            end_date=end_date,
            queries=queries,
            products=products,
            top_products=top_n(ranked_products, self.settings.top_products),
            total_items_sold=total(products, "total_items_sold"),
            periods=periods,
            latest_period=periods[0] if periods else None,
            total_sales=total_sales,
            total_gross_product_sales=total(periods, "gross_product_sales"),
            total_discounts_returns=total(periods, "discounts_returns"),
            total_orders=total_orders,
            overall_avg_order_value=safe_divide(total_sales, total_orders),
        )

        logger.info(
            "Sales dashboard built",
            products=len(products),
            periods=len(periods),
            total_sales=total_sales,
            duration_seconds=(datetime.utcnow() - started_at).total_seconds(),
        )
        return dashboard

    def build_channel_dashboard(
        self,
        tables: Sequence[Optional[Sequence[Column]]],
        start_date: date,
        end_date: date,
        queries: Optional[List[str]] = None,
    ) -> ChannelDashboard:
        """
        Build the channel performance dashboard.

        Pipeline:
        1. Correlate the table with the channel dataset
        2. Enrich channels with ROAS
        3. Rank by revenue for the chart and the breakdown table
        4. Total spend and revenue across every channel, not just the top-N
        """
        started_at = datetime.utcnow()
        datasets = self.channel_correlator.correlate(tables)

        channels = self.enricher.enrich_channels(datasets["channels"])
        by_revenue = sort_records(channels, "total_revenue")

        total_spend = total(channels, "total_spend")
        total_revenue = total(channels, "total_revenue")

        dashboard = ChannelDashboard(
            start_date=start_date,
            end_date=end_date,
            queries=queries,
            channels=channels,
            top_channels=top_n(by_revenue, self.settings.top_channels),
            roas_chart=filter_positive(channels, "total_spend"),
            breakdown=self._breakdown(by_revenue),
            total_spend=total_spend,
            total_revenue=total_revenue,
            overall_roas=safe_divide(total_revenue, total_spend),
            active_channels=len(channels),
        )

        logger.info(
            "Channel dashboard built",
            channels=len(channels),
            total_spend=total_spend,
            total_revenue=total_revenue,
            overall_roas=dashboard.overall_roas,
            duration_seconds=(datetime.utcnow() - started_at).total_seconds(),
        )
        return dashboard

    def _breakdown(self, ranked: Sequence[ChannelMetrics]) -> List[ChannelBreakdownRow]:
        """Revenue share and ROAS rating for every channel"""
        shares = share_of_total(ranked, "total_revenue")
        return [
            ChannelBreakdownRow(
                **channel.model_dump(),
                revenue_share=share,
                roas_tier=roas_tier(
                    channel.roas,
                    high=self.settings.roas_high_threshold,
                    medium=self.settings.roas_medium_threshold,
                ),
            )
            for channel, share in zip(ranked, shares)
        ]
