"""
Derived Metrics Module

Enriches reconstructed dataset records with derived metrics.
Includes:
- Average order value and discounts/returns per period
- Period-over-period sales and order growth
- Return on ad spend per channel

Every ratio resolves a zero denominator to 0 rather than NaN or infinity.
"""

from typing import Dict, List, Sequence

import polars as pl
import structlog

from src.domain.models import ChannelMetrics, ChannelRecord, PeriodMetrics, PeriodRecord

logger = structlog.get_logger(__name__)


PERIOD_SCHEMA: Dict[str, pl.DataType] = {
    "month": pl.Utf8,
    "total_sales": pl.Float64,
    "gross_product_sales": pl.Float64,
    "orders_count": pl.Float64,
}

CHANNEL_SCHEMA: Dict[str, pl.DataType] = {
    "channel": pl.Utf8,
    "total_spend": pl.Float64,
    "total_revenue": pl.Float64,
}


def safe_ratio(numerator: pl.Expr, denominator: pl.Expr) -> pl.Expr:
    """Ratio expression that yields 0 where the denominator is 0."""
    return (
        pl.when(denominator == 0)
        .then(pl.lit(0.0))
        .otherwise(numerator / denominator)
    )


def period_growth(column: str) -> pl.Expr:
    """
    Percentage change against the next row.

    Rows are ordered most recent first, so the next row is the preceding
    period. The oldest row, and any row whose preceding value is 0, get 0.
    """
    previous = pl.col(column).shift(-1)
    return (
        pl.when(previous.is_null() | (previous == 0))
        .then(pl.lit(0.0))
        .otherwise((pl.col(column) - previous) / previous * 100)
    )


def records_to_frame(records: Sequence, schema: Dict[str, pl.DataType]) -> pl.DataFrame:
    """Build a DataFrame with a fixed schema from typed records."""
    return pl.DataFrame(
        [record.model_dump(include=set(schema)) for record in records],
        schema=schema,
    )


class MetricsEnricher:
    """
    Derived metrics calculator for dashboard datasets.

    Works on copies: the input sequence is never modified and the output
    keeps the input order.

    Example:
        enricher = MetricsEnricher()
        periods = enricher.enrich_periods(period_records)
    """

    def enrich_periods(self, records: Sequence[PeriodRecord]) -> List[PeriodMetrics]:
        """
        Add per-period sales metrics.

        Metrics added:
        - avg_order_value: total_sales / orders_count
        - discounts_returns: gross_product_sales - total_sales
        - sales_growth: % change in total_sales against the preceding period
        - orders_growth: % change in orders_count against the preceding period

        Args:
            records: Monthly records ordered most recent first
        """
        df = records_to_frame(records, PERIOD_SCHEMA)

        df = df.with_columns([
            safe_ratio(pl.col("total_sales"), pl.col("orders_count")).alias("avg_order_value"),
            (pl.col("gross_product_sales") - pl.col("total_sales")).alias("discounts_returns"),
            period_growth("total_sales").alias("sales_growth"),
            period_growth("orders_count").alias("orders_growth"),
        ])

        enriched = [PeriodMetrics(**row) for row in df.to_dicts()]
        logger.debug("Periods enriched", periods=len(enriched))
        return enriched

    def enrich_channels(self, records: Sequence[ChannelRecord]) -> List[ChannelMetrics]:
        """Add return on ad spend (total_revenue / total_spend) per channel."""
        df = records_to_frame(records, CHANNEL_SCHEMA)

        df = df.with_columns(
            safe_ratio(pl.col("total_revenue"), pl.col("total_spend")).alias("roas")
        )

        enriched = [ChannelMetrics(**row) for row in df.to_dicts()]
        logger.debug("Channels enriched", channels=len(enriched))
        return enriched


def enrich_period_data(records: Sequence[PeriodRecord]) -> List[PeriodMetrics]:
    """
    Convenience function to enrich monthly sales records.

    Args:
        records: Monthly records ordered most recent first

    Returns:
        Enriched records in the same order
    """
    return MetricsEnricher().enrich_periods(records)


def enrich_channel_data(records: Sequence[ChannelRecord]) -> List[ChannelMetrics]:
    """Convenience function to enrich channel records."""
    return MetricsEnricher().enrich_channels(records)
