"""
Data Transformation Module

The dashboard pipeline lives in `src.transformation.transformers`.
"""
from .aggregations import (
    filter_positive,
    roas_tier,
    safe_divide,
    share_of_total,
    sort_records,
    top_n,
    total,
)
from .columnar import bind_rows, reconstruct_rows, table_row_count
from .enrichers import MetricsEnricher, enrich_channel_data, enrich_period_data

__all__ = [
    "filter_positive",
    "roas_tier",
    "safe_divide",
    "share_of_total",
    "sort_records",
    "top_n",
    "total",
    "bind_rows",
    "reconstruct_rows",
    "table_row_count",
    "MetricsEnricher",
    "enrich_channel_data",
    "enrich_period_data",
]
