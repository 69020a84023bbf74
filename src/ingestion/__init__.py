"""
Data Ingestion Module
"""
from .client import AnalyticsClient, FetchRequest, FetchResponse
from .queries import (
    CHANNEL_DASHBOARD_QUERIES,
    SALES_DASHBOARD_QUERIES,
    DashboardQuery,
)

__all__ = [
    "AnalyticsClient",
    "FetchRequest",
    "FetchResponse",
    "CHANNEL_DASHBOARD_QUERIES",
    "SALES_DASHBOARD_QUERIES",
    "DashboardQuery",
]
