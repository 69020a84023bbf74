"""
Dashboard Domain Module
"""
from .exceptions import (
    AnalyticsError,
    DataUnavailableError,
    InvalidDateRangeError,
    MalformedTableError,
    SchemaMismatchError,
    TransportError,
)
from .models import (
    ChannelBreakdownRow,
    ChannelDashboard,
    ChannelMetrics,
    ChannelRecord,
    Column,
    ColumnarTable,
    PeriodMetrics,
    PeriodRecord,
    ProductRecord,
    SalesDashboard,
)

__all__ = [
    "AnalyticsError",
    "DataUnavailableError",
    "InvalidDateRangeError",
    "MalformedTableError",
    "SchemaMismatchError",
    "TransportError",
    "ChannelBreakdownRow",
    "ChannelDashboard",
    "ChannelMetrics",
    "ChannelRecord",
    "Column",
    "ColumnarTable",
    "PeriodMetrics",
    "PeriodRecord",
    "ProductRecord",
    "SalesDashboard",
]
