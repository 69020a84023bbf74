"""
Serving Module

The fetch cycle coordinator lives in `src.serving.service`.
"""
from .formatters import (
    format_channel_name,
    format_currency,
    format_date_for_display,
    format_date_range,
    format_number,
    format_percent,
    present_channel_dashboard,
    present_sales_dashboard,
)
from .snapshots import SnapshotEntry, SnapshotStore

__all__ = [
    "format_channel_name",
    "format_currency",
    "format_date_for_display",
    "format_date_range",
    "format_number",
    "format_percent",
    "present_channel_dashboard",
    "present_sales_dashboard",
    "SnapshotEntry",
    "SnapshotStore",
]
