"""
Display Formatters

en-US formatting for dashboard values. These only format numbers the
engine has already derived; they never compute metrics.
"""

import re
from datetime import date, datetime
from typing import Dict, Union

from src.domain.models import ChannelBreakdownRow, ChannelDashboard, SalesDashboard


def format_currency(value: float) -> str:
    """Format as US dollars with two decimals, e.g. -$1,234.50"""
    sign = "-" if value < 0 else ""
    return f"{sign}${abs(value):,.2f}"


def format_number(value: float) -> str:
    """Format with thousands separators and two decimals"""
    return f"{value:,.2f}"


def format_percent(value: float, decimals: int = 1) -> str:
    """Format a percentage value, e.g. 12.345 -> 12.3%"""
    return f"{value:.{decimals}f}%"


def format_channel_name(channel: str) -> str:
    """Title-case a channel slug: 'paid_social-ads' -> 'Paid Social Ads'"""
    words = re.split(r"[-_]", channel)
    return " ".join(word[:1].upper() + word[1:] for word in words)


def format_date_for_display(value: Union[str, date]) -> str:
    """Format an ISO date as 'Jun 1, 2024'"""
    if isinstance(value, str):
        value = datetime.fromisoformat(value).date()
    elif isinstance(value, datetime):
        value = value.date()
    return f"{value.strftime('%b')} {value.day}, {value.year}"


def format_date_range(start_date: Union[str, date], end_date: Union[str, date]) -> str:
    return f"{format_date_for_display(start_date)} - {format_date_for_display(end_date)}"


def _present_breakdown_row(row: ChannelBreakdownRow) -> ChannelBreakdownRow:
    return row.model_copy(update={
        "display_name": format_channel_name(row.channel),
        "display": {
            "total_spend": format_currency(row.total_spend),
            "total_revenue": format_currency(row.total_revenue),
            "roas": format_number(row.roas) + "x",
            "revenue_share": format_percent(row.revenue_share),
        },
    })


def present_channel_dashboard(dashboard: ChannelDashboard) -> ChannelDashboard:
    """
    Attach display strings to a channel dashboard.

    Fills the summary cards (revenue, spend, ROAS, date range) and the
    display name and formatted cells of every breakdown row.
    """
    display: Dict[str, str] = {
        "date_range": format_date_range(dashboard.start_date, dashboard.end_date),
        "total_revenue": format_currency(dashboard.total_revenue),
        "total_spend": format_currency(dashboard.total_spend),
        "overall_roas": format_number(dashboard.overall_roas) + "x",
        "active_channels": str(dashboard.active_channels),
    }
    return dashboard.model_copy(update={
        "display": display,
        "breakdown": [_present_breakdown_row(row) for row in dashboard.breakdown],
    })


def present_sales_dashboard(dashboard: SalesDashboard) -> SalesDashboard:
    """Attach display strings for the sales summary cards."""
    display: Dict[str, str] = {
        "date_range": format_date_range(dashboard.start_date, dashboard.end_date),
        "total_sales": format_currency(dashboard.total_sales),
        "total_gross_product_sales": format_currency(dashboard.total_gross_product_sales),
        "total_discounts_returns": format_currency(dashboard.total_discounts_returns),
        "total_orders": format_number(dashboard.total_orders),
        "total_items_sold": format_number(dashboard.total_items_sold),
        "overall_avg_order_value": format_currency(dashboard.overall_avg_order_value),
    }
    if dashboard.latest_period is not None:
        display["latest_sales_growth"] = format_percent(dashboard.latest_period.sales_growth)
        display["latest_orders_growth"] = format_percent(dashboard.latest_period.orders_growth)
    return dashboard.model_copy(update={"display": display})
