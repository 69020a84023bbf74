"""
Dashboard Data Models

Typed shapes for everything the engine handles:
- Columnar tables as returned by the analytics endpoint
- Closed, immutable record types per dataset (products, periods, channels)
- Enriched records carrying derived metrics
- Dashboard snapshots handed to the presentation layer
"""

from datetime import date, datetime
from typing import Any, Dict, List, Optional, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

Scalar = Union[int, float, str, None]


# =============================================================================
# COLUMNAR TABLES
# =============================================================================

class Column(BaseModel):
    """One column of a query result: a name and one value per logical row."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str
    # The endpoint names this array "value"
    values: List[Scalar] = Field(
        default_factory=list,
        validation_alias=AliasChoices("values", "value"),
    )


# A query result is an ordered list of columns of equal length
ColumnarTable = List[Column]


# =============================================================================
# DATASET RECORDS
# =============================================================================

def _zero_if_null(value: Any) -> Any:
    return 0 if value is None else value


def _as_text(value: Any) -> Any:
    if value is None:
        return ""
    if isinstance(value, (int, float)):
        return str(value)
    return value


class _Record(BaseModel):
    """Immutable row record; extra columns from the query are ignored."""

    model_config = ConfigDict(frozen=True, extra="ignore")


class ProductRecord(_Record):
    """Units sold per product."""

    product_id: str
    product_name: str
    total_items_sold: float = Field(ge=0)

    @field_validator("product_id", "product_name", mode="before")
    @classmethod
    def coerce_text(cls, v: Any) -> Any:
        return _as_text(v)

    @field_validator("total_items_sold", mode="before")
    @classmethod
    def coerce_numbers(cls, v: Any) -> Any:
        return _zero_if_null(v)


class PeriodRecord(_Record):
    """Blended sales stats for one month."""

    month: str
    total_sales: float
    gross_product_sales: float
    orders_count: float = Field(ge=0)

    @field_validator("month", mode="before")
    @classmethod
    def coerce_text(cls, v: Any) -> Any:
        return _as_text(v)

    @field_validator("total_sales", "gross_product_sales", "orders_count", mode="before")
    @classmethod
    def coerce_numbers(cls, v: Any) -> Any:
        return _zero_if_null(v)


class PeriodMetrics(PeriodRecord):
    """Period record with derived sales metrics."""

    avg_order_value: float = 0.0
    discounts_returns: float = 0.0
    sales_growth: float = 0.0
    orders_growth: float = 0.0


class ChannelRecord(_Record):
    """Spend and attributed revenue for one marketing channel."""

    channel: str
    total_spend: float = Field(ge=0)
    total_revenue: float

    @field_validator("channel", mode="before")
    @classmethod
    def coerce_text(cls, v: Any) -> Any:
        return _as_text(v)

    @field_validator("total_spend", "total_revenue", mode="before")
    @classmethod
    def coerce_numbers(cls, v: Any) -> Any:
        return _zero_if_null(v)


class ChannelMetrics(ChannelRecord):
    """Channel record with return on ad spend."""

    roas: float = 0.0


class ChannelBreakdownRow(ChannelMetrics):
    """Channel metrics ranked within the full channel list."""

    revenue_share: float
    roas_tier: str
    display_name: str = ""
    display: Dict[str, str] = Field(default_factory=dict)


# =============================================================================
# DASHBOARD SNAPSHOTS
# =============================================================================

class DashboardSnapshot(BaseModel):
    """Fields shared by every dashboard snapshot."""

    model_config = ConfigDict(frozen=True)

    generation: int = 0
    start_date: date
    end_date: date
    generated_at: datetime = Field(default_factory=datetime.utcnow)
    queries: Optional[List[str]] = None
    display: Dict[str, str] = Field(default_factory=dict)


class SalesDashboard(DashboardSnapshot):
    """Top products and monthly sales performance."""

    products: List[ProductRecord]
    top_products: List[ProductRecord]
    total_items_sold: float

    periods: List[PeriodMetrics]
    latest_period: Optional[PeriodMetrics] = None
    total_sales: float
    total_gross_product_sales: float
    total_discounts_returns: float
    total_orders: float
    overall_avg_order_value: float


class ChannelDashboard(DashboardSnapshot):
    """Marketing channel spend, revenue and ROAS."""

    channels: List[ChannelMetrics]
    top_channels: List[ChannelMetrics]
    roas_chart: List[ChannelMetrics]
    breakdown: List[ChannelBreakdownRow]
    total_spend: float
    total_revenue: float
    overall_roas: float
    active_channels: int
