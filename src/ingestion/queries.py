"""
Dashboard Queries

Query texts submitted to the analytics endpoint, each paired with the schema
and record type of the table it returns. The endpoint answers with one table
per query, in submission order.
"""

from dataclasses import dataclass
from typing import List, Sequence

from src.domain.models import ChannelRecord, PeriodRecord, ProductRecord
from src.quality.validators import DatasetBinding, TableSchema


@dataclass(frozen=True)
class DashboardQuery:
    """A query text and the dataset binding for its result"""
    sql: str
    binding: DatasetBinding


PRODUCT_TABLE = TableSchema(
    name="products",
    columns=("product_id", "product_name", "total_items_sold"),
)

PERIOD_TABLE = TableSchema(
    name="monthly_sales",
    columns=("month", "total_sales", "gross_product_sales", "orders_count"),
)

CHANNEL_TABLE = TableSchema(
    name="channels",
    columns=("channel", "total_spend", "total_revenue"),
)


TOP_PRODUCTS_SQL = """
SELECT
  pat.product_id AS product_id,
  pat.product_name AS product_name,
  SUM(pat.total_items_sold) AS total_items_sold
FROM
  product_analytics_tvf() AS pat
WHERE
  pat.event_date BETWEEN toStartOfYear(CURRENT_DATE()) - INTERVAL 1 YEAR AND toStartOfYear(CURRENT_DATE()) - 1
GROUP BY
  pat.product_id,
  pat.product_name
ORDER BY
  total_items_sold DESC
LIMIT
  10;
"""

MONTHLY_SALES_SQL = """
SELECT
  formatDateTime(bs.event_date, '%Y-%m') AS month,
  SUM(bs.total_sales) AS total_sales,
  SUM(bs.gross_product_sales) AS gross_product_sales,
  SUM(bs.orders_count) AS orders_count
FROM
  blended_stats_tvf() AS bs
WHERE
  bs.event_date BETWEEN toStartOfMonth(CURRENT_DATE()) - INTERVAL 12 MONTH AND toStartOfMonth(CURRENT_DATE()) - 1
GROUP BY
  month
ORDER BY
  month DESC;
"""

# Triple attribution model, lifetime window
CHANNEL_PERFORMANCE_SQL = """
SELECT
  pj.channel AS channel,
  SUM(pj.spend) AS total_spend,
  SUM(pj.attributed_revenue) AS total_revenue
FROM
  pixel_journeys_tvf(attribution_model => 'Triple Attribution', attribution_window => 'lifetime') AS pj
GROUP BY
  pj.channel
ORDER BY
  total_revenue DESC;
"""


SALES_DASHBOARD_QUERIES: List[DashboardQuery] = [
    DashboardQuery(TOP_PRODUCTS_SQL, DatasetBinding("products", PRODUCT_TABLE, ProductRecord)),
    DashboardQuery(MONTHLY_SALES_SQL, DatasetBinding("periods", PERIOD_TABLE, PeriodRecord)),
]

CHANNEL_DASHBOARD_QUERIES: List[DashboardQuery] = [
    DashboardQuery(CHANNEL_PERFORMANCE_SQL, DatasetBinding("channels", CHANNEL_TABLE, ChannelRecord)),
]


def query_texts(queries: Sequence[DashboardQuery]) -> List[str]:
    """Query texts in submission order"""
    return [query.sql.strip() for query in queries]


def query_bindings(queries: Sequence[DashboardQuery]) -> List[DatasetBinding]:
    """Dataset bindings in submission order"""
    return [query.binding for query in queries]
