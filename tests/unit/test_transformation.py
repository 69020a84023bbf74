"""
Unit Tests - Data Transformation
"""
import pytest

from src.domain.exceptions import MalformedTableError
from src.domain.models import (
    ChannelRecord,
    Column,
    PeriodRecord,
    ProductRecord,
)
from src.transformation.aggregations import (
    filter_positive,
    roas_tier,
    safe_divide,
    share_of_total,
    sort_records,
    top_n,
    total,
)
from src.transformation.columnar import bind_rows, reconstruct_rows, table_row_count
from src.transformation.enrichers import MetricsEnricher, enrich_channel_data, enrich_period_data


def period(month, sales, orders, gross=None):
    return PeriodRecord(
        month=month,
        total_sales=sales,
        gross_product_sales=sales if gross is None else gross,
        orders_count=orders,
    )


def channel(name, spend, revenue):
    return ChannelRecord(channel=name, total_spend=spend, total_revenue=revenue)


class TestReconstructRows:
    """Tests for row reconstruction"""

    def test_rows_follow_source_order(self, table_factory):
        """Test R rows x C columns gives R records with all C fields"""
        table = table_factory(
            month=["2024-06", "2024-05", "2024-04"],
            total_sales=[1200, 1000, 800],
        )

        rows = reconstruct_rows(table)

        assert rows == [
            {"month": "2024-06", "total_sales": 1200},
            {"month": "2024-05", "total_sales": 1000},
            {"month": "2024-04", "total_sales": 800},
        ]

    def test_absent_table_is_empty(self):
        """Test None and column-less tables give no rows"""
        assert reconstruct_rows(None) == []
        assert reconstruct_rows([]) == []
        assert table_row_count(None) == 0

    def test_columns_without_values_are_empty(self, table_factory):
        """Test a table with columns but zero rows"""
        table = table_factory(channel=[], total_spend=[])

        assert reconstruct_rows(table) == []

    def test_shorter_column_is_malformed(self, table_factory):
        """Test columns disagreeing on length are rejected"""
        table = table_factory(channel=["a", "b", "c"], total_spend=[1.0, 2.0])

        with pytest.raises(MalformedTableError) as exc_info:
            reconstruct_rows(table)

        assert exc_info.value.details["column"] == "total_spend"
        assert exc_info.value.details["expected_rows"] == 3

    def test_longer_column_is_malformed(self, table_factory):
        """Test a column longer than the first column is rejected"""
        table = table_factory(channel=["a"], total_spend=[1.0, 2.0])

        with pytest.raises(MalformedTableError):
            reconstruct_rows(table)

    def test_duplicate_column_is_malformed(self):
        """Test a repeated column name is rejected"""
        table = [Column(name="channel", values=["a"]), Column(name="channel", values=["b"])]

        with pytest.raises(MalformedTableError):
            reconstruct_rows(table)

    def test_wire_value_key_is_accepted(self):
        """Test columns parse from the endpoint's 'value' key"""
        column = Column.model_validate({"name": "channel", "value": ["email", "sms"]})

        assert column.values == ["email", "sms"]


class TestBindRows:
    """Tests for typed record binding"""

    def test_numeric_strings_are_coerced(self):
        """Test string numbers and numeric identifiers bind"""
        rows = [{"product_id": 101, "product_name": "Belt", "total_items_sold": "12"}]

        records = bind_rows(rows, ProductRecord)

        assert records[0].product_id == "101"
        assert records[0].total_items_sold == 12.0

    def test_null_numbers_count_as_zero(self):
        """Test null metric cells become 0"""
        rows = [{"channel": "email", "total_spend": None, "total_revenue": 80}]

        records = bind_rows(rows, ChannelRecord)

        assert records[0].total_spend == 0

    def test_extra_columns_are_ignored(self):
        """Test columns outside the record shape are dropped"""
        rows = [{"channel": "email", "total_spend": 1, "total_revenue": 2, "clicks": 9}]

        records = bind_rows(rows, ChannelRecord)

        assert not hasattr(records[0], "clicks")

    def test_uncoercible_cell_is_malformed(self):
        """Test a non-numeric metric raises with the row index"""
        rows = [
            {"channel": "email", "total_spend": 1, "total_revenue": 2},
            {"channel": "sms", "total_spend": "abc", "total_revenue": 2},
        ]

        with pytest.raises(MalformedTableError) as exc_info:
            bind_rows(rows, ChannelRecord)

        assert exc_info.value.details["row_index"] == 1

    def test_negative_order_count_is_malformed(self):
        """Test order counts must not be negative"""
        rows = [{"month": "2024-06", "total_sales": 1, "gross_product_sales": 1, "orders_count": -1}]

        with pytest.raises(MalformedTableError):
            bind_rows(rows, PeriodRecord)


class TestMetricsEnricher:
    """Tests for derived metrics"""

    def test_avg_order_value_and_discounts(self):
        """Test same-row ratio and difference metrics"""
        result = enrich_period_data([period("2024-06", 1200, 40, gross=1300)])

        assert result[0].avg_order_value == pytest.approx(30.0)
        assert result[0].discounts_returns == pytest.approx(100.0)

    def test_zero_orders_gives_zero_aov(self):
        """Test orders_count == 0 gives avg_order_value == 0"""
        result = enrich_period_data([period("2024-06", 500, 0)])

        assert result[0].avg_order_value == 0

    def test_sales_growth_against_previous_month(self):
        """Test June growth is computed against May"""
        result = enrich_period_data([
            period("2024-06", 1200, 10),
            period("2024-05", 1000, 10),
        ])

        assert result[0].sales_growth == pytest.approx(20.0)

    def test_oldest_period_has_zero_growth(self):
        """Test the period with no predecessor gets zero growth"""
        result = enrich_period_data([
            period("2024-06", 1200, 40),
            period("2024-05", 1000, 50),
        ])

        assert result[-1].sales_growth == 0
        assert result[-1].orders_growth == 0

    def test_growth_is_signed_percentage(self):
        """Test a decline is reported as a negative percentage"""
        result = enrich_period_data([
            period("2024-06", 960, 40),
            period("2024-05", 1000, 50),
        ])

        assert result[0].sales_growth == pytest.approx(-4.0)
        assert result[0].orders_growth == pytest.approx(-20.0)

    def test_zero_previous_value_gives_zero_growth(self):
        """Test growth from a zero month is 0, not infinity"""
        result = enrich_period_data([
            period("2024-06", 1200, 10),
            period("2024-05", 0, 0),
        ])

        assert result[0].sales_growth == 0
        assert result[0].orders_growth == 0

    def test_input_is_not_modified(self):
        """Test enrichment returns new records in the same order"""
        records = [period("2024-06", 1200, 40), period("2024-05", 1000, 50)]

        result = MetricsEnricher().enrich_periods(records)

        assert [r.month for r in result] == ["2024-06", "2024-05"]
        assert not hasattr(records[0], "sales_growth")

    def test_empty_sequence(self):
        """Test enrichment of no records"""
        assert enrich_period_data([]) == []
        assert enrich_channel_data([]) == []

    def test_roas(self):
        """Test ROAS is revenue over spend, 0 when spend is 0"""
        result = enrich_channel_data([
            channel("facebook_ads", 1000, 5500),
            channel("email", 0, 800),
        ])

        assert result[0].roas == pytest.approx(5.5)
        assert result[1].roas == 0


class TestAggregations:
    """Tests for ranking and aggregation"""

    def test_stable_top_n(self):
        """Test ties keep original order and totals include excluded records"""
        records = [channel("a", 10, 100), channel("b", 10, 100), channel("c", 10, 50)]

        top = top_n(sort_records(records, "total_revenue"), 2)

        assert [r.channel for r in top] == ["a", "b"]
        assert total(records, "total_revenue") == 250

    def test_sort_ascending(self):
        """Test ascending sort keeps ties in original order"""
        records = [channel("a", 3, 1), channel("b", 1, 1), channel("c", 1, 1)]

        result = sort_records(records, "total_spend", descending=False)

        assert [r.channel for r in result] == ["b", "c", "a"]

    def test_sort_does_not_reorder_input(self):
        """Test sorting returns a new list"""
        records = [channel("a", 1, 10), channel("b", 1, 20)]

        sort_records(records, "total_revenue")

        assert [r.channel for r in records] == ["a", "b"]

    def test_top_n_with_fewer_records(self):
        """Test top-N returns everything when the sequence is short"""
        records = [channel("a", 1, 10)]

        assert top_n(records, 6) == records
        assert top_n(records, 0) == []

    def test_share_of_total_sums_to_100(self):
        """Test shares add up to 100 when the total is positive"""
        records = [channel("a", 1, 5500), channel("b", 1, 1500), channel("c", 1, 1050), channel("d", 1, 3)]

        shares = share_of_total(records, "total_revenue")

        assert sum(shares) == pytest.approx(100.0, abs=1e-6)
        assert shares[0] == pytest.approx(5500 / 8053 * 100)

    def test_share_of_zero_total(self):
        """Test every share is 0 when the total is 0"""
        records = [channel("a", 1, 0), channel("b", 1, 0)]

        assert share_of_total(records, "total_revenue") == [0.0, 0.0]

    def test_empty_aggregates(self):
        """Test aggregates over no records"""
        assert total([], "total_revenue") == 0
        assert share_of_total([], "total_revenue") == []
        assert sort_records([], "total_revenue") == []

    def test_safe_divide(self):
        """Test overall ratios follow the zero-denominator rule"""
        assert safe_divide(8050, 1750) == pytest.approx(4.6)
        assert safe_divide(800, 0) == 0

    def test_filter_positive(self):
        """Test only strictly positive values are kept"""
        records = [channel("a", 0, 10), channel("b", 5, 10)]

        assert [r.channel for r in filter_positive(records, "total_spend")] == ["b"]

    def test_roas_tier(self):
        """Test tier boundaries are exclusive"""
        assert roas_tier(5.5) == "high"
        assert roas_tier(5.0) == "medium"
        assert roas_tier(2.0) == "low"
        assert roas_tier(0) == "low"
        assert roas_tier(3.0, high=2.5, medium=1.0) == "high"
