"""
Test Suite Configuration
"""
from typing import Callable, List

import pytest

from src.config import Settings
from src.config.settings import DashboardSettings
from src.domain.models import Column
from src.ingestion.client import FetchResponse


TableFactory = Callable[..., List[Column]]


def _make_table(**columns) -> List[Column]:
    return [Column(name=name, values=list(values)) for name, values in columns.items()]


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    """Create test settings"""
    return Settings(app_env="testing")


@pytest.fixture
def dashboard_settings() -> DashboardSettings:
    """Dashboard limits used by the transformer tests"""
    return DashboardSettings(top_products=2, top_channels=2)


@pytest.fixture
def table_factory() -> TableFactory:
    """Build a columnar table from keyword column lists"""
    return _make_table


@pytest.fixture
def products_table() -> List[Column]:
    """Top products query result"""
    return _make_table(
        product_id=["prod-1", "prod-2", "prod-3"],
        product_name=["Wrist Wraps", "Lifting Belt", "Chalk Ball"],
        total_items_sold=[30, 50, 30],
    )


@pytest.fixture
def periods_table() -> List[Column]:
    """Monthly blended stats, most recent month first"""
    return _make_table(
        month=["2024-06", "2024-05", "2024-04"],
        total_sales=[1200.0, 1000.0, 800.0],
        gross_product_sales=[1300.0, 1100.0, 850.0],
        orders_count=[40, 50, 0],
    )


@pytest.fixture
def channels_table() -> List[Column]:
    """Channel performance query result"""
    return _make_table(
        channel=["facebook_ads", "google-ads", "email", "tiktok_ads"],
        total_spend=[1000.0, 500.0, 0.0, 250.0],
        total_revenue=[5500.0, 1500.0, 800.0, 250.0],
    )


@pytest.fixture
def sales_response(products_table, periods_table) -> FetchResponse:
    """Analytics response for the sales dashboard queries"""
    return FetchResponse(
        data=[products_table, periods_table],
        messages=[],
        has_structured_data=True,
    )


@pytest.fixture
def channels_response(channels_table) -> FetchResponse:
    """Analytics response for the channel dashboard query"""
    return FetchResponse(
        data=[channels_table],
        messages=[],
        has_structured_data=True,
        queries=["SELECT channel ..."],
    )
