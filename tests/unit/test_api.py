"""
Unit Tests - Dashboard API
"""
from datetime import date

import pytest
from fastapi.testclient import TestClient

from src.domain.exceptions import TransportError
from src.ingestion.client import FetchResponse
from src.serving.api import create_api_app
from src.serving.service import DashboardService
from src.transformation.transformers import DashboardTransformer


class StaticClient:
    """Analytics client stand-in returning queued outcomes"""

    def __init__(self, *outcomes):
        self.outcomes = list(outcomes)
        self.calls = []

    async def fetch(self, start_date, end_date, queries):
        self.calls.append((start_date, end_date))
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    async def aclose(self):
        pass


@pytest.fixture
def api_factory(dashboard_settings):
    def factory(*outcomes):
        service = DashboardService(
            StaticClient(*outcomes),
            transformer=DashboardTransformer(settings=dashboard_settings),
        )
        return TestClient(create_api_app(service=service)), service
    return factory


class TestDashboardEndpoints:
    """Tests for dashboard endpoints"""

    def test_channel_dashboard(self, api_factory, channels_response):
        """Test the channel dashboard response body"""
        client, _ = api_factory(channels_response)

        response = client.get(
            "/api/v1/dashboards/channels",
            params={"start_date": "2024-06-01", "end_date": "2024-06-30"},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["total_revenue"] == pytest.approx(8050.0)
        assert body["active_channels"] == 4
        assert [c["channel"] for c in body["top_channels"]] == ["facebook_ads", "google-ads"]
        assert body["breakdown"][0]["roas_tier"] == "high"
        assert body["breakdown"][0]["display_name"] == "Facebook Ads"
        assert body["display"]["total_revenue"] == "$8,050.00"
        assert body["generation"] == 1

    def test_sales_dashboard(self, api_factory, sales_response):
        """Test the sales dashboard response body"""
        client, _ = api_factory(sales_response)

        response = client.get("/api/v1/dashboards/sales")

        assert response.status_code == 200
        body = response.json()
        assert body["periods"][0]["sales_growth"] == pytest.approx(20.0)
        assert body["start_date"] == date.today().isoformat()

    def test_no_data_available(self, api_factory):
        """Test an empty response maps to 404"""
        client, _ = api_factory(FetchResponse(data=[]))

        response = client.get("/api/v1/dashboards/channels")

        assert response.status_code == 404
        assert response.json()["detail"] == "No data available"

    def test_absent_table(self, api_factory):
        """Test a null table maps to 404"""
        client, _ = api_factory(FetchResponse(data=[None]))

        response = client.get("/api/v1/dashboards/channels")

        assert response.status_code == 404
        assert response.json()["code"] == "DATA_UNAVAILABLE"

    def test_malformed_table(self, api_factory, table_factory):
        """Test misaligned columns map to 422"""
        table = table_factory(channel=["a", "b"], total_spend=[1.0], total_revenue=[1.0, 2.0])
        client, _ = api_factory(FetchResponse(data=[table]))

        response = client.get("/api/v1/dashboards/channels")

        assert response.status_code == 422
        assert response.json()["code"] == "MALFORMED_TABLE"

    def test_transport_failure(self, api_factory):
        """Test transport errors map to 502"""
        client, _ = api_factory(TransportError("Analytics service returned HTTP 500"))

        response = client.get("/api/v1/dashboards/sales")

        assert response.status_code == 502
        assert response.json()["detail"] == "Analytics service returned HTTP 500"

    def test_invalid_date_range(self, api_factory):
        """Test start after end maps to 400"""
        client, service = api_factory()

        response = client.get(
            "/api/v1/dashboards/sales",
            params={"start_date": "2024-07-01", "end_date": "2024-06-01"},
        )

        assert response.status_code == 400
        assert service.client.calls == []


class TestLatestSnapshot:
    """Tests for the latest snapshot endpoint"""

    def test_latest_before_any_fetch(self, api_factory):
        """Test no snapshot yet maps to 404"""
        client, _ = api_factory()

        response = client.get("/api/v1/dashboards/channels/latest")

        assert response.status_code == 404

    def test_latest_after_fetch(self, api_factory, channels_response):
        """Test the published snapshot is served"""
        client, _ = api_factory(channels_response)
        client.get("/api/v1/dashboards/channels")

        response = client.get("/api/v1/dashboards/channels/latest")

        assert response.status_code == 200
        assert response.json()["overall_roas"] == pytest.approx(4.6)

    def test_latest_cleared_after_failure(self, api_factory, channels_response):
        """Test a failed cycle removes the published snapshot"""
        client, _ = api_factory(channels_response, TransportError("down"))
        client.get("/api/v1/dashboards/channels")
        client.get("/api/v1/dashboards/channels")

        response = client.get("/api/v1/dashboards/channels/latest")

        assert response.status_code == 404

    def test_unknown_dashboard(self, api_factory):
        """Test an unknown dashboard name is rejected"""
        client, _ = api_factory()

        response = client.get("/api/v1/dashboards/inventory/latest")

        assert response.status_code == 422


class TestHealth:
    """Tests for health endpoints"""

    def test_liveness(self, api_factory):
        client, _ = api_factory()

        assert client.get("/api/v1/health/live").json() == {"status": "alive"}

    def test_health_reports_dashboards(self, api_factory, channels_response):
        client, _ = api_factory(channels_response)
        client.get("/api/v1/dashboards/channels")

        body = client.get("/api/v1/health").json()

        assert body["status"] == "healthy"
        assert body["checks"]["dashboards"]["channels"] == {"generation": 1, "published": True}
        assert body["checks"]["dashboards"]["sales"] == {"generation": 0, "published": False}
