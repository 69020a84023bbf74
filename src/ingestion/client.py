"""
Analytics Endpoint Client

Async HTTP client for the remote analytics endpoint. Submits an ordered
list of queries for a date range and returns one columnar table per query.
"""

from datetime import date
from typing import Any, List, Optional, Sequence

import httpx
import structlog
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from src.config import get_settings
from src.config.settings import AnalyticsApiSettings
from src.domain.exceptions import TransportError
from src.domain.models import Column

logger = structlog.get_logger(__name__)


class FetchRequest(BaseModel):
    """Request body sent to the query endpoint"""

    model_config = ConfigDict(populate_by_name=True)

    start_date: date = Field(alias="startDate")
    end_date: date = Field(alias="endDate")
    queries: List[str]
    shop_id: str = Field(alias="shopId")
    dynamic_data: bool = Field(default=True, alias="dynamicData")


class FetchResponse(BaseModel):
    """
    Response of the query endpoint.

    `data` holds one table per submitted query. A null table list reads as
    no tables; a null entry is kept so the dataset at that position is
    reported as absent. `messages` and `hasStructuredData` are passed
    through untouched.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    data: List[Optional[List[Column]]] = Field(default_factory=list)
    messages: List[Any] = Field(default_factory=list)
    has_structured_data: bool = Field(default=False, alias="hasStructuredData")
    queries: Optional[List[str]] = None

    @field_validator("data", "messages", mode="before")
    @classmethod
    def null_as_empty(cls, v: Any) -> Any:
        return [] if v is None else v


class AnalyticsClient:
    """
    Client for the analytics query endpoint.

    Example:
        async with AnalyticsClient() as client:
            response = await client.fetch(start, end, ["SELECT ..."])
    """

    def __init__(
        self,
        settings: Optional[AnalyticsApiSettings] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.settings = settings or get_settings().analytics_api
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    def _get_client(self) -> httpx.AsyncClient:
        """Get or create the underlying HTTP client"""
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self.settings.timeout_seconds,
                transport=self._transport,
                headers={"Content-Type": "application/json"},
            )
        return self._client

    async def aclose(self) -> None:
        """Close the underlying HTTP client"""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "AnalyticsClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def fetch(
        self,
        start_date: date,
        end_date: date,
        queries: Sequence[str],
    ) -> FetchResponse:
        """
        Run queries for a date range.

        Args:
            start_date: First day of the range
            end_date: Last day of the range
            queries: Query texts in submission order

        Returns:
            Parsed response with one table per query

        Raises:
            TransportError: On network failure, HTTP error status or an
                undecodable response body
        """
        request = FetchRequest(
            start_date=start_date,
            end_date=end_date,
            queries=list(queries),
            shop_id=self.settings.shop_id,
            dynamic_data=self.settings.dynamic_data,
        )
        url = self.settings.url

        logger.info(
            "Fetching analytics data",
            url=url,
            start_date=str(start_date),
            end_date=str(end_date),
            queries=len(request.queries),
        )

        try:
            response = await self._get_client().post(
                url,
                json=request.model_dump(mode="json", by_alias=True),
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            logger.error("Analytics request rejected", url=url, status_code=status)
            raise TransportError(
                f"Analytics service returned HTTP {status}",
                details={"status_code": status},
            ) from e
        except httpx.RequestError as e:
            logger.error("Analytics request failed", url=url, error=str(e))
            raise TransportError(
                f"Could not reach analytics service: {e}",
                details={"url": url},
            ) from e

        try:
            payload = FetchResponse.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            logger.error("Analytics response could not be decoded", url=url, error=str(e))
            raise TransportError("Analytics service returned an unreadable response") from e

        logger.info(
            "Analytics data received",
            tables=len(payload.data),
            messages=len(payload.messages),
        )
        return payload
