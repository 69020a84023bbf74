"""
Dashboard Error Taxonomy

Every failure that ends a fetch cycle is an AnalyticsError. Each subclass
carries a machine-readable code and the HTTP status the API reports it with.
Zero denominators are not errors and never raise.
"""

from typing import Any, Dict, Optional


class AnalyticsError(Exception):
    """Base exception for dashboard fetch cycle failures."""

    code: str = "ANALYTICS_ERROR"
    status_code: int = 500

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    @property
    def title(self) -> str:
        """Short human-readable summary of the error type."""
        return self.code.replace("_", " ").title()


class TransportError(AnalyticsError):
    """The analytics endpoint could not be reached or returned an error."""

    code = "TRANSPORT_ERROR"
    status_code = 502


class MalformedTableError(AnalyticsError):
    """A columnar table cannot be turned into aligned row records."""

    code = "MALFORMED_TABLE"
    status_code = 422


class SchemaMismatchError(MalformedTableError):
    """A table is missing columns its dataset binding expects."""

    code = "SCHEMA_MISMATCH"


class DataUnavailableError(AnalyticsError):
    """No usable data came back for a dashboard."""

    code = "DATA_UNAVAILABLE"
    status_code = 404

    def __init__(
        self,
        message: str = "No data available",
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message, details)


class InvalidDateRangeError(AnalyticsError):
    """The requested start date falls after the end date."""

    code = "INVALID_DATE_RANGE"
    status_code = 400
