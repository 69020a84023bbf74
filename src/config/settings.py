"""
Storefront Analytics Dashboard
Centralized Configuration Management

This module provides configuration management using Pydantic settings with
environment variable support, validation, and type safety.
"""

from functools import lru_cache
from typing import List
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class AnalyticsApiSettings(BaseSettings):
    """Remote Analytics Endpoint Configuration"""

    model_config = SettingsConfigDict(env_prefix="ANALYTICS_API_")

    base_url: str = Field(default="http://localhost", description="Analytics service base URL")
    data_path: str = Field(default="/api/v2/shnel/get-data", description="Query execution endpoint path")
    shop_id: str = Field(default="westside-barbell.myshopify.com", description="Shop identifier sent with every request")
    dynamic_data: bool = Field(default=True, description="Ask the service to resolve dynamic table functions")
    timeout_seconds: float = Field(default=30.0, description="Request timeout in seconds")

    @property
    def url(self) -> str:
        """Full URL of the query endpoint"""
        return f"{self.base_url.rstrip('/')}/{self.data_path.lstrip('/')}"


class DashboardSettings(BaseSettings):
    """Dashboard Presentation Limits and Thresholds"""

    model_config = SettingsConfigDict(env_prefix="DASHBOARD_")

    top_products: int = Field(default=10, description="Products shown in the top products chart")
    top_channels: int = Field(default=6, description="Channels shown in the revenue chart")
    roas_high_threshold: float = Field(default=5.0, description="ROAS above this is rated high")
    roas_medium_threshold: float = Field(default=2.0, description="ROAS above this is rated medium")

    @field_validator("top_products", "top_channels")
    @classmethod
    def validate_limits(cls, v: int) -> int:
        """Top-N limits must be positive"""
        if v < 1:
            raise ValueError("Top-N limits must be at least 1")
        return v


class SecuritySettings(BaseSettings):
    """Security Configuration"""

    model_config = SettingsConfigDict(env_prefix="")

    # CORS
    cors_origins: List[str] = Field(
        default=["http://localhost:3000", "http://localhost:5173"],
        description="Allowed CORS origins"
    )


class MonitoringSettings(BaseSettings):
    """Monitoring and Observability Configuration"""

    model_config = SettingsConfigDict(env_prefix="")

    # Logging
    log_level: str = Field(default="INFO", alias="LOG_LEVEL", description="Logging level")
    log_format: str = Field(default="json", alias="LOG_FORMAT", description="Log format: json or text")


class Settings(BaseSettings):
    """
    Main Application Settings

    Aggregates all configuration sections and provides a single entry point
    for accessing application configuration.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    # Application
    app_name: str = Field(default="storefront-analytics", alias="APP_NAME", description="Application name")
    app_env: str = Field(default="development", alias="APP_ENV", description="Environment")

    # API Server
    api_host: str = Field(default="0.0.0.0", alias="API_HOST", description="API host")
    api_port: int = Field(default=8000, alias="API_PORT", description="API port")

    # Version
    version: str = Field(default="1.0.0", description="Application version")

    # Subsystem configurations
    analytics_api: AnalyticsApiSettings = Field(default_factory=AnalyticsApiSettings)
    dashboard: DashboardSettings = Field(default_factory=DashboardSettings)
    security: SecuritySettings = Field(default_factory=SecuritySettings)
    monitoring: MonitoringSettings = Field(default_factory=MonitoringSettings)

    @field_validator("app_env")
    @classmethod
    def validate_env(cls, v: str) -> str:
        """Validate environment value"""
        allowed = ["development", "staging", "production", "testing"]
        if v.lower() not in allowed:
            raise ValueError(f"Environment must be one of: {allowed}")
        return v.lower()

    @property
    def is_development(self) -> bool:
        """Check if running in development"""
        return self.app_env == "development"


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached application settings.

    Uses LRU cache to ensure settings are only loaded once.

    Returns:
        Settings: Application settings instance
    """
    return Settings()
