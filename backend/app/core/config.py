"""Configuration management using Pydantic v2 settings.
"""
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings
from pydantic_settings import SettingsConfigDict


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=False, extra="ignore"
    )

    # Application
    app_name: str = Field(default="Industry Mapper API", description="Application name")
    debug: bool = Field(default=False, description="Debug mode")
    environment: str = Field(
        default="development", description="Environment (development, production, test)"
    )

    # Database (watchlist persistence)
    database_url: str = Field(
        default="sqlite+aiosqlite:///./industry_mapper.db",
        description="Async database URL",
    )
    database_echo: bool = Field(default=False, description="Echo SQL statements")

    # API
    api_v1_prefix: str = Field(default="/api/v1", description="API v1 prefix")
    cors_origins: list[str] = Field(
        default=["http://localhost:3000", "http://localhost:5173", "http://localhost:8000"],
        description="Allowed CORS origins",
    )
    process_rate_limit: str = Field(
        default="120/minute", description="Rate limit for the bulk symbol processing endpoint"
    )

    # Logging
    log_level: str = Field(default="INFO", description="Log level")

    # Reference data sources
    data_source: str = Field(
        default="file",
        description="Where CSV reference data is read from: 'file', 'http' or 'mock'",
    )
    data_dir: str = Field(default="data", description="Directory holding the CSV files")
    data_base_url: str = Field(
        default="http://localhost:3000/data",
        description="Base URL the CSV files are served from when data_source='http'",
    )
    basic_rs_filename: str = Field(
        default="Basic_RS_Setup.csv", description="Stock, industry and fundamentals dataset"
    )
    industry_analytics_filename: str = Field(
        default="Industry_Analytics.csv", description="Industry catalog dataset (headerless)"
    )
    results_calendar_filename: str = Field(
        default="Results_Calendar.csv", description="Quarterly results calendar dataset"
    )

    # HTTP data source retry policy
    http_timeout: float = Field(default=5.0, description="Per-request timeout in seconds")
    http_max_retries: int = Field(
        default=3, description="Maximum attempts per CSV download"
    )
    http_retry_delay: float = Field(
        default=0.5,
        description="Initial delay between retries in seconds (uses exponential backoff)",
    )

    # Industry mapper
    mapper_init_timeout: float = Field(
        default=10.0, description="Deadline in seconds for loading all reference data"
    )
    mapper_hot_cache_industries: int = Field(
        default=10, description="Number of largest industries preloaded into the hot cache"
    )
    mapper_hot_cache_max_entries: int = Field(
        default=64, description="Upper bound on industries held in the hot cache"
    )
    mapper_max_symbols: int = Field(
        default=999, description="Symbols beyond this count are truncated from bulk requests"
    )
    mapper_fallback_on_failure: bool = Field(
        default=True,
        description="Serve a single placeholder symbol when loading fails instead of staying unready",
    )

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.environment.lower() == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment.lower() == "production"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    Returns:
        Settings: Application settings
    """
    return Settings()
