"""Application configuration using Pydantic Settings."""

from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic_settings import BaseSettings

# ===========================================
# Product Branding
# ===========================================
PRODUCT_NAME = "Stock Tracker"
PRODUCT_TAGLINE = "Your stocks, even when the market API is not answering."
PRODUCT_VERSION = "1.0.0"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Local cache
    storage_path: Path = Path.home() / ".stock_tracker" / "user.json"

    # Default user (first run, before anything is cached)
    user_name: str = "TestUser"
    user_id: Optional[str] = None  # Issued by the backend, never generated here

    # Data source: "mock" or "http"
    data_source: str = "mock"

    # Mock data source
    mock_failure_rate: float = 1 / 3
    mock_max_delay_seconds: float = 10.0

    # HTTP data source
    api_base_url: str = "http://localhost:8000"
    api_timeout_seconds: int = 30

    # Display
    datetime_format: str = "%x %H:%M"

    # Logging
    log_level: str = "INFO"

    class Config:
        env_file = ".env"
        env_prefix = "STOCK_TRACKER_"
        case_sensitive = False


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
