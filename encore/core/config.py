"""Application configuration via environment variables."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings loaded from environment variables or .env file."""
    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", env_prefix="ENCORE_"
    )

    # Application
    app_name: str = "Encore"
    debug: bool = False

    # Server
    host: str = "0.0.0.0"  # Bind to all interfaces for external access
    port: int = 8000
    allowed_origins: str = "*"  # Comma-separated origins, or "*" for all

    # Document store
    database_url: str = "sqlite:///./encore.db"

    # Catalog browsing
    catalog_fetch_limit: int = 100
    catalog_page_size: int = 15
    scroll_threshold_px: int = 20

    # Notifications
    notification_ttl_seconds: float = 4.0

    # Attendance summary reconciliation
    reconcile_enabled: bool = True
    summary_reconcile_interval_minutes: int = 30


settings = Settings()
