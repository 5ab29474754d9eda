"""Application settings and configuration management using Pydantic."""

from functools import lru_cache
from typing import Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Main application settings combining all configuration sections."""

    # Environment and deployment
    environment: str = "development"
    debug: bool = False

    # Market data providers
    finnhub_api_key: Optional[str] = None
    finnhub_base_url: str = "https://finnhub.io/api/v1"
    alpha_vantage_api_key: Optional[str] = None
    alpha_vantage_base_url: str = "https://www.alphavantage.co/query"
    http_timeout_seconds: float = 10.0

    # Telegram settings
    telegram_bot_token: Optional[str] = None
    telegram_chat_id: Optional[str] = None

    # Scan trigger
    cron_secret: Optional[str] = None
    watchlist_path: str = "data/watchlist.json"
    scan_indicator_source: str = "synthetic"  # 'synthetic' or 'live'

    # Pacing (seconds)
    ticker_pacing_seconds: float = 0.3
    news_alert_pacing_seconds: float = 0.5
    alpha_vantage_min_interval_seconds: float = 0.5

    # Cache TTLs (seconds)
    quote_ttl_seconds: int = 60
    candles_ttl_seconds: int = 3600
    indicators_ttl_seconds: int = 3600
    news_ttl_seconds: int = 1800

    # News window
    news_lookback_days: int = 7
    news_limit: int = 10

    # API settings
    endpoint_host: str = "0.0.0.0"
    endpoint_port: int = 8000
    api_reload: bool = False
    api_log_level: str = "INFO"

    # Logging settings
    log_level: str = "INFO"
    log_format: str = "structured"  # 'structured' or 'plain'
    log_file_enabled: bool = False
    log_file_path: str = "data/quantleap.log"
    log_max_file_size: str = "10MB"
    log_backup_count: int = 5

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "ignore",  # Ignore extra environment variables
    }

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v):
        """Validate environment setting."""
        valid_environments = ["development", "testing", "production"]
        if v.lower() not in valid_environments:
            raise ValueError(f"Environment must be one of: {valid_environments}")
        return v.lower()

    @field_validator("telegram_chat_id")
    @classmethod
    def validate_chat_id(cls, v):
        """Validate that chat_id is numeric (Telegram chat IDs are numeric)."""
        if v is not None and not v.lstrip("-").isdigit():
            raise ValueError("chat_id must be numeric")
        return v

    @field_validator("scan_indicator_source")
    @classmethod
    def validate_indicator_source(cls, v):
        """Validate where the scan reads indicators from."""
        valid_sources = ["synthetic", "live"]
        if v.lower() not in valid_sources:
            raise ValueError(f"Indicator source must be one of: {valid_sources}")
        return v.lower()

    @field_validator(
        "ticker_pacing_seconds",
        "news_alert_pacing_seconds",
        "alpha_vantage_min_interval_seconds",
    )
    @classmethod
    def validate_pacing(cls, v):
        """Pacing delays cannot be negative."""
        if v < 0:
            raise ValueError("Pacing delay must be zero or positive")
        return v

    @field_validator("endpoint_port")
    @classmethod
    def validate_port(cls, v):
        """Validate port number is in valid range."""
        if v < 1 or v > 65535:
            raise ValueError("Port must be between 1 and 65535")
        return v

    @field_validator("log_level", "api_log_level")
    @classmethod
    def validate_log_level(cls, v):
        """Validate log level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"Log level must be one of: {valid_levels}")
        return v.upper()

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v):
        """Validate log format."""
        valid_formats = ["structured", "plain"]
        if v.lower() not in valid_formats:
            raise ValueError(f"Log format must be one of: {valid_formats}")
        return v.lower()

    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.environment == "production"


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached application settings.

    Returns:
        Settings: Application configuration instance
    """
    return Settings()


def get_required_env_vars() -> list[str]:
    """
    Get list of environment variables required in production.

    Returns:
        list: List of required environment variable names
    """
    return [
        "FINNHUB_API_KEY",
        "ALPHA_VANTAGE_API_KEY",
        "TELEGRAM_BOT_TOKEN",
        "TELEGRAM_CHAT_ID",
        "CRON_SECRET",
    ]


def validate_required_settings(settings: Optional[Settings] = None) -> list[str]:
    """
    Return the required settings that are not configured.

    Args:
        settings: Settings to check (defaults to the cached instance)

    Returns:
        list: Names of missing environment variables, empty when complete
    """
    settings = settings or get_settings()
    return [
        name
        for name in get_required_env_vars()
        if not getattr(settings, name.lower(), None)
    ]
