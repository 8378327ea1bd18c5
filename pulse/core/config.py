"""
Settings and environment management for the n8n Pulse analytics backend.

Configuration is loaded by pydantic-settings from environment variables and
an optional .env file, validated and cached behind get_settings().

Environment Variables:
- DATA_ROOT: Directory the registry's /data/... file paths resolve under
  (default: public)
- DATA_BASE_URL: When set, history files are fetched over HTTP from this base
  URL instead of read from disk
- FETCH_TIMEOUT_SECONDS: HTTP timeout for remote fetches (default: 10.0)
- CORS_ORIGINS: Allowed front-end origins
- LOG_LEVEL: Root logging level (default: INFO)
- PREDICTION_LOOKBACK_MONTHS: Months of history used for forecasts (default: 6)
- PREDICTION_MIN_DATA_POINTS: Minimum points required to forecast (default: 4)

Usage:
    from pulse.core.config import get_settings

    settings = get_settings()
    root = settings.data_root
"""

from functools import lru_cache
from typing import List, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Attributes:
        data_root: Local directory holding the `data/` tree of history files.
        data_base_url: Optional base URL; enables remote fetching via httpx.
        fetch_timeout_seconds: Timeout applied to each remote fetch.
        cors_origins: Origins allowed by the CORS middleware.
        log_level: Logging level name passed to logging.basicConfig.
        prediction_lookback_months: Lookback window for milestone forecasts.
        prediction_min_data_points: Minimum positive points for a forecast.
    """

    model_config = SettingsConfigDict(
        env_file='.env',
        env_file_encoding='utf-8',
        extra='ignore',
        case_sensitive=False,
    )

    # =========================================================================
    # Data Files
    # =========================================================================

    # Registry paths look like /data/history/github.json and are joined
    # onto this directory with the leading slash removed
    data_root: str = 'public'

    # e.g. https://n8n-pulse.example.com; files are then requested as
    # {data_base_url}/data/history/github.json
    data_base_url: Optional[str] = None

    fetch_timeout_seconds: float = 10.0

    # =========================================================================
    # HTTP Server
    # =========================================================================

    cors_origins: List[str] = [
        'http://localhost:3000',
        'http://localhost:4321',
        'http://127.0.0.1:4321',
    ]

    log_level: str = 'INFO'

    # =========================================================================
    # Prediction Defaults
    # =========================================================================

    prediction_lookback_months: int = 6
    prediction_min_data_points: int = 4


@lru_cache()
def get_settings() -> Settings:
    """
    Get the application settings singleton.

    Returns:
        Settings: The cached settings instance.

    Note:
        Tests that change the environment must clear the cache:
        >>> get_settings.cache_clear()
    """
    return Settings()
