from pydantic_settings import BaseSettings
from functools import lru_cache

class Settings(BaseSettings):
    # App Config
    APP_NAME: str = "LogShield"
    API_HOST: str = "0.0.0.0"
    API_PORT: int = 8000
    DEBUG: bool = True

    # Logging
    LOG_DIR: str = "logs"
    LOG_LEVEL: str = "DEBUG"
    LOG_TO_FILE: bool = True

    # History store
    HISTORY_CAPACITY: int = 2000

    # Ingestion
    INGEST_DELAY_SECONDS: float = 1.5  # visible "scanning" phase before parsing
    ERROR_DISPLAY_SECONDS: float = 4.0
    TABULAR_SEPARATOR: str = ","

    # Live feed (synthetic traffic)
    LIVE_FEED_ENABLED: bool = True
    LIVE_FEED_INTERVAL_SECONDS: float = 2.0

    # Chart series
    HOURLY_BUCKETS: int = 12
    VOLUME_BUCKETS: int = 20

    class Config:
        env_file = ".env"
        extra = "ignore"

@lru_cache()
def get_settings():
    return Settings()
