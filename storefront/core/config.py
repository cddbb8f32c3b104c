from typing import Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    APP_ENV: str = "development"
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = False

    DB_URL: str = "sqlite+aiosqlite:///./storefront.db"
    DB_ECHO: bool = False
    DB_CREATE_TABLES: bool = True

    # Google Sheets catalog of record
    LIVE_SHEET_ID: Optional[str] = None
    GOOGLE_SERVICE_ACCOUNT_INFO: Optional[str] = None
    GOOGLE_SERVICE_ACCOUNT_FILE: Optional[str] = None
    SHEET_DATA_RANGE: str = "A2:V1000"
    SHEET_FETCH_TIMEOUT: float = 10.0

    # Cache lifetimes, in seconds
    CACHE_DEFAULT_TTL: Optional[float] = None
    CATALOG_CACHE_TTL: float = 60.0
    PRODUCT_CACHE_TTL: float = 15 * 60.0

    IDENTITY_MODE: str = "legacy"

    CRON_SECRET: Optional[str] = None

    IMAGE_WARM_BATCH_SIZE: int = 5
    IMAGE_WARM_TIMEOUT: float = 10.0

    class Config:
        env_file = ".env"

    @property
    def is_production(self) -> bool:
        return self.APP_ENV.lower() in ("production", "prod")

    @property
    def default_cache_ttl(self) -> float:
        """Shorter lifetime in production."""
        if self.CACHE_DEFAULT_TTL is not None:
            return self.CACHE_DEFAULT_TTL
        return 30.0 if self.is_production else 60.0


settings = Settings()
