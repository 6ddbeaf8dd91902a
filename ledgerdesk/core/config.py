from __future__ import annotations

import os
from functools import lru_cache

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ledgerdesk.utils.currency import ALLOWED_CURRENCIES


class BaseAppSettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    APP_NAME: str = "LedgerDesk"
    ENV: str = "dev"
    DATABASE_URL: str | None = None

    # Exchange rates
    # Endpoint consulted when no stored rate exists for a pair (GET ?from=&to= -> {"rate": ...})
    FX_API_URL: str = "http://localhost:8000/api/fx"
    # ECB statistical data API backing our own /api/fx endpoint
    ECB_API_URL: str = "https://data-api.ecb.europa.eu/service/data"
    FX_HTTP_TIMEOUT: float = 10.0
    FX_CACHE_TTL_SECONDS: int = 4 * 60 * 60

    # Used when the settings row is missing or unreadable
    DEFAULT_BASE_CURRENCY: str = "USD"
    SKU_MAX_RETRIES: int = 10

    CORS_ALLOW_ORIGINS: list[str] = ["*"]
    CORS_ALLOW_METHODS: list[str] = ["*"]
    CORS_ALLOW_HEADERS: list[str] = ["*"]
    CORS_ALLOW_CREDENTIALS: bool = True
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "plain"
    # Every FX lookup goes through httpx; its per-request INFO lines drown the app logs
    LOG_QUIET_LOGGERS: list[str] = ["httpx", "httpcore"]
    APP_VERSION: str = "0.1.0"
    SENTRY_DSN: str | None = None
    SENTRY_TRACES_SAMPLE_RATE: float = 0.1

    @field_validator("DEFAULT_BASE_CURRENCY", mode="before")
    @classmethod
    def normalise_base_currency(cls, v):
        """Upper-case the code and make sure it is one we can price in."""
        code = str(v).strip().upper()
        if code not in ALLOWED_CURRENCIES:
            raise ValueError(f"DEFAULT_BASE_CURRENCY must be one of {', '.join(ALLOWED_CURRENCIES)}")
        return code

    @model_validator(mode="after")
    def _validate_required_fields(self) -> BaseAppSettings:
        # Convert Heroku-style postgres:// URLs to postgresql://
        if self.DATABASE_URL and self.DATABASE_URL.startswith("postgres://"):
            self.DATABASE_URL = self.DATABASE_URL.replace("postgres://", "postgresql://", 1)

        if self.ENV.lower() == "prod":
            missing = [name for name in ("DATABASE_URL",) if not getattr(self, name)]
            if missing:
                raise ValueError(f"Missing required production settings: {', '.join(missing)}")
            if self.SKU_MAX_RETRIES < 1:
                raise ValueError("SKU_MAX_RETRIES must be at least 1")
        return self


class DevSettings(BaseAppSettings):
    ENV: str = "dev"
    DATABASE_URL: str = "sqlite:///./storage/dev.db"


class TestSettings(BaseAppSettings):
    ENV: str = "test"
    DATABASE_URL: str = "sqlite:///:memory:"
    FX_API_URL: str = "http://testserver/api/fx"


class ProdSettings(BaseAppSettings):
    ENV: str = "prod"
    CORS_ALLOW_ORIGINS: list[str] = []
    LOG_FORMAT: str = "json"


_ENV_TO_SETTINGS: dict[str, type[BaseAppSettings]] = {
    "dev": DevSettings,
    "development": DevSettings,
    "test": TestSettings,
    "testing": TestSettings,
    "prod": ProdSettings,
    "production": ProdSettings,
}


@lru_cache
def get_settings() -> BaseAppSettings:
    env_name = os.getenv("APP_ENV") or os.getenv("ENV") or "dev"
    env = env_name.lower()
    settings_cls = _ENV_TO_SETTINGS.get(env, DevSettings)
    return settings_cls()


settings = get_settings()
