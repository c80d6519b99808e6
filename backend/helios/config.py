from pydantic_settings import BaseSettings
from pydantic import field_validator
from typing import Any


class Settings(BaseSettings):
    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}

    # App
    APP_ENV: str = "development"
    APP_DEBUG: bool = True
    LOG_LEVEL: str = "INFO"

    # CORS
    CORS_ORIGINS: list[str] = ["http://localhost:3000", "http://localhost:80"]

    @field_validator("CORS_ORIGINS", mode="before")
    @classmethod
    def parse_cors_origins(cls, v: Any) -> list[str]:
        if isinstance(v, str):
            import json
            try:
                return json.loads(v)
            except json.JSONDecodeError:
                return [origin.strip() for origin in v.split(",")]
        return v

    # Default location, used whenever a live fix can't be obtained in time
    DEFAULT_LOCATION_LABEL: str = "Berlin"
    DEFAULT_LATITUDE: float = 52.5200
    DEFAULT_LONGITUDE: float = 13.4050
    DEFAULT_TIMEZONE: str = "Europe/Berlin"

    # Budget for the whole location step before falling back to the default
    LOCATION_FALLBACK_TIMEOUT_MS: int = 7000

    # Live IP geolocation (optional, set URL to empty string to disable)
    GEOLOCATION_URL: str = "http://ip-api.com/json/"
    GEOLOCATION_TIMEOUT_MS: int = 6000
    GEOLOCATION_MAX_AGE_MS: int = 15 * 60 * 1000

    @property
    def geolocation_enabled(self) -> bool:
        return bool(self.GEOLOCATION_URL)

    # Sun depression angle for dawn/dusk (6 = civil twilight)
    TWILIGHT_DEPRESSION: float = 6.0


settings = Settings()
