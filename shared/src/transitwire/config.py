"""Engine configuration from environment variables."""

from __future__ import annotations

from functools import lru_cache

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings


class OrbSettings(BaseModel):
    """Maximum orb, in degrees, accepted for each aspect type."""

    conjunction: float = Field(default=10.0, ge=0.0, le=30.0)
    opposition: float = Field(default=10.0, ge=0.0, le=30.0)
    trine: float = Field(default=8.0, ge=0.0, le=30.0)
    square: float = Field(default=8.0, ge=0.0, le=30.0)
    sextile: float = Field(default=6.0, ge=0.0, le=30.0)

    def as_table(self) -> dict[str, float]:
        return self.model_dump()


class Settings(BaseSettings):
    """Engine settings loaded from environment variables."""

    # Observer (defaults to Greenwich)
    observer_latitude: float = Field(default=51.4769, ge=-90.0, le=90.0, alias="TRANSITS_OBSERVER_LATITUDE")
    observer_longitude: float = Field(default=0.0005, ge=-180.0, le=180.0, alias="TRANSITS_OBSERVER_LONGITUDE")
    observer_elevation: float = Field(default=0.0, alias="TRANSITS_OBSERVER_ELEVATION")

    # Windows and caps
    window_days: int = Field(default=30, ge=1, le=366, alias="TRANSITS_WINDOW_DAYS")
    impact_limit: int = Field(default=15, ge=0, alias="TRANSITS_IMPACT_LIMIT")
    aspect_list_limit: int = Field(default=8, ge=0, alias="TRANSITS_ASPECT_LIST_LIMIT")

    # Swiss Ephemeris
    topocentric: bool = Field(default=False, alias="TRANSITS_TOPOCENTRIC")
    swisseph_ephe_path: str = Field(default="", alias="SWISSEPH_EPHE_PATH")

    orbs: OrbSettings = Field(default_factory=OrbSettings, alias="TRANSITS_ORBS")

    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "env_nested_delimiter": "__",
        "extra": "ignore",
    }


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


def reset_settings_cache() -> None:
    """Clear cached settings (useful in tests)."""
    get_settings.cache_clear()
