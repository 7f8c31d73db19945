"""
Runtime configuration for the analytics service.
"""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from core.ids.canonical import GRANULARITY_YEAR
from core.schemas.durations import (
    INTERVAL_HIGH_PERCENTILE,
    INTERVAL_LOW_PERCENTILE,
    SURVIVAL_CURVE_POINTS,
)
from core.schemas.metrics import HIGH_CONFIDENCE_THRESHOLD, MIN_SAMPLE_FLOOR


class Settings(BaseSettings):
    """Configuration loaded from JUDICIAL_* environment variables."""

    min_sample_floor: int = Field(MIN_SAMPLE_FLOOR, ge=0)
    high_confidence_threshold: int = Field(HIGH_CONFIDENCE_THRESHOLD, ge=0)
    survival_curve_points: int = Field(SURVIVAL_CURVE_POINTS, ge=1)
    interval_low_percentile: float = Field(INTERVAL_LOW_PERCENTILE, ge=0.0, lt=1.0)
    interval_high_percentile: float = Field(INTERVAL_HIGH_PERCENTILE, ge=0.0, lt=1.0)
    period_granularity: str = Field(GRANULARITY_YEAR, pattern="^(year|month)$")
    baseline_lookback_years: int = Field(3, ge=0)
    fetch_limit: int = Field(5000, ge=1)
    baseline_fetch_limit: int = Field(10000, ge=1)

    model_config = SettingsConfigDict(
        env_prefix="JUDICIAL_", env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )


@lru_cache
def get_settings() -> Settings:
    """Return cached settings instance."""
    return Settings()
