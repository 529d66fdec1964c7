"""
Configuration Management for FinDash

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
Report windows, display caps and the duplicate tolerance live next to the
storage and feed settings so every tunable number has exactly one home.
"""

from decimal import Decimal
from functools import lru_cache
from pathlib import Path
from typing import Literal, Optional

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class EngineSettings(BaseSettings):
    """Windows and caps used by the report engine."""

    model_config = SettingsConfigDict(
        env_prefix="FINDASH_ENGINE_",
        extra="ignore"
    )

    balance_window_days: int = Field(
        default=180,
        ge=1,
        description="Trailing days shown by the balance history"
    )
    heatmap_window_days: int = Field(
        default=91,
        ge=1,
        description="Trailing days shown by the expense heatmap (13 weeks)"
    )
    trend_top_n: int = Field(
        default=5,
        ge=1,
        le=20,
        description="Categories kept as their own series in the trend"
    )
    monthly_flow_months: int = Field(
        default=6,
        ge=1,
        le=36,
    )
    upcoming_bills_limit: int = Field(
        default=5,
        ge=1,
        description="Maximum upcoming bills listed"
    )
    due_soon_days: int = Field(
        default=3,
        ge=0,
        description="A bill due within this many days is flagged"
    )
    conversion_candidates_limit: int = Field(
        default=10,
        ge=1,
    )
    duplicate_tolerance: Decimal = Field(
        default=Decimal("0.01"),
        gt=0,
        description="Amounts closer than this are the same money movement"
    )


class StorageSettings(BaseSettings):
    """Record store configuration."""

    model_config = SettingsConfigDict(
        env_prefix="FINDASH_STORAGE_",
        extra="ignore"
    )

    backend: Literal["memory", "json"] = Field(
        default="memory",
        description="Which record store implementation to use"
    )
    data_dir: Path = Field(
        default=Path("data"),
        description="Directory holding one JSON document per owner"
    )
    retry_attempts: int = Field(
        default=3,
        ge=1,
        le=10,
        description="Attempts for transient file system failures"
    )

    @field_validator('data_dir')
    @classmethod
    def validate_data_dir(cls, v: Path) -> Path:
        """Reject paths that exist but are not directories."""
        if v.exists() and not v.is_dir():
            raise ValueError(f"Storage data_dir is not a directory: {v}")
        return v


class FeedSettings(BaseSettings):
    """Simulated bank feed configuration."""

    model_config = SettingsConfigDict(
        env_prefix="FINDASH_FEED_",
        extra="ignore"
    )

    min_items: int = Field(default=10, ge=1)
    max_items: int = Field(default=15, ge=1)
    lookback_days: int = Field(
        default=30,
        ge=1,
        description="Generated candidates fall within this many trailing days"
    )
    seed: Optional[int] = Field(
        default=None,
        description="Fix the generator seed for reproducible imports"
    )

    @model_validator(mode='after')
    def validate_item_range(self) -> 'FeedSettings':
        if self.max_items < self.min_items:
            raise ValueError("max_items cannot be below min_items")
        return self


class AppSettings(BaseSettings):
    """
    Main application settings.

    Loads configuration from environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    app_environment: str = Field(
        default="development",
        description="Application environment"
    )
    debug_mode: bool = Field(
        default=False,
        description="Enable debug mode"
    )
    log_level: str = Field(
        default="INFO",
        pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$",
    )


class Settings(BaseSettings):
    """
    Root settings container.

    Aggregates all sub-settings for easy access.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    @property
    def engine(self) -> EngineSettings:
        return EngineSettings()

    @property
    def storage(self) -> StorageSettings:
        return StorageSettings()

    @property
    def feed(self) -> FeedSettings:
        return FeedSettings()

    @property
    def app(self) -> AppSettings:
        return AppSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()


def validate_all_settings() -> dict[str, bool]:
    """
    Validate all settings are properly configured.

    Returns a dict of {setting_name: is_valid}, with a ``<name>_error``
    entry describing each failure. Useful for startup checks.
    """
    results = {}
    settings = get_settings()

    for name in ("engine", "storage", "feed", "app"):
        try:
            getattr(settings, name)
            results[name] = True
        except ValueError as e:
            results[name] = False
            results[f"{name}_error"] = str(e)

    return results
