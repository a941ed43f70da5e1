"""
Configuration settings for the contextual FSRS engine.

Uses Pydantic Settings for environment variable management with .env file support.
"""
from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from contextual_fsrs.scheduling.parameters import DEFAULT_PARAMETERS, FSRSParameters


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ========================================
    # Logging
    # ========================================
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Logging verbosity level",
    )
    log_file: str | None = Field(
        default=None,
        description="Log file path (None for stderr only)",
    )

    # ========================================
    # FSRS Settings
    # ========================================
    fsrs_desired_retention: float = Field(
        default=0.9,
        gt=0.0,
        lt=1.0,
        description="Target retention used to size the next interval",
    )
    fsrs_parameters: str | None = Field(
        default=None,
        description="Comma-separated 21-weight override of the default FSRS vector",
    )

    # ========================================
    # Memo Cache
    # ========================================
    cache_enabled: bool = Field(
        default=True,
        description="Memoize DSR calculations",
    )
    cache_maintenance_interval_seconds: float = Field(
        default=600.0,
        gt=0,
        description="Seconds between expired-entry sweeps",
    )
    cache_stats_interval_seconds: float = Field(
        default=3600.0,
        gt=0,
        description="Seconds between cache stats log lines",
    )
    cache_memory_budget_mb: float = Field(
        default=50.0,
        gt=0,
        description="Estimated memory (MB) above which maintenance compacts the cache",
    )
    cache_maintenance_batch_size: int = Field(
        default=256,
        ge=1,
        description="Entries swept per lock acquisition during maintenance",
    )

    @field_validator("fsrs_parameters")
    @classmethod
    def _check_parameters(cls, value: str | None) -> str | None:
        if value:
            FSRSParameters.from_sequence(_split_weights(value))
        return value

    @property
    def cache_memory_budget_bytes(self) -> int:
        return int(self.cache_memory_budget_mb * 1024 * 1024)

    def get_fsrs_parameters(self) -> FSRSParameters:
        """Configured weight vector, or the built-in defaults."""
        if not self.fsrs_parameters:
            return DEFAULT_PARAMETERS
        return FSRSParameters.from_sequence(_split_weights(self.fsrs_parameters))

    def get_cache_config(self) -> dict[str, float | int | bool]:
        """Get memo cache configuration as a dictionary."""
        return {
            "enabled": self.cache_enabled,
            "maintenance_interval_seconds": self.cache_maintenance_interval_seconds,
            "stats_interval_seconds": self.cache_stats_interval_seconds,
            "memory_budget_bytes": self.cache_memory_budget_bytes,
            "maintenance_batch_size": self.cache_maintenance_batch_size,
        }


def _split_weights(value: str) -> list[float]:
    return [float(w.strip()) for w in value.split(",") if w.strip()]


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
