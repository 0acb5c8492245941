"""
Configuration settings for the memcurve review engine.

Uses Pydantic Settings for environment variable management with .env file support.
"""
from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ========================================
    # Storage
    # ========================================
    database_url: str = Field(
        default="sqlite:///memcurve.db",
        description="SQLAlchemy connection string for item storage",
    )

    # ========================================
    # Logging
    # ========================================
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="WARNING",
        description="Logging level for the stderr sink",
    )
    log_file: str | None = Field(
        default=None,
        description="Optional log file path (rotated at 10 MB)",
    )

    # ========================================
    # Review Scheduling
    # ========================================
    max_items_per_day: int = Field(
        default=20,
        description="Upper bound on items in a generated daily plan",
    )
    fast_retry_minutes: int = Field(
        default=10,
        description="Retry delay for overdue items whose last review failed",
    )
    active_review_window_minutes: int = Field(
        default=5,
        description="A pending plan entry inside this window marks the item as active",
    )
    urgent_window_minutes: int = Field(
        default=60,
        description="Look-ahead window for urgent reviews",
    )
    urgent_retention_threshold: float = Field(
        default=50.0,
        description="Items below this recorded retention (%) are urgent when due soon",
    )
    forecast_days: int = Field(
        default=30,
        description="Default horizon for long-term retention forecasts",
    )

    # ========================================
    # Reminders
    # ========================================
    reminder_lead_minutes: int = Field(
        default=15,
        description="Remind about items due within this many minutes",
    )
    reminder_check_interval_seconds: int = Field(
        default=60,
        description="Cadence of the periodic reminder check",
    )

    def get_scheduler_config(self) -> dict[str, float | int]:
        """Get review scheduler keyword arguments as a dictionary."""
        return {
            "fast_retry_minutes": self.fast_retry_minutes,
            "active_review_window_minutes": self.active_review_window_minutes,
            "urgent_window_minutes": self.urgent_window_minutes,
            "urgent_retention_threshold": self.urgent_retention_threshold,
        }


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
