"""Application settings.

Settings are loaded from environment variables prefixed with
``BEYOND_JANUARY_`` (or a local ``.env`` file) with sensible defaults.
"""

from __future__ import annotations

import os
from functools import lru_cache
from typing import Literal

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from beyond_january.counter import (
    MAX_GAP_SECONDS,
    MIN_GAP_SECONDS,
    NAMESPACE,
    DeterministicCounter,
    GapBounds,
    validate_gap_bounds,
)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="BEYOND_JANUARY_",
        env_file=".env",
        extra="ignore",
    )

    # Storage
    db_path: str = Field(default=os.path.join("data", "beyond_january.db"))

    # Logging
    log_level: str = Field(default="INFO")
    log_format: Literal["text", "json"] = Field(default="text")

    # Live counter on the home page
    counter_min_gap: int = Field(default=MIN_GAP_SECONDS)
    counter_max_gap: int = Field(default=MAX_GAP_SECONDS)
    counter_namespace: str = Field(default=NAMESPACE)
    counter_refresh_seconds: float = Field(default=1.0, gt=0)
    feed_refresh_seconds: float = Field(default=2.5, gt=0)

    # Goals
    max_active_goals: int = Field(default=5, ge=1)

    @model_validator(mode="after")
    def _check_counter_bounds(self) -> "Settings":
        validate_gap_bounds(self.counter_min_gap, self.counter_max_gap)
        return self

    def counter(self) -> DeterministicCounter:
        return DeterministicCounter(
            GapBounds(self.counter_min_gap, self.counter_max_gap),
            self.counter_namespace,
        )


@lru_cache
def get_settings() -> Settings:
    return Settings()
