"""
Configuration settings for the practice engine.

Uses Pydantic Settings for environment variable management with .env file support.
All variables are read with the ``PRACTICE_`` prefix, e.g. ``PRACTICE_STORAGE_BACKEND``.
"""
from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_DATA_DIR = Path.home() / ".practice_engine"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="PRACTICE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ========================================
    # Storage
    # ========================================
    storage_backend: Literal["memory", "file", "sql"] = Field(
        default="file",
        description="Where learner records are persisted",
    )
    data_dir: Path = Field(
        default=DEFAULT_DATA_DIR,
        description="Directory for the file backend",
    )
    database_url: str = Field(
        default=f"sqlite:///{DEFAULT_DATA_DIR / 'progress.db'}",
        description="SQLAlchemy connection string for the sql backend",
    )
    key_prefix: str = Field(
        default="learning_",
        description="Prefix prepended to every learner/subject storage key",
    )

    # ========================================
    # Scheduling
    # ========================================
    weight_min: float = Field(default=0.1, gt=0)
    weight_max: float = Field(default=5.0, gt=0)
    default_weight: float = Field(
        default=1.0,
        description="Weight of a concept that has never been attempted",
    )
    correct_decay: float = Field(
        default=0.8,
        gt=0,
        le=1,
        description="Multiplier applied to a concept's weight after a correct answer",
    )
    incorrect_boost: float = Field(
        default=1.5,
        ge=1,
        description="Multiplier applied to a concept's weight after a wrong answer",
    )
    recency_window_seconds: float = Field(
        default=300.0,
        gt=0,
        description="Time since last seen that earns one full unit of recency boost",
    )
    recency_cap: float = Field(default=2.0, ge=0)

    # ========================================
    # Progression
    # ========================================
    unlock_min_attempts: int = Field(default=10, ge=1)
    unlock_accuracy: float = Field(default=0.8, ge=0, le=1)
    mastery_min_attempts: int = Field(default=5, ge=1)
    mastery_accuracy: float = Field(default=0.9, ge=0, le=1)

    # ========================================
    # Logging
    # ========================================
    log_level: str = Field(default="INFO")

    @field_validator("data_dir", mode="before")
    @classmethod
    def _expand_data_dir(cls, value):
        return Path(value).expanduser()

    @field_validator("log_level")
    @classmethod
    def _upper_log_level(cls, value: str) -> str:
        return value.upper()

    def get_scheduler_config(self) -> dict[str, float]:
        """Scheduling constants as keyword arguments for SchedulerConfig."""
        return {
            "weight_min": self.weight_min,
            "weight_max": self.weight_max,
            "default_weight": self.default_weight,
            "correct_decay": self.correct_decay,
            "incorrect_boost": self.incorrect_boost,
            "recency_window_seconds": self.recency_window_seconds,
            "recency_cap": self.recency_cap,
        }

    def get_level_config(self) -> dict[str, float]:
        """Progression constants as keyword arguments for LevelConfig."""
        return {
            "unlock_min_attempts": self.unlock_min_attempts,
            "unlock_accuracy": self.unlock_accuracy,
            "mastery_min_attempts": self.mastery_min_attempts,
            "mastery_accuracy": self.mastery_accuracy,
        }


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
