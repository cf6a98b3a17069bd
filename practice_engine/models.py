"""
Learner record schemas for the practice engine.

Defines Pydantic models for:
- Per-concept performance (ConceptStat)
- The persisted per-learner, per-subject record (LearnerRecord)
- Derived statistics (LearnerStats)

Python attributes are snake_case; the persisted document uses the camelCase
aliases (``lastSeen``, ``currentLevel``, ``unlockedLevels`` ...).
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

SCHEMA_VERSION = 1

WEIGHT_MIN = 0.1
WEIGHT_MAX = 5.0
DEFAULT_WEIGHT = 1.0


class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class ConceptStat(_CamelModel):
    """Performance history for a single concept."""

    attempts: int = Field(default=0, ge=0)
    correct: int = Field(default=0, ge=0)
    last_seen: int = Field(alias="lastSeen", ge=0)  # epoch ms
    weight: float = Field(default=DEFAULT_WEIGHT, ge=WEIGHT_MIN, le=WEIGHT_MAX)

    @model_validator(mode="after")
    def _correct_within_attempts(self) -> "ConceptStat":
        if self.correct > self.attempts:
            raise ValueError(
                f"correct ({self.correct}) cannot exceed attempts ({self.attempts})"
            )
        return self

    @property
    def accuracy(self) -> float:
        """Fraction of attempts answered correctly (0.0 when never attempted)."""
        if self.attempts == 0:
            return 0.0
        return self.correct / self.attempts


class LearnerRecord(_CamelModel):
    """Everything remembered about one learner practising one subject."""

    version: int = SCHEMA_VERSION
    concepts: dict[str, ConceptStat] = Field(default_factory=dict)
    sessions: list[dict[str, Any]] = Field(default_factory=list)
    current_level: int = Field(default=1, alias="currentLevel", ge=1)
    unlocked_levels: list[int] = Field(default_factory=lambda: [1], alias="unlockedLevels")

    @field_validator("version")
    @classmethod
    def _known_version(cls, value: int) -> int:
        if value != SCHEMA_VERSION:
            raise ValueError(f"unsupported schema version {value}")
        return value

    @field_validator("unlocked_levels")
    @classmethod
    def _valid_unlocked_levels(cls, value: list[int]) -> list[int]:
        if 1 not in value:
            raise ValueError("level 1 must always be unlocked")
        if any(level < 1 for level in value):
            raise ValueError("levels start at 1")
        if len(set(value)) != len(value):
            raise ValueError("unlocked levels must be unique")
        return value

    @model_validator(mode="after")
    def _current_level_unlocked(self) -> "LearnerRecord":
        if self.current_level not in self.unlocked_levels:
            raise ValueError(
                f"current level {self.current_level} is not unlocked ({self.unlocked_levels})"
            )
        return self

    @property
    def attempted_concepts(self) -> dict[str, ConceptStat]:
        return {cid: stat for cid, stat in self.concepts.items() if stat.attempts > 0}

    def to_document(self) -> dict[str, Any]:
        """Serialize to the persisted (camelCase) document shape."""
        return self.model_dump(by_alias=True, mode="json")


class LearnerStats(_CamelModel):
    """Read-only summary of a learner record."""

    total_attempts: int = Field(alias="totalAttempts")
    total_correct: int = Field(alias="totalCorrect")
    success_rate: int = Field(alias="successRate")  # rounded percent
    concepts_mastered: int = Field(alias="conceptsMastered")
    current_level: int = Field(alias="currentLevel")
    unlocked_levels: list[int] = Field(alias="unlockedLevels")
