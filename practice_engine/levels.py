"""
Level Tracker: progression gates and learner statistics.

A new level unlocks once the learner has at least 10 attempts across all
concepts with 80% or better accuracy. The check is global over every concept
ever attempted, not scoped to the concepts of the current level; callers that
want per-level gating must track per-level records themselves.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from loguru import logger

from .models import LearnerRecord, LearnerStats


@dataclass
class LevelConfig:
    """Thresholds for unlocking levels and counting mastered concepts."""

    unlock_min_attempts: int = 10
    unlock_accuracy: float = 0.8
    mastery_min_attempts: int = 5
    mastery_accuracy: float = 0.9

    @classmethod
    def from_settings(cls, settings) -> "LevelConfig":
        return cls(**settings.get_level_config())


def _percent(part: int, whole: int) -> int:
    """Integer percentage, halves rounded up."""
    if whole == 0:
        return 0
    return math.floor(part / whole * 100 + 0.5)


class LevelTracker:
    """Derives unlock decisions and summary stats from a learner record."""

    def __init__(self, config: LevelConfig | None = None):
        self.config = config or LevelConfig()

    def check_level_progress(self, record: LearnerRecord) -> int | None:
        """
        Unlock the level after the current one if accuracy allows.

        Mutates record.unlocked_levels on success; persisting is left to the caller.

        Returns:
            The newly unlocked level, or None if nothing was unlocked
        """
        attempted = record.attempted_concepts
        if not attempted:
            return None

        total_attempts = sum(stat.attempts for stat in attempted.values())
        total_correct = sum(stat.correct for stat in attempted.values())

        if total_attempts < self.config.unlock_min_attempts:
            return None
        if total_correct / total_attempts < self.config.unlock_accuracy:
            return None

        next_level = record.current_level + 1
        if next_level in record.unlocked_levels:
            return None

        record.unlocked_levels.append(next_level)
        logger.info(
            f"Unlocked level {next_level} ({total_correct}/{total_attempts} correct)"
        )
        return next_level

    def set_current_level(self, record: LearnerRecord, level: int) -> bool:
        """Switch to an unlocked level. Returns False (no change) otherwise."""
        # bool is an int subclass and True == 1
        if isinstance(level, bool) or not isinstance(level, int):
            logger.debug(f"Rejected non-integer level {level!r}")
            return False
        if level not in record.unlocked_levels:
            logger.debug(f"Level {level} is locked (unlocked: {record.unlocked_levels})")
            return False
        record.current_level = level
        return True

    def is_mastered(self, attempts: int, correct: int) -> bool:
        return (
            attempts > 0
            and attempts >= self.config.mastery_min_attempts
            and correct / attempts >= self.config.mastery_accuracy
        )

    def get_stats(self, record: LearnerRecord) -> LearnerStats:
        concepts = list(record.concepts.values())
        total_attempts = sum(c.attempts for c in concepts)
        total_correct = sum(c.correct for c in concepts)

        return LearnerStats(
            total_attempts=total_attempts,
            total_correct=total_correct,
            success_rate=_percent(total_correct, total_attempts),
            concepts_mastered=sum(1 for c in concepts if self.is_mastered(c.attempts, c.correct)),
            current_level=record.current_level,
            unlocked_levels=list(record.unlocked_levels),
        )
