"""
LearningSystem - the practice engine as seen by a game or lesson.

One instance is bound to one (learner, subject) key. It owns the in-memory
record, consults the scheduler and level tracker, and writes the record back
to the ProgressStore after every change.

Typical loop:

    system = LearningSystem.from_settings("ada", "addition")
    concept = system.get_next_concept(["pair-3-7", "pair-4-6", "pair-5-5"])
    ...present a question for concept...
    system.record_attempt(concept, correct=True)
    if (level := system.check_level_progress()) is not None:
        ...celebrate the new level...

Instances are not thread-safe; use one per key and serialize access.
"""

from __future__ import annotations

import random
from collections.abc import Sequence

from loguru import logger

from .clock import Clock, SystemClock
from .config import Settings, get_settings
from .levels import LevelConfig, LevelTracker
from .models import LearnerRecord, LearnerStats
from .progress_store import ProgressStore, record_key
from .scheduler import ConceptScheduler, SchedulerConfig
from .storage import create_byte_store


class LearningSystem:
    """Adaptive practice state for one learner in one subject."""

    def __init__(
        self,
        learner_id: str,
        subject: str,
        store: ProgressStore,
        clock: Clock | None = None,
        rng: random.Random | None = None,
        scheduler_config: SchedulerConfig | None = None,
        level_config: LevelConfig | None = None,
        key_prefix: str = "learning_",
    ):
        """
        Bind to a learner/subject key and load its record.

        Args:
            learner_id: Learner identifier
            subject: Subject (game, topic) being practised
            store: Where the record is persisted
            clock: Time source (wall clock if None)
            rng: Random source for concept selection
            scheduler_config: Weighting constants
            level_config: Progression thresholds
            key_prefix: Prefix for the storage key
        """
        self.learner_id = learner_id
        self.subject = subject
        self.key = record_key(learner_id, subject, key_prefix)
        self.store = store
        self.scheduler = ConceptScheduler(scheduler_config, clock or SystemClock(), rng)
        self.levels = LevelTracker(level_config)
        self._record = store.load(self.key)

    @classmethod
    def from_settings(
        cls,
        learner_id: str,
        subject: str,
        settings: Settings | None = None,
        **kwargs,
    ) -> "LearningSystem":
        """
        Build a system whose storage and tuning come from Settings.

        Keyword arguments are passed to the constructor and take precedence
        over the values derived from settings.
        """
        settings = settings or get_settings()
        if "store" not in kwargs:
            kwargs["store"] = ProgressStore(create_byte_store(settings))
        kwargs.setdefault("scheduler_config", SchedulerConfig.from_settings(settings))
        kwargs.setdefault("level_config", LevelConfig.from_settings(settings))
        kwargs.setdefault("key_prefix", settings.key_prefix)
        return cls(learner_id, subject, **kwargs)

    @property
    def record(self) -> LearnerRecord:
        """A copy of the current record, for display."""
        return self._record.model_copy(deep=True)

    def _save(self) -> None:
        self.store.save(self._record, self.key)

    # =========================================================================
    # Practice
    # =========================================================================

    def record_attempt(self, concept_id: str, correct: bool) -> None:
        """Record one answer for concept_id and persist."""
        self.scheduler.record_attempt(self._record, concept_id, correct)
        self._save()

    def get_next_concept(self, available_concepts: Sequence[str]) -> str:
        """
        Pick the next concept to practise from available_concepts.

        Raises:
            EmptyConceptPoolError: available_concepts is empty
        """
        return self.scheduler.next_concept(self._record, available_concepts)

    # =========================================================================
    # Levels
    # =========================================================================

    def check_level_progress(self) -> int | None:
        """Unlock the next level if earned. Returns the new level or None."""
        unlocked = self.levels.check_level_progress(self._record)
        if unlocked is not None:
            self._save()
        return unlocked

    def get_current_level(self) -> int:
        return self._record.current_level

    def set_current_level(self, level: int) -> bool:
        if not self.levels.set_current_level(self._record, level):
            return False
        self._save()
        logger.info(f"{self.key}: now on level {level}")
        return True

    def get_unlocked_levels(self) -> list[int]:
        return list(self._record.unlocked_levels)

    # =========================================================================
    # Stats & Reset
    # =========================================================================

    def get_stats(self) -> LearnerStats:
        return self.levels.get_stats(self._record)

    def reset(self) -> None:
        """Erase all progress for this learner and subject."""
        self._record = self.store.reset(self.key)
