"""
Concept Scheduler: weight updates and weighted random selection.

Each concept carries a selection weight:
- Correct answer:   weight *= 0.8 (shown less often), floor 0.1
- Incorrect answer: weight *= 1.5 (shown more often), ceiling 5.0

When choosing the next concept, weights get a recency boost:

    time_weight = min(2.0, time_since_last_seen / 5 minutes)
    effective   = weight * (1 + time_weight)

Concepts never attempted use the default weight with no boost. The next
concept is drawn with probability proportional to its effective weight.
"""

from __future__ import annotations

import random
from collections.abc import Sequence
from dataclasses import dataclass

from loguru import logger

from .clock import Clock, SystemClock
from .errors import EmptyConceptPoolError
from .models import DEFAULT_WEIGHT, WEIGHT_MAX, WEIGHT_MIN, ConceptStat, LearnerRecord


@dataclass
class SchedulerConfig:
    """Tuning constants for weight updates and selection."""

    weight_min: float = WEIGHT_MIN
    weight_max: float = WEIGHT_MAX
    default_weight: float = DEFAULT_WEIGHT
    correct_decay: float = 0.8
    incorrect_boost: float = 1.5
    recency_window_seconds: float = 300.0  # 5 min = one unit of boost
    recency_cap: float = 2.0

    def __post_init__(self):
        if not WEIGHT_MIN <= self.weight_min < self.weight_max <= WEIGHT_MAX:
            raise ValueError(
                f"weight bounds must satisfy {WEIGHT_MIN} <= min < max <= {WEIGHT_MAX}"
            )
        if not self.weight_min <= self.default_weight <= self.weight_max:
            raise ValueError("default_weight must lie within the weight bounds")

    @classmethod
    def from_settings(cls, settings) -> "SchedulerConfig":
        return cls(**settings.get_scheduler_config())


class ConceptScheduler:
    """
    Updates concept weights and picks the next concept to practise.

    The scheduler mutates the record it is given but never persists it;
    that is the caller's job.
    """

    def __init__(
        self,
        config: SchedulerConfig | None = None,
        clock: Clock | None = None,
        rng: random.Random | None = None,
    ):
        """
        Initialize the scheduler.

        Args:
            config: Custom configuration (uses defaults if None)
            clock: Time source (wall clock if None)
            rng: Random source for selection (fresh Random if None)
        """
        self.config = config or SchedulerConfig()
        self.clock = clock or SystemClock()
        self.rng = rng or random.Random()

    # =========================================================================
    # Weight updates
    # =========================================================================

    def record_attempt(self, record: LearnerRecord, concept_id: str, correct: bool) -> ConceptStat:
        """
        Apply one answer to the concept's stats.

        Args:
            record: Learner record to mutate
            concept_id: Concept that was practised
            correct: Whether the answer was correct

        Returns:
            The updated ConceptStat
        """
        if not concept_id:
            raise ValueError("concept_id must be a non-empty string")

        now = self.clock.now()
        stat = record.concepts.get(concept_id)
        if stat is None:
            stat = ConceptStat(last_seen=now, weight=self.config.default_weight)
            record.concepts[concept_id] = stat

        before = stat.weight
        stat.attempts += 1
        if correct:
            stat.correct += 1
            stat.weight = max(self.config.weight_min, stat.weight * self.config.correct_decay)
        else:
            stat.weight = min(self.config.weight_max, stat.weight * self.config.incorrect_boost)
        stat.last_seen = now

        logger.debug(
            f"{concept_id}: {'correct' if correct else 'wrong'}, "
            f"weight {before:.3f} -> {stat.weight:.3f} ({stat.correct}/{stat.attempts})"
        )
        return stat

    # =========================================================================
    # Selection
    # =========================================================================

    def effective_weight(self, stat: ConceptStat | None, now: int) -> float:
        """Selection weight of one concept including its recency boost."""
        if stat is None:
            return self.config.default_weight

        elapsed_seconds = max(0, now - stat.last_seen) / 1000
        time_weight = min(
            self.config.recency_cap,
            elapsed_seconds / self.config.recency_window_seconds,
        )
        return stat.weight * (1 + time_weight)

    def effective_weights(
        self, record: LearnerRecord, available_concepts: Sequence[str]
    ) -> list[float]:
        now = self.clock.now()
        return [self.effective_weight(record.concepts.get(cid), now) for cid in available_concepts]

    def next_concept(self, record: LearnerRecord, available_concepts: Sequence[str]) -> str:
        """
        Draw the next concept to practise.

        Args:
            record: Learner record with concept history
            available_concepts: Candidate concept ids, in order (may include unseen ones)

        Returns:
            One of available_concepts

        Raises:
            EmptyConceptPoolError: available_concepts is empty
        """
        if not available_concepts:
            raise EmptyConceptPoolError()

        weights = self.effective_weights(record, available_concepts)
        remaining = self.rng.random() * sum(weights)

        for concept_id, weight in zip(available_concepts, weights):
            remaining -= weight
            if remaining <= 0:
                logger.debug(f"Selected {concept_id} (effective weight {weight:.3f})")
                return concept_id

        # Float rounding can leave a sliver above zero
        return available_concepts[-1]
