"""
Integration-style tests for the LearningSystem facade.

Every mutating operation must write through to the store, so each test
checks persisted state by loading a fresh instance over the same store.
"""

import pytest

from practice_engine import (
    EmptyConceptPoolError,
    LearnerRecord,
    LearningSystem,
    SchedulerConfig,
    Settings,
    decode,
)


class TestRecordAttempt:
    def test_persists_after_each_attempt(self, system, make_system):
        system.record_attempt("pair-3-7", correct=True)

        reloaded = make_system()
        assert reloaded.record.concepts["pair-3-7"].attempts == 1
        assert reloaded.record.concepts["pair-3-7"].correct == 1

    def test_writes_to_record_key(self, system, backend):
        system.record_attempt("pair-3-7", correct=False)

        stored = decode(backend.get("learning_ada:addition"))
        assert stored.concepts["pair-3-7"].weight == pytest.approx(1.5)

    def test_subjects_are_independent(self, make_system):
        make_system(subject="addition").record_attempt("pair-3-7", correct=True)
        assert make_system(subject="counting").record.concepts == {}

    def test_separator_in_ids_keeps_learners_apart(self, make_system):
        make_system(learner_id="ada:x", subject="addition").record_attempt("pair-3-7", correct=True)
        assert make_system(learner_id="ada", subject="x:addition").record.concepts == {}


class TestNextConcept:
    def test_returns_candidate(self, system):
        for _ in range(50):
            assert system.get_next_concept(["a", "b", "c"]) in {"a", "b", "c"}

    def test_empty_pool(self, system):
        with pytest.raises(EmptyConceptPoolError):
            system.get_next_concept([])

    def test_does_not_write(self, system, backend):
        system.get_next_concept(["a", "b"])
        assert backend.get("learning_ada:addition") is None


class TestLevels:
    def _answer(self, system, correct, wrong):
        for i in range(correct):
            system.record_attempt(f"c{i % 2}", correct=True)
        for i in range(wrong):
            system.record_attempt(f"c{i % 2}", correct=False)

    def test_unlock_persists_once(self, system, make_system):
        self._answer(system, correct=10, wrong=2)

        assert system.check_level_progress() == 2
        assert system.check_level_progress() is None
        assert make_system().get_unlocked_levels() == [1, 2]

    def test_no_unlock_without_enough_attempts(self, system):
        self._answer(system, correct=5, wrong=0)
        assert system.check_level_progress() is None

    def test_set_locked_level_fails(self, system, make_system):
        self._answer(system, correct=10, wrong=2)
        system.check_level_progress()

        assert system.set_current_level(3) is False
        assert system.get_current_level() == 1
        assert make_system().get_current_level() == 1

    def test_set_level_after_unlock(self, system, make_system):
        self._answer(system, correct=12, wrong=0)
        assert system.check_level_progress() == 2
        assert system.set_current_level(2) is True

        assert system.check_level_progress() == 3
        assert system.set_current_level(3) is True
        assert make_system().get_current_level() == 3

    def test_boolean_level_rejected(self, system, backend):
        assert system.set_current_level(True) is False
        assert system.get_current_level() == 1
        assert backend.get("learning_ada:addition") is None

    def test_unlocked_levels_returns_copy(self, system):
        system.get_unlocked_levels().append(5)
        assert system.get_unlocked_levels() == [1]


class TestStatsAndReset:
    def test_stats_with_no_attempts(self, system):
        stats = system.get_stats()
        assert stats.success_rate == 0
        assert stats.concepts_mastered == 0

    def test_stats_after_practice(self, system):
        for _ in range(5):
            system.record_attempt("number-5", correct=True)
        system.record_attempt("number-6", correct=False)

        stats = system.get_stats()
        assert stats.total_attempts == 6
        assert stats.total_correct == 5
        assert stats.success_rate == 83
        assert stats.concepts_mastered == 1

    def test_reset_matches_new_record(self, system, backend, make_system):
        for _ in range(12):
            system.record_attempt("a", correct=True)
        system.check_level_progress()
        system.set_current_level(2)

        system.reset()

        assert system.record == LearnerRecord()
        assert decode(backend.get("learning_ada:addition")) == LearnerRecord()
        assert make_system().record == LearnerRecord()

    def test_record_property_is_a_copy(self, system):
        system.record.unlocked_levels.append(7)
        assert system.get_unlocked_levels() == [1]


class TestCorruptStorage:
    def test_corrupt_bytes_start_fresh(self, backend, make_system):
        backend.put("learning_ada:addition", b"\x00garbage")

        system = make_system()

        assert system.record == LearnerRecord()
        system.record_attempt("a", correct=True)
        assert decode(backend.get("learning_ada:addition")).concepts["a"].attempts == 1


class TestFromSettings:
    def test_file_backend(self, tmp_path, clock):
        settings = Settings(storage_backend="file", data_dir=tmp_path, key_prefix="game_")

        system = LearningSystem.from_settings("ada", "addition", settings, clock=clock)
        system.record_attempt("pair-3-7", correct=True)

        assert (tmp_path / "game_ada%3Aaddition.json").exists()
        again = LearningSystem.from_settings("ada", "addition", settings, clock=clock)
        assert again.record.concepts["pair-3-7"].attempts == 1

    def test_keyword_arguments_override_settings(self, store, clock):
        settings = Settings(storage_backend="memory", key_prefix="game_")

        system = LearningSystem.from_settings(
            "ada",
            "addition",
            settings,
            store=store,
            clock=clock,
            key_prefix="custom_",
            scheduler_config=SchedulerConfig(incorrect_boost=3.0),
        )
        system.record_attempt("a", correct=False)

        assert system.key == "custom_ada:addition"
        assert store.load("custom_ada:addition").concepts["a"].weight == pytest.approx(3.0)

    def test_tuning_from_settings(self, clock):
        settings = Settings(storage_backend="memory", incorrect_boost=2.0, unlock_min_attempts=2)

        system = LearningSystem.from_settings("ada", "addition", settings, clock=clock)
        system.record_attempt("a", correct=False)
        assert system.record.concepts["a"].weight == pytest.approx(2.0)

        system.record_attempt("a", correct=True)
        system.record_attempt("a", correct=True)
        system.record_attempt("a", correct=True)
        system.record_attempt("a", correct=True)
        assert system.check_level_progress() == 2
