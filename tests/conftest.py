"""
Pytest Configuration and Fixtures.

This file configures pytest and provides shared fixtures for all tests.
"""
import random

import pytest
from loguru import logger

from practice_engine import (
    LearningSystem,
    ManualClock,
    MemoryByteStore,
    ProgressStore,
)

# 2024-01-01T00:00:00Z
EPOCH_MS = 1_704_067_200_000


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "slow: Slow tests")


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their location."""
    for item in items:
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)


@pytest.fixture
def log_messages():
    """Capture loguru messages emitted during a test."""
    messages = []
    handler_id = logger.add(lambda msg: messages.append(msg.record), level="DEBUG")
    yield messages
    logger.remove(handler_id)


@pytest.fixture
def clock():
    return ManualClock(EPOCH_MS)


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def backend():
    return MemoryByteStore()


@pytest.fixture
def store(backend):
    return ProgressStore(backend)


@pytest.fixture
def make_system(store, clock, rng):
    """Factory for LearningSystem instances sharing the test store and clock."""

    def _make(learner_id="ada", subject="addition", **kwargs):
        kwargs.setdefault("clock", clock)
        kwargs.setdefault("rng", rng)
        return LearningSystem(learner_id, subject, store, **kwargs)

    return _make


@pytest.fixture
def system(make_system):
    return make_system()
