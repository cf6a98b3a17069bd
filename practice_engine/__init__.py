"""
Practice Engine: adaptive concept scheduling for learning games.

Tracks per-concept performance for each learner and subject, picks the next
concept with a spaced-repetition style weighting, and unlocks levels from
aggregate accuracy.

Components:
- LearningSystem: per-learner facade exposing the public operations
- ProgressStore: validated load/save/reset of learner records
- ConceptScheduler: weight updates and weighted random selection
- LevelTracker: level unlocks and statistics
- ByteStore backends: memory, file, SQL
"""

from .clock import Clock, ManualClock, SystemClock
from .config import Settings, get_settings
from .errors import EmptyConceptPoolError, PracticeEngineError, RecordValidationError
from .levels import LevelConfig, LevelTracker
from .log import configure_logging
from .models import SCHEMA_VERSION, ConceptStat, LearnerRecord, LearnerStats
from .progress_store import ProgressStore, decode, encode, record_key
from .scheduler import ConceptScheduler, SchedulerConfig
from .storage import ByteStore, FileByteStore, MemoryByteStore, SqlByteStore, create_byte_store
from .system import LearningSystem

__all__ = [
    # Facade
    "LearningSystem",
    # Records
    "ConceptStat",
    "LearnerRecord",
    "LearnerStats",
    "SCHEMA_VERSION",
    # Persistence
    "ProgressStore",
    "record_key",
    "encode",
    "decode",
    "ByteStore",
    "MemoryByteStore",
    "FileByteStore",
    "SqlByteStore",
    "create_byte_store",
    # Scheduling
    "ConceptScheduler",
    "SchedulerConfig",
    "LevelTracker",
    "LevelConfig",
    # Time
    "Clock",
    "SystemClock",
    "ManualClock",
    # Config & logging
    "Settings",
    "get_settings",
    "configure_logging",
    # Errors
    "PracticeEngineError",
    "RecordValidationError",
    "EmptyConceptPoolError",
]

__version__ = "1.0.0"
