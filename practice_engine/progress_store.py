"""
ProgressStore - load, save and reset learner records.

Records are serialized as UTF-8 JSON documents using the camelCase field
names of LearnerRecord. Anything that fails to decode or validate is treated
as "no history": the caller gets a fresh default record and a warning is
logged, never an exception.
"""

from __future__ import annotations

import json
from urllib.parse import quote

from loguru import logger
from pydantic import ValidationError

from .errors import RecordValidationError
from .models import LearnerRecord
from .storage import ByteStore


def record_key(learner_id: str, subject: str, prefix: str = "learning_") -> str:
    """
    Storage key for one learner practising one subject.

    Both parts are percent-encoded so the separator cannot appear inside them.
    """
    if not learner_id or not subject:
        raise ValueError("learner_id and subject must be non-empty")
    return f"{prefix}{quote(learner_id, safe='')}:{quote(subject, safe='')}"


def encode(record: LearnerRecord) -> bytes:
    return json.dumps(record.to_document(), separators=(",", ":")).encode("utf-8")


def decode(data: bytes) -> LearnerRecord:
    """
    Decode and validate a stored record.

    Raises:
        RecordValidationError: bytes are not JSON or not a valid record
    """
    try:
        document = json.loads(data.decode("utf-8"))
    except (ValueError, RecursionError) as e:
        raise RecordValidationError(f"record is not valid JSON: {e}") from e

    if not isinstance(document, dict):
        raise RecordValidationError(
            f"record must be a JSON object, got {type(document).__name__}"
        )

    try:
        return LearnerRecord.model_validate(document)
    except (ValidationError, RecursionError) as e:
        raise RecordValidationError(str(e)) from e


class ProgressStore:
    """
    Persists one LearnerRecord per key on top of a ByteStore.

    Every save overwrites the full record; there is no batching.
    """

    def __init__(self, backend: ByteStore):
        self.backend = backend

    def load(self, key: str) -> LearnerRecord:
        """Load the record for key, or a default record if absent or corrupt."""
        data = self.backend.get(key)
        if data is None:
            logger.debug(f"No stored record for {key}, starting fresh")
            return LearnerRecord()

        try:
            return decode(data)
        except RecordValidationError as e:
            logger.warning(f"Discarding unreadable record for {key}: {e}")
            return LearnerRecord()

    def save(self, record: LearnerRecord, key: str) -> None:
        self.backend.put(key, encode(record))

    def reset(self, key: str) -> LearnerRecord:
        """Erase stored bytes for key and persist a fresh default record."""
        removed = self.backend.delete(key)
        record = LearnerRecord()
        self.save(record, key)
        logger.info(f"Reset progress for {key} (previous record {'removed' if removed else 'absent'})")
        return record
