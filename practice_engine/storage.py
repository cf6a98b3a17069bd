"""
Key-value byte stores backing learner records.

The engine only ever needs to get, put and delete one opaque blob per
learner/subject key, so any backend offering those three calls will do:

- MemoryByteStore: in-process dict (tests, embedding)
- FileByteStore: one file per key under a data directory
- SqlByteStore: a single SQLAlchemy table, one row per key

No backend holds an open handle between calls.
"""

from __future__ import annotations

import os
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from pathlib import Path
from urllib.parse import quote

from loguru import logger
from sqlalchemy import (
    Column,
    DateTime,
    LargeBinary,
    MetaData,
    String,
    Table,
    create_engine,
    delete,
    insert,
    select,
    update,
)
from sqlalchemy.engine import URL, Engine, make_url

from .config import Settings


class ByteStore(ABC):
    """Abstract synchronous key-value store of raw bytes."""

    @abstractmethod
    def get(self, key: str) -> bytes | None:
        """Return the bytes stored under key, or None."""
        ...

    @abstractmethod
    def put(self, key: str, data: bytes) -> None:
        """Store data under key, replacing any previous value."""
        ...

    @abstractmethod
    def delete(self, key: str) -> bool:
        """Remove key. Returns True if something was deleted."""
        ...


# =============================================================================
# In-memory
# =============================================================================


class MemoryByteStore(ByteStore):
    def __init__(self):
        self._data: dict[str, bytes] = {}

    def get(self, key: str) -> bytes | None:
        return self._data.get(key)

    def put(self, key: str, data: bytes) -> None:
        self._data[key] = bytes(data)

    def delete(self, key: str) -> bool:
        return self._data.pop(key, None) is not None

    def keys(self) -> list[str]:
        return list(self._data)


# =============================================================================
# Files
# =============================================================================


class FileByteStore(ByteStore):
    """
    Stores each key as ``<data_dir>/<quoted key>.json``.

    Keys are percent-encoded so any string maps to a distinct, safe file name.
    Writes go to a temporary file first and are moved into place.
    """

    SUFFIX = ".json"

    def __init__(self, data_dir: Path):
        self.data_dir = Path(data_dir)
        self.data_dir.mkdir(parents=True, exist_ok=True)

    def _path(self, key: str) -> Path:
        return self.data_dir / f"{quote(key, safe='')}{self.SUFFIX}"

    def get(self, key: str) -> bytes | None:
        path = self._path(key)
        if not path.exists():
            return None
        return path.read_bytes()

    def put(self, key: str, data: bytes) -> None:
        path = self._path(key)
        tmp = path.with_name(path.name + ".tmp")
        tmp.write_bytes(data)
        os.replace(tmp, path)

    def delete(self, key: str) -> bool:
        path = self._path(key)
        if path.exists():
            path.unlink()
            return True
        return False


# =============================================================================
# SQL
# =============================================================================

metadata = MetaData()

learner_records = Table(
    "learner_records",
    metadata,
    Column("key", String(255), primary_key=True),
    Column("payload", LargeBinary, nullable=False),
    Column("updated_at", DateTime(timezone=True), nullable=False),
)


class SqlByteStore(ByteStore):
    """One row per key in the ``learner_records`` table."""

    def __init__(self, database_url: str | None = None, engine: Engine | None = None):
        if engine is None:
            if database_url is None:
                raise ValueError("SqlByteStore needs a database_url or an engine")
            engine = create_engine(_prepare_sqlite_url(database_url), pool_pre_ping=True)
        self.engine = engine
        metadata.create_all(self.engine)

    def get(self, key: str) -> bytes | None:
        with self.engine.connect() as conn:
            row = conn.execute(
                select(learner_records.c.payload).where(learner_records.c.key == key)
            ).first()
        return bytes(row.payload) if row else None

    def put(self, key: str, data: bytes) -> None:
        now = datetime.now(timezone.utc)
        with self.engine.begin() as conn:
            result = conn.execute(
                update(learner_records)
                .where(learner_records.c.key == key)
                .values(payload=data, updated_at=now)
            )
            if result.rowcount == 0:
                conn.execute(
                    insert(learner_records).values(key=key, payload=data, updated_at=now)
                )

    def delete(self, key: str) -> bool:
        with self.engine.begin() as conn:
            result = conn.execute(delete(learner_records).where(learner_records.c.key == key))
        return result.rowcount > 0


def _prepare_sqlite_url(database_url: str) -> URL:
    """
    Expand ``~`` in a file-based SQLite URL and create its parent directory.

    Other databases are returned unchanged.
    """
    url = make_url(database_url)
    if not url.drivername.startswith("sqlite") or url.database in (None, "", ":memory:"):
        return url

    path = Path(url.database).expanduser()
    path.parent.mkdir(parents=True, exist_ok=True)
    return url.set(database=str(path))


def create_byte_store(settings: Settings) -> ByteStore:
    """Build the backend selected by ``settings.storage_backend``."""
    backend = settings.storage_backend
    if backend == "memory":
        store: ByteStore = MemoryByteStore()
    elif backend == "file":
        store = FileByteStore(settings.data_dir)
    elif backend == "sql":
        store = SqlByteStore(settings.database_url)
    else:
        raise ValueError(f"Unknown storage backend: {backend}")

    logger.debug(f"Using {type(store).__name__} for learner records")
    return store
