"""SQLite-backed key-value store for save slots.

Values are JSON text kept under string keys, one row per key. A store can
be given a byte quota per value; writes over it fail with
``StorageQuotaError`` so callers can shrink the payload and retry.

The default database lives at ``~/.lifequest/lifequest.db`` unless
``LIFEQUEST_DATABASE_PATH`` says otherwise.
"""

from __future__ import annotations

import sqlite3
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path

from lifequest.core.config import get_settings
from lifequest.core.exceptions import StorageError, StorageQuotaError
from lifequest.core.logging import get_logger


logger = get_logger(__name__)

_SCHEMA = """
CREATE TABLE IF NOT EXISTS meta (
    name TEXT PRIMARY KEY,
    value TEXT NOT NULL
);
CREATE TABLE IF NOT EXISTS slots (
    key TEXT PRIMARY KEY,
    value TEXT NOT NULL,
    updated_at TEXT NOT NULL
);
"""


@dataclass(frozen=True)
class StoredValue:
    """One row of the store."""

    key: str
    value: str
    updated_at: datetime

    @property
    def size_bytes(self) -> int:
        """UTF-8 length of ``value``, the figure the quota is checked against."""
        return len(self.value.encode("utf-8"))


class KeyValueStore:
    """Save slots in a single SQLite file.

    A fresh connection is opened per call, which keeps the object safe to
    share between a session and its saver.

    Attributes:
        db_path: Location of the database file.
        max_value_bytes: Quota for a single value, or None for no limit.
    """

    SCHEMA_VERSION = 1

    def __init__(self, db_path: str | Path | None = None, *, max_value_bytes: int | None = None) -> None:
        self.db_path = Path(db_path) if db_path is not None else get_settings().storage.database_path
        self.max_value_bytes = max_value_bytes
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

        with self._connect() as conn:
            conn.executescript(_SCHEMA)
            conn.execute(
                "INSERT OR REPLACE INTO meta (name, value) VALUES ('schema_version', ?)",
                (str(self.SCHEMA_VERSION),),
            )
        logger.info("Opened save store", path=str(self.db_path), quota=max_value_bytes)

    @contextmanager
    def _connect(self) -> Iterator[sqlite3.Connection]:
        try:
            conn = sqlite3.connect(self.db_path)
        except sqlite3.Error as exc:
            raise StorageError(f"Cannot open database: {exc}", details={"path": str(self.db_path)}) from exc
        try:
            with conn:
                yield conn
        except sqlite3.Error as exc:
            raise StorageError(f"Database operation failed: {exc}") from exc
        finally:
            conn.close()

    def get(self, key: str) -> str | None:
        """Return the text stored under ``key``, or None."""
        record = self.get_record(key)
        return None if record is None else record.value

    def get_record(self, key: str) -> StoredValue | None:
        """Return the row for ``key`` including its write time."""
        with self._connect() as conn:
            row = conn.execute("SELECT value, updated_at FROM slots WHERE key = ?", (key,)).fetchone()
        if row is None:
            return None
        value, updated_at = row
        return StoredValue(key=key, value=value, updated_at=datetime.fromisoformat(updated_at))

    def set(self, key: str, value: str) -> None:
        """Store ``value`` under ``key``, replacing what was there.

        Raises:
            StorageQuotaError: The encoded value is larger than the quota.
                Nothing is written in that case.
            StorageError: SQLite refused the write.
        """
        size = len(value.encode("utf-8"))
        limit = self.max_value_bytes
        if limit is not None and size > limit:
            raise StorageQuotaError(
                f"Value for {key!r} exceeds storage quota",
                key=key,
                size_bytes=size,
                limit_bytes=limit,
            )
        with self._connect() as conn:
            conn.execute(
                "INSERT OR REPLACE INTO slots (key, value, updated_at) VALUES (?, ?, ?)",
                (key, value, datetime.now(UTC).isoformat()),
            )
        logger.debug("Slot written", key=key, size_bytes=size)

    def delete(self, key: str) -> bool:
        """Remove ``key``. Returns False when it was not stored."""
        with self._connect() as conn:
            removed = conn.execute("DELETE FROM slots WHERE key = ?", (key,)).rowcount > 0
        if removed:
            logger.info("Slot deleted", key=key)
        return removed

    def keys(self) -> list[str]:
        """Stored keys in sorted order."""
        with self._connect() as conn:
            return [key for (key,) in conn.execute("SELECT key FROM slots ORDER BY key")]


_default_store: KeyValueStore | None = None


def get_store() -> KeyValueStore:
    """Shared store built from the storage settings on first use."""
    global _default_store

    if _default_store is None:
        storage = get_settings().storage
        _default_store = KeyValueStore(storage.database_path, max_value_bytes=storage.max_save_bytes)
    return _default_store


__all__ = [
    "StoredValue",
    "KeyValueStore",
    "get_store",
]
