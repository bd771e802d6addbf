"""Key-value repositories for the CareWise data bank.

The profile store depends only on the ``KeyValueRepository`` protocol, so
it runs unchanged against memory, SQLite, or an encrypted wrapper around
either.
"""

from __future__ import annotations

import logging
import sqlite3
from typing import Protocol, runtime_checkable

from carewise.core.storage.database import HealthDatabase
from carewise.core.storage.encryption import FieldEncryptor

logger = logging.getLogger(__name__)


class RepositoryError(Exception):
    """Raised when repository operations fail."""


@runtime_checkable
class KeyValueRepository(Protocol):
    """Byte-oriented key-value storage."""

    def get(self, key: str) -> bytes | None:
        """Return the stored value, or None if the key is absent."""
        ...

    def put(self, key: str, value: bytes) -> None:
        """Store ``value`` under ``key``, replacing any previous value."""
        ...

    def delete(self, key: str) -> bool:
        """Remove ``key``; return True if something was removed."""
        ...


def _check_value(value: bytes) -> bytes:
    if not isinstance(value, (bytes, bytearray)):
        raise RepositoryError(f"Values must be bytes, got {type(value).__name__}")
    return bytes(value)


class InMemoryKeyValueRepository:
    """Process-local repository; contents vanish with the process."""

    def __init__(self) -> None:
        self._data: dict[str, bytes] = {}

    def get(self, key: str) -> bytes | None:
        return self._data.get(key)

    def put(self, key: str, value: bytes) -> None:
        self._data[key] = _check_value(value)

    def delete(self, key: str) -> bool:
        return self._data.pop(key, None) is not None

    def __len__(self) -> int:
        return len(self._data)


class SQLiteKeyValueRepository:
    """Repository backed by the ``kv_store`` table.

    Usage::

        db = HealthDatabase(":memory:")
        db.initialize()
        repo = SQLiteKeyValueRepository(db)
        repo.put("health_data", b"...")
    """

    def __init__(self, database: HealthDatabase) -> None:
        self._db = database

    def get(self, key: str) -> bytes | None:
        try:
            row = self._db.connection.execute(
                "SELECT value FROM kv_store WHERE key = ?", (key,)
            ).fetchone()
        except sqlite3.Error as exc:
            raise RepositoryError(f"Failed to read key {key!r}: {exc}") from exc
        if row is None:
            return None
        return bytes(row["value"])

    def put(self, key: str, value: bytes) -> None:
        payload = _check_value(value)
        conn = self._db.connection
        try:
            conn.execute(
                """INSERT INTO kv_store (key, value, updated_at)
                   VALUES (?, ?, datetime('now'))
                   ON CONFLICT(key) DO UPDATE SET
                       value = excluded.value,
                       updated_at = excluded.updated_at""",
                (key, payload),
            )
            conn.commit()
        except sqlite3.Error as exc:
            raise RepositoryError(f"Failed to store key {key!r}: {exc}") from exc
        logger.debug("Stored %d bytes under %s", len(payload), key)

    def delete(self, key: str) -> bool:
        conn = self._db.connection
        try:
            cursor = conn.execute("DELETE FROM kv_store WHERE key = ?", (key,))
            conn.commit()
        except sqlite3.Error as exc:
            raise RepositoryError(f"Failed to delete key {key!r}: {exc}") from exc
        return cursor.rowcount > 0


class EncryptedKeyValueRepository:
    """Wraps another repository, encrypting values at rest with Fernet."""

    def __init__(self, inner: KeyValueRepository, encryptor: FieldEncryptor) -> None:
        self._inner = inner
        self._enc = encryptor

    def get(self, key: str) -> bytes | None:
        token = self._inner.get(key)
        if token is None:
            return None
        return self._enc.decrypt(token)

    def put(self, key: str, value: bytes) -> None:
        self._inner.put(key, self._enc.encrypt(_check_value(value)))

    def delete(self, key: str) -> bool:
        return self._inner.delete(key)
