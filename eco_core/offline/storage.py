# =============================================================================
# eco_core/offline/storage.py
# Durable Key-Value Storage for the Local Cache
# =============================================================================
"""
Key-value storage media for the local cache.

Features:
- SQLite-backed durable storage (one ``local_storage`` table)
- In-memory storage with an optional byte quota
- Thread-local connections and transaction support
- Storage failures surfaced as StorageError / StorageQuotaError
"""

from __future__ import annotations
import sqlite3
import threading
from abc import ABC, abstractmethod
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional, Union
import logging

from eco_core.errors import StorageError, StorageQuotaError

logger = logging.getLogger(__name__)


class KeyValueStorage(ABC):
    """String-to-string storage, the Python counterpart of a browser's localStorage."""

    @abstractmethod
    def get_item(self, key: str) -> Optional[str]:
        """Return the stored value or None when the key is absent."""

    @abstractmethod
    def set_item(self, key: str, value: str) -> None:
        """Store a value, replacing any previous one."""

    @abstractmethod
    def remove_item(self, key: str) -> None:
        """Remove a key; removing an absent key is not an error."""

    @abstractmethod
    def keys(self) -> List[str]:
        """List stored keys."""


class SQLiteStorage(KeyValueStorage):
    """
    Durable key-value storage in a local SQLite file.
    """

    SCHEMA = """
        CREATE TABLE IF NOT EXISTS local_storage (
            key TEXT PRIMARY KEY,
            value TEXT NOT NULL,
            updated_at TEXT DEFAULT CURRENT_TIMESTAMP
        )
    """

    def __init__(self, db_path: Union[str, Path]):
        """
        Initialize storage.

        Args:
            db_path: Path to SQLite database file (directory is created if needed)
        """
        self.db_path = Path(db_path)
        self._local = threading.local()
        self._schema_lock = threading.Lock()
        self._initialized = False

    def _get_connection(self) -> sqlite3.Connection:
        """Get thread-local database connection."""
        if getattr(self._local, "connection", None) is None:
            try:
                self.db_path.parent.mkdir(parents=True, exist_ok=True)
                self._local.connection = sqlite3.connect(str(self.db_path))
            except (sqlite3.Error, OSError) as e:
                raise StorageError(f"Cannot open local storage at {self.db_path}: {e}") from e
            self._local.connection.row_factory = sqlite3.Row

        if not self._initialized:
            with self._schema_lock:
                if not self._initialized:
                    self._local.connection.execute(self.SCHEMA)
                    self._local.connection.commit()
                    self._initialized = True
                    logger.debug(f"Local storage initialized at: {self.db_path}")

        return self._local.connection

    @contextmanager
    def transaction(self, key: Optional[str] = None):
        """Context manager for database transactions; sqlite errors become StorageError."""
        try:
            conn = self._get_connection()
            try:
                yield conn
                conn.commit()
            except Exception:
                conn.rollback()
                raise
        except sqlite3.OperationalError as e:
            if "full" in str(e).lower():
                raise StorageQuotaError(f"Local storage is full: {e}", key=key) from e
            raise StorageError(f"Local storage operation failed: {e}", key=key) from e
        except sqlite3.Error as e:
            raise StorageError(f"Local storage operation failed: {e}", key=key) from e

    def get_item(self, key: str) -> Optional[str]:
        with self.transaction(key) as conn:
            row = conn.execute(
                "SELECT value FROM local_storage WHERE key = ?", [key]
            ).fetchone()
        return row["value"] if row else None

    def set_item(self, key: str, value: str) -> None:
        with self.transaction(key) as conn:
            conn.execute(
                """
                INSERT OR REPLACE INTO local_storage (key, value, updated_at)
                VALUES (?, ?, ?)
                """,
                [key, value, datetime.now().isoformat()]
            )

    def remove_item(self, key: str) -> None:
        with self.transaction(key) as conn:
            conn.execute("DELETE FROM local_storage WHERE key = ?", [key])

    def keys(self) -> List[str]:
        with self.transaction() as conn:
            rows = conn.execute("SELECT key FROM local_storage ORDER BY key").fetchall()
        return [row["key"] for row in rows]

    def close(self) -> None:
        """Close this thread's database connection."""
        if getattr(self._local, "connection", None) is not None:
            self._local.connection.close()
            self._local.connection = None


class MemoryStorage(KeyValueStorage):
    """
    Process-local storage. ``quota_bytes`` caps the total size of keys and
    values, so quota-exceeded behaviour can be reproduced without a full disk.
    """

    def __init__(self, quota_bytes: Optional[int] = None):
        self.quota_bytes = quota_bytes
        self._items: Dict[str, str] = {}
        self._lock = threading.Lock()

    def _size_with(self, key: str, value: str) -> int:
        items = dict(self._items)
        items[key] = value
        return sum(len(k.encode("utf-8")) + len(v.encode("utf-8")) for k, v in items.items())

    def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        if not isinstance(value, str):
            raise StorageError(f"Storage values must be strings, got {type(value).__name__}", key=key)
        with self._lock:
            if self.quota_bytes is not None and self._size_with(key, value) > self.quota_bytes:
                raise StorageQuotaError(
                    f"Writing '{key}' would exceed the {self.quota_bytes} byte quota",
                    key=key,
                )
            self._items[key] = value

    def remove_item(self, key: str) -> None:
        with self._lock:
            self._items.pop(key, None)

    def keys(self) -> List[str]:
        return sorted(self._items)
