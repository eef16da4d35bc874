"""SQLite-backed blob store for the persisted application state."""

import sqlite3
from pathlib import Path
from typing import Optional

from vocab_master.core import PersistenceError
from vocab_master.io.blob_store import BlobStore


class SqliteBlobStore(BlobStore):
    """Owns the SQLite connection and a single key/value table.

    Write failures (locked database, disk full, quota) surface as
    PersistenceError so callers never see sqlite3 exceptions.
    """

    def __init__(self, db_path: Path, max_blob_bytes: Optional[int] = None) -> None:
        self.db_path = Path(db_path)
        self.connection = sqlite3.connect(self.db_path)
        self.connection.row_factory = sqlite3.Row
        self._max_blob_bytes = max_blob_bytes

    def ensure_schema(self) -> None:
        """Create the table if it does not exist."""
        cur = self.connection.cursor()
        cur.execute(
            """
            CREATE TABLE IF NOT EXISTS kv_store (
                key TEXT PRIMARY KEY,
                value TEXT NOT NULL,
                updated_at TIMESTAMP NOT NULL DEFAULT CURRENT_TIMESTAMP
            );
            """
        )
        self.connection.commit()

    def get(self, key: str) -> Optional[str]:
        try:
            cur = self.connection.cursor()
            cur.execute("SELECT value FROM kv_store WHERE key = ?", (key,))
            row = cur.fetchone()
        except sqlite3.Error as e:
            raise PersistenceError(f"Failed to read '{key}': {e}") from e
        return row["value"] if row else None

    def set(self, key: str, value: str) -> None:
        size = len(value.encode("utf-8"))
        if self._max_blob_bytes is not None and size > self._max_blob_bytes:
            raise PersistenceError(
                f"Storage quota exceeded: {size} bytes > {self._max_blob_bytes} bytes"
            )
        try:
            cur = self.connection.cursor()
            cur.execute(
                """
                INSERT INTO kv_store (key, value)
                VALUES (?, ?)
                ON CONFLICT(key) DO UPDATE SET
                    value = excluded.value,
                    updated_at = CURRENT_TIMESTAMP
                """,
                (key, value),
            )
            self.connection.commit()
        except sqlite3.Error as e:
            self.connection.rollback()
            raise PersistenceError(f"Failed to write '{key}': {e}") from e

    def clear(self) -> None:
        try:
            self.connection.execute("DELETE FROM kv_store")
            self.connection.commit()
        except sqlite3.Error as e:
            raise PersistenceError(f"Failed to clear store: {e}") from e

    def close(self) -> None:
        self.connection.close()
