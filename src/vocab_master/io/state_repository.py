"""Data access layer for the serialized application-state aggregate."""

import json
import logging
from datetime import date, datetime
from typing import Callable, Optional

from vocab_master.core import AppState, ImportFormatError, PersistenceError
from vocab_master.io.blob_store import BlobStore
from vocab_master.io.migrations import migrate_payload

logger = logging.getLogger(__name__)

STORAGE_KEY = "myVocabApp_v1"
BACKUP_KEY = "myVocabApp_v1_backup"


class StateRepository:
    """Loads, saves, exports and parses the AppState blob.

    The previous blob is copied to BACKUP_KEY just before every write so a
    single rollback copy is always available.
    """

    def __init__(self, store: BlobStore, clock: Callable[[], datetime] = datetime.now) -> None:
        if store is None:
            raise ValueError("BlobStore must not be None")
        self._store = store
        self._clock = clock

    def load(self) -> AppState:
        """Load the persisted state, falling back to defaults.

        An unreadable blob is logged and replaced by a fresh default state;
        booting never fails because of a corrupt payload.
        """
        raw = self._store.get(STORAGE_KEY)
        if not raw:
            return AppState.default(self._clock())
        try:
            return self._decode(raw)
        except (TypeError, ValueError, AttributeError) as e:
            logger.error("Error loading state, starting fresh: %s", e)
            return AppState.default(self._clock())

    def load_backup(self) -> Optional[AppState]:
        """Return the rollback copy, or None if there is none or it is unreadable."""
        raw = self._store.get(BACKUP_KEY)
        if not raw:
            return None
        try:
            return self._decode(raw)
        except (TypeError, ValueError, AttributeError) as e:
            logger.warning("Backup copy is unreadable: %s", e)
            return None

    def _decode(self, raw: str) -> AppState:
        payload = json.loads(raw)
        if not isinstance(payload, dict):
            raise ValueError("payload is not an object")
        return AppState.from_dict(migrate_payload(payload), self._clock())

    def save(self, state: AppState) -> None:
        """Write ``state``, keeping the previous blob as the rollback copy.

        Raises:
            PersistenceError: If serialization or the store write fails. The
                in-memory state is left as it is.
        """
        current = self._store.get(STORAGE_KEY)
        if current:
            self._store.set(BACKUP_KEY, current)

        state.meta.last_sync = self._clock()
        try:
            blob = json.dumps(state.to_dict(), ensure_ascii=False)
        except (TypeError, ValueError) as e:
            raise PersistenceError(f"Failed to serialize state: {e}") from e
        self._store.set(STORAGE_KEY, blob)
        logger.debug("Saved state (%d words, %d bytes)", len(state.words), len(blob))

    def storage_size(self) -> int:
        """Size of the stored primary blob in bytes."""
        raw = self._store.get(STORAGE_KEY) or ""
        return len(raw.encode("utf-8"))

    @staticmethod
    def export_document(state: AppState) -> str:
        return json.dumps(state.to_dict(), indent=2, ensure_ascii=False)

    @staticmethod
    def export_filename(today: date) -> str:
        return f"vocab_backup_{today.strftime('%Y%m%d')}.json"

    def parse_import_document(self, text: str) -> AppState:
        """Parse an exported document into an AppState.

        Raises:
            ImportFormatError: If the text is not JSON, lacks the top-level
                ``meta`` or ``words`` fields, or holds values of the wrong
                shape. Nothing is applied in that case.
        """
        try:
            payload = json.loads(text)
        except (json.JSONDecodeError, TypeError) as e:
            raise ImportFormatError(f"Invalid backup file: {e}") from e
        if not isinstance(payload, dict) or not payload.get("meta") or "words" not in payload:
            raise ImportFormatError("Invalid backup file format: missing 'meta' or 'words'")
        if not isinstance(payload["words"], (dict, list)):
            raise ImportFormatError("Invalid backup file format: 'words' must be a collection")
        try:
            return AppState.from_dict(migrate_payload(payload), self._clock())
        except (TypeError, ValueError, AttributeError) as e:
            raise ImportFormatError(f"Invalid backup file format: {e}") from e
