"""I/O layer - Blob storage, state persistence and payload migrations."""

from .blob_store import BlobStore, InMemoryBlobStore
from .debounced_writer import DebouncedWriter
from .migrations import migrate_payload
from .sqlite_blob_store import SqliteBlobStore
from .state_repository import BACKUP_KEY, STORAGE_KEY, StateRepository

__all__ = [
    "BlobStore",
    "InMemoryBlobStore",
    "SqliteBlobStore",
    "StateRepository",
    "DebouncedWriter",
    "migrate_payload",
    "STORAGE_KEY",
    "BACKUP_KEY",
]
