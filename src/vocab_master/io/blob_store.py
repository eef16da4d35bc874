"""Blob store abstraction - key/value storage for the serialized state."""

from abc import ABC, abstractmethod
from typing import Dict, List, Optional

from vocab_master.core import PersistenceError


class BlobStore(ABC):
    """
    Abstract string key/value store.

    Implementations (InMemoryBlobStore, SqliteBlobStore) handle storage details.
    StateRepository depends on this abstraction, not on concrete storage.
    """

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """
        Retrieve the blob stored under ``key``.

        Returns:
            The stored string, or None if the key is absent.
        """
        pass

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """
        Store or overwrite the blob under ``key``.

        Raises:
            PersistenceError: If the store rejects the write (e.g. quota).
        """
        pass

    @abstractmethod
    def clear(self) -> None:
        """Remove every stored blob."""
        pass


class InMemoryBlobStore(BlobStore):
    """
    Simple in-memory store.

    Used for testing and for sessions that should not touch disk.
    ``max_blob_bytes`` emulates a storage quota.
    """

    def __init__(self, max_blob_bytes: Optional[int] = None):
        self._store: Dict[str, str] = {}
        self._max_blob_bytes = max_blob_bytes

    def get(self, key: str) -> Optional[str]:
        return self._store.get(key)

    def set(self, key: str, value: str) -> None:
        size = len(value.encode("utf-8"))
        if self._max_blob_bytes is not None and size > self._max_blob_bytes:
            raise PersistenceError(
                f"Storage quota exceeded: {size} bytes > {self._max_blob_bytes} bytes"
            )
        self._store[key] = value

    def clear(self) -> None:
        self._store.clear()

    def keys(self) -> List[str]:
        """List stored keys. Useful for diagnostics and testing."""
        return list(self._store.keys())
