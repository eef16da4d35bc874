"""Unit tests for the BlobStore implementations."""

import pytest

from vocab_master.core import PersistenceError
from vocab_master.io import InMemoryBlobStore, SqliteBlobStore


@pytest.fixture
def sqlite_store(tmp_path):
    store = SqliteBlobStore(tmp_path / "test.db")
    store.ensure_schema()
    yield store
    store.close()


@pytest.fixture(params=["memory", "sqlite"])
def store(request, tmp_path):
    """Run the contract tests against both implementations."""
    if request.param == "memory":
        yield InMemoryBlobStore()
        return
    s = SqliteBlobStore(tmp_path / "contract.db")
    s.ensure_schema()
    yield s
    s.close()


class TestBlobStoreContract:
    def test_get_missing_key_returns_none(self, store):
        assert store.get("nope") is None

    def test_set_then_get(self, store):
        store.set("k", '{"a": 1}')
        assert store.get("k") == '{"a": 1}'

    def test_set_overwrites(self, store):
        store.set("k", "one")
        store.set("k", "two")
        assert store.get("k") == "two"

    def test_clear_removes_everything(self, store):
        store.set("a", "1")
        store.set("b", "2")
        store.clear()
        assert store.get("a") is None
        assert store.get("b") is None


class TestQuota:
    def test_in_memory_quota_rejects_large_blob(self):
        store = InMemoryBlobStore(max_blob_bytes=10)
        with pytest.raises(PersistenceError, match="quota"):
            store.set("k", "x" * 11)
        assert store.get("k") is None

    def test_sqlite_quota_keeps_previous_value(self, tmp_path):
        store = SqliteBlobStore(tmp_path / "quota.db", max_blob_bytes=5)
        store.ensure_schema()
        store.set("k", "ok")
        with pytest.raises(PersistenceError):
            store.set("k", "too long")
        assert store.get("k") == "ok"
        store.close()


class TestSqliteBlobStore:
    def test_ensure_schema_is_idempotent(self, sqlite_store):
        sqlite_store.ensure_schema()
        sqlite_store.set("k", "v")
        assert sqlite_store.get("k") == "v"

    def test_data_survives_reopen(self, tmp_path):
        db_path = tmp_path / "persist.db"
        store = SqliteBlobStore(db_path)
        store.ensure_schema()
        store.set("k", "kept")
        store.close()

        reopened = SqliteBlobStore(db_path)
        assert reopened.get("k") == "kept"
        reopened.close()

    def test_read_without_schema_raises_persistence_error(self, tmp_path):
        store = SqliteBlobStore(tmp_path / "empty.db")
        with pytest.raises(PersistenceError):
            store.get("k")
        store.close()
