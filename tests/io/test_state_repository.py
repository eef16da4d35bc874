"""Unit tests for StateRepository and payload migrations."""

import json
from datetime import date, datetime

import pytest

from vocab_master.core import SCHEMA_VERSION, AppState, ImportFormatError, PersistenceError, Word, WordStats
from vocab_master.io import BACKUP_KEY, STORAGE_KEY, InMemoryBlobStore, StateRepository, migrate_payload


NOW = datetime(2024, 3, 10, 9, 30)


@pytest.fixture
def store():
    return InMemoryBlobStore()


@pytest.fixture
def repo(store):
    return StateRepository(store, clock=lambda: NOW)


def _state_with_word() -> AppState:
    state = AppState.default(NOW)
    state.words["a"] = Word(id="a", english="apple", turkish="elma", stats=WordStats.fresh(NOW))
    return state


class TestLoad:
    def test_empty_store_gives_default_state(self, repo):
        state = repo.load()
        assert state.words == {}
        assert state.meta.created_at == NOW

    def test_corrupt_blob_falls_back_to_defaults(self, store, repo):
        store.set(STORAGE_KEY, "{not json")
        state = repo.load()
        assert state.words == {}

    def test_non_object_blob_falls_back_to_defaults(self, store, repo):
        store.set(STORAGE_KEY, "[1, 2, 3]")
        assert repo.load().words == {}

    def test_saved_state_loads_back(self, repo):
        repo.save(_state_with_word())
        loaded = repo.load()
        assert list(loaded.words) == ["a"]
        assert loaded.words["a"].english == "apple"

    def test_legacy_turkish_explanation_is_migrated_on_load(self, store, repo):
        store.set(
            STORAGE_KEY,
            json.dumps({
                "meta": {"version": "1.0"},
                "words": {"a": {"id": "a", "english": "apple", "turkish": "elma", "turkExp": "meyve"}},
            }),
        )
        state = repo.load()
        assert state.words["a"].turkish_explanation == "meyve"
        assert state.meta.version == SCHEMA_VERSION


class TestSave:
    def test_save_sets_last_sync(self, repo):
        state = AppState.default(datetime(2020, 1, 1))
        repo.save(state)
        assert state.meta.last_sync == NOW

    def test_previous_blob_is_kept_as_backup(self, store, repo):
        first = AppState.default(NOW)
        repo.save(first)
        first_blob = store.get(STORAGE_KEY)

        repo.save(_state_with_word())

        assert store.get(BACKUP_KEY) == first_blob
        assert list(repo.load_backup().words) == []
        assert list(repo.load().words) == ["a"]

    def test_no_backup_before_first_save(self, repo):
        assert repo.load_backup() is None

    def test_quota_error_propagates(self):
        repo = StateRepository(InMemoryBlobStore(max_blob_bytes=20), clock=lambda: NOW)
        with pytest.raises(PersistenceError):
            repo.save(_state_with_word())

    def test_storage_size_counts_bytes(self, repo):
        assert repo.storage_size() == 0
        repo.save(_state_with_word())
        assert repo.storage_size() > 0

    def test_none_store_raises_value_error(self):
        with pytest.raises(ValueError):
            StateRepository(None)


class TestExportImport:
    def test_export_filename(self):
        assert StateRepository.export_filename(date(2024, 3, 5)) == "vocab_backup_20240305.json"

    def test_export_is_indented_json(self):
        document = StateRepository.export_document(_state_with_word())
        assert "\n  " in document
        assert json.loads(document)["words"]["a"]["english"] == "apple"

    def test_exported_document_imports_back(self, repo):
        document = StateRepository.export_document(_state_with_word())
        imported = repo.parse_import_document(document)
        assert imported.words["a"].turkish == "elma"

    @pytest.mark.parametrize(
        "text",
        [
            "not json at all",
            json.dumps({"words": {}}),
            json.dumps({"meta": {"version": "2.0"}}),
            json.dumps({"meta": {"version": "2.0"}, "words": "apple"}),
            json.dumps(["meta", "words"]),
        ],
    )
    def test_malformed_documents_are_rejected(self, repo, text):
        with pytest.raises(ImportFormatError):
            repo.parse_import_document(text)


class TestMigrations:
    def test_aliases_fold_into_turkish_explanation(self):
        payload = {
            "meta": {"version": "1.0"},
            "words": [
                {"id": "a", "turkishExp": "first"},
                {"id": "b", "turkishExplanation": "kept", "turkExp": "ignored"},
            ],
        }
        migrate_payload(payload)

        assert payload["words"][0] == {"id": "a", "turkishExplanation": "first"}
        assert payload["words"][1] == {"id": "b", "turkishExplanation": "kept"}
        assert payload["meta"]["version"] == SCHEMA_VERSION

    def test_current_version_is_untouched(self):
        payload = {"meta": {"version": SCHEMA_VERSION}, "words": {"a": {"turkExp": "x"}}}
        migrate_payload(payload)
        assert payload["words"]["a"] == {"turkExp": "x"}

    def test_missing_collections_are_created(self):
        payload = {"words": {}}
        migrate_payload(payload)
        assert payload["categories"] == []
        assert payload["history"] == []


WRONGLY_SHAPED = {
    "stats is a string": {"id": "a", "english": "apple", "turkish": "elma", "stats": "fresh"},
    "counter is not a number": {
        "id": "a", "english": "apple", "turkish": "elma", "stats": {"timesTested": "n/a", "wrongCount": [1]},
    },
    "list fields are scalars": {
        "id": "a", "english": "apple", "turkish": "elma", "synonyms": "fruit", "examples": 3, "categories": "Food",
    },
}


def _wrongly_shaped_document(word, **extra) -> str:
    payload = {"meta": {"version": SCHEMA_VERSION}, "words": {"a": word}}
    payload.update(extra)
    return json.dumps(payload)


class TestWronglyShapedPayloads:
    """Documents that parse as JSON but carry values of the wrong type."""

    @pytest.mark.parametrize("word", list(WRONGLY_SHAPED.values()), ids=list(WRONGLY_SHAPED))
    def test_import_keeps_the_word_with_default_fields(self, repo, word):
        state = repo.parse_import_document(_wrongly_shaped_document(word))

        loaded = state.words["a"]
        assert loaded.english == "apple"
        assert loaded.stats.times_tested == 0
        assert loaded.stats.wrong_count == 0
        assert loaded.synonyms == []
        assert loaded.examples == []
        assert loaded.categories == []

    @pytest.mark.parametrize("word", list(WRONGLY_SHAPED.values()), ids=list(WRONGLY_SHAPED))
    def test_load_tolerates_bad_word_fields(self, store, repo, word):
        store.set(STORAGE_KEY, _wrongly_shaped_document(word))
        assert repo.load().words["a"].stats.added_at == NOW

    def test_streak_and_history_of_wrong_shape_are_defaulted(self, store, repo):
        word = {"id": "a", "english": "apple", "turkish": "elma"}
        store.set(
            STORAGE_KEY,
            _wrongly_shaped_document(
                word,
                appStats={"totalAdded": "many", "streak": "long"},
                history=[{"quizId": "q", "score": "high", "total": 4, "details": ["oops", {"type": ["x"]}]}],
                settings={"theme": ["dark"], "notificationHour": 20},
            ),
        )

        state = repo.load()

        assert state.app_stats.streak.current == 0
        assert state.app_stats.total_added == 0
        assert state.history[0].score == 0
        assert state.history[0].total == 4
        assert len(state.history[0].details) == 1
        assert state.history[0].details[0].type.value == "direct"
        assert state.settings.notification_hour == "20"

    def test_decoding_errors_become_import_format_errors(self, repo, monkeypatch):
        def explode(data, now=None):
            raise AttributeError("'str' object has no attribute 'get'")

        monkeypatch.setattr(AppState, "from_dict", explode)
        with pytest.raises(ImportFormatError):
            repo.parse_import_document(_wrongly_shaped_document({"id": "a"}))

    def test_decoding_errors_on_load_fall_back_to_defaults(self, store, repo, monkeypatch):
        store.set(STORAGE_KEY, _wrongly_shaped_document({"id": "a"}))
        monkeypatch.setattr(AppState, "from_dict", lambda data, now=None: int("n/a"))

        assert repo.load().words == {}
