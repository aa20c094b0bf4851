import json
from datetime import datetime
from pathlib import Path

import pytest

from packages.core.errors import PersistenceError
from packages.statement_engine import learning
from packages.statement_engine.learning import (
    InMemoryBackend,
    JsonFileBackend,
    LearnedPatternStore,
    get_default_store,
    set_default_store,
)


class FailingBackend:
    def load(self):
        raise PersistenceError("disk unavailable", path="/nowhere")

    def save(self, document):
        raise PersistenceError("disk unavailable", path="/nowhere")


@pytest.fixture
def backend():
    return InMemoryBackend()


@pytest.fixture
def store(backend):
    return LearnedPatternStore(backend)


class TestLearnedPatternStore:
    def test_starts_with_defaults(self, store):
        assert store.stats() == {
            "totalParsed": 0,
            "correctionsMade": 0,
            "bankStats": {},
            "learnedMerchants": 0,
            "categoryCorrections": 0,
            "customPatterns": 0,
        }

    def test_record_correction_lowercases_key_and_counts(self, store, backend):
        store.record_correction("Swiggy", "Dining")
        store.record_correction("SWIGGY", "Food")

        assert store.category_corrections == {"swiggy": "Food"}
        assert store.parsing_stats.corrections_made == 2
        assert store.lookup_category("Swiggy") == "Food"
        assert backend.save_count == 2

    def test_record_merchant_mapping_uppercases_key(self, store, backend):
        store.record_merchant_mapping("swiggy*blr123", "Swiggy Foods")

        assert store.merchant_mappings == {"SWIGGY*BLR123": "Swiggy Foods"}
        assert store.lookup_merchant("Swiggy*Blr123") == "Swiggy Foods"
        assert backend.document["merchantMappings"] == {"SWIGGY*BLR123": "Swiggy Foods"}

    def test_custom_patterns_keep_insertion_order(self, store):
        store.record_custom_pattern("acme", "Work")
        store.record_custom_pattern("gym", "Fitness")

        assert [(p.keyword, p.category) for p in store.custom_patterns] == [
            ("acme", "Work"),
            ("gym", "Fitness"),
        ]
        added_at = datetime.fromisoformat(store.custom_patterns[0].added_at)
        assert added_at.tzinfo is not None

    def test_arbitrary_categories_are_accepted(self, store):
        store.record_correction("zomato", "Late Night Snacks")
        assert store.lookup_category("zomato") == "Late Night Snacks"

    def test_record_parse_updates_bank_stats(self, store, backend):
        store.record_parse(5, bank="HDFC", bank_succeeded=True)
        store.record_parse(1, bank="HDFC", bank_succeeded=False)
        store.record_parse(4)

        stats = store.stats()
        assert stats["totalParsed"] == 10
        assert stats["bankStats"] == {"HDFC": {"attempts": 2, "success": 1}}
        # One flush per parse
        assert backend.save_count == 3

    def test_loads_partial_document_over_defaults(self):
        backend = InMemoryBackend({"merchantMappings": {"ACME*01": "Acme"}})
        store = LearnedPatternStore(backend)

        assert store.lookup_merchant("ACME*01") == "Acme"
        assert store.category_corrections == {}
        assert store.parsing_stats.total_parsed == 0

    def test_invalid_document_keeps_defaults(self):
        backend = InMemoryBackend({"customPatterns": "not-a-list"})
        store = LearnedPatternStore(backend)
        assert store.custom_patterns == []

    def test_one_bad_key_does_not_discard_the_others(self):
        backend = InMemoryBackend(
            {
                "merchantMappings": {"ACME*01": "Acme", "FOO*2": "Foo"},
                "categoryCorrections": {"acme": "Work"},
                "parsingStats": {"totalParsed": "many"},
                "customPatterns": [{"keyword": "gym"}, {"keyword": "acme", "category": "Work"}],
            }
        )
        store = LearnedPatternStore(backend)

        assert store.lookup_merchant("ACME*01") == "Acme"
        assert store.lookup_category("acme") == "Work"
        assert store.parsing_stats.total_parsed == 0
        assert [(p.keyword, p.category) for p in store.custom_patterns] == [("acme", "Work")]

        store.record_custom_pattern("yoga", "Health")

        saved = backend.document
        assert saved["merchantMappings"] == {"ACME*01": "Acme", "FOO*2": "Foo"}
        assert saved["categoryCorrections"] == {"acme": "Work"}
        assert [p["keyword"] for p in saved["customPatterns"]] == ["acme", "yoga"]

    def test_non_mapping_document_keeps_defaults(self):
        store = LearnedPatternStore(InMemoryBackend(["not", "a", "document"]))
        assert store.merchant_mappings == {}

    def test_persistence_failures_are_swallowed(self):
        store = LearnedPatternStore(FailingBackend())

        store.record_correction("swiggy", "Dining")
        store.record_parse(2, bank="SBI")

        assert store.lookup_category("swiggy") == "Dining"
        assert store.parsing_stats.total_parsed == 2


class TestJsonFileBackend:
    def test_creates_parent_directories_on_first_write(self, tmp_path):
        path = tmp_path / "nested" / "dir" / "learned_patterns.json"
        store = LearnedPatternStore(JsonFileBackend(str(path)))
        assert not path.exists()

        store.record_merchant_mapping("SWIGGY*BLR123", "Swiggy Foods")

        document = json.loads(path.read_text(encoding="utf-8"))
        assert document["merchantMappings"] == {"SWIGGY*BLR123": "Swiggy Foods"}
        assert document["parsingStats"] == {"totalParsed": 0, "correctionsMade": 0, "bankStats": {}}
        assert document["customPatterns"] == []

    def test_round_trip_between_processes(self, tmp_path):
        path = str(tmp_path / "patterns.json")
        first = LearnedPatternStore(JsonFileBackend(path))
        first.record_correction("swiggy", "Dining")
        first.record_custom_pattern("acme", "Work")
        first.record_parse(3, bank="HDFC", bank_succeeded=True)

        second = LearnedPatternStore(JsonFileBackend(path))
        assert second.lookup_category("swiggy") == "Dining"
        assert second.custom_patterns[0].keyword == "acme"
        assert second.stats()["bankStats"] == {"HDFC": {"attempts": 1, "success": 1}}

    def test_missing_file_loads_nothing(self, tmp_path):
        assert JsonFileBackend(str(tmp_path / "absent.json")).load() is None

    def test_corrupt_file_raises_persistence_error(self, tmp_path):
        path = tmp_path / "patterns.json"
        path.write_text("{not json", encoding="utf-8")

        with pytest.raises(PersistenceError):
            JsonFileBackend(str(path)).load()

        # The store tolerates it and starts fresh
        store = LearnedPatternStore(JsonFileBackend(str(path)))
        assert store.merchant_mappings == {}

    def test_unwritable_path_raises_persistence_error(self, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("", encoding="utf-8")
        backend = JsonFileBackend(str(blocker / "patterns.json"))

        with pytest.raises(PersistenceError) as exc_info:
            backend.save({"merchantMappings": {}})
        assert exc_info.value.path.endswith("patterns.json")


class TestDefaultStore:
    @pytest.fixture(autouse=True)
    def reset_default(self):
        set_default_store(None)
        yield
        set_default_store(None)

    def test_default_store_uses_configured_path(self, tmp_path, monkeypatch):
        path = tmp_path / "default.json"
        monkeypatch.setenv("LEARNED_PATTERNS_PATH", str(path))

        store = get_default_store()
        assert isinstance(store.backend, JsonFileBackend)
        assert store.backend.path == Path(str(path))
        assert get_default_store() is store

    def test_set_default_store(self):
        custom = LearnedPatternStore(InMemoryBackend())
        set_default_store(custom)
        assert learning.get_default_store() is custom
