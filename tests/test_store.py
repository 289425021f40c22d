"""Tests for snapshot stores and field-by-field snapshot validation."""

import json

from shiritori.core.store import JsonFileStore, MemoryStore, valid_fields

SNAPSHOT = {
    "currentPlayerIndex": 1,
    "scores": [1, -2],
    "usedWords": [{"word": "tiger", "by": "Player 1"}],
    "lastLetter": "r",
    "gameOver": False,
    "consecutiveTimeouts": 1,
}


class TestJsonFileStore:
    def test_missing_file_loads_none(self, tmp_path):
        assert JsonFileStore(tmp_path / "state.json").load() is None

    def test_save_then_load(self, tmp_path):
        store = JsonFileStore(tmp_path / "nested" / "state.json")
        store.save(SNAPSHOT)
        assert store.path.exists()
        assert store.load() == SNAPSHOT

    def test_save_replaces_previous(self, tmp_path):
        store = JsonFileStore(tmp_path / "state.json")
        store.save(SNAPSHOT)
        store.save({**SNAPSHOT, "scores": [0, 0]})
        assert store.load()["scores"] == [0, 0]
        assert list(tmp_path.glob("*.tmp")) == []

    def test_corrupt_file_loads_none(self, tmp_path):
        path = tmp_path / "state.json"
        path.write_text("{not json")
        assert JsonFileStore(path).load() is None

    def test_unwritable_location_is_ignored(self, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("a file, not a directory")
        store = JsonFileStore(blocker / "state.json")
        store.save(SNAPSHOT)
        assert store.load() is None

    def test_clear(self, tmp_path):
        store = JsonFileStore(tmp_path / "state.json")
        store.save(SNAPSHOT)
        store.clear()
        assert store.load() is None
        store.clear()

    def test_written_file_is_plain_json(self, tmp_path):
        path = tmp_path / "state.json"
        JsonFileStore(path).save(SNAPSHOT)
        assert json.loads(path.read_text())["lastLetter"] == "r"


class TestMemoryStore:
    def test_empty(self):
        assert MemoryStore().load() is None

    def test_copies_are_isolated(self):
        store = MemoryStore(record=True)
        snap = dict(SNAPSHOT, scores=[0, 0])
        store.save(snap)
        snap["scores"].append(5)
        loaded = store.load()
        loaded["scores"].append(9)
        assert store.load()["scores"] == [0, 0]
        assert len(store.saves) == 1

    def test_does_not_record_by_default(self):
        store = MemoryStore()
        for _ in range(3):
            store.save(SNAPSHOT)
        assert store.saves == []
        assert store.load() == SNAPSHOT

    def test_clear(self):
        store = MemoryStore(SNAPSHOT)
        store.clear()
        assert store.load() is None


class TestValidFields:
    def test_valid_snapshot_passes_whole(self):
        assert valid_fields(SNAPSHOT) == SNAPSHOT

    def test_null_last_letter_allowed(self):
        assert valid_fields({"lastLetter": None}) == {"lastLetter": None}

    def test_bad_fields_dropped_individually(self):
        raw = dict(SNAPSHOT, scores="high", gameOver=1)
        fields = valid_fields(raw)
        assert "scores" not in fields
        assert "gameOver" not in fields
        assert fields["usedWords"] == SNAPSHOT["usedWords"]

    def test_used_word_entries_need_word_and_by(self):
        assert valid_fields({"usedWords": [{"word": "tiger"}]}) == {}

    def test_booleans_are_not_integers(self):
        assert valid_fields({"currentPlayerIndex": True}) == {}

    def test_unknown_keys_dropped(self):
        assert valid_fields({"input": "tig", "feedback": "x"}) == {}

    def test_non_mapping(self):
        assert valid_fields(None) == {}
        assert valid_fields(["scores"]) == {}
