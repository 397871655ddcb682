"""Tests for the save manager."""

from __future__ import annotations

import json
from collections.abc import Callable
from pathlib import Path

import pytest

from lifequest.core.constants import BACKUP_KEY, SAVE_KEY
from lifequest.core.exceptions import InvalidSaveError, StorageError
from lifequest.models import GameState, JournalEntry
from lifequest.storage import KeyValueStore, SaveManager, serialize_state, trim_journal


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def manager(store: KeyValueStore, clock: FakeClock) -> SaveManager:
    """Manager with a one-minute backup window."""
    return SaveManager(store, backup_interval=60, journal_keep=5, clock=clock)


def _with_long_journal(state: GameState, entries: int = 200) -> GameState:
    character = state.require_character()
    journal = [JournalEntry(text=f"Entry {index}: " + "quest " * 20) for index in range(entries)]
    return state.with_character(character.model_copy(update={"journal": journal}))


class TestLoad:
    """Tests for SaveManager.load."""

    def test_empty_store(self, manager: SaveManager) -> None:
        """Test loading with no saves returns None."""
        assert manager.load() is None

    def test_round_trip(self, manager: SaveManager, warrior_state: GameState) -> None:
        """Test a saved state loads back equal."""
        assert manager.save(warrior_state)
        assert manager.load() == warrior_state

    def test_falls_back_to_backup(
        self,
        manager: SaveManager,
        store: KeyValueStore,
        warrior_state: GameState,
    ) -> None:
        """Test a corrupt primary save is replaced by the backup."""
        manager.save(warrior_state)
        store.set(SAVE_KEY, "{not json")

        assert manager.load() == warrior_state

    def test_malformed_primary_falls_back(
        self,
        manager: SaveManager,
        store: KeyValueStore,
        warrior_state: GameState,
    ) -> None:
        """Test JSON-valid primary data with object-valued enum fields recovers from backup."""
        manager.save(warrior_state)
        corrupt = warrior_state.to_storage()
        corrupt["dungeonState"]["currentMob"] = {"specialAbility": {"x": 1}}
        corrupt["character"]["inventory"] = [{"name": {"en": "Herb"}, "type": ["Material"]}] * 2
        store.set(SAVE_KEY, json.dumps(corrupt))

        assert manager.load() == warrior_state

    def test_unreadable_store_does_not_raise(
        self,
        manager: SaveManager,
        store: KeyValueStore,
        warrior_state: GameState,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        """Test a failing primary read falls through to the backup."""
        manager.save(warrior_state)
        read = store.get

        def flaky_get(key: str) -> str | None:
            if key == SAVE_KEY:
                raise StorageError("disk I/O error", key=key)
            return read(key)

        monkeypatch.setattr(store, "get", flaky_get)

        assert manager.load() == warrior_state

    def test_invalid_primary_and_backup(self, manager: SaveManager, store: KeyValueStore) -> None:
        """Test structurally invalid copies are rejected."""
        store.set(SAVE_KEY, json.dumps({"version": "1.1"}))
        store.set(BACKUP_KEY, json.dumps([1, 2, 3]))

        assert manager.load() is None

    def test_migrates_legacy_save(self, manager: SaveManager, store: KeyValueStore) -> None:
        """Test unversioned saves are upgraded on load."""
        legacy = {
            "character": {
                "name": "Aria",
                "classType": "Маг",
                "stats": {"str": 5, "dex": 6, "int": 16, "vit": 8},
                "hp": 90,
                "maxHp": 90,
            }
        }
        store.set(SAVE_KEY, json.dumps(legacy, ensure_ascii=False))

        state = manager.load()

        assert state is not None
        assert state.version == "1.1"
        assert state.require_character().class_type.value == "Mage"


class TestSave:
    """Tests for SaveManager.save."""

    def test_backup_written_once_per_window(
        self,
        manager: SaveManager,
        store: KeyValueStore,
        clock: FakeClock,
        warrior_state: GameState,
        patch_character: Callable[..., GameState],
    ) -> None:
        """Test the backup lags the primary inside the window."""
        manager.save(warrior_state)
        richer = patch_character(warrior_state, gold=999)

        clock.now = 30
        manager.save(richer)
        assert store.get(BACKUP_KEY) == serialize_state(warrior_state)
        assert store.get(SAVE_KEY) == serialize_state(richer)

        clock.now = 61
        manager.save(richer)
        assert store.get(BACKUP_KEY) == serialize_state(richer)

    def test_quota_trims_journal(self, tmp_path: Path, warrior_state: GameState, clock: FakeClock) -> None:
        """Test an oversized save retries with a shortened journal."""
        state = _with_long_journal(warrior_state)
        trimmed = trim_journal(state, 5)
        limit = len(serialize_state(trimmed).encode("utf-8"))
        manager = SaveManager(KeyValueStore(tmp_path / "q.db", max_value_bytes=limit), journal_keep=5, clock=clock)

        assert manager.save(state)

        loaded = manager.load()
        assert loaded is not None
        assert len(loaded.require_character().journal) == 5
        assert loaded.require_character().journal[0].text.startswith("Entry 0:")

    def test_quota_failure_is_swallowed(self, tmp_path: Path, warrior_state: GameState, clock: FakeClock) -> None:
        """Test a save that cannot fit even when trimmed reports failure."""
        manager = SaveManager(KeyValueStore(tmp_path / "q.db", max_value_bytes=16), clock=clock)

        assert manager.save(warrior_state) is False
        assert manager.load() is None

    def test_reset(self, manager: SaveManager, store: KeyValueStore, warrior_state: GameState) -> None:
        """Test reset removes both copies."""
        manager.save(warrior_state)
        manager.reset()
        assert store.keys() == []


class TestTrimJournal:
    """Tests for trim_journal."""

    def test_keeps_newest(self, warrior_state: GameState) -> None:
        """Test the first entries are kept, newest first."""
        trimmed = trim_journal(_with_long_journal(warrior_state, 8), 3)
        assert [entry.text[:7] for entry in trimmed.require_character().journal] == ["Entry 0", "Entry 1", "Entry 2"]

    def test_short_journal_untouched(self, warrior_state: GameState) -> None:
        """Test journals within the limit are returned as is."""
        assert trim_journal(warrior_state, 5) is warrior_state


class TestExportImport:
    """Tests for export_state and import_state."""

    def test_export_is_indented_json(self, manager: SaveManager, warrior_state: GameState) -> None:
        """Test exports are readable JSON in the storage shape."""
        document = manager.export_state(warrior_state)

        assert "\n  " in document
        assert json.loads(document)["character"]["maxHp"] == 110

    def test_import_round_trip(self, manager: SaveManager, store: KeyValueStore, warrior_state: GameState) -> None:
        """Test importing an export restores the state without writing it."""
        imported = manager.import_state(manager.export_state(warrior_state))

        assert imported == warrior_state
        assert store.keys() == []

    @pytest.mark.parametrize("document", ["", "{oops", "[]", '{"version": "1.1"}'])
    def test_import_rejects_invalid(self, manager: SaveManager, document: str) -> None:
        """Test invalid documents raise InvalidSaveError."""
        with pytest.raises(InvalidSaveError):
            manager.import_state(document)
