"""Tests for the SQLite key-value store."""

from __future__ import annotations

from pathlib import Path

import pytest

from lifequest.core.exceptions import StorageQuotaError
from lifequest.storage import KeyValueStore


class TestKeyValueStore:
    """Tests for KeyValueStore operations."""

    def test_creates_parent_directory(self, store: KeyValueStore) -> None:
        """Test the database file is created with its folder."""
        assert store.db_path.exists()

    def test_get_missing(self, store: KeyValueStore) -> None:
        """Test absent keys read as None."""
        assert store.get("gameState") is None
        assert store.get_record("gameState") is None

    def test_set_and_replace(self, store: KeyValueStore) -> None:
        """Test writes replace the previous value."""
        store.set("gameState", '{"version": "1.0"}')
        store.set("gameState", '{"version": "1.1"}')

        record = store.get_record("gameState")
        assert record is not None
        assert record.value == '{"version": "1.1"}'
        assert record.updated_at.tzinfo is not None

    def test_unicode_size(self, store: KeyValueStore) -> None:
        """Test sizes count encoded bytes."""
        store.set("name", "Борис")

        record = store.get_record("name")
        assert record is not None
        assert record.size_bytes == 10

    def test_delete_and_keys(self, store: KeyValueStore) -> None:
        """Test deletion and key listing."""
        store.set("gameState", "{}")
        store.set("backupGameState", "{}")

        assert store.keys() == ["backupGameState", "gameState"]
        assert store.delete("gameState")
        assert not store.delete("gameState")
        assert store.keys() == ["backupGameState"]

    def test_persists_across_instances(self, store: KeyValueStore) -> None:
        """Test a second store on the same file sees the data."""
        store.set("gameState", "{}")
        assert KeyValueStore(store.db_path).get("gameState") == "{}"


class TestQuota:
    """Tests for the per-value quota."""

    def test_rejects_oversized_value(self, tmp_path: Path) -> None:
        """Test values over the quota raise and are not written."""
        store = KeyValueStore(tmp_path / "quota.db", max_value_bytes=8)

        with pytest.raises(StorageQuotaError) as exc_info:
            store.set("gameState", "x" * 9)

        assert exc_info.value.details["size_bytes"] == 9
        assert exc_info.value.details["limit_bytes"] == 8
        assert store.get("gameState") is None

    def test_accepts_value_at_quota(self, tmp_path: Path) -> None:
        """Test the quota is inclusive."""
        store = KeyValueStore(tmp_path / "quota.db", max_value_bytes=8)
        store.set("gameState", "x" * 8)
        assert store.get("gameState") == "x" * 8


class TestDefaultStore:
    """Tests for the settings-based shared store."""

    def test_built_from_settings(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test get_store uses the configured path and quota once."""
        from lifequest.core.config import clear_settings_cache
        from lifequest.storage import database

        monkeypatch.setenv("LIFEQUEST_DATABASE_PATH", str(tmp_path / "shared.db"))
        monkeypatch.setenv("LIFEQUEST_MAX_SAVE_BYTES", "4096")
        monkeypatch.setattr(database, "_default_store", None)
        clear_settings_cache()

        shared = database.get_store()

        assert shared.db_path == tmp_path / "shared.db"
        assert shared.max_value_bytes == 4096
        assert database.get_store() is shared
