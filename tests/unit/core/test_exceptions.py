"""Tests for the exception hierarchy."""

from __future__ import annotations

import pytest

from lifequest.core.exceptions import (
    CombatError,
    ConfigurationError,
    GameEngineError,
    InvalidGameStateError,
    InvalidSaveError,
    LifeQuestError,
    StorageError,
    StorageQuotaError,
    ValidationError,
)


class TestLifeQuestError:
    """Tests for the base LifeQuestError exception."""

    def test_basic_message(self) -> None:
        """Test exception with basic message."""
        exc = LifeQuestError("Test error message")
        assert exc.message == "Test error message"
        assert exc.details == {}
        assert str(exc) == "Test error message"

    def test_with_details(self) -> None:
        """Test exception with additional details."""
        exc = LifeQuestError("Test error", details={"key": "value", "count": 42})
        assert exc.details == {"key": "value", "count": 42}
        assert "key='value'" in str(exc)
        assert "count=42" in str(exc)

    def test_repr(self) -> None:
        """Test exception repr output."""
        repr_str = repr(LifeQuestError("Test", details={"x": 1}))
        assert "LifeQuestError" in repr_str
        assert "Test" in repr_str
        assert "x" in repr_str


class TestValidationErrors:
    """Tests for input validation exceptions."""

    def test_validation_error_with_field(self) -> None:
        """Test ValidationError records the rejected field and value."""
        exc = ValidationError("Bad name", field_name="name", invalid_value="x")
        assert exc.details["field_name"] == "name"
        assert exc.details["invalid_value"] == "x"

    def test_configuration_error_with_key(self) -> None:
        """Test ConfigurationError records the config key."""
        exc = ConfigurationError("Bad value", config_key="save_debounce_seconds")
        assert exc.details["config_key"] == "save_debounce_seconds"
        assert isinstance(exc, LifeQuestError)


class TestGameEngineExceptions:
    """Tests for game engine exceptions."""

    def test_invalid_game_state_error(self) -> None:
        """Test InvalidGameStateError with state context."""
        exc = InvalidGameStateError(
            "No character",
            current_state="no_character",
            expected_states=["character_created"],
        )
        assert exc.details["current_state"] == "no_character"
        assert exc.details["expected_states"] == ["character_created"]
        assert isinstance(exc, GameEngineError)

    def test_combat_error_with_dungeon(self) -> None:
        """Test CombatError keeps floor 0 but drops empty dungeon ids."""
        exc = CombatError("Unknown dungeon", dungeon_id="abyss", floor=0)
        assert exc.details == {"dungeon_id": "abyss", "floor": 0}
        assert CombatError("x", dungeon_id="").details == {}


class TestStorageExceptions:
    """Tests for persistence exceptions."""

    def test_quota_error_sizes(self) -> None:
        """Test StorageQuotaError carries key and sizes."""
        exc = StorageQuotaError("Too big", key="gameState", size_bytes=120, limit_bytes=100)
        assert exc.details == {"key": "gameState", "size_bytes": 120, "limit_bytes": 100}

    def test_invalid_save_error_source(self) -> None:
        """Test InvalidSaveError carries the save source."""
        exc = InvalidSaveError("Corrupt", source="backup")
        assert exc.details["source"] == "backup"

    @pytest.mark.parametrize("exc_type", [StorageQuotaError, InvalidSaveError])
    def test_inheritance(self, exc_type: type[StorageError]) -> None:
        """Test storage exceptions share the StorageError base."""
        exc = exc_type("Error")
        assert isinstance(exc, StorageError)
        assert isinstance(exc, LifeQuestError)
        assert isinstance(exc, Exception)
