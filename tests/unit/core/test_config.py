"""Tests for configuration management."""

from __future__ import annotations

from pathlib import Path

import pytest

from lifequest.core.config import (
    GameSettings,
    Settings,
    StorageSettings,
    clear_settings_cache,
    get_settings,
)
from lifequest.core.exceptions import ConfigurationError


class TestStorageSettings:
    """Tests for StorageSettings configuration."""

    def test_default_values(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test default storage settings."""
        monkeypatch.chdir(tmp_path)

        settings = StorageSettings()

        assert settings.database_path.name == "lifequest.db"
        assert settings.backup_interval_seconds == 300.0
        assert settings.save_debounce_seconds == 1.0
        assert settings.journal_keep_on_quota == 50

    def test_env_override(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test storage settings read the LIFEQUEST_ prefix."""
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("LIFEQUEST_DATABASE_PATH", str(tmp_path / "custom.db"))
        monkeypatch.setenv("LIFEQUEST_MAX_SAVE_BYTES", "4096")

        settings = StorageSettings()

        assert settings.database_path == tmp_path / "custom.db"
        assert settings.max_save_bytes == 4096


class TestGameSettings:
    """Tests for GameSettings configuration."""

    def test_default_values(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test default game settings."""
        monkeypatch.chdir(tmp_path)

        settings = GameSettings()

        assert settings.auto_combat_delay == 1.0
        assert settings.enemy_turn_delay == 1.0
        assert settings.rng_seed is None

    def test_rng_seed_from_env(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test the game prefix is LIFEQUEST_GAME_."""
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("LIFEQUEST_GAME_RNG_SEED", "99")

        assert GameSettings().rng_seed == 99


class TestSettings:
    """Tests for main Settings configuration."""

    def test_default_settings(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test default settings initialization."""
        monkeypatch.chdir(tmp_path)

        settings = Settings()

        assert settings.app_name == "LifeQuest"
        assert settings.app_version == "0.1.0"
        assert settings.debug is False
        assert settings.log_level == "INFO"
        assert settings.is_production is True

    def test_env_vars(
        self,
        tmp_path: Path,
        monkeypatch: pytest.MonkeyPatch,
        mock_env_vars: dict[str, str],
    ) -> None:
        """Test settings pick up environment variables."""
        monkeypatch.chdir(tmp_path)

        settings = Settings()

        assert settings.debug is True
        assert settings.log_level == "DEBUG"
        assert settings.storage.max_save_bytes == 2048
        assert settings.game.rng_seed == 7

    def test_debounce_must_fit_backup_window(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test a debounce longer than the backup interval is rejected."""
        monkeypatch.chdir(tmp_path)

        with pytest.raises(ConfigurationError) as exc_info:
            Settings(storage=StorageSettings(save_debounce_seconds=10, backup_interval_seconds=5))

        assert "save_debounce_seconds" in str(exc_info.value)


class TestGetSettings:
    """Tests for get_settings singleton function."""

    def test_returns_cached_instance(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test get_settings caches until cleared."""
        monkeypatch.chdir(tmp_path)

        first = get_settings()
        assert get_settings() is first

        clear_settings_cache()
        assert get_settings() is not first

    def test_invalid_env_raises_configuration_error(
        self,
        tmp_path: Path,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        """Test invalid values surface as ConfigurationError."""
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("LIFEQUEST_LOG_LEVEL", "LOUD")

        with pytest.raises(ConfigurationError):
            get_settings()
