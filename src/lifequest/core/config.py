"""Runtime configuration for LifeQuest.

Every knob is read through pydantic-settings, so it can come from the
process environment or a local ``.env`` file. Storage options share the
``LIFEQUEST_`` prefix with the top-level settings; engine timing uses
``LIFEQUEST_GAME_``.

Example:
    >>> from lifequest.core.config import get_settings
    >>> get_settings().storage.backup_interval_seconds
    300.0

Environment Variables:
    LIFEQUEST_DATABASE_PATH: SQLite file holding the save slots
    LIFEQUEST_MAX_SAVE_BYTES: Quota applied to each stored value
    LIFEQUEST_GAME_AUTO_COMBAT_DELAY: Pause between automatic attacks
    LIFEQUEST_GAME_RNG_SEED: Fixed seed for the dice roller
    LIFEQUEST_LOG_LEVEL: Minimum level that reaches the log output
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, ValidationError, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from lifequest.core.constants import JOURNAL_KEEP_ON_QUOTA
from lifequest.core.exceptions import ConfigurationError


LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

_DEFAULT_DB = Path.home() / ".lifequest" / "lifequest.db"


def _env(prefix: str, **extra: str) -> SettingsConfigDict:
    return SettingsConfigDict(
        env_prefix=prefix,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        **extra,
    )


class StorageSettings(BaseSettings):
    """Where and how saves are written.

    Attributes:
        database_path: SQLite file backing the key-value store.
        max_save_bytes: Size limit for a single stored value, None disables it.
        backup_interval_seconds: Backups are refreshed at most this often.
        save_debounce_seconds: Idle time required before a queued save lands.
        journal_keep_on_quota: Journal length kept when retrying an oversized save.
    """

    model_config = _env("LIFEQUEST_")

    database_path: Path = Field(default=_DEFAULT_DB)
    max_save_bytes: int | None = Field(default=5_000_000, gt=0)
    backup_interval_seconds: float = Field(default=300.0, ge=0)
    save_debounce_seconds: float = Field(default=1.0, ge=0, le=60)
    journal_keep_on_quota: int = Field(default=JOURNAL_KEEP_ON_QUOTA, ge=0)


class GameSettings(BaseSettings):
    """Engine timing and randomness."""

    model_config = _env("LIFEQUEST_GAME_")

    auto_combat_delay: float = Field(default=1.0, ge=0, le=30)
    enemy_turn_delay: float = Field(default=1.0, ge=0, le=30)
    rng_seed: int | None = None


class Settings(BaseSettings):
    """Top-level settings object.

    Nested sections can also be set with a double underscore, e.g.
    ``LIFEQUEST_GAME__RNG_SEED``.
    """

    model_config = _env("LIFEQUEST_", env_nested_delimiter="__")

    app_name: str = "LifeQuest"
    app_version: str = "0.1.0"
    debug: bool = False
    log_level: LogLevel = "INFO"
    log_json: bool = False

    storage: StorageSettings = Field(default_factory=StorageSettings)
    game: GameSettings = Field(default_factory=GameSettings)

    @model_validator(mode="after")
    def _debounce_fits_backup_window(self) -> Settings:
        storage = self.storage
        window = storage.backup_interval_seconds
        if window and storage.save_debounce_seconds > window:
            raise ConfigurationError(
                f"save_debounce_seconds ({storage.save_debounce_seconds}) is longer than "
                f"backup_interval_seconds ({window})",
                config_key="save_debounce_seconds",
            )
        return self

    @property
    def is_production(self) -> bool:
        """True unless debug mode is on."""
        return not self.debug


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Load settings once and reuse them.

    Raises:
        ConfigurationError: If a value from the environment does not validate.
    """
    try:
        return Settings()
    except ValidationError as exc:
        raise ConfigurationError(
            f"Invalid LifeQuest settings: {exc.error_count()} error(s)",
            details={"errors": [error["msg"] for error in exc.errors()]},
        ) from exc


def clear_settings_cache() -> None:
    """Drop the cached settings so the next call re-reads the environment."""
    get_settings.cache_clear()


__all__ = [
    "LogLevel",
    "StorageSettings",
    "GameSettings",
    "Settings",
    "get_settings",
    "clear_settings_cache",
]
