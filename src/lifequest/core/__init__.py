"""Core module providing configuration, logging, and base exceptions.

Exports:
    Exceptions:
        LifeQuestError: Base exception for all application errors.
        ValidationError: Rejected caller input.
        InvalidSaveError: Save data that fails migration or validation.

    Configuration:
        Settings: Main application settings class.
        get_settings: Get the settings singleton.
        clear_settings_cache: Force settings reload.

    Logging:
        configure_logging: Set up application logging.
        configure_from_settings: Apply the log options from Settings.
        get_logger: Get a configured logger instance.
"""

from __future__ import annotations

from lifequest.core.config import (
    GameSettings,
    Settings,
    StorageSettings,
    clear_settings_cache,
    get_settings,
)
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
from lifequest.core.logging import (
    bind_context,
    clear_context,
    configure_from_settings,
    configure_logging,
    get_logger,
)


__all__ = [
    # Exceptions
    "LifeQuestError",
    "ConfigurationError",
    "ValidationError",
    "GameEngineError",
    "InvalidGameStateError",
    "CombatError",
    "StorageError",
    "StorageQuotaError",
    "InvalidSaveError",
    # Configuration
    "Settings",
    "StorageSettings",
    "GameSettings",
    "get_settings",
    "clear_settings_cache",
    # Logging
    "configure_logging",
    "configure_from_settings",
    "get_logger",
    "bind_context",
    "clear_context",
]
