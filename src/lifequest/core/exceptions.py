"""Errors raised by LifeQuest.

Everything derives from ``LifeQuestError``. Ordinary gameplay refusals
(not enough gold, a full backpack, attacking out of turn) are not errors;
actions report them through ``ActionResult``. What lands here is bad
caller input, unreadable saves, storage trouble and broken invariants.

Each subclass takes a few keyword arguments for the context it cares
about and files the ones that were given under ``details``.

Example:
    >>> from lifequest.core.exceptions import InvalidSaveError
    >>> raise InvalidSaveError("Save is not a JSON object", source="import")
"""

from __future__ import annotations

from typing import Any


def _given(value: Any) -> bool:
    if value is None:
        return False
    return not (isinstance(value, (str, list)) and not value)


class LifeQuestError(Exception):
    """Root of the LifeQuest error tree.

    Attributes:
        message: What went wrong, in plain words.
        details: Structured context, rendered after the message.
    """

    def __init__(self, message: str, *, details: dict[str, Any] | None = None, **context: Any) -> None:
        self.message = message
        self.details = dict(details or {})
        self.details.update((key, value) for key, value in context.items() if _given(value))
        super().__init__(str(self))

    def __str__(self) -> str:
        if not self.details:
            return self.message
        pairs = ", ".join(f"{key}={value!r}" for key, value in self.details.items())
        return f"{self.message} [{pairs}]"

    def __repr__(self) -> str:
        return f"{type(self).__name__}(message={self.message!r}, details={self.details!r})"


class ConfigurationError(LifeQuestError):
    """Settings could not be loaded or contradict each other."""

    def __init__(
        self,
        message: str,
        *,
        config_key: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details=details, config_key=config_key)


class ValidationError(LifeQuestError):
    """Caller input was rejected.

    Character creation uses it for a bad name or stat allocation;
    ``details["field_name"]`` tells which.
    """

    def __init__(
        self,
        message: str,
        *,
        field_name: str | None = None,
        invalid_value: Any = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details=details, field_name=field_name, invalid_value=invalid_value)


class GameEngineError(LifeQuestError):
    """Base for failures inside the rules engine."""


class InvalidGameStateError(GameEngineError):
    """The state lacks something the operation needs, usually a character."""

    def __init__(
        self,
        message: str,
        *,
        current_state: str | None = None,
        expected_states: list[str] | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message,
            details=details,
            current_state=current_state,
            expected_states=expected_states,
        )


class CombatError(GameEngineError):
    """Dungeon data does not line up, e.g. an id that is not in the bestiary."""

    def __init__(
        self,
        message: str,
        *,
        dungeon_id: str | None = None,
        floor: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details=details, dungeon_id=dungeon_id, floor=floor)


class StorageError(LifeQuestError):
    """Reading or writing the save store failed.

    Args:
        message: What went wrong.
        key: Store key involved, if any.
        details: Extra context such as the database path.
    """

    def __init__(
        self,
        message: str,
        *,
        key: str | None = None,
        details: dict[str, Any] | None = None,
        **context: Any,
    ) -> None:
        super().__init__(message, details=details, key=key, **context)


class StorageQuotaError(StorageError):
    """A value was larger than the store quota allows."""

    def __init__(
        self,
        message: str,
        *,
        key: str | None = None,
        size_bytes: int | None = None,
        limit_bytes: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, key=key, details=details, size_bytes=size_bytes, limit_bytes=limit_bytes)


class InvalidSaveError(StorageError):
    """Save data failed migration or validation.

    ``source`` names where it came from: ``primary``, ``backup`` or ``import``.
    """

    def __init__(
        self,
        message: str,
        *,
        source: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details=details, source=source)


__all__ = [
    "LifeQuestError",
    "ConfigurationError",
    "ValidationError",
    "GameEngineError",
    "InvalidGameStateError",
    "CombatError",
    "StorageError",
    "StorageQuotaError",
    "InvalidSaveError",
]
