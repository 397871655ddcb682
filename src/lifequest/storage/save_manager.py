"""Save manager: load, save, backup, export and import of game states.

The manager sits between a GameSession and a KeyValueStore. Loading
validates and migrates, falling back to the backup copy; saving never
raises, recovering from quota errors by trimming the journal once.
"""

from __future__ import annotations

import json
import time
from typing import Callable

from lifequest.core.config import get_settings
from lifequest.core.constants import BACKUP_KEY, SAVE_KEY
from lifequest.core.exceptions import InvalidSaveError, StorageError, StorageQuotaError
from lifequest.core.logging import get_logger
from lifequest.engine.migration import parse_game_state
from lifequest.models.game_state import GameState
from lifequest.storage.database import KeyValueStore, get_store


logger = get_logger(__name__)


def serialize_state(state: GameState, *, indent: int | None = None) -> str:
    """Encode a state as JSON in the storage shape."""
    return json.dumps(state.to_storage(), ensure_ascii=False, indent=indent)


def trim_journal(state: GameState, keep: int) -> GameState:
    """Keep only the ``keep`` newest journal entries."""
    character = state.character
    if character is None or len(character.journal) <= keep:
        return state
    return state.with_character(character.model_copy(update={"journal": character.journal[:keep]}))


class SaveManager:
    """Persist game states to a key-value store.

    Attributes:
        store: Underlying store.
        backup_interval: Minimum seconds between backup refreshes.
        journal_keep: Journal entries kept when a save hits the quota.
    """

    def __init__(
        self,
        store: KeyValueStore | None = None,
        *,
        backup_interval: float | None = None,
        journal_keep: int | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize the save manager.

        Args:
            store: Store to read and write, the shared settings-based store by default.
            backup_interval: Override for the backup refresh window.
            journal_keep: Override for the journal size kept on quota errors.
            clock: Monotonic clock used for the backup window.
        """
        settings = get_settings().storage
        self.store = store if store is not None else get_store()
        self.backup_interval = (
            backup_interval if backup_interval is not None else settings.backup_interval_seconds
        )
        self.journal_keep = journal_keep if journal_keep is not None else settings.journal_keep_on_quota
        self._clock = clock
        self._last_backup: float | None = None

    # =========================================================================
    # Loading
    # =========================================================================

    def _read(self, key: str, source: str) -> GameState | None:
        try:
            text = self.store.get(key)
        except StorageError as exc:
            logger.error("Save could not be read", source=source, error=exc.message)
            return None
        if text is None:
            return None
        try:
            return parse_game_state(json.loads(text), source=source)
        except json.JSONDecodeError as exc:
            logger.warning("Save is not valid JSON", source=source, error=str(exc))
        except InvalidSaveError as exc:
            logger.warning("Save rejected", source=source, error=exc.message)
        except Exception as exc:
            logger.exception("Save could not be parsed", source=source, error=str(exc))
        return None

    def load(self) -> GameState | None:
        """Load the saved game.

        Tries the primary save, then the backup. Never raises: an unreadable
        or corrupt copy is logged and skipped.

        Returns:
            The migrated state, or None if neither copy is usable.
        """
        state = self._read(SAVE_KEY, "primary")
        if state is not None:
            return state
        state = self._read(BACKUP_KEY, "backup")
        if state is not None:
            logger.warning("Recovered game from backup")
            return state
        logger.info("No usable save found")
        return None

    # =========================================================================
    # Saving
    # =========================================================================

    def _backup_due(self) -> bool:
        if self._last_backup is None:
            return True
        return self._clock() - self._last_backup >= self.backup_interval

    def save(self, state: GameState) -> bool:
        """Write the state, refreshing the backup at most once per window.

        Never raises. A quota error trims the journal and retries once;
        any remaining failure is logged and the game continues in memory.

        Returns:
            True if the primary save was written.
        """
        payload = serialize_state(state)
        try:
            self.store.set(SAVE_KEY, payload)
        except StorageQuotaError as exc:
            logger.warning("Save over quota, trimming journal", size_bytes=exc.details.get("size_bytes"))
            state = trim_journal(state, self.journal_keep)
            payload = serialize_state(state)
            try:
                self.store.set(SAVE_KEY, payload)
            except StorageError as retry_exc:
                logger.error("Save failed after journal trim", error=retry_exc.message)
                return False
        except StorageError as exc:
            logger.error("Save failed", error=exc.message)
            return False

        if self._backup_due():
            try:
                self.store.set(BACKUP_KEY, payload)
                self._last_backup = self._clock()
                logger.debug("Backup refreshed")
            except StorageError as exc:
                logger.warning("Backup failed", error=exc.message)
        return True

    # =========================================================================
    # Export / Import
    # =========================================================================

    def export_state(self, state: GameState) -> str:
        """Human-readable JSON document of the full state."""
        return serialize_state(state, indent=2)

    def import_state(self, text: str) -> GameState:
        """Parse an exported document.

        The document goes through full migration and validation; nothing is
        written to the store.

        Raises:
            InvalidSaveError: If the document is not a valid save.
        """
        try:
            raw = json.loads(text)
        except json.JSONDecodeError as exc:
            raise InvalidSaveError("Import is not valid JSON", source="import") from exc
        state = parse_game_state(raw, source="import")
        logger.info("Game imported", character=state.character.name if state.character else None)
        return state

    def reset(self) -> None:
        """Delete the save and its backup."""
        self.store.delete(SAVE_KEY)
        self.store.delete(BACKUP_KEY)
        self._last_backup = None
        logger.info("Saves reset")


__all__ = [
    "serialize_state",
    "trim_journal",
    "SaveManager",
]
