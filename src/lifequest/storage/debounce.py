"""Debounced persistence.

Rapid state changes are coalesced into a single write shortly after the
last one. Only the latest state is written; earlier pending states are
dropped, never merged.
"""

from __future__ import annotations

import asyncio
from typing import Any, Callable

from lifequest.core.config import get_settings
from lifequest.core.logging import get_logger
from lifequest.models.game_state import GameState


logger = get_logger(__name__)


class DebouncedSaver:
    """Schedule saves on the running event loop, latest state wins.

    Instances are callable, so one can be subscribed directly as a
    GameSession listener. Scheduling requires a running event loop.

    Example:
        >>> saver = DebouncedSaver(manager.save)
        >>> unsubscribe = session.subscribe(saver)
    """

    def __init__(self, save: Callable[[GameState], Any], *, delay: float | None = None) -> None:
        """Initialize the saver.

        Args:
            save: Function that persists a state.
            delay: Quiet period in seconds; defaults to the configured debounce.
        """
        self._save = save
        self.delay = delay if delay is not None else get_settings().storage.save_debounce_seconds
        self._pending: GameState | None = None
        self._handle: asyncio.TimerHandle | None = None
        self._writes = 0

    @property
    def pending(self) -> GameState | None:
        """State waiting to be written."""
        return self._pending

    @property
    def writes(self) -> int:
        """Number of writes performed."""
        return self._writes

    def schedule(self, state: GameState) -> None:
        """Replace the pending state and restart the quiet period."""
        if self._handle is not None:
            self._handle.cancel()
        self._pending = state
        self._handle = asyncio.get_running_loop().call_later(self.delay, self._fire)

    __call__ = schedule

    def _fire(self) -> None:
        self._handle = None
        state, self._pending = self._pending, None
        if state is None:
            return
        self._writes += 1
        self._save(state)

    def flush(self) -> bool:
        """Write the pending state now.

        Returns:
            True if a state was pending.
        """
        if self._pending is None:
            return False
        if self._handle is not None:
            self._handle.cancel()
        self._fire()
        return True

    def cancel(self) -> None:
        """Drop the pending state without writing it."""
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None
        if self._pending is not None:
            logger.debug("Pending save cancelled")
        self._pending = None


__all__ = [
    "DebouncedSaver",
]
