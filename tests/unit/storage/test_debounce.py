"""Tests for debounced saving."""

from __future__ import annotations

import asyncio
from collections.abc import Callable

from lifequest.models import GameState
from lifequest.storage import DebouncedSaver


class TestDebouncedSaver:
    """Tests for DebouncedSaver."""

    def test_coalesces_rapid_changes(
        self,
        warrior_state: GameState,
        patch_character: Callable[..., GameState],
    ) -> None:
        """Test a burst of changes produces one write of the latest state."""
        saved: list[GameState] = []
        states = [patch_character(warrior_state, gold=gold) for gold in (101, 102, 103)]

        async def scenario() -> DebouncedSaver:
            saver = DebouncedSaver(saved.append, delay=0.02)
            for state in states:
                saver(state)
            assert saver.pending is states[-1]
            await asyncio.sleep(0.1)
            return saver

        saver = asyncio.run(scenario())

        assert saved == [states[-1]]
        assert saver.writes == 1
        assert saver.pending is None

    def test_flush_writes_immediately(self, warrior_state: GameState) -> None:
        """Test flush writes the pending state and cancels the timer."""
        saved: list[GameState] = []

        async def scenario() -> tuple[bool, bool]:
            saver = DebouncedSaver(saved.append, delay=0.02)
            saver.schedule(warrior_state)
            flushed = saver.flush()
            await asyncio.sleep(0.05)
            return flushed, saver.flush()

        assert asyncio.run(scenario()) == (True, False)
        assert saved == [warrior_state]

    def test_cancel_drops_pending(self, warrior_state: GameState) -> None:
        """Test a cancelled state is never written."""
        saved: list[GameState] = []

        async def scenario() -> None:
            saver = DebouncedSaver(saved.append, delay=0.01)
            saver.schedule(warrior_state)
            saver.cancel()
            await asyncio.sleep(0.05)
            assert saver.pending is None

        asyncio.run(scenario())

        assert saved == []

    def test_default_delay_from_settings(self) -> None:
        """Test the quiet period defaults to the configured debounce."""
        from lifequest.core.config import get_settings

        saver = DebouncedSaver(lambda state: None)
        assert saver.delay == get_settings().storage.save_debounce_seconds
