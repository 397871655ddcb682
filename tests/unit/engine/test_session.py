"""Tests for the game session."""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime

import pytest

from lifequest.core.exceptions import InvalidGameStateError
from lifequest.engine.dice import DiceRoller
from lifequest.engine.inventory import sell_item
from lifequest.engine.session import GameSession
from lifequest.models import ActionResult, GameState, QuestCategory


@pytest.fixture
def session(now: datetime, scripted_roller: Callable[..., DiceRoller]) -> GameSession:
    """Session with a fixed clock and scripted dice."""
    return GameSession(roller=scripted_roller(), clock=lambda: now)


class TestInitialize:
    """Tests for GameSession.initialize."""

    def test_not_ready_before_initialize(self, session: GameSession, warrior_state: GameState) -> None:
        """Test actions and ticks are refused while loading."""
        assert not session.ready
        with pytest.raises(InvalidGameStateError):
            session.dispatch(lambda state: ActionResult.ok(state))
        with pytest.raises(InvalidGameStateError):
            session.tick()

    def test_runs_first_tick(self, session: GameSession, warrior_state: GameState) -> None:
        """Test initialization fills the quest board."""
        messages = session.initialize(warrior_state)

        assert messages == []
        assert session.ready
        assert len(session.state.quests_in(QuestCategory.DAILY)) == 10

    def test_reports_luxury_tax(
        self,
        session: GameSession,
        warrior_state: GameState,
        patch_character: Callable[..., GameState],
    ) -> None:
        """Test the load-time tax is reported once."""
        rich = patch_character(warrior_state, level=20, gold=50_000)

        assert session.initialize(rich) == ["Luxury tax: -100 gold"]
        assert session.state.require_character().gold == 49_900

    def test_notifies_listeners(self, session: GameSession, warrior_state: GameState) -> None:
        """Test listeners see the initialized state."""
        seen: list[GameState] = []
        session.subscribe(seen.append)

        session.initialize(warrior_state)

        assert seen == [session.state]


class TestDispatch:
    """Tests for GameSession.dispatch."""

    def test_success_swaps_state(self, session: GameSession, warrior_state: GameState) -> None:
        """Test a successful action becomes the current state."""
        session.initialize(warrior_state)
        potion_id = session.state.require_character().inventory[0].id

        result = session.dispatch(lambda state: sell_item(state, potion_id))

        assert result.success
        assert session.state is result.state

    def test_failure_keeps_state(self, session: GameSession, warrior_state: GameState) -> None:
        """Test a rejected action leaves the state and listeners alone."""
        session.initialize(warrior_state)
        before = session.state
        seen: list[GameState] = []
        session.subscribe(seen.append)

        result = session.dispatch(lambda state: sell_item(state, "missing"))

        assert not result.success
        assert session.state is before
        assert seen == []

    def test_unsubscribe(self, session: GameSession, warrior_state: GameState) -> None:
        """Test an unsubscribed listener is no longer called."""
        session.initialize(warrior_state)
        seen: list[GameState] = []
        unsubscribe = session.subscribe(seen.append)
        potion_id = session.state.require_character().inventory[0].id

        session.dispatch(lambda state: sell_item(state, potion_id))
        unsubscribe()
        unsubscribe()
        session.dispatch(lambda state: sell_item(state, potion_id))

        assert len(seen) == 1

    def test_tick_unchanged_is_silent(self, session: GameSession, warrior_state: GameState) -> None:
        """Test a tick with nothing due does not notify."""
        session.initialize(warrior_state)
        seen: list[GameState] = []
        session.subscribe(seen.append)

        state = session.tick()

        assert state is session.state
        assert seen == []
