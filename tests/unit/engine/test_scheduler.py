"""Tests for enemy-turn scheduling and auto-combat."""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from datetime import datetime
from functools import partial

import pytest

from lifequest.engine.combat import flee_dungeon, player_attack
from lifequest.engine.dice import DiceRoller
from lifequest.engine.scheduler import CombatScheduler, guard_token
from lifequest.engine.session import GameSession
from lifequest.models import CombatTurn, GameState, Mob


@pytest.fixture
def session(
    combat_state: GameState,
    now: datetime,
    scripted_roller: Callable[..., DiceRoller],
) -> GameSession:
    """Initialized session in the middle of a Forest fight."""
    session = GameSession(roller=scripted_roller(), clock=lambda: now)
    session.initialize(combat_state)
    return session


def _with_mob(session: GameSession, **update: object) -> None:
    state = session.state
    mob = state.dungeon_state.current_mob
    assert mob is not None
    dungeon_state = state.dungeon_state.model_copy(update={"current_mob": mob.model_copy(update=update)})
    session.initialize(state.model_copy(update={"dungeon_state": dungeon_state}))


class TestGuardToken:
    """Tests for guard_token."""

    def test_active_fight(self, combat_state: GameState, forest_mob: Mob) -> None:
        """Test the token pairs the mob id with the turn."""
        assert guard_token(combat_state) == (forest_mob.id, CombatTurn.PLAYER_TURN)

    def test_outside_combat(self, warrior_state: GameState) -> None:
        """Test there is no token without a live mob."""
        assert guard_token(warrior_state) is None


class TestEnemyTurns:
    """Tests for scheduled enemy turns."""

    def test_attack_triggers_enemy_turn(self, session: GameSession) -> None:
        """Test the enemy answers after the player's attack."""

        async def scenario() -> None:
            scheduler = CombatScheduler(session, enemy_delay=0)
            scheduler.attach()
            session.dispatch(partial(player_attack, roller=session.roller))
            assert scheduler.enemy_turn_pending
            await asyncio.sleep(0.01)
            scheduler.cancel_all()
            assert not scheduler.enemy_turn_pending

        asyncio.run(scenario())

        character = session.state.require_character()
        assert session.state.dungeon_state.turn == CombatTurn.PLAYER_TURN
        assert character.hp < character.max_hp

    def test_only_enemy_turn_is_scheduled(self, session: GameSession) -> None:
        """Test nothing is scheduled on the player's turn."""

        async def scenario() -> bool:
            return CombatScheduler(session, enemy_delay=0).schedule_enemy_turn()

        assert asyncio.run(scenario()) is False

    def test_stale_turn_discarded(self, session: GameSession) -> None:
        """Test fleeing before the enemy acts voids the pending turn."""

        async def scenario() -> CombatScheduler:
            scheduler = CombatScheduler(session, enemy_delay=0.01)
            scheduler.attach()
            session.dispatch(partial(player_attack, roller=session.roller))
            session.dispatch(flee_dungeon)
            await asyncio.sleep(0.05)
            scheduler.detach()
            return scheduler

        scheduler = asyncio.run(scenario())

        character = session.state.require_character()
        assert character.hp == character.max_hp
        assert scheduler.log == []
        assert session.state.dungeon_state.current_mob is None

    def test_cancel_all(self, session: GameSession) -> None:
        """Test cancelled enemy turns never run."""

        async def scenario() -> None:
            scheduler = CombatScheduler(session, enemy_delay=0.01)
            scheduler.attach()
            session.dispatch(partial(player_attack, roller=session.roller))
            scheduler.cancel_all()
            await asyncio.sleep(0.05)

        asyncio.run(scenario())

        assert session.state.dungeon_state.turn == CombatTurn.ENEMY_TURN


class TestAutoCombat:
    """Tests for auto-combat."""

    def test_runs_to_victory(self, session: GameSession) -> None:
        """Test auto-combat alternates turns until the mob falls."""

        async def scenario() -> CombatScheduler:
            scheduler = CombatScheduler(session, auto_delay=0)
            await scheduler.start_auto_combat()
            return scheduler

        scheduler = asyncio.run(scenario())

        assert session.state.dungeon_state.turn == CombatTurn.WIN
        assert session.state.dungeon_floor == 2
        assert any("is defeated" in line for line in scheduler.log)
        assert not scheduler.auto_enabled

    def test_runs_to_defeat(self, session: GameSession) -> None:
        """Test auto-combat stops when the player falls."""
        _with_mob(session, atk=5000, hp=10_000, max_hp=10_000)

        async def scenario() -> None:
            await CombatScheduler(session, auto_delay=0).start_auto_combat()

        asyncio.run(scenario())

        assert session.state.dungeon_state.turn == CombatTurn.LOSE
        assert session.state.require_character().hp == 0

    def test_drinks_when_low(self, session: GameSession, patch_character: Callable[..., GameState]) -> None:
        """Test a low-HP character drinks before attacking."""
        session.initialize(patch_character(session.state, hp=40))

        async def scenario() -> CombatScheduler:
            scheduler = CombatScheduler(session, auto_delay=0)
            await scheduler.start_auto_combat()
            return scheduler

        scheduler = asyncio.run(scenario())

        assert session.state.dungeon_state.turn == CombatTurn.WIN
        assert session.state.require_character().inventory[0].amount < 3
        assert any(line.startswith("You drink") for line in scheduler.log)

    def test_stop(self, session: GameSession) -> None:
        """Test stopping cancels the running loop."""

        async def scenario() -> asyncio.Task[None]:
            scheduler = CombatScheduler(session, auto_delay=10)
            task = scheduler.start_auto_combat()
            await asyncio.sleep(0)
            scheduler.stop_auto_combat()
            with pytest.raises(asyncio.CancelledError):
                await task
            assert not scheduler.auto_enabled
            return task

        task = asyncio.run(scenario())

        assert task.cancelled()
        assert session.state.dungeon_state.turn == CombatTurn.PLAYER_TURN
