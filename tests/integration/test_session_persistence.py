"""Integration tests for session persistence.

Tests the session, debounced saver and save manager working together.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from datetime import datetime, timedelta
from functools import partial

from lifequest.engine.combat import enter_dungeon
from lifequest.engine.dice import DiceRoller
from lifequest.engine.inventory import sell_item
from lifequest.engine.quests import complete_quest
from lifequest.engine.session import GameSession
from lifequest.models import GameState, Mood, QuestCategory
from lifequest.storage import DebouncedSaver, KeyValueStore, SaveManager


class TestSessionPersistence:
    """Test session state persistence."""

    def test_autosave_and_reload(
        self,
        store: KeyValueStore,
        warrior_state: GameState,
        now: datetime,
        dice_roller: DiceRoller,
    ) -> None:
        """Play a few actions, let the debounce settle and reload."""
        manager = SaveManager(store, backup_interval=60)
        session = GameSession(roller=dice_roller, clock=lambda: now)

        async def scenario() -> DebouncedSaver:
            saver = DebouncedSaver(manager.save, delay=0.02)
            session.subscribe(saver)
            session.initialize(warrior_state)
            daily = session.state.quests_in(QuestCategory.DAILY)[0]
            session.dispatch(
                partial(complete_quest, quest_id=daily.id, mood=Mood.INSPIRED, honest=True, now=now)
            )
            potion_id = session.state.require_character().inventory[0].id
            session.dispatch(lambda state: sell_item(state, potion_id))
            await asyncio.sleep(0.1)
            return saver

        saver = asyncio.run(scenario())

        assert saver.writes == 1
        loaded = SaveManager(store).load()
        assert loaded == session.state
        assert loaded.require_character().daily_streak == 1

    def test_resume_after_restart(
        self,
        store: KeyValueStore,
        warrior_state: GameState,
        now: datetime,
        dice_roller: DiceRoller,
    ) -> None:
        """A reloaded fight resumes and the next day refreshes quests."""
        first = GameSession(roller=dice_roller, clock=lambda: now)
        first.initialize(warrior_state)
        first.dispatch(partial(enter_dungeon, dungeon_id="forest", roller=dice_roller))
        SaveManager(store).save(first.state)

        tomorrow = now + timedelta(days=1)
        second = GameSession(roller=dice_roller, clock=lambda: tomorrow)
        loaded = SaveManager(store).load()
        assert loaded is not None
        second.initialize(loaded)

        assert second.state.dungeon_state.current_mob == first.state.dungeon_state.current_mob
        assert second.state.last_daily_reset == tomorrow
        daily_ids = {quest.id for quest in second.state.quests_in(QuestCategory.DAILY)}
        assert daily_ids.isdisjoint(quest.id for quest in first.state.quests_in(QuestCategory.DAILY))

    def test_rich_save_taxed_on_load(
        self,
        store: KeyValueStore,
        warrior_state: GameState,
        now: datetime,
        patch_character: Callable[..., GameState],
    ) -> None:
        """The luxury tax applies when a saved game is opened."""
        SaveManager(store).save(patch_character(warrior_state, level=25, gold=60_000))

        loaded = SaveManager(store).load()
        assert loaded is not None
        session = GameSession(clock=lambda: now)

        assert session.initialize(loaded) == ["Luxury tax: -100 gold"]
        assert session.state.require_character().gold == 59_900
