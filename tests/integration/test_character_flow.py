"""Integration tests for character progression.

Tests the loop from creation through quests, level-ups, shopping and
crafting.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime, timedelta

from lifequest.engine.crafting import craft_item
from lifequest.engine.dice import DiceRoller
from lifequest.engine.inventory import add_item_to_inventory, allocate_stat_point, equip_item
from lifequest.engine.lifecycle import create_character, process_game_tick
from lifequest.engine.quests import complete_quest
from lifequest.engine.shop import buy_item, open_shop
from lifequest.models import (
    MATERIALS,
    ClassType,
    GameState,
    Mood,
    QuestCategory,
    StatBonus,
    StatName,
    get_item,
    xp_to_level,
)


class TestCharacterFlow:
    """Test the everyday progression loop."""

    def test_first_day(self, now: datetime, dice_roller: DiceRoller) -> None:
        """Create a character, tick and complete a daily quest."""
        state = create_character("Mira", ClassType.HEALER, StatBonus(intelligence=4, vitality=6), now=now)
        state = process_game_tick(state, now, roller=dice_roller)
        daily = state.quests_in(QuestCategory.DAILY)[0]

        result = complete_quest(state, daily.id, Mood.INSPIRED, honest=True, reflection="Good start", now=now)

        character = result.state.require_character()
        assert result.success
        assert character.gold > 100
        assert character.daily_streak == 1
        assert len(character.journal) == 2
        assert result.state.dungeon_state.active_buffs[0].name == "Inspiration"

    def test_level_up_unlocks_recipe_and_points(
        self,
        warrior_state: GameState,
        now: datetime,
        dice_roller: DiceRoller,
        patch_character: Callable[..., GameState],
    ) -> None:
        """Reach level 3 from a single quest, spend points and craft."""
        state = process_game_tick(warrior_state, now, roller=dice_roller)
        state = patch_character(state, current_exp=xp_to_level(1) + xp_to_level(2) - 1)
        daily = state.quests_in(QuestCategory.DAILY)[0]

        state = complete_quest(state, daily.id, Mood.NEUTRAL, honest=True, now=now).state

        character = state.require_character()
        assert character.level == 3
        assert character.hp == character.max_hp
        assert "r_regen_pot" in character.unlocked_recipes
        points = character.stat_points
        assert points > 0

        state = allocate_stat_point(state, StatName.STR).state
        assert state.require_character().stat_points == points - 1
        assert state.require_character().stats.strength == 18

        character = add_item_to_inventory(state.require_character(), MATERIALS["SKIN"], 3)
        character = add_item_to_inventory(character, MATERIALS["ROOT"], 1)
        crafted = craft_item(state.with_character(character), "r_regen_pot")
        assert crafted.success
        assert any(item.name == "Regeneration Potion" for item in crafted.state.require_character().inventory)

    def test_shop_and_equip(
        self,
        warrior_state: GameState,
        now: datetime,
        dice_roller: DiceRoller,
        patch_character: Callable[..., GameState],
    ) -> None:
        """Buy the guaranteed Common item and wear it."""
        state = patch_character(warrior_state, gold=5_000, level=5)
        state = open_shop(state, now, roller=dice_roller).state
        listed = state.shop_state.items[1]

        bought = buy_item(state, listed.id)
        assert bought.success
        owned = bought.state.require_character().inventory[-1]
        assert owned.name == listed.name
        assert owned.id != listed.id

        if owned.class_req in (None, ClassType.WARRIOR) and owned.level_req <= 5:
            equipped = equip_item(bought.state, owned.id)
            assert equipped.success
            assert equipped.state.require_character().find_item(owned.id) is None

    def test_streak_over_two_days(
        self,
        warrior_state: GameState,
        now: datetime,
        dice_roller: DiceRoller,
        patch_character: Callable[..., GameState],
    ) -> None:
        """Finishing most dailies keeps the streak across midnight."""
        state = patch_character(warrior_state, honesty=50)
        for day in range(2):
            today = now + timedelta(days=day)
            state = process_game_tick(state, today, roller=dice_roller)
            for daily in state.quests_in(QuestCategory.DAILY)[:6]:
                state = complete_quest(state, daily.id, Mood.NEUTRAL, honest=True, now=today).state

        character = state.require_character()
        assert character.daily_streak == 12
        assert character.honesty == 50 + 12 + 10

    def test_rusty_sword_damage(self, warrior_state: GameState) -> None:
        """Equipping a weapon adds its damage to the character."""
        sword = get_item("w_war_1")
        assert sword is not None
        character = add_item_to_inventory(warrior_state.require_character(), sword)
        state = equip_item(warrior_state.with_character(character), character.inventory[-1].id).state

        equipped = state.require_character()
        assert equipped.equipment.weapon_damage == 10
        assert equipped.effective_stats.strength == 22
