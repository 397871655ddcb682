"""Tests for the persisted game models."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from lifequest.models import (
    EPOCH,
    ActionResult,
    Character,
    ClassType,
    CombatTurn,
    DungeonBiome,
    DungeonState,
    EquipmentSlot,
    GameState,
    HEALTH_POTION,
    Item,
    ItemRarity,
    ItemType,
    Mob,
    QuestCategory,
    StatBonus,
    Stats,
    get_item,
)
from lifequest.core.exceptions import InvalidGameStateError


class TestItems:
    """Tests for Item and stat models."""

    def test_instantiate_gives_fresh_id(self) -> None:
        """Test owned copies get new ids but remember their template."""
        first = HEALTH_POTION.instantiate(3)
        second = HEALTH_POTION.instantiate()

        assert first.id != second.id != HEALTH_POTION.id
        assert first.template_id == HEALTH_POTION.id
        assert first.amount == 3

    def test_non_stackable_amount_forced_to_one(self) -> None:
        """Test equipment copies always hold one unit."""
        sword = get_item("w_war_1")
        assert sword is not None
        assert sword.instantiate(5).amount == 1

    def test_equipment_slot_mapping(self) -> None:
        """Test wearable types map to slots and consumables do not."""
        assert EquipmentSlot.for_item_type(ItemType.RING) == EquipmentSlot.RING
        assert EquipmentSlot.for_item_type(ItemType.POTION) is None

    def test_stats_plus_never_negative(self) -> None:
        """Test bonuses cannot push a stat below zero."""
        stats = Stats(strength=2, dexterity=1, intelligence=0, vitality=3)
        boosted = stats.plus(StatBonus(strength=5, dexterity=-4))
        assert boosted.strength == 7
        assert boosted.dexterity == 0
        assert boosted.total == 10

    def test_item_is_frozen(self) -> None:
        """Test models cannot be mutated in place."""
        with pytest.raises(ValidationError):
            HEALTH_POTION.amount = 5  # type: ignore[misc]

    def test_storage_aliases(self) -> None:
        """Test dumps use the camelCase storage shape."""
        sword = Item(name="Blade", type=ItemType.WEAPON, level_req=3, stats=StatBonus(strength=4))
        data = sword.to_storage()
        assert data["levelReq"] == 3
        assert data["stats"]["str"] == 4
        assert "level_req" not in data


class TestCharacter:
    """Tests for the Character aggregate."""

    def test_hp_cannot_exceed_max(self) -> None:
        """Test the hp <= max_hp invariant."""
        with pytest.raises(ValidationError):
            Character(name="Aria", class_type=ClassType.MAGE, stats=Stats(), hp=11, max_hp=10)

    def test_honesty_bounds(self) -> None:
        """Test honesty is limited to 0..100."""
        with pytest.raises(ValidationError):
            Character(name="Aria", class_type=ClassType.MAGE, stats=Stats(), hp=1, max_hp=1, honesty=101)

    def test_copy_skips_checks_until_validated(self, warrior: Character) -> None:
        """Test model_copy updates are only checked when the data is validated again."""
        broke = warrior.model_copy(update={"gold": -5})
        assert broke.gold == -5

        with pytest.raises(ValidationError):
            Character.model_validate(broke.model_dump())

    def test_effective_stats_include_equipment(self, warrior: Character) -> None:
        """Test worn items add to effective stats and weapon damage."""
        sword = get_item("w_war_2")
        assert sword is not None
        equipped = warrior.model_copy(
            update={"equipment": warrior.equipment.with_slot(EquipmentSlot.WEAPON, sword)}
        )
        assert equipped.effective_stats.strength == warrior.stats.strength + 10
        assert equipped.equipment.weapon_damage == 20

    def test_free_slots(self, warrior: Character) -> None:
        """Test free slots after the starting potions."""
        assert len(warrior.inventory) == 1
        assert warrior.free_slots == 19


class TestDungeonState:
    """Tests for encounter state models."""

    def test_in_combat(self) -> None:
        """Test in_combat needs a mob and a non-terminal turn."""
        mob = Mob(name="Rat", level=1, hp=5, max_hp=5, atk=1, defense=1, biome=DungeonBiome.FOREST)
        assert DungeonState(current_mob=mob).in_combat
        assert not DungeonState(current_mob=mob, turn=CombatTurn.LOSE).in_combat
        assert not DungeonState().in_combat

    def test_mob_hp_clamped(self) -> None:
        """Test with_hp keeps hp within bounds."""
        mob = Mob(name="Rat", level=1, hp=5, max_hp=10, atk=1, defense=1, biome=DungeonBiome.FOREST)
        assert mob.with_hp(50).hp == 10
        assert mob.with_hp(-3).is_dead

    def test_mob_defense_alias(self) -> None:
        """Test the mob's defense is stored as ``def``."""
        mob = Mob.model_validate(
            {"name": "Rat", "level": 1, "hp": 5, "maxHp": 5, "atk": 1, "def": 4, "biome": "Forest"}
        )
        assert mob.defense == 4
        assert mob.to_storage()["def"] == 4


class TestGameState:
    """Tests for the root state."""

    def test_defaults(self) -> None:
        """Test an empty state."""
        state = GameState()
        assert state.version == "1.1"
        assert state.character is None
        assert state.last_daily_reset == EPOCH
        assert state.dungeon_floor == 1

    def test_require_character(self) -> None:
        """Test a missing character raises InvalidGameStateError."""
        with pytest.raises(InvalidGameStateError):
            GameState().require_character()

    def test_round_trip(self, warrior_state: GameState) -> None:
        """Test a dumped state validates back into an equal state."""
        restored = GameState.model_validate(warrior_state.to_storage())
        assert restored == warrior_state

    def test_quests_in(self, warrior_state: GameState) -> None:
        """Test category filtering on a fresh state."""
        assert warrior_state.quests_in(QuestCategory.DAILY) == []
        assert warrior_state.find_quest("missing") is None


class TestActionResult:
    """Tests for ActionResult constructors."""

    def test_fail_keeps_state(self, warrior_state: GameState) -> None:
        """Test failed results carry the input state."""
        result = ActionResult.fail(warrior_state, "Nope")
        assert result.success is False
        assert result.state is warrior_state
        assert result.log == []

    def test_ok_defaults(self, warrior_state: GameState) -> None:
        """Test successful results default to an empty log."""
        result = ActionResult.ok(warrior_state, "Done")
        assert result.success
        assert result.message == "Done"


def test_catalog_prices_follow_rarity() -> None:
    """Test catalog prices scale with level and rarity."""
    legendary = get_item("w_war_5")
    assert legendary is not None
    assert legendary.rarity == ItemRarity.LEGENDARY
    assert legendary.price == 20 * 10 * 100
