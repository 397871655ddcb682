"""Game lifecycle: character creation and the periodic game tick."""

from __future__ import annotations

import math
import re
from datetime import datetime
from types import MappingProxyType
from typing import Mapping

from lifequest.core.constants import (
    BASE_MAX_HP,
    CREATION_BONUS_POINTS,
    CREATION_STAT_CAP,
    HP_PER_VIT,
    LUXURY_TAX_GOLD_PER_LEVEL,
    LUXURY_TAX_MIN_LEVEL,
    LUXURY_TAX_RATE,
    MAX_HONESTY,
    NAME_MAX_LENGTH,
    NAME_MIN_LENGTH,
    STARTING_GOLD,
    STARTING_HP_REGEN,
    STARTING_INVENTORY_SLOTS,
    STARTING_POTIONS,
)
from lifequest.core.exceptions import ValidationError
from lifequest.core.logging import get_logger
from lifequest.engine.dice import DiceRoller
from lifequest.engine.inventory import add_item_to_inventory
from lifequest.engine.quests import refresh_quests
from lifequest.models.base import EPOCH, utcnow
from lifequest.models.catalog import HEALTH_POTION, recipes_unlocked_at
from lifequest.models.character import Character, JournalEntry
from lifequest.models.enums import ClassType, CombatTurn, Mood, StatName
from lifequest.models.game_state import ActionResult, GameState
from lifequest.models.items import StatBonus, Stats


logger = get_logger(__name__)


CLASS_BASE_STATS: Mapping[ClassType, Stats] = MappingProxyType(
    {
        ClassType.WARRIOR: Stats(strength=15, dexterity=8, intelligence=3, vitality=12),
        ClassType.MAGE: Stats(strength=5, dexterity=6, intelligence=16, vitality=8),
        ClassType.SCOUT: Stats(strength=7, dexterity=14, intelligence=10, vitality=9),
        ClassType.HEALER: Stats(strength=6, dexterity=7, intelligence=12, vitality=10),
    }
)

CLASS_DESCRIPTIONS: Mapping[ClassType, str] = MappingProxyType(
    {
        ClassType.WARRIOR: "A mighty fighter. Fury grants strength in the depths of the dungeons.",
        ClassType.MAGE: "A master of the arcane. Wisdom turns into devastating spells.",
        ClassType.SCOUT: "Swift and precise. Agility finds the weak spot and the hidden loot.",
        ClassType.HEALER: "A keeper of life. Insight sustains the body through long fights.",
    }
)

NAME_PATTERN = re.compile(rf"\w{{{NAME_MIN_LENGTH},{NAME_MAX_LENGTH}}}")
"""Letters of any script, digits and underscores."""

OPENING_JOURNAL_TEXT = "The adventure begins. I have arrived in this world to become a legend."


# =============================================================================
# Character Creation
# =============================================================================


def validate_name(name: str) -> str:
    """Return the stripped name.

    Raises:
        ValidationError: If the name is not 3-12 word characters.
    """
    stripped = name.strip()
    if not NAME_PATTERN.fullmatch(stripped):
        raise ValidationError(
            f"Name must be {NAME_MIN_LENGTH}-{NAME_MAX_LENGTH} letters, digits or underscores",
            field_name="name",
            invalid_value=name,
        )
    return stripped


def validate_allocation(class_type: ClassType, allocated: StatBonus) -> Stats:
    """Apply creation bonus points to the class base stats.

    Raises:
        ValidationError: If a bonus is negative, more than ten points are
            spent or a stat would exceed 20.
    """
    base = CLASS_BASE_STATS[class_type]
    spent = 0
    for stat in StatName:
        points = allocated.get(stat)
        if points < 0:
            raise ValidationError(
                f"Cannot remove points from {stat.value}",
                field_name=stat.value,
                invalid_value=points,
            )
        if base.get(stat) + points > CREATION_STAT_CAP:
            raise ValidationError(
                f"{stat.value} cannot exceed {CREATION_STAT_CAP} at creation",
                field_name=stat.value,
                invalid_value=base.get(stat) + points,
            )
        spent += points
    if spent > CREATION_BONUS_POINTS:
        raise ValidationError(
            f"Only {CREATION_BONUS_POINTS} bonus points can be allocated",
            field_name="allocated_stats",
            invalid_value=spent,
        )
    return base.plus(allocated)


def create_character(
    name: str,
    class_type: ClassType,
    allocated_stats: StatBonus | None = None,
    *,
    now: datetime | None = None,
) -> GameState:
    """Create a new character and the game state that holds it.

    The state starts with reset markers at the epoch so the first tick fills
    the quest board.

    Args:
        name: 3-12 letters, digits or underscores.
        class_type: Chosen archetype.
        allocated_stats: Bonus points added to the class base stats.
        now: Creation time for the opening journal entry.

    Returns:
        A fresh GameState.

    Raises:
        ValidationError: If the name or allocation is invalid.
    """
    name = validate_name(name)
    stats = validate_allocation(class_type, allocated_stats or StatBonus())
    now = now or utcnow()
    max_hp = BASE_MAX_HP + stats.vitality * HP_PER_VIT

    character = Character(
        name=name,
        class_type=class_type,
        stats=stats,
        hp=max_hp,
        max_hp=max_hp,
        gold=STARTING_GOLD,
        inventory_slots=STARTING_INVENTORY_SLOTS,
        honesty=MAX_HONESTY,
        hp_regen=STARTING_HP_REGEN,
        journal=[JournalEntry(id="init", date=now, text=OPENING_JOURNAL_TEXT, mood=Mood.INSPIRED)],
        unlocked_recipes=recipes_unlocked_at(1),
    )
    character = add_item_to_inventory(character, HEALTH_POTION, STARTING_POTIONS)

    logger.info("Character created", name=name, class_type=class_type.value, max_hp=max_hp)
    return GameState(character=character, last_daily_reset=EPOCH, last_weekly_reset=EPOCH, last_regen_at=now)


# =============================================================================
# Game Tick
# =============================================================================


def apply_hp_regen(state: GameState, now: datetime) -> GameState:
    """Regenerate ``hp_regen`` HP per elapsed hour outside combat.

    The regen clock restarts while fighting, after a defeat and at full HP,
    so time spent there never turns into healing later.
    """
    character = state.character
    if character is None:
        return state
    eligible = not state.dungeon_state.in_combat and state.dungeon_state.turn != CombatTurn.LOSE
    if state.last_regen_at == EPOCH or not eligible or character.hp >= character.max_hp:
        if state.last_regen_at == now:
            return state
        return state.model_copy(update={"last_regen_at": now})

    hours = (now - state.last_regen_at).total_seconds() / 3600
    gained = math.floor(hours * character.hp_regen)
    if gained <= 0:
        return state
    hp = min(character.max_hp, character.hp + gained)
    logger.debug("HP regenerated", hp=hp, gained=hp - character.hp)
    return state.model_copy(
        update={"character": character.model_copy(update={"hp": hp}), "last_regen_at": now}
    )


def process_game_tick(
    state: GameState,
    now: datetime | None = None,
    *,
    roller: DiceRoller | None = None,
) -> GameState:
    """Advance wall-clock driven state: quest resets and HP regeneration.

    Pure for a fixed ``now``: ticking twice at the same instant returns the
    first result unchanged.

    Args:
        state: Current state.
        now: Wall-clock time; defaults to the local time.
        roller: Random source for newly rolled quests.

    Returns:
        The updated state, or ``state`` itself when nothing was due.
    """
    if state.character is None:
        return state
    now = now or datetime.now().astimezone()
    ticked = refresh_quests(state, now, roller=roller)
    return apply_hp_regen(ticked, now)


def apply_luxury_tax(state: GameState) -> ActionResult:
    """Tax hoarded gold once per load for characters of level 20 and above.

    The tax is 1% of the gold held above ``2000 * level``.
    """
    character = state.character
    if character is None or character.level < LUXURY_TAX_MIN_LEVEL:
        return ActionResult.ok(state)
    threshold = LUXURY_TAX_GOLD_PER_LEVEL * character.level
    tax = math.floor((character.gold - threshold) * LUXURY_TAX_RATE)
    if tax <= 0:
        return ActionResult.ok(state)
    logger.info("Luxury tax applied", gold=character.gold, tax=tax)
    taxed = character.model_copy(update={"gold": character.gold - tax})
    return ActionResult.ok(state.with_character(taxed), f"Luxury tax: -{tax} gold")


__all__ = [
    "CLASS_BASE_STATS",
    "CLASS_DESCRIPTIONS",
    "NAME_PATTERN",
    "validate_name",
    "validate_allocation",
    "create_character",
    "apply_hp_regen",
    "apply_luxury_tax",
    "process_game_tick",
]
