"""Mob and loot generation.

Builds the enemy for an encounter and rolls drops from rarity tables. All
randomness comes from the supplied DiceRoller.
"""

from __future__ import annotations

import math

from lifequest.core.constants import MAJOR_BOSS_FLOOR_INTERVAL
from lifequest.core.logging import get_logger
from lifequest.engine.dice import DiceRoller, get_roller
from lifequest.models.bestiary import (
    BOSS_REGISTRY,
    LOOT_DROP_CHANCE,
    LOOT_RARITY_THRESHOLDS,
    MOBS_BY_BIOME,
    RARITY_CONFIG,
)
from lifequest.models.catalog import ITEMS_DATABASE, MATERIALS
from lifequest.models.character import Character
from lifequest.models.dungeon import Mob
from lifequest.models.enums import DungeonBiome, ItemRarity
from lifequest.models.items import Item


logger = get_logger(__name__)


# =============================================================================
# Mobs
# =============================================================================


def is_major_boss_floor(floor: int, is_boss: bool) -> bool:
    """Whether a boss on ``floor`` is a major boss."""
    return is_boss and floor % MAJOR_BOSS_FLOOR_INTERVAL == 0


def mob_rarity(*, is_boss: bool, is_elite: bool, is_major: bool) -> ItemRarity:
    """Rarity tier of a generated mob."""
    if is_major:
        return ItemRarity.LEGENDARY
    if is_boss:
        return ItemRarity.RARE
    if is_elite:
        return ItemRarity.UNCOMMON
    return ItemRarity.COMMON


def generate_mob(
    biome: DungeonBiome,
    floor: int,
    is_boss: bool,
    is_elite: bool,
    difficulty_mult: float,
    *,
    major_available: bool = True,
    roller: DiceRoller | None = None,
) -> Mob:
    """Build the mob for one encounter.

    Args:
        biome: Dungeon biome, selecting name pool and boss registry entry.
        floor: Dungeon floor; also the mob level.
        is_boss: Whether this is a boss floor.
        is_elite: Whether a non-boss mob is elite.
        difficulty_mult: Dungeon difficulty multiplier for HP and ATK.
        major_available: False when this floor's major boss is already
            defeated, which downgrades it to a regular boss.
        roller: Random source.

    Returns:
        A freshly generated Mob at full HP.
    """
    dice = get_roller(roller)
    floor = max(1, floor)
    is_major = major_available and is_major_boss_floor(floor, is_boss)
    is_elite = is_elite and not is_boss
    rarity = mob_rarity(is_boss=is_boss, is_elite=is_elite, is_major=is_major)
    config = RARITY_CONFIG[rarity]

    pool = MOBS_BY_BIOME[biome]
    ability = None
    if is_major:
        boss = BOSS_REGISTRY[biome]
        name = boss.name
        ability = boss.ability
        drops = sorted({key for template in pool for key in template.drops})
    else:
        template = dice.choice(pool)
        drops = list(template.drops)
        if is_boss:
            name = f"Alpha {template.name}"
        elif is_elite:
            name = f"Elite {template.name}"
        else:
            name = template.name

    max_hp = math.floor(
        (30 + floor * 10) * config.hp_mult * (2 if is_major else 1) * difficulty_mult
    )
    atk = math.floor((3 + floor * 1.5) * config.atk_mult * difficulty_mult)

    mob = Mob(
        name=name,
        level=floor,
        hp=max(1, max_hp),
        max_hp=max(1, max_hp),
        atk=atk,
        defense=floor,
        rarity=rarity,
        biome=biome,
        is_boss=is_boss,
        is_elite=is_elite,
        is_major_boss=is_major,
        special_ability=ability,
        drops=drops,
    )
    logger.debug("Mob generated", name=mob.name, floor=floor, rarity=rarity.value, hp=mob.max_hp)
    return mob


# =============================================================================
# Loot
# =============================================================================


def roll_loot_rarity(roller: DiceRoller | None = None) -> ItemRarity:
    """Roll a loot rarity on the fixed 30/60/85/95 percentile table."""
    roll = get_roller(roller).percent()
    for threshold, rarity in LOOT_RARITY_THRESHOLDS:
        if roll < threshold:
            return rarity
    return ItemRarity.LEGENDARY


def generate_random_item(
    level: int,
    forced_rarity: ItemRarity | None = None,
    *,
    roller: DiceRoller | None = None,
) -> Item:
    """Pick a catalog item near ``level`` and instantiate it.

    Candidates are items within five levels, relaxed to any item at or
    below ``level``, then to the whole catalog. A forced rarity filters
    every stage; if the catalog has no item of that rarity it is ignored.

    Args:
        level: Target level.
        forced_rarity: Rarity to restrict to.
        roller: Random source.

    Returns:
        A new item instance with a fresh id.
    """
    dice = get_roller(roller)
    pool = list(ITEMS_DATABASE)
    if forced_rarity is not None:
        pool = [item for item in pool if item.rarity == forced_rarity] or pool

    candidates = [item for item in pool if abs(item.level_req - level) <= 5]
    if not candidates:
        candidates = [item for item in pool if item.level_req <= level]
    if not candidates:
        candidates = pool
    return dice.choice(candidates).instantiate()


def biome_material(biome: DungeonBiome, roller: DiceRoller | None = None) -> Item:
    """Instantiate one crafting material from a biome's drop table."""
    keys = sorted({key for template in MOBS_BY_BIOME[biome] for key in template.drops})
    return MATERIALS[get_roller(roller).choice(keys)].instantiate()


def drop_chance(character: Character, rarity: ItemRarity) -> float:
    """Chance that a mob of ``rarity`` drops loot for this character."""
    return LOOT_DROP_CHANCE[rarity] + character.effective_stats.dexterity / 50


def generate_loot_for_source(
    character: Character,
    floor: int,
    rarity: ItemRarity,
    biome: DungeonBiome | None = None,
    *,
    roller: DiceRoller | None = None,
) -> Item | None:
    """Roll the drop for a defeated mob.

    Loot rarity is rolled independently of the mob's rarity; the mob's
    rarity only drives the chance that anything drops at all.

    Args:
        character: Character receiving the drop (DEX adds luck).
        floor: Floor the mob was on; target item level.
        rarity: Rarity of the defeated mob.
        biome: Biome of the fight; enables material drops.
        roller: Random source.

    Returns:
        The dropped item instance, or None.
    """
    dice = get_roller(roller)
    if dice.random() >= drop_chance(character, rarity):
        return None
    if biome is not None and dice.chance(0.5):
        return biome_material(biome, dice)
    return generate_random_item(floor, roll_loot_rarity(dice), roller=dice)


__all__ = [
    "is_major_boss_floor",
    "mob_rarity",
    "generate_mob",
    "roll_loot_rarity",
    "generate_random_item",
    "biome_material",
    "drop_chance",
    "generate_loot_for_source",
]
