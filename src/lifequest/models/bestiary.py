"""Dungeon registry, mob pools, boss registry and combat tuning tables.

Everything here is immutable reference data loaded once per process.
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping

from lifequest.core.exceptions import CombatError
from lifequest.models.dungeon import DungeonInfo
from lifequest.models.enums import DungeonBiome, ItemRarity, SpecialAbility


@dataclass(frozen=True)
class RarityConfig:
    """Multipliers applied to a mob of a given rarity."""

    xp_mult: float
    hp_mult: float
    atk_mult: float


@dataclass(frozen=True)
class MobTemplate:
    """A regular mob: name and material drop keys."""

    name: str
    drops: tuple[str, ...]


@dataclass(frozen=True)
class BossTemplate:
    """A major boss from the per-biome registry."""

    name: str
    ability: SpecialAbility


@dataclass(frozen=True)
class BiomeModifier:
    """Combat modifier imposed by a biome.

    Attributes:
        miss_chance: Probability that a player attack misses.
        damage_mult: Fixed multiplier on player damage.
        damage_range: Uniform multiplier range replacing ``damage_mult``.
        burn_fraction: Max-HP fraction burned after each enemy attack.
        description: Player-facing summary.
    """

    miss_chance: float = 0.0
    damage_mult: float = 1.0
    damage_range: tuple[float, float] | None = None
    burn_fraction: float = 0.0
    description: str = "No effect"


RARITY_CONFIG: Mapping[ItemRarity, RarityConfig] = MappingProxyType(
    {
        ItemRarity.COMMON: RarityConfig(xp_mult=1.0, hp_mult=1.0, atk_mult=1.0),
        ItemRarity.UNCOMMON: RarityConfig(xp_mult=1.5, hp_mult=1.5, atk_mult=1.2),
        ItemRarity.RARE: RarityConfig(xp_mult=3.0, hp_mult=3.0, atk_mult=1.5),
        ItemRarity.EPIC: RarityConfig(xp_mult=5.0, hp_mult=4.0, atk_mult=1.8),
        ItemRarity.LEGENDARY: RarityConfig(xp_mult=10.0, hp_mult=5.0, atk_mult=2.0),
    }
)

LOOT_DROP_CHANCE: Mapping[ItemRarity, float] = MappingProxyType(
    {
        ItemRarity.COMMON: 0.05,
        ItemRarity.UNCOMMON: 0.2,
        ItemRarity.RARE: 0.5,
        ItemRarity.EPIC: 0.75,
        ItemRarity.LEGENDARY: 1.0,
    }
)
"""Base chance that a defeated mob of a given rarity drops loot."""

LOOT_RARITY_THRESHOLDS: tuple[tuple[float, ItemRarity], ...] = (
    (30.0, ItemRarity.COMMON),
    (60.0, ItemRarity.UNCOMMON),
    (85.0, ItemRarity.RARE),
    (95.0, ItemRarity.EPIC),
)
"""Percentile roll below each threshold yields that rarity; above 95 is LEGENDARY."""


# =============================================================================
# Dungeons
# =============================================================================

DUNGEONS: tuple[DungeonInfo, ...] = (
    DungeonInfo(id="forest", name="Quiet Forest", biome=DungeonBiome.FOREST, min_level=1, max_level=5,
                difficulty_mult=1.0, description="Where every journey begins."),
    DungeonInfo(id="cave", name="Shadow Cave", biome=DungeonBiome.CAVE, min_level=3, max_level=8,
                difficulty_mult=1.2, description="Damp tunnels full of echoes."),
    DungeonInfo(id="swamp", name="Swamp Maze", biome=DungeonBiome.SWAMP, min_level=5, max_level=12,
                difficulty_mult=1.4, description="The mire swallows the careless."),
    DungeonInfo(id="desert", name="Desert of Oblivion", biome=DungeonBiome.DESERT, min_level=8, max_level=15,
                difficulty_mult=1.7, description="Endless sand under a burning sun."),
    DungeonInfo(id="ice", name="Frost Monastery", biome=DungeonBiome.ICE, min_level=10, max_level=20,
                difficulty_mult=2.0, description="A cloister of eternal cold."),
    DungeonInfo(id="necropolis", name="Necropolis", biome=DungeonBiome.NECROPOLIS, min_level=15, max_level=25,
                difficulty_mult=2.4, description="The restless land of the dead."),
    DungeonInfo(id="sky", name="Sky Gardens", biome=DungeonBiome.SKY, min_level=18, max_level=30,
                difficulty_mult=2.8, description="Floating islands above the clouds."),
    DungeonInfo(id="hell", name="Underworld", biome=DungeonBiome.HELL, min_level=22, max_level=35,
                difficulty_mult=3.3, description="A lake of fire and brimstone."),
    DungeonInfo(id="chaos", name="Tower of Chaos", biome=DungeonBiome.CHAOS, min_level=25, max_level=45,
                difficulty_mult=3.8, description="Reality bends here."),
    DungeonInfo(id="aether", name="Aether Hall", biome=DungeonBiome.AETHER, min_level=30, max_level=50,
                difficulty_mult=4.5, description="The edge between worlds."),
)

DUNGEONS_BY_ID: Mapping[str, DungeonInfo] = MappingProxyType({d.id: d for d in DUNGEONS})


def get_dungeon(dungeon_id: str) -> DungeonInfo:
    """Dungeon by id.

    Raises:
        CombatError: If the id is unknown.
    """
    try:
        return DUNGEONS_BY_ID[dungeon_id]
    except KeyError:
        raise CombatError("Unknown dungeon", dungeon_id=dungeon_id) from None


# =============================================================================
# Biome Modifiers
# =============================================================================

BIOME_MODIFIERS: Mapping[DungeonBiome, BiomeModifier] = MappingProxyType(
    {
        DungeonBiome.FOREST: BiomeModifier(),
        DungeonBiome.CAVE: BiomeModifier(),
        DungeonBiome.SWAMP: BiomeModifier(miss_chance=0.2, description="Fog: 20% miss chance"),
        DungeonBiome.DESERT: BiomeModifier(damage_mult=0.9, description="Heat: -10% damage"),
        DungeonBiome.ICE: BiomeModifier(miss_chance=0.15, description="Cold: 15% miss chance"),
        DungeonBiome.NECROPOLIS: BiomeModifier(damage_mult=0.9, description="Undead: -10% damage"),
        DungeonBiome.SKY: BiomeModifier(damage_mult=1.1, description="Tailwind: +10% damage"),
        DungeonBiome.HELL: BiomeModifier(burn_fraction=0.02, description="Burn: 2% max HP per enemy attack"),
        DungeonBiome.CHAOS: BiomeModifier(damage_range=(0.5, 1.5), description="Chaos: damage x0.5 to x1.5"),
        DungeonBiome.AETHER: BiomeModifier(miss_chance=0.3, description="Phasing: 30% miss chance"),
    }
)


# =============================================================================
# Mob Pools
# =============================================================================

MOBS_BY_BIOME: Mapping[DungeonBiome, tuple[MobTemplate, ...]] = MappingProxyType(
    {
        DungeonBiome.FOREST: (
            MobTemplate("Rat", ("SKIN",)),
            MobTemplate("Thief", ("FEATHER",)),
            MobTemplate("Boar", ("SKIN", "ROOT")),
        ),
        DungeonBiome.CAVE: (
            MobTemplate("Golem", ("ORE",)),
            MobTemplate("Troll", ("SKIN",)),
            MobTemplate("Bat", ("SKIN",)),
        ),
        DungeonBiome.SWAMP: (
            MobTemplate("Drowner", ("ROOT",)),
            MobTemplate("Toad", ("POISON",)),
            MobTemplate("Slime", ("ROOT",)),
        ),
        DungeonBiome.DESERT: (
            MobTemplate("Scorpion", ("POISON", "SHARD")),
            MobTemplate("Mummy", ("DUST",)),
            MobTemplate("Djinn", ("ESSENCE",)),
        ),
        DungeonBiome.ICE: (
            MobTemplate("Wolf", ("SKIN", "SHARD")),
            MobTemplate("Yeti", ("SKIN",)),
            MobTemplate("Spirit", ("SHARD", "ESSENCE")),
        ),
        DungeonBiome.NECROPOLIS: (
            MobTemplate("Skeleton", ("ORE",)),
            MobTemplate("Lich", ("DUST", "SOUL")),
            MobTemplate("Ghost", ("ESSENCE",)),
        ),
        DungeonBiome.SKY: (
            MobTemplate("Griffin", ("FEATHER", "SKIN")),
            MobTemplate("Elemental", ("ESSENCE",)),
            MobTemplate("Harpy", ("FEATHER",)),
        ),
        DungeonBiome.HELL: (
            MobTemplate("Imp", ("ORE",)),
            MobTemplate("Demon", ("ORE", "SOUL")),
            MobTemplate("Hellhound", ("SKIN", "POISON")),
        ),
        DungeonBiome.CHAOS: (
            MobTemplate("Mutant", ("POISON", "ORE")),
            MobTemplate("Eye", ("ESSENCE", "DUST")),
        ),
        DungeonBiome.AETHER: (
            MobTemplate("Warden", ("SHARD", "SOUL")),
            MobTemplate("Devourer", ("DUST", "ESSENCE")),
        ),
    }
)

BOSS_REGISTRY: Mapping[DungeonBiome, BossTemplate] = MappingProxyType(
    {
        DungeonBiome.FOREST: BossTemplate("Elder Treant", SpecialAbility.REGEN),
        DungeonBiome.CAVE: BossTemplate("Stone Colossus", SpecialAbility.CRITICAL),
        DungeonBiome.SWAMP: BossTemplate("Bog Hag", SpecialAbility.VAMPIRISM),
        DungeonBiome.DESERT: BossTemplate("Sand Pharaoh", SpecialAbility.REGEN),
        DungeonBiome.ICE: BossTemplate("Frost Wyrm", SpecialAbility.CRITICAL),
        DungeonBiome.NECROPOLIS: BossTemplate("Lich King", SpecialAbility.VAMPIRISM),
        DungeonBiome.SKY: BossTemplate("Storm Roc", SpecialAbility.CRITICAL),
        DungeonBiome.HELL: BossTemplate("Archdemon", SpecialAbility.VAMPIRISM),
        DungeonBiome.CHAOS: BossTemplate("Chaos Avatar", SpecialAbility.CRITICAL),
        DungeonBiome.AETHER: BossTemplate("Void Sovereign", SpecialAbility.REGEN),
    }
)


__all__ = [
    "RarityConfig",
    "MobTemplate",
    "BossTemplate",
    "BiomeModifier",
    "RARITY_CONFIG",
    "LOOT_DROP_CHANCE",
    "LOOT_RARITY_THRESHOLDS",
    "DUNGEONS",
    "DUNGEONS_BY_ID",
    "BIOME_MODIFIERS",
    "MOBS_BY_BIOME",
    "BOSS_REGISTRY",
    "get_dungeon",
]
