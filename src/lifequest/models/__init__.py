"""Pydantic V2 models and static catalogs for LifeQuest.

All persisted models are frozen and serialize with camelCase aliases so
saved JSON keeps the historical shape. Catalogs (items, recipes, bestiary,
quest pools) are immutable module-level tables.

Submodules:
    enums: Enumeration types (ClassType, ItemType, CombatTurn, etc.)
    items: Stats, items and recipes
    character: Character, equipment and journal
    quests: Quest templates and active quests
    dungeon: Dungeons, mobs, buffs and encounter state
    game_state: Root GameState, ShopState and ActionResult
    catalog: Item, material and recipe tables
    bestiary: Dungeons, mob pools, bosses and combat tuning
    quest_pools: Quest templates and calendar events
    progression: XP curve, reward and price formulas

Example:
    >>> from lifequest.models import GameState, xp_to_level
    >>> xp_to_level(1)
    200
"""

from __future__ import annotations

# =============================================================================
# Enumerations
# =============================================================================
from lifequest.models.enums import (
    BuffKind,
    ClassType,
    CombatTurn,
    DungeonBiome,
    EquipmentSlot,
    ItemRarity,
    ItemType,
    MaterialType,
    Mood,
    QuestCategory,
    ReputationType,
    SpecialAbility,
    StatName,
)

# =============================================================================
# Models
# =============================================================================
from lifequest.models.base import EPOCH, GameModel, utcnow
from lifequest.models.items import Item, MaterialRequirement, Recipe, StatBonus, Stats
from lifequest.models.character import Character, CharacterSettings, Equipment, JournalEntry
from lifequest.models.quests import Quest, QuestTemplate
from lifequest.models.dungeon import Buff, DungeonInfo, DungeonState, Mob
from lifequest.models.game_state import ActionResult, GameState, ShopState

# =============================================================================
# Catalogs & Formulas
# =============================================================================
from lifequest.models.catalog import (
    HEALTH_POTION,
    ITEMS_BY_ID,
    ITEMS_DATABASE,
    MATERIALS,
    RECIPES,
    RECIPES_BY_ID,
    get_item,
)
from lifequest.models.bestiary import DUNGEONS, DUNGEONS_BY_ID, get_dungeon
from lifequest.models.progression import (
    apply_level_ups,
    quest_exp,
    quest_gold,
    reputation_gain,
    sell_price,
    xp_to_level,
)


__all__ = [
    # Enumerations
    "BuffKind",
    "ClassType",
    "CombatTurn",
    "DungeonBiome",
    "EquipmentSlot",
    "ItemRarity",
    "ItemType",
    "MaterialType",
    "Mood",
    "QuestCategory",
    "ReputationType",
    "SpecialAbility",
    "StatName",
    # Models
    "EPOCH",
    "GameModel",
    "utcnow",
    "Item",
    "MaterialRequirement",
    "Recipe",
    "StatBonus",
    "Stats",
    "Character",
    "CharacterSettings",
    "Equipment",
    "JournalEntry",
    "Quest",
    "QuestTemplate",
    "Buff",
    "DungeonInfo",
    "DungeonState",
    "Mob",
    "ActionResult",
    "GameState",
    "ShopState",
    # Catalogs & Formulas
    "HEALTH_POTION",
    "ITEMS_BY_ID",
    "ITEMS_DATABASE",
    "MATERIALS",
    "RECIPES",
    "RECIPES_BY_ID",
    "get_item",
    "DUNGEONS",
    "DUNGEONS_BY_ID",
    "get_dungeon",
    "apply_level_ups",
    "quest_exp",
    "quest_gold",
    "reputation_gain",
    "sell_price",
    "xp_to_level",
]
