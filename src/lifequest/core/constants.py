"""Game balance constants for the LifeQuest engine.

Tunable numbers shared by the progression, combat, quest, shop and storage
modules live here so balance passes touch a single file.
"""

from __future__ import annotations

# =============================================================================
# Save Format
# =============================================================================

CURRENT_SAVE_VERSION = "1.1"
"""Schema version written by this engine."""

SUPPORTED_SAVE_VERSIONS = frozenset({"1.0", "1.1"})
"""Versions accepted by save validation after migration."""

SAVE_KEY = "gameState"
"""Storage key of the primary save."""

BACKUP_KEY = "backupGameState"
"""Storage key of the backup save."""

# =============================================================================
# Character Creation
# =============================================================================

NAME_MIN_LENGTH = 3
NAME_MAX_LENGTH = 12

CREATION_BONUS_POINTS = 10
"""Points a new character may distribute over the class base stats."""

CREATION_STAT_CAP = 20
"""No stat may exceed this value at character creation."""

BASE_MAX_HP = 50
HP_PER_VIT = 5

STARTING_GOLD = 100
STARTING_POTIONS = 3
STARTING_INVENTORY_SLOTS = 20
STARTING_HP_REGEN = 5
"""HP regenerated per hour outside combat."""

MAX_HONESTY = 100

# =============================================================================
# Progression
# =============================================================================

MAX_HP_PER_LEVEL = 10
QUEST_GOLD_SCALING = 1.15

# =============================================================================
# Combat
# =============================================================================

BOSS_FLOOR_INTERVAL = 5
MAJOR_BOSS_FLOOR_INTERVAL = 10
ELITE_ROLL_THRESHOLD = 0.8
"""Non-boss encounters become elite when the roll exceeds this value."""

MIN_WEAPON_DAMAGE = 5
PRIMARY_STAT_DAMAGE_FACTOR = 0.05
DAMAGE_VARIANCE = (0.9, 1.1)
CRIT_BASE_CHANCE = 5.0
CRIT_MULTIPLIER = 2.0
ABILITY_TRIGGER_CHANCE = 0.3
REGEN_ABILITY_FRACTION = 0.10
VAMPIRISM_FRACTION = 0.5
HELL_BURN_FRACTION = 0.02

WIN_HEAL_FRACTION = 0.10
WIN_XP_PER_LEVEL = 20
WIN_GOLD_PER_LEVEL = 15

POTION_BASE_HEAL = 60
POTION_MAX_HP_FRACTION = 0.15
AUTO_COMBAT_POTION_THRESHOLD = 0.4

REVIVE_GOLD_FRACTION = 0.2
REVIVE_GOLD_CAP = 500
REVIVE_HP_FRACTION = 0.5
REVIVE_FLOOR_PENALTY = 5

# =============================================================================
# Quests
# =============================================================================

DAILY_QUEST_COUNT = 10
WEEKLY_QUEST_COUNT = 5
DAILY_STREAK_RESET_THRESHOLD = 5
"""Unfinished dailies at rollover that break the streak."""

STREAK_BONUS_INTERVAL = 7
STREAK_HONESTY_BONUS = 10
COMPLETION_HONESTY_BONUS = 1

DAILY_BASE_GOLD = 50
DAILY_BASE_EXP = 20
WEEKLY_BASE_GOLD = 200
WEEKLY_BASE_EXP = 100
ONETIME_GOLD_PER_DIFFICULTY = 100
ONETIME_EXP_PER_DIFFICULTY = 50
ONETIME_ITEM_MIN_DIFFICULTY = 3
EVENT_BASE_GOLD = 1000
EVENT_BASE_EXP = 500

ONETIME_MAX_ACTIVE = 5
ONETIME_BATCH_SIZE = 3
ONETIME_COOLDOWN_HOURS = 2

# =============================================================================
# Shop
# =============================================================================

SELL_PRICE_FRACTION = 0.3
SHOP_REFRESH_MINUTES = 10
SHOP_RANDOM_STOCK = 5
SHOP_RARE_CHANCE = 0.2
SHOP_MAX_DISCOUNT = 50
INVENTORY_EXPANSION_COST = 1000
INVENTORY_EXPANSION_SLOTS = 5

# Gold above 2000 per level is taxed at 1% from level 20 on.
LUXURY_TAX_MIN_LEVEL = 20
LUXURY_TAX_GOLD_PER_LEVEL = 2000
LUXURY_TAX_RATE = 0.01

# =============================================================================
# Storage
# =============================================================================

JOURNAL_KEEP_ON_QUOTA = 50


__all__ = [
    "CURRENT_SAVE_VERSION",
    "SUPPORTED_SAVE_VERSIONS",
    "SAVE_KEY",
    "BACKUP_KEY",
    "NAME_MIN_LENGTH",
    "NAME_MAX_LENGTH",
    "CREATION_BONUS_POINTS",
    "CREATION_STAT_CAP",
    "BASE_MAX_HP",
    "HP_PER_VIT",
    "STARTING_GOLD",
    "STARTING_POTIONS",
    "STARTING_INVENTORY_SLOTS",
    "STARTING_HP_REGEN",
    "MAX_HONESTY",
    "MAX_HP_PER_LEVEL",
    "QUEST_GOLD_SCALING",
    "BOSS_FLOOR_INTERVAL",
    "MAJOR_BOSS_FLOOR_INTERVAL",
    "ELITE_ROLL_THRESHOLD",
    "MIN_WEAPON_DAMAGE",
    "PRIMARY_STAT_DAMAGE_FACTOR",
    "DAMAGE_VARIANCE",
    "CRIT_BASE_CHANCE",
    "CRIT_MULTIPLIER",
    "ABILITY_TRIGGER_CHANCE",
    "REGEN_ABILITY_FRACTION",
    "VAMPIRISM_FRACTION",
    "HELL_BURN_FRACTION",
    "WIN_HEAL_FRACTION",
    "WIN_XP_PER_LEVEL",
    "WIN_GOLD_PER_LEVEL",
    "POTION_BASE_HEAL",
    "POTION_MAX_HP_FRACTION",
    "AUTO_COMBAT_POTION_THRESHOLD",
    "REVIVE_GOLD_FRACTION",
    "REVIVE_GOLD_CAP",
    "REVIVE_HP_FRACTION",
    "REVIVE_FLOOR_PENALTY",
    "DAILY_QUEST_COUNT",
    "WEEKLY_QUEST_COUNT",
    "DAILY_STREAK_RESET_THRESHOLD",
    "STREAK_BONUS_INTERVAL",
    "STREAK_HONESTY_BONUS",
    "COMPLETION_HONESTY_BONUS",
    "DAILY_BASE_GOLD",
    "DAILY_BASE_EXP",
    "WEEKLY_BASE_GOLD",
    "WEEKLY_BASE_EXP",
    "ONETIME_GOLD_PER_DIFFICULTY",
    "ONETIME_EXP_PER_DIFFICULTY",
    "ONETIME_ITEM_MIN_DIFFICULTY",
    "EVENT_BASE_GOLD",
    "EVENT_BASE_EXP",
    "ONETIME_MAX_ACTIVE",
    "ONETIME_BATCH_SIZE",
    "ONETIME_COOLDOWN_HOURS",
    "SELL_PRICE_FRACTION",
    "SHOP_REFRESH_MINUTES",
    "SHOP_RANDOM_STOCK",
    "SHOP_RARE_CHANCE",
    "SHOP_MAX_DISCOUNT",
    "INVENTORY_EXPANSION_COST",
    "INVENTORY_EXPANSION_SLOTS",
    "LUXURY_TAX_MIN_LEVEL",
    "LUXURY_TAX_GOLD_PER_LEVEL",
    "LUXURY_TAX_RATE",
    "JOURNAL_KEEP_ON_QUOTA",
]
