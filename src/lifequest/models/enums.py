"""Enumeration types for the LifeQuest engine.

These enums are the vocabulary shared by the catalog, the models and the
engine: character archetypes, item taxonomy, quest categories, dungeon
biomes and the combat turn machine.
"""

from __future__ import annotations

from enum import StrEnum


class ClassType(StrEnum):
    """Character archetypes."""

    WARRIOR = "Warrior"
    MAGE = "Mage"
    SCOUT = "Scout"
    HEALER = "Healer"

    @property
    def primary_stat(self) -> StatName:
        """Stat that scales this class's weapon damage.

        Returns:
            STR for warriors, DEX for scouts, INT for mages and healers.
        """
        match self:
            case ClassType.WARRIOR:
                return StatName.STR
            case ClassType.SCOUT:
                return StatName.DEX
            case ClassType.MAGE | ClassType.HEALER:
                return StatName.INT


class StatName(StrEnum):
    """The four character stats."""

    STR = "str"
    DEX = "dex"
    INT = "int"
    VIT = "vit"


class ItemRarity(StrEnum):
    """Five-tier quality ladder, ordered from weakest to strongest."""

    COMMON = "Common"
    UNCOMMON = "Uncommon"
    RARE = "Rare"
    EPIC = "Epic"
    LEGENDARY = "Legendary"

    @property
    def rank(self) -> int:
        """Position on the ladder, COMMON being 0."""
        return list(ItemRarity).index(self)


class ItemType(StrEnum):
    """Item kinds. The first eight map onto equipment slots."""

    WEAPON = "Weapon"
    HEAD = "Head"
    BODY = "Body"
    HANDS = "Hands"
    LEGS = "Legs"
    RING = "Ring"
    AMULET = "Amulet"
    BELT = "Belt"
    POTION = "Potion"
    SCROLL = "Scroll"
    FOOD = "Food"
    MATERIAL = "Material"

    @property
    def is_stackable(self) -> bool:
        """Whether items of this type share a slot through ``amount``."""
        return self in (ItemType.POTION, ItemType.SCROLL, ItemType.FOOD, ItemType.MATERIAL)


class EquipmentSlot(StrEnum):
    """The eight fixed equipment slots."""

    WEAPON = "weapon"
    HEAD = "head"
    BODY = "body"
    HANDS = "hands"
    LEGS = "legs"
    RING = "ring"
    AMULET = "amulet"
    BELT = "belt"

    @classmethod
    def for_item_type(cls, item_type: ItemType) -> EquipmentSlot | None:
        """Map an item type onto the slot it is worn in.

        Args:
            item_type: Type of the item being equipped.

        Returns:
            The matching slot, or None for consumables and materials.
        """
        match item_type:
            case ItemType.WEAPON:
                return cls.WEAPON
            case ItemType.HEAD:
                return cls.HEAD
            case ItemType.BODY:
                return cls.BODY
            case ItemType.HANDS:
                return cls.HANDS
            case ItemType.LEGS:
                return cls.LEGS
            case ItemType.RING:
                return cls.RING
            case ItemType.AMULET:
                return cls.AMULET
            case ItemType.BELT:
                return cls.BELT
            case ItemType.POTION | ItemType.SCROLL | ItemType.FOOD | ItemType.MATERIAL:
                return None


class MaterialType(StrEnum):
    """Crafting material families."""

    BIO = "BIO"
    MINERAL = "MINERAL"
    MAGIC = "MAGIC"
    ARTIFACT = "ARTIFACT"


class ReputationType(StrEnum):
    """The three reputation tracks."""

    HEROISM = "Heroism"
    DISCIPLINE = "Discipline"
    CREATIVITY = "Creativity"


class QuestCategory(StrEnum):
    """Quest categories, ordered by reward weight."""

    DAILY = "Daily"
    WEEKLY = "Weekly"
    ONETIME = "OneTime"
    EVENT = "Event"

    @property
    def reward_weight(self) -> int:
        """Category weight used by reward scaling (DAILY 0 to EVENT 3)."""
        return list(QuestCategory).index(self)


class Mood(StrEnum):
    """Self-reported mood recorded with every quest completion."""

    INSPIRED = "Inspired"
    TIRED = "Tired"
    NEUTRAL = "Neutral"
    REGRET = "Regret"


class DungeonBiome(StrEnum):
    """Dungeon environments, each with its own combat modifier."""

    FOREST = "Forest"
    CAVE = "Cave"
    SWAMP = "Swamp"
    DESERT = "Desert"
    ICE = "Ice"
    NECROPOLIS = "Necropolis"
    SKY = "Sky"
    HELL = "Hell"
    CHAOS = "Chaos"
    AETHER = "Aether"


class SpecialAbility(StrEnum):
    """Boss abilities that may trigger on the enemy turn."""

    REGEN = "REGEN"
    CRITICAL = "CRITICAL"
    VAMPIRISM = "VAMPIRISM"


class CombatTurn(StrEnum):
    """States of the encounter turn machine."""

    PLAYER_TURN = "PLAYER_TURN"
    ENEMY_TURN = "ENEMY_TURN"
    WIN = "WIN"
    LOSE = "LOSE"

    @property
    def is_terminal(self) -> bool:
        """Whether the encounter is over."""
        return self in (CombatTurn.WIN, CombatTurn.LOSE)


class BuffKind(StrEnum):
    """What a combat buff modifies."""

    DAMAGE = "DAMAGE"
    DEFENSE = "DEFENSE"


__all__ = [
    "ClassType",
    "StatName",
    "ItemRarity",
    "ItemType",
    "EquipmentSlot",
    "MaterialType",
    "ReputationType",
    "QuestCategory",
    "Mood",
    "DungeonBiome",
    "SpecialAbility",
    "CombatTurn",
    "BuffKind",
]
