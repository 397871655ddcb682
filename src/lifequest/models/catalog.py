"""Static item, material and recipe catalog.

The tables are built once at import time and never mutated. Look-ups return
templates; call ``Item.instantiate`` before placing one in an inventory.

Prices follow ``level * 10 * rarity multiplier``.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Mapping

from lifequest.models.enums import ClassType, ItemRarity, ItemType, MaterialType
from lifequest.models.items import Item, MaterialRequirement, Recipe, StatBonus


# =============================================================================
# Pricing
# =============================================================================

RARITY_PRICE_MULTIPLIER: Mapping[ItemRarity, int] = MappingProxyType(
    {
        ItemRarity.COMMON: 1,
        ItemRarity.UNCOMMON: 3,
        ItemRarity.RARE: 10,
        ItemRarity.EPIC: 30,
        ItemRarity.LEGENDARY: 100,
    }
)


def catalog_price(level: int, rarity: ItemRarity) -> int:
    """Shop price of a catalog item."""
    return level * 10 * RARITY_PRICE_MULTIPLIER[rarity]


def _item(
    item_id: str,
    name: str,
    item_type: ItemType,
    rarity: ItemRarity,
    level: int,
    stats: dict[str, int] | None = None,
    effect: str = "",
    *,
    class_req: ClassType | None = None,
    heal: int | None = None,
    damage: int = 0,
) -> Item:
    return Item(
        id=item_id,
        base_id=item_id,
        name=name,
        type=item_type,
        rarity=rarity,
        price=catalog_price(level, rarity),
        level_req=level,
        class_req=class_req,
        stats=StatBonus.model_validate(stats or {}),
        damage=damage,
        heal_amount=heal,
        effect=effect,
        stackable=item_type.is_stackable,
    )


def _weapon(
    item_id: str,
    name: str,
    rarity: ItemRarity,
    level: int,
    stat: str,
    value: int,
    class_req: ClassType,
    effect: str = "",
) -> Item:
    # Weapon damage is twice the headline stat bonus.
    return _item(
        item_id,
        name,
        ItemType.WEAPON,
        rarity,
        level,
        {stat: value},
        effect,
        class_req=class_req,
        damage=value * 2,
    )


C, U, R, E, L = (
    ItemRarity.COMMON,
    ItemRarity.UNCOMMON,
    ItemRarity.RARE,
    ItemRarity.EPIC,
    ItemRarity.LEGENDARY,
)

# =============================================================================
# Items
# =============================================================================

_ITEMS: tuple[Item, ...] = (
    # Warrior weapons
    _weapon("w_war_1", "Rusty Sword", C, 1, "str", 5, ClassType.WARRIOR),
    _weapon("w_war_2", "Guardian Blade", U, 5, "str", 10, ClassType.WARRIOR, "+5% crit"),
    _weapon("w_war_3", "Axe of Wrath", R, 10, "str", 18, ClassType.WARRIOR, "+15 crit damage"),
    _weapon("w_war_4", "Sword of the Unbowed", E, 15, "str", 25, ClassType.WARRIOR, "Haste on kill"),
    _weapon("w_war_5", "Legionnaire Glaive", L, 20, "str", 35, ClassType.WARRIOR, "Executes below 20% HP"),
    # Mage weapons
    _weapon("w_mag_1", "Novice Staff", C, 1, "int", 3, ClassType.MAGE),
    _weapon("w_mag_2", "Wand of Flame", U, 5, "int", 8, ClassType.MAGE, "+5% fire"),
    _weapon("w_mag_3", "Orb of Chaos", R, 10, "int", 15, ClassType.MAGE, "10% ignite"),
    _weapon("w_mag_4", "Staff of Endless Winter", E, 15, "int", 22, ClassType.MAGE, "Freeze once per fight"),
    _weapon("w_mag_5", "Archmage's Key", L, 20, "int", 30, ClassType.MAGE, "+50% damage"),
    # Scout weapons
    _weapon("w_sct_1", "Thief's Dagger", C, 1, "dex", 4, ClassType.SCOUT),
    _weapon("w_sct_2", "Shadow Blades", U, 5, "dex", 7, ClassType.SCOUT, "+8% crit"),
    _weapon("w_sct_3", "Venom Needles", R, 10, "dex", 12, ClassType.SCOUT, "15% poison"),
    _weapon("w_sct_4", "Phantom Blade", E, 15, "dex", 18, ClassType.SCOUT, "First strike crits"),
    _weapon("w_sct_5", "Blades of Fate", L, 20, "dex", 25, ClassType.SCOUT, "50% dodge below 30% HP"),
    # Healer weapons
    _weapon("w_hlr_1", "Apprentice Staff", C, 1, "int", 3, ClassType.HEALER),
    _weapon("w_hlr_2", "Wand of Mercy", U, 5, "int", 6, ClassType.HEALER, "+5% healing"),
    _weapon("w_hlr_3", "Scepter of Renewal", R, 10, "int", 10, ClassType.HEALER, "+5 HP per turn"),
    _weapon("w_hlr_4", "Staff of Light", E, 15, "int", 16, ClassType.HEALER, "Heals cleanse debuffs"),
    _weapon("w_hlr_5", "Healer's Heart", L, 20, "int", 22, ClassType.HEALER, "+20% HP"),
    # Head
    _item("a_head_1", "Leather Hood", ItemType.HEAD, C, 1, {"dex": 2}),
    _item("a_head_2", "Guard Helm", ItemType.HEAD, U, 5, {"vit": 5}),
    _item("a_head_3", "Sage Mask", ItemType.HEAD, R, 10, {"int": 7}, "+3% mana"),
    _item("a_head_4", "Warrior's Crown", ItemType.HEAD, E, 15, {"str": 5, "vit": 5}),
    _item("a_head_5", "Circlet of Eternity", ItemType.HEAD, L, 20, {"str": 5, "dex": 5, "int": 5, "vit": 5}),
    # Body
    _item("a_body_1", "Torn Shirt", ItemType.BODY, C, 1, {"vit": 1}),
    _item("a_body_2", "Leather Armor", ItemType.BODY, U, 5, {"vit": 4}),
    _item("a_body_3", "Elemental Robe", ItemType.BODY, R, 10, {"vit": 6, "int": 3}, "+10% resistance"),
    _item("a_body_4", "Titan Plate", ItemType.BODY, E, 15, {"vit": 15}, "Blocks one attack"),
    _item("a_body_5", "Cloak of Reality", ItemType.BODY, L, 20, {"vit": 10, "dex": 10}),
    # Rings
    _item("acc_ring_1", "Copper Ring", ItemType.RING, C, 1, {"vit": 1}),
    _item("acc_ring_2", "Ring of Luck", ItemType.RING, U, 5, {}, "+5% drops"),
    _item("acc_ring_3", "Ring of Time", ItemType.RING, R, 10, {"dex": 3}),
    _item("acc_ring_4", "Hero's Seal", ItemType.RING, E, 15, {"str": 5}, "+10% quest XP"),
    _item("acc_ring_5", "Ring of Fate", ItemType.RING, L, 20, {"int": 5}),
    # Amulets
    _item("acc_amu_1", "Stone Amulet", ItemType.AMULET, C, 1, {"vit": 2}),
    _item("acc_amu_2", "Beast Amulet", ItemType.AMULET, U, 5, {"str": 3, "dex": 3}),
    _item("acc_amu_3", "Amulet of Knowledge", ItemType.AMULET, R, 10, {"int": 5}),
    _item("acc_amu_4", "Amulet of Balance", ItemType.AMULET, E, 15, {"str": 3, "dex": 3, "int": 3, "vit": 3}),
    _item("acc_amu_5", "Heart of the World", ItemType.AMULET, L, 20, {"vit": 20}),
    # Consumables
    _item("pot_hp_s", "Minor Healing Potion", ItemType.POTION, C, 1, effect="Restores HP", heal=20),
    _item("pot_sta", "Stamina Potion", ItemType.POTION, U, 5, effect="+10 stamina"),
    _item("pot_mana", "Elixir of Clarity", ItemType.POTION, R, 10, effect="Restores mana"),
    _item("pot_hero", "Hero's Draught", ItemType.POTION, E, 15, effect="+10 all stats"),
    _item("pot_full", "Phoenix Tear", ItemType.POTION, L, 20, effect="Full heal", heal=9999),
    # Scrolls
    _item("scr_esc", "Escape Scroll", ItemType.SCROLL, C, 1, effect="Escape without penalty"),
)

ITEMS_DATABASE: tuple[Item, ...] = _ITEMS
"""Every catalog item template."""

ITEMS_BY_ID: Mapping[str, Item] = MappingProxyType({item.id: item for item in _ITEMS})

HEALTH_POTION: Item = ITEMS_BY_ID["pot_hp_s"]


# =============================================================================
# Materials
# =============================================================================


def _material(item_id: str, name: str, rarity: ItemRarity, price: int, level: int, kind: MaterialType) -> Item:
    return Item(
        id=item_id,
        base_id=item_id,
        name=name,
        type=ItemType.MATERIAL,
        rarity=rarity,
        price=price,
        level_req=level,
        material_type=kind,
        stackable=True,
    )


MATERIALS: Mapping[str, Item] = MappingProxyType(
    {
        "SKIN": _material("m_skin", "Hide", C, 5, 1, MaterialType.BIO),
        "POISON": _material("m_poison", "Venom", U, 15, 3, MaterialType.BIO),
        "FEATHER": _material("m_feather", "Feather", C, 5, 1, MaterialType.BIO),
        "ROOT": _material("m_root", "Root", C, 5, 1, MaterialType.BIO),
        "ORE": _material("m_ore", "Ore", C, 8, 2, MaterialType.MINERAL),
        "CRYSTAL": _material("m_crystal", "Crystal", R, 50, 5, MaterialType.MINERAL),
        "SHARD": _material("m_shard", "Shard", U, 20, 3, MaterialType.MINERAL),
        "ESSENCE": _material("m_essence", "Essence", R, 60, 8, MaterialType.MAGIC),
        "DUST": _material("m_dust", "Astral Dust", E, 150, 12, MaterialType.MAGIC),
        "SOUL": _material("m_soul", "Soul", E, 200, 15, MaterialType.MAGIC),
        "CORE_FRAGMENT": _material("m_core", "Core Fragment", L, 1000, 20, MaterialType.ARTIFACT),
    }
)


# =============================================================================
# Recipes
# =============================================================================


def _recipe(recipe_id: str, result: Item, materials: list[tuple[str, int]], gold_cost: int) -> Recipe:
    return Recipe(
        id=recipe_id,
        result_item=result,
        materials=[
            MaterialRequirement(name=MATERIALS[key].name, count=count) for key, count in materials
        ],
        gold_cost=gold_cost,
    )


RECIPES: tuple[Recipe, ...] = (
    _recipe(
        "r_regen_pot",
        _item("regen_pot", "Regeneration Potion", ItemType.POTION, U, 3, effect="+5 HP per turn", heal=30),
        [("SKIN", 3), ("ROOT", 1)],
        50,
    ),
    _recipe(
        "r_dagger_shadow",
        _item("dag_shadow", "Shadow Dagger", ItemType.WEAPON, R, 5, {"dex": 8}, "10% poison", damage=16),
        [("POISON", 2), ("ORE", 4)],
        200,
    ),
    _recipe(
        "r_amulet_ele",
        _item("amu_ele", "Elemental Amulet", ItemType.AMULET, R, 8, effect="+10% resistance"),
        [("CRYSTAL", 1), ("ESSENCE", 1)],
        300,
    ),
    _recipe(
        "r_armor_legion",
        _item("arm_legion", "Legion Armor", ItemType.BODY, E, 15, {"vit": 15}, "Blocks one attack"),
        [("ORE", 5), ("SOUL", 2)],
        1000,
    ),
    _recipe(
        "r_tear_phoenix",
        _item("tear_phoenix", "Phoenix Tear", ItemType.POTION, L, 20, effect="Full heal", heal=9999),
        [("ESSENCE", 3), ("CORE_FRAGMENT", 1)],
        2000,
    ),
)

RECIPES_BY_ID: Mapping[str, Recipe] = MappingProxyType({recipe.id: recipe for recipe in RECIPES})


# =============================================================================
# Look-ups
# =============================================================================


def get_item(item_id: str) -> Item | None:
    """Catalog template by id, including materials and recipe results."""
    if item_id in ITEMS_BY_ID:
        return ITEMS_BY_ID[item_id]
    for material in MATERIALS.values():
        if material.id == item_id:
            return material
    for recipe in RECIPES:
        if recipe.result_item.id == item_id:
            return recipe.result_item
    return None


def items_of_rarity(rarity: ItemRarity) -> list[Item]:
    """Catalog items of one rarity."""
    return [item for item in ITEMS_DATABASE if item.rarity == rarity]


def recipes_unlocked_at(level: int) -> list[str]:
    """Ids of recipes whose result can be used at ``level``."""
    return [recipe.id for recipe in RECIPES if recipe.result_item.level_req <= level]


__all__ = [
    "RARITY_PRICE_MULTIPLIER",
    "ITEMS_DATABASE",
    "ITEMS_BY_ID",
    "HEALTH_POTION",
    "MATERIALS",
    "RECIPES",
    "RECIPES_BY_ID",
    "catalog_price",
    "get_item",
    "items_of_rarity",
    "recipes_unlocked_at",
]
